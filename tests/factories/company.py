"""Factory for Company test data."""

from polyfactory.factories.pydantic_factory import ModelFactory

from workforce.modules.companies.schemas import CompanyCreate


class CompanyCreateFactory(ModelFactory[CompanyCreate]):
    """Factory for generating company payloads."""

    __model__ = CompanyCreate

    industry = "Consulting"
    logo_url = None
    parent_company_id = None

    @classmethod
    def name(cls) -> str:
        """Generate a company name."""
        return f"{cls.__faker__.company()} {cls.__faker__.company_suffix()}"
