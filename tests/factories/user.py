"""User factories for tests."""

from functools import lru_cache
from uuid import uuid4

from polyfactory.factories.pydantic_factory import ModelFactory

from workforce.core.auth import Role, hash_password
from workforce.modules.users.schemas import UserCreate


TEST_PASSWORD = "Str0ng!Passw0rd"


@lru_cache
def hashed_test_password() -> str:
    """Bcrypt hash of ``TEST_PASSWORD``, computed once per run."""
    return hash_password(TEST_PASSWORD)


class UserCreateFactory(ModelFactory[UserCreate]):
    """Factory for creating UserCreate schemas."""

    __model__ = UserCreate

    role = Role.EMPLOYEE
    company_id = None
    sub_role_id = None
    timezone = "UTC"

    @classmethod
    def email(cls) -> str:
        """Generate a unique email."""
        return f"user-{uuid4().hex[:8]}@example.com"

    @classmethod
    def full_name(cls) -> str:
        """Generate a full name."""
        return f"Test User {uuid4().hex[:4]}"

    @classmethod
    def password(cls) -> str:
        return TEST_PASSWORD
