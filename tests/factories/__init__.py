"""Test factories for generating test data."""

from tests.factories.company import CompanyCreateFactory
from tests.factories.user import (
    TEST_PASSWORD,
    UserCreateFactory,
    hashed_test_password,
)


__all__ = [
    "TEST_PASSWORD",
    "CompanyCreateFactory",
    "UserCreateFactory",
    "hashed_test_password",
]
