"""Per-resource access policies (super admin > self > company admin > deny)."""

from workforce.core.policies.attendance import AttendancePolicy
from workforce.core.policies.base import (
    AccessDecision,
    AccessTarget,
    Operation,
    Outcome,
    ResourcePolicy,
    Rule,
    evaluate,
)
from workforce.core.policies.companies import CompanyPolicy
from workforce.core.policies.employees import EmployeePolicy
from workforce.core.policies.sub_roles import SubRolePolicy
from workforce.core.policies.tasks import TaskPolicy


__all__ = [
    "AccessDecision",
    "AccessTarget",
    "AttendancePolicy",
    "CompanyPolicy",
    "EmployeePolicy",
    "Operation",
    "Outcome",
    "ResourcePolicy",
    "Rule",
    "SubRolePolicy",
    "TaskPolicy",
    "evaluate",
]
