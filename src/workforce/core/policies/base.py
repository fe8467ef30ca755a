"""Rule-table evaluation shared by every resource policy.

Each resource family maps its operations to an ordered tuple of rules.
Evaluation walks the rules and the first one whose predicate matches
decides; when nothing matches the decision is a denial. The precedence
``global admin > self > same-tenant admin > deny`` is therefore plain data
that can be inspected and tested on its own.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum

import structlog

from workforce.core.auth.principal import Principal
from workforce.core.errors import ForbiddenError, ResourceForbiddenError


logger = structlog.get_logger()


class Operation(StrEnum):
    """Operations a policy can be asked about."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    REPORT = "report"
    PROFILE = "profile"


class Outcome(StrEnum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class AccessTarget:
    """What an operation acts on.

    Attributes:
        owner_id: The user owning the resource, if it has one
        company_id: The tenant the resource belongs to; None when the owner
            is unknown or has no company
        resource_id: The id the caller referenced, if any
        by_reference: True when the target was looked up from ``resource_id``
    """

    owner_id: int | None = None
    company_id: int | None = None
    resource_id: int | None = None
    by_reference: bool = False


@dataclass(frozen=True)
class AccessDecision:
    """The output of a policy evaluation. Never persisted."""

    outcome: Outcome
    rule: str
    reason: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome == Outcome.ALLOW


Predicate = Callable[[Principal, AccessTarget], bool]


@dataclass(frozen=True)
class Rule:
    """One ``(predicate, outcome)`` row of a policy table."""

    name: str
    predicate: Predicate
    outcome: Outcome = Outcome.ALLOW


def _is_global_admin(principal: Principal, target: AccessTarget) -> bool:
    return principal.is_global_admin


def _is_self(principal: Principal, target: AccessTarget) -> bool:
    return (
        principal.acts_as_self
        and target.owner_id is not None
        and target.owner_id == principal.self_id
    )


def _is_owner(principal: Principal, target: AccessTarget) -> bool:
    return target.owner_id is not None and target.owner_id == principal.self_id


def _is_tenant_admin(principal: Principal, target: AccessTarget) -> bool:
    return (
        principal.administers_tenant
        and target.company_id is not None
        and target.company_id == principal.tenant_id
    )


GLOBAL_ADMIN = Rule("global_admin", _is_global_admin)
SELF = Rule("self", _is_self)
TENANT_ADMIN = Rule("tenant_admin", _is_tenant_admin)
# Any role, on its own account only
OWNER = Rule("owner", _is_owner)

RuleTable = Mapping[Operation, tuple[Rule, ...]]


def evaluate(
    rules: tuple[Rule, ...],
    principal: Principal,
    target: AccessTarget,
) -> AccessDecision:
    """Return the decision of the first matching rule, or a default denial."""
    for rule in rules:
        if rule.predicate(principal, target):
            return AccessDecision(outcome=rule.outcome, rule=rule.name)
    return AccessDecision(outcome=Outcome.DENY, rule="default")


class ResourcePolicy:
    """Base class for per-family access policies.

    Subclasses set ``resource`` and ``rules``; ``decide`` is pure, while
    ``authorize`` raises on denial.
    """

    resource: str = "resource"
    rules: RuleTable = {}

    def decide(
        self,
        principal: Principal,
        operation: Operation,
        target: AccessTarget,
    ) -> AccessDecision:
        """Evaluate the rule table for an operation without raising."""
        decision = evaluate(self.rules.get(operation, ()), principal, target)
        if decision.allowed:
            return decision
        return AccessDecision(
            outcome=Outcome.DENY,
            rule=decision.rule,
            reason=f"{self.resource}:{operation} denied",
        )

    def authorize(
        self,
        principal: Principal,
        operation: Operation,
        target: AccessTarget,
    ) -> AccessDecision:
        """Evaluate and raise on denial.

        Raises:
            ResourceForbiddenError: Denied on a target referenced by id
            ForbiddenError: Denied on an explicit owner or company target
        """
        decision = self.decide(principal, operation, target)
        if decision.allowed:
            return decision

        logger.warning(
            "access_denied",
            principal_id=principal.id,
            role=str(principal.role),
            resource=self.resource,
            action=str(operation),
            resource_id=target.resource_id,
            reason=decision.reason,
        )
        if target.by_reference:
            raise ResourceForbiddenError(
                reason=decision.reason,
                details={"resource": self.resource},
            )
        raise ForbiddenError(reason=decision.reason)
