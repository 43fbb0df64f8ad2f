"""
Allow-list validation of resolved provider roles.
"""

import logging
from typing import Collection, List, Mapping

from .types import RoleViolation, ValidationResult

logger = logging.getLogger(__name__)


def is_role_allowed(role_arn: str, allow_list: Collection[str]) -> bool:
    """
    Decide whether a resolved role is acceptable.

    An empty role means the alias assumes nothing and is always allowed.
    """
    return not role_arn or role_arn in allow_list


def validate_assumed_roles(resolved_roles: Mapping[str, str], allow_list: Collection[str]) -> ValidationResult:
    """
    Check every resolved role against the allow-list.

    Args:
        resolved_roles: Mapping of alias addresses to role ARNs ("" for none)
        allow_list: Permitted role ARNs (exact match)

    Returns:
        ValidationResult with violations ordered by alias address
    """
    allowed = frozenset(allow_list)
    violations: List[RoleViolation] = [
        RoleViolation(address=address, role_arn=resolved_roles[address])
        for address in sorted(resolved_roles)
        if not is_role_allowed(resolved_roles[address], allowed)
    ]

    for violation in violations:
        logger.debug(f"Unapproved role {violation.role_arn} assumed by {violation.address}")

    return ValidationResult(passed=not violations, violations=violations)
