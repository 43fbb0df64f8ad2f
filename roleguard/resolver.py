"""
Resolution of the IAM role each provider alias assumes.

A role_arn can be written as a literal ARN, as a legacy "${var.NAME}"
interpolation, or recorded as a modern "var.NAME" reference. The literal
configuration is consulted first; a recognized reference then overwrites
whatever the literal produced.
"""

import logging
import re
from typing import Dict

from .constants import INTERPOLATION_MARKER, LEGACY_VARIABLE_PATTERN, MODERN_VARIABLE_PATTERN
from .enums import ReferenceKind
from .terraform.source import ConfigurationSource
from .types import ClassifiedReference, ProviderAliasData, ResolvedRoles

logger = logging.getLogger(__name__)

NO_ROLE = ""

_LEGACY_VARIABLE_RE = re.compile(LEGACY_VARIABLE_PATTERN)
_MODERN_VARIABLE_RE = re.compile(MODERN_VARIABLE_PATTERN)


def classify_reference(raw: str) -> ClassifiedReference:
    """
    Classify a role_arn string by its syntax.

    Args:
        raw: Literal role_arn value or first reference entry

    Returns:
        ClassifiedReference whose value is the variable name for variable
        references and the raw string otherwise
    """
    legacy_match = _LEGACY_VARIABLE_RE.fullmatch(raw)
    if legacy_match:
        return ClassifiedReference(ReferenceKind.LEGACY_VARIABLE, legacy_match.group(1))

    modern_match = _MODERN_VARIABLE_RE.fullmatch(raw)
    if modern_match:
        return ClassifiedReference(ReferenceKind.MODERN_VARIABLE, modern_match.group(1))

    if not raw or INTERPOLATION_MARKER in raw:
        return ClassifiedReference(ReferenceKind.UNRECOGNIZED, raw)

    return ClassifiedReference(ReferenceKind.LITERAL, raw)


def lookup_variable(source: ConfigurationSource, name: str) -> str:
    """
    Resolve a variable to a role ARN.

    Args:
        source: Configuration source holding variable values
        name: Variable name

    Returns:
        The variable's value as a string, or "" if it is not defined
    """
    value = source.get_variable(name)
    if value is None:
        logger.warning(f"Variable '{name}' referenced by assume_role is not defined; treating as no role")
        return NO_ROLE
    return value if isinstance(value, str) else str(value)


def resolve_assumed_role(data: ProviderAliasData, source: ConfigurationSource) -> str:
    """
    Determine the role ARN a provider alias will assume.

    Args:
        data: Raw assume_role data for the alias
        source: Configuration source used to dereference variables

    Returns:
        The role ARN, or "" if the alias assumes no role
    """
    role = NO_ROLE

    config = data.assume_role_config
    if config is not None and config.role_arn is not None:
        classified = classify_reference(config.role_arn)
        if classified.kind == ReferenceKind.LEGACY_VARIABLE:
            role = lookup_variable(source, classified.value)
        else:
            role = config.role_arn

    reference = data.assume_role_reference
    if reference is not None and reference.role_arn and reference.role_arn[0]:
        classified = classify_reference(reference.role_arn[0])
        if classified.kind in (ReferenceKind.LEGACY_VARIABLE, ReferenceKind.MODERN_VARIABLE):
            role = lookup_variable(source, classified.value)
        else:
            logger.debug(f"Unrecognized role_arn reference '{classified.value}' left unresolved")

    return role


def resolve_assumed_roles(aliases: Dict[str, ProviderAliasData], source: ConfigurationSource) -> ResolvedRoles:
    """Resolve every located alias independently."""
    return {address: resolve_assumed_role(data, source) for address, data in aliases.items()}
