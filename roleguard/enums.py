"""
Enumerations for roleguard.

This module contains all enum types used throughout the application
to replace magic strings and improve type safety.
"""

from enum import Enum


class ReferenceKind(str, Enum):
    """Syntactic forms a role_arn value can take."""
    LITERAL = "literal"
    LEGACY_VARIABLE = "legacy_variable"
    MODERN_VARIABLE = "modern_variable"
    UNRECOGNIZED = "unrecognized"


class CheckCategory(str, Enum):
    """Categorization of check results."""
    VIOLATION = "violation"
    EXEMPTION = "exemption"
    COMPLIANT = "compliant"
