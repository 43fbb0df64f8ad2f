"""
Shared data types and models for roleguard.

This module contains the data classes used across the application
to avoid circular import issues and provide a single source of truth
for data structures.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .constants import VIOLATION_MESSAGE_TEMPLATE
from .enums import ReferenceKind


ModulePath = Tuple[str, ...]
"""Position of a module in the configuration tree; () is the root module."""

ResolvedRoles = Dict[str, str]
"""Mapping of provider alias addresses to resolved role ARNs ("" means no role)."""


@dataclass(frozen=True)
class AssumeRoleConfig:
    """Literal value of the first assume_role block in a provider configuration."""
    role_arn: Optional[str] = None


@dataclass(frozen=True)
class AssumeRoleReference:
    """References recorded for the first assume_role block's role_arn."""
    role_arn: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ProviderAliasData:
    """
    Raw assume_role data for one provider alias.

    Either side may be absent: a provider without an assume_role block has
    neither, one configured from a variable usually only has a reference.
    """
    assume_role_config: Optional[AssumeRoleConfig] = None
    assume_role_reference: Optional[AssumeRoleReference] = None


@dataclass(frozen=True)
class ProviderAlias:
    """Identity of a provider alias within the module tree."""
    module_path: ModulePath
    provider_type: str
    alias: str

    @property
    def address(self) -> str:
        """Canonical address, e.g. module.network.module.vpc.aws.prod"""
        prefix = "".join(f"module.{segment}." for segment in self.module_path)
        return f"{prefix}{self.provider_type}.{self.alias}"


@dataclass(frozen=True)
class ClassifiedReference:
    """A role_arn string sorted into one of the known reference syntaxes."""
    kind: ReferenceKind
    value: str


@dataclass(frozen=True)
class RoleViolation:
    """A provider alias that assumes a role outside the allow-list."""
    address: str
    role_arn: str

    @property
    def message(self) -> str:
        return VIOLATION_MESSAGE_TEMPLATE.format(address=self.address, role_arn=self.role_arn)


@dataclass
class ValidationResult:
    """
    Outcome of checking resolved roles against the allow-list.

    passed is True iff violations is empty.
    """
    passed: bool
    violations: List[RoleViolation] = field(default_factory=list)
