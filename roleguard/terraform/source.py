"""
Read-only access to an already-loaded Terraform configuration and plan.

Every concrete source answers three questions: which modules exist, which
provider aliases a module declares for a provider type, and what value an
input variable has at plan time. Nothing is mutated after construction.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..types import ModulePath, ProviderAliasData


class ConfigurationSourceError(Exception):
    """Raised when a configuration/plan snapshot cannot be loaded or queried."""


class ConfigurationSource(ABC):
    """Abstract configuration/plan store queried by the locator and resolver."""

    @abstractmethod
    def module_paths(self) -> List[ModulePath]:
        """
        List every module in the configuration tree.

        Returns:
            Module paths in a deterministic order, root module first
        """

    @abstractmethod
    def provider_aliases(self, module_path: ModulePath, provider_type: str) -> Dict[str, ProviderAliasData]:
        """
        Get the provider aliases a module declares for one provider type.

        Args:
            module_path: Module to inspect
            provider_type: Provider type name (e.g. "aws")

        Returns:
            Mapping of raw alias names ("" for the unaliased block) to their data,
            empty if the module declares no such provider
        """

    @abstractmethod
    def get_variable(self, name: str) -> Optional[Any]:
        """
        Look up an input variable's value at plan time.

        Args:
            name: Variable name (case-sensitive)

        Returns:
            The variable's value, or None if it is not defined
        """
