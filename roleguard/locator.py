"""
Provider alias discovery across the module tree.
"""

import logging
from typing import Dict

from .constants import DEFAULT_ALIAS
from .terraform.source import ConfigurationSource
from .types import ModulePath, ProviderAlias, ProviderAliasData

logger = logging.getLogger(__name__)


def build_alias_address(module_path: ModulePath, provider_type: str, alias: str) -> str:
    """
    Build the canonical address of a provider alias.

    Args:
        module_path: Module the provider is declared in
        provider_type: Provider type (e.g. "aws")
        alias: Raw alias name; "" is normalized to "default"

    Returns:
        Address such as "aws.default" or "module.network.module.vpc.aws.prod"
    """
    return ProviderAlias(
        module_path=tuple(module_path),
        provider_type=provider_type,
        alias=alias or DEFAULT_ALIAS,
    ).address


def locate_provider_aliases(source: ConfigurationSource, provider_type: str) -> Dict[str, ProviderAliasData]:
    """
    Find every alias of a provider type in every module.

    Modules that declare no provider of the requested type contribute nothing.
    Errors raised by the source propagate unchanged.

    Args:
        source: Configuration source to walk
        provider_type: Provider type to collect (e.g. "aws")

    Returns:
        Mapping of canonical alias addresses to their raw data

    Raises:
        ValueError: If two aliases normalize to the same address
    """
    aliases: Dict[str, ProviderAliasData] = {}

    for module_path in source.module_paths():
        for alias, data in (source.provider_aliases(module_path, provider_type) or {}).items():
            address = build_alias_address(module_path, provider_type, alias)
            if address in aliases:
                raise ValueError(f"Duplicate provider alias address: {address}")
            aliases[address] = data

    logger.info(f"Located {len(aliases)} '{provider_type}' provider aliases")
    return aliases
