"""
In-memory configuration source and the snapshot file format that feeds it.

A snapshot mirrors the tfconfig view of a configuration and is convenient for
policy fixtures and offline checks:

    modules:
      - path: []
        providers:
          aws:
            alias:
              "":
                config:
                  assume_role:
                    - role_arn: "${var.deploy_role}"
      - path: [network, vpc]
        providers:
          aws:
            alias:
              prod:
                references:
                  assume_role:
                    - role_arn: ["var.prod_role"]
    variables:
      deploy_role: arn:aws:iam::111111111111:role/deploy
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..constants import ASSUME_ROLE_BLOCK, ROLE_ARN_ATTRIBUTE
from ..types import AssumeRoleConfig, AssumeRoleReference, ModulePath, ProviderAliasData
from .source import ConfigurationSource, ConfigurationSourceError

logger = logging.getLogger(__name__)

ProviderTree = Dict[ModulePath, Dict[str, Dict[str, ProviderAliasData]]]


class StaticConfigurationSource(ConfigurationSource):
    """ConfigurationSource over data that is already in memory."""

    def __init__(
        self,
        providers: Optional[ProviderTree] = None,
        variables: Optional[Mapping[str, Any]] = None,
        module_paths: Optional[List[ModulePath]] = None,
    ) -> None:
        """
        Args:
            providers: module path -> provider type -> raw alias name -> data
            variables: Variable values at plan time
            module_paths: Modules in the tree (defaults to those in providers, plus root)
        """
        self._providers: ProviderTree = dict(providers or {})
        self._variables: Dict[str, Any] = dict(variables or {})
        paths = set(module_paths or []) | set(self._providers) | {()}
        self._module_paths = sorted(tuple(path) for path in paths)

    def module_paths(self) -> List[ModulePath]:
        return list(self._module_paths)

    def provider_aliases(self, module_path: ModulePath, provider_type: str) -> Dict[str, ProviderAliasData]:
        return dict(self._providers.get(tuple(module_path), {}).get(provider_type, {}))

    def get_variable(self, name: str) -> Optional[Any]:
        return self._variables.get(name)


def _mapping(value: Any, what: str) -> Mapping[str, Any]:
    """Return value as a mapping, treating None as empty."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationSourceError(f"Snapshot {what} must be a mapping")
    return value


def _first_block(section: Mapping[str, Any], what: str) -> Optional[Mapping[str, Any]]:
    blocks = section.get(ASSUME_ROLE_BLOCK)
    if blocks is None:
        return None
    if isinstance(blocks, Mapping):
        blocks = [blocks]
    if not isinstance(blocks, list):
        raise ConfigurationSourceError(f"Snapshot {what} assume_role must be a list of mappings")
    if not blocks:
        return None
    return _mapping(blocks[0], f"{what} assume_role block")


def parse_alias_entry(entry: Mapping[str, Any]) -> ProviderAliasData:
    """
    Build ProviderAliasData from a snapshot alias entry.

    Args:
        entry: Mapping with optional "config" and "references" sections

    Returns:
        ProviderAliasData with the first assume_role block of each section

    Raises:
        ConfigurationSourceError: If a section has the wrong shape
    """
    entry = _mapping(entry, "alias entry")

    config = None
    config_block = _first_block(_mapping(entry.get("config"), "'config' section"), "'config'")
    if config_block is not None:
        role_arn = config_block.get(ROLE_ARN_ATTRIBUTE)
        config = AssumeRoleConfig(role_arn=role_arn if isinstance(role_arn, str) else None)

    reference = None
    reference_block = _first_block(_mapping(entry.get("references"), "'references' section"), "'references'")
    if reference_block is not None:
        refs = reference_block.get(ROLE_ARN_ATTRIBUTE) or []
        if isinstance(refs, str):
            refs = [refs]
        if not isinstance(refs, list):
            raise ConfigurationSourceError("Snapshot reference role_arn must be a string or a list")
        reference = AssumeRoleReference(role_arn=tuple(str(ref) for ref in refs))

    return ProviderAliasData(assume_role_config=config, assume_role_reference=reference)


def build_snapshot_source(snapshot: Mapping[str, Any]) -> StaticConfigurationSource:
    """
    Build a StaticConfigurationSource from parsed snapshot data.

    Module entries that share a path are merged; an alias declared twice for
    the same module and provider type is an error.

    Args:
        snapshot: Parsed snapshot document

    Returns:
        StaticConfigurationSource for the snapshot

    Raises:
        ConfigurationSourceError: If the document does not have the snapshot shape
    """
    if not isinstance(snapshot, Mapping):
        raise ConfigurationSourceError("Snapshot must be a mapping")

    modules = snapshot.get("modules")
    if modules is None:
        modules = []
    if not isinstance(modules, list):
        raise ConfigurationSourceError("Snapshot 'modules' must be a list")

    providers: ProviderTree = {}
    module_paths: List[ModulePath] = []
    for module in modules:
        if not isinstance(module, Mapping):
            raise ConfigurationSourceError("Snapshot module entries must be mappings")
        raw_path = module.get("path")
        if raw_path is None:
            raw_path = []
        if not isinstance(raw_path, list):
            raise ConfigurationSourceError("Snapshot module 'path' must be a list")
        path = tuple(str(segment) for segment in raw_path)
        module_paths.append(path)

        for provider_type, provider in _mapping(module.get("providers"), "'providers'").items():
            aliases = _mapping(_mapping(provider, f"provider '{provider_type}'").get("alias"), "'alias' section")
            declared = providers.setdefault(path, {}).setdefault(str(provider_type), {})
            for alias, entry in aliases.items():
                # YAML may load an empty key as None
                name = "" if alias is None else str(alias)
                if name in declared:
                    raise ConfigurationSourceError(
                        f"Provider alias '{name}' of type '{provider_type}' declared twice in module {list(path)}"
                    )
                declared[name] = parse_alias_entry(entry)

    variables = snapshot.get("variables")
    if variables is None:
        variables = {}
    if not isinstance(variables, Mapping):
        raise ConfigurationSourceError("Snapshot 'variables' must be a mapping")

    return StaticConfigurationSource(providers=providers, variables=variables, module_paths=module_paths)


def load_snapshot(path: str) -> StaticConfigurationSource:
    """
    Load a snapshot from a YAML (or JSON) file.

    Args:
        path: Path to the snapshot file

    Returns:
        StaticConfigurationSource for the file

    Raises:
        ConfigurationSourceError: If the file is missing, unreadable or cannot be parsed
    """
    try:
        with open(path, 'r') as f:
            snapshot = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationSourceError(f"Snapshot not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationSourceError(f"Cannot read snapshot {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationSourceError(f"Invalid snapshot {path}: {e}") from e

    logger.info(f"Loaded configuration snapshot from {path}")
    return build_snapshot_source({} if snapshot is None else snapshot)
