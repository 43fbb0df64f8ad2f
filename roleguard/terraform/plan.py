"""
Configuration source backed by Terraform plan JSON.

Reads the document produced by:
    terraform plan -out=tfplan && terraform show -json tfplan

Relevant structure:
{
    "variables": {"role_arn": {"value": "arn:aws:iam::111111111111:role/deploy"}},
    "configuration": {
        "provider_config": {
            "aws": {"name": "aws", "expressions": {...}},
            "module.network:aws.prod": {
                "name": "aws",
                "alias": "prod",
                "module_address": "module.network",
                "expressions": {
                    "assume_role": [
                        {"role_arn": {"references": ["var.role_arn"]}}
                    ]
                }
            }
        },
        "root_module": {
            "module_calls": {
                "network": {"source": "./network", "module": {"module_calls": {...}}}
            }
        }
    }
}
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..constants import ASSUME_ROLE_BLOCK, ROLE_ARN_ATTRIBUTE
from ..types import AssumeRoleConfig, AssumeRoleReference, ModulePath, ProviderAliasData
from .source import ConfigurationSource, ConfigurationSourceError

logger = logging.getLogger(__name__)

# Provider configs are keyed by (module path, provider type)
ProviderIndex = Dict[Tuple[ModulePath, str], Dict[str, ProviderAliasData]]


def parse_module_address(module_address: str) -> ModulePath:
    """
    Convert a Terraform module address into a module path.

    Args:
        module_address: Address such as "module.network.module.vpc" ("" for root)

    Returns:
        Module path such as ("network", "vpc")

    Raises:
        ConfigurationSourceError: If the address is not a sequence of module.<name> pairs
    """
    if not module_address:
        return ()
    if not isinstance(module_address, str):
        raise ConfigurationSourceError(f"Malformed module address: {module_address!r}")

    parts = module_address.split(".")
    if len(parts) % 2 != 0 or any(keyword != "module" for keyword in parts[0::2]):
        raise ConfigurationSourceError(f"Malformed module address: {module_address}")
    return tuple(parts[1::2])


def _object(value: Any, what: str) -> Dict[str, Any]:
    """Return value as a JSON object, treating null as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationSourceError(f"Terraform plan {what} must be an object")
    return value


def _collect_module_paths(module: Dict[str, Any], path: ModulePath, paths: List[ModulePath]) -> None:
    """Recursively append the path of every module call below module."""
    module_calls = _object(module.get("module_calls"), "module_calls")
    for name, call in module_calls.items():
        child_path = path + (name,)
        paths.append(child_path)
        call = _object(call, f"module call '{name}'")
        _collect_module_paths(_object(call.get("module"), f"module '{name}'"), child_path, paths)


def _first_assume_role_block(expressions: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the first assume_role block of a provider's expressions, if any."""
    blocks = expressions.get(ASSUME_ROLE_BLOCK)
    if isinstance(blocks, dict):
        blocks = [blocks]
    if not blocks:
        return None
    if not isinstance(blocks, list):
        raise ConfigurationSourceError("Terraform plan assume_role expression must be a list of objects")
    return _object(blocks[0], "assume_role block")


def _parse_alias_data(provider_config: Dict[str, Any]) -> ProviderAliasData:
    """
    Split a provider's assume_role expression into literal and reference parts.

    Args:
        provider_config: One entry of configuration.provider_config

    Returns:
        ProviderAliasData with whichever parts are present
    """
    block = _first_assume_role_block(_object(provider_config.get("expressions"), "provider expressions"))
    if block is None:
        return ProviderAliasData()

    role_arn_expression = _object(block.get(ROLE_ARN_ATTRIBUTE), "role_arn expression")

    config = AssumeRoleConfig()
    constant_value = role_arn_expression.get("constant_value")
    if isinstance(constant_value, str):
        config = AssumeRoleConfig(role_arn=constant_value)

    reference = None
    references = role_arn_expression.get("references")
    if references:
        if not isinstance(references, list):
            raise ConfigurationSourceError("Terraform plan role_arn references must be a list")
        reference = AssumeRoleReference(role_arn=tuple(str(ref) for ref in references))

    return ProviderAliasData(assume_role_config=config, assume_role_reference=reference)


class PlanConfigurationSource(ConfigurationSource):
    """
    ConfigurationSource built from `terraform show -json` output.
    """

    def __init__(self, plan_data: Dict[str, Any]) -> None:
        """
        Index the plan's configuration.

        Args:
            plan_data: Parsed plan JSON

        Raises:
            ConfigurationSourceError: If the plan has no usable configuration section
        """
        if not isinstance(plan_data, dict):
            raise ConfigurationSourceError("Terraform plan JSON must be an object")

        configuration = plan_data.get("configuration")
        if not isinstance(configuration, dict):
            raise ConfigurationSourceError(
                "Terraform plan JSON has no 'configuration' section; "
                "was it produced by 'terraform show -json'?"
            )

        self._module_paths = self._build_module_paths(configuration)
        self._providers = self._build_provider_index(configuration)
        self._variables: Dict[str, Any] = {
            name: _object(entry, f"variable '{name}'").get("value")
            for name, entry in _object(plan_data.get("variables"), "'variables' section").items()
        }
        logger.info(
            f"Loaded Terraform plan with {len(self._module_paths)} modules "
            f"and {len(self._variables)} variables"
        )

    @classmethod
    def from_file(cls, plan_path: str) -> "PlanConfigurationSource":
        """
        Load a Terraform plan JSON file.

        Args:
            plan_path: Path to the plan JSON

        Returns:
            PlanConfigurationSource for the file

        Raises:
            ConfigurationSourceError: If the file is missing, unreadable or not valid JSON
        """
        path = Path(plan_path)
        if not path.exists():
            raise ConfigurationSourceError(f"Terraform plan not found: {plan_path}")

        try:
            with open(path, 'r') as f:
                plan_data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationSourceError(f"Cannot read Terraform plan {plan_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationSourceError(f"Invalid JSON in Terraform plan {plan_path}: {e}") from e

        return cls(plan_data)

    @staticmethod
    def _build_module_paths(configuration: Dict[str, Any]) -> List[ModulePath]:
        paths: List[ModulePath] = []
        _collect_module_paths(_object(configuration.get("root_module"), "root_module"), (), paths)
        return [()] + sorted(paths)

    @staticmethod
    def _build_provider_index(configuration: Dict[str, Any]) -> ProviderIndex:
        index: ProviderIndex = {}
        for key, provider_config in _object(configuration.get("provider_config"), "provider_config").items():
            provider_config = _object(provider_config, f"provider config '{key}'")
            provider_type = provider_config.get("name")
            if not provider_type:
                logger.warning(f"Skipping provider config '{key}' without a name")
                continue
            module_path = parse_module_address(provider_config.get("module_address") or "")
            alias = provider_config.get("alias") or ""
            aliases = index.setdefault((module_path, provider_type), {})
            if alias in aliases:
                raise ConfigurationSourceError(
                    f"Provider config '{key}' repeats alias '{alias}' of '{provider_type}' in module {list(module_path)}"
                )
            aliases[alias] = _parse_alias_data(provider_config)
        return index

    def module_paths(self) -> List[ModulePath]:
        return list(self._module_paths)

    def provider_aliases(self, module_path: ModulePath, provider_type: str) -> Dict[str, ProviderAliasData]:
        return dict(self._providers.get((tuple(module_path), provider_type), {}))

    def get_variable(self, name: str) -> Optional[Any]:
        return self._variables.get(name)
