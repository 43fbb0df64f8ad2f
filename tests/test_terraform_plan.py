"""Tests for roleguard.terraform.plan module."""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from roleguard.locator import locate_provider_aliases
from roleguard.resolver import resolve_assumed_roles
from roleguard.terraform.plan import PlanConfigurationSource, parse_module_address
from roleguard.terraform.source import ConfigurationSourceError
from roleguard.types import AssumeRoleConfig, AssumeRoleReference, ProviderAliasData


def _plan() -> Dict[str, Any]:
    return {
        "format_version": "1.2",
        "terraform_version": "1.5.7",
        "variables": {
            "deploy_role": {"value": "arn:aws:iam::111111111111:role/deploy"},
            "region": {"value": "us-east-1"},
        },
        "configuration": {
            "provider_config": {
                "aws": {
                    "name": "aws",
                    "full_name": "registry.terraform.io/hashicorp/aws",
                    "expressions": {
                        "region": {"references": ["var.region"]},
                        "assume_role": [
                            {"role_arn": {"references": ["var.deploy_role"]}}
                        ],
                    },
                },
                "aws.audit": {
                    "name": "aws",
                    "alias": "audit",
                    "expressions": {
                        "assume_role": [
                            {"role_arn": {"constant_value": "arn:aws:iam::222222222222:role/audit"}}
                        ]
                    },
                },
                "module.network.module.vpc:aws.prod": {
                    "name": "aws",
                    "alias": "prod",
                    "module_address": "module.network.module.vpc",
                    "expressions": {"region": {"constant_value": "eu-west-1"}},
                },
                "google": {"name": "google", "expressions": {}},
            },
            "root_module": {
                "module_calls": {
                    "network": {
                        "source": "./network",
                        "module": {
                            "module_calls": {
                                "vpc": {"source": "./vpc", "module": {}}
                            }
                        },
                    },
                    "dns": {"source": "./dns", "module": {}},
                }
            },
        },
    }


class TestParseModuleAddress:
    """Test parse_module_address function."""

    def test_root(self) -> None:
        assert parse_module_address("") == ()

    def test_nested(self) -> None:
        assert parse_module_address("module.network.module.vpc") == ("network", "vpc")

    def test_malformed_raises(self) -> None:
        with pytest.raises(ConfigurationSourceError, match="Malformed module address"):
            parse_module_address("network.vpc")

    def test_odd_length_raises(self) -> None:
        with pytest.raises(ConfigurationSourceError):
            parse_module_address("module.network.module")


class TestPlanConfigurationSource:
    """Test PlanConfigurationSource class."""

    def test_module_paths_root_first_then_sorted(self) -> None:
        source = PlanConfigurationSource(_plan())
        assert source.module_paths() == [(), ("dns",), ("network",), ("network", "vpc")]

    def test_reference_expression(self) -> None:
        source = PlanConfigurationSource(_plan())
        aliases = source.provider_aliases((), "aws")
        assert aliases[""] == ProviderAliasData(
            assume_role_config=AssumeRoleConfig(role_arn=None),
            assume_role_reference=AssumeRoleReference(role_arn=("var.deploy_role",)),
        )

    def test_constant_expression(self) -> None:
        source = PlanConfigurationSource(_plan())
        aliases = source.provider_aliases((), "aws")
        assert aliases["audit"].assume_role_config == AssumeRoleConfig(
            role_arn="arn:aws:iam::222222222222:role/audit"
        )
        assert aliases["audit"].assume_role_reference is None

    def test_provider_without_assume_role(self) -> None:
        source = PlanConfigurationSource(_plan())
        aliases = source.provider_aliases(("network", "vpc"), "aws")
        assert aliases == {"prod": ProviderAliasData()}

    def test_module_without_provider_is_empty(self) -> None:
        source = PlanConfigurationSource(_plan())
        assert source.provider_aliases(("dns",), "aws") == {}

    def test_variables(self) -> None:
        source = PlanConfigurationSource(_plan())
        assert source.get_variable("deploy_role") == "arn:aws:iam::111111111111:role/deploy"
        assert source.get_variable("undefined") is None

    def test_missing_configuration_raises(self) -> None:
        with pytest.raises(ConfigurationSourceError, match="no 'configuration' section"):
            PlanConfigurationSource({"format_version": "1.2"})

    def test_non_object_raises(self) -> None:
        with pytest.raises(ConfigurationSourceError):
            PlanConfigurationSource([])  # type: ignore[arg-type]

    @pytest.mark.parametrize("plan_data", [
        {"configuration": {}, "variables": {"x": "raw"}},
        {"configuration": {}, "variables": ["x"]},
        {"configuration": {"provider_config": {"aws": "aws"}}},
        {"configuration": {"provider_config": ["aws"]}},
        {"configuration": {"provider_config": {"aws": {"name": "aws", "module_address": 7}}}},
        {"configuration": {"provider_config": {"aws": {"name": "aws", "expressions": []}}}},
        {"configuration": {"provider_config": {"aws": {
            "name": "aws", "expressions": {"assume_role": ["arn:x"]},
        }}}},
        {"configuration": {"provider_config": {"aws": {
            "name": "aws", "expressions": {"assume_role": [{"role_arn": "arn:x"}]},
        }}}},
        {"configuration": {"provider_config": {"aws": {
            "name": "aws", "expressions": {"assume_role": [{"role_arn": {"references": "var.x"}}]},
        }}}},
        {"configuration": {"root_module": {"module_calls": {"network": "./network"}}}},
        {"configuration": {"root_module": []}},
    ])
    def test_nested_wrong_shapes_raise(self, plan_data: Dict[str, Any]) -> None:
        with pytest.raises(ConfigurationSourceError):
            PlanConfigurationSource(plan_data)

    def test_null_sections_are_empty(self) -> None:
        source = PlanConfigurationSource({
            "configuration": {"provider_config": None, "root_module": None},
            "variables": None,
        })
        assert source.module_paths() == [()]
        assert source.provider_aliases((), "aws") == {}

    def test_repeated_alias_raises(self) -> None:
        plan_data = {"configuration": {"provider_config": {
            "aws.prod": {"name": "aws", "alias": "prod"},
            "aws.prod.copy": {"name": "aws", "alias": "prod"},
        }}}
        with pytest.raises(ConfigurationSourceError, match="repeats alias 'prod'"):
            PlanConfigurationSource(plan_data)

    def test_end_to_end_resolution(self) -> None:
        """Test locating and resolving aliases straight from plan JSON."""
        source = PlanConfigurationSource(_plan())

        resolved = resolve_assumed_roles(locate_provider_aliases(source, "aws"), source)

        assert resolved == {
            "aws.default": "arn:aws:iam::111111111111:role/deploy",
            "aws.audit": "arn:aws:iam::222222222222:role/audit",
            "module.network.module.vpc.aws.prod": "",
        }


class TestFromFile:
    """Test PlanConfigurationSource.from_file."""

    def test_loads_file(self, tmp_path: Path) -> None:
        plan_file = tmp_path / "plan.json"
        plan_file.write_text(json.dumps(_plan()))

        source = PlanConfigurationSource.from_file(str(plan_file))

        assert ("network", "vpc") in source.module_paths()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationSourceError, match="Terraform plan not found"):
            PlanConfigurationSource.from_file(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path: Path) -> None:
        plan_file = tmp_path / "plan.json"
        plan_file.write_text("{not json")

        with pytest.raises(ConfigurationSourceError, match="Invalid JSON"):
            PlanConfigurationSource.from_file(str(plan_file))

    def test_directory_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationSourceError, match="Cannot read Terraform plan"):
            PlanConfigurationSource.from_file(str(tmp_path))

    def test_non_utf8_file(self, tmp_path: Path) -> None:
        plan_file = tmp_path / "plan.json"
        plan_file.write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(ConfigurationSourceError):
            PlanConfigurationSource.from_file(str(plan_file))
