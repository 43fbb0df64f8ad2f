import argparse
import yaml
from typing import Any, Dict
from .config import RoleGuardConfig


def load_yaml_config(path: str) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Dictionary containing the loaded configuration, or empty dict if file not found
    """
    try:
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"Config file '{path}' not found. Continuing without it.")
        return {}


def parse_cli_args() -> argparse.Namespace:
    """
    Parse command line arguments for the roleguard tool.

    Returns:
        Parsed command line arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="roleguard",
        description="RoleGuard - reject Terraform changes whose providers assume roles outside an allow-list"
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to config YAML (optional; CLI flags alone are enough)'
    )

    # Inputs (override YAML if provided)
    parser.add_argument(
        '--plan',
        dest='plan_path',
        type=str,
        help='Path or s3:// URI of terraform show -json output'
    )
    parser.add_argument(
        '--snapshot',
        dest='snapshot_path',
        type=str,
        help='Path to a configuration snapshot YAML, used instead of --plan'
    )
    parser.add_argument(
        '--plan-reader-role-arn',
        dest='plan_reader_role_arn',
        type=str,
        help='IAM role to assume before reading a plan from S3'
    )

    # Policy
    parser.add_argument(
        '--provider-type',
        dest='provider_type',
        type=str,
        help='Provider type whose aliases are checked (default aws)'
    )
    parser.add_argument(
        '--allowed-role-arn',
        dest='allowed_role_arns',
        action='append',
        type=str,
        help='Role ARN providers may assume; repeat for several (replaces the YAML list)'
    )

    # Results
    parser.add_argument(
        '--workspace-name',
        dest='workspace_name',
        type=str,
        help='Name used for the result file (default default)'
    )
    parser.add_argument(
        '--results-dir',
        dest='results_dir',
        type=str,
        help='Directory to write roleguard results (default roleguard_results)'
    )
    parser.add_argument(
        '--redact-account-ids',
        dest='redact_account_ids',
        action='store_true',
        default=argparse.SUPPRESS,
        help='Redact account IDs inside ARNs in result files'
    )

    return parser.parse_args()


def merge_configs(yaml_config: Dict[str, Any], cli_args: argparse.Namespace) -> RoleGuardConfig:
    """
    Merge YAML configuration with CLI arguments and validate the result.

    Args:
        yaml_config: Configuration loaded from YAML file
        cli_args: Parsed command line arguments

    Returns:
        Validated RoleGuardConfig object

    Raises:
        ValueError: If configuration validation fails
        TypeError: If configuration has type errors
    """
    # Start with YAML
    merged = yaml_config.copy()

    # Apply CLI overrides (only if CLI provided them)
    cli_dict = {
        k: v for k, v in vars(cli_args).items()
        if k in RoleGuardConfig.model_fields and v is not None
    }
    merged.update(cli_dict)

    # Validate and return final config (will raise if fields have wrong types)
    return RoleGuardConfig(**merged)
