from typing import Dict
import argparse
import logging
import sys

from botocore.exceptions import ClientError

from .analysis import perform_analysis
from .config import RoleGuardConfig
from .constants import EXIT_ERROR, EXIT_PASSED, EXIT_VIOLATIONS
from .output import OutputHandler
from .terraform.source import ConfigurationSourceError
from .types import ValidationResult
from .usage import load_yaml_config, parse_cli_args, merge_configs

logger = logging.getLogger(__name__)


def setup_configuration(cli_args: argparse.Namespace, yaml_config: Dict) -> RoleGuardConfig:
    """
    Merge and validate configuration from YAML and CLI arguments.

    Args:
        cli_args: Parsed command line arguments
        yaml_config: Configuration loaded from YAML file

    Returns:
        Validated RoleGuardConfig object

    Raises:
        SystemExit: If configuration validation fails
    """
    try:
        final_config = merge_configs(yaml_config, cli_args)
    except (ValueError, TypeError) as e:
        OutputHandler.error("Configuration Error", e)
        sys.exit(EXIT_ERROR)

    OutputHandler.success("Final Config", final_config.model_dump())

    return final_config


def report_result(result: ValidationResult) -> int:
    """
    Print every violation and the verdict.

    Args:
        result: Validation outcome

    Returns:
        Process exit code for the verdict
    """
    if result.violations:
        OutputHandler.section_header("UNAPPROVED ASSUMED ROLES")
        for violation in result.violations:
            OutputHandler.violation(violation.message)

    OutputHandler.verdict(result.passed, len(result.violations))
    return EXIT_PASSED if result.passed else EXIT_VIOLATIONS


def main() -> None:
    """Main entry point for RoleGuard."""
    cli_args = parse_cli_args()
    yaml_config = load_yaml_config(cli_args.config) if cli_args.config else {}

    final_config = setup_configuration(cli_args, yaml_config)

    try:
        result = perform_analysis(final_config)
    except ValueError as e:
        OutputHandler.error("Configuration Error", e)
        logger.error(f"Invalid configuration: {e}", exc_info=True)
        sys.exit(EXIT_ERROR)
    except ConfigurationSourceError as e:
        OutputHandler.error("Terraform Input Error", e)
        logger.error(f"Could not load Terraform input: {e}", exc_info=True)
        sys.exit(EXIT_ERROR)
    except ClientError as e:
        error_code = e.response['Error']['Code']
        OutputHandler.error(f"AWS API Error ({error_code})", e)
        logger.error(f"AWS API error: {e}", exc_info=True)
        sys.exit(EXIT_ERROR)
    except OSError as e:
        OutputHandler.error("Results Write Error", e)
        logger.error(f"Could not write results: {e}", exc_info=True)
        sys.exit(EXIT_ERROR)

    sys.exit(report_result(result))


if __name__ == "__main__":
    main()
