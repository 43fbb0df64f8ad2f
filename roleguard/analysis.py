import logging
from typing import Any, Dict, List, Optional

from .aws.s3 import download_plan_json, is_s3_uri
from .aws.sessions import get_plan_reader_session
from .config import RoleGuardConfig
from .constants import DENY_UNAPPROVED_ASSUMED_ROLES
from .enums import CheckCategory
from .locator import locate_provider_aliases
from .output import OutputHandler
from .resolver import resolve_assumed_roles
from .terraform.plan import PlanConfigurationSource
from .terraform.snapshot import load_snapshot
from .terraform.source import ConfigurationSource
from .types import ResolvedRoles, ValidationResult
from .validator import is_role_allowed, validate_assumed_roles
from .write_results import write_check_results

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def load_configuration_source(config: RoleGuardConfig) -> ConfigurationSource:
    """
    Load the configuration source named by the config.

    A snapshot takes precedence over a plan. Plans may be local files or
    s3:// URIs; the latter are read with the plan reader session.

    Args:
        config: RoleGuard configuration

    Returns:
        ConfigurationSource for a single evaluation pass

    Raises:
        ValueError: If neither snapshot_path nor plan_path is set
        ConfigurationSourceError: If the file cannot be loaded
        ClientError: If a remote plan cannot be read
    """
    if config.snapshot_path:
        return load_snapshot(config.snapshot_path)

    if not config.plan_path:
        raise ValueError("Either plan_path or snapshot_path must be set in config")

    if is_s3_uri(config.plan_path):
        session = get_plan_reader_session(config.plan_reader_role_arn)
        return PlanConfigurationSource(download_plan_json(session, config.plan_path))

    return PlanConfigurationSource.from_file(config.plan_path)


def categorize_roles(resolved_roles: ResolvedRoles, allow_list: List[str]) -> Dict[CheckCategory, List[Dict[str, Any]]]:
    """
    Sort resolved aliases into result-file categories.

    Aliases that assume no role are exemptions; allowed roles are compliant.

    Args:
        resolved_roles: Mapping of alias addresses to role ARNs
        allow_list: Permitted role ARNs

    Returns:
        Dictionary of category -> list of {"address", "role_arn"} entries, ordered by address
    """
    categories: Dict[CheckCategory, List[Dict[str, Any]]] = {category: [] for category in CheckCategory}
    allowed = frozenset(allow_list)

    for address in sorted(resolved_roles):
        role_arn = resolved_roles[address]
        if not role_arn:
            category = CheckCategory.EXEMPTION
        elif is_role_allowed(role_arn, allowed):
            category = CheckCategory.COMPLIANT
        else:
            category = CheckCategory.VIOLATION
        categories[category].append({"address": address, "role_arn": role_arn})

    return categories


def build_results_data(
    config: RoleGuardConfig,
    resolved_roles: ResolvedRoles,
    result: ValidationResult,
) -> Dict[str, Any]:
    """
    Build the result-file document for one evaluation.

    Args:
        config: RoleGuard configuration
        resolved_roles: Mapping of alias addresses to role ARNs
        result: Validation outcome

    Returns:
        Dictionary with summary, violations, exemptions and compliant entries
    """
    categories = categorize_roles(resolved_roles, config.allowed_role_arns)
    return {
        "summary": {
            "workspace_name": config.workspace_name,
            "check": DENY_UNAPPROVED_ASSUMED_ROLES,
            "provider_type": config.provider_type,
            "passed": result.passed,
            "total_aliases": len(resolved_roles),
            "violations": len(categories[CheckCategory.VIOLATION]),
            "exemptions": len(categories[CheckCategory.EXEMPTION]),
            "compliant": len(categories[CheckCategory.COMPLIANT]),
            "allowed_role_arns": list(config.allowed_role_arns),
        },
        "violations": [
            {"address": v.address, "role_arn": v.role_arn, "message": v.message}
            for v in result.violations
        ],
        "exemptions": categories[CheckCategory.EXEMPTION],
        "compliant": categories[CheckCategory.COMPLIANT],
    }


def perform_analysis(config: RoleGuardConfig, source: Optional[ConfigurationSource] = None) -> ValidationResult:
    """
    Run one evaluation pass: locate aliases, resolve their roles, validate them.

    Args:
        config: RoleGuard configuration
        source: Already-loaded configuration source (loaded from config if None)

    Returns:
        ValidationResult for the configured allow-list
    """
    logger.info("Starting assumed role analysis")
    if source is None:
        source = load_configuration_source(config)

    aliases = locate_provider_aliases(source, config.provider_type)
    resolved_roles = resolve_assumed_roles(aliases, source)
    result = validate_assumed_roles(resolved_roles, config.allowed_role_arns)

    results_data = build_results_data(config, resolved_roles, result)
    write_check_results(
        check_name=DENY_UNAPPROVED_ASSUMED_ROLES,
        workspace_name=config.workspace_name,
        results_data=results_data,
        results_base_dir=config.results_dir,
        redact_account_ids=config.redact_account_ids,
    )

    summary = results_data["summary"]
    OutputHandler.check_completed(
        DENY_UNAPPROVED_ASSUMED_ROLES,
        config.workspace_name,
        {
            "violations": summary["violations"],
            "exemptions": summary["exemptions"],
            "compliant": summary["compliant"],
        }
    )
    return result
