"""
Result Writing Module

Handles writing compliance check results to JSON files so CI systems can
archive or post-process each evaluation.
"""

import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union, cast

from .constants import AWS_ARN_ACCOUNT_ID_REDACTION_PATTERN

# Set up logging
logger = logging.getLogger(__name__)


@dataclass
class ResultFilePathResolver:
    """
    Resolves file paths for check results.

    Attributes:
        check_name: Name of the check (e.g., 'deny_unapproved_assumed_roles')
        results_base_dir: Base directory for results
        workspace_name: Workspace the plan belongs to
    """

    check_name: str
    results_base_dir: str
    workspace_name: str

    def get_check_directory(self) -> str:
        """
        Get directory for this check.

        Returns:
            Path to the check's results directory
        """
        return f"{self.results_base_dir}/{self.check_name}"

    def get_file_path(self) -> Path:
        """
        Get file path for results.

        Returns:
            Path object for the results file
        """
        return Path(self.get_check_directory()) / f"{self.workspace_name}.json"


def _redact_account_ids_from_arns(data: Union[Dict[str, Any], List[Any], str, Any]) -> Union[Dict[str, Any], List[Any], str, Any]:
    """
    Recursively redact account IDs from ARNs in data structures.

    Replaces 12-digit account IDs in ARNs with "REDACTED":
    - arn:aws:iam::111111111111:role/deploy -> arn:aws:iam::REDACTED:role/deploy

    Args:
        data: Data structure to process (dict, list, str, or primitive)

    Returns:
        Data structure with account IDs redacted from ARNs
    """
    if isinstance(data, dict):
        return {key: _redact_account_ids_from_arns(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_redact_account_ids_from_arns(item) for item in data]
    elif isinstance(data, str):
        return re.sub(AWS_ARN_ACCOUNT_ID_REDACTION_PATTERN, r'\1REDACTED\3', data)
    else:
        return data


def write_check_results(
    check_name: str,
    workspace_name: str,
    results_data: Dict[str, Any],
    results_base_dir: str,
    redact_account_ids: bool = False,
) -> Path:
    """
    Write check results to a JSON file.

    Args:
        check_name: Name of the check
        workspace_name: Workspace the evaluated plan belongs to
        results_data: Dictionary containing summary, violations, exemptions, compliant
        results_base_dir: Base directory for results
        redact_account_ids: If True, redact account IDs from ARNs before writing

    Returns:
        Path of the written file: {results_base_dir}/{check_name}/{workspace_name}.json
    """
    results_resolver = ResultFilePathResolver(
        check_name=check_name,
        results_base_dir=results_base_dir,
        workspace_name=workspace_name,
    )

    os.makedirs(results_resolver.get_check_directory(), exist_ok=True)
    output_file = results_resolver.get_file_path()

    data_to_write = results_data
    if redact_account_ids:
        data_to_write = cast(Dict[str, Any], _redact_account_ids_from_arns(results_data))

    with open(output_file, 'w') as f:
        json.dump(data_to_write, f, indent=2, default=str)
        f.write('\n')
    logger.info(f"Wrote results to {output_file}")
    return output_file
