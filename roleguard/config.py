from typing import List, Optional
from pydantic import BaseModel

from .constants import DEFAULT_PROVIDER_TYPE


# Centralized defaults
DEFAULT_RESULTS_DIR = "roleguard_results"
DEFAULT_WORKSPACE_NAME = "default"


class RoleGuardConfig(BaseModel):
    # Role ARNs providers are permitted to assume (exact match)
    allowed_role_arns: List[str] = []
    provider_type: str = DEFAULT_PROVIDER_TYPE
    # Local path or s3:// URI of `terraform show -json` output
    plan_path: Optional[str] = None
    # YAML/JSON snapshot in tfconfig shape, used instead of a plan
    snapshot_path: Optional[str] = None
    # Role assumed before reading a plan from S3
    plan_reader_role_arn: Optional[str] = None
    # Name used for the result file
    workspace_name: str = DEFAULT_WORKSPACE_NAME
    # Base directory where check result JSONs are written
    results_dir: str = DEFAULT_RESULTS_DIR
    # Replace account IDs inside ARNs in result files
    redact_account_ids: bool = False
