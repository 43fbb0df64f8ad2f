"""
Constants module for patterns, names and exit codes.

This module contains constants used throughout the roleguard codebase.
"""

# Terraform variable reference patterns
# Legacy (0.11-style) interpolation: "${var.NAME}"
LEGACY_VARIABLE_PATTERN = r'^\$\{var\.([A-Za-z_][A-Za-z0-9_-]*)\}$'
# Modern (0.12+) bare reference: "var.NAME"
MODERN_VARIABLE_PATTERN = r'^var\.([A-Za-z_][A-Za-z0-9_-]*)$'
# Any interpolation sequence that is not a plain variable reference
INTERPOLATION_MARKER = "${"

# AWS ARN Regex Pattern
# Format: arn:aws:service:region:account-id:resource
AWS_ARN_ACCOUNT_ID_REDACTION_PATTERN = r'(arn:aws[a-zA-Z-]*:[^:]+:[^:]*:)(\d{12})(:)'

# Provider block keys
ASSUME_ROLE_BLOCK = "assume_role"
ROLE_ARN_ATTRIBUTE = "role_arn"
DEFAULT_ALIAS = "default"
DEFAULT_PROVIDER_TYPE = "aws"

# Check name used for result files
DENY_UNAPPROVED_ASSUMED_ROLES = "deny_unapproved_assumed_roles"

# Message printed once per non-compliant alias
VIOLATION_MESSAGE_TEMPLATE = (
    "AWS provider with alias {address} has assumed role {role_arn} that is not allowed."
)

# Remote plan locations
S3_URI_SCHEME = "s3"
PLAN_READER_SESSION_NAME = "RoleGuardPlanReaderSession"

# Process exit codes
EXIT_PASSED = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2
