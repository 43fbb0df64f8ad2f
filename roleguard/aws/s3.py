"""
Retrieval of Terraform plan JSON stored in S3.

CI pipelines commonly upload `terraform show -json` output to a bucket; this
module fetches it so it can be evaluated like a local file.
"""

import json
import logging
from typing import Any, Dict, Tuple
from urllib.parse import urlparse

from boto3.session import Session
from mypy_boto3_s3.client import S3Client

from ..constants import S3_URI_SCHEME

logger = logging.getLogger(__name__)


def is_s3_uri(location: str) -> bool:
    """Return True if location looks like s3://bucket/key."""
    return urlparse(location).scheme == S3_URI_SCHEME


def parse_s3_uri(uri: str) -> Tuple[str, str]:
    """
    Split an S3 URI into bucket and key.

    Args:
        uri: URI of the form s3://bucket/path/to/plan.json

    Returns:
        Tuple of (bucket, key)

    Raises:
        ValueError: If the URI is not an S3 URI or lacks a bucket or key
    """
    parsed = urlparse(uri)
    bucket = parsed.netloc
    key = parsed.path.lstrip("/")
    if parsed.scheme != S3_URI_SCHEME or not bucket or not key:
        raise ValueError(f"Invalid S3 URI: {uri}. Expected s3://bucket/key")
    return bucket, key


def download_plan_json(session: Session, uri: str) -> Dict[str, Any]:
    """
    Download and parse a plan JSON object from S3.

    Args:
        session: boto3 Session with s3:GetObject on the object
        uri: S3 URI of the plan

    Returns:
        Parsed plan JSON

    Raises:
        ValueError: If the URI is malformed or the object is not valid JSON
        ClientError: If the object cannot be read
    """
    bucket, key = parse_s3_uri(uri)
    s3_client: S3Client = session.client("s3")

    response = s3_client.get_object(Bucket=bucket, Key=key)
    body = response["Body"].read()
    logger.info(f"Downloaded Terraform plan from {uri} ({len(body)} bytes)")

    try:
        plan_data: Dict[str, Any] = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in Terraform plan {uri}: {e}") from e
    return plan_data
