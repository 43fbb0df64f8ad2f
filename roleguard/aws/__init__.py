"""AWS integration library for retrieving remote Terraform plans."""

from .s3 import download_plan_json, is_s3_uri, parse_s3_uri
from .sessions import assume_role, get_plan_reader_session

__all__ = [
    "assume_role",
    "download_plan_json",
    "get_plan_reader_session",
    "is_s3_uri",
    "parse_s3_uri",
]
