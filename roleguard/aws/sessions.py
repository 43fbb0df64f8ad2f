"""AWS session management utilities."""

from typing import Optional

from boto3.session import Session
from mypy_boto3_sts.client import STSClient
from mypy_boto3_sts.type_defs import AssumeRoleResponseTypeDef, CredentialsTypeDef

from ..constants import PLAN_READER_SESSION_NAME


def assume_role(
    role_arn: str,
    session_name: str,
    base_session: Optional[Session] = None
) -> Session:
    """
    Assume an IAM role and return a session with temporary credentials.

    Args:
        role_arn: ARN of the role to assume
        session_name: Name for the role session
        base_session: Session to use for assuming role (defaults to boto3.Session())

    Returns:
        boto3 Session with assumed role credentials

    Raises:
        ClientError: If role assumption fails (AccessDenied, InvalidParameterValue, etc.)
    """
    if base_session is None:
        base_session = Session()

    sts: STSClient = base_session.client("sts")
    resp: AssumeRoleResponseTypeDef = sts.assume_role(
        RoleArn=role_arn,
        RoleSessionName=session_name
    )

    creds: CredentialsTypeDef = resp["Credentials"]
    return Session(
        aws_access_key_id=creds["AccessKeyId"],
        aws_secret_access_key=creds["SecretAccessKey"],
        aws_session_token=creds["SessionToken"]
    )


def get_plan_reader_session(plan_reader_role_arn: Optional[str]) -> Session:
    """
    Return a session allowed to read remote plans.

    Uses the ambient credentials when no reader role is configured.
    """
    if not plan_reader_role_arn:
        return Session()
    return assume_role(plan_reader_role_arn, PLAN_READER_SESSION_NAME)
