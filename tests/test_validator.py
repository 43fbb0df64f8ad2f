"""Tests for roleguard.validator module."""

from roleguard.types import RoleViolation
from roleguard.validator import is_role_allowed, validate_assumed_roles


class TestIsRoleAllowed:
    """Test is_role_allowed function."""

    def test_listed_role_allowed(self) -> None:
        assert is_role_allowed("arn:good", ["arn:good"]) is True

    def test_unlisted_role_not_allowed(self) -> None:
        assert is_role_allowed("arn:bad", ["arn:good"]) is False

    def test_empty_role_always_allowed(self) -> None:
        """Test that assuming no role is compliant even with an empty allow-list."""
        assert is_role_allowed("", []) is True

    def test_exact_string_match(self) -> None:
        assert is_role_allowed("arn:good/extra", ["arn:good"]) is False
        assert is_role_allowed("ARN:GOOD", ["arn:good"]) is False


class TestValidateAssumedRoles:
    """Test validate_assumed_roles function."""

    def test_allowed_role_passes(self) -> None:
        result = validate_assumed_roles({"a": "arn:good"}, ["arn:good"])
        assert result.passed is True
        assert result.violations == []

    def test_unlisted_role_fails(self) -> None:
        result = validate_assumed_roles({"a": "arn:bad"}, ["arn:good"])
        assert result.passed is False
        assert result.violations == [RoleViolation(address="a", role_arn="arn:bad")]

    def test_empty_roles_never_violate(self) -> None:
        """Test empty-role aliases are absent from violations."""
        result = validate_assumed_roles({"aws.default": "", "aws.other": ""}, ["arn:good"])
        assert result.passed is True
        assert result.violations == []

    def test_every_violation_reported_in_address_order(self) -> None:
        resolved = {
            "module.z.aws.default": "arn:bad2",
            "aws.default": "arn:bad1",
            "aws.good": "arn:good",
            "aws.none": "",
        }

        result = validate_assumed_roles(resolved, ["arn:good"])

        assert result.passed is False
        assert [v.address for v in result.violations] == ["aws.default", "module.z.aws.default"]

    def test_no_aliases_passes(self) -> None:
        assert validate_assumed_roles({}, []).passed is True

    def test_violation_message_format(self) -> None:
        result = validate_assumed_roles(
            {"module.network.aws.prod": "arn:aws:iam::111111111111:role/admin"}, []
        )
        assert result.violations[0].message == (
            "AWS provider with alias module.network.aws.prod has assumed role "
            "arn:aws:iam::111111111111:role/admin that is not allowed."
        )
