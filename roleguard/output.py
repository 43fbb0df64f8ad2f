"""
Centralized output handling with consistent formatting.

This module provides a single point of control for all user-facing output,
ensuring consistent formatting and making it easy to modify output behavior.
"""

import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class OutputHandler:
    """Centralized output handling with consistent formatting."""

    @staticmethod
    def check_completed(check_name: str, workspace: str, stats: Dict[str, int]) -> None:
        """
        Log check completion with statistics.

        Args:
            check_name: Name of the check
            workspace: Workspace identifier
            stats: Dictionary with 'violations', 'exemptions', 'compliant' keys
        """
        logger.info(
            f"{check_name} completed for {workspace}: "
            f"{stats.get('violations', 0)} violations, "
            f"{stats.get('exemptions', 0)} exemptions, "
            f"{stats.get('compliant', 0)} compliant"
        )

    @staticmethod
    def violation(message: str) -> None:
        """Print a single violation line."""
        print(message)

    @staticmethod
    def verdict(passed: bool, violation_count: int) -> None:
        """
        Print the overall pass/fail line.

        Args:
            passed: Overall verdict
            violation_count: Number of non-compliant provider aliases
        """
        if passed:
            print("\n✅ PASS: all assumed roles are allowed")
            return
        noun = "alias" if violation_count == 1 else "aliases"
        print(f"\n❌ FAIL: {violation_count} provider {noun} with unapproved assumed roles")

    @staticmethod
    def error(title: str, error: Exception) -> None:
        """
        Print formatted error message.

        Args:
            title: Error title
            error: Exception that occurred
        """
        print(f"\n🚨 {title}:\n{error}\n")

    @staticmethod
    def success(title: str, data: Optional[Any] = None) -> None:
        """
        Print formatted success message.

        Args:
            title: Success message title
            data: Optional data to display (dict will be JSON formatted)
        """
        print(f"\n✅ {title}")
        if not data:
            return

        if isinstance(data, dict):
            print(json.dumps(data, indent=2, default=str))
            return

        print(data)

    @staticmethod
    def section_header(title: str) -> None:
        """
        Print section header with divider.

        Args:
            title: Section title
        """
        print("\n" + "=" * 80)
        print(title)
        print("=" * 80)
