"""
Terraform Configuration Sources

This module contains the read-only views of a Terraform configuration and plan
that the locator and resolver query.

Modules:
- source: ConfigurationSource interface and ConfigurationSourceError
- plan: Source backed by `terraform show -json` output
- snapshot: In-memory source and the YAML snapshot format
"""

from .plan import PlanConfigurationSource
from .snapshot import StaticConfigurationSource, load_snapshot
from .source import ConfigurationSource, ConfigurationSourceError

__all__ = [
    "ConfigurationSource",
    "ConfigurationSourceError",
    "PlanConfigurationSource",
    "StaticConfigurationSource",
    "load_snapshot",
]
