"""Output formatting module."""

from .formatters import MetadataFormatter, PlanFormatter, PlanJSONFormatter, PlanTableFormatter

__all__ = [
    "MetadataFormatter",
    "PlanFormatter",
    "PlanJSONFormatter",
    "PlanTableFormatter",
]
