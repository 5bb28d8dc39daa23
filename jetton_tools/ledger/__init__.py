"""Ledger collaborator interface and an in-memory implementation."""

from .base import LedgerClient, publish_metadata, wait_for_content
from .memory import InMemoryLedger

__all__ = ["LedgerClient", "publish_metadata", "wait_for_content", "InMemoryLedger"]
