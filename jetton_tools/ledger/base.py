"""Ledger collaborator boundary.

The toolkit never signs, sends or retries by itself beyond the read-back
loop below: a LedgerClient implementation owns the network, and callers
hand it finished cells.
"""

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable

from ..cell import Cell
from ..core.exceptions import JettonToolsError, LedgerError, LedgerTimeoutError
from ..core.models import LedgerEvent, MetadataCheck, MetadataRecord, SubmitResult
from ..metadata import encode_metadata, verify_metadata

logger = logging.getLogger(__name__)

DEFAULT_POLL_ATTEMPTS = 6
DEFAULT_POLL_INTERVAL = 5.0


class LedgerClient(ABC):
    """Abstract base class for ledger collaborators."""

    # Subclasses name the network they talk to
    NETWORK: str = "unknown"

    def __init__(self, network: str | None = None):
        self.network = network or self.NETWORK
        self._events: list[LedgerEvent] = []

    def _record_event(
        self,
        action: str,
        payload_hash: str | None = None,
        success: bool = True,
        error_message: str | None = None,
        notes: str | None = None,
    ) -> LedgerEvent:
        """Record an audit entry for this client action."""
        event = LedgerEvent(
            timestamp=datetime.now(timezone.utc),
            network=self.network,
            action=action,
            payload_hash=payload_hash,
            success=success,
            error_message=error_message,
            notes=notes,
        )
        self._events.append(event)
        return event

    def get_events(self) -> list[LedgerEvent]:
        """Return all audit entries recorded by this client."""
        return self._events.copy()

    def clear_events(self) -> None:
        self._events.clear()

    @abstractmethod
    def submit(self, payload: Cell) -> SubmitResult:
        """Hand a payload cell to the ledger. Must not retry internally."""
        pass

    @abstractmethod
    def query(self) -> Cell:
        """Return the current content cell."""
        pass


def wait_for_content(
    client: LedgerClient,
    predicate: Callable[[Cell], bool],
    attempts: int = DEFAULT_POLL_ATTEMPTS,
    interval_seconds: float = DEFAULT_POLL_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> Cell:
    """
    Poll client.query() until predicate accepts the returned cell.

    Query failures count as a failed attempt and are logged, not raised.

    Args:
        client: Ledger collaborator
        predicate: Returns True once the expected state is visible
        attempts: Maximum number of queries
        interval_seconds: Pause between queries
        sleep: Sleep function (injectable for tests)

    Returns:
        The first cell accepted by predicate

    Raises:
        LedgerTimeoutError: If no attempt succeeds
    """
    for attempt in range(1, attempts + 1):
        if attempt > 1:
            sleep(interval_seconds)
        try:
            cell = client.query()
        except JettonToolsError as e:
            logger.warning(f"[{client.network}] Attempt {attempt}/{attempts} failed: {e}")
            continue

        if predicate(cell):
            logger.info(f"[{client.network}] Expected state observed on attempt {attempt}")
            return cell
        logger.debug(f"[{client.network}] Attempt {attempt}/{attempts}: not yet visible")

    raise LedgerTimeoutError(client.network, attempts)


def publish_metadata(
    client: LedgerClient,
    record: MetadataRecord,
    attempts: int = DEFAULT_POLL_ATTEMPTS,
    interval_seconds: float = DEFAULT_POLL_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> MetadataCheck:
    """
    Encode a metadata record, submit it and verify the read-back.

    Raises:
        LedgerError: If the submission is rejected
        LedgerTimeoutError: If the new content never becomes visible
    """
    payload = encode_metadata(record)
    result = client.submit(payload)
    if not result.accepted:
        raise LedgerError(
            client.network,
            f"Metadata update rejected: {result.message or 'no reason given'}",
            payload_hash=payload.hash_hex,
        )

    try:
        cell = wait_for_content(
            client,
            lambda current: current == payload,
            attempts=attempts,
            interval_seconds=interval_seconds,
            sleep=sleep,
        )
    except LedgerTimeoutError as e:
        raise LedgerTimeoutError(client.network, e.attempts, payload_hash=payload.hash_hex) from e

    return verify_metadata(cell, record)
