"""In-memory ledger for dry runs and tests."""

import logging

from ..cell import Cell
from ..core.exceptions import LedgerError
from ..core.models import SubmitResult
from .base import LedgerClient

logger = logging.getLogger(__name__)


class InMemoryLedger(LedgerClient):
    """Stores a single content cell; submissions become visible after a delay."""

    NETWORK = "memory"

    def __init__(
        self,
        content: Cell | None = None,
        confirm_after: int = 0,
        reject: bool = False,
        network: str | None = None,
    ):
        """
        Initialize the ledger.

        Args:
            content: Initial content cell
            confirm_after: Number of queries that still return the old content
                after a submission
            reject: Reject every submission
            network: Network name used in logs and errors
        """
        super().__init__(network=network)
        self.confirm_after = confirm_after
        self.reject = reject
        self._content = content
        self._pending: Cell | None = None
        self._pending_queries = 0
        self._submissions: list[Cell] = []

    @property
    def submissions(self) -> list[Cell]:
        return self._submissions.copy()

    def submit(self, payload: Cell) -> SubmitResult:
        self._submissions.append(payload)

        if self.reject:
            self._record_event("submit", payload.hash_hex, success=False, error_message="rejected")
            return SubmitResult(
                accepted=False,
                payload_hash=payload.hash_hex,
                network=self.network,
                message="rejected by ledger",
            )

        self._pending = payload
        self._pending_queries = self.confirm_after
        self._record_event("submit", payload.hash_hex)
        logger.debug(f"[{self.network}] Accepted payload {payload.hash_hex[:16]}")
        return SubmitResult(accepted=True, payload_hash=payload.hash_hex, network=self.network)

    def query(self) -> Cell:
        if self._pending is not None:
            if self._pending_queries <= 0:
                self._content = self._pending
                self._pending = None
            else:
                self._pending_queries -= 1

        if self._content is None:
            self._record_event("query", success=False, error_message="no content")
            raise LedgerError(self.network, "No content stored")

        self._record_event("query", self._content.hash_hex)
        return self._content
