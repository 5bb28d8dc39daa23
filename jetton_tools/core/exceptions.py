"""Custom exceptions for the jetton toolkit."""


class JettonToolsError(Exception):
    """Base exception for all jetton toolkit errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CapacityExceededError(JettonToolsError):
    """Raised when a cell would exceed its bit or reference capacity."""

    def __init__(self, resource: str, requested: int, limit: int):
        message = f"Cell {resource} capacity exceeded: {requested} > {limit}"
        super().__init__(
            message,
            {"resource": resource, "requested": requested, "limit": limit},
        )
        self.resource = resource
        self.requested = requested
        self.limit = limit


class UnderflowError(JettonToolsError):
    """Raised when a slice is read past its remaining bits or references."""

    def __init__(self, resource: str, requested: int, available: int):
        message = f"Cell {resource} underflow: requested {requested}, {available} left"
        super().__init__(
            message,
            {"resource": resource, "requested": requested, "available": available},
        )
        self.resource = resource
        self.requested = requested
        self.available = available


class FormatError(JettonToolsError):
    """Raised when a cell tree does not match the expected layout."""

    def __init__(self, what: str, reason: str):
        message = f"Malformed {what}: {reason}"
        super().__init__(message, {"what": what, "reason": reason})
        self.what = what
        self.reason = reason


class DuplicateKeyError(JettonToolsError):
    """Raised when a dictionary key is inserted twice."""

    def __init__(self, key: int):
        message = f"Duplicate dictionary key: 0x{key:064x}"
        super().__init__(message, {"key": f"0x{key:064x}"})
        self.key = key


class MissingFieldError(JettonToolsError):
    """Raised when a required metadata field is absent from a dictionary."""

    def __init__(self, field: str):
        message = f"Required metadata field missing: {field}"
        super().__init__(message, {"field": field})
        self.field = field


class InvalidWeightsError(JettonToolsError):
    """Raised when allocation weights are not a valid percentage split."""

    def __init__(self, reason: str, weights: dict | None = None):
        message = f"Invalid allocation weights: {reason}"
        super().__init__(message, {"reason": reason, "weights": weights or {}})
        self.reason = reason
        self.weights = weights or {}


class NegativeRemainingError(JettonToolsError):
    """Raised when the reserved amount is larger than the total."""

    def __init__(self, total: int, reserved: int):
        message = f"Reserved amount {reserved} exceeds total {total}"
        super().__init__(message, {"total": total, "reserved": reserved})
        self.total = total
        self.reserved = reserved


class InvariantViolationError(JettonToolsError):
    """Raised when an allocation does not sum exactly to its total.

    This blocks any downstream mint: the allocation must be recomputed.
    """

    def __init__(self, expected: int, actual: int, reason: str | None = None):
        message = f"Allocation invariant violated: expected {expected}, got {actual}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message,
            {"expected": expected, "actual": actual, "reason": reason},
        )
        self.expected = expected
        self.actual = actual


class ValidationError(JettonToolsError):
    """Raised when an input value is out of range or of the wrong type."""

    def __init__(self, field: str, value: str, reason: str):
        message = f"Validation failed for {field}={value}: {reason}"
        super().__init__(message, {"field": field, "value": value, "reason": reason})
        self.field = field
        self.value = value
        self.reason = reason


class ConfigurationError(JettonToolsError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, message: str):
        full_message = f"Configuration error [{config_key}]: {message}"
        super().__init__(full_message, {"config_key": config_key})
        self.config_key = config_key


class PreflightError(JettonToolsError):
    """Raised when on-chain state does not allow the initial allocation."""

    def __init__(self, check: str, message: str):
        full_message = f"Pre-flight check '{check}' failed: {message}"
        super().__init__(full_message, {"check": check})
        self.check = check


class LedgerError(JettonToolsError):
    """Raised when the ledger collaborator rejects or fails a request."""

    def __init__(self, network: str, message: str, payload_hash: str | None = None):
        full_message = f"[{network}] {message}"
        super().__init__(
            full_message,
            {"network": network, "payload_hash": payload_hash},
        )
        self.network = network
        self.payload_hash = payload_hash


class LedgerTimeoutError(LedgerError):
    """Raised when read-back polling gives up before the expected state appears."""

    def __init__(self, network: str, attempts: int, payload_hash: str | None = None):
        message = f"Expected state not observed after {attempts} attempts"
        super().__init__(network, message, payload_hash=payload_hash)
        self.attempts = attempts
