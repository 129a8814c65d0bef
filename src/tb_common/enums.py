"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class TransactionStatus(str, Enum):
    """Client ledger transaction status. COMPLETED and CANCELLED are terminal."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TransactionType(str, Enum):
    """Direction of time flow relative to the ledger owner."""
    EARNED = "earned"
    SPENT = "spent"


class TransitionOutcome(str, Enum):
    APPLIED = "applied"
    NOT_FOUND = "not_found"
    ALREADY_TERMINAL = "already_terminal"


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class RequestAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class UserRole(str, Enum):
    STANDARD = "standard"
    ORGANIZATION = "organization"
    ADMIN = "admin"


class ExchangeType(str, Enum):
    """transactions.transaction_type values written by request completion."""
    SERVICE_PAYMENT = "service_payment"


class SessionEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
