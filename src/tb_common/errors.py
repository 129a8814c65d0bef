"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Profile/Balance
  3xxx: Catalog
  4xxx: Service requests
  5xxx: Ledger
  9xxx: System
"""

from decimal import Decimal


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class AuthError(AppError):
    """Credential or sign-up failure."""


class EmailExistsError(AuthError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AuthError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid email or password", 401)


class AccountDisabledError(AuthError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AuthError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


# --- 2xxx: Profile/Balance ---

class NotFoundError(AppError):
    """Missing service, request, profile or transaction."""


class InsufficientBalanceError(AppError):
    def __init__(self, required: Decimal, available: Decimal) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2001,
            f"Insufficient balance: required {required} hours, available {available} hours",
            422,
        )


class ProfileNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Profile not found for user {user_id}", 404)


# --- 3xxx: Catalog ---

class ServiceNotFoundError(NotFoundError):
    def __init__(self, service_id: str) -> None:
        super().__init__(3001, f"Service not found or no longer available: {service_id}", 404)


class CategoryNotFoundError(NotFoundError):
    def __init__(self, category_id: str) -> None:
        super().__init__(3002, f"Category not found: {category_id}", 404)


# --- 4xxx: Service requests ---

class RequestNotFoundError(NotFoundError):
    def __init__(self, request_id: str) -> None:
        super().__init__(4001, f"Service request not found: {request_id}", 404)


class InvalidRequestTransitionError(AppError):
    def __init__(self, request_id: str, status: str, action: str) -> None:
        super().__init__(
            4002, f"Service request {request_id} in status {status} cannot be {action}", 422
        )


class ValidationError(AppError):
    """Malformed input that passed schema parsing but broke a business rule."""

    def __init__(self, detail: str, code: int = 9004) -> None:
        super().__init__(code, detail, 422)


class SelfRequestError(ValidationError):
    def __init__(self) -> None:
        super().__init__("You cannot request your own service", code=4003)


# --- 5xxx: Ledger ---

class InvalidTransactionError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(5001, f"Invalid transaction: {detail}", 422)


class TransactionNotFoundError(NotFoundError):
    def __init__(self, transaction_id: str) -> None:
        super().__init__(5002, f"Transaction not found: {transaction_id}", 404)


class InvalidTransitionError(AppError):
    def __init__(self, transaction_id: str, status: str) -> None:
        super().__init__(
            5003, f"Transaction {transaction_id} is already {status}", 422
        )


# --- 9xxx: System ---

class BackendError(AppError):
    def __init__(self, detail: str = "Backend unavailable") -> None:
        super().__init__(9001, detail, 503)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class BackendTimeoutError(BackendError):
    def __init__(self, detail: str = "Backend request timed out") -> None:
        super().__init__(detail)
        self.code = 9003
        self.http_status = 504
