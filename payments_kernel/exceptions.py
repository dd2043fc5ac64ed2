"""
Typed Exception Hierarchy for the Payments Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from PaymentsKernelError:

    PaymentsKernelError (base)
    |
    +-- NotFoundError                       [INPUT_DATA]
    |   +-- JobNotFoundError
    |   +-- ContractNotFoundError
    |   +-- ProfileNotFoundError
    |
    +-- TransferError                       [INPUT_DATA]
    |   +-- JobAlreadyPaidError
    |   +-- InsufficientFundsError
    |   +-- DepositCapExceededError
    |   +-- InvalidDepositTargetError
    |
    +-- ValidationError                     [INPUT_DATA]
    |   +-- InvalidAmountError
    |   +-- InvalidDateWindowError
    |
    +-- ServerSideError                     [SERVER_SIDE]
        +-- PersistenceError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                      | When Raised
-----------|---------------------------|------------------------------------------
NotFound   | JOB_NOT_FOUND             | Job missing, or caller is not its client
           | CONTRACT_NOT_FOUND        | Contract missing, or caller not a party
           | PROFILE_NOT_FOUND         | Deposit target profile doesn't exist
-----------|---------------------------|------------------------------------------
Transfer   | JOB_ALREADY_PAID          | Settling a job whose paid flag is set
           | INSUFFICIENT_FUNDS        | Client balance < job price
           | DEPOSIT_CAP_EXCEEDED      | Deposit > cap for the client/contractor
           | INVALID_DEPOSIT_TARGET    | Deposit target is not a contractor
-----------|---------------------------|------------------------------------------
Validation | INVALID_AMOUNT            | Non-numeric, non-positive, > 2 decimals
           | INVALID_DATE_WINDOW       | Missing/unparseable start or end date
-----------|---------------------------|------------------------------------------
Server     | SERVER_SIDE_ERROR         | Unexpected failure
           | PERSISTENCE_ERROR         | Database unavailable / statement failed

===============================================================================
DESIGN DECISIONS
===============================================================================

1. NOT-FOUND AND NOT-AUTHORIZED ARE ONE ERROR.
   A caller who is not a party to a contract receives exactly the same
   JobNotFoundError / ContractNotFoundError as for a nonexistent id, so the
   existence of other parties' agreements never leaks.  There is no
   Forbidden category.

2. TWO KINDS, MANY CODES.
   Every class carries an ErrorKind.  INPUT_DATA errors are caller mistakes
   (fix the request, never retry automatically).  SERVER_SIDE errors are
   opaque to the caller.  http_status_for() maps kinds to transport codes.

3. STRUCTURED ATTRIBUTES.
   Exceptions are logged as JSON (see logging_config); every constructor
   stores its context as attributes so the formatter can serialize them.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Top-level classification of kernel failures."""

    INPUT_DATA = "input_data"
    SERVER_SIDE = "server_side"


class PaymentsKernelError(Exception):
    """
    Base exception for all payments kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification and a `kind` for transport mapping.
    """

    code: str = "PAYMENTS_KERNEL_ERROR"
    kind: ErrorKind = ErrorKind.SERVER_SIDE


# Not-found (merged with not-authorized)


class NotFoundError(PaymentsKernelError):
    """Base exception for missing or inaccessible entities."""

    code: str = "NOT_FOUND"
    kind: ErrorKind = ErrorKind.INPUT_DATA


class JobNotFoundError(NotFoundError):
    """Job does not exist or the caller is not the paying client."""

    code: str = "JOB_NOT_FOUND"

    def __init__(self, job_id: int):
        self.job_id = job_id
        super().__init__(f"Job '{job_id}' is not found")


class ContractNotFoundError(NotFoundError):
    """Contract does not exist or the caller is not a party to it."""

    code: str = "CONTRACT_NOT_FOUND"

    def __init__(self, contract_id: int):
        self.contract_id = contract_id
        super().__init__(f"Contract '{contract_id}' is not found")


class ProfileNotFoundError(NotFoundError):
    """Profile with given ID was not found."""

    code: str = "PROFILE_NOT_FOUND"

    def __init__(self, profile_id: int):
        self.profile_id = profile_id
        super().__init__(f"Profile '{profile_id}' not found")


# Transfer rule violations


class TransferError(PaymentsKernelError):
    """Base exception for rejected balance movements."""

    code: str = "TRANSFER_ERROR"
    kind: ErrorKind = ErrorKind.INPUT_DATA


class JobAlreadyPaidError(TransferError):
    """Job has already been settled; a job is paid at most once."""

    code: str = "JOB_ALREADY_PAID"

    def __init__(self, job_id: int):
        self.job_id = job_id
        super().__init__(f"Job '{job_id}' is already paid")


class InsufficientFundsError(TransferError):
    """Client balance is lower than the job price."""

    code: str = "INSUFFICIENT_FUNDS"

    def __init__(self, profile_id: int, balance: str, required: str):
        self.profile_id = profile_id
        self.balance = balance
        self.required = required
        super().__init__(
            f"Not enough money to pay for Job costing '{required}' "
            f"(balance {balance})"
        )


class DepositCapExceededError(TransferError):
    """Deposit exceeds the share of in-progress work between the pair."""

    code: str = "DEPOSIT_CAP_EXCEEDED"

    def __init__(self, contractor_id: int, amount: str, cap: str):
        self.contractor_id = contractor_id
        self.amount = amount
        self.cap = cap
        super().__init__(
            f"Cannot pay '{amount}' to '{contractor_id}' as it exceeds threshold '{cap}'"
        )


class InvalidDepositTargetError(TransferError):
    """Deposit target profile exists but is not a contractor."""

    code: str = "INVALID_DEPOSIT_TARGET"

    def __init__(self, profile_id: int, role: str):
        self.profile_id = profile_id
        self.role = role
        super().__init__(
            f"Cannot pay to '{profile_id}' as it is not a Contractor (role: {role})"
        )


# Request validation


class ValidationError(PaymentsKernelError):
    """Base exception for malformed or missing request parameters."""

    code: str = "VALIDATION_ERROR"
    kind: ErrorKind = ErrorKind.INPUT_DATA


class InvalidAmountError(ValidationError):
    """Monetary amount is not a positive two-decimal number."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, value: object, reason: str):
        self.value = str(value)
        self.reason = reason
        super().__init__(f"Invalid amount '{value}': {reason}")


class InvalidDateWindowError(ValidationError):
    """Start or end of a reporting window is missing or unparseable."""

    code: str = "INVALID_DATE_WINDOW"

    def __init__(self, reason: str, start: str | None = None, end: str | None = None):
        self.reason = reason
        self.start = start
        self.end = end
        super().__init__(reason)


# Server side


class ServerSideError(PaymentsKernelError):
    """Unexpected failure; surfaced to the caller as an opaque error."""

    code: str = "SERVER_SIDE_ERROR"
    kind: ErrorKind = ErrorKind.SERVER_SIDE


class PersistenceError(ServerSideError):
    """The database was unavailable or a statement failed unexpectedly."""

    code: str = "PERSISTENCE_ERROR"

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Persistence failure during {operation}")


_STATUS_BY_KIND = {
    ErrorKind.INPUT_DATA: 400,
    ErrorKind.SERVER_SIDE: 500,
}


def http_status_for(exc: BaseException) -> int:
    """Map an exception to the transport status the routing layer returns.

    Kernel errors map by kind; anything else is an unexpected server error.
    """
    if isinstance(exc, PaymentsKernelError):
        return _STATUS_BY_KIND[exc.kind]
    return 500


def public_message(exc: BaseException) -> str:
    """Message safe to show a caller; server-side detail stays in the logs."""
    if isinstance(exc, PaymentsKernelError) and exc.kind is ErrorKind.INPUT_DATA:
        return str(exc)
    return "Unexpected server side error"
