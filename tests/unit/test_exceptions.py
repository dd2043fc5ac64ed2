"""Unit tests for the exception hierarchy and its transport mapping."""

import pytest

from payments_kernel.exceptions import (
    ContractNotFoundError,
    DepositCapExceededError,
    ErrorKind,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidDateWindowError,
    InvalidDepositTargetError,
    JobAlreadyPaidError,
    JobNotFoundError,
    NotFoundError,
    PaymentsKernelError,
    PersistenceError,
    ProfileNotFoundError,
    TransferError,
    ValidationError,
    http_status_for,
    public_message,
)

INPUT_ERRORS = [
    JobNotFoundError(1),
    ContractNotFoundError(1),
    ProfileNotFoundError(1),
    JobAlreadyPaidError(1),
    InsufficientFundsError(1, "1.30", "200.00"),
    DepositCapExceededError(6, "201", "200.00"),
    InvalidDepositTargetError(2, "client"),
    InvalidAmountError("abc", "not a number"),
    InvalidDateWindowError("Please set both start/end query params"),
]


class TestHierarchy:

    @pytest.mark.parametrize("exc", INPUT_ERRORS, ids=lambda e: type(e).__name__)
    def test_input_errors_map_to_400(self, exc):
        assert exc.kind is ErrorKind.INPUT_DATA
        assert http_status_for(exc) == 400
        assert public_message(exc) == str(exc)

    def test_persistence_error_maps_to_500(self):
        exc = PersistenceError("settle_job", "connection refused")

        assert exc.kind is ErrorKind.SERVER_SIDE
        assert http_status_for(exc) == 500
        assert public_message(exc) == "Unexpected server side error"
        assert "connection refused" not in str(exc)

    def test_foreign_exception_maps_to_500(self):
        assert http_status_for(RuntimeError("boom")) == 500
        assert public_message(RuntimeError("boom")) == "Unexpected server side error"

    def test_codes_are_unique(self):
        codes = [type(e).code for e in INPUT_ERRORS] + [PersistenceError.code]
        assert len(codes) == len(set(codes))

    def test_categories(self):
        assert isinstance(JobNotFoundError(1), NotFoundError)
        assert isinstance(JobAlreadyPaidError(1), TransferError)
        assert isinstance(InvalidAmountError("x", "y"), ValidationError)
        assert all(isinstance(e, PaymentsKernelError) for e in INPUT_ERRORS)


class TestMessages:

    def test_job_not_found(self):
        assert str(JobNotFoundError(7)) == "Job '7' is not found"

    def test_already_paid(self):
        assert str(JobAlreadyPaidError(7)) == "Job '7' is already paid"

    def test_insufficient_funds_carries_amounts(self):
        exc = InsufficientFundsError(4, "1.30", "200.00")

        assert "200.00" in str(exc)
        assert (exc.profile_id, exc.balance, exc.required) == (4, "1.30", "200.00")

    def test_cap_exceeded_carries_cap(self):
        exc = DepositCapExceededError(6, "201", "200.00")

        assert exc.cap == "200.00"
        assert "exceeds threshold '200.00'" in str(exc)

    def test_date_window_keeps_bounds(self):
        exc = InvalidDateWindowError("start must not be after end", "2020-09-01", "2020-08-01")

        assert (exc.start, exc.end) == ("2020-09-01", "2020-08-01")
