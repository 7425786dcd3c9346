# core/response.py

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    # === Not Found ===
    # operation targets a missing student, class, or subject
    NOT_FOUND = "NOT_FOUND"

    # === Constraint Violations ===
    # student id already present in the registry
    DUPLICATE_ID = "DUPLICATE_ID"

    # class or subject name collides with a different existing entry
    CONFLICT = "CONFLICT"

    # === Validation Failures ===
    # required key is missing from a snapshot record
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # snapshot structure is malformed or incomplete
    INVALID_INPUT = "INVALID_INPUT"

    # malformed id, empty name, or out-of-range grade
    VALIDATION_FAILED = "VALIDATION_FAILED"

    # === Internal Faults ===
    INTERNAL_ERROR = "INTERNAL_ERROR"


_DEFAULT_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.DUPLICATE_ID: 409,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}


class Response:
    """
    Outcome of a Registry mutation or a RecordStore load/save.

    Attributes:
        success (bool): False when the operation was rejected and nothing changed.
        detail (str | None): Message suitable for showing to the user.
        error (ErrorCode | None): Why the operation was rejected; None on success.
        status_code (int | None): HTTP-style code, 200 on success.
        data (dict): Operation-specific payload such as "record", "registry", or "count".
    """

    def __init__(
        self,
        success: bool,
        detail: str | None = None,
        error: ErrorCode | None = None,
        status_code: int | None = None,
        data: dict | None = None,
    ):
        self._success = success
        self._detail = detail
        self._error = error
        self._status_code = status_code
        self._data = data or {}

    # === properties ===

    @property
    def success(self) -> bool:
        return self._success

    @property
    def detail(self) -> str | None:
        return self._detail

    @property
    def error(self) -> ErrorCode | None:
        return self._error

    @property
    def status_code(self) -> int | None:
        return self._status_code

    @property
    def data(self) -> dict:
        return self._data

    # === public classmethods ===

    @classmethod
    def succeed(
        cls,
        detail: str | None = None,
        data: dict | None = None,
    ) -> Response:
        return cls(
            success=True,
            detail=detail,
            error=None,
            status_code=200,
            data=data,
        )

    @classmethod
    def fail(
        cls,
        detail: str | None = None,
        error: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int | None = None,
        data: dict | None = None,
    ) -> Response:
        """
        Builds a failed `Response`.

        If no status code is given, one is derived from the error code
        (404 for NOT_FOUND, 409 for DUPLICATE_ID and CONFLICT, 500 for
        INTERNAL_ERROR, 400 otherwise).
        """
        if status_code is None:
            status_code = _DEFAULT_STATUS_CODES.get(error, 400)

        return cls(
            success=False,
            detail=detail,
            error=error,
            status_code=status_code,
            data=data,
        )

    # === dunder methods ===

    def __bool__(self) -> bool:
        return self._success

    def __repr__(self) -> str:
        error = self._error.value if self._error else None
        return f"Response({self._success}, {error}, {self._detail!r})"

    def __str__(self) -> str:
        if self.success:
            return f"Success: {self.detail or ''}"
        else:
            error_str = self.error.value if self.error else ""
            return f"Error: {error_str} - {self.detail or ''}"
