"""
Error taxonomy for the governance API.

Every ApiError carries the HTTP status and error type it is rendered with;
the exception handlers in govview/lib/fastapi.py turn them into the error
envelope. MalformedCursor never leaves the query engines.
"""

from typing import Optional, Sequence


class ApiError(Exception):
    status_code = 500
    type = "UnknownError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidParameter(ApiError):
    status_code = 400
    type = "BadRequest"

    def __init__(
        self,
        field: str,
        allowed_values: Optional[Sequence[str]] = None,
        reason: Optional[str] = None,
    ):
        self.field = field
        self.allowed_values = list(allowed_values) if allowed_values else None
        message = f"Invalid query parameter value for {field}."
        if self.allowed_values:
            message += f" See the acceptable values: {', '.join(self.allowed_values)}"
        elif reason:
            message += f" {reason}"
        super().__init__(message)


class NotFound(ApiError):
    status_code = 404
    type = "NotFound"


class LedgerUnavailable(ApiError):
    """The ledger node could not be reached or did not answer with JSON-RPC."""

    status_code = 503
    type = "ServiceUnavailable"


class LedgerRpcError(ApiError):
    """The ledger answered with a JSON-RPC error object."""

    status_code = 502
    type = "BadGateway"

    def __init__(self, code: Optional[int], message: str):
        self.code = code
        super().__init__(message)


class MalformedCursor(Exception):
    pass
