from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    CRATE_NOT_FOUND = "CRATE_NOT_FOUND"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    MODULE_NOT_FOUND = "MODULE_NOT_FOUND"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    SEARCH_FAILED = "SEARCH_FAILED"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    INVALID_INPUT = "INVALID_INPUT"
    PROMPT_NOT_FOUND = "PROMPT_NOT_FOUND"


NOT_FOUND_CODES: frozenset[ErrorCode] = frozenset(
    {ErrorCode.CRATE_NOT_FOUND, ErrorCode.ITEM_NOT_FOUND, ErrorCode.MODULE_NOT_FOUND}
)


class RustDocsError(Exception):
    """Raised by tool handlers for all expected failure conditions.

    Caught by server.py and serialised into the MCP error response.
    Tool handlers re-raise it once, at the operation boundary, with a message
    naming the operation and the subject (see ``operation_failure``).
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    @property
    def is_not_found(self) -> bool:
        return self.code in NOT_FOUND_CODES

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }


def operation_failure(action: str, exc: Exception) -> RustDocsError:
    """Wrap any failure raised inside a tool handler into one descriptive error.

    ``action`` reads like ``"get crate overview for 'tokio'"``. Codes and
    suggestions of an inner ``RustDocsError`` are kept; anything else is an
    unexpected extraction failure.
    """
    if isinstance(exc, RustDocsError):
        return RustDocsError(
            code=exc.code,
            message=f"Failed to {action}: {exc.message}",
            suggestion=exc.suggestion,
            recoverable=exc.recoverable,
        )
    return RustDocsError(
        code=ErrorCode.EXTRACTION_FAILED,
        message=f"Failed to {action}: {exc}",
        suggestion="The page layout may have changed. Try the markdown rendering mode.",
        recoverable=False,
    )
