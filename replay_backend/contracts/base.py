"""
Base Contracts and Shared Types

Foundational types shared by every layer of the replay backend.
All types here are IMMUTABLE and represent pure data.

ERROR MODEL:
============
- Malformed log data is never an exception; it is rejected locally
- Collaborator failures (unreadable metadata) are reported as Error data
- Exceptions are reserved for programming errors and the outer API edge
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple
from enum import Enum, auto


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for collaborator failures.
    Data-level problems (bad lines, unmatched boundaries) are NOT errors.
    """
    # Metadata collaborator
    METADATA_UNREADABLE = auto()
    METADATA_MALFORMED = auto()
    UNSUPPORTED_SCHEMA_VERSION = auto()

    # Parsed log documents
    LOG_DOCUMENT_UNREADABLE = auto()
    LOG_DOCUMENT_MALFORMED = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and surfaced.
    """
    code: ErrorCode
    message: str
    timestamp: datetime
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @staticmethod
    def create(code: ErrorCode, message: str, **context: str) -> Error:
        return Error(
            code=code,
            message=message,
            timestamp=datetime.now(timezone.utc),
            context=tuple(sorted((key, str(value)) for key, value in context.items())),
        )


@dataclass(frozen=True)
class Result:
    """
    Generic result type for operations that can fail.
    Either contains a value OR an error, never both.

    A successful Result may carry None as its value: "nothing there" is a
    normal outcome and must stay distinguishable from a failure.
    """
    value: Optional[object] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> Result:
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: Error) -> Result:
        return Result(value=None, error=error)
