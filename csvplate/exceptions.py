"""Central application exception hierarchy.

This module defines the base application exception ``AppError`` and the
specialized subclasses raised by csvplate: configuration problems, source
errors (empty, malformed or unreadable input), template compile and render
errors, destination errors and the per-row partial write summary. Using a
centralized hierarchy lets the command-line layer map every fatal condition
to one printed message and exit code.

Destination errors are the only recoverable class: the per-row renderer
records them and moves on to the next row, while every other error aborts
the run.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Base exception for all application-level errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'EMPTY_SOURCE'``).
    message : str
        Human-readable message describing the error.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.

    Attributes
    ----------
    code : str
        Stable machine-readable error code.
    message : str
        Human-readable message.
    context : dict
        Structured, non-sensitive context for logging.

    Examples
    --------
    >>> e = AppError('CODE', 'message', context={'k': 'v'})
    >>> e.code
    'CODE'
    >>> str(e)
    'CODE: message'
    """

    __slots__ = ("code", "message", "context")

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing command-line configuration."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("CONFIGURATION_ERROR", message, context=context)


class EmptySourceError(AppError):
    """Raised when the CSV source decodes to zero rows."""

    def __init__(
        self, message: str = "csv is empty", *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("EMPTY_SOURCE", message, context=context)


class MalformedInputError(AppError):
    """Raised when the CSV source has invalid delimited syntax."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("MALFORMED_INPUT", message, context=context)


class SourceUnavailableError(AppError):
    """Raised when an existing source cannot be opened or read."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("SOURCE_UNAVAILABLE", message, context=context)


class TemplateCompileError(AppError):
    """Raised when the content or output-path template fails to parse."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("TEMPLATE_COMPILE_ERROR", message, context=context)


class TemplateRenderError(AppError):
    """Raised when template execution fails or yields an unusable name."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("TEMPLATE_RENDER_ERROR", message, context=context)


class DestinationError(AppError):
    """Base class for output destination failures.

    Fatal in single-file mode; recorded and skipped by the per-row renderer
    when raised while acquiring a row's destination.
    """


class DestinationExistsError(DestinationError):
    """Raised when the destination exists and overwriting is not permitted."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("DESTINATION_EXISTS", message, context=context)


class DestinationUnavailableError(DestinationError):
    """Raised when a destination cannot be inspected, created or written."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("DESTINATION_UNAVAILABLE", message, context=context)


class PartialWriteError(AppError):
    """Raised after a per-row run in which some destinations were skipped.

    Parameters
    ----------
    failed : int
        Number of rows whose destination could not be acquired.
    total : int
        Number of rows processed.
    """

    def __init__(
        self,
        failed: int,
        total: int,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            "PARTIAL_WRITE",
            f"{failed} of {total} output files not written",
            context={"failed": failed, "total": total, **dict(context or {})},
        )
        self.failed = failed
        self.total = total
