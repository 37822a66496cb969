"""
BigPdfMerge - Custom Exceptions Module

This module defines custom exception classes for specific error cases
in the BigPdfMerge application.
"""


class BigPdfMergeError(Exception):
    """Base exception for all BigPdfMerge errors.

    All custom exceptions should inherit from this class to allow
    catching any BigPdfMerge-specific error.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional technical details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class DecodeError(BigPdfMergeError):
    """Raised when a source cannot be opened (corrupt, encrypted, not a PDF)."""

    def __init__(self, source_name: str, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            source_name: Display name of the source that failed to open
            reason: Optional reason why decoding failed
        """
        self.source_name = source_name
        self.reason = reason
        msg = f"Could not open {source_name}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg, details=f"source={source_name}")


class RenderError(BigPdfMergeError):
    """Raised when a single page cannot be rasterized into a preview."""

    def __init__(self, source_name: str, page_number: int, reason: str | None = None) -> None:
        self.source_name = source_name
        self.page_number = page_number
        self.reason = reason
        msg = f"Could not render page {page_number} of {source_name}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg, details=f"source={source_name}, page={page_number}")


class CopyError(BigPdfMergeError):
    """Raised when a single page cannot be copied into the output document."""

    def __init__(self, source_name: str, page_number: int, reason: str | None = None) -> None:
        self.source_name = source_name
        self.page_number = page_number
        self.reason = reason
        msg = f"Could not copy page {page_number} of {source_name}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg, details=f"source={source_name}, page={page_number}")


class EmptySelectionError(BigPdfMergeError):
    """Raised when an export is attempted with no page selected."""

    def __init__(self) -> None:
        super().__init__("No pages selected for export")


class NotReadyError(BigPdfMergeError):
    """Raised when the PDF backend is used before it was initialized."""

    def __init__(self, component: str = "PDF backend") -> None:
        """Initialize the exception.

        Args:
            component: Name of the component that is not ready
        """
        self.component = component
        super().__init__(
            f"{component} is not initialized yet",
            details="call initialize() first",
        )


class ValidationError(BigPdfMergeError):
    """Raised when input validation fails."""

    def __init__(
        self,
        field: str,
        value: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            field: Name of the field that failed validation
            value: Optional value that failed validation
            reason: Optional reason for the validation failure
        """
        self.field = field
        self.value = value
        self.reason = reason

        msg = f"Validation error for '{field}'"
        if reason:
            msg += f": {reason}"

        super().__init__(msg)


class DependencyError(BigPdfMergeError):
    """Raised when a required dependency is missing or incompatible."""

    def __init__(self, dependency: str, reason: str | None = None) -> None:
        self.dependency = dependency
        self.reason = reason
        msg = f"Missing dependency: {dependency}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


class SessionClosedError(BigPdfMergeError):
    """Raised when a closed editing session is modified."""

    def __init__(self) -> None:
        super().__init__("The editing session has been closed")


# Exception hierarchy summary:
# BigPdfMergeError (base)
# ├── DecodeError
# ├── RenderError
# ├── CopyError
# ├── EmptySelectionError
# ├── NotReadyError
# ├── ValidationError
# ├── DependencyError
# └── SessionClosedError
