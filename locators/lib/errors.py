"""Structured exception hierarchy for storage locators.

Every failure raised while classifying or rebuilding a locator derives from
:class:`LocatorError`, so callers can reject a URL with a single ``except``
clause and still log rich context through :meth:`LocatorError.to_dict`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "LocatorError",
    "MalformedLocatorError",
    "RegionUnresolvedError",
    "BucketUnresolvedError",
    "SettingsError",
]


class LocatorError(Exception):
    """Base exception for all locator errors.

    Provides structured error information for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        locator: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.locator = locator
        self.details = details or {}
        self.suggestion = suggestion

        if locator is not None:
            self.details.setdefault("locator", locator)

        parts = [message]

        if self.details:
            parts.append("\nDetails:")
            parts.extend(f"  {k}: {v}" for k, v in self.details.items())

        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts) if len(parts) > 1 else message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "locator": self.locator,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class MalformedLocatorError(LocatorError):
    """The locator is missing, unparsable, or has an unrecognized host shape."""

    def __init__(
        self,
        message: str,
        *,
        host: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.host = host

        details = kwargs.pop("details", {})
        if host is not None:
            details["host"] = host

        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = (
                "Check the storage URL. Supported forms are s3://<bucket>/<key>, "
                "gs3://<bucket>/<key>, https://<bucket>.s3.<region>.amazonaws.com/<key>, "
                "https://s3.<region>.amazonaws.com/<bucket>/<key> and "
                "https://<host>/<bucket>/<key>."
            )

        super().__init__(message, details=details, suggestion=suggestion, **kwargs)


class RegionUnresolvedError(LocatorError):
    """No region could be recovered from the URL, prior record or configuration."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = (
                "Put the region in the URL host, add '#aws.region=<region>' to the URL, "
                "or set AWS_REGION / the 'region' setting."
            )
        super().__init__(message, suggestion=suggestion, **kwargs)


class BucketUnresolvedError(LocatorError):
    """No bucket could be recovered from the URL or prior record."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = (
                "Name the bucket in the URL, either in the host "
                "(<bucket>.s3.<region>.amazonaws.com) or as the first path segment."
            )
        super().__init__(message, suggestion=suggestion, **kwargs)


class SettingsError(LocatorError):
    """Locator settings could not be loaded.

    Raised when a settings file is missing, unreadable, or has the wrong shape.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        field: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.path = path
        self.field = field

        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        if field:
            details["field"] = field

        super().__init__(message, details=details, **kwargs)
