"""Typed errors surfaced to the host framework.

Every failure of an invocation is raised as an ``IntegrationError``
subclass; the message is user-facing and ``code`` identifies the kind.
"""
from __future__ import annotations

from typing import Optional


class IntegrationError(Exception):
    """Base error for the email integration."""

    code: str = "INTEGRATION_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class FieldValidationError(IntegrationError):
    """A required action field was left empty."""

    code = "FIELD_MISSING"


class AttachmentFormatError(IntegrationError):
    """The attachment list, or one of its entries, has the wrong shape."""

    code = "ATTACHMENT_FORMAT"


class NotFoundError(IntegrationError):
    code = "NOT_FOUND"


class CredentialsNotFoundError(NotFoundError):
    pass


class AttachmentNotFoundError(NotFoundError):
    pass


class AttachmentRetrievalError(IntegrationError):
    """A staged file matched but could not be read."""

    code = "ATTACHMENT_RETRIEVAL"


class SendFailedError(IntegrationError):
    code = "SEND_FAILED"


__all__ = [
    "IntegrationError",
    "FieldValidationError",
    "AttachmentFormatError",
    "NotFoundError",
    "CredentialsNotFoundError",
    "AttachmentNotFoundError",
    "AttachmentRetrievalError",
    "SendFailedError",
]
