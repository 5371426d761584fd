"""Field schema for the email action and the required-field check."""
from __future__ import annotations

import logging
from typing import Iterable, List

from .errors import FieldValidationError
from .schemas import EmailActionConfiguration, FormField

logger = logging.getLogger(__name__)

# Declared order is the order missing fields are reported in
EMAIL_ACTION_FIELDS: List[FormField] = [
    FormField(name="emailFrom", label="From"),
    FormField(name="emailTo", label="To", required=True),
    FormField(name="emailCc", label="CC"),
    FormField(name="emailBcc", label="BCC"),
    FormField(name="emailSubject", label="Subject", required=True),
    FormField(name="emailBody", label="Body"),
    FormField(name="emailAttachments", label="Attachments"),
]


def email_action_field_names() -> List[str]:
    return [field.name for field in EMAIL_ACTION_FIELDS]


def validate_required_fields(
    config: EmailActionConfiguration,
    fields: Iterable[FormField] = EMAIL_ACTION_FIELDS,
) -> None:
    """Raise ``FieldValidationError`` for the first empty required field."""

    values = config.model_dump(by_alias=True)
    for field in fields:
        if field.required and not values.get(field.name):
            logger.debug("Required field %s is empty", field.name)
            raise FieldValidationError(f"{field.label} not specified")


__all__ = ["EMAIL_ACTION_FIELDS", "email_action_field_names", "validate_required_fields"]
