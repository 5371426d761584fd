from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from email_plugin.config import settings
from email_plugin.errors import CredentialsNotFoundError, IntegrationError, SendFailedError
from email_plugin.fields import email_action_field_names, validate_required_fields
from email_plugin.schemas import (
    EmailActionConfiguration,
    EmailDatasourceConfiguration,
    ExecutionOutput,
    MailMessage,
    MailSender,
    RequestFile,
)
from email_plugin.services.attachments import resolve_attachments
from email_plugin.services.sendgrid import SendGridClient
from . import ActionPlugin, register_plugin

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(model: Type[ModelT], value: Any, what: str) -> ModelT:
    try:
        return model.model_validate(value or {})
    except ValidationError as exc:
        raise IntegrationError(f"Invalid {what} configuration: {exc}") from exc


def _coerce_files(files: Optional[Sequence[Any]]) -> List[RequestFile]:
    return [_coerce(RequestFile, f, "file") for f in files or []]


def _describe_send_error(exc: Exception) -> str:
    if isinstance(exc, httpx.HTTPStatusError) and exc.response.text:
        return f"{exc}\n{exc.response.text}"
    return str(exc)


def parse_email_addresses(emails: Optional[str]) -> List[str]:
    """Split a comma-separated address list, dropping blank entries.

    Addresses are not validated; SendGrid decides what it accepts.
    """
    if not emails:
        return []
    return [item.strip() for item in emails.split(",") if item.strip()]


class SendEmailPlugin(ActionPlugin):
    """Send an HTML email, with optional attachments, through SendGrid."""

    name = "send_email"

    def __init__(self, name: Optional[str] = None, transport: Optional[httpx.BaseTransport] = None):
        super().__init__(name)
        self._transport = transport

    def execute(
        self,
        datasource_configuration: Any,
        action_configuration: Any,
        files: Optional[Sequence[Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ExecutionOutput:
        datasource = _coerce(EmailDatasourceConfiguration, datasource_configuration, "datasource")
        action = _coerce(EmailActionConfiguration, action_configuration, "action")

        validate_required_fields(action)
        message = self.form_email_json(action, files)
        client = self.create_client(datasource)

        try:
            receipt = client.send(message, self.sender_for(datasource))
        except Exception as exc:
            logger.warning("SendGrid rejected email: %s", exc)
            raise SendFailedError(
                f"Failed to send email using SendGrid.\n\nError:\n{_describe_send_error(exc)}"
            ) from exc

        logger.info(
            "[Action] Sent email to %s with subject '%s' (message id %s)",
            message.to,
            message.subject,
            receipt.message_id,
        )
        return ExecutionOutput(output=message.to_output())

    def create_client(self, datasource_configuration: Any) -> SendGridClient:
        datasource = _coerce(EmailDatasourceConfiguration, datasource_configuration, "datasource")
        key = (datasource.api_key or "").strip()
        if not key:
            raise CredentialsNotFoundError("No API key found for Email integration")

        return SendGridClient(key, transport=self._transport)

    @staticmethod
    def sender_for(datasource: EmailDatasourceConfiguration) -> MailSender:
        return MailSender(
            email=datasource.sender_email or settings.EMAIL_SENDER_ADDRESS_DEFAULT,
            name=datasource.sender_name or settings.EMAIL_SENDER_NAME_DEFAULT,
        )

    def dynamic_properties(self) -> List[str]:
        return email_action_field_names()

    def form_email_json(
        self, action_configuration: Any, files: Optional[Sequence[Any]] = None
    ) -> MailMessage:
        action = _coerce(EmailActionConfiguration, action_configuration, "action")
        attachments = resolve_attachments(action.email_attachments, _coerce_files(files))

        return MailMessage(
            from_=action.email_from,
            to=parse_email_addresses(action.email_to),
            cc=parse_email_addresses(action.email_cc),
            bcc=parse_email_addresses(action.email_bcc),
            subject=action.email_subject,
            html=action.email_body,
            attachments=attachments,
        )

    def get_request(
        self,
        action_configuration: Any,
        datasource_configuration: Any = None,
        files: Optional[Sequence[Any]] = None,
    ) -> str:
        message = self.form_email_json(action_configuration, files)
        return json.dumps(message.to_preview(), indent=2)

    def metadata(self, datasource_configuration: Any) -> Dict[str, Any]:
        # SendGrid exposes no schema to discover
        return {}

    def test(self, datasource_configuration: Any) -> None:
        logger.debug("Skipping live credential check for %s", self.name)


register_plugin(SendEmailPlugin())

__all__ = ["SendEmailPlugin", "parse_email_addresses"]
