from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter


# ---------- Datasource Schemas ----------

class ConfigValue(BaseModel):
    value: Optional[str] = None


class EmailCustomAuthentication(BaseModel):
    api_key: Optional[ConfigValue] = Field(None, alias="apiKey")
    sender_email: Optional[ConfigValue] = Field(None, alias="senderEmail")
    sender_name: Optional[ConfigValue] = Field(None, alias="senderName")

    model_config = ConfigDict(populate_by_name=True)


class EmailAuthentication(BaseModel):
    custom: Optional[EmailCustomAuthentication] = None


class EmailDatasourceConfiguration(BaseModel):
    authentication: Optional[EmailAuthentication] = None

    def _custom_value(self, attr: str) -> Optional[str]:
        custom = self.authentication.custom if self.authentication else None
        entry = getattr(custom, attr, None) if custom else None
        return entry.value if entry else None

    @property
    def api_key(self) -> Optional[str]:
        return self._custom_value("api_key")

    @property
    def sender_email(self) -> Optional[str]:
        return self._custom_value("sender_email")

    @property
    def sender_name(self) -> Optional[str]:
        return self._custom_value("sender_name")


# ---------- Action Schemas ----------

class EmailActionConfiguration(BaseModel):
    email_from: Optional[str] = Field(None, alias="emailFrom")
    email_to: Optional[str] = Field(None, alias="emailTo")
    email_cc: Optional[str] = Field(None, alias="emailCc")
    email_bcc: Optional[str] = Field(None, alias="emailBcc")
    email_subject: Optional[str] = Field(None, alias="emailSubject")
    email_body: Optional[str] = Field(None, alias="emailBody")
    # JSON array of attachment descriptors, or a string holding one
    email_attachments: Any = Field(None, alias="emailAttachments")

    model_config = ConfigDict(populate_by_name=True)


class FormField(BaseModel):
    name: str
    label: str
    required: bool = False


# ---------- Attachment Schemas ----------

class StagedFileReference(BaseModel):
    """A file the host has already staged for this invocation."""

    kind: Literal["file"] = "file"
    # Hosts that predate $fileId send the id under $superblocksId
    file_id: str = Field(
        alias="$fileId",
        validation_alias=AliasChoices("$fileId", "$superblocksId", "file_id"),
    )
    name: str
    type: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class InlineAttachment(BaseModel):
    """An attachment whose raw contents are given directly."""

    kind: Literal["inline"] = "inline"
    name: str
    contents: str
    type: str


FILE_ID_KEYS = ("$fileId", "$superblocksId", "file_id")


def _attachment_kind(value: Any) -> Optional[str]:
    if isinstance(value, (StagedFileReference, InlineAttachment)):
        return value.kind
    if not isinstance(value, dict):
        return None
    if "kind" in value:
        return value["kind"] if isinstance(value["kind"], str) else None
    if any(key in value for key in FILE_ID_KEYS):
        return "file"
    if "contents" in value:
        return "inline"
    return None


AttachmentDescriptor = Annotated[
    Union[
        Annotated[StagedFileReference, Tag("file")],
        Annotated[InlineAttachment, Tag("inline")],
    ],
    Discriminator(_attachment_kind),
]

attachment_descriptor_adapter: TypeAdapter = TypeAdapter(AttachmentDescriptor)


class RequestFile(BaseModel):
    filename: str
    path: str


# ---------- Mail Schemas ----------

class MailAttachment(BaseModel):
    filename: str
    content: str
    type: Optional[str] = None


class MailSender(BaseModel):
    email: str
    name: Optional[str] = None


class MailMessage(BaseModel):
    from_: Optional[str] = Field(None, alias="from")
    to: List[str] = []
    cc: List[str] = []
    bcc: List[str] = []
    subject: Optional[str] = None
    html: Optional[str] = None
    attachments: List[MailAttachment] = []

    model_config = ConfigDict(populate_by_name=True)

    def _dump(self, **kwargs: Any) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, **kwargs)
        # an absent sender is left out rather than reported as null
        if self.from_ is None:
            data.pop("from")
        return data

    def to_output(self) -> Dict[str, Any]:
        return self._dump()

    def to_preview(self) -> Dict[str, Any]:
        """Same as ``to_output`` but without attachment contents."""
        return self._dump(exclude={"attachments": {"__all__": {"content"}}})


class ExecutionOutput(BaseModel):
    output: Any = None
    log: List[str] = []
