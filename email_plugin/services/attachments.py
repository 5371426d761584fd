"""Resolve attachment descriptors into base64-encoded mail attachments.

Descriptors come from the action configuration either as a list or as a
string holding a JSON array. Each entry is one of:

- a staged file reference (``{"$fileId", "name", "type"}``, or the older
  ``$superblocksId`` key), matched against the staged files of the
  invocation by exact equality of the staged file's ``filename`` and the
  reference's id;
- an inline attachment (``{"name", "contents", "type"}``) whose contents
  are encoded directly.

All entries are validated before any staged file is read.
"""
from __future__ import annotations

import base64
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from ..errors import AttachmentFormatError, AttachmentNotFoundError, AttachmentRetrievalError
from ..schemas import (
    InlineAttachment,
    MailAttachment,
    RequestFile,
    StagedFileReference,
    attachment_descriptor_adapter,
)

logger = logging.getLogger(__name__)


def parse_attachment_descriptors(value: Any) -> List[StagedFileReference | InlineAttachment]:
    if value is None or value == "":
        return []

    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise AttachmentFormatError(
                "Can't parse the file objects. They must be an array of JSON objects."
            ) from exc

    if not isinstance(value, list):
        raise AttachmentFormatError(
            "Attachments must be provided in the form of an array of JSON objects."
        )

    descriptors = []
    for index, entry in enumerate(value):
        try:
            descriptors.append(attachment_descriptor_adapter.validate_python(entry))
        except ValidationError as exc:
            raise AttachmentFormatError(
                f"Cannot read attachment at position {index}. Attachments can either be "
                "staged files or { name: string, contents: string, type: string }."
            ) from exc
    return descriptors


def _encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _find_staged_file(
    reference: StagedFileReference, files: Sequence[RequestFile]
) -> Optional[RequestFile]:
    return next((f for f in files if f.filename == reference.file_id), None)


def resolve_attachment(
    descriptor: StagedFileReference | InlineAttachment,
    files: Sequence[RequestFile] = (),
) -> MailAttachment:
    if isinstance(descriptor, InlineAttachment):
        return MailAttachment(
            filename=descriptor.name,
            content=_encode(descriptor.contents.encode("utf-8")),
            type=descriptor.type,
        )

    match = _find_staged_file(descriptor, files)
    if match is None:
        raise AttachmentNotFoundError(
            f"Could not locate contents for attachment file {descriptor.name}"
        )

    try:
        data = Path(match.path).read_bytes()
    except OSError as exc:
        raise AttachmentRetrievalError(
            f"Could not read contents for attachment file {descriptor.name}: {exc}"
        ) from exc

    return MailAttachment(filename=descriptor.name, content=_encode(data), type=descriptor.type)


def resolve_attachments(
    value: Any, files: Optional[Sequence[RequestFile]] = None
) -> List[MailAttachment]:
    """Return the attachments described by ``value`` in descriptor order.

    Staged files are read concurrently; the first failing entry (in
    descriptor order) aborts the whole batch.
    """
    descriptors = parse_attachment_descriptors(value)
    if not descriptors:
        return []

    staged = list(files or [])
    logger.info("[Action] Resolving %s attachment(s)", len(descriptors))
    with ThreadPoolExecutor(max_workers=len(descriptors)) as pool:
        return list(pool.map(lambda d: resolve_attachment(d, staged), descriptors))


__all__ = ["parse_attachment_descriptors", "resolve_attachment", "resolve_attachments"]
