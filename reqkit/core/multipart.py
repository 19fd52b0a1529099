"""multipart/form-data body encoding."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from reqkit.ports.params import FormField

__all__ = ["MultipartBody", "encode_form", "field_name", "make_boundary"]

BREAK_LINE = "\r\n"


@dataclass(slots=True, frozen=True)
class MultipartBody:
    """Encoded multipart body together with the boundary it was framed with."""

    boundary: str
    data: bytes

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    @property
    def content_length(self) -> int:
        return len(self.data)


def make_boundary() -> str:
    """Return a new random boundary token."""
    return f"Boundary-{str(uuid.uuid4()).upper()}"


def field_name(filename: str) -> str:
    """Derive a form field name by dropping the last extension of ``filename``.

    Empty segments are discarded before joining, so ``"report"`` yields ``""``
    and ``"archive.tar.gz"`` yields ``"archive.tar"``.
    """
    segments = [segment for segment in filename.split(".") if segment]
    return ".".join(segments[:-1])


def _disposition(field: FormField) -> bytes:
    name = field_name(field.filename)
    return (
        f"Content-Disposition: form-data; name={name}; filename={field.filename}{BREAK_LINE}"
        f"Content-Type: {field.mime_type}{BREAK_LINE}"
        f"{BREAK_LINE}"
    ).encode("utf-8")


def encode_form(fields: Sequence[FormField]) -> MultipartBody:
    """Encode ``fields`` in order as a multipart/form-data body.

    A fresh boundary is generated on every call and used for every delimiter.
    With no fields the body holds only the opening delimiter and the footer.

    Args:
        fields: Form fields in wire order.

    Returns:
        The encoded body and its boundary.
    """
    boundary = make_boundary()
    header = f"--{boundary}{BREAK_LINE}".encode("utf-8")
    middle = f"{BREAK_LINE}--{boundary}{BREAK_LINE}".encode("utf-8")
    footer = f"{BREAK_LINE}--{boundary}--{BREAK_LINE}".encode("utf-8")

    data = bytearray(header)
    for index, field in enumerate(fields):
        if index:
            data += middle
        data += _disposition(field)
        data += field.data
    data += footer

    return MultipartBody(boundary=boundary, data=bytes(data))
