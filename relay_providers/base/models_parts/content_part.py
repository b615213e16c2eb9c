"""
Typed content part for multi-part message content.

A message's ``content`` is either a plain string or an ordered list of these
parts. Image and file references may point at a URL, an uploaded file id, or
inline base64 data.
"""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import model_validator

from .canonical import CanonicalModel

ContentPartType = Literal["text", "image", "file"]


class ContentPart(CanonicalModel):
    """One element of multi-part content.

    Attributes:
        type: ``"text"``, ``"image"`` or ``"file"``.
        text: Text for text parts.
        url: Remote or ``data:`` URL for image/file references.
        file_id: Provider-side uploaded file identifier.
        data: Inline base64 payload (without the ``data:`` prefix).
        mime_type: Media type for inline data (e.g. ``image/png``).
        filename: Optional display name for file parts.
    """

    type: ContentPartType
    text: Optional[str] = None
    url: Optional[str] = None
    file_id: Optional[str] = None
    data: Optional[str] = None
    mime_type: Optional[str] = None
    filename: Optional[str] = None

    @model_validator(mode="after")
    def _check_payload(self) -> "ContentPart":
        if self.type == "text":
            if self.text is None:
                raise ValueError("text part requires 'text'")
        elif not (self.url or self.file_id or self.data):
            raise ValueError(f"{self.type} part requires one of 'url', 'file_id' or 'data'")
        return self

    @property
    def data_url(self) -> Optional[str]:
        """Return a ``data:`` URL for inline payloads, else the plain url."""
        if self.data:
            return f"data:{self.mime_type or 'application/octet-stream'};base64,{self.data}"
        return self.url


__all__ = ["ContentPart", "ContentPartType"]
