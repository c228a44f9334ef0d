"""Multipart form value objects.

A request body that is a `MultipartForm` is sent as ``multipart/form-data``
instead of JSON; the HTTP layer lets the transport pick the boundary and the
content type header.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class UploadFile:
    """A single file part.

    Attributes:
        filename: Name reported to the server.
        content: Raw bytes of the file.
        content_type: MIME type, or None when unknown.
    """

    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename)[1].lower()

    @classmethod
    def from_path(cls, path: str, content_type: Optional[str] = None) -> "UploadFile":
        with open(path, "rb") as fh:
            content = fh.read()
        return cls(filename=os.path.basename(path), content=content, content_type=content_type)

    def __repr__(self) -> str:
        return f"UploadFile(filename={self.filename!r}, size={self.size}, content_type={self.content_type!r})"


@dataclass(frozen=True)
class MultipartForm:
    """Plain form fields plus file parts, in insertion order."""

    fields: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, UploadFile] = field(default_factory=dict)

    def as_httpx(self) -> Tuple[Dict[str, str], List[Tuple[str, Tuple[str, bytes, str]]]]:
        """Split into the ``data`` and ``files`` arguments httpx expects."""
        files = [
            (name, (upload.filename, upload.content, upload.content_type or "application/octet-stream"))
            for name, upload in self.files.items()
        ]
        return dict(self.fields), files
