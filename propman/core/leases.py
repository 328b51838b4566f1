from datetime import datetime, timezone
from typing import Optional, Tuple
import base64
import binascii
import mimetypes
import uuid

from propman.schemas.tenant import Lease

DEFAULT_CONTENT_TYPE = "application/octet-stream"

def encode_data_uri(content: bytes, content_type: Optional[str] = None) -> str:
    payload = base64.b64encode(content).decode("ascii")
    return f"data:{content_type or DEFAULT_CONTENT_TYPE};base64,{payload}"

def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    """Returns (content_type, raw bytes). Only base64 data URIs are accepted."""
    if not uri.startswith("data:") or "," not in uri:
        raise ValueError("Not a data URI")

    header, payload = uri[len("data:"):].split(",", 1)
    parts = header.split(";")
    if "base64" not in parts[1:]:
        raise ValueError("Only base64 data URIs are supported")

    try:
        content = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return parts[0] or DEFAULT_CONTENT_TYPE, content

def guess_content_type(file_name: str) -> str:
    content_type, _ = mimetypes.guess_type(file_name)
    return content_type or DEFAULT_CONTENT_TYPE

def build_lease(file_name: str, content: bytes, content_type: Optional[str] = None) -> Lease:
    return Lease(
        id=f"lease-{uuid.uuid4()}",
        file_name=file_name,
        file_size=len(content),
        uploaded_at=datetime.now(timezone.utc),
        file_data=encode_data_uri(content, content_type or guess_content_type(file_name)),
    )
