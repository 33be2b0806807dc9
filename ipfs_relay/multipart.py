"""Single-file multipart/form-data bodies.

Quotes and backslashes in the field name and filename are backslash-escaped
so receiving form parsers recover the filename unchanged.
"""

import uuid

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def quote_param(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def encode_file_field(
    field: str,
    filename: str,
    content: bytes,
    content_type: str | None = None,
) -> tuple[bytes, str]:
    """Return ``(body, content_type_header)`` for one file part."""
    boundary = uuid.uuid4().hex
    head = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="{quote_param(field)}"; filename="{quote_param(filename)}"\r\n'
        f"Content-Type: {content_type or DEFAULT_CONTENT_TYPE}\r\n"
        "\r\n"
    ).encode("utf-8")
    tail = f"\r\n--{boundary}--\r\n".encode("ascii")
    return head + content + tail, f"multipart/form-data; boundary={boundary}"
