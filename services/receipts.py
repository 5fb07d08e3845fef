"""
Payment receipt handling: size/type constraints and inline data-URL encoding.

The encoded receipt is stored directly on the application record, so both the
raw upload and its base64 form are bounded.
"""
from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from fastapi import UploadFile

logger = logging.getLogger(__name__)

MAX_RECEIPT_BYTES = 1 * 1024 * 1024
# Ceiling on the encoded data URL, kept under the document store's 1 MiB field limit
MAX_ENCODED_LENGTH = 1_048_487
ALLOWED_CONTENT_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
})
DEFAULT_READ_TIMEOUT = 30.0

MSG_TOO_LARGE = "Image size must be less than 1MB. Please compress or choose a smaller image."
MSG_BAD_TYPE = "Please upload a valid image file (JPG, PNG, GIF, or WEBP)"
MSG_TIMED_OUT = "File reading timed out. Please try again with a smaller image."
MSG_ENCODED_TOO_LARGE = "Image is too large even after validation. Please use a smaller image."
MSG_READ_FAILED = "Failed to read image file"


class ReceiptError(Exception):
    """Receipt rejected or unreadable; the message is safe to show the applicant."""


@dataclass
class ReceiptFile:
    filename: str
    content_type: str
    size: int
    read: Callable[[], Awaitable[bytes]]

    @classmethod
    def from_bytes(cls, filename: str, content_type: str, data: bytes) -> "ReceiptFile":
        async def _read() -> bytes:
            return data

        return cls(filename=filename, content_type=content_type, size=len(data), read=_read)

    @classmethod
    def from_upload(cls, upload: UploadFile) -> "ReceiptFile":
        size = upload.size
        if size is None:
            upload.file.seek(0, 2)
            size = upload.file.tell()
            upload.file.seek(0)
        return cls(
            filename=upload.filename or "receipt",
            content_type=(upload.content_type or "").lower(),
            size=size,
            read=upload.read,
        )


def receipt_problem(receipt: Optional[ReceiptFile]) -> Optional[str]:
    """First constraint the receipt violates, or None when it is acceptable."""
    if receipt is None:
        return None
    if receipt.size > MAX_RECEIPT_BYTES:
        return MSG_TOO_LARGE
    if receipt.content_type not in ALLOWED_CONTENT_TYPES:
        return MSG_BAD_TYPE
    return None


async def encode_receipt(receipt: Optional[ReceiptFile], timeout: float = DEFAULT_READ_TIMEOUT) -> str:
    """
    Read the receipt and return it as a data URL. No receipt yields "".
    Raises ReceiptError on constraint violations, read failures and timeouts.
    """
    if receipt is None:
        return ""

    problem = receipt_problem(receipt)
    if problem:
        raise ReceiptError(problem)

    try:
        data = await asyncio.wait_for(receipt.read(), timeout=timeout)
    except asyncio.TimeoutError:
        raise ReceiptError(MSG_TIMED_OUT) from None
    except OSError as exc:
        logger.error("Failed reading receipt %s: %s", receipt.filename, exc)
        raise ReceiptError(MSG_READ_FAILED) from exc

    # Declared size can lie; check the bytes actually read
    if len(data) > MAX_RECEIPT_BYTES:
        raise ReceiptError(MSG_TOO_LARGE)

    encoded = f"data:{receipt.content_type};base64,{base64.b64encode(data).decode('ascii')}"
    if len(encoded) > MAX_ENCODED_LENGTH:
        raise ReceiptError(MSG_ENCODED_TOO_LARGE)

    logger.debug("Receipt %s converted to data URL, size: %d bytes", receipt.filename, len(encoded))
    return encoded
