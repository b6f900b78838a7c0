"""ImagePayload value object."""

import base64
import binascii
import re
from dataclasses import dataclass

from skinwise.domain.shared.errors import (
    ImageTooLargeError,
    UnsupportedImageTypeError,
    ValidationError,
)

ALLOWED_MIME_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/bmp",
        "image/tiff",
        "image/webp",
    }
)

_DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class ImagePayload:
    """Uploaded image bytes with their MIME type.

    Invariants:
    - mime_type is one of the accepted raster formats
    - data is not empty

    The size ceiling is a deployment setting, so it is checked with
    ``ensure_within`` rather than in the constructor.

    Examples:
        >>> image = ImagePayload(data=b"...", mime_type="image/png")
        >>> image.size_bytes
        3
        >>> ImagePayload.from_data_uri(image.to_data_uri()) == image
        True
    """

    data: bytes
    mime_type: str

    def __post_init__(self) -> None:
        normalized = self.mime_type.strip().lower()
        if normalized not in ALLOWED_MIME_TYPES:
            raise UnsupportedImageTypeError(self.mime_type)
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "mime_type", normalized)

        if not self.data:
            raise ValidationError("Image data is missing")

    @staticmethod
    def from_data_uri(data_uri: str) -> "ImagePayload":
        """Parse a ``data:<mime>;base64,<data>`` URI.

        Raises:
            ValidationError: If the URI is malformed or not base64
            UnsupportedImageTypeError: If the MIME type is not accepted
        """
        match = _DATA_URI_PATTERN.match(data_uri.strip()) if data_uri else None
        if not match:
            raise ValidationError("Image must be a base64 data URI")

        try:
            data = base64.b64decode(match.group("data"), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError("Image data is not valid base64") from e

        return ImagePayload(data=data, mime_type=match.group("mime"))

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def ensure_within(self, max_bytes: int) -> None:
        """Reject payloads above the configured ceiling.

        Raises:
            ImageTooLargeError: If size_bytes > max_bytes
        """
        if self.size_bytes > max_bytes:
            raise ImageTooLargeError(size_bytes=self.size_bytes, limit_bytes=max_bytes)

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    def __repr__(self) -> str:
        return f"ImagePayload(mime_type='{self.mime_type}', size_bytes={self.size_bytes})"
