"""Domain layer: errors, constants and schemas."""

from .errors import (
    MalformedRequestError,
    MissingCredentialError,
    ProxyError,
    UnknownModelError,
    UnknownProviderError,
    VendorHTTPError,
)
from .schemas import (
    ContentBlock,
    DocumentBlock,
    ImageBlock,
    NormalizedResult,
    SelectedConfig,
    TextBlock,
    UnknownBlock,
    parse_content,
)

__all__ = [
    "ProxyError",
    "UnknownProviderError",
    "UnknownModelError",
    "MissingCredentialError",
    "MalformedRequestError",
    "VendorHTTPError",
    "ContentBlock",
    "TextBlock",
    "ImageBlock",
    "DocumentBlock",
    "UnknownBlock",
    "NormalizedResult",
    "SelectedConfig",
    "parse_content",
]
