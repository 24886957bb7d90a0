from .artwork import ARTWORK_THEMES, ArtworkTheme, render_artwork
from .metadata import (
    build_descriptor,
    decode,
    decode_image,
    encode,
    encode_descriptor,
    encode_image,
)

__all__ = [
    "ARTWORK_THEMES",
    "ArtworkTheme",
    "render_artwork",
    "build_descriptor",
    "decode",
    "decode_image",
    "encode",
    "encode_descriptor",
    "encode_image",
]
