"""
MetadataCodec - descriptor strings in and out.

Wire format:
    data:application/json;base64,<payload>

where the payload is compact UTF-8 JSON with keys in the order
name, description, image, attributes, and `image` is itself a
data:image/svg+xml;base64 URI. The ledger builds descriptors through the
same functions, so both sides agree byte-for-byte.
"""

import base64
import binascii
import json
import logging

from pydantic import ValidationError

from chronotoken.constants import JSON_URI_PREFIX, SVG_URI_PREFIX, TOKEN_NAME_PREFIX
from chronotoken.domain import (
    LOCAL_TIME_TRAIT,
    STATE_TRAIT,
    TIMEZONE_TRAIT,
    UTC_TIME_TRAIT,
    BadBase64Error,
    BadPrefixError,
    LocalTimeBreakdown,
    MalformedJsonError,
    MetadataDescriptor,
    TraitAttribute,
)
from chronotoken.logging_config import log_codec

from .artwork import render_artwork

logger = logging.getLogger(__name__)


# =============================================================================
# Building
# =============================================================================


def encode_image(svg: str) -> str:
    """Wrap SVG markup in a base64 data URI."""
    return SVG_URI_PREFIX + base64.b64encode(svg.encode("utf-8")).decode("ascii")


def build_descriptor(
    token_id: int,
    breakdown: LocalTimeBreakdown,
    image_payload: str | None = None,
) -> MetadataDescriptor:
    """
    Build the metadata for a token at one instant.

    Args:
        token_id: Token being described
        breakdown: Classifier output for the instant
        image_payload: Image data URI; rendered from the breakdown if omitted

    Returns:
        The MetadataDescriptor
    """
    if image_payload is None:
        image_payload = encode_image(render_artwork(token_id, breakdown))

    return MetadataDescriptor(
        name=f"{TOKEN_NAME_PREFIX} #{token_id}",
        description=(
            f"A dynamic token that changes with the time of day in "
            f"{breakdown.offset_label}. Currently: {breakdown.state_name}."
        ),
        image=image_payload,
        attributes=(
            TraitAttribute(trait_type=STATE_TRAIT, value=breakdown.state_name),
            TraitAttribute(trait_type=LOCAL_TIME_TRAIT, value=breakdown.local_time),
            TraitAttribute(trait_type=UTC_TIME_TRAIT, value=breakdown.utc_time),
            TraitAttribute(trait_type=TIMEZONE_TRAIT, value=breakdown.offset_label),
        ),
    )


# =============================================================================
# Encoding
# =============================================================================


def encode_descriptor(descriptor: MetadataDescriptor) -> str:
    """Serialize a descriptor to its data URI."""
    document = json.dumps(
        descriptor.model_dump(mode="json"),
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return JSON_URI_PREFIX + base64.b64encode(document.encode("utf-8")).decode("ascii")


def encode(
    token_id: int,
    breakdown: LocalTimeBreakdown,
    image_payload: str | None = None,
) -> str:
    """Build and serialize the descriptor for a token at one instant."""
    result = encode_descriptor(build_descriptor(token_id, breakdown, image_payload))
    log_codec(logger, "encode", token_id=token_id, details=f"state={breakdown.state_name} | bytes={len(result)}")
    return result


# =============================================================================
# Decoding
# =============================================================================


def _strip_prefix(value: str, prefix: str) -> str:
    if not isinstance(value, str) or not value.startswith(prefix):
        shown = value[: len(prefix)] if isinstance(value, str) else type(value).__name__
        raise BadPrefixError(f"expected {prefix!r}, got {shown!r}")
    return value[len(prefix):]


def _b64decode(payload: str) -> bytes:
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise BadBase64Error(str(e)) from e


def decode(descriptor_string: str) -> MetadataDescriptor:
    """
    Decode a descriptor data URI.

    Raises:
        BadPrefixError: Not a JSON data URI
        BadBase64Error: Prefix matched but the payload is not base64
        MalformedJsonError: Payload is not UTF-8 JSON shaped like a descriptor
    """
    raw = _b64decode(_strip_prefix(descriptor_string, JSON_URI_PREFIX))

    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedJsonError(str(e)) from e

    if not isinstance(data, dict):
        raise MalformedJsonError(f"expected a JSON object, got {type(data).__name__}")

    try:
        descriptor = MetadataDescriptor.model_validate(data)
    except ValidationError as e:
        raise MalformedJsonError(f"not a descriptor: {e.error_count()} validation error(s)") from e

    log_codec(logger, "decode", details=f"name={descriptor.name}")
    return descriptor


def decode_image(image_uri: str) -> str:
    """
    Recover the SVG markup from an image data URI.

    Raises the same DecodeError subclasses as decode().
    """
    raw = _b64decode(_strip_prefix(image_uri, SVG_URI_PREFIX))
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedJsonError(f"image payload is not UTF-8: {e}") from e
