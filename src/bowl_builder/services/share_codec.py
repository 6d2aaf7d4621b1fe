"""Encode and decode bowl configurations as shareable tokens.

A token is built in three layers: the payload is serialized as compact
JSON with sorted keys, percent-escaped, and wrapped in URL-safe base64
without padding. The payload carries a format version so future shapes
can be told apart; tokens without a version are read as version 1.
"""

import base64
import binascii
import json
import logging
from urllib.parse import quote, unquote

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bowl_builder.domain.bowls import BowlConfiguration, DecodedBowl

FORMAT_VERSION = 1
SUPPORTED_VERSIONS = frozenset({1})

_logger = logging.getLogger(__name__)


class SharePayload(BaseModel):
    """Wire shape of a version 1 share token."""

    model_config = ConfigDict(extra="ignore")

    v: int = FORMAT_VERSION
    r: object = None
    c: dict[str, object] = Field(default_factory=dict)
    p: dict[str, object] = Field(default_factory=dict)
    m: object = 0


def encode_bowl(bowl: BowlConfiguration) -> str:
    """Return a URL-fragment-safe token for a bowl configuration."""
    payload = {
        "v": FORMAT_VERSION,
        "r": bowl.menu_id,
        "c": bowl.constraints.as_dict(),
        "p": {
            ingredient_id: portion
            for ingredient_id, portion in bowl.portions.items()
            if portion != 0
        },
        "m": 1 if bowl.strict_mins else 0,
    }
    text = json.dumps(payload, separators=(",", ":"), sort_keys=True)
    escaped = quote(text, safe="")
    return base64.urlsafe_b64encode(escaped.encode("ascii")).decode("ascii").rstrip(
        "="
    )


def decode_bowl(token: str | None) -> DecodedBowl | None:
    """Decode a share token, returning None for anything unreadable."""
    if not token:
        return None
    raw = token.removeprefix("#").strip()
    if not raw:
        return None
    try:
        escaped = _unwrap(raw)
        text = unquote(escaped, errors="strict")
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("share payload is not an object")
        payload = SharePayload.model_validate(data)
    except (ValueError, RecursionError, ValidationError) as exc:
        _logger.warning("Could not parse share token: %s", exc)
        return None
    if payload.v not in SUPPORTED_VERSIONS:
        _logger.warning("Unsupported share token version: %s", payload.v)
        return None
    return DecodedBowl(
        menu_id=payload.r,
        constraints=payload.c,
        portions=payload.p,
        strict_mins=bool(payload.m),
    )


def _unwrap(raw: str) -> str:
    """Reverse the base64 envelope, accepting either alphabet."""
    normalized = raw.replace("+", "-").replace("/", "_")
    padded = normalized + "=" * (-len(normalized) % 4)
    try:
        data = base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 envelope: {exc}") from exc
    return data.decode("ascii")
