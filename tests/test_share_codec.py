"""Tests for share token encoding and decoding."""

import base64
import json
import re
from urllib.parse import quote

import pytest

from bowl_builder.domain.bowls import BowlConfiguration
from bowl_builder.domain.nutrients import ConstraintSet
from bowl_builder.services.share_codec import decode_bowl, encode_bowl


def _wrap(text: str) -> str:
    return base64.b64encode(quote(text, safe="").encode("ascii")).decode("ascii")


def test_round_trip_drops_zero_portions() -> None:
    bowl = BowlConfiguration(
        menu_id="grill",
        constraints=ConstraintSet(calories=650, fiber_g=12.5),
        portions={"steak": 2, "tofu": 0, "rice": 0.5},
        strict_mins=True,
    )

    decoded = decode_bowl(encode_bowl(bowl))

    assert decoded is not None
    assert decoded.menu_id == "grill"
    assert decoded.constraints == bowl.constraints.as_dict()
    assert decoded.portions == {"steak": 2, "rice": 0.5}
    assert decoded.strict_mins is True


def test_token_is_fragment_safe() -> None:
    bowl = BowlConfiguration(
        menu_id="café & bar/2", portions={"ingredient with spaces": 1}
    )

    token = encode_bowl(bowl)

    assert re.fullmatch(r"[A-Za-z0-9_-]+", token)
    decoded = decode_bowl(token)
    assert decoded is not None
    assert decoded.menu_id == "café & bar/2"
    assert decoded.portions == {"ingredient with spaces": 1}


def test_decode_accepts_leading_hash() -> None:
    token = encode_bowl(BowlConfiguration(menu_id="grill"))

    decoded = decode_bowl(f"#{token}")

    assert decoded is not None
    assert decoded.menu_id == "grill"


def test_decode_reads_unversioned_tokens() -> None:
    legacy = _wrap(
        json.dumps({"r": "grill", "c": {"calories": 500}, "p": {"steak": 1}, "m": 1})
    )

    decoded = decode_bowl(legacy)

    assert decoded is not None
    assert decoded.menu_id == "grill"
    assert decoded.constraints == {"calories": 500}
    assert decoded.portions == {"steak": 1}
    assert decoded.strict_mins is True


@pytest.mark.parametrize(
    "token",
    [
        None,
        "",
        "#",
        "not base64!",
        "ü",
        _wrap("not json"),
        _wrap("[1, 2]"),
        _wrap('{"v": 99, "r": "grill"}'),
        _wrap('{"r": "grill", "c": [1, 2]}'),
        base64.b64encode(b"%E0%A4%A").decode("ascii"),
        base64.b64encode(b"\xff\xfe").decode("ascii"),
    ],
)
def test_decode_returns_none_for_garbage(token: str | None) -> None:
    assert decode_bowl(token) is None
