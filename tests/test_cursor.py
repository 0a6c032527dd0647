"""
Tests for the pagination cursor codec.
"""

import base64

import pytest

from govview.lib.cursor import (
    MAX_TOKEN_LENGTH,
    decode_cursor,
    encode_cursor,
    is_well_formed,
    query_fingerprint,
)
from govview.lib.errors import MalformedCursor


def _raw_token(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("utf-8")


def test_round_trip_proposal_position():
    payload = {"q": query_fingerprint("proposals", status="all"), "p": "a1" * 32}
    assert decode_cursor(encode_cursor(payload)) == payload


def test_round_trip_vote_index():
    payload = {"q": query_fingerprint("votes", cycle=-1), "p": 3}
    assert decode_cursor(encode_cursor(payload)) == payload


def test_tokens_are_url_safe_and_well_formed():
    token = encode_cursor({"q": "f" * 16, "p": "?&/+" * 10})
    assert is_well_formed(token)
    assert "+" not in token and "/" not in token


@pytest.mark.parametrize(
    "token",
    ["", "not a token", "abc$", "a" * (MAX_TOKEN_LENGTH + 1), "abc==="],
)
def test_shape_check_rejects(token):
    assert not is_well_formed(token)
    with pytest.raises(MalformedCursor):
        decode_cursor(token)


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[1, 2]",
        '{"q": "x"}',
        '{"q": "x", "p": 1, "extra": true}',
        '{"q": 1, "p": 1}',
        '{"q": "x", "p": true}',
        '{"q": "x", "p": [1]}',
    ],
)
def test_decode_rejects_unexpected_payloads(text):
    with pytest.raises(MalformedCursor):
        decode_cursor(_raw_token(text))


def test_decode_rejects_bad_base64():
    with pytest.raises(MalformedCursor):
        decode_cursor("a")


def test_fingerprint_depends_on_filters_not_order():
    a = query_fingerprint("proposals", status="voting", type="cfp", cycle=0)
    b = query_fingerprint("proposals", cycle=0, type="cfp", status="voting")
    c = query_fingerprint("proposals", status="voting", type="voc", cycle=0)
    d = query_fingerprint("votes", status="voting", type="cfp", cycle=0)
    assert a == b
    assert a != c
    assert a != d
