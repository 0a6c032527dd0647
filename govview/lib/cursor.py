import base64
import hashlib
import json
import re
from typing import Any, TypedDict, Union

from govview.lib.errors import MalformedCursor

TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+={0,2}$")
MAX_TOKEN_LENGTH = 512


class CursorPayload(TypedDict):
    q: str               # fingerprint of the query the token was minted for
    p: Union[str, int]   # last proposalId (proposals) or last index (votes)


def query_fingerprint(endpoint: str, **filters: Any) -> str:
    """Short digest of an endpoint and its filter set. Page size is not part of it."""
    raw = json.dumps({"endpoint": endpoint, **filters}, sort_keys=True, default=str)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]


def is_well_formed(cursor: str) -> bool:
    return 0 < len(cursor) <= MAX_TOKEN_LENGTH and TOKEN_PATTERN.match(cursor) is not None


def encode_cursor(payload: CursorPayload) -> str:
    json_str = json.dumps(payload, separators=(",", ":"))
    return base64.urlsafe_b64encode(json_str.encode("utf-8")).decode("utf-8")


def decode_cursor(cursor: str) -> CursorPayload:
    if not is_well_formed(cursor):
        raise MalformedCursor(f"Cursor has an invalid shape: {cursor!r}")
    try:
        decoded = base64.urlsafe_b64decode(cursor.encode("utf-8")).decode("utf-8")
        payload = json.loads(decoded)
    except ValueError as err:
        raise MalformedCursor(f"Cursor could not be decoded: {err}") from err

    if not isinstance(payload, dict) or set(payload) != {"q", "p"}:
        raise MalformedCursor("Cursor payload must have exactly the keys q and p")
    position = payload["p"]
    if not isinstance(payload["q"], str) or isinstance(position, bool) or not isinstance(position, (str, int)):
        raise MalformedCursor("Cursor payload has unexpected value types")
    return payload
