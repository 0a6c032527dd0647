from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union


LedgerRow = Dict[str, Any]

AMOUNT_QUANTUM = Decimal("0.00000001")


def get_string(obj: LedgerRow, key: str) -> Optional[str]:
    v = obj.get(key)
    if isinstance(v, str):
        return v
    if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
        return str(v)
    return None


def get_int(obj: LedgerRow, key: str) -> int:
    v = obj.get(key)
    if isinstance(v, bool):
        return 0
    if isinstance(v, (int, float, Decimal)):
        return int(v)
    if isinstance(v, str):
        try:
            return int(v)
        except ValueError:
            return 0
    return 0


def get_number(obj: LedgerRow, key: str) -> Optional[Union[int, float]]:
    """Numeric field as int when integral, float otherwise. None when missing."""
    v = obj.get(key)
    if v is None or isinstance(v, bool):
        return None
    try:
        d = Decimal(str(v))
    except InvalidOperation:
        return None
    if d == d.to_integral_value():
        return int(d)
    return float(d)


def get_amount(obj: LedgerRow, key: str) -> Optional[str]:
    """Coin amount rendered with 8 fractional digits, e.g. "1.23000000"."""
    v = obj.get(key)
    if v is None or isinstance(v, bool):
        return None
    try:
        return str(Decimal(str(v)).quantize(AMOUNT_QUANTUM))
    except InvalidOperation:
        return None
