"""
Swap String SDK - Parser

Turns an untrusted swap string into a validated SwapString.

Layouts (6 "/"-separated fields, no whitespace, case-sensitive):
  two-sided: <qty_from>/<from_asset>/<qty_to>/<to_asset>/<expiry>/<payment_hash>
  priced:    <amount>/<contract_id>/<buy|sell>/<price>/<expiry>/<payment_hash>

Checks run in a fixed order and the first failure wins:
  1. structural  - field count
  2. syntactic   - each field decodes to its type (left-most failure reported;
                   the side token is checked last)
  3. domain      - non-zero quantities/expiry, distinct assets, u64 product
"""

import logging
import re
from enum import Enum
from typing import Optional

from .contract_id import ContractId, ContractIdError
from .swap_types import (
    AssetRef, Direction, PaymentHash, PricedSwap, Swap, SwapLayout,
    SwapString, SwapType, NATIVE_TOKEN, SEPARATOR, U64_MAX,
)

log = logging.getLogger(__name__)

FIELD_COUNT = 6

TWO_SIDED_FIELDS = ("qty_from", "from_asset", "qty_to", "to_asset", "expiry", "payment_hash")
PRICED_FIELDS = ("amount", "contract_id", "side", "price", "expiry", "payment_hash")

_DIGITS_RE = re.compile(r"[0-9]+")
_HASH_RE = re.compile(r"[0-9a-fA-F]{64}")


# ═══════════════════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════════════════

class ErrorKind(Enum):
    """Error class, in the order the checks run"""
    STRUCTURAL = "structural"
    SYNTACTIC = "syntactic"
    DOMAIN = "domain"


class SwapStringError(ValueError):
    """Swap string rejected. `reason` is stable and safe to show to users."""
    kind: ErrorKind = ErrorKind.SYNTACTIC
    reason: str = "Invalid swap string"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"{self.reason}: {detail}" if detail else self.reason)


class WrongFieldCountError(SwapStringError):
    kind = ErrorKind.STRUCTURAL
    reason = "Wrong number of parts"

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"expected {FIELD_COUNT} fields, got {count}")


class FieldParseError(SwapStringError):
    kind = ErrorKind.SYNTACTIC
    reason = "Unable to parse"

    def __init__(self, field: str, index: int, value: str, message: str = ""):
        self.field = field
        self.index = index
        self.value = value
        detail = f"field {index} ({field})"
        if message:
            detail += f": {message}"
        super().__init__(detail)


class InvalidSwapTypeError(FieldParseError):
    reason = "Invalid swap type"

    def __init__(self, value: str):
        super().__init__("side", PRICED_FIELDS.index("side"), value,
                         f"expected 'buy' or 'sell', got {value!r}")


class SwapDomainError(SwapStringError):
    kind = ErrorKind.DOMAIN


class ZeroQuantityError(SwapDomainError):
    reason = "Quantities and expiry should be non-zero"


class SameAssetError(SwapDomainError):
    reason = "From and to assets should be different"


class PriceOverflowError(SwapDomainError):
    reason = "Amount times price overflows 64 bits"


# ═══════════════════════════════════════════════════════════════════════════════
# FIELD DECODERS
# ═══════════════════════════════════════════════════════════════════════════════

def _parse_u64(fields: list, index: int, names: tuple) -> int:
    value = fields[index]
    if not _DIGITS_RE.fullmatch(value):
        raise FieldParseError(names[index], index, value, "not a base-10 unsigned integer")
    n = int(value)
    if n > U64_MAX:
        raise FieldParseError(names[index], index, value, "does not fit in 64 bits")
    return n


def _parse_asset(fields: list, index: int, names: tuple) -> AssetRef:
    value = fields[index]
    try:
        return AssetRef.from_str(value)
    except ContractIdError as e:
        raise FieldParseError(names[index], index, value, e.message) from e


def _parse_contract_id(fields: list, index: int, names: tuple) -> ContractId:
    value = fields[index]
    if value == NATIVE_TOKEN:
        raise FieldParseError(names[index], index, value, "priced swaps need an RGB contract id")
    try:
        return ContractId.from_str(value)
    except ContractIdError as e:
        raise FieldParseError(names[index], index, value, e.message) from e


def _parse_payment_hash(fields: list, index: int, names: tuple) -> PaymentHash:
    value = fields[index]
    if not _HASH_RE.fullmatch(value):
        raise FieldParseError(names[index], index, value,
                              f"expected 64 hex characters, got {len(value)} characters")
    return PaymentHash(bytes.fromhex(value))


def _split(text: str) -> list:
    fields = text.split(SEPARATOR)
    if len(fields) != FIELD_COUNT:
        raise WrongFieldCountError(len(fields))
    return fields


# ═══════════════════════════════════════════════════════════════════════════════
# LAYOUT PARSERS
# ═══════════════════════════════════════════════════════════════════════════════

def _parse_two_sided(fields: list) -> SwapString:
    names = TWO_SIDED_FIELDS
    qty_from = _parse_u64(fields, 0, names)
    from_asset = _parse_asset(fields, 1, names)
    qty_to = _parse_u64(fields, 2, names)
    to_asset = _parse_asset(fields, 3, names)
    expiry = _parse_u64(fields, 4, names)
    payment_hash = _parse_payment_hash(fields, 5, names)

    if qty_from == 0 or qty_to == 0 or expiry == 0:
        raise ZeroQuantityError("qty_from, qty_to and expiry must be positive")

    swap = Swap(qty_from=qty_from, qty_to=qty_to, from_asset=from_asset, to_asset=to_asset)
    if swap.same_asset():
        raise SameAssetError(str(from_asset))

    return SwapString(swap=swap, expiry=expiry, payment_hash=payment_hash)


def _parse_priced(fields: list) -> SwapString:
    names = PRICED_FIELDS
    amount = _parse_u64(fields, 0, names)
    contract_id = _parse_contract_id(fields, 1, names)
    price = _parse_u64(fields, 3, names)
    expiry = _parse_u64(fields, 4, names)
    payment_hash = _parse_payment_hash(fields, 5, names)

    side = fields[2]
    try:
        swap_type = SwapType(side)
    except ValueError:
        raise InvalidSwapTypeError(side) from None

    if amount == 0 or price == 0 or expiry == 0:
        raise ZeroQuantityError("amount, price and expiry must be positive")

    amount_in_base_units = amount * price
    if amount_in_base_units > U64_MAX:
        raise PriceOverflowError(f"{amount} * {price}")

    direction = Direction(swap_type, amount, amount_in_base_units)
    return SwapString(
        swap=PricedSwap(contract_id=contract_id, direction=direction),
        expiry=expiry,
        payment_hash=payment_hash,
    )


_LAYOUT_PARSERS = {
    SwapLayout.TWO_SIDED: _parse_two_sided,
    SwapLayout.PRICED: _parse_priced,
}


def _truncate(text: str, limit: int = 96) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def parse_swap_string(text: str, layout: SwapLayout = SwapLayout.TWO_SIDED) -> SwapString:
    """
    Parse and validate a swap string.

    Args:
        text: Untrusted swap string (callers should bound its length)
        layout: Expected layout

    Returns:
        Validated SwapString

    Raises:
        SwapStringError: Subclass identifying the first failed check
        ValueError: If layout is not a SwapLayout
    """
    if not isinstance(text, str):
        raise TypeError(f"Swap string must be str, got {type(text).__name__}")
    parse = _LAYOUT_PARSERS.get(layout)
    if parse is None:
        raise ValueError(f"Unsupported layout: {layout!r}. Supported: {[t.value for t in SwapLayout]}")
    try:
        return parse(_split(text))
    except SwapStringError as e:
        log.debug(f"Rejected {layout.value} swap string {_truncate(text)!r}: {e}")
        raise


def parse_swap(text: str) -> SwapString:
    """Parse a two-sided swap string."""
    return parse_swap_string(text, SwapLayout.TWO_SIDED)


def parse_priced_swap(text: str) -> SwapString:
    """Parse a priced (buy/sell) swap string."""
    return parse_swap_string(text, SwapLayout.PRICED)


def detect_layout(text: str) -> SwapLayout:
    """Guess the layout from the third field. Never raises."""
    fields = text.split(SEPARATOR)
    if len(fields) > 2 and fields[2] in (t.value for t in SwapType):
        return SwapLayout.PRICED
    return SwapLayout.TWO_SIDED


def try_parse_swap_string(text: str,
                          layout: SwapLayout = SwapLayout.TWO_SIDED) -> Optional[SwapString]:
    """Like parse_swap_string() but returns None on rejection."""
    try:
        return parse_swap_string(text, layout)
    except SwapStringError:
        return None
