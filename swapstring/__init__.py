"""
Swap String SDK

Textual swap offers for RGB <-> Lightning atomic swaps.

Architecture:
  - A swap string is the out-of-band offer (pasted in chat, a CLI, ...)
  - This SDK decodes and validates it into an immutable SwapString
  - Routing, HTLCs and settlement belong to the swap executor, not here

Layouts:
  - two-sided: qty_from/from_asset/qty_to/to_asset/expiry/payment_hash
  - priced:    amount/contract_id/buy|sell/price/expiry/payment_hash

Usage:
    from swapstring import parse_swap, parse_priced_swap, SwapStringError

    offer = parse_swap("100/btc/5000/rgb:.../1700000000/" + "aa" * 32)
    offer.swap.from_btc()        # True

    priced = parse_priced_swap("100/rgb:.../buy/5/600/" + "aa" * 32)
    priced.swap.amount_in_base_units()   # 500
    priced.swap.opposite()               # Direction(SELL, 100, 500)
"""

from .contract_id import ContractId, ContractIdError, decode_contract_id, encode_contract_id
from .swap_types import (
    AssetRef, Direction, PaymentHash, PricedSwap, Swap, SwapLayout,
    SwapSide, SwapString, SwapType, U64_MAX,
)
from .swap_parser import (
    ErrorKind,
    SwapStringError,
    WrongFieldCountError,
    FieldParseError,
    InvalidSwapTypeError,
    SwapDomainError,
    ZeroQuantityError,
    SameAssetError,
    PriceOverflowError,
    parse_swap_string,
    parse_swap,
    parse_priced_swap,
    detect_layout,
    try_parse_swap_string,
)
from .swap_maker import generate_preimage, make_swap_string, make_priced_swap_string

__version__ = "0.1.0"
__all__ = [
    # Types
    "ContractId", "AssetRef", "Direction", "PaymentHash", "PricedSwap",
    "Swap", "SwapLayout", "SwapSide", "SwapString", "SwapType", "U64_MAX",
    # Codec
    "ContractIdError", "decode_contract_id", "encode_contract_id",
    # Parser
    "parse_swap_string", "parse_swap", "parse_priced_swap",
    "detect_layout", "try_parse_swap_string",
    # Errors
    "ErrorKind", "SwapStringError", "WrongFieldCountError", "FieldParseError",
    "InvalidSwapTypeError", "SwapDomainError", "ZeroQuantityError",
    "SameAssetError", "PriceOverflowError",
    # Maker
    "generate_preimage", "make_swap_string", "make_priced_swap_string",
]
