"""
Swap String SDK - Data Types

Offer model for atomic swaps between a Lightning payment and an RGB asset
(or between two RGB assets). Values are immutable; the only trusted
producer is swap_parser.parse_swap_string().
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
import hashlib
import json

from .contract_id import ContractId

U64_MAX = 2**64 - 1
PAYMENT_HASH_LEN = 32
NATIVE_TOKEN = "btc"
SEPARATOR = "/"


class SwapLayout(Enum):
    """Swap string layout (both have 6 fields)"""
    TWO_SIDED = "two-sided"   # qty_from/from_asset/qty_to/to_asset/expiry/payment_hash
    PRICED = "priced"         # amount/contract_id/side/price/expiry/payment_hash


class SwapSide(Enum):
    """Side of a two-sided swap"""
    FROM = "from"
    TO = "to"


class SwapType(Enum):
    """Priced swap type, from the offering party's perspective.

    BUY = maker acquires the asset and pays sats,
    SELL = maker gives up the asset and receives sats.
    """
    BUY = "buy"
    SELL = "sell"

    def opposite(self) -> "SwapType":
        return SwapType.SELL if self is SwapType.BUY else SwapType.BUY


@dataclass(frozen=True)
class AssetRef:
    """
    One side of a swap: native BTC (contract_id is None) or an RGB asset.
    """
    contract_id: Optional[ContractId] = None

    @classmethod
    def native(cls) -> "AssetRef":
        return cls(None)

    @classmethod
    def from_str(cls, text: str) -> "AssetRef":
        """Decode "btc" or a contract id. Raises ContractIdError."""
        if text == NATIVE_TOKEN:
            return cls(None)
        return cls(ContractId.from_str(text))

    def is_native(self) -> bool:
        return self.contract_id is None

    def to_string(self) -> str:
        return NATIVE_TOKEN if self.contract_id is None else self.contract_id.to_string()

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class PaymentHash:
    """Lightning payment hash correlating the swap with an HTLC."""
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, bytes) or len(self.value) != PAYMENT_HASH_LEN:
            raise ValueError(f"Payment hash must be exactly {PAYMENT_HASH_LEN} bytes")

    @classmethod
    def from_preimage(cls, preimage: bytes) -> "PaymentHash":
        return cls(hashlib.sha256(preimage).digest())

    def hex(self) -> str:
        return self.value.hex()

    def verify_preimage(self, preimage: str) -> bool:
        """
        Verify that preimage matches this hash.

        Args:
            preimage: Claimed preimage (hex)

        Returns:
            True if SHA256(preimage) == hash
        """
        try:
            return hashlib.sha256(bytes.fromhex(preimage)).digest() == self.value
        except (ValueError, TypeError):
            return False

    def __str__(self) -> str:
        return self.hex()


@dataclass(frozen=True)
class Direction:
    """
    Priced swap direction with its quantities.

    amount_in_base_units = asset_amount * price, computed by the parser.
    """
    swap_type: SwapType
    asset_amount: int
    amount_in_base_units: int

    def __post_init__(self):
        if not isinstance(self.swap_type, SwapType):
            raise ValueError(f"Invalid swap type: {self.swap_type!r}")
        if self.asset_amount <= 0 or self.amount_in_base_units <= 0:
            raise ValueError("Asset amount and amount in base units must be positive")

    def opposite(self) -> "Direction":
        """Same amounts, seen from the counterparty."""
        return Direction(self.swap_type.opposite(), self.asset_amount, self.amount_in_base_units)

    def is_buy(self) -> bool:
        return self.swap_type is SwapType.BUY

    def is_sell(self) -> bool:
        return self.swap_type is SwapType.SELL

    @property
    def price(self) -> int:
        return self.amount_in_base_units // self.asset_amount


@dataclass(frozen=True)
class Swap:
    """Two-sided swap: qty_from of from_asset for qty_to of to_asset."""
    qty_from: int
    qty_to: int
    from_asset: AssetRef
    to_asset: AssetRef

    def same_asset(self) -> bool:
        return self.from_asset == self.to_asset

    def is_native(self, side: SwapSide) -> bool:
        asset = self.from_asset if side is SwapSide.FROM else self.to_asset
        return asset.is_native()

    def from_btc(self) -> bool:
        return self.is_native(SwapSide.FROM)

    def to_btc(self) -> bool:
        return self.is_native(SwapSide.TO)

    def fields(self) -> list:
        return [str(self.qty_from), str(self.from_asset), str(self.qty_to), str(self.to_asset)]

    def to_dict(self) -> dict:
        return {
            "qty_from": self.qty_from,
            "from_asset": str(self.from_asset),
            "qty_to": self.qty_to,
            "to_asset": str(self.to_asset),
        }


@dataclass(frozen=True)
class PricedSwap:
    """Priced swap of a single RGB asset against sats."""
    contract_id: ContractId
    direction: Direction

    def opposite(self) -> Direction:
        return self.direction.opposite()

    def amount_in_base_units(self) -> int:
        return self.direction.amount_in_base_units

    def asset_quantity(self) -> int:
        return self.direction.asset_amount

    def fields(self) -> list:
        d = self.direction
        return [str(d.asset_amount), str(self.contract_id), d.swap_type.value, str(d.price)]

    def to_dict(self) -> dict:
        d = self.direction
        return {
            "contract_id": str(self.contract_id),
            "side": d.swap_type.value,
            "asset_amount": d.asset_amount,
            "price": d.price,
            "amount_in_base_units": d.amount_in_base_units,
        }


@dataclass(frozen=True)
class SwapString:
    """
    Validated swap offer, as decoded from a swap string.

    Structure:
      - swap: Swap (two-sided layout) or PricedSwap (priced layout)
      - expiry: Positive time bound, enforced by the swap executor
      - payment_hash: 32-byte Lightning payment hash
    """
    swap: Union[Swap, PricedSwap]
    expiry: int
    payment_hash: PaymentHash

    @property
    def layout(self) -> SwapLayout:
        return SwapLayout.PRICED if isinstance(self.swap, PricedSwap) else SwapLayout.TWO_SIDED

    def to_string(self) -> str:
        """Re-derive the canonical swap string."""
        return SEPARATOR.join(self.swap.fields() + [str(self.expiry), self.payment_hash.hex()])

    def __str__(self) -> str:
        return self.to_string()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {"layout": self.layout.value}
        data.update(self.swap.to_dict())
        data["expiry"] = self.expiry
        data["payment_hash"] = self.payment_hash.hex()
        data["swap_string"] = self.to_string()
        return data

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: dict) -> "SwapString":
        """Rebuild from to_dict() output; goes through the parser."""
        from .swap_parser import parse_swap_string
        return parse_swap_string(data["swap_string"], SwapLayout(data.get("layout", "two-sided")))
