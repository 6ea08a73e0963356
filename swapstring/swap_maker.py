"""
Swap String SDK - Maker

Maker-side construction of new swap strings.

Flow:
  1. Maker generates preimage S and payment hash H = SHA256(S)
  2. Maker builds the swap string with H and expiry = now + timeout
  3. Swap string is shared out-of-band with the taker
  4. The swap executor later settles the Lightning HTLC with S

Expiry is only carried as data here; nothing in this module watches it.
"""

import logging
import secrets
import time
from typing import Optional, Tuple, Union

from .contract_id import ContractId
from .swap_parser import parse_swap_string
from .swap_types import (
    AssetRef, PaymentHash, SwapLayout, SwapString, SwapType, SEPARATOR,
)

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 24 * 60 * 60


def mask_secret(secret: str, visible_prefix: int = 8, visible_suffix: int = 4) -> str:
    """Mask a secret for safe logging. NEVER log full secrets/preimages/keys."""
    if not secret or len(secret) <= visible_prefix + visible_suffix:
        return "***"
    return f"{secret[:visible_prefix]}...{secret[-visible_suffix:]}"


def generate_preimage() -> Tuple[str, PaymentHash]:
    """
    Generate random preimage S and payment hash H = SHA256(S).

    Returns:
        (preimage_hex, payment_hash)
    """
    preimage = secrets.token_bytes(32)
    return preimage.hex(), PaymentHash.from_preimage(preimage)


def _expiry(timeout_sec: int, now: Optional[int]) -> int:
    if timeout_sec <= 0:
        raise ValueError(f"Timeout must be positive, got {timeout_sec}")
    if now is None:
        now = int(time.time())
    return now + timeout_sec


def _finish(fields: list, layout: SwapLayout,
            payment_hash: Optional[PaymentHash]) -> Tuple[SwapString, Optional[str]]:
    preimage = None
    if payment_hash is None:
        preimage, payment_hash = generate_preimage()
    text = SEPARATOR.join(fields + [payment_hash.hex()])
    swap_string = parse_swap_string(text, layout)

    log.info(f"New {layout.value} swap string, expiry {swap_string.expiry}, "
             f"payment hash {mask_secret(payment_hash.hex())}")
    return swap_string, preimage


def make_swap_string(qty_from: int, from_asset: Union[AssetRef, str],
                     qty_to: int, to_asset: Union[AssetRef, str],
                     timeout_sec: int = DEFAULT_TIMEOUT_SEC,
                     now: Optional[int] = None,
                     payment_hash: Optional[PaymentHash] = None
                     ) -> Tuple[SwapString, Optional[str]]:
    """
    Build a two-sided swap string.

    Args:
        qty_from: Amount the maker sends
        from_asset: AssetRef or its text ("btc" / contract id)
        qty_to: Amount the maker receives
        to_asset: AssetRef or its text
        timeout_sec: Seconds until expiry
        now: Unix time to count from (default: current time)
        payment_hash: Existing hash; a fresh preimage is generated if omitted

    Returns:
        (swap_string, preimage_hex) - preimage is None when payment_hash was given

    Raises:
        SwapStringError: If the values do not form a valid swap
    """
    fields = [str(qty_from), str(from_asset), str(qty_to), str(to_asset),
              str(_expiry(timeout_sec, now))]
    return _finish(fields, SwapLayout.TWO_SIDED, payment_hash)


def make_priced_swap_string(amount: int, contract_id: Union[ContractId, str],
                            swap_type: Union[SwapType, str], price: int,
                            timeout_sec: int = DEFAULT_TIMEOUT_SEC,
                            now: Optional[int] = None,
                            payment_hash: Optional[PaymentHash] = None
                            ) -> Tuple[SwapString, Optional[str]]:
    """
    Build a priced swap string (amount of an RGB asset at price sats/unit).

    Returns:
        (swap_string, preimage_hex) - preimage is None when payment_hash was given

    Raises:
        SwapStringError: If the values do not form a valid swap
    """
    side = swap_type.value if isinstance(swap_type, SwapType) else str(swap_type)
    fields = [str(amount), str(contract_id), side, str(price),
              str(_expiry(timeout_sec, now))]
    return _finish(fields, SwapLayout.PRICED, payment_hash)
