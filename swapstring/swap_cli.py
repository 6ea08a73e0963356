#!/usr/bin/env python3
"""
Swap String CLI

Decode, validate and create swap strings.

Usage:
    # Decode a swap string
    swapstring parse "100/btc/5000/rgb:.../1700000000/<64 hex>"
    swapstring parse --layout priced --json "100/rgb:.../buy/5/1700000000/<64 hex>"

    # Validate one swap string per line (file or stdin)
    swapstring validate offers.txt

    # Create a new swap string (prints the preimage - keep it secret!)
    swapstring new --qty-from 100 --from-asset btc --qty-to 5000 --to-asset rgb:...
    swapstring new-priced --amount 100 --contract-id rgb:... --side buy --price 5

Configuration:
    Set environment variables (or a .env file), overridden by flags:
      SWAPSTRING_MAX_INPUT_LEN, SWAPSTRING_DEFAULT_LAYOUT,
      SWAPSTRING_DEFAULT_TIMEOUT, SWAPSTRING_LOG_LEVEL
"""

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .swap_maker import DEFAULT_TIMEOUT_SEC, make_priced_swap_string, make_swap_string
from .swap_parser import ErrorKind, SwapStringError, detect_layout, parse_swap_string
from .swap_types import SwapLayout

log = logging.getLogger(__name__)

LAYOUT_CHOICES = ["two-sided", "priced", "auto"]


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class Config:
    max_input_len: int = 1024
    default_layout: str = "two-sided"
    default_timeout_sec: int = DEFAULT_TIMEOUT_SEC
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Build config from environment (after loading .env)."""
        load_dotenv()
        config = cls(
            max_input_len=_env_int("SWAPSTRING_MAX_INPUT_LEN", cls.max_input_len),
            default_layout=os.getenv("SWAPSTRING_DEFAULT_LAYOUT", cls.default_layout),
            default_timeout_sec=_env_int("SWAPSTRING_DEFAULT_TIMEOUT", cls.default_timeout_sec),
            log_level=os.getenv("SWAPSTRING_LOG_LEVEL", cls.log_level).upper(),
        )
        if config.default_layout not in LAYOUT_CHOICES:
            raise ValueError(f"Invalid SWAPSTRING_DEFAULT_LAYOUT: {config.default_layout}. "
                             f"Supported: {LAYOUT_CHOICES}")
        if config.max_input_len <= 0:
            raise ValueError("SWAPSTRING_MAX_INPUT_LEN must be positive")
        if config.default_timeout_sec <= 0:
            raise ValueError("SWAPSTRING_DEFAULT_TIMEOUT must be positive")
        return config


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid {name}: {value!r} is not an integer") from None


class InputTooLongError(SwapStringError):
    kind = ErrorKind.STRUCTURAL
    reason = "Swap string too long"


def decode(text: str, layout: str, config: Config):
    """Bound the input length, then parse with the requested layout."""
    if len(text) > config.max_input_len:
        raise InputTooLongError(f"{len(text)} > {config.max_input_len} characters")
    resolved = detect_layout(text) if layout == "auto" else SwapLayout(layout)
    return parse_swap_string(text, resolved)


# ============ COMMANDS ============

def cmd_parse(args, config: Config) -> int:
    """Decode one swap string."""
    try:
        swap_string = decode(args.text, args.layout or config.default_layout, config)
    except SwapStringError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(swap_string.to_json())
        return 0

    data = swap_string.to_dict()
    print(f"Swap string ({data.pop('layout')}):")
    data.pop("swap_string")
    for key, value in data.items():
        print(f"  {key}: {value}")
    return 0


def cmd_validate(args, config: Config) -> int:
    """Validate one swap string per line."""
    try:
        stream = open(args.file, "r", errors="replace") if args.file else sys.stdin
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    failures = 0
    total = 0
    try:
        for line in stream:
            text = line.rstrip("\r\n")
            if not text:
                continue
            total += 1
            try:
                decode(text, args.layout or config.default_layout, config)
                print("OK")
            except SwapStringError as e:
                failures += 1
                print(f"ERR {e.kind.value} {e}")
    finally:
        if stream is not sys.stdin:
            stream.close()

    log.info(f"Validated {total} swap string(s), {failures} rejected")
    return 1 if failures else 0


def _print_new(swap_string, preimage: Optional[str], as_json: bool):
    if as_json:
        data = swap_string.to_dict()
        data["preimage"] = preimage
        print(json.dumps(data, indent=2))
        return
    print(swap_string.to_string())
    print(f"preimage: {preimage}")


def cmd_new(args, config: Config) -> int:
    """Create a two-sided swap string."""
    try:
        swap_string, preimage = make_swap_string(
            args.qty_from, args.from_asset, args.qty_to, args.to_asset,
            timeout_sec=args.timeout if args.timeout is not None else config.default_timeout_sec,
        )
    except (SwapStringError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    _print_new(swap_string, preimage, args.json)
    return 0


def cmd_new_priced(args, config: Config) -> int:
    """Create a priced swap string."""
    try:
        swap_string, preimage = make_priced_swap_string(
            args.amount, args.contract_id, args.side, args.price,
            timeout_sec=args.timeout if args.timeout is not None else config.default_timeout_sec,
        )
    except (SwapStringError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    _print_new(swap_string, preimage, args.json)
    return 0


# ============ MAIN ============

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="RGB/Lightning swap string tool")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level (default: SWAPSTRING_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Decode a swap string")
    parse_parser.add_argument("text", help="Swap string")
    parse_parser.add_argument("--layout", choices=LAYOUT_CHOICES, help="Swap string layout")
    parse_parser.add_argument("--json", action="store_true", help="Print as JSON")

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate swap strings, one per line")
    validate_parser.add_argument("file", nargs="?", help="Input file (default: stdin)")
    validate_parser.add_argument("--layout", choices=LAYOUT_CHOICES, help="Swap string layout")

    # new command
    new_parser = subparsers.add_parser("new", help="Create a two-sided swap string")
    new_parser.add_argument("--qty-from", type=int, required=True, help="Amount sent by maker")
    new_parser.add_argument("--from-asset", required=True, help="'btc' or contract id")
    new_parser.add_argument("--qty-to", type=int, required=True, help="Amount received by maker")
    new_parser.add_argument("--to-asset", required=True, help="'btc' or contract id")
    new_parser.add_argument("--timeout", type=int, help="Seconds until expiry")
    new_parser.add_argument("--json", action="store_true", help="Print as JSON")

    # new-priced command
    priced_parser = subparsers.add_parser("new-priced", help="Create a priced swap string")
    priced_parser.add_argument("--amount", type=int, required=True, help="Asset amount")
    priced_parser.add_argument("--contract-id", required=True, help="RGB contract id")
    priced_parser.add_argument("--side", choices=["buy", "sell"], required=True, help="Maker side")
    priced_parser.add_argument("--price", type=int, required=True, help="Sats per asset unit")
    priced_parser.add_argument("--timeout", type=int, help="Seconds until expiry")
    priced_parser.add_argument("--json", action="store_true", help="Print as JSON")

    return parser


COMMANDS = {
    "parse": cmd_parse,
    "validate": cmd_validate,
    "new": cmd_new,
    "new-priced": cmd_new_priced,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = Config.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, args.log_level or config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 2
    return command(args, config)


if __name__ == "__main__":
    sys.exit(main())
