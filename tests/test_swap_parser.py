"""
Tests for the swap string parser.
"""

import pytest

from swapstring import (
    AssetRef, Direction, ErrorKind, FieldParseError, InvalidSwapTypeError,
    PriceOverflowError, SameAssetError, SwapLayout, SwapStringError, SwapType,
    U64_MAX, WrongFieldCountError, ZeroQuantityError,
    detect_layout, parse_priced_swap, parse_swap, parse_swap_string,
    try_parse_swap_string,
)


def _two_sided(qty_from="100", from_asset="btc", qty_to="5000", to_asset="",
               expiry="600", payment_hash="aa" * 32):
    return "/".join([qty_from, from_asset, qty_to, to_asset, expiry, payment_hash])


def _priced(amount="100", contract_id="", side="buy", price="5",
            expiry="600", payment_hash="aa" * 32):
    return "/".join([amount, contract_id, side, price, expiry, payment_hash])


# ═══════════════════════════════════════════════════════════════════════════════
# TWO-SIDED LAYOUT
# ═══════════════════════════════════════════════════════════════════════════════

class TestTwoSided:

    def test_btc_to_asset(self, asset, contract_id, payment_hash_hex):
        offer = parse_swap(_two_sided(to_asset=asset))

        assert offer.layout is SwapLayout.TWO_SIDED
        assert offer.swap.qty_from == 100
        assert offer.swap.qty_to == 5000
        assert offer.swap.from_asset == AssetRef.native()
        assert offer.swap.to_asset == AssetRef(contract_id)
        assert offer.swap.from_btc()
        assert not offer.swap.to_btc()
        assert offer.expiry == 600
        assert offer.payment_hash.hex() == payment_hash_hex

    def test_asset_to_asset(self, asset, other_asset):
        offer = parse_swap(_two_sided(from_asset=asset, to_asset=other_asset))
        assert not offer.swap.from_btc()
        assert not offer.swap.to_btc()
        assert not offer.swap.same_asset()

    def test_semantic_round_trip(self, asset):
        text = _two_sided(from_asset=asset, to_asset="btc", expiry="1700000000")
        offer = parse_swap(text)
        again = parse_swap(offer.to_string())
        assert again == offer
        assert offer.to_string() == text

    def test_chunked_contract_id_round_trips_semantically(self, asset, contract_id):
        body = asset[len("rgb:"):]
        chunked = "rgb:" + body[:7] + "-" + body[7:]
        offer = parse_swap(_two_sided(to_asset=chunked))
        assert offer.swap.to_asset.contract_id == contract_id
        assert parse_swap(offer.to_string()) == offer

    def test_u64_max_accepted(self, asset):
        offer = parse_swap(_two_sided(qty_from=str(U64_MAX), to_asset=asset, expiry=str(U64_MAX)))
        assert offer.swap.qty_from == U64_MAX
        assert offer.expiry == U64_MAX

    def test_leading_zeros_accepted(self, asset):
        assert parse_swap(_two_sided(qty_from="007", to_asset=asset)).swap.qty_from == 7

    def test_uppercase_hex_accepted(self, asset):
        offer = parse_swap(_two_sided(to_asset=asset, payment_hash="AB" * 32))
        assert offer.payment_hash.value == b"\xab" * 32

    def test_priced_string_rejected_as_two_sided(self, asset):
        with pytest.raises(FieldParseError) as exc:
            parse_swap(_priced(contract_id=asset))
        assert exc.value.field == "qty_to"


# ═══════════════════════════════════════════════════════════════════════════════
# STRUCTURAL ERRORS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("text,count", [
    ("", 1),
    ("100", 1),
    ("100/btc/5000/btc/600", 5),
    ("100/btc/5000/btc/600/" + "aa" * 32 + "/", 7),
    ("100/btc/5000/btc/600/" + "aa" * 32 + "/extra", 7),
    ("/////////", 10),
])
@pytest.mark.parametrize("layout", list(SwapLayout))
def test_wrong_field_count(text, count, layout):
    with pytest.raises(WrongFieldCountError) as exc:
        parse_swap_string(text, layout)
    assert exc.value.kind is ErrorKind.STRUCTURAL
    assert exc.value.count == count
    assert exc.value.reason == "Wrong number of parts"


def test_structural_error_shadows_field_errors():
    with pytest.raises(WrongFieldCountError):
        parse_swap("x/y/z")


# ═══════════════════════════════════════════════════════════════════════════════
# SYNTACTIC ERRORS
# ═══════════════════════════════════════════════════════════════════════════════

BAD_NUMBERS = [
    "",
    "abc",
    "-1",
    "+5",
    " 5",
    "5 ",
    "1_000",
    "1.0",
    "0x10",
    "５",
    str(U64_MAX + 1),
    "9" * 30,
]


@pytest.mark.parametrize("value", BAD_NUMBERS)
@pytest.mark.parametrize("field,index", [("qty_from", 0), ("qty_to", 2), ("expiry", 4)])
def test_bad_numeric_field(asset, value, field, index):
    parts = _two_sided(to_asset=asset).split("/")
    parts[index] = value
    with pytest.raises(FieldParseError) as exc:
        parse_swap("/".join(parts))
    err = exc.value
    assert err.kind is ErrorKind.SYNTACTIC
    assert err.reason == "Unable to parse"
    assert err.field == field
    assert err.index == index
    assert err.value == value


@pytest.mark.parametrize("value", BAD_NUMBERS)
@pytest.mark.parametrize("field,index", [("amount", 0), ("price", 3), ("expiry", 4)])
def test_bad_numeric_field_priced(asset, value, field, index):
    parts = _priced(contract_id=asset).split("/")
    parts[index] = value
    with pytest.raises(FieldParseError) as exc:
        parse_priced_swap("/".join(parts))
    err = exc.value
    assert not isinstance(err, InvalidSwapTypeError)
    assert err.kind is ErrorKind.SYNTACTIC
    assert err.reason == "Unable to parse"
    assert err.field == field
    assert err.index == index
    assert err.value == value


@pytest.mark.parametrize("layout", ["two-sided", None, 0])
def test_unknown_layout_rejected(asset, layout):
    with pytest.raises(ValueError, match="Unsupported layout"):
        parse_swap_string(_two_sided(to_asset=asset), layout)


@pytest.mark.parametrize("value", ["BTC", "eth", "rgb:", "rgb:0000", " btc"])
def test_bad_asset_field(value):
    with pytest.raises(FieldParseError) as exc:
        parse_swap(_two_sided(to_asset=value))
    assert exc.value.field == "to_asset"
    assert exc.value.index == 3


@pytest.mark.parametrize("payment_hash", [
    "aa" * 31 + "a",
    "aa" * 32 + "a",
    "aa" * 31,
    "aa" * 33,
    "zz" * 32,
    "",
    " " + "aa" * 31 + "a",
])
def test_bad_payment_hash(asset, payment_hash):
    with pytest.raises(FieldParseError) as exc:
        parse_swap(_two_sided(to_asset=asset, payment_hash=payment_hash))
    assert exc.value.field == "payment_hash"
    assert exc.value.reason == "Unable to parse"


def test_left_most_failing_field_reported():
    with pytest.raises(FieldParseError) as exc:
        parse_swap(_two_sided(qty_from="x", to_asset="nope", payment_hash="zz"))
    assert exc.value.field == "qty_from"


def test_syntactic_error_shadows_domain_error():
    # zero quantity and identical assets, but the hash is malformed
    with pytest.raises(FieldParseError):
        parse_swap(_two_sided(qty_from="0", to_asset="btc", payment_hash="aa"))


# ═══════════════════════════════════════════════════════════════════════════════
# DOMAIN ERRORS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("overrides", [
    {"qty_from": "0"},
    {"qty_to": "0"},
    {"expiry": "0"},
    {"qty_from": "000"},
])
def test_zero_quantity_or_expiry(asset, overrides):
    with pytest.raises(ZeroQuantityError) as exc:
        parse_swap(_two_sided(to_asset=asset, **overrides))
    assert exc.value.kind is ErrorKind.DOMAIN
    assert exc.value.reason == "Quantities and expiry should be non-zero"


def test_zero_check_runs_before_same_asset_check():
    with pytest.raises(ZeroQuantityError):
        parse_swap(_two_sided(qty_to="0", to_asset="btc"))


def test_both_btc_rejected():
    with pytest.raises(SameAssetError) as exc:
        parse_swap(_two_sided(to_asset="btc"))
    assert exc.value.kind is ErrorKind.DOMAIN
    assert exc.value.reason == "From and to assets should be different"


def test_same_contract_rejected(asset):
    with pytest.raises(SameAssetError):
        parse_swap(_two_sided(from_asset=asset, to_asset=asset))


def test_same_contract_in_different_spellings_rejected(asset):
    bare = asset[len("rgb:"):]
    with pytest.raises(SameAssetError):
        parse_swap(_two_sided(from_asset=asset, to_asset=bare))


def test_all_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse_swap(_two_sided(to_asset="btc"))


# ═══════════════════════════════════════════════════════════════════════════════
# PRICED LAYOUT
# ═══════════════════════════════════════════════════════════════════════════════

class TestPriced:

    def test_buy(self, asset, contract_id):
        offer = parse_priced_swap(_priced(contract_id=asset))

        assert offer.layout is SwapLayout.PRICED
        assert offer.swap.contract_id == contract_id
        assert offer.swap.direction == Direction(SwapType.BUY, 100, 500)
        assert offer.swap.amount_in_base_units() == 500
        assert offer.swap.asset_quantity() == 100
        assert offer.expiry == 600

    def test_sell_opposite(self, asset):
        offer = parse_priced_swap(_priced(contract_id=asset, side="sell"))
        assert offer.swap.direction.is_sell()
        opposite = offer.swap.opposite()
        assert opposite == Direction(SwapType.BUY, 100, 500)
        # the offer itself is unchanged
        assert offer.swap.direction.is_sell()

    def test_round_trip(self, asset):
        text = _priced(contract_id=asset, side="sell", price="21")
        offer = parse_priced_swap(text)
        assert offer.to_string() == text
        assert parse_priced_swap(offer.to_string()) == offer

    @pytest.mark.parametrize("side", ["BUY", "Buy", "sell ", " buy", "", "bid", "0"])
    def test_invalid_side(self, asset, side):
        with pytest.raises(InvalidSwapTypeError) as exc:
            parse_priced_swap(_priced(contract_id=asset, side=side))
        err = exc.value
        assert err.reason == "Invalid swap type"
        assert err.kind is ErrorKind.SYNTACTIC
        assert err.field == "side"
        assert err.index == 2
        assert err.value == side

    def test_side_checked_after_other_fields(self, asset):
        with pytest.raises(FieldParseError) as exc:
            parse_priced_swap(_priced(contract_id=asset, side="BUY", payment_hash="aa"))
        assert not isinstance(exc.value, InvalidSwapTypeError)
        assert exc.value.field == "payment_hash"

    def test_invalid_side_shadows_zero_price(self, asset):
        with pytest.raises(InvalidSwapTypeError):
            parse_priced_swap(_priced(contract_id=asset, side="hold", price="0"))

    def test_btc_is_not_a_contract_id(self):
        with pytest.raises(FieldParseError) as exc:
            parse_priced_swap(_priced(contract_id="btc"))
        assert exc.value.field == "contract_id"
        assert exc.value.index == 1

    def test_bad_price(self, asset):
        with pytest.raises(FieldParseError) as exc:
            parse_priced_swap(_priced(contract_id=asset, price="1e3"))
        assert exc.value.field == "price"
        assert exc.value.index == 3

    @pytest.mark.parametrize("overrides", [{"amount": "0"}, {"price": "0"}, {"expiry": "0"}])
    def test_zero_values(self, asset, overrides):
        with pytest.raises(ZeroQuantityError):
            parse_priced_swap(_priced(contract_id=asset, **overrides))

    def test_product_overflow(self, asset):
        with pytest.raises(PriceOverflowError) as exc:
            parse_priced_swap(_priced(contract_id=asset, amount=str(U64_MAX), price="2"))
        assert exc.value.kind is ErrorKind.DOMAIN

    def test_product_at_u64_max(self, asset):
        offer = parse_priced_swap(_priced(contract_id=asset, amount=str(U64_MAX), price="1"))
        assert offer.swap.amount_in_base_units() == U64_MAX


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def test_detect_layout(asset):
    assert detect_layout(_priced(contract_id=asset)) is SwapLayout.PRICED
    assert detect_layout(_priced(contract_id=asset, side="sell")) is SwapLayout.PRICED
    assert detect_layout(_two_sided(to_asset=asset)) is SwapLayout.TWO_SIDED
    assert detect_layout("") is SwapLayout.TWO_SIDED


def test_try_parse(asset):
    assert try_parse_swap_string(_two_sided(to_asset=asset)) is not None
    assert try_parse_swap_string(_two_sided(to_asset="btc")) is None
    assert try_parse_swap_string("garbage", SwapLayout.PRICED) is None


def test_parse_is_deterministic(asset):
    text = _priced(contract_id=asset)
    assert parse_priced_swap(text) == parse_priced_swap(text)


def test_non_string_input():
    with pytest.raises(TypeError):
        parse_swap(b"100/btc/5000/btc/600/aa")


def test_error_message_includes_reason_and_field():
    with pytest.raises(SwapStringError) as exc:
        parse_swap(_two_sided(qty_from="x", to_asset="btc"))
    assert str(exc.value).startswith("Unable to parse: field 0 (qty_from)")
