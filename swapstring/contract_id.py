"""
Swap String SDK - Contract Identifiers

RGB contract identifiers: 32 opaque bytes, shown to humans as
"rgb:" + base58 (Bitcoin alphabet).

Wallets often display the base58 body in dash-separated chunks
(e.g. "rgb:2dkSTbr-jFhznbPmo-..."); the decoder accepts both forms,
the encoder always emits the plain one.
"""

from dataclasses import dataclass

CONTRACT_ID_LEN = 32
CONTRACT_ID_PREFIX = "rgb:"
CHUNK_SEPARATOR = "-"

_BASE58_ALPHABET = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'
_BASE58_INDEX = {c: i for i, c in enumerate(_BASE58_ALPHABET)}


class ContractIdError(ValueError):
    """Text is not a valid contract identifier."""
    def __init__(self, text: str, message: str):
        self.text = text
        self.message = message
        super().__init__(f"Invalid contract id {text!r}: {message}")


def _base58_encode(data: bytes) -> str:
    """Base58 encode raw bytes."""
    n = int.from_bytes(data, 'big')
    result = ''
    while n > 0:
        n, r = divmod(n, 58)
        result = _BASE58_ALPHABET[r] + result
    for byte in data:
        if byte == 0:
            result = _BASE58_ALPHABET[0] + result
        else:
            break
    return result


def _base58_decode(text: str) -> bytes:
    """Base58 decode to raw bytes. Raises KeyError on a non-alphabet char."""
    n = 0
    for c in text:
        n = n * 58 + _BASE58_INDEX[c]
    body = n.to_bytes((n.bit_length() + 7) // 8, 'big') if n else b''
    zeros = len(text) - len(text.lstrip(_BASE58_ALPHABET[0]))
    return b'\x00' * zeros + body


@dataclass(frozen=True)
class ContractId:
    """Identifier of an RGB contract (a ledger-tracked asset)."""
    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, bytes) or len(self.raw) != CONTRACT_ID_LEN:
            raise ContractIdError(repr(self.raw), f"must be exactly {CONTRACT_ID_LEN} bytes")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "ContractId":
        return cls(bytes(raw))

    @classmethod
    def from_str(cls, text: str) -> "ContractId":
        """
        Decode a contract identifier.

        Args:
            text: "rgb:<base58>" or bare "<base58>", optionally chunked with "-"

        Returns:
            ContractId

        Raises:
            ContractIdError: If the text is not a canonical identifier
        """
        body = text[len(CONTRACT_ID_PREFIX):] if text.startswith(CONTRACT_ID_PREFIX) else text
        if body.startswith(CHUNK_SEPARATOR) or body.endswith(CHUNK_SEPARATOR) \
                or CHUNK_SEPARATOR * 2 in body:
            raise ContractIdError(text, "misplaced chunk separator")
        body = body.replace(CHUNK_SEPARATOR, "")
        if not body:
            raise ContractIdError(text, "empty identifier")

        try:
            raw = _base58_decode(body)
        except KeyError as e:
            raise ContractIdError(text, f"invalid base58 character {e.args[0]!r}") from None

        if len(raw) != CONTRACT_ID_LEN:
            raise ContractIdError(text, f"decodes to {len(raw)} bytes, expected {CONTRACT_ID_LEN}")
        return cls(raw)

    def hex(self) -> str:
        return self.raw.hex()

    def to_string(self) -> str:
        """Canonical text form."""
        return CONTRACT_ID_PREFIX + _base58_encode(self.raw)

    def __str__(self) -> str:
        return self.to_string()


def encode_contract_id(contract_id: ContractId) -> str:
    return contract_id.to_string()


def decode_contract_id(text: str) -> ContractId:
    return ContractId.from_str(text)
