"""
Address data model.

32-byte identities used for owners, the program and storage segments.
"""

import hashlib
from dataclasses import dataclass

ADDRESS_LEN = 32


@dataclass(frozen=True)
class Address:
    """
    A 32-byte address.
    Rendered as lowercase hex in logs, the CLI and the persisted ledger.
    """
    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, (bytes, bytearray)):
            raise TypeError(f"Address must be bytes, got {type(self.raw).__name__}")
        if len(self.raw) != ADDRESS_LEN:
            raise ValueError(f"Invalid address length: {len(self.raw)}. Must be {ADDRESS_LEN}")
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_hex(cls, value: str) -> "Address":
        """Parse a 64-character hex string."""
        try:
            return cls(bytes.fromhex(value))
        except ValueError as e:
            raise ValueError(f"Invalid address '{value}': {e}") from e

    @classmethod
    def from_seed_phrase(cls, phrase: str) -> "Address":
        """Deterministic identity for a human-readable name (CLI convenience)."""
        return cls(hashlib.sha256(phrase.encode("utf-8")).digest())

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return self.raw.hex()


@dataclass(frozen=True)
class CallerIdentity:
    """
    The principal invoking an operation.
    Built by the host, which alone decides whether the caller signed.
    """
    address: Address
    is_signer: bool = False
