"""
Identifier derivation - Content identifiers used as ledger keys.

All identifiers are SHA3-256 digests rendered as 0x-prefixed hex:

- name_id:    H(name)
- escrow_id:  H(name || claimant)
- receipt_id: H(name || claimant || uint256(time))
"""

import hashlib

NameLike = str | bytes


def name_bytes(name: NameLike) -> bytes:
    """Raw bytes of a name. Strings are UTF-8 encoded."""
    if isinstance(name, bytes):
        return name
    return name.encode("utf-8")


def _digest(*parts: bytes) -> str:
    return "0x" + hashlib.sha3_256(b"".join(parts)).hexdigest()


def name_id(name: NameLike) -> str:
    return _digest(name_bytes(name))


def escrow_id(name: NameLike, claimant: str) -> str:
    return _digest(name_bytes(name), claimant.encode("utf-8"))


def receipt_id(name: NameLike, claimant: str, timestamp: int) -> str:
    # Time is packed as a 32-byte big-endian word
    return _digest(
        name_bytes(name),
        claimant.encode("utf-8"),
        timestamp.to_bytes(32, "big"),
    )
