"""
auth.py — signer authorization for counter invocations.

An account's address is the raw 32-byte Ed25519 public key of its keypair.
A call may mutate the account only if it carries a Credential whose signer is
that address and whose signature covers *this* instruction for *this*
account.

Canonical SignBytes
-------------------
    TAG      = "counter-program:sign/v1"
    DOMAIN   = configured domain (default "counter/invoke")
    ACCOUNT  = 32-byte account address
    MESSAGE  = raw instruction bytes, exactly as submitted

    sign_bytes =
          len(TAG)||TAG
        ||len(DOMAIN)||DOMAIN
        ||len(ACCOUNT)||ACCOUNT
        ||len(MESSAGE)||MESSAGE

Lengths are LEB128 uvarints so no two field splits produce the same bytes.
The same bytes are built on both sides; verification never reparses the
instruction.

Public API
----------
- Keypair.generate() / Keypair.from_seed(seed) / .public_key / .sign(msg)
- Credential(signer, signature)
- build_sign_bytes(account, instruction_data, *, domain=None) -> bytes
- sign_request(keypair, instruction_data, *, account=None, domain=None) -> Credential
- authorize(handle, instruction_data, *, domain=None) -> None   (raises Unauthorized)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey, Ed25519PublicKey)

from counter_program.config import load_config
from counter_program.errors import Unauthorized

if TYPE_CHECKING:  # pragma: no cover
    from counter_program.runtime.handle import AccountHandle

SIGN_TAG = b"counter-program:sign/v1"
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64
SEED_SIZE = 32


# --------------------------------------------------------------------------------------
# Field encoding
# --------------------------------------------------------------------------------------

def _uvarint(n: int) -> bytes:
    if n < 0:
        raise ValueError("uvarint expects non-negative int")
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(b | 0x80)
        else:
            out.append(b)
            break
    return bytes(out)


def _len_bytes(b: bytes) -> bytes:
    return _uvarint(len(b)) + b


def _norm_domain(domain: Union[str, bytes, None]) -> bytes:
    if domain is None:
        domain = load_config().sign_domain
    d = domain.strip() if isinstance(domain, bytes) else domain.strip().encode("utf-8")
    if not d:
        raise ValueError("domain must be non-empty")
    return d


def build_sign_bytes(
    account: bytes,
    instruction_data: bytes,
    *,
    domain: Union[str, bytes, None] = None,
) -> bytes:
    """Construct the exact bytes a signer must sign to authorize one call."""
    return (
        _len_bytes(SIGN_TAG)
        + _len_bytes(_norm_domain(domain))
        + _len_bytes(bytes(account))
        + _len_bytes(bytes(instruction_data))
    )


# --------------------------------------------------------------------------------------
# Keys & credentials
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Credential:
    """Signature presented by the caller for one invocation."""
    signer: bytes
    signature: bytes

    def __repr__(self) -> str:
        return f"Credential(signer={self.signer.hex()[:16]}…, sig[:8]={self.signature[:8].hex()}…)"

    def to_dict(self) -> dict:
        return {"signer": "0x" + self.signer.hex(), "signature": "0x" + self.signature.hex()}


class Keypair:
    """Thin wrapper over an Ed25519 private key; the address is its raw public key."""

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._sk = private_key
        self._pk = private_key.public_key().public_bytes(
            serialization.Encoding.Raw, serialization.PublicFormat.Raw
        )

    @classmethod
    def generate(cls) -> "Keypair":
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes) -> "Keypair":
        if len(seed) != SEED_SIZE:
            raise ValueError(f"seed must be {SEED_SIZE} bytes, got {len(seed)}")
        return cls(Ed25519PrivateKey.from_private_bytes(bytes(seed)))

    @property
    def public_key(self) -> bytes:
        return self._pk

    address = public_key

    def sign(self, message: bytes) -> bytes:
        return self._sk.sign(bytes(message))

    def __repr__(self) -> str:
        return f"Keypair(address={self._pk.hex()})"


def sign_request(
    keypair: Keypair,
    instruction_data: bytes,
    *,
    account: Optional[bytes] = None,
    domain: Union[str, bytes, None] = None,
) -> Credential:
    """
    Sign `instruction_data` for `account` (defaults to the keypair's own address).

    Signing for a different account yields a credential that `authorize`
    rejects; it is allowed so callers can build negative cases.
    """
    target = keypair.public_key if account is None else bytes(account)
    msg = build_sign_bytes(target, instruction_data, domain=domain)
    return Credential(signer=keypair.public_key, signature=keypair.sign(msg))


# --------------------------------------------------------------------------------------
# Verification
# --------------------------------------------------------------------------------------

def authorize(
    handle: "AccountHandle",
    instruction_data: bytes,
    *,
    domain: Union[str, bytes, None] = None,
) -> None:
    """
    Raise Unauthorized unless the handle's credential proves control of its account.

    Must run before the record is touched.
    """
    address_hex = handle.address.hex()
    cred = handle.credential
    if cred is None:
        raise Unauthorized("missing required signature", address=address_hex)
    if bytes(cred.signer) != bytes(handle.address):
        raise Unauthorized(
            "signer does not control account",
            address=address_hex,
            data={"signer": bytes(cred.signer).hex()},
        )
    if len(cred.signature) != SIGNATURE_SIZE:
        raise Unauthorized(
            "malformed signature",
            address=address_hex,
            data={"expected": SIGNATURE_SIZE, "got": len(cred.signature)},
        )
    try:
        pub = Ed25519PublicKey.from_public_bytes(bytes(cred.signer))
    except ValueError:
        raise Unauthorized("malformed public key", address=address_hex) from None

    msg = build_sign_bytes(handle.address, instruction_data, domain=domain)
    try:
        pub.verify(bytes(cred.signature), msg)
    except InvalidSignature:
        raise Unauthorized("invalid signature", address=address_hex) from None


__all__ = [
    "SIGN_TAG",
    "Credential",
    "Keypair",
    "build_sign_bytes",
    "sign_request",
    "authorize",
]
