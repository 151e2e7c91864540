from __future__ import annotations

import pytest

from counter_program.auth import (SIGN_TAG, Credential, Keypair, authorize,
                                  build_sign_bytes, sign_request)
from counter_program.codec.instruction import Instruction, encode_instruction
from counter_program.errors import Unauthorized
from counter_program.runtime.handle import AccountHandle

ADD_5 = encode_instruction(Instruction.add(5))


def _handle(owner: Keypair, cred=None) -> AccountHandle:
    return AccountHandle(owner.address, bytearray(4), credential=cred)


def test_valid_signature_authorizes(owner: Keypair) -> None:
    cred = sign_request(owner, ADD_5)
    assert authorize(_handle(owner, cred), ADD_5) is None


def test_missing_credential(owner: Keypair) -> None:
    with pytest.raises(Unauthorized) as ei:
        authorize(_handle(owner), ADD_5)
    assert ei.value.code == "UNAUTHORIZED"
    assert ei.value.message == "missing required signature"
    assert ei.value.data == {"address": owner.address.hex()}


def test_stranger_cannot_sign_for_account(owner: Keypair, stranger: Keypair) -> None:
    cred = sign_request(stranger, ADD_5, account=owner.address)
    with pytest.raises(Unauthorized, match="signer does not control account"):
        authorize(_handle(owner, cred), ADD_5)


def test_signature_bound_to_instruction(owner: Keypair) -> None:
    cred = sign_request(owner, ADD_5)
    other = encode_instruction(Instruction.add(6))
    with pytest.raises(Unauthorized, match="invalid signature"):
        authorize(_handle(owner, cred), other)


def test_signature_bound_to_domain(owner: Keypair) -> None:
    cred = sign_request(owner, ADD_5, domain="counter/other")
    with pytest.raises(Unauthorized, match="invalid signature"):
        authorize(_handle(owner, cred), ADD_5)
    authorize(_handle(owner, cred), ADD_5, domain="counter/other")


def test_tampered_signature(owner: Keypair) -> None:
    cred = sign_request(owner, ADD_5)
    sig = bytearray(cred.signature)
    sig[0] ^= 0x01
    bad = Credential(signer=cred.signer, signature=bytes(sig))
    with pytest.raises(Unauthorized, match="invalid signature"):
        authorize(_handle(owner, bad), ADD_5)


def test_short_signature(owner: Keypair) -> None:
    bad = Credential(signer=owner.address, signature=b"\x00" * 10)
    with pytest.raises(Unauthorized, match="malformed signature"):
        authorize(_handle(owner, bad), ADD_5)


def test_malformed_public_key() -> None:
    addr = b"\x01" * 31
    handle = AccountHandle(addr, bytearray(4), credential=Credential(addr, b"\x00" * 64))
    with pytest.raises(Unauthorized, match="malformed public key"):
        authorize(handle, ADD_5)


def test_sign_bytes_layout(owner: Keypair) -> None:
    msg = build_sign_bytes(owner.address, ADD_5, domain="d")
    assert msg.startswith(bytes([len(SIGN_TAG)]) + SIGN_TAG)
    assert msg == (
        bytes([len(SIGN_TAG)]) + SIGN_TAG
        + b"\x01d"
        + b"\x20" + owner.address
        + b"\x05" + ADD_5
    )


def test_sign_bytes_are_unambiguous() -> None:
    assert build_sign_bytes(b"ab", b"c", domain="d") != build_sign_bytes(b"a", b"bc", domain="d")


def test_sign_bytes_domain_must_be_non_empty() -> None:
    with pytest.raises(ValueError):
        build_sign_bytes(b"a", b"b", domain="  ")


@pytest.mark.parametrize("domain", [b"", b"  ", ""])
def test_sign_bytes_rejects_empty_domain_of_either_type(domain) -> None:
    with pytest.raises(ValueError):
        build_sign_bytes(b"a", b"b", domain=domain)


def test_bytes_and_str_domains_sign_the_same_bytes() -> None:
    assert build_sign_bytes(b"a", b"b", domain=b"counter/x") == build_sign_bytes(
        b"a", b"b", domain="counter/x"
    )


def test_keypair_from_seed_is_deterministic() -> None:
    a = Keypair.from_seed(bytes(32))
    b = Keypair.from_seed(bytes(32))
    assert a.address == b.address == a.public_key
    assert len(a.address) == 32
    assert a.sign(b"m") == b.sign(b"m")


def test_keypair_seed_length() -> None:
    with pytest.raises(ValueError):
        Keypair.from_seed(b"\x00" * 31)


def test_generated_keypairs_differ() -> None:
    assert Keypair.generate().address != Keypair.generate().address


def test_credential_to_dict(owner: Keypair) -> None:
    cred = sign_request(owner, ADD_5)
    d = cred.to_dict()
    assert d["signer"] == "0x" + owner.address.hex()
    assert len(bytes.fromhex(d["signature"][2:])) == 64
