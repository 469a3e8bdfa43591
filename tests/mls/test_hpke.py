"""Tests for HPKE base-mode key schedule and sealing."""

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from our_mls import DecodingError, EncodingError
from our_mls.crypto import (
    NK_AES_GCM_128,
    NN_AES_GCM_128,
    AeadError,
    HpkeCipherSuite,
    HpkeCiphertext,
    HpkeContext,
    HpkeMode,
    KemError,
    setup_base,
)
from our_mls.crypto import aesgcm, hkdf
from our_mls.keys import DhZeroError, X25519KeyPair, X25519PublicKey

# =============================================================================
# PRIMITIVES
# =============================================================================


class TestHkdf:
    """Extract/expand split of HKDF-SHA256."""

    def test_rfc5869_case_1(self):
        ikm = bytes.fromhex("0b" * 22)
        salt = bytes.fromhex("000102030405060708090a0b0c")
        info = bytes.fromhex("f0f1f2f3f4f5f6f7f8f9")
        prk = hkdf.extract(salt, ikm)
        assert prk.hex() == "077709362c2e32df0ddc3f0dc47bba6390b6c73bb50f9c3122ec844ad7c2b3e5"
        okm = hkdf.expand(prk, info, 42)
        assert okm.hex() == (
            "3cb25f25faacd57a90434f64d0362f2a2d2d0a90cf1a5a4c5db02d56ecc4c5bf34007208d5b887185865"
        )

    def test_expand_rejects_short_prk(self):
        with pytest.raises(ValueError):
            hkdf.expand(bytes(16), b"info", 16)


class TestAesGcm:
    """AEAD wrapper error surfacing."""

    def test_seal_open(self):
        key, nonce = bytes(16), bytes(12)
        ciphertext = aesgcm.seal(key, nonce, b"secret")
        assert len(ciphertext) == len(b"secret") + aesgcm.AES_GCM_TAG_SIZE
        assert aesgcm.open(key, nonce, ciphertext) == b"secret"

    def test_bad_key_size(self):
        with pytest.raises(AeadError):
            aesgcm.seal(bytes(15), bytes(12), b"secret")

    def test_bad_nonce_size(self):
        with pytest.raises(AeadError):
            aesgcm.seal(bytes(16), bytes(8), b"secret")

    def test_tampered_ciphertext(self):
        ciphertext = bytearray(aesgcm.seal(bytes(16), bytes(12), b"secret"))
        ciphertext[0] ^= 1
        with pytest.raises(AeadError):
            aesgcm.open(bytes(16), bytes(12), bytes(ciphertext))


# =============================================================================
# CONTEXT AND KEY SCHEDULE
# =============================================================================


class TestHpkeContext:
    """Binding context serialization."""

    def test_layout(self):
        context = HpkeContext(
            ciphersuite=HpkeCipherSuite.X25519_SHA256_AES128GCM,
            mode=HpkeMode.BASE,
            kem_context=b"ab",
            info=b"c",
        )
        assert context.to_bytes() == bytes.fromhex("0003 00 02 6162 01 63")

    def test_round_trip(self):
        context = HpkeContext(ciphersuite=3, mode=0, kem_context=bytes(64), info=b"info")
        assert HpkeContext.from_bytes(context.to_bytes()) == context

    def test_mode_values(self):
        assert [m.value for m in HpkeMode] == [0, 1, 2]


class TestSetupBase:
    """Key/nonce derivation."""

    def test_sizes(self, recipient):
        key, nonce = setup_base(recipient.public_key, bytes(32), b"enc")
        assert len(key) == NK_AES_GCM_128
        assert len(nonce) == NN_AES_GCM_128

    def test_deterministic(self, recipient):
        assert setup_base(recipient.public_key, b"\x01" * 32, b"enc") == setup_base(
            recipient.public_key, b"\x01" * 32, b"enc"
        )

    def test_matches_manual_schedule(self, recipient):
        zz = b"\x07" * 32
        context = HpkeContext(
            ciphersuite=0x0003,
            mode=0x00,
            kem_context=b"enc" + recipient.public_key.data,
            info=b"",
        ).to_bytes()
        secret = hkdf.extract(bytes(32), zz)
        key, nonce = setup_base(recipient.public_key, zz, b"enc")
        assert key == hkdf.expand(secret, b"hpke key" + context, 16)
        assert nonce == hkdf.expand(secret, b"hpke nonce" + context, 12)

    def test_context_separates_keys(self, recipient):
        other = X25519KeyPair.generate_random()
        zz = b"\x02" * 32
        base = setup_base(recipient.public_key, zz, b"enc")
        assert setup_base(recipient.public_key, zz, b"enc2") != base
        assert setup_base(other.public_key, zz, b"enc") != base
        assert setup_base(recipient.public_key, zz, b"enc", info=b"app") != base

    def test_oversized_kem_context(self, recipient):
        with pytest.raises(EncodingError):
            setup_base(recipient.public_key, bytes(32), bytes(224))


# =============================================================================
# ENCRYPTION
# =============================================================================


class TestHpkeCiphertext:
    """Single-shot sealing to a recipient."""

    def test_encrypt_decrypt(self, recipient):
        ciphertext = HpkeCiphertext.encrypt(recipient.public_key, b"path secret")
        assert ciphertext.decrypt(recipient.private_key, b"path secret") == b"path secret"

    def test_recipient_opens_with_own_schedule(self, recipient):
        enc = b"node secret"
        ciphertext = HpkeCiphertext.encrypt(recipient.public_key, enc)
        zz = recipient.private_key.shared_secret(ciphertext.ephemeral_public_key)
        key, nonce = setup_base(recipient.public_key, zz, enc)
        assert AESGCM(key).decrypt(nonce, ciphertext.content, None) == enc

    def test_content_length(self, recipient):
        ciphertext = HpkeCiphertext.encrypt(recipient.public_key, b"12345")
        assert len(ciphertext.content) == 5 + aesgcm.AES_GCM_TAG_SIZE

    def test_fresh_ephemeral_per_call(self, recipient):
        a = HpkeCiphertext.encrypt(recipient.public_key, b"enc")
        b = HpkeCiphertext.encrypt(recipient.public_key, b"enc")
        assert a.ephemeral_public_key != b.ephemeral_public_key
        assert a.content != b.content

    def test_encrypt_with_ephemeral_is_deterministic(self, recipient):
        ephemeral = X25519KeyPair.derive_from_seed(bytes(range(32)))
        a = HpkeCiphertext.encrypt_with_ephemeral(recipient.public_key, b"enc", ephemeral)
        b = HpkeCiphertext.encrypt_with_ephemeral(recipient.public_key, b"enc", ephemeral)
        assert a == b
        assert a.ephemeral_public_key == ephemeral.public_key

    def test_ephemeral_key_erased(self, recipient, monkeypatch):
        generated = []
        original = X25519KeyPair.generate_random

        def capture():
            key_pair = original()
            generated.append(key_pair)
            return key_pair

        monkeypatch.setattr(X25519KeyPair, "generate_random", staticmethod(capture))
        ciphertext = HpkeCiphertext.encrypt(recipient.public_key, b"enc")
        assert generated[0].public_key == ciphertext.ephemeral_public_key
        assert generated[0].private_key.erased

    def test_wrong_enc_fails(self, recipient):
        ciphertext = HpkeCiphertext.encrypt(recipient.public_key, b"enc")
        with pytest.raises(KemError):
            ciphertext.decrypt(recipient.private_key, b"other")

    def test_wrong_info_fails(self, recipient):
        ciphertext = HpkeCiphertext.encrypt(recipient.public_key, b"enc", info=b"epoch 1")
        with pytest.raises(KemError):
            ciphertext.decrypt(recipient.private_key, b"enc", info=b"epoch 2")
        assert ciphertext.decrypt(recipient.private_key, b"enc", info=b"epoch 1") == b"enc"

    def test_wrong_recipient_fails(self, recipient):
        ciphertext = HpkeCiphertext.encrypt(recipient.public_key, b"enc")
        other = X25519KeyPair.generate_random()
        with pytest.raises(KemError):
            ciphertext.decrypt(other.private_key, b"enc")

    def test_zero_dh_is_kem_error(self):
        with pytest.raises(KemError) as exc_info:
            HpkeCiphertext.encrypt(X25519PublicKey(bytes(32)), b"enc")
        assert isinstance(exc_info.value.__cause__, DhZeroError)

    def test_oversized_enc(self, recipient):
        with pytest.raises(EncodingError):
            HpkeCiphertext.encrypt(recipient.public_key, bytes(300))

    def test_enc_length_limit(self, recipient):
        ephemeral = X25519KeyPair.derive_from_seed(bytes(range(32)))
        largest = bytes(255 - 32)
        ciphertext = HpkeCiphertext.encrypt_with_ephemeral(recipient.public_key, largest, ephemeral)
        assert ciphertext.decrypt(recipient.private_key, largest) == largest
        with pytest.raises(EncodingError):
            HpkeCiphertext.encrypt_with_ephemeral(recipient.public_key, largest + b"\x00", ephemeral)


class TestCiphertextEncoding:
    """External representation: ephemeral key followed by AEAD output."""

    def test_layout(self, recipient):
        ciphertext = HpkeCiphertext.encrypt(recipient.public_key, b"enc")
        data = ciphertext.to_bytes()
        assert data[:32] == ciphertext.ephemeral_public_key.data
        assert data[32:] == ciphertext.content
        assert HpkeCiphertext.from_bytes(data) == ciphertext

    def test_too_short(self):
        with pytest.raises(DecodingError):
            HpkeCiphertext.from_bytes(bytes(40))
