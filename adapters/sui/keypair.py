"""
Sui Ed25519 키페어

Sui CLI 키스토어(~/.sui/sui_config/sui.keystore) 항목은
base64(스킴 플래그 1바이트 + 32바이트 비밀키) 형식.
앞의 플래그 바이트를 제거해야 비밀키를 얻을 수 있음.

서명 대상은 트랜잭션 intent([0, 0, 0]) + 트랜잭션 바이트의 blake2b-256 digest.
직렬화된 서명: base64(플래그 + 64바이트 서명 + 32바이트 공개키)
주소: 0x + hex(blake2b-256(플래그 + 공개키))
"""

import base64
import binascii
import hashlib

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from adapters.sui.errors import KeypairError
from core.types import SignatureScheme

# TransactionData intent: scope=0, version=0, app_id=0
TRANSACTION_INTENT = bytes([0, 0, 0])

PRIVATE_KEY_SIZE = 32
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64


def _blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def address_from_public_key(public_key: bytes) -> str:
    """Ed25519 공개키 -> Sui 주소"""
    flagged = bytes([SignatureScheme.ED25519]) + public_key
    return "0x" + _blake2b_256(flagged).hex()


def transaction_digest_to_sign(payload: bytes) -> bytes:
    """서명 대상 digest (intent 접두어 포함)"""
    return _blake2b_256(TRANSACTION_INTENT + payload)


class SuiKeypair:
    """Ed25519 키페어

    ISigner Protocol 구현.

    Args:
        private_key: Ed25519 비밀키
    """

    def __init__(self, private_key: Ed25519PrivateKey):
        self._private_key = private_key
        self._public_key_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        self._address = address_from_public_key(self._public_key_bytes)

    @classmethod
    def generate(cls) -> "SuiKeypair":
        """새 키페어 생성 (잔고가 없으므로 테스트용)"""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_secret_key(cls, secret: bytes) -> "SuiKeypair":
        """32바이트 비밀키로 생성"""
        if len(secret) != PRIVATE_KEY_SIZE:
            raise KeypairError(
                f"Ed25519 secret key must be {PRIVATE_KEY_SIZE} bytes, got {len(secret)}"
            )
        return cls(Ed25519PrivateKey.from_private_bytes(secret))

    @classmethod
    def from_keystore_entry(cls, encoded: str) -> "SuiKeypair":
        """키스토어 base64 항목으로 생성

        Raises:
            KeypairError: base64가 아니거나, 길이/스킴 플래그가 맞지 않는 경우
        """
        try:
            raw = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise KeypairError(f"Keystore entry is not valid base64: {e}") from e

        if len(raw) != PRIVATE_KEY_SIZE + 1:
            raise KeypairError(
                f"Keystore entry must be {PRIVATE_KEY_SIZE + 1} bytes, got {len(raw)}"
            )

        flag, secret = raw[0], raw[1:]
        if flag != SignatureScheme.ED25519:
            raise KeypairError(f"Unsupported signature scheme flag: {flag:#04x}")

        return cls.from_secret_key(secret)

    def to_keystore_entry(self) -> str:
        """키스토어 base64 항목으로 내보내기"""
        secret = self._private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return base64.b64encode(bytes([SignatureScheme.ED25519]) + secret).decode("ascii")

    @property
    def address(self) -> str:
        return self._address

    @property
    def public_key(self) -> bytes:
        return self._public_key_bytes

    def sign(self, payload: bytes) -> str:
        """트랜잭션 바이트 서명 -> 직렬화된 서명 (base64)"""
        signature = self._private_key.sign(transaction_digest_to_sign(payload))
        serialized = bytes([SignatureScheme.ED25519]) + signature + self._public_key_bytes
        return base64.b64encode(serialized).decode("ascii")


def verify_signature(payload: bytes, signature: str) -> str:
    """직렬화된 서명 검증

    Args:
        payload: 서명 대상 트랜잭션 바이트
        signature: base64(플래그 + 서명 + 공개키)

    Returns:
        서명자 주소

    Raises:
        KeypairError: 형식이 잘못되었거나 서명이 일치하지 않는 경우
    """
    try:
        raw = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeypairError(f"Signature is not valid base64: {e}") from e

    if len(raw) != 1 + SIGNATURE_SIZE + PUBLIC_KEY_SIZE:
        raise KeypairError(f"Unexpected signature length: {len(raw)}")
    if raw[0] != SignatureScheme.ED25519:
        raise KeypairError(f"Unsupported signature scheme flag: {raw[0]:#04x}")

    sig = raw[1:1 + SIGNATURE_SIZE]
    public_key = raw[1 + SIGNATURE_SIZE:]

    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(
            sig, transaction_digest_to_sign(payload)
        )
    except InvalidSignature as e:
        raise KeypairError("Signature does not match payload") from e

    return address_from_public_key(public_key)
