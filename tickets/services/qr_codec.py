"""Signed, timestamped QR tokens proving a ticket's authenticity.

A token is ``base64(json({"data": payload, "sig": signature}))`` where
``payload`` is ``{"id": ticket_id, "timestamp": ms, "version": v}``. The
signature covers the compact JSON of the payload and is chosen by ``version``:

* ``"1.0"``: legacy 32-bit rolling checksum keyed with the string the mobile
  client ships with. Kept so codes it issued stay readable. It is not a MAC;
  anyone holding that string can forge it.
* ``"2.0"``: HMAC-SHA256 with a server-held key. The legacy string is never
  used for these.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from tickets.domain.errors import (
    DomainError,
    EncodingError,
    ExpiredError,
    SignatureError,
)

logger = logging.getLogger(__name__)

LEGACY_VERSION = "1.0"
HMAC_VERSION = "2.0"
DEFAULT_TTL_MS = 24 * 60 * 60 * 1000
LEGACY_CLIENT_SECRET = "default-secret-key"


def now_ms() -> int:
    return int(time.time() * 1000)


def _to_json(value: object) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def legacy_checksum(data: str, secret: str) -> str:
    """Rolling ``h = h * 31 + c`` over UTF-16 code units, wrapped to signed 32 bits.

    Rendered as the hex of the absolute value, so -2**31 becomes "80000000".
    """
    h = 0
    encoded = (data + secret).encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 1 << 32
    return format(abs(h), "x")


def hmac_signature(data: str, secret: str) -> str:
    return hmac.new(secret.encode(), data.encode(), hashlib.sha256).hexdigest()


SIGNERS: dict[str, Callable[[str, str], str]] = {
    LEGACY_VERSION: legacy_checksum,
    HMAC_VERSION: hmac_signature,
}


@dataclass(frozen=True)
class DecodedToken:
    id: str
    timestamp: int


class QRCodec:
    """Generate and validate ticket QR tokens."""

    def __init__(
        self,
        secret: str,
        ttl_ms: int = DEFAULT_TTL_MS,
        version: str = HMAC_VERSION,
        clock: Callable[[], int] = now_ms,
        accept_legacy: bool = True,
        legacy_secret: str = LEGACY_CLIENT_SECRET,
    ) -> None:
        if not secret:
            raise ValueError("QR signing secret must not be empty")
        if version not in SIGNERS:
            raise ValueError(f"Unsupported QR token version: {version}")
        self._secret = secret
        self._legacy_secret = legacy_secret
        self._ttl_ms = ttl_ms
        self._version = version
        self._clock = clock
        self._accept_legacy = accept_legacy

    @property
    def version(self) -> str:
        return self._version

    def _sign(self, payload: dict, version: str) -> str:
        secret = self._legacy_secret if version == LEGACY_VERSION else self._secret
        return SIGNERS[version](_to_json(payload), secret)

    def generate(self, ticket_id: str) -> str:
        """Return the base64 QR token for a ticket.

        Raises:
            EncodingError: If ticket_id is empty.
        """
        if not ticket_id:
            raise EncodingError("Ticket ID is required")
        payload = {"id": ticket_id, "timestamp": self._clock(), "version": self._version}
        envelope = {"data": payload, "sig": self._sign(payload, self._version)}
        return base64.b64encode(_to_json(envelope).encode()).decode("ascii")

    def _decode_envelope(self, token: str) -> tuple[dict, str]:
        if not token:
            raise EncodingError("QR data is required")
        try:
            raw = base64.b64decode(token, validate=True)
            envelope = json.loads(raw.decode())
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise EncodingError("Invalid QR code") from e
        if not isinstance(envelope, dict):
            raise EncodingError("Invalid QR code")
        payload, sig = envelope.get("data"), envelope.get("sig")
        if not isinstance(payload, dict) or not isinstance(sig, str):
            raise EncodingError("Invalid QR code")
        if not isinstance(payload.get("id"), str) or type(payload.get("timestamp")) is not int:
            raise EncodingError("Invalid QR code")
        return payload, sig

    def validate(self, token: str) -> DecodedToken:
        """Verify a token's signature and freshness.

        Raises:
            EncodingError: The token is not base64 JSON of the expected shape.
            SignatureError: The signature does not match the payload.
            ExpiredError: The token is older than the freshness window.
        """
        payload, sig = self._decode_envelope(token)
        version = payload.get("version", LEGACY_VERSION)
        if (
            not isinstance(version, str)
            or version not in SIGNERS
            or (version == LEGACY_VERSION and not self._accept_legacy)
        ):
            raise EncodingError(f"Unsupported QR token version: {version}")
        if not hmac.compare_digest(self._sign(payload, version).encode(), sig.encode()):
            raise SignatureError()
        age_ms = self._clock() - payload["timestamp"]
        if age_ms > self._ttl_ms:
            raise ExpiredError(age_ms)
        return DecodedToken(id=payload["id"], timestamp=payload["timestamp"])

    def is_valid(self, token: str) -> bool:
        try:
            self.validate(token)
        except DomainError as e:
            logger.warning(f"QR validation failed: {e}")
            return False
        return True
