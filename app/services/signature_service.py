"""
Signature Service - HMAC-SHA256 signing of QR payloads
"""
import hmac
import json
import hashlib
from typing import Any, Mapping, Optional

from app.core.qr_config import QrConfig, default_qr_config


class SignatureService:
    def __init__(self, config: Optional[QrConfig] = None) -> None:
        self.config = config or default_qr_config()
        self._key = self.config.secret_key.encode("utf-8")

    @staticmethod
    def canonicalize(payload: Mapping[str, Any]) -> bytes:
        """
        Canonical serialization: keys sorted, compact separators, UTF-8.
        Same bytes as JSON.stringify over a key-sorted object.
        """
        return json.dumps(
            payload,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False
        ).encode("utf-8")

    def sign(self, payload: Mapping[str, Any]) -> str:
        """
        Sign payload

        Args:
            payload: Mapping of JSON-serializable values

        Returns:
            str: Hex HMAC-SHA256 digest (64 chars)
        """
        return hmac.new(self._key, self.canonicalize(payload), hashlib.sha256).hexdigest()

    def verify(self, payload: Any, signature: Any) -> bool:
        """Constant-time check of signature against payload. Malformed input is False."""
        if not isinstance(payload, Mapping) or not isinstance(signature, str):
            return False
        try:
            expected = self.sign(payload)
        except (TypeError, ValueError):
            return False
        return hmac.compare_digest(expected, signature)
