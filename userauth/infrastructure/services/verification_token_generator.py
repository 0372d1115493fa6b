import base64
import hashlib
import json
import secrets

from userauth.domain.interfaces import ITokenGenerator


class VerificationTokenGenerator(ITokenGenerator):
    """Opaque URL-safe tokens for verification and password reset links.

    The token is the base64url encoding of ``{"t": raw, "h": sha256(raw),
    "p": pepper}`` where ``raw`` is 32 random bytes and ``pepper`` 16 random
    bytes, both hex encoded. Lookups only ever compare the whole string.
    """

    def generate(self) -> str:
        raw = secrets.token_hex(32)
        payload = {
            "t": raw,
            "h": hashlib.sha256(raw.encode()).hexdigest(),
            "p": secrets.token_hex(16),
        }
        encoded = base64.urlsafe_b64encode(json.dumps(payload, separators=(",", ":")).encode())
        return encoded.decode().rstrip("=")
