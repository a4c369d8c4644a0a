"""
HS256 token codec.

`decode` never raises for bad input: it returns `Ok(claims)` or `Err(failure)`
so each caller can pick its own status code with a `match`.
"""

import binascii
import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import jwt
from jwt.utils import base64url_decode, base64url_encode

from src.core.utils.datetime_utils import get_unix_timestamp

ALGORITHM = "HS256"

# Signature and structure are checked by PyJWT; expiry and claim types are
# checked below so that every failure lands in exactly one bucket.
DECODE_OPTIONS: dict[str, Any] = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "require": ["exp"],
}


class TokenFailure(StrEnum):
    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"


@dataclass(frozen=True, slots=True)
class Ok:
    claims: dict[str, Any]


@dataclass(frozen=True, slots=True)
class Err:
    failure: TokenFailure
    detail: str = ""


DecodeResult = Ok | Err


def is_canonical_segment(segment: str) -> bool:
    """
    True when `segment` is exactly the unpadded base64url encoding of its own bytes.

    Lenient decoders drop stray characters and ignore the unused low bits of the
    last character, so without this check some edits to a signature would still verify.
    """
    try:
        raw = base64url_decode(segment)
    except (binascii.Error, ValueError):
        return False
    return base64url_encode(raw).decode("ascii") == segment


def is_json_segment(segment: str) -> bool:
    try:
        json.loads(base64url_decode(segment))
    except (binascii.Error, ValueError):
        return False
    return True


class JWTCodec:
    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret

    def encode(self, claims: Mapping[str, Any]) -> str:
        return jwt.encode(dict(claims), self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> DecodeResult:
        parts = token.split(".")
        if len(parts) != 3 or not all(parts):
            return Err(TokenFailure.MALFORMED, "expected three non-empty segments")

        for name, segment in (("header", parts[0]), ("payload", parts[1])):
            if not is_json_segment(segment):
                return Err(TokenFailure.MALFORMED, f"{name} is not base64url JSON")

        if not is_canonical_segment(parts[2]):
            return Err(TokenFailure.INVALID_SIGNATURE, "signature is not base64url")

        try:
            claims = jwt.decode(
                token, self._secret, algorithms=[ALGORITHM], options=DECODE_OPTIONS
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            return Err(TokenFailure.INVALID_SIGNATURE, str(exc))
        except jwt.PyJWTError as exc:
            return Err(TokenFailure.MALFORMED, str(exc))

        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return Err(TokenFailure.MALFORMED, "exp claim must be a number")
        if exp < get_unix_timestamp():
            return Err(TokenFailure.EXPIRED, "token has expired")

        return Ok(claims)
