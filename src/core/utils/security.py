import asyncio
import hashlib
import hmac
import secrets

from passlib.context import CryptContext

from loggers import get_logger

logger = get_logger(__name__)

API_KEY_BYTES = 16

# argon2id, 64 MiB / 3 passes / 2 lanes
password_hasher = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__memory_cost=65536,
    argon2__time_cost=3,
    argon2__parallelism=2,
)


def hash_password(password: str) -> str:
    """Return an encoded argon2 hash (`$argon2id$...`) for storage in `users.password_hash`."""
    return password_hasher.hash(password)


async def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a login password against the stored hash without blocking the event loop.

    A stored value that is not a recognisable hash counts as a mismatch.
    """
    try:
        matched = await asyncio.to_thread(
            password_hasher.verify, plain_password, hashed_password
        )
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False
    return bool(matched)


def generate_api_key() -> str:
    """32 lowercase hex chars."""
    return secrets.token_hex(API_KEY_BYTES)


def hmac_sha256_hex(key: str, message: str) -> str:
    digest = hmac.new(key.encode(), message.encode(), hashlib.sha256)
    return digest.hexdigest()
