import base64
import binascii
import re
import secrets

from ..errors import CookieDecodeError, RandomnessError

SESSION_ID_BYTES = 32

# Longest identifier accepted from a client
MAX_TOKEN_LENGTH = 256

_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_\-=]+$")


def generate_session_id(nbytes: int = SESSION_ID_BYTES) -> str:
    """
    Generate a new session identifier.

    Args:
        nbytes: Number of random bytes behind the token (32 by default)

    Returns:
        URL-safe base64 token without padding

    Raises:
        RandomnessError: If the OS entropy source cannot be read
    """
    try:
        token = secrets.token_urlsafe(nbytes)
    except (OSError, NotImplementedError) as e:
        raise RandomnessError(f"Secure random source unavailable: {e}") from e

    if not token:
        raise RandomnessError("Secure random source returned no data")

    return token


def is_well_formed(token: str) -> bool:
    """Check a client supplied identifier against the token alphabet."""
    return bool(token) and len(token) <= MAX_TOKEN_LENGTH and bool(_TOKEN_PATTERN.match(token))


def decode_session_id(token: str) -> bytes:
    """
    Decode an identifier back into its raw random bytes.

    Args:
        token: Identifier produced by generate_session_id()

    Returns:
        Raw bytes behind the token

    Raises:
        CookieDecodeError: If the token is not valid URL-safe base64
    """
    if not is_well_formed(token):
        raise CookieDecodeError(token)

    padded = token.rstrip("=") + "=" * (-len(token.rstrip("=")) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise CookieDecodeError(token) from e
