"""Secret and identifier generators for verification links and API tokens."""

import secrets
import uuid

# Namespace for deriving API token IDs from verification request IDs.
_TOKEN_ID_NAMESPACE = uuid.UUID("6f1c5e0a-3b7d-4c2e-9a58-1d2f7b4e8c90")


def generate_secret_token(nbytes: int = 32) -> str:
    """Return a URL-safe random secret from the OS CSPRNG.

    Args:
        nbytes: Bytes of randomness (32 bytes = 256 bits; at least 16 required).

    Returns:
        URL-safe base64 string.
    """
    if nbytes < 16:
        raise ValueError("nbytes must be at least 16 (128 bits)")
    return secrets.token_urlsafe(nbytes)


def derive_token_id(verification_request_id: str) -> str:
    """Return the API token ID owned by a verification request.

    The same request always maps to the same ID, so a replayed issuance
    collides on the primary key instead of minting a second token.
    """
    return str(uuid.uuid5(_TOKEN_ID_NAMESPACE, verification_request_id))
