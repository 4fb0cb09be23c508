"""Remember-me token generation."""

import secrets

# 32 bytes = 256 bits of CSPRNG output, url-safe base64 (43 characters)
TOKEN_BYTES = 32


def generate_token() -> str:
    """Generate an unguessable remember-me token."""
    return secrets.token_urlsafe(TOKEN_BYTES)
