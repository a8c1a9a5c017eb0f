"""ID and value generators: CUID primary keys, random code parts, UUIDs."""

import secrets
import string
import uuid

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

# RANDOM placeholder alphabet; matches the parser's [A-Za-z0-9] class.
ALPHANUMERIC = string.ascii_letters + string.digits


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def random_alphanumeric(length: int) -> str:
    """Cryptographically random string of exactly length ASCII letters and digits."""
    if length < 0:
        raise ValueError("length must be non-negative")
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(length))


def generate_uuid4() -> str:
    """Version-4 UUID in canonical 36-character form."""
    return str(uuid.uuid4())
