"""Primary key generation for scheduling rows."""

import ulid


def generate_ulid() -> str:
    """Return a new ULID as its 26-character string form."""
    return str(ulid.ULID())
