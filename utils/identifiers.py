import secrets
import string
import time

_ALPHABET = string.ascii_lowercase + string.digits


def _random_suffix(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def new_line_id() -> str:
    """Short id for a line item, unique within its owning cart or draft."""
    return _random_suffix(9)


def new_draft_id() -> str:
    """Id for a POS tab: creation time in ms plus a random suffix."""
    return f"tab_{int(time.time() * 1000)}_{_random_suffix(4)}"
