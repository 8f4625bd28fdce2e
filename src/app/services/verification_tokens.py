"""Public verification tokens

Verification ids are random UUIDv4 strings, unrelated to internal ids and
document numbers, so they cannot be guessed or enumerated.
"""

import re
import uuid

_VERIFICATION_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def new_verification_id() -> str:
    return str(uuid.uuid4())


def is_valid_verification_id(value) -> bool:
    """True if value is a canonical textual UUID (versions 1-5)"""
    if not isinstance(value, str):
        return False
    return _VERIFICATION_ID_PATTERN.match(value) is not None
