"""
Authorization code value generation.
"""

import re
import secrets
import string

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_GROUPS = 4
GROUP_LENGTH = 4
CODE_PATTERN = re.compile(r"^[A-Z0-9]{4}(-[A-Z0-9]{4}){3}$")


def generate_code() -> str:
    """
    Generate a code in format: XXXX-XXXX-XXXX-XXXX.

    Returns:
        Generated code string drawn from a CSPRNG
    """
    parts = [
        "".join(secrets.choice(CODE_ALPHABET) for _ in range(GROUP_LENGTH))
        for _ in range(CODE_GROUPS)
    ]
    return "-".join(parts)


def is_well_formed(value: str) -> bool:
    return isinstance(value, str) and bool(CODE_PATTERN.match(value))
