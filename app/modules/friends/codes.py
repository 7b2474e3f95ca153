"""
Friend codes: short shareable identifiers in the form LLLL-DDDD-LLL.

About 46 bits of randomness; uniqueness is still enforced by the unique
constraint on users.friend_code, with ProfileService retrying on collision.
"""
import re
import secrets
import string
from random import Random
from typing import Optional

FRIEND_CODE_PATTERN = re.compile(r"^[A-Z]{4}-[0-9]{4}-[A-Z]{3}$")

_LETTERS = string.ascii_uppercase
_DIGITS = string.digits
_system_random = secrets.SystemRandom()


def generate_friend_code(rng: Optional[Random] = None) -> str:
    rng = rng or _system_random
    head = "".join(rng.choice(_LETTERS) for _ in range(4))
    middle = "".join(rng.choice(_DIGITS) for _ in range(4))
    tail = "".join(rng.choice(_LETTERS) for _ in range(3))
    return f"{head}-{middle}-{tail}"


def is_valid_friend_code(code: str) -> bool:
    return bool(code) and FRIEND_CODE_PATTERN.match(code) is not None
