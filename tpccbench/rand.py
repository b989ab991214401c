"""Random data generators defined by the TPC-C specification."""

from __future__ import annotations

import random
from itertools import count

CHARACTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890"
LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
NUMBERS = "1234567890"
ORIGINAL_STRING = "ORIGINAL"

C_LAST_TOKENS = (
    "BAR", "OUGHT", "ABLE", "PRI", "PRES",
    "ESE", "ANTI", "CALLY", "ATION", "EING",
)

_seed_source = random.Random()
C_LOAD = _seed_source.randrange(256)
C_ITEM_ID = _seed_source.randrange(1024)
C_CUSTOMER_ID = _seed_source.randrange(8192)


def convert_to_pq(query: str, driver: str) -> str:
    """Turn '?' placeholders into '$1', '$2', ... for the postgres driver."""
    if driver != "postgres":
        return query
    head, *rest = query.split("?")
    numbers = count(1)
    return head + "".join(f"${next(numbers)}{part}" for part in rest)


def rand_int(r: random.Random, low: int, high: int) -> int:
    """Return a uniformly chosen integer in [low, high]."""
    if low == high:
        return low
    return r.randrange(high - low + 1) + low


def _rand_string(r: random.Random, source: str, low: int, high: int) -> str:
    length = rand_int(r, low, high)
    return "".join(source[r.randrange(len(source))] for _ in range(length))


def rand_chars(r: random.Random, low: int, high: int) -> str:
    """Random alphanumeric string with a length in [low, high]."""
    return _rand_string(r, CHARACTERS, low, high)


def rand_letters(r: random.Random, low: int, high: int) -> str:
    """Random upper-case string with a length in [low, high]."""
    return _rand_string(r, LETTERS, low, high)


def rand_numbers(r: random.Random, low: int, high: int) -> str:
    """Random digit string with a length in [low, high]."""
    return _rand_string(r, NUMBERS, low, high)


def rand_zip(r: random.Random) -> str:
    """Four random digits followed by '11111'."""
    return _rand_string(r, NUMBERS, 9, 9)[:4] + "11111"


def rand_state(r: random.Random) -> str:
    """Two random upper-case letters."""
    return _rand_string(r, LETTERS, 2, 2)


def rand_tax(r: random.Random) -> float:
    """A tax rate in [0.0000, 0.2000]."""
    return rand_int(r, 0, 2000) / 10000.0


def rand_original_string(r: random.Random) -> str:
    """A 26..50 character string that holds 'ORIGINAL' one time in ten."""
    if r.randrange(10) == 0:
        text = _rand_string(r, CHARACTERS, 26, 50)
        index = r.randrange(len(text) - 8)
        return text[:index] + ORIGINAL_STRING + text[index + len(ORIGINAL_STRING):]
    return rand_chars(r, 26, 50)


def rand_c_last_syllables(n: int) -> str:
    """Build a customer last name from the three digits of n."""
    if not 0 <= n < 1000:
        raise ValueError(f"last name number {n} is outside [0, 999]")
    return C_LAST_TOKENS[n // 100] + C_LAST_TOKENS[n // 10 % 10] + C_LAST_TOKENS[n % 10]


def rand_c_last(r: random.Random) -> str:
    """A non-uniformly chosen customer last name."""
    return rand_c_last_syllables(((r.randrange(256) | r.randrange(1000)) + C_LOAD) % 1000)


def rand_customer_id(r: random.Random) -> int:
    """A non-uniformly chosen customer id in [1, 3000]."""
    return ((r.randrange(1024) | (r.randrange(3000) + 1)) + C_CUSTOMER_ID) % 3000 + 1


def rand_item_id(r: random.Random) -> int:
    """A non-uniformly chosen item id in [1, 100000]."""
    return ((r.randrange(8190) | (r.randrange(100000) + 1)) + C_ITEM_ID) % 100000 + 1