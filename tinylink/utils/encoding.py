from typing import Optional

# Shuffled alphanumerics so sequential counters give unrelated-looking codes.
# Changing this invalidates every code issued so far.
ALPHABET = "RO9zDGxetiA5flHnXvU8M1WmJNqwhK6TaSVQjgPkIsFbc04pL7yoCurBdEZ32Y"
BASE = len(ALPHABET)
SHORT_CODE_LENGTH = 6

# Counters in [MIN_SIX_CHAR_VALUE, MAX_SIX_CHAR_VALUE] encode to exactly six symbols
MIN_SIX_CHAR_VALUE = BASE ** (SHORT_CODE_LENGTH - 1)
MAX_SIX_CHAR_VALUE = BASE ** SHORT_CODE_LENGTH - 1

_INDEX = {ch: i for i, ch in enumerate(ALPHABET)}


def encode(num: int) -> Optional[str]:
    """Encode a non-negative integer with the shuffled Base62 alphabet.

    Returns None for negative or non-integer input. There is no padding, so
    the result grows with the magnitude of ``num``.
    """
    if isinstance(num, bool) or not isinstance(num, int) or num < 0:
        return None
    if num == 0:
        return ALPHABET[0]
    out = []
    while num:
        num, rem = divmod(num, BASE)
        out.append(ALPHABET[rem])
    return ''.join(reversed(out))


def decode(code: str) -> int:
    """Decode a string produced by encode() back to its integer."""
    if not code:
        raise ValueError("Cannot decode an empty short code")
    n = 0
    for ch in code:
        try:
            n = n * BASE + _INDEX[ch]
        except KeyError:
            raise ValueError(f"Invalid character {ch!r} in short code") from None
    return n


def is_valid_short_code(code: Optional[str]) -> bool:
    if not isinstance(code, str) or len(code) != SHORT_CODE_LENGTH:
        return False
    return all(ch in _INDEX for ch in code)
