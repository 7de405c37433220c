"""
Natural ordering - "Item 2" before "Item 10".

Strings are split into alternating runs of ASCII digits and non-digits.
Digit runs compare as integers, everything else compares case-insensitively.
Empty or missing values sort after everything else.
"""

import re
from functools import cmp_to_key
from typing import List, Optional

_TOKEN_PATTERN = re.compile(r"[0-9]+|[^0-9]+")


def natural_tokens(value: Optional[str]) -> List[str]:
    """Split into maximal digit / non-digit runs."""
    if not value:
        return []
    return _TOKEN_PATTERN.findall(value)


def _is_number(token: str) -> bool:
    return "0" <= token[0] <= "9"


def _compare_tokens(a: str, b: str) -> int:
    if _is_number(a) and _is_number(b):
        a_num, b_num = int(a), int(b)
        return (a_num > b_num) - (a_num < b_num)
    a_text, b_text = a.lower(), b.lower()
    return (a_text > b_text) - (a_text < b_text)


def natural_compare(a: Optional[str], b: Optional[str]) -> int:
    """
    Compare two strings in natural order.

    Returns:
        -1 if a sorts first, 1 if b does, 0 if they are equivalent
    """
    if not a and not b:
        return 0
    if not a:
        return 1
    if not b:
        return -1

    a_tokens = natural_tokens(a)
    b_tokens = natural_tokens(b)

    for a_token, b_token in zip(a_tokens, b_tokens):
        result = _compare_tokens(a_token, b_token)
        if result:
            return result

    # All shared positions equal: the strict prefix goes first
    return (len(a_tokens) > len(b_tokens)) - (len(a_tokens) < len(b_tokens))


# Key function equivalent to natural_compare, for sorted()/min()/max()
natural_key = cmp_to_key(natural_compare)
