#!/usr/bin/env python3
"""
General utilities for the orrery.
"""
import math
import re
from typing import Tuple

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def is_finite_number(val) -> bool:
    """True for real ints/floats that are not NaN or infinite (bools excluded)."""
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        return False
    return math.isfinite(val)


def is_hex_color(val) -> bool:
    return isinstance(val, str) and _HEX_COLOR.match(val.strip()) is not None


def normalize_hex_color(val: str) -> str:
    """'#ABC' / 'aabbcc' -> '#aabbcc'. Raises ValueError if malformed."""
    if not is_hex_color(val):
        raise ValueError(f"not a hex colour: {val!r}")
    s = val.strip().lstrip("#").lower()
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    return "#" + s


def hex_to_rgb(hex_str: str) -> Tuple[int, int, int]:
    """Convert '#rrggbb' or '#rgb' to an (r, g, b) tuple."""
    s = normalize_hex_color(hex_str)
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def rgb_to_hex(rgb) -> str:
    r, g, b = (max(0, min(255, int(c))) for c in rgb[:3])
    return f"#{r:02x}{g:02x}{b:02x}"
