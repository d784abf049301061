"""
Small numeric and naming helpers shared by the scoring code.
"""
import math
import re

import numpy as np


def round_half_up(value: float) -> int:
    """Rounds .5 away from zero for positive values (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return float(np.clip(value, low, high))


def slugify(name: str) -> str:
    """'Ooty Lake' -> 'ooty-lake'"""
    return re.sub(r"\s+", "-", name.strip().lower())


def settings_key(name: str) -> str:
    """'Ooty Lake' -> 'OOTY_LAKE', used to build per-location setting keys."""
    return re.sub(r"\s+", "_", name.strip().upper())
