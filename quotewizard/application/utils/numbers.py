from __future__ import annotations

import math
from typing import Any


def parse_number(value: Any, fallback: float | None = None) -> float | None:
    """Read a price/weight that may arrive as a number or a numeric string."""
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        parsed = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = float(value.strip())
        except ValueError:
            return fallback
    else:
        return fallback
    return parsed if math.isfinite(parsed) else fallback
