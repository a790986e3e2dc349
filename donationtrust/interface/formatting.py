"""Mini README: Jinja2 filters for the rendered pages."""

from __future__ import annotations

from typing import Optional


def format_amount(value: Optional[float], symbol: str = "৳") -> str:
    """Render an amount with thousands separators, dropping ``.00`` on whole values."""

    amount = float(value or 0.0)
    if amount.is_integer():
        return f"{symbol}{amount:,.0f}"
    return f"{symbol}{amount:,.2f}"
