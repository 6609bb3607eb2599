# trading/calculations.py

"""
PATH: trading/calculations.py

TRADE DOCUMENT ARITHMETIC (FRAMEWORK-AGNOSTIC)

Rules:
- Import / export:  total_weight = bags_qty × weight_per_bag
                    amount       = total_weight × rate_per_kg
- Invoice:          total_weight = bags_qty × weight_per_bag   (weight_unit = bags)
                                 = bags_qty                    (kg / litre: quantity is the weight)
                    amount       = total_weight × rate_per_kg + Σ adjustments
- Weights are kept to 3dp, money to 2dp (ROUND_HALF_UP)

Invoice numbers:
- <PREFIX><NNN>, NNN = highest existing numeric suffix + 1, zero-padded to 3
- First number for a prefix is <PREFIX>001
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Mapping, Optional

MONEY_QUANT = Decimal("0.01")
WEIGHT_QUANT = Decimal("0.001")

UNIT_KG = "kg"
UNIT_LITRE = "litre"
UNIT_BAGS = "bags"
WEIGHT_UNITS = (UNIT_KG, UNIT_LITRE, UNIT_BAGS)

ADJUSTMENT_FIELDS = ("bardana", "mazdoori", "munshiana", "charsadna", "walai", "tol")

NUMBER_WIDTH = 3


class TradeCalculationError(ValueError):
    """Raised when trade quantities cannot be computed."""


def _decimal(value, *, name: str) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError) as e:
        raise TradeCalculationError(f"{name} must be a number, got {value!r}") from e
    if not d.is_finite():
        raise TradeCalculationError(f"{name} must be a finite number")
    if d < 0:
        raise TradeCalculationError(f"{name} cannot be negative")
    return d


def money(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def weight(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(WEIGHT_QUANT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class TradeFigures:
    total_weight: Decimal
    amount: Decimal


def goods_figures(*, bags_qty, weight_per_bag, rate_per_kg) -> TradeFigures:
    bags = _decimal(bags_qty, name="bags_qty")
    per_bag = _decimal(weight_per_bag, name="weight_per_bag")
    rate = _decimal(rate_per_kg, name="rate_per_kg")

    total = weight(bags * per_bag)
    return TradeFigures(total_weight=total, amount=money(total * rate))


def invoice_figures(
    *,
    weight_unit: str,
    bags_qty,
    weight_per_bag,
    rate_per_kg,
    adjustments: Optional[Mapping[str, object]] = None,
) -> TradeFigures:
    unit = (weight_unit or UNIT_KG).strip().lower()
    if unit not in WEIGHT_UNITS:
        raise TradeCalculationError(f"weight_unit must be one of {', '.join(WEIGHT_UNITS)}")

    bags = _decimal(bags_qty, name="bags_qty")
    rate = _decimal(rate_per_kg, name="rate_per_kg")

    if unit == UNIT_BAGS:
        total = weight(bags * _decimal(weight_per_bag, name="weight_per_bag"))
    else:
        total = weight(bags)

    extra = Decimal("0")
    for name in ADJUSTMENT_FIELDS:
        extra += _decimal((adjustments or {}).get(name), name=name)

    return TradeFigures(total_weight=total, amount=money(total * rate + extra))


def next_number(prefix: str, existing: Iterable[str]) -> str:
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")

    highest = 0
    for number in existing:
        m = pattern.match((number or "").strip())
        if m:
            highest = max(highest, int(m.group(1)))

    return f"{prefix}{highest + 1:0{NUMBER_WIDTH}d}"
