"""Completion of three-factor weightings from two supplied weights.

Factor scores upstream of diversification are blended from ROE, PBR and
PER factors whose weights sum to one.  Callers supply exactly two of the
three and the third is derived here.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional, Union

from corrguide.exceptions import InvalidInputError

WEIGHT_SCALE = 4
FACTOR_NAMES = ("roe", "pbr", "per")

_ONE = Decimal("1")
_ZERO = Decimal("0")
_QUANTUM = Decimal(1).scaleb(-WEIGHT_SCALE)

WeightInput = Union[Decimal, float, str, None]


@dataclass(frozen=True)
class FactorWeights:
    """Weights of the ROE, PBR and PER factors.

    Attributes
    ----------
    roe, pbr, per : Decimal
        Factor weights in ``[0, 1]``.
    auto_calculated : str or None
        Name of the factor whose weight was derived, if any.
    """

    roe: Decimal
    pbr: Decimal
    per: Decimal
    auto_calculated: Optional[str] = None

    @property
    def total(self) -> Decimal:
        return (self.roe + self.pbr + self.per).quantize(_QUANTUM, rounding=ROUND_HALF_UP)

    def as_dict(self) -> dict[str, Any]:
        return {
            "roe": str(self.roe),
            "pbr": str(self.pbr),
            "per": str(self.per),
            "total": str(self.total),
            "auto_calculated": self.auto_calculated,
        }


DEFAULT_FACTOR_WEIGHTS = FactorWeights(
    roe=Decimal("0.3334"),
    pbr=Decimal("0.3333"),
    per=Decimal("0.3333"),
)


def _to_decimal(value: WeightInput, name: str) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        # str() keeps float inputs like 0.1 from carrying binary noise
        weight = Decimal(str(value))
    except InvalidOperation as exc:
        raise InvalidInputError(f"{name} weight {value!r} is not a number") from exc
    if not weight.is_finite() or weight < _ZERO or weight > _ONE:
        raise InvalidInputError(f"{name} weight must be between 0 and 1, got {value}")
    return weight


def complete_factor_weights(
    roe: WeightInput = None,
    pbr: WeightInput = None,
    per: WeightInput = None,
) -> FactorWeights:
    """Derive the missing factor weight from the two supplied ones.

    The missing weight is ``1 - sum`` quantized to four decimal places
    with round-half-up and floored at zero.

    Raises
    ------
    InvalidInputError
        If not exactly two weights are supplied, a weight is outside
        ``[0, 1]``, or the supplied weights sum to more than one.
    """
    given = {
        name: _to_decimal(value, name)
        for name, value in zip(FACTOR_NAMES, (roe, pbr, per))
    }
    supplied = {k: v for k, v in given.items() if v is not None}
    if len(supplied) != 2:
        raise InvalidInputError(
            f"exactly 2 factor weights must be supplied, got {len(supplied)}"
        )

    total = sum(supplied.values(), _ZERO)
    if total > _ONE:
        raise InvalidInputError(
            f"supplied weights sum to {total * 100:.2f}%, which exceeds 100%"
        )

    missing = next(name for name in FACTOR_NAMES if name not in supplied)
    remaining = (_ONE - total).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    if remaining < _ZERO:
        remaining = _ZERO

    weights = {**supplied, missing: remaining}
    return FactorWeights(auto_calculated=missing, **weights)
