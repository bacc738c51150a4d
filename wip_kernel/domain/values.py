"""
Values -- immutable monetary value objects for job calculations.

Responsibility:
    Provides ``CostBreakdown``, the additive {labor, material, other} triple
    every job figure (contract, budget, costs, cost-to-complete, invoiced)
    is expressed in, and ``to_decimal`` for coercing caller input.

Architecture position:
    Kernel > Domain -- pure, zero I/O. Imported by every engine.

Invariants enforced:
    - Decimal-only arithmetic: components are coerced to ``Decimal`` once at
      construction; floats pass through ``str()`` so ``0.1`` stays exact.
    - Negative components are allowed (credits). Finiteness is a caller
      precondition; the record parser enforces it at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a numeric input to ``Decimal``.

    Raises:
        TypeError: for bools and non-numeric types.
        decimal.InvalidOperation: for unparseable strings.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Cannot use bool as a monetary amount: {value!r}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        return Decimal(value.strip())
    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


@dataclass(frozen=True, slots=True)
class CostBreakdown:
    """
    Additive monetary triple split by cost category.

    Guarantees:
        - Immutable and hashable.
        - ``labor``, ``material`` and ``other`` are always ``Decimal``.
    """

    labor: Decimal = ZERO
    material: Decimal = ZERO
    other: Decimal = ZERO

    def __post_init__(self) -> None:
        for attr in ("labor", "material", "other"):
            object.__setattr__(self, attr, to_decimal(getattr(self, attr)))

    @classmethod
    def zero(cls) -> CostBreakdown:
        return cls(ZERO, ZERO, ZERO)

    @classmethod
    def of(cls, labor: Any = 0, material: Any = 0, other: Any = 0) -> CostBreakdown:
        """Build a breakdown from any numeric inputs."""
        return cls(to_decimal(labor), to_decimal(material), to_decimal(other))

    @property
    def total(self) -> Decimal:
        return self.labor + self.material + self.other

    def as_dict(self) -> dict[str, Decimal]:
        return {"labor": self.labor, "material": self.material, "other": self.other}
