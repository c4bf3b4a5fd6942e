"""
Units of measure: share counts, money amounts, and prices (money per share).

Each is a distinct immutable value type. Same-type arithmetic is allowed;
crossing dimensions only goes through Shares * Price -> Money and
Money / Price -> Shares. Anything else raises TypeError.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

_SCALARS = (int, float)


def _is_scalar(x: object) -> bool:
    return isinstance(x, _SCALARS) and not isinstance(x, bool)


@total_ordering
@dataclass(frozen=True)
class _Quantity:
    """Shared behaviour for the unit types. Not used directly."""

    value: float = 0.0

    def __post_init__(self) -> None:
        if isinstance(self.value, _Quantity):
            raise TypeError(
                f"cannot build {type(self).__name__} from {type(self.value).__name__}"
            )
        object.__setattr__(self, "value", float(self.value))

    def _same(self, other: object) -> bool:
        return type(other) is type(self)

    def __add__(self, other):
        if not self._same(other):
            return NotImplemented
        return type(self)(self.value + other.value)

    def __sub__(self, other):
        if not self._same(other):
            return NotImplemented
        return type(self)(self.value - other.value)

    def __neg__(self):
        return type(self)(-self.value)

    def __pos__(self):
        return self

    def __abs__(self):
        return type(self)(abs(self.value))

    def __mul__(self, other):
        if _is_scalar(other):
            return type(self)(self.value * other)
        return NotImplemented

    def __rmul__(self, other):
        if _is_scalar(other):
            return type(self)(other * self.value)
        return NotImplemented

    def __truediv__(self, other):
        if _is_scalar(other):
            return type(self)(self.value / other)
        if self._same(other):
            return self.value / other.value
        return NotImplemented

    def __lt__(self, other):
        if not self._same(other):
            return NotImplemented
        return self.value < other.value

    def __float__(self) -> float:
        return self.value

    def __bool__(self) -> bool:
        return self.value != 0.0

    def is_zero(self) -> bool:
        """Exactly zero (no tolerance)."""
        return self.value == 0.0


class Shares(_Quantity):
    """A signed number of shares (or units of the cash ticker)."""

    def __mul__(self, other):
        if isinstance(other, Price):
            return Money(self.value * other.value)
        return super().__mul__(other)


class Money(_Quantity):
    """A signed amount of money."""

    def __truediv__(self, other):
        if isinstance(other, Price):
            return Shares(self.value / other.value)
        return super().__truediv__(other)


class Price(_Quantity):
    """Money per share."""

    def __mul__(self, other):
        if isinstance(other, Shares):
            return Money(self.value * other.value)
        return super().__mul__(other)
