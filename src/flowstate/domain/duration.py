"""Fixed-point durations: whole days plus hundredths of a day.

INVARIANT: ``fraction`` is always in ``0..99``. Addition carries overflow
into ``days``; subtraction saturates at zero and never goes negative.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

HUNDREDTHS_PER_DAY = 100


class Duration(BaseModel):
    """A span of work measured in days and hundredths of a day."""

    model_config = {"frozen": True}

    days: int = Field(default=0, ge=0)
    fraction: int = Field(default=0, ge=0, lt=HUNDREDTHS_PER_DAY)

    @classmethod
    def from_hundredths(cls, amount: int) -> Duration:
        """Build a normalized Duration from a hundredths count (negative clamps to zero)."""
        amount = max(0, amount)
        return cls(days=amount // HUNDREDTHS_PER_DAY, fraction=amount % HUNDREDTHS_PER_DAY)

    @property
    def hundredths(self) -> int:
        """Total length in hundredths of a day."""
        return self.days * HUNDREDTHS_PER_DAY + self.fraction

    def is_zero(self) -> bool:
        return self.days == 0 and self.fraction == 0

    def __add__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration.from_hundredths(self.hundredths + other.hundredths)

    def __sub__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration.from_hundredths(self.hundredths - other.hundredths)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return (self.days, self.fraction) < (other.days, other.fraction)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return (self.days, self.fraction) <= (other.days, other.fraction)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return (self.days, self.fraction) > (other.days, other.fraction)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return (self.days, self.fraction) >= (other.days, other.fraction)

    def __str__(self) -> str:
        return f"{self.days}.{self.fraction:02d}d"


ZERO = Duration()
ONE_DAY = Duration(days=1)
