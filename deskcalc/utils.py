import enum
import math


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


def is_integral(value: float) -> bool:
    """True if value converts to int and back without information loss"""
    return math.isfinite(value) and float(int(value)) == value
