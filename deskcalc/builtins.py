import math
from typing import Callable

from deskcalc.errors import DomainError
from deskcalc.utils import is_integral

BuiltinFunc = Callable[[float], float]

BUILTIN_FUNCS: dict[str, BuiltinFunc] = dict()

# Same values as the M_* macros of <math.h>
PREDEFINED_CONSTANTS: list[tuple[str, float]] = [
    ("E", 2.71828182845904523536),
    ("LOG2E", 1.44269504088896340736),
    ("LOG10E", 0.434294481903251827651),
    ("LN2", 0.693147180559945309417),
    ("LN10", 2.30258509299404568402),
    ("PI", 3.14159265358979323846),
    ("PI_2", 1.57079632679489661923),
    ("PI_4", 0.785398163397448309616),
    ("SQRT2", 1.41421356237309504880),
]


def register_builtin_func(name: str):
    def decorator(fn: BuiltinFunc) -> BuiltinFunc:
        BUILTIN_FUNCS[name] = fn
        return fn

    return decorator


@register_builtin_func("sqrt")
def sqrt_(arg: float) -> float:
    if arg < 0:
        raise DomainError(f"Square root of negative number {arg!r}")
    return math.sqrt(arg)


@register_builtin_func("abs")
def abs_(arg: float) -> float:
    return abs(arg)


@register_builtin_func("factorial")
def factorial_(arg: float) -> float:
    if not is_integral(arg):
        raise DomainError(f"Factorial of non-integral number {arg!r}")
    n = int(arg)
    if n < 0:
        raise DomainError(f"Factorial of negative number {n}")
    result = 1.0
    for k in range(2, n + 1):
        result *= k
        if math.isinf(result):
            break
    return result


def _is_odd_integer(x: float) -> bool:
    return is_integral(x) and int(x) % 2 == 1


def power(base: float, exponent: float) -> float:
    """IEEE pow(): overflow saturates to infinity, invalid operands give nan"""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0:
            # pole error, 0 raised to a negative power
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def remainder(a: float, b: float) -> float:
    """fmod() that returns nan for an infinite dividend instead of raising"""
    try:
        return math.fmod(a, b)
    except ValueError:
        return math.nan
