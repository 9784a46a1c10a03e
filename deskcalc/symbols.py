import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from deskcalc.builtins import PREDEFINED_CONSTANTS
from deskcalc.errors import CalcNameError, ConstError

logger = logging.getLogger(__name__)


@dataclass
class Variable:
    name: str
    value: float
    is_const: bool = False


@dataclass
class SymbolTable:
    """Variables and constants of one calculator session.

    Lookup is a linear scan by name; an interactive session only ever holds a
    handful of names. Entries are never removed.
    """

    variables: list[Variable] = field(default_factory=list)

    @classmethod
    def with_constants(cls) -> "SymbolTable":
        table = cls()
        for name, value in PREDEFINED_CONSTANTS:
            table.declare(name, value, is_const=True)
        return table

    def _find(self, name: str) -> Optional[Variable]:
        for var in self.variables:
            if var.name == name:
                return var
        return None

    def is_declared(self, name: str) -> bool:
        return self._find(name) is not None

    def declare(self, name: str, value: float, is_const: bool = False) -> float:
        if self.is_declared(name):
            raise CalcNameError(f"{name!r} is already declared")
        self.variables.append(Variable(name=name, value=value, is_const=is_const))
        logger.debug(f"Declared {'constant' if is_const else 'variable'} {name} = {value!r}")
        return value

    def get(self, name: str) -> float:
        var = self._find(name)
        if var is None:
            raise CalcNameError(f"{name!r} is undefined")
        return var.value

    def set(self, name: str, value: float) -> None:
        var = self._find(name)
        if var is None:
            raise CalcNameError(f"{name!r} is undefined")
        if var.is_const:
            raise ConstError(f"Cannot assign to a constant {name!r}")
        logger.debug(f"Assigned {name} = {value!r} (was {var.value!r})")
        var.value = value

    def __iter__(self) -> Iterator[Variable]:
        return iter(self.variables)

    def __len__(self) -> int:
        return len(self.variables)
