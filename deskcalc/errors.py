from dataclasses import dataclass
from typing import ClassVar


@dataclass
class CalcError(Exception):
    errmsg: str
    code: str = ""
    error_char_idx: int = -1

    category: ClassVar[str] = "Error"

    def __str__(self) -> str:
        header = f"[{self.category}] {self.errmsg}"
        code = self.code.rstrip("\n")
        if not code or self.error_char_idx < 0:
            return header
        print_start_idx = max(0, self.error_char_idx - 10)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(code), self.error_char_idx + 10)
        print_ellipsis_post = print_end_idx < len(code)
        return "\n".join(
            [
                header,
                (
                    ("..." if print_ellipsis_pre else "")
                    + f"{code[print_start_idx:print_end_idx]}"
                    + ("..." if print_ellipsis_post else "")
                ),
                " " * (self.error_char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
            ]
        )


class LexError(CalcError):
    category = "Tokenizer error"


class CalcSyntaxError(CalcError):
    category = "Syntax error"


class CalcNameError(CalcError):
    category = "Name error"


class ConstError(CalcError):
    category = "Const error"


class CalcArithmeticError(CalcError):
    category = "Arithmetic error"


class DomainError(CalcError):
    category = "Domain error"


class PushbackError(RuntimeError):
    """Token pushed back into a full buffer; a bug in the caller, never user input"""
