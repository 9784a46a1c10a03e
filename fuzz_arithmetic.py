"""Evaluate random expressions with deskcalc and with Python, print disagreements.

Expressions are generated as (deskcalc source, equivalent Python source) pairs:
"%" maps to math.fmod, "^" to math.pow, "|x|" to abs(x) and every grouping to
parentheses. Run from the project root, stop with Ctrl-C.
"""
import math
import random

from deskcalc.errors import CalcError
from deskcalc.evaluator import Evaluator

GROUPINGS = [("(", ")"), ("{", "}"), ("[", "]"), ("|", "|")]


def gen_number() -> tuple[str, str]:
    if random.random() < 0.5:
        # float literal on the Python side, deskcalc has no integers
        text = str(random.randint(0, 20))
        return text, f"{text}.0"
    text = random.choice([f"{random.uniform(0, 10):.2f}", f".{random.randint(1, 9)}"])
    return text, text


def gen_factor(depth: int) -> tuple[str, str]:
    if depth <= 0 or random.random() < 0.4:
        return gen_number()
    if random.random() < 0.2:
        code, py = gen_factor(depth - 1)
        return f"-{code}", f"(-{py})"
    opening, closing = random.choice(GROUPINGS)
    code, py = gen_expression(depth - 1)
    if opening == "|":
        return f"|{code}|", f"abs({py})"
    return f"{opening}{code}{closing}", f"({py})"


def gen_power(depth: int) -> tuple[str, str]:
    base_code, base_py = gen_factor(depth)
    if random.random() < 0.2:
        exp_code, exp_py = gen_factor(depth - 1)
        return f"{base_code}^{exp_code}", f"math.pow({base_py}, {exp_py})"
    return base_code, base_py


def gen_term(depth: int) -> tuple[str, str]:
    code, py = gen_power(depth)
    for _ in range(random.randint(0, 2)):
        op = random.choice("*/%")
        right_code, right_py = gen_power(depth)
        code += f" {op} {right_code}"
        py = f"math.fmod({py}, {right_py})" if op == "%" else f"({py} {op} {right_py})"
    return code, py


def gen_expression(depth: int) -> tuple[str, str]:
    code, py = gen_term(depth)
    for _ in range(random.randint(0, 2)):
        op = random.choice("+-")
        right_code, right_py = gen_term(depth)
        code += f" {op} {right_code}"
        py = f"({py} {op} {right_py})"
    return code, py


def eval_py(code: str) -> float | ArithmeticError | ValueError:
    try:
        return float(eval(code, {"math": math}))
    except (ArithmeticError, ValueError) as e:
        return e


def eval_my(code: str) -> float | str:
    try:
        return Evaluator.from_source(code).statement()
    except CalcError as e:
        return str(e)


def agree(res_py: float | ArithmeticError | ValueError, res_my: float | str) -> bool:
    if isinstance(res_py, ZeroDivisionError):
        return isinstance(res_my, str)
    if not isinstance(res_py, float):
        # math.pow and math.fmod raise where C pow() and fmod() return inf or nan and carry on
        return True
    if not isinstance(res_my, float):
        return False
    if math.isnan(res_py) or math.isnan(res_my):
        return math.isnan(res_py) and math.isnan(res_my)
    return math.isclose(res_py, res_my, rel_tol=1e-9, abs_tol=1e-12)


if __name__ == "__main__":
    checked = 0
    while True:
        code, py_code = gen_expression(depth=3)
        res_py = eval_py(py_code)
        res_my = eval_my(code)
        checked += 1
        if not agree(res_py, res_my):
            print(f"{code!r}\npy: {py_code}\n  = {res_py}\nmy: {res_my}\n\n")
        if checked % 10000 == 0:
            print(f"{checked} expressions checked")
