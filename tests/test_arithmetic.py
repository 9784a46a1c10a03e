import math
from typing import Type

import pytest

from deskcalc.errors import CalcArithmeticError, CalcError, CalcNameError, CalcSyntaxError, DomainError, LexError
from deskcalc.evaluator import Evaluator
from deskcalc.tokenizer import TokenKind


def evaluate(code: str) -> float:
    return Evaluator.from_source(code).statement()


@pytest.mark.parametrize(
    "code, expected_ret_val",
    [
        pytest.param("1", 1.0),
        pytest.param("-1", -1.0),
        pytest.param("+5", 5.0),
        pytest.param("--5", 5.0),
        pytest.param("1+2", 3.0),
        pytest.param("(1+2)", 3.0),
        pytest.param("-(1+2)", -3.0),
        pytest.param("(((1)))", 1.0),
        pytest.param("1 * 4 + 5", 9.0),
        pytest.param("1 + 4 * 5", 21.0),
        pytest.param("2 + 3 * 4", 14.0),
        pytest.param("10 - 2 - 3", 5.0),
        pytest.param("10 / 5 / 2 / 2", 0.5),
        pytest.param("10 + 2 * (5 + 3 - 1)", 24.0),
        # grouping
        pytest.param("(2 + 3) * 4", 20.0),
        pytest.param("{2 + 3} * 4", 20.0),
        pytest.param("[2 + 3] * 4", 20.0),
        pytest.param("[{(1 + 1)}] * 2", 4.0),
        pytest.param("|-3|", 3.0),
        pytest.param("|2 - 5| + 1", 4.0),
        # remainder
        pytest.param("7 % 3", 1.0),
        pytest.param("-7 % 3", -1.0),
        pytest.param("7.5 % 2", 1.5),
        pytest.param("2 * 7 % 4", 2.0),
        # power and factorial
        pytest.param("2^10", 1024.0),
        pytest.param("2 * 3^2", 18.0),
        pytest.param("-2^2", 4.0),
        pytest.param("2^-1", 0.5),
        pytest.param("4^0.5", 2.0),
        pytest.param("5!", 120.0),
        pytest.param("0!", 1.0),
        pytest.param("3! * 2", 12.0),
        pytest.param("(2 + 1)!", 6.0),
        # sqrt
        pytest.param("sqrt(9)", 3.0),
        pytest.param("sqrt(16) + 1", 5.0),
        pytest.param("sqrt(0)", 0.0),
        # literals
        pytest.param("1.5e3", 1500.0),
        pytest.param(".5", 0.5),
        pytest.param("3.", 3.0),
        pytest.param("2.5E-1", 0.25),
        # predefined constants
        pytest.param("PI", math.pi),
        pytest.param("E", math.e),
        pytest.param("PI_2 * 2", math.pi),
    ],
)
def test_eval_arithmetic(code: str, expected_ret_val: float) -> None:
    assert evaluate(code) == expected_ret_val


@pytest.mark.parametrize(
    "literal",
    ["0", "42", "3.14159", "0.1", ".125", "1e-300", "2.5e+10", "123456789012345678", "1.7976931348623157e308"],
)
def test_numeric_literal_round_trip(literal: str) -> None:
    assert evaluate(literal) == float(literal)


def test_sqrt_of_two_squared() -> None:
    assert math.isclose(evaluate("sqrt(2) * sqrt(2)"), 2.0)


def test_ieee_power_semantics() -> None:
    assert math.isnan(evaluate("(-8)^(1/3)"))
    assert evaluate("10^400") == math.inf
    assert evaluate("(-10)^401") == -math.inf
    assert evaluate("0^-1") == math.inf


def test_factorial_saturates_to_infinity() -> None:
    assert math.isfinite(evaluate("170!"))
    assert evaluate("171!") == math.inf


@pytest.mark.parametrize(
    "code, expected_error",
    [
        pytest.param("10 / 0", CalcArithmeticError),
        pytest.param("10 % 0", CalcArithmeticError),
        pytest.param("1 / (2 - 2)", CalcArithmeticError),
        pytest.param("1 / -0", CalcArithmeticError),
        pytest.param("sqrt(-1)", DomainError),
        pytest.param("(-1)!", DomainError),
        pytest.param("2.5!", DomainError),
        pytest.param("(1 + 2", CalcSyntaxError),
        pytest.param("{1 + 2)", CalcSyntaxError),
        pytest.param("[1 + 2}", CalcSyntaxError),
        pytest.param("|1", CalcSyntaxError),
        pytest.param("*3", CalcSyntaxError),
        pytest.param("sqrt 4", CalcSyntaxError),
        pytest.param("sqrt(4", CalcSyntaxError),
        pytest.param("1 +", CalcSyntaxError),
        pytest.param("foo", CalcNameError),
        pytest.param("2 * bar", CalcNameError),
        pytest.param("2 $ 3", LexError),
        pytest.param(".", LexError),
        pytest.param("1٣", LexError),
    ],
)
def test_eval_errors(code: str, expected_error: Type[CalcError]) -> None:
    with pytest.raises(expected_error):
        evaluate(code)


@pytest.mark.parametrize(
    "code, first_value, leftover",
    [
        pytest.param("2^3^2", 8.0, TokenKind.CARET),
        pytest.param("3!!", 6.0, TokenKind.BANG),
        pytest.param("2^2!", 4.0, TokenKind.BANG),
    ],
)
def test_single_postfix_operator(code: str, first_value: float, leftover: TokenKind) -> None:
    evaluator = Evaluator.from_source(code)
    assert evaluator.statement() == first_value
    assert evaluator.ts.get().kind is leftover


def test_error_points_at_offending_token() -> None:
    with pytest.raises(CalcNameError) as e:
        evaluate("1 + foo")
    assert e.value.error_char_idx == 4
    assert str(e.value) == "[Name error] 'foo' is undefined\n1 + foo\n    ^"


def test_division_error_points_at_operator() -> None:
    with pytest.raises(CalcArithmeticError) as e:
        evaluate("8 / (1 - 1)")
    assert e.value.error_char_idx == 2
    assert "Division by zero" in str(e.value)
