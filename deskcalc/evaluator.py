"""Recursive-descent evaluator.

Parsing and evaluation happen in one pass, no syntax tree is built. Grammar,
from lowest to highest precedence:

    statement        ::= "let" declaration | "const" declaration | "set" assignment | expression
    declaration      ::= identifier "=" expression
    assignment       ::= identifier "=" expression
    expression       ::= term { ("+" | "-") term }
    term             ::= power_expression { ("*" | "/" | "%") power_expression }
    power_expression ::= factor [ "!" | "^" factor ]
    factor           ::= "(" expression ")" | "{" expression "}" | "[" expression "]"
                       | "|" expression "|" | "sqrt" "(" expression ")"
                       | "-" factor | "+" factor | number | identifier

At most one postfix operator is applied by power_expression, so "2^3^2" and
"3!!" leave the second operator unconsumed.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO, Type

from deskcalc.builtins import BUILTIN_FUNCS, power, remainder
from deskcalc.config import FULL_DIALECT, Dialect
from deskcalc.errors import CalcArithmeticError, CalcError, CalcSyntaxError
from deskcalc.symbols import SymbolTable
from deskcalc.tokenizer import Token, TokenKind, TokenStream

logger = logging.getLogger(__name__)


class Evaluator:
    def __init__(self, ts: TokenStream, symbols: Optional[SymbolTable] = None, dialect: Dialect = FULL_DIALECT):
        self.ts = ts
        # the dialect decides which words the stream lexes as keywords
        self.ts.keywords = dialect.keywords
        self.symbols = symbols if symbols is not None else SymbolTable.with_constants()
        self.dialect = dialect

    @classmethod
    def from_source(
        cls,
        source: TextIO | str,
        symbols: Optional[SymbolTable] = None,
        dialect: Dialect = FULL_DIALECT,
    ) -> "Evaluator":
        return cls(TokenStream(source), symbols=symbols, dialect=dialect)

    def statement(self) -> float:
        t = self.ts.get()
        if t.kind is TokenKind.LET:
            return self._declaration(is_const=False)
        elif t.kind is TokenKind.CONST:
            return self._declaration(is_const=True)
        elif t.kind is TokenKind.SET:
            return self._assignment()
        else:
            self.ts.putback(t)
            return self.expression()

    def recover(self) -> None:
        """Skip the rest of a failed statement, through its terminator"""
        logger.debug("Recovering from error, discarding the rest of the statement")
        self.ts.ignore(TokenKind.PRINT)

    def _error(self, error_cls: Type[CalcError], errmsg: str, token: Token) -> CalcError:
        return error_cls(errmsg, code=self.ts.chars.line, error_char_idx=token.pos)

    def _expect(self, kind: TokenKind, errmsg: str) -> Token:
        t = self.ts.get()
        if t.kind is not kind:
            raise self._error(CalcSyntaxError, errmsg, t)
        return t

    def _declaration(self, is_const: bool) -> float:
        name = self._expect(TokenKind.IDENTIFIER, "Identifier missing in declaration").name
        self._expect(TokenKind.EQUAL, f"'=' missing in declaration of {name!r}")
        value = self.expression()
        return self.symbols.declare(name, value, is_const=is_const)

    def _assignment(self) -> float:
        name = self._expect(TokenKind.IDENTIFIER, "Identifier missing in assignment").name
        self._expect(TokenKind.EQUAL, f"'=' missing in assignment of {name!r}")
        value = self.expression()
        self.symbols.set(name, value)
        return value

    def expression(self) -> float:
        left = self._term()
        while True:
            t = self.ts.get()
            if t.kind is TokenKind.PLUS:
                left += self._term()
            elif t.kind is TokenKind.MINUS:
                left -= self._term()
            else:
                self.ts.putback(t)
                return left

    def _term(self) -> float:
        left = self._power_expression()
        while True:
            t = self.ts.get()
            if t.kind is TokenKind.STAR:
                left *= self._power_expression()
            elif t.kind is TokenKind.SLASH:
                divisor = self._power_expression()
                if divisor == 0:
                    raise self._error(CalcArithmeticError, "Division by zero", t)
                left /= divisor
            elif t.kind is TokenKind.PERCENT:
                divisor = self._power_expression()
                if divisor == 0:
                    raise self._error(CalcArithmeticError, "Modulo division by zero", t)
                left = remainder(left, divisor)
            else:
                self.ts.putback(t)
                return left

    def _power_expression(self) -> float:
        left = self._factor()
        t = self.ts.get()
        if t.kind is TokenKind.BANG:
            with self._located_at(t):
                return BUILTIN_FUNCS["factorial"](left)
        elif t.kind is TokenKind.CARET:
            return power(left, self._factor())
        else:
            self.ts.putback(t)
            return left

    def _factor(self) -> float:
        t = self.ts.get()
        if t.kind in self.dialect.groupings:
            value = self.expression()
            self._expect_closing(self.dialect.groupings[t.kind])
            return value
        elif t.kind is TokenKind.BAR and self.dialect.absolute_value:
            value = self.expression()
            self._expect_closing(TokenKind.BAR)
            return BUILTIN_FUNCS["abs"](value)
        elif t.kind is TokenKind.SQRT:
            self._expect(TokenKind.LPAREN, "'(' missing after sqrt")
            value = self.expression()
            with self._located_at(t):
                value = BUILTIN_FUNCS["sqrt"](value)
            self._expect_closing(TokenKind.RPAREN)
            return value
        elif t.kind is TokenKind.MINUS:
            return -self._factor()
        elif t.kind is TokenKind.PLUS:
            return self._factor()
        elif t.kind is TokenKind.NUMBER:
            return t.value
        elif t.kind is TokenKind.IDENTIFIER:
            with self._located_at(t):
                return self.symbols.get(t.name)
        else:
            raise self._error(CalcSyntaxError, "Factor expected", t)

    def _expect_closing(self, kind: TokenKind) -> None:
        self._expect(kind, f"'{CLOSING_LEXEMES[kind]}' missing in expression")

    @contextmanager
    def _located_at(self, token: Token) -> Iterator[None]:
        """Point errors raised outside the parser (builtins, symbol table) at the token"""
        try:
            yield
        except CalcError as e:
            if e.error_char_idx < 0:
                e.code = self.ts.chars.line
                e.error_char_idx = token.pos
            raise


CLOSING_LEXEMES = {
    TokenKind.RPAREN: ")",
    TokenKind.RBRACE: "}",
    TokenKind.RBRACKET: "]",
    TokenKind.BAR: "|",
}
