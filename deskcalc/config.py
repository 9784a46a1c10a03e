from dataclasses import dataclass
from typing import Mapping

from deskcalc.tokenizer import KEYWORDS, TokenKind


@dataclass(frozen=True)
class Dialect:
    """Keyword and bracket set accepted by the evaluator"""

    name: str
    keywords: Mapping[str, TokenKind]
    groupings: Mapping[TokenKind, TokenKind]
    absolute_value: bool = True


FULL_DIALECT = Dialect(
    name="full",
    keywords=KEYWORDS,
    groupings={
        TokenKind.LPAREN: TokenKind.RPAREN,
        TokenKind.LBRACE: TokenKind.RBRACE,
        TokenKind.LBRACKET: TokenKind.RBRACKET,
    },
)

CLASSIC_DIALECT = Dialect(
    name="classic",
    keywords={word: kind for word, kind in KEYWORDS.items() if kind is not TokenKind.CONST},
    groupings={TokenKind.LPAREN: TokenKind.RPAREN},
    absolute_value=False,
)

DIALECTS = {dialect.name: dialect for dialect in (FULL_DIALECT, CLASSIC_DIALECT)}

# max_digits10 of a double (17) plus two
DEFAULT_PRECISION = 17 + 2


@dataclass
class ReplConfig:
    prompt: str = "> "
    precision: int = DEFAULT_PRECISION
    dialect: Dialect = FULL_DIALECT
    show_prompt: bool = True
