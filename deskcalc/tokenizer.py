import enum
import io
import logging
import re
from dataclasses import dataclass
from typing import Mapping, Optional, TextIO

from deskcalc.errors import LexError, PushbackError
from deskcalc.utils import PrintableEnum

logger = logging.getLogger(__name__)


class TokenKind(PrintableEnum):
    PRINT = enum.auto()
    QUIT = enum.auto()
    NUMBER = enum.auto()
    IDENTIFIER = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    PERCENT = enum.auto()
    CARET = enum.auto()
    BANG = enum.auto()
    LPAREN = enum.auto()
    RPAREN = enum.auto()
    LBRACE = enum.auto()
    RBRACE = enum.auto()
    LBRACKET = enum.auto()
    RBRACKET = enum.auto()
    BAR = enum.auto()
    EQUAL = enum.auto()
    COMMA = enum.auto()
    LET = enum.auto()
    CONST = enum.auto()
    SET = enum.auto()
    SQRT = enum.auto()


@dataclass
class Token:
    kind: TokenKind
    lexeme: str
    value: float = 0.0
    pos: int = -1

    @property
    def name(self) -> str:
        return self.lexeme

    def __str__(self) -> str:
        return f"<{self.kind}>{self.lexeme}"


SINGLE_CHAR_TOKENS = {
    ";": TokenKind.PRINT,
    "\n": TokenKind.PRINT,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "|": TokenKind.BAR,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "^": TokenKind.CARET,
    "!": TokenKind.BANG,
    "=": TokenKind.EQUAL,
    ",": TokenKind.COMMA,
}

KEYWORDS: Mapping[str, TokenKind] = {
    "let": TokenKind.LET,
    "const": TokenKind.CONST,
    "set": TokenKind.SET,
    "exit": TokenKind.QUIT,
    "quit": TokenKind.QUIT,
    "sqrt": TokenKind.SQRT,
}

# digits[.digits][e[+-]digits] | .digits[e[+-]digits]; the exponent is only taken if it has digits
NUMBER_RE = re.compile(r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
IDENTIFIER_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


class CharSource:
    """Line-buffered cursor over a text stream"""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.line = ""
        self.pos = 0
        self.exhausted = False

    def _fill(self) -> None:
        while self.pos >= len(self.line) and not self.exhausted:
            self.line = self.stream.readline()
            self.pos = 0
            if not self.line:
                self.exhausted = True

    def peek(self) -> str:
        """Current character, or empty string at end of input"""
        self._fill()
        if self.pos < len(self.line):
            return self.line[self.pos]
        return ""

    def advance(self, n: int = 1) -> None:
        self.pos += n

    def match(self, pattern: re.Pattern) -> Optional[str]:
        self._fill()
        m = pattern.match(self.line, self.pos)
        if m is None:
            return None
        self.pos = m.end()
        return m.group()


class TokenStream:
    def __init__(self, source: TextIO | str, keywords: Mapping[str, TokenKind] = KEYWORDS):
        if isinstance(source, str):
            source = io.StringIO(source)
        self.chars = CharSource(source)
        self.keywords = keywords
        self.buffer: Optional[Token] = None
        self.last: Optional[Token] = None

    def get(self) -> Token:
        self.last = None
        if self.buffer is not None:
            token, self.buffer = self.buffer, None
        else:
            token = self._scan()
        self.last = token
        return token

    def putback(self, token: Token) -> None:
        if self.buffer is not None:
            raise PushbackError(f"Attempt to put back {token} into a full buffer holding {self.buffer}")
        self.buffer = token
        self.last = None

    def ignore(self, kind: TokenKind = TokenKind.PRINT) -> None:
        """Discard input up to and including the next token of the given kind"""
        if self.buffer is not None:
            buffered, self.buffer = self.buffer, None
            if buffered.kind is kind:
                return
        elif self.last is not None and self.last.kind is kind:
            # the terminator itself was what the parser choked on
            return
        stop_chars = {ch for ch, ch_kind in SINGLE_CHAR_TOKENS.items() if ch_kind is kind}
        skipped = 0
        while True:
            ch = self.chars.peek()
            if not ch:
                break
            self.chars.advance()
            if ch in stop_chars:
                break
            skipped += 1
        self.last = None
        logger.debug(f"Skipped {skipped} characters up to {kind}")

    def _scan(self) -> Token:
        chars = self.chars
        while chars.peek() and chars.peek() != "\n" and chars.peek().isspace():
            chars.advance()

        ch = chars.peek()
        pos = chars.pos
        if not ch:
            return Token(kind=TokenKind.QUIT, lexeme="", pos=pos)
        if ch in SINGLE_CHAR_TOKENS:
            chars.advance()
            return Token(kind=SINGLE_CHAR_TOKENS[ch], lexeme=ch, pos=pos)
        if ch in "0123456789.":
            lexeme = chars.match(NUMBER_RE)
            if lexeme is None:
                chars.advance()
                raise LexError(f"Malformed number starting with {ch!r}", code=chars.line, error_char_idx=pos)
            return Token(kind=TokenKind.NUMBER, lexeme=lexeme, value=float(lexeme), pos=pos)
        word = chars.match(IDENTIFIER_RE)
        if word is not None:
            kind = self.keywords.get(word, TokenKind.IDENTIFIER)
            return Token(kind=kind, lexeme=word, pos=pos)
        chars.advance()
        raise LexError(f"Unexpected character: {ch!r}", code=chars.line, error_char_idx=pos)
