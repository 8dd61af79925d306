"""
Monkey token definitions
Token kinds and the immutable token record shared by the tokenizer, parser and AST
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class TokenKind(Enum):
    """Closed set of token kinds; values are the spellings used in diagnostics"""
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers and literals
    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self) -> str:
        return self.value


KEYWORDS: Dict[str, TokenKind] = {
    "fn": TokenKind.FUNCTION,
    "let": TokenKind.LET,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "return": TokenKind.RETURN,
}

OPERATORS: Dict[str, TokenKind] = {
    kind.value: kind for kind in TokenKind
    if not kind.value.isalpha()
}


@dataclass(frozen=True)
class Token:
    """Monkey token with source position"""
    kind: TokenKind
    literal: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        return f"{self.kind}({self.literal!r})"


def lookup_ident(word: str) -> TokenKind:
    """Classify a word as a keyword or a plain identifier"""
    return KEYWORDS.get(word, TokenKind.IDENT)
