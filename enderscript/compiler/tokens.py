"""
EnderScript Token Definitions

Defines all token types and the Token class for lexical analysis.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any

from .span import Span


class TokenType(Enum):
    """All token types in EnderScript."""
    
    # Literals
    INTEGER = auto()
    STRING = auto()
    IDENTIFIER = auto()
    
    # Keywords
    LET = auto()
    FUNCTION = auto()
    RAW = auto()
    
    # Operators
    PLUS = auto()          # +
    MINUS = auto()         # -
    STAR = auto()          # *
    SLASH = auto()         # /
    
    # Assignment
    ASSIGN = auto()        # =
    
    # Delimiters
    LPAREN = auto()        # (
    RPAREN = auto()        # )
    LBRACE = auto()        # {
    RBRACE = auto()        # }
    COMMA = auto()         # ,
    COLON = auto()         # :
    
    # Special
    NEWLINE = auto()
    EOF = auto()
    ERROR = auto()         # illegal character


# Keyword mapping
KEYWORDS = {
    'let': TokenType.LET,
    'function': TokenType.FUNCTION,
    'raw': TokenType.RAW,
}


# Single-character punctuation
SYMBOLS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '=': TokenType.ASSIGN,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    ',': TokenType.COMMA,
    ':': TokenType.COLON,
}


@dataclass
class Token:
    """Represents a single token from the source code."""
    
    type: TokenType
    lexeme: str
    value: Any
    span: Span
    
    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.lexeme!r}, {self.value!r}, line={self.line})"
        return f"Token({self.type.name}, {self.lexeme!r}, line={self.line})"
    
    @property
    def line(self) -> int:
        return self.span.start.line
    
    @property
    def column(self) -> int:
        return self.span.start.column
    
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in KEYWORDS.values()
    
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in (TokenType.INTEGER, TokenType.STRING)
    
    def is_operator(self) -> bool:
        """Check if this token is an arithmetic operator."""
        return self.type in (
            TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.SLASH
        )


# Operator precedence (higher = binds tighter)
PRECEDENCE = {
    TokenType.PLUS: 1,
    TokenType.MINUS: 1,
    TokenType.STAR: 2,
    TokenType.SLASH: 2,
}


def get_precedence(token_type: TokenType) -> int:
    """Get the precedence of an operator token type."""
    return PRECEDENCE.get(token_type, 0)
