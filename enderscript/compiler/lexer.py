"""
EnderScript Lexer

Tokenizes EnderScript source code into a stream of tokens.

The lexer never raises: characters that do not start a token become ERROR
tokens, and the parser reports them as illegal characters when it reaches
them.
"""

from typing import List
from .tokens import Token, TokenType, KEYWORDS, SYMBOLS
from .span import Span


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


class Lexer:
    """Lexical analyzer for EnderScript source code."""
    
    def __init__(self, source: str, file_name: str = "<source>"):
        """
        Initialize the lexer.
        
        Args:
            source: EnderScript source code to tokenize
            file_name: Name used when reporting diagnostics
        """
        self.source = source
        self.file_name = file_name
        self.tokens: List[Token] = []
        self.start = 0      # Start of current token
        self.current = 0    # Current position
    
    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.
        
        Returns:
            List of tokens, always terminated by an EOF token
        """
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()
        
        self.start = self.current
        self.add_token(TokenType.EOF)
        return self.tokens
    
    def scan_token(self) -> None:
        """Scan the next token."""
        c = self.advance()
        
        # Skip whitespace
        if c in ' \t\r\f':
            return
        
        if c == '\n':
            self.add_token(TokenType.NEWLINE)
            return
        
        # Line comments
        if c == '/' and self.peek() == '/':
            while self.peek() != '\n' and not self.is_at_end():
                self.advance()
            return
        
        if c in SYMBOLS:
            self.add_token(SYMBOLS[c])
        elif c == '"':
            self.string()
        elif is_digit(c):
            self.integer()
        elif c.isalpha() or c == '_':
            self.identifier()
        else:
            self.add_token(TokenType.ERROR)
    
    def advance(self) -> str:
        """Consume and return the current character."""
        c = self.source[self.current]
        self.current += 1
        return c
    
    def peek(self) -> str:
        """Return the current character without consuming it."""
        if self.is_at_end():
            return '\0'
        return self.source[self.current]
    
    def peek_next(self) -> str:
        """Return the next character without consuming it."""
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]
    
    def is_at_end(self) -> bool:
        """Check if we've reached the end of the source."""
        return self.current >= len(self.source)
    
    def add_token(self, type: TokenType, value=None) -> None:
        """Add a token covering start..current to the token list."""
        lexeme = self.source[self.start:self.current]
        span = Span.of(self.file_name, self.source, self.start, self.current)
        self.tokens.append(Token(type, lexeme, value, span))
    
    def string(self) -> None:
        """Scan a string literal."""
        value = []
        
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == '\\' and self.peek_next() in '"\\':
                self.advance()
            value.append(self.advance())
        
        if self.is_at_end():
            # Unterminated: only the opening quote is illegal
            self.current = self.start + 1
            self.add_token(TokenType.ERROR)
            return
        
        # Consume closing quote
        self.advance()
        
        self.add_token(TokenType.STRING, ''.join(value))
    
    def integer(self) -> None:
        """Scan an integer literal, allowing '_' between digit groups."""
        while is_digit(self.peek()) or (self.peek() == '_' and is_digit(self.peek_next())):
            self.advance()
        
        text = self.source[self.start:self.current]
        self.add_token(TokenType.INTEGER, int(text.replace('_', '')))
    
    def identifier(self) -> None:
        """Scan an identifier or keyword."""
        while self.peek().isalnum() or self.peek() == '_':
            self.advance()
        
        text = self.source[self.start:self.current]
        
        # Check if it's a keyword
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))


def tokenize(source: str, file_name: str = "<source>") -> List[Token]:
    """Tokenize source text in one call."""
    return Lexer(source, file_name).tokenize()
