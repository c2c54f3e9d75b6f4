"""
EnderScript Source Spans

Positions and spans attached to tokens, AST nodes and diagnostics.
Spans are used for error reporting only.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A character offset with its 1-based line and column."""
    
    index: int
    line: int
    column: int
    
    @classmethod
    def at(cls, text: str, index: int) -> 'Position':
        """
        Compute the position of a character index by scanning the text.
        
        Args:
            text: Full source text
            index: Character offset into text (may equal len(text))
        """
        index = max(0, min(index, len(text)))
        line = text.count('\n', 0, index) + 1
        line_start = text.rfind('\n', 0, index) + 1
        return cls(index, line, index - line_start + 1)


@dataclass(frozen=True)
class Span:
    """A source range; end is exclusive."""
    
    start: Position
    end: Position
    file_name: str
    text: str = ""
    
    @classmethod
    def of(cls, file_name: str, text: str, start: int, end: int) -> 'Span':
        """Build a span from two character offsets."""
        return cls(Position.at(text, start), Position.at(text, end), file_name, text)
    
    def merge(self, other: 'Span') -> 'Span':
        """Span from the start of this span to the end of other."""
        return Span(self.start, other.end, self.file_name, self.text)
    
    @property
    def source(self) -> str:
        """The text covered by this span."""
        return self.text[self.start.index:self.end.index]
    
    def __repr__(self) -> str:
        return f"Span({self.file_name}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column})"
