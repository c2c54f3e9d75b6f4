"""
EnderScript Compiler Errors

Defines the diagnostic catalogue, the Message record shared by the parser
and the code generator, and the exceptions that carry it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from .span import Span


class MessageType(Enum):
    """
    Diagnostic kinds with their stable codes.
    
    Codes read ES<process><number><severity>: process 0 is the parser,
    1 the compiler; severity is E (error) or W (warning).
    """
    
    ILLEGAL_CHARACTER = (True, "ES000E", "Illegal character")
    MISSING_EXPRESSION = (True, "ES001E", "Missing expression")
    MISSING_MEMBER_DECLARATION = (True, "ES002E", "Missing member declaration")
    MISSING_MEMBER_NAME = (True, "ES003E", "Missing member name")
    MISSING_MEMBER_TYPE = (True, "ES004E", "Missing member type")
    MISSING_MEMBER_TYPE_OR_VALUE_ASSIGNMENT = (
        True, "ES005E", "Missing member type or value assignment")
    MISSING_CASE = (True, "ES006E", "Missing case")
    MISSING_CASE_CLOSURE = (True, "ES007E", "Missing case closure")
    MISSING_CASE_SEPARATOR_OR_CLOSURE = (
        True, "ES008E", "Missing case separator or closure")
    MISSING_BLOCK = (True, "ES009E", "Missing block")
    MISSING_BLOCK_CLOSURE = (True, "ES010E", "Missing block closure")
    MISSING_BLOCK_SEPARATOR_OR_CLOSURE = (
        True, "ES011E", "Missing block separator or closure")
    UNKNOWN_TYPE = (True, "ES100E", "Unknown type")
    INTEGER_BOUNDS_EXCEEDED = (True, "ES101E", "Integer bounds exceeded")
    TYPE_MISMATCH = (True, "ES102E", "Type mismatch")
    UNKNOWN_MEMBER = (True, "ES103E", "Unknown member")
    MEMBER_REDECLARATION = (True, "ES104E", "Member redeclaration")
    DIVISION_BY_ZERO = (True, "ES105E", "Division by zero")
    ARGUMENT_COUNT_MISMATCH = (True, "ES106E", "Argument count mismatch")
    
    @property
    def is_error(self) -> bool:
        return self.value[0]
    
    @property
    def code(self) -> str:
        return self.value[1]
    
    @property
    def title(self) -> str:
        return self.value[2]


# =============================================================================
# Detail texts
# =============================================================================

def illegal_character(char: str) -> str:
    return f"Character '{char}' is not allowed"


def missing_expression() -> str:
    return "Expected any expression"


def missing_specific_expression(kind: str) -> str:
    return f"Expected {kind} expression"


def missing_member_declaration(name: str, member_type: str) -> str:
    return f"Expected ':' to declare {member_type} '{name}'"


def missing_member_type_or_value_assignment(member_type: str) -> str:
    return f"Expected ':' to declare {member_type} type or '=' to assign a value"


def missing_member_type(member_type: str) -> str:
    return f"Expected {member_type} type"


def missing_member_name(member_type: str) -> str:
    return f"Expected {member_type} name"


def missing_case(case_type: str) -> str:
    return f"Expected '(' to open {case_type}"


def missing_case_closure() -> str:
    return "Expected ')'"


def missing_case_separator_or_closure() -> str:
    return "Expected ',' or ')'"


def missing_block() -> str:
    return "Expected '{' to open a block"


def missing_block_closure() -> str:
    return "Expected '}' to close the block"


def missing_block_separator_or_closure() -> str:
    return "Expected a new line or '}'"


def missing_statement_separator() -> str:
    return "Expected a new line"


def unknown_type(type_name: str) -> str:
    return f'Type "{type_name}" does not exist in this scope'


def integer_bounds_exceeded(byte_limit: int) -> str:
    return f"Provided integer exceeds the {byte_limit} byte limit"


def type_mismatch(expected: str, got: str) -> str:
    return f"Expected value of type {expected}, got {got}"


def unknown_member(member_type: str, name: str) -> str:
    return f"{member_type} '{name}' is not declared in this scope"


def member_redeclaration(member_type: str, name: str) -> str:
    return f"{member_type} '{name}' had already been declared"


def division_by_zero() -> str:
    return "Cannot divide by zero"


def argument_count_mismatch(name: str, expected: int, got: int) -> str:
    return f"Function '{name}' expects {expected} argument(s), got {got}"


# =============================================================================
# Message
# =============================================================================

@dataclass(frozen=True)
class Message:
    """A diagnostic: kind, human-readable details and the offending span."""
    
    message_type: MessageType
    details: str
    span: Span
    
    @property
    def code(self) -> str:
        return self.message_type.code
    
    def header(self) -> str:
        severity = "Error" if self.message_type.is_error else "Warning"
        return f"{severity} {self.code}: {self.message_type.title}"
    
    def location(self) -> str:
        start = self.span.start
        return f"{self.span.file_name}:{start.line}:{start.column}"
    
    def render(self) -> str:
        """
        Render the message as a boxed source excerpt.
        
        The offending range of the first line of the span is underlined and
        the details are printed under the middle of the underline.
        """
        start, end = self.span.start, self.span.end
        lines = self.span.text.split('\n')
        source_line = lines[start.line - 1] if start.line - 1 < len(lines) else ""
        
        first_col = start.column - 1
        if end.line == start.line:
            width = max(end.column - start.column, 1)
        else:
            width = max(len(source_line) - first_col, 1)
        middle = width // 2
        
        line_num = str(start.line)
        padding = " " * (len(line_num) + 2)
        
        underline = " " * first_col + "─" * middle + "┬" + "─" * (width - middle - 1)
        pointer = " " * (first_col + middle) + "╰─" + "─" * (width - middle) + " " + self.details
        
        out: List[str] = [
            self.header(),
            f"{padding}╭─[{self.location()}]",
            f"{padding}│",
            f" {line_num} │ {source_line}",
            f"{padding}· {underline}",
            f"{padding}· {pointer}",
            "─" * len(padding) + "╯",
        ]
        return "\n".join(out)


# =============================================================================
# Exceptions
# =============================================================================

class EnderScriptError(Exception):
    """Base exception for all EnderScript diagnostics."""
    
    def __init__(self, message: Message):
        self.message = message
        super().__init__(self._format_message())
    
    def _format_message(self) -> str:
        """Format the error message with location information."""
        return f"{self.message.location()}: {self.message.details}"
    
    @classmethod
    def of(cls, message_type: MessageType, details: str, span: Span) -> 'EnderScriptError':
        return cls(Message(message_type, details, span))
    
    @property
    def message_type(self) -> MessageType:
        return self.message.message_type
    
    @property
    def code(self) -> str:
        return self.message.code
    
    @property
    def span(self) -> Span:
        return self.message.span
    
    def render(self) -> str:
        return self.message.render()


class ParseError(EnderScriptError):
    """Raised for diagnostics found while parsing."""
    pass


class CompileError(EnderScriptError):
    """Raised for semantic errors during compilation."""
    pass
