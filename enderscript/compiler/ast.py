"""
EnderScript Abstract Syntax Tree

Defines AST node classes for the EnderScript language.

Every node owns its children and carries the span an error report should
point at. Nodes are frozen once the parser has built them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Tuple
from .span import Span


# =============================================================================
# Base Classes
# =============================================================================

class Expression(ABC):
    """Base class for all AST nodes."""
    
    span: Span
    
    @abstractmethod
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        """Accept a visitor, passing extra arguments through to it."""
        pass


@dataclass(frozen=True)
class Parameter:
    """A typed function parameter (name: type)."""
    name: str
    type_name: str
    span: Span


# =============================================================================
# Declarations
# =============================================================================

@dataclass(frozen=True)
class VariableDeclaration(Expression):
    """let name[: type][= initializer]"""
    name: str
    declared_type: Optional[str]
    initializer: Optional[Expression]
    span: Span
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_variable_declaration(self, *args)


@dataclass(frozen=True)
class VariableAssign(Expression):
    """name = value"""
    name: str
    value: Expression
    span: Span
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_variable_assign(self, *args)


@dataclass(frozen=True)
class FunctionDeclaration(Expression):
    """function name(params)[: type] { body }"""
    name: str
    parameters: Tuple[Parameter, ...]
    return_type: Optional[str]
    body: Tuple[Expression, ...]
    span: Span
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_function_declaration(self, *args)


@dataclass(frozen=True)
class FunctionCall(Expression):
    """name(arguments)"""
    name: str
    arguments: Tuple[Expression, ...]
    span: Span
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_function_call(self, *args)


@dataclass(frozen=True)
class RawCode(Expression):
    """raw "command text", emitted verbatim."""
    text: str
    span: Span
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_raw_code(self, *args)


# =============================================================================
# Arithmetic
# =============================================================================

@dataclass(frozen=True)
class BinaryOperation(Expression):
    """Base for the four arithmetic operators."""
    left: Expression
    right: Expression
    span: Span
    
    symbol = '?'


@dataclass(frozen=True)
class Addition(BinaryOperation):
    symbol = '+'
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_addition(self, *args)


@dataclass(frozen=True)
class Subtraction(BinaryOperation):
    symbol = '-'
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_subtraction(self, *args)


@dataclass(frozen=True)
class Multiplication(BinaryOperation):
    symbol = '*'
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_multiplication(self, *args)


@dataclass(frozen=True)
class Division(BinaryOperation):
    symbol = '/'
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_division(self, *args)


# =============================================================================
# Atoms
# =============================================================================

@dataclass(frozen=True)
class IntegerLiteral(Expression):
    """Integer literal; range is checked by the code generator."""
    value: int
    span: Span
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_integer_literal(self, *args)


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str
    span: Span
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_string_literal(self, *args)


@dataclass(frozen=True)
class VariableAccess(Expression):
    name: str
    span: Span
    
    def accept(self, visitor: 'ASTVisitor', *args) -> Any:
        return visitor.visit_variable_access(self, *args)


# =============================================================================
# Visitor Interface
# =============================================================================

class ASTVisitor(ABC):
    """
    Visitor interface for AST traversal.
    
    One abstract method per node type: a visitor missing a node type cannot
    be instantiated.
    """
    
    @abstractmethod
    def visit_variable_declaration(self, node: VariableDeclaration, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_variable_assign(self, node: VariableAssign, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_function_declaration(self, node: FunctionDeclaration, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_function_call(self, node: FunctionCall, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_raw_code(self, node: RawCode, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_addition(self, node: Addition, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_subtraction(self, node: Subtraction, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_multiplication(self, node: Multiplication, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_division(self, node: Division, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_integer_literal(self, node: IntegerLiteral, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_string_literal(self, node: StringLiteral, *args) -> Any:
        pass
    
    @abstractmethod
    def visit_variable_access(self, node: VariableAccess, *args) -> Any:
        pass


def references(node: Expression, name: str) -> bool:
    """Check whether an expression reads or writes the variable `name`."""
    if isinstance(node, VariableAccess):
        return node.name == name
    if isinstance(node, VariableAssign):
        return node.name == name or references(node.value, name)
    if isinstance(node, VariableDeclaration):
        return node.initializer is not None and references(node.initializer, name)
    if isinstance(node, BinaryOperation):
        return references(node.left, name) or references(node.right, name)
    if isinstance(node, FunctionCall):
        return any(references(arg, name) for arg in node.arguments)
    return False


def assigns(node: Expression, name: str) -> bool:
    """Check whether an expression writes the variable `name`."""
    if isinstance(node, VariableAssign):
        return node.name == name or assigns(node.value, name)
    if isinstance(node, VariableDeclaration):
        return node.initializer is not None and assigns(node.initializer, name)
    if isinstance(node, BinaryOperation):
        return assigns(node.left, name) or assigns(node.right, name)
    if isinstance(node, FunctionCall):
        return any(assigns(arg, name) for arg in node.arguments)
    return False


def stored_variable(node: Expression) -> Optional[str]:
    """Name of the variable whose slot holds the value of `node`, if any."""
    if isinstance(node, (VariableAccess, VariableAssign)):
        return node.name
    return None


# =============================================================================
# AST Printer (for debugging)
# =============================================================================

class ASTPrinter(ASTVisitor):
    """Prints AST for debugging."""
    
    def __init__(self):
        self.indent = 0
    
    def print(self, node: Expression) -> str:
        return node.accept(self)
    
    def print_program(self, statements) -> str:
        self.indent += 1
        lines = [stmt.accept(self) for stmt in statements]
        self.indent -= 1
        return "\n".join(["Program"] + lines)
    
    def _indent(self) -> str:
        return "  " * self.indent
    
    def _children(self, *nodes: Expression) -> str:
        self.indent += 1
        lines = [node.accept(self) for node in nodes]
        self.indent -= 1
        return "".join("\n" + line for line in lines)
    
    def visit_variable_declaration(self, node: VariableDeclaration) -> str:
        type_ = f": {node.declared_type}" if node.declared_type else ""
        head = f"{self._indent()}VariableDeclaration({node.name}{type_})"
        if node.initializer is not None:
            return head + self._children(node.initializer)
        return head
    
    def visit_variable_assign(self, node: VariableAssign) -> str:
        return f"{self._indent()}VariableAssign({node.name})" + self._children(node.value)
    
    def visit_function_declaration(self, node: FunctionDeclaration) -> str:
        params = ", ".join(f"{p.name}: {p.type_name}" for p in node.parameters)
        returns = f": {node.return_type}" if node.return_type else ""
        head = f"{self._indent()}FunctionDeclaration({node.name}({params}){returns})"
        return head + self._children(*node.body)
    
    def visit_function_call(self, node: FunctionCall) -> str:
        return f"{self._indent()}FunctionCall({node.name})" + self._children(*node.arguments)
    
    def visit_raw_code(self, node: RawCode) -> str:
        return f"{self._indent()}RawCode({node.text!r})"
    
    def _binary(self, node: BinaryOperation) -> str:
        name = type(node).__name__
        return f"{self._indent()}{name}" + self._children(node.left, node.right)
    
    def visit_addition(self, node: Addition) -> str:
        return self._binary(node)
    
    def visit_subtraction(self, node: Subtraction) -> str:
        return self._binary(node)
    
    def visit_multiplication(self, node: Multiplication) -> str:
        return self._binary(node)
    
    def visit_division(self, node: Division) -> str:
        return self._binary(node)
    
    def visit_integer_literal(self, node: IntegerLiteral) -> str:
        return f"{self._indent()}IntegerLiteral({node.value})"
    
    def visit_string_literal(self, node: StringLiteral) -> str:
        return f"{self._indent()}StringLiteral({node.value!r})"
    
    def visit_variable_access(self, node: VariableAccess) -> str:
        return f"{self._indent()}VariableAccess({node.name})"
