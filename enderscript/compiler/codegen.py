"""
EnderScript Code Generator

Generates scoreboard command blocks from an AST.

Every expression compiles to a Value: a ConstantInt known at compile time
or a StorageRef naming the slot its result lives in. Declarations and
assignments pass their own slot down as the preferred destination so the
outermost arithmetic operation can write there directly instead of going
through a scratch slot and a copy.
"""

from typing import Optional, Sequence, Set
from .ast import *
from .span import Span
from .commands import (
    InstructionBlock, Program, objectives_add, objectives_remove, players_set,
    players_add, players_remove, players_operation, function_call,
)
from .values import (
    Value, ConstantInt, StorageRef, UndefinedRef, FunctionRef, ArithmeticOp,
    Scope, Context, INT_MIN, INT_MAX, KNOWN_TYPES, RAW_SLOT, variable_slot,
    constant_slot,
)
from .errors import CompileError, MessageType
from . import errors


MAIN_FUNCTION = "main"
DEFAULT_NAMESPACE = "enderscript"


class CodeGenerator(ASTVisitor):
    """Generates instruction blocks from an AST."""
    
    def __init__(self, namespace: str = DEFAULT_NAMESPACE, debug: bool = False):
        """
        Args:
            namespace: Datapack namespace used by function calls
            debug: Print a line for every finished block
        """
        self.namespace = namespace
        self.debug = debug
        self.program = Program(namespace)
        self.block_names: Set[str] = set()
    
    def generate(self, statements: Sequence[Expression],
                 span: Optional[Span] = None, name: str = MAIN_FUNCTION) -> Program:
        """
        Compile a program as an implicit function, "main" by default.
        
        Args:
            statements: Top-level statements from the parser
            span: Span of the whole source, used for diagnostics on main
            name: Block name of the implicit function
            
        Returns:
            Program whose blocks are ordered by completion, main last
            
        Raises:
            CompileError: On the first semantic error
        """
        self.program = Program(self.namespace)
        self.block_names = set()
        
        if span is None:
            span = Span.of("<source>", "", 0, 0)
        main = FunctionDeclaration(name, (), None, tuple(statements), span)
        self.compile_function(main, None)
        
        return self.program
    
    def compile(self, node: Expression, scope: Scope, context: Context) -> Value:
        """Compile one expression in the given scope."""
        return node.accept(self, scope, context)
    
    # =========================================================================
    # Helpers
    # =========================================================================
    
    def check_type(self, type_name: str, span: Span) -> None:
        if type_name not in KNOWN_TYPES:
            raise CompileError.of(MessageType.UNKNOWN_TYPE, errors.unknown_type(type_name), span)
    
    def require_int(self, value: Value, span: Span) -> None:
        if not isinstance(value, (ConstantInt, StorageRef)):
            raise CompileError.of(
                MessageType.TYPE_MISMATCH,
                errors.type_mismatch("int", value.type_name),
                span,
            )
    
    def store(self, block: InstructionBlock, target: StorageRef,
              value: Value, span: Span) -> None:
        """Write a value into a slot unless it is already there."""
        self.require_int(value, span)
        if isinstance(value, ConstantInt):
            block.push(players_set(target.slot, target.block, value.value))
        else:
            self.copy(block, target, value)
    
    def copy(self, block: InstructionBlock, target: StorageRef, source: StorageRef) -> None:
        if source != target:
            block.push(players_operation(target.slot, target.block, '=',
                                         source.slot, source.block))
    
    def apply_constant(self, block: InstructionBlock, op: ArithmeticOp,
                       target: StorageRef, value: int) -> None:
        """Apply `target op= value` for a compile-time constant."""
        if op in (ArithmeticOp.ADD, ArithmeticOp.SUBTRACT):
            amount = value if op is ArithmeticOp.ADD else -value
            # add/remove only take non-negative amounts
            if 0 <= amount <= INT_MAX:
                block.push(players_add(target.slot, target.block, amount))
                return
            if 0 < -amount <= INT_MAX:
                block.push(players_remove(target.slot, target.block, -amount))
                return
        
        # operation only combines two slots, so the constant gets its own
        aux = constant_slot(value)
        block.push(players_set(aux, block.name, value))
        block.push(players_operation(target.slot, target.block, op.symbol, aux, block.name))
    
    # =========================================================================
    # Declarations
    # =========================================================================
    
    def visit_variable_declaration(self, node: VariableDeclaration,
                                   scope: Scope, context: Context) -> Value:
        if scope.declares(node.name):
            raise CompileError.of(
                MessageType.MEMBER_REDECLARATION,
                errors.member_redeclaration("Variable", node.name),
                node.span,
            )
        if node.declared_type is not None:
            self.check_type(node.declared_type, node.span)
        
        reference = scope.variable(node.name)
        if node.initializer is None:
            scope.declare_variable(node.name)
            return UndefinedRef(reference.block, reference.slot)
        
        value = self.compile(node.initializer, scope, context.with_destination(reference))
        self.store(scope.block, reference, value, node.span)
        scope.declare_variable(node.name)
        return reference
    
    def visit_variable_assign(self, node: VariableAssign,
                              scope: Scope, context: Context) -> Value:
        if not scope.declares(node.name):
            raise CompileError.of(
                MessageType.UNKNOWN_MEMBER,
                errors.unknown_member("Variable", node.name),
                node.span,
            )
        if scope.is_function(node.name):
            raise CompileError.of(
                MessageType.TYPE_MISMATCH,
                errors.type_mismatch("int", "function"),
                node.span,
            )
        
        reference = scope.variable(node.name)
        # Writing the result early would clobber a value still to be read
        if references(node.value, node.name):
            value_context = context.cleared()
        else:
            value_context = context.with_destination(reference)
        
        value = self.compile(node.value, scope, value_context)
        self.store(scope.block, reference, value, node.span)
        return reference
    
    def visit_function_declaration(self, node: FunctionDeclaration,
                                   scope: Scope, context: Context) -> Value:
        return self.compile_function(node, scope)
    
    def compile_function(self, node: FunctionDeclaration,
                         scope: Optional[Scope]) -> FunctionRef:
        """Compile a function body into its own block and register it."""
        if node.name in self.block_names or (scope is not None and scope.declares(node.name)):
            raise CompileError.of(
                MessageType.MEMBER_REDECLARATION,
                errors.member_redeclaration("Function", node.name),
                node.span,
            )
        for param in node.parameters:
            self.check_type(param.type_name, param.span)
        if node.return_type is not None:
            self.check_type(node.return_type, node.span)
        
        self.block_names.add(node.name)
        block = InstructionBlock(node.name)
        block.push(objectives_add(node.name))
        
        inner = Scope(block, parent=scope)
        for param in node.parameters:
            if inner.declares(param.name):
                raise CompileError.of(
                    MessageType.MEMBER_REDECLARATION,
                    errors.member_redeclaration("Parameter", param.name),
                    param.span,
                )
            inner.declare_variable(param.name)
        
        body_context = Context()
        for statement in node.body:
            self.compile(statement, inner, body_context)
        
        block.push(objectives_remove(node.name))
        self.program.add(block)
        if scope is not None:
            scope.declare_function(node.name, tuple(p.name for p in node.parameters))
        
        if self.debug:
            print(f"Compiled block '{node.name}': {len(block)} commands")
        
        return FunctionRef(node.name)
    
    def visit_function_call(self, node: FunctionCall,
                            scope: Scope, context: Context) -> Value:
        if not scope.declares(node.name):
            raise CompileError.of(
                MessageType.UNKNOWN_MEMBER,
                errors.unknown_member("Function", node.name),
                node.span,
            )
        if not scope.is_function(node.name):
            raise CompileError.of(
                MessageType.TYPE_MISMATCH,
                errors.type_mismatch("function", "int"),
                node.span,
            )
        
        params = scope.functions[node.name]
        if len(params) != len(node.arguments):
            raise CompileError.of(
                MessageType.ARGUMENT_COUNT_MISMATCH,
                errors.argument_count_mismatch(node.name, len(params), len(node.arguments)),
                node.span,
            )
        
        block = scope.block
        if params:
            # Arguments live in the callee's objective, which must exist first
            block.push(objectives_add(node.name))
        for param, argument in zip(params, node.arguments):
            target = StorageRef(node.name, variable_slot(param))
            value = self.compile(argument, scope, context.with_destination(target))
            self.store(block, target, value, argument.span)
        
        block.push(function_call(self.namespace, node.name))
        return FunctionRef(node.name)
    
    def visit_raw_code(self, node: RawCode, scope: Scope, context: Context) -> Value:
        scope.block.push(node.text)
        return UndefinedRef(scope.block.name, RAW_SLOT)
    
    # =========================================================================
    # Arithmetic
    # =========================================================================
    
    def visit_addition(self, node: Addition, scope: Scope, context: Context) -> Value:
        return self.compile_arithmetic(node, ArithmeticOp.ADD, scope, context)
    
    def visit_subtraction(self, node: Subtraction, scope: Scope, context: Context) -> Value:
        return self.compile_arithmetic(node, ArithmeticOp.SUBTRACT, scope, context)
    
    def visit_multiplication(self, node: Multiplication, scope: Scope, context: Context) -> Value:
        return self.compile_arithmetic(node, ArithmeticOp.MULTIPLY, scope, context)
    
    def visit_division(self, node: Division, scope: Scope, context: Context) -> Value:
        return self.compile_arithmetic(node, ArithmeticOp.DIVIDE, scope, context)
    
    def compile_arithmetic(self, node: BinaryOperation, op: ArithmeticOp,
                           scope: Scope, context: Context) -> Value:
        """
        Compile a binary operation.
        
        The left operand inherits the context, so a nested left operation
        may already leave its result in the target. The right operand never
        sees the preferred destination. A left variable that the right
        operand assigns to is copied into the target first.
        """
        block = scope.block
        
        if context.preferred_destination is not None:
            target = context.preferred_destination
            right_context = context.cleared()
        else:
            target = context.scratch(block.name)
            right_context = context.deeper()
        
        left = self.compile(node.left, scope, context)
        name = stored_variable(node.left)
        if name is not None and isinstance(left, StorageRef) and assigns(node.right, name):
            # The right operand overwrites the variable, so take its value now
            self.copy(block, target, left)
            left = target
        
        right = self.compile(node.right, scope, right_context)
        self.require_int(left, node.left.span)
        self.require_int(right, node.right.span)
        
        if isinstance(left, ConstantInt) and isinstance(right, ConstantInt):
            if op is ArithmeticOp.DIVIDE and right.value == 0:
                raise CompileError.of(MessageType.DIVISION_BY_ZERO,
                                      errors.division_by_zero(), node.span)
            return ConstantInt(op.fold(left.value, right.value))
        
        if isinstance(left, StorageRef) and isinstance(right, ConstantInt):
            self.copy(block, target, left)
            self.apply_constant(block, op, target, right.value)
        elif isinstance(left, ConstantInt):
            block.push(players_set(target.slot, target.block, left.value))
            block.push(players_operation(target.slot, target.block, op.symbol,
                                         right.slot, right.block))
        else:
            self.copy(block, target, left)
            block.push(players_operation(target.slot, target.block, op.symbol,
                                         right.slot, right.block))
        
        return target
    
    # =========================================================================
    # Atoms
    # =========================================================================
    
    def visit_integer_literal(self, node: IntegerLiteral,
                              scope: Scope, context: Context) -> Value:
        if not INT_MIN <= node.value <= INT_MAX:
            raise CompileError.of(
                MessageType.INTEGER_BOUNDS_EXCEEDED,
                errors.integer_bounds_exceeded(32),
                node.span,
            )
        return ConstantInt(node.value)
    
    def visit_string_literal(self, node: StringLiteral,
                             scope: Scope, context: Context) -> Value:
        raise CompileError.of(
            MessageType.TYPE_MISMATCH,
            errors.type_mismatch("int", "string"),
            node.span,
        )
    
    def visit_variable_access(self, node: VariableAccess,
                              scope: Scope, context: Context) -> Value:
        if not scope.declares(node.name):
            raise CompileError.of(
                MessageType.UNKNOWN_MEMBER,
                errors.unknown_member("Variable", node.name),
                node.span,
            )
        if scope.is_function(node.name):
            return FunctionRef(node.name)
        return scope.variable(node.name)


def generate(statements: Sequence[Expression], namespace: str = DEFAULT_NAMESPACE,
             span: Optional[Span] = None) -> Program:
    """Compile parsed statements in one call."""
    return CodeGenerator(namespace).generate(statements, span)
