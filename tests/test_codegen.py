"""
EnderScript Code Generator Tests

Tests for instruction generation: destination propagation, arithmetic
lowering, declarations, functions and compile-time diagnostics.
"""

import pytest
from enderscript.compiler import (
    compile_source, parse_source, CodeGenerator, CompileError, MessageType, Program,
)
from enderscript.compiler.values import (
    ArithmeticOp, StorageRef, Context, Scope, INT_MIN, INT_MAX,
)
from enderscript.compiler.commands import InstructionBlock


def main_commands(source: str):
    """Commands of main without the objective add/remove frame."""
    commands = compile_source(source).main.commands
    assert commands[0] == "scoreboard objectives add main dummy"
    assert commands[-1] == "scoreboard objectives remove main"
    return commands[1:-1]


def compile_error(source: str) -> CompileError:
    with pytest.raises(CompileError) as excinfo:
        compile_source(source)
    return excinfo.value


# =============================================================================
# Program Structure
# =============================================================================

class TestProgramStructure:
    """Block layout tests."""
    
    def test_empty_program(self):
        program = compile_source("")
        assert isinstance(program, Program)
        assert [b.name for b in program] == ["main"]
        assert program.main.commands == [
            "scoreboard objectives add main dummy",
            "scoreboard objectives remove main",
        ]
    
    def test_block_text(self):
        program = compile_source("let x = 1")
        assert program.main.text == (
            "scoreboard objectives add main dummy\n"
            "scoreboard players set $x main 1\n"
            "scoreboard objectives remove main\n"
        )
    
    def test_functions_come_before_main(self):
        program = compile_source("function a() {\n}\nfunction b() {\n}")
        assert [b.name for b in program] == ["a", "b", "main"]
    
    def test_nested_function_comes_first(self):
        source = (
            "function outer() {\n"
            "    function inner() {\n"
            "    }\n"
            "    inner()\n"
            "}\n"
            "outer()"
        )
        program = compile_source(source)
        assert [b.name for b in program] == ["inner", "outer", "main"]
        assert program.get("outer").commands == [
            "scoreboard objectives add outer dummy",
            "function enderscript:inner",
            "scoreboard objectives remove outer",
        ]
    
    def test_deterministic(self):
        source = "let a = 4\nlet b = a * 3 - 5 / a\nfunction f(p: int) {\n    let q = p\n}\nf(b)"
        assert compile_source(source).as_dict() == compile_source(source).as_dict()
    
    def test_generator_is_reusable(self):
        codegen = CodeGenerator()
        first = codegen.generate(parse_source("function f() {\n}"))
        second = codegen.generate(parse_source("function f() {\n}"))
        assert [b.name for b in first] == ["f", "main"]
        assert [b.name for b in second] == ["f", "main"]
    
    def test_implicit_function_name(self):
        program = CodeGenerator().generate(parse_source("let x = 1"), name="setup")
        assert program.main.name == "setup"
        assert program.main.commands[1] == "scoreboard players set $x setup 1"
    
    def test_implicit_function_name_is_reserved(self):
        with pytest.raises(CompileError) as excinfo:
            CodeGenerator().generate(parse_source("function setup() {\n}"), name="setup")
        assert excinfo.value.message_type == MessageType.MEMBER_REDECLARATION
    
    def test_debug_output(self, capsys):
        CodeGenerator(debug=True).generate(parse_source("let x = 1"))
        assert "Compiled block 'main': 3 commands" in capsys.readouterr().out


# =============================================================================
# Declarations
# =============================================================================

class TestDeclarations:
    """let and assignment tests."""
    
    def test_constant_declaration(self):
        assert main_commands("let x: int = 5") == ["scoreboard players set $x main 5"]
    
    def test_copy_declaration(self):
        assert main_commands("let x = 5\nlet y = x") == [
            "scoreboard players set $x main 5",
            "scoreboard players operation $y main = $x main",
        ]
    
    def test_destination_propagation(self):
        assert main_commands("let x: int = 5\nlet y = x + 3") == [
            "scoreboard players set $x main 5",
            "scoreboard players operation $y main = $x main",
            "scoreboard players add $y main 3",
        ]
    
    @pytest.mark.parametrize("value", ["2147483647", "-2147483648", "0"])
    def test_integer_bounds(self, value):
        assert main_commands(f"let x = {value}") == [f"scoreboard players set $x main {value}"]
    
    def test_declaration_without_initializer(self):
        assert main_commands("let x: int") == []
    
    def test_declaration_without_initializer_then_assign(self):
        assert main_commands("let x: int\nx = 7") == ["scoreboard players set $x main 7"]
    
    def test_assignment_uses_variable_as_destination(self):
        assert main_commands("let x = 1\nlet y = 2\nx = y * 2") == [
            "scoreboard players set $x main 1",
            "scoreboard players set $y main 2",
            "scoreboard players operation $x main = $y main",
            "scoreboard players set %2 main 2",
            "scoreboard players operation $x main *= %2 main",
        ]
    
    def test_self_referencing_assignment(self):
        assert main_commands("let x = 1\nx = 10 - x") == [
            "scoreboard players set $x main 1",
            "scoreboard players set $$temp main 10",
            "scoreboard players operation $$temp main -= $x main",
            "scoreboard players operation $x main = $$temp main",
        ]
    
    def test_self_increment(self):
        assert main_commands("let x = 1\nx = x + 2") == [
            "scoreboard players set $x main 1",
            "scoreboard players operation $$temp main = $x main",
            "scoreboard players add $$temp main 2",
            "scoreboard players operation $x main = $$temp main",
        ]
    
    def test_assign_to_itself_emits_nothing(self):
        assert main_commands("let x = 1\nx = x") == ["scoreboard players set $x main 1"]
    
    def test_chained_assignment(self):
        assert main_commands("let x = 0\nlet y = 0\nx = y = 3") == [
            "scoreboard players set $x main 0",
            "scoreboard players set $y main 0",
            "scoreboard players set $y main 3",
            "scoreboard players operation $x main = $y main",
        ]


# =============================================================================
# Arithmetic
# =============================================================================

class TestArithmetic:
    """Arithmetic lowering tests."""
    
    @pytest.mark.parametrize("expression,expected", [
        ("1 + 2", 3),
        ("2 * 3 + 4", 10),
        ("10 - 4 - 3", 3),
        ("7 / 2", 3),
        ("-7 / 2", -4),
        ("7 / -2", -4),
        ("2147483647 + 1", -2147483648),
        ("-2147483648 - 1", 2147483647),
        ("65536 * 65536", 0),
        ("(1 + 2) * (3 + 4)", 21),
        ("-(5)", -5),
        ("-(-2147483648)", -2147483648),
    ])
    def test_constant_folding(self, expression, expected):
        assert main_commands(f"let x = {expression}") == [
            f"scoreboard players set $x main {expected}",
        ]
    
    @pytest.mark.parametrize("expression,command", [
        ("a + 4", "scoreboard players add $x main 4"),
        ("a - 4", "scoreboard players remove $x main 4"),
        ("a + -4", "scoreboard players remove $x main 4"),
        ("a - -4", "scoreboard players add $x main 4"),
    ])
    def test_add_and_remove(self, expression, command):
        assert main_commands(f"let a = 1\nlet x = {expression}") == [
            "scoreboard players set $a main 1",
            "scoreboard players operation $x main = $a main",
            command,
        ]
    
    @pytest.mark.parametrize("expression,operator,value", [
        ("a * 3", "*=", 3),
        ("a / 3", "/=", 3),
        ("a / -3", "/=", -3),
    ])
    def test_multiply_and_divide_by_constant(self, expression, operator, value):
        assert main_commands(f"let a = 1\nlet x = {expression}") == [
            "scoreboard players set $a main 1",
            "scoreboard players operation $x main = $a main",
            f"scoreboard players set %{value} main {value}",
            f"scoreboard players operation $x main {operator} %{value} main",
        ]
    
    def test_divide_variable_by_zero(self):
        assert main_commands("let a = 1\nlet x = a / 0") == [
            "scoreboard players set $a main 1",
            "scoreboard players operation $x main = $a main",
            "scoreboard players set %0 main 0",
            "scoreboard players operation $x main /= %0 main",
        ]
    
    def test_add_minimum_integer(self):
        assert main_commands("let a = 1\nlet x = a + -2147483648") == [
            "scoreboard players set $a main 1",
            "scoreboard players operation $x main = $a main",
            "scoreboard players set %-2147483648 main -2147483648",
            "scoreboard players operation $x main += %-2147483648 main",
        ]
    
    def test_constant_left_operand(self):
        assert main_commands("let a = 3\nlet x = 10 - a") == [
            "scoreboard players set $a main 3",
            "scoreboard players set $x main 10",
            "scoreboard players operation $x main -= $a main",
        ]
    
    def test_two_variables(self):
        assert main_commands("let a = 1\nlet b = 2\nlet x = a / b") == [
            "scoreboard players set $a main 1",
            "scoreboard players set $b main 2",
            "scoreboard players operation $x main = $a main",
            "scoreboard players operation $x main /= $b main",
        ]
    
    def test_negated_variable(self):
        assert main_commands("let a = 1\nlet x = -a") == [
            "scoreboard players set $a main 1",
            "scoreboard players set $x main 0",
            "scoreboard players operation $x main -= $a main",
        ]
    
    def test_nested_right_operand_uses_scratch(self):
        assert main_commands("let x = 4\nlet y = 5 - (x * 3)") == [
            "scoreboard players set $x main 4",
            "scoreboard players operation $$temp main = $x main",
            "scoreboard players set %3 main 3",
            "scoreboard players operation $$temp main *= %3 main",
            "scoreboard players set $y main 5",
            "scoreboard players operation $y main -= $$temp main",
        ]
    
    def test_nested_left_operand_writes_destination(self):
        source = "let a = 1\nlet b = 2\nlet c = 3\nlet d = 4\nlet r = a * b - c * d"
        assert main_commands(source)[4:] == [
            "scoreboard players operation $r main = $a main",
            "scoreboard players operation $r main *= $b main",
            "scoreboard players operation $$temp main = $c main",
            "scoreboard players operation $$temp main *= $d main",
            "scoreboard players operation $r main -= $$temp main",
        ]
    
    def test_expression_statement_uses_deeper_scratch(self):
        source = "let a = 1\nlet b = 2\nlet c = 3\nlet d = 4\na * b - c * d"
        assert main_commands(source)[4:] == [
            "scoreboard players operation $$temp main = $a main",
            "scoreboard players operation $$temp main *= $b main",
            "scoreboard players operation $$temp1 main = $c main",
            "scoreboard players operation $$temp1 main *= $d main",
            "scoreboard players operation $$temp main -= $$temp1 main",
        ]
    
    def test_left_variable_read_before_right_assigns_it(self):
        assert main_commands("let a = 1\nlet b = a + (a = 5)") == [
            "scoreboard players set $a main 1",
            "scoreboard players operation $b main = $a main",
            "scoreboard players set $a main 5",
            "scoreboard players operation $b main += $a main",
        ]
    
    def test_left_variable_not_copied_early_when_only_read(self):
        assert main_commands("let a = 2\nlet b = a * (a + 1)") == [
            "scoreboard players set $a main 2",
            "scoreboard players operation $$temp main = $a main",
            "scoreboard players add $$temp main 1",
            "scoreboard players operation $b main = $a main",
            "scoreboard players operation $b main *= $$temp main",
        ]
    
    def test_constant_expression_statement_emits_nothing(self):
        assert main_commands("1 + 2") == []
    
    def test_variable_plus_constant_statement(self):
        assert main_commands("let a = 1\na + 1") == [
            "scoreboard players set $a main 1",
            "scoreboard players operation $$temp main = $a main",
            "scoreboard players add $$temp main 1",
        ]


# =============================================================================
# Functions
# =============================================================================

class TestFunctions:
    """Function declaration and call tests."""
    
    def test_function_block(self):
        program = compile_source("function add(a: int, b: int): int {\n    let c = a + b\n}")
        assert program.get("add").commands == [
            "scoreboard objectives add add dummy",
            "scoreboard players operation $c add = $a add",
            "scoreboard players operation $c add += $b add",
            "scoreboard objectives remove add",
        ]
    
    def test_call_with_constant_arguments(self):
        source = "function add(a: int, b: int) {\n    let c = a + b\n}\nadd(1, 2)"
        assert main_commands(source) == [
            "scoreboard objectives add add dummy",
            "scoreboard players set $a add 1",
            "scoreboard players set $b add 2",
            "function enderscript:add",
        ]
    
    def test_call_with_expression_argument(self):
        source = "function f(p: int) {\n}\nlet x = 3\nf(x * 2)"
        assert main_commands(source) == [
            "scoreboard players set $x main 3",
            "scoreboard objectives add f dummy",
            "scoreboard players operation $p f = $x main",
            "scoreboard players set %2 main 2",
            "scoreboard players operation $p f *= %2 main",
            "function enderscript:f",
        ]
    
    def test_call_without_arguments(self):
        assert main_commands("function f() {\n}\nf()") == ["function enderscript:f"]
    
    def test_namespace(self):
        program = compile_source("function f() {\n}\nf()", namespace="demo")
        assert "function demo:f" in program.main.commands
    
    def test_raw_code(self):
        assert main_commands('raw "say hello"') == ["say hello"]
    
    def test_raw_code_in_function(self):
        program = compile_source('function greet() {\n    raw "say \\"hi\\""\n}')
        assert program.get("greet").commands[1] == 'say "hi"'
    
    def test_parameters_are_local(self):
        program = compile_source("function f(a: int) {\n    a = a * 2\n}")
        assert program.get("f").commands[1:-1] == [
            "scoreboard players operation $$temp f = $a f",
            "scoreboard players set %2 f 2",
            "scoreboard players operation $$temp f *= %2 f",
            "scoreboard players operation $a f = $$temp f",
        ]


# =============================================================================
# Diagnostics
# =============================================================================

class TestCompileErrors:
    """Compile-time diagnostic tests."""
    
    @pytest.mark.parametrize("source,message_type", [
        ("let x = 1\nlet x = 2", MessageType.MEMBER_REDECLARATION),
        ("let y = x", MessageType.UNKNOWN_MEMBER),
        ("let x = x", MessageType.UNKNOWN_MEMBER),
        ("x = 1", MessageType.UNKNOWN_MEMBER),
        ("let x: float = 1", MessageType.UNKNOWN_TYPE),
        ("let x = 2147483648", MessageType.INTEGER_BOUNDS_EXCEEDED),
        ("let x = -2147483649", MessageType.INTEGER_BOUNDS_EXCEEDED),
        ('let x = "hi"', MessageType.TYPE_MISMATCH),
        ('let x = raw "say hi"', MessageType.TYPE_MISMATCH),
        ("let x = 1 / 0", MessageType.DIVISION_BY_ZERO),
        ("g()", MessageType.UNKNOWN_MEMBER),
        ("let f = 1\nf()", MessageType.TYPE_MISMATCH),
        ("function f() {\n}\nlet y = f + 1", MessageType.TYPE_MISMATCH),
        ("function f() {\n}\nlet y = f", MessageType.TYPE_MISMATCH),
        ("function f() {\n}\nf = 1", MessageType.TYPE_MISMATCH),
        ("function f(a: int) {\n}\nf()", MessageType.ARGUMENT_COUNT_MISMATCH),
        ("function f() {\n}\nf(1)", MessageType.ARGUMENT_COUNT_MISMATCH),
        ("function f() {\n}\nfunction f() {\n}", MessageType.MEMBER_REDECLARATION),
        ("let f = 1\nfunction f() {\n}", MessageType.MEMBER_REDECLARATION),
        ("function main() {\n}", MessageType.MEMBER_REDECLARATION),
        ("function f(a: int, a: int) {\n}", MessageType.MEMBER_REDECLARATION),
        ("function f(a: bool) {\n}", MessageType.UNKNOWN_TYPE),
        ("function f(): bool {\n}", MessageType.UNKNOWN_TYPE),
    ])
    def test_error_type(self, source, message_type):
        assert compile_error(source).message_type == message_type
    
    def test_redeclaration_details(self):
        error = compile_error("let x = 1\nlet x = 2")
        assert error.message.details == "Variable 'x' had already been declared"
        assert error.span.start.line == 2
        assert error.span.source == "let x = 2"
    
    def test_unknown_member_details(self):
        error = compile_error("let y = x")
        assert error.message.details == "Variable 'x' is not declared in this scope"
        assert error.span.source == "x"
    
    def test_type_mismatch_details(self):
        error = compile_error('let x = "hi"')
        assert error.message.details == "Expected value of type int, got string"
    
    def test_undefined_value_details(self):
        error = compile_error('let x = raw "say hi"')
        assert error.message.details == "Expected value of type int, got undefined"
    
    def test_unknown_type_details(self):
        error = compile_error("let x: float = 1")
        assert error.message.details == 'Type "float" does not exist in this scope'
    
    def test_argument_count_details(self):
        error = compile_error("function f(a: int, b: int) {\n}\nf(1)")
        assert error.message.details == "Function 'f' expects 2 argument(s), got 1"
    
    def test_lookup_does_not_reach_enclosing_scope(self):
        error = compile_error("let x = 1\nfunction f() {\n    let y = x\n}")
        assert error.message_type == MessageType.UNKNOWN_MEMBER
        assert error.span.start.line == 3
    
    def test_nested_function_not_visible_outside(self):
        source = "function outer() {\n    function inner() {\n    }\n}\ninner()"
        assert compile_error(source).message_type == MessageType.UNKNOWN_MEMBER
    
    def test_function_cannot_reuse_block_name(self):
        source = "function a() {\n    function b() {\n    }\n}\nfunction b() {\n}"
        assert compile_error(source).message_type == MessageType.MEMBER_REDECLARATION


# =============================================================================
# Values
# =============================================================================

class TestValues:
    """Value model tests."""
    
    def test_storage_ref_equality(self):
        assert StorageRef("main", "$x") == StorageRef("main", "$x")
        assert StorageRef("main", "$x") != StorageRef("f", "$x")
    
    @pytest.mark.parametrize("op,left,right,expected", [
        (ArithmeticOp.ADD, INT_MAX, 1, INT_MIN),
        (ArithmeticOp.SUBTRACT, INT_MIN, 1, INT_MAX),
        (ArithmeticOp.MULTIPLY, -3, 4, -12),
        (ArithmeticOp.DIVIDE, -1, 2, -1),
        (ArithmeticOp.DIVIDE, 9, 3, 3),
    ])
    def test_fold(self, op, left, right, expected):
        assert op.fold(left, right) == expected
    
    def test_scratch_slots(self):
        context = Context()
        assert context.scratch("main") == StorageRef("main", "$$temp")
        assert context.deeper().scratch("main") == StorageRef("main", "$$temp1")
        assert context.deeper().deeper().scratch("f") == StorageRef("f", "$$temp2")
    
    def test_context_is_rebuilt(self):
        destination = StorageRef("main", "$x")
        context = Context().with_destination(destination)
        assert context.preferred_destination == destination
        assert context.cleared().preferred_destination is None
        assert context.deeper().preferred_destination is None
    
    def test_scope_is_single_level(self):
        outer = Scope(InstructionBlock("main"))
        outer.declare_variable("x")
        inner = Scope(InstructionBlock("f"), parent=outer)
        assert outer.declares("x")
        assert not inner.declares("x")
    
    def test_scope_functions(self):
        scope = Scope(InstructionBlock("main"))
        scope.declare_function("f", ("a",))
        assert scope.declares("f")
        assert scope.is_function("f")
        assert scope.variable("x") == StorageRef("main", "$x")
