"""
EnderScript Compiler Package

Compiles EnderScript source code to scoreboard command blocks.
"""

from .tokens import Token, TokenType
from .span import Position, Span
from .lexer import Lexer
from .ast import *
from .parser import Parser
from .commands import InstructionBlock, Program
from .values import ConstantInt, StorageRef, UndefinedRef, FunctionRef, Scope, Context
from .codegen import CodeGenerator, DEFAULT_NAMESPACE
from .errors import EnderScriptError, ParseError, CompileError, Message, MessageType

__all__ = [
    "Token",
    "TokenType",
    "Position",
    "Span",
    "Lexer",
    "Parser",
    "InstructionBlock",
    "Program",
    "CodeGenerator",
    "EnderScriptError",
    "ParseError",
    "CompileError",
    "Message",
    "MessageType",
    "compile_source",
    "compile_file",
    "parse_source",
]


def parse_source(source: str, file_name: str = "<source>"):
    """
    Parse EnderScript source into its top-level statements.
    
    Raises:
        ParseError: On the first syntax error
    """
    tokens = Lexer(source, file_name).tokenize()
    return Parser(tokens).parse()


def compile_source(source: str, file_name: str = "<source>",
                   namespace: str = DEFAULT_NAMESPACE, debug: bool = False) -> Program:
    """
    Compile EnderScript source code to instruction blocks.
    
    Args:
        source: EnderScript source code string
        file_name: Name shown in diagnostics
        namespace: Datapack namespace for function calls
        debug: Print progress lines while compiling
        
    Returns:
        Program with one block per function, main last
        
    Raises:
        ParseError: If parsing fails
        CompileError: If compilation fails
    """
    statements = parse_source(source, file_name)
    
    codegen = CodeGenerator(namespace, debug)
    return codegen.generate(statements, Span.of(file_name, source, 0, len(source)))


def compile_file(filepath: str, namespace: str = DEFAULT_NAMESPACE) -> Program:
    """
    Compile an EnderScript source file.
    
    Args:
        filepath: Path to .es source file
        
    Returns:
        Program with one block per function
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()
    return compile_source(source, str(filepath), namespace)
