"""
EnderScript - Scoreboard Command Compiler

EnderScript is a small scripting language that compiles to scoreboard
commands, one function file per declared function.

Example:
    import enderscript as es
    
    ctx = es.Context(namespace="demo")
    build = ctx.compile('''
        let x: int = 5
        let y = x + 3
    ''')
    print(build.program.main.text)
    # scoreboard objectives add main dummy
    # scoreboard players set $x main 5
    # scoreboard players operation $y main = $x main
    # scoreboard players add $y main 3
    # scoreboard objectives remove main
"""

from .api.context import Context, Build, create_context, build
from .api.project import ProjectConfig
from .compiler import (
    compile_source, compile_file, Program, InstructionBlock,
    EnderScriptError, ParseError, CompileError,
)

__version__ = "0.1.0"
__author__ = "EnderScript Team"

__all__ = [
    # Main API
    'Context',
    'Build',
    'ProjectConfig',
    'create_context',
    'build',
    
    # Compiler
    'compile_source',
    'compile_file',
    'Program',
    'InstructionBlock',
    
    # Errors
    'EnderScriptError',
    'ParseError',
    'CompileError',
]


def version() -> str:
    """Get EnderScript version string."""
    return __version__
