"""
EnderScript Context

The main interface for compiling EnderScript code and writing datapacks.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..compiler import Lexer, Parser, CodeGenerator, Program, Span
from ..compiler.ast import ASTPrinter
from ..compiler.codegen import DEFAULT_NAMESPACE, MAIN_FUNCTION

# Datapack format written to pack.mcmeta
PACK_FORMAT = 10
FUNCTION_EXTENSION = ".mcfunction"


@dataclass
class Build:
    """
    A compiled EnderScript file.
    
    Holds the source, the parsed statements and the resulting program.
    """
    
    source: str
    file_name: str
    program: Program
    statements: tuple = ()
    
    @property
    def namespace(self) -> str:
        return self.program.namespace
    
    def disassemble(self) -> str:
        """Get a readable listing of the compiled blocks."""
        return self.program.disassemble()
    
    def ast(self) -> str:
        """Get the parsed program as an indented tree."""
        return ASTPrinter().print_program(self.statements)
    
    def function_path(self, output_dir: Union[str, Path], block_name: str) -> Path:
        return Path(output_dir) / "data" / self.namespace / "functions" / (block_name + FUNCTION_EXTENSION)
    
    def write(self, output_dir: Union[str, Path],
              description: Optional[str] = None) -> List[Path]:
        """
        Write the program as a datapack.
        
        Args:
            output_dir: Datapack root; created if missing
            description: pack.mcmeta description, defaults to the namespace
            
        Returns:
            Paths of every file written, pack.mcmeta first
        """
        root = Path(output_dir)
        root.mkdir(parents=True, exist_ok=True)
        
        meta_path = root / "pack.mcmeta"
        meta = {
            "pack": {
                "pack_format": PACK_FORMAT,
                "description": description or self.namespace,
            }
        }
        meta_path.write_text(json.dumps(meta, indent=2) + "\n", encoding='utf-8')
        written = [meta_path]
        
        for block in self.program:
            path = self.function_path(root, block.name)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(block.text, encoding='utf-8')
            written.append(path)
        
        return written


class Context:
    """
    EnderScript compilation context.
    
    This is the main entry point for using EnderScript from Python.
    
    Example:
        ctx = Context(namespace="demo")
        build = ctx.compile('let x: int = 5')
        build.write("out")
    """
    
    def __init__(self, namespace: str = DEFAULT_NAMESPACE, debug: bool = False):
        """
        Create a new EnderScript context.
        
        Args:
            namespace: Datapack namespace the compiled functions live in
            debug: Enable debug mode
        """
        self.namespace = namespace
        self.debug = debug
    
    def compile(self, source: str, file_name: str = "<source>",
                main_name: str = MAIN_FUNCTION) -> Build:
        """
        Compile EnderScript source code.
        
        Args:
            source: EnderScript source code string
            file_name: File name for error messages
            main_name: Block name for the top-level statements
            
        Returns:
            Compiled Build object
            
        Raises:
            EnderScriptError: On the first diagnostic
        """
        # Tokenize
        tokens = Lexer(source, file_name).tokenize()
        
        # Parse
        statements = Parser(tokens).parse()
        
        # Generate blocks
        codegen = CodeGenerator(self.namespace, self.debug)
        program = codegen.generate(statements, Span.of(file_name, source, 0, len(source)),
                                   main_name)
        
        if self.debug:
            print(f"Compiled {file_name}: {len(program)} blocks")
        
        return Build(source, file_name, program, tuple(statements))
    
    def compile_file(self, path: Union[str, Path], main_name: str = MAIN_FUNCTION) -> Build:
        """
        Compile an EnderScript source file.
        
        Args:
            path: Path to .es source file
            main_name: Block name for the top-level statements
        """
        source = Path(path).read_text(encoding='utf-8')
        return self.compile(source, str(path), main_name)


# Convenience functions
def create_context(**kwargs) -> Context:
    """Create a new EnderScript context."""
    return Context(**kwargs)


def build(source: str, output_dir: Union[str, Path], **kwargs) -> List[Path]:
    """
    Compile EnderScript code and write it as a datapack.
    
    Args:
        source: EnderScript source code
        output_dir: Datapack root
        **kwargs: Context options
        
    Returns:
        Paths of the written files
    """
    return Context(**kwargs).compile(source).write(output_dir)
