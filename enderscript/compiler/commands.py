"""
EnderScript Command Output

Instruction blocks, the scoreboard command vocabulary and the compiled
program container.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


# =============================================================================
# Command vocabulary
# =============================================================================

def objectives_add(block: str) -> str:
    return f"scoreboard objectives add {block} dummy"


def objectives_remove(block: str) -> str:
    return f"scoreboard objectives remove {block}"


def players_set(slot: str, block: str, value: int) -> str:
    return f"scoreboard players set {slot} {block} {value}"


def players_add(slot: str, block: str, value: int) -> str:
    return f"scoreboard players add {slot} {block} {value}"


def players_remove(slot: str, block: str, value: int) -> str:
    return f"scoreboard players remove {slot} {block} {value}"


def players_operation(slot: str, block: str, operator: str,
                      source_slot: str, source_block: str) -> str:
    """`operator` is '=' for a copy or one of '+-*/' for 'op='."""
    if operator != '=':
        operator += '='
    return f"scoreboard players operation {slot} {block} {operator} {source_slot} {source_block}"


def function_call(namespace: str, name: str) -> str:
    return f"function {namespace}:{name}"


# =============================================================================
# Blocks
# =============================================================================

@dataclass
class InstructionBlock:
    """A named, append-only command sequence; one per compiled function."""
    
    name: str
    commands: List[str] = field(default_factory=list)
    
    def push(self, command: str) -> None:
        """Append one command line."""
        self.commands.append(command)
    
    @property
    def text(self) -> str:
        """Newline-joined commands, with a trailing newline."""
        return "".join(command + "\n" for command in self.commands)
    
    def __len__(self) -> int:
        return len(self.commands)
    
    def __str__(self) -> str:
        return self.text


@dataclass
class Program:
    """Container for the compiled blocks, in completion order (main last)."""
    
    namespace: str
    blocks: List[InstructionBlock] = field(default_factory=list)
    
    def add(self, block: InstructionBlock) -> None:
        self.blocks.append(block)
    
    def get(self, name: str) -> Optional[InstructionBlock]:
        """Find a block by name."""
        for block in self.blocks:
            if block.name == name:
                return block
        return None
    
    def has(self, name: str) -> bool:
        return self.get(name) is not None
    
    @property
    def main(self) -> InstructionBlock:
        return self.blocks[-1]
    
    def as_dict(self) -> Dict[str, str]:
        """Block name -> command text, in block order."""
        return {block.name: block.text for block in self.blocks}
    
    def __iter__(self) -> Iterator[InstructionBlock]:
        return iter(self.blocks)
    
    def __len__(self) -> int:
        return len(self.blocks)
    
    def disassemble(self) -> str:
        """Get a readable listing of every block."""
        lines = []
        for block in self.blocks:
            lines.append(f"== {self.namespace}:{block.name} ==")
            for i, command in enumerate(block.commands):
                lines.append(f"{i:04d}  {command}")
            lines.append("")
        return "\n".join(lines)
