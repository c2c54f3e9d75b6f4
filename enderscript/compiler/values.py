"""
EnderScript Values

The results of compiling an expression, the per-function symbol table and
the context threaded through expression compilation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Set, Tuple, Union

import numpy as np

from .commands import InstructionBlock


INT32 = np.iinfo(np.int32)
INT_MIN = int(INT32.min)
INT_MAX = int(INT32.max)

# Slot names
SCRATCH_SLOT = "$$temp"
RAW_SLOT = "$$raw"

# Types a declaration may name
KNOWN_TYPES = ("int",)


def variable_slot(name: str) -> str:
    """Slot holding the variable `name` inside its block."""
    return f"${name}"


def constant_slot(value: int) -> str:
    """Auxiliary slot holding a materialized constant."""
    return f"%{value}"


# =============================================================================
# Values
# =============================================================================

@dataclass(frozen=True)
class ConstantInt:
    """An integer known at compile time."""
    value: int
    
    type_name = "int"


@dataclass(frozen=True)
class StorageRef:
    """A named runtime slot: scoreboard objective (block) + score holder (slot)."""
    block: str
    slot: str
    
    type_name = "int"


@dataclass(frozen=True)
class UndefinedRef:
    """A slot that was declared but never assigned."""
    block: str
    slot: str
    
    type_name = "undefined"


@dataclass(frozen=True)
class FunctionRef:
    """A declared function."""
    name: str
    
    type_name = "function"


Value = Union[ConstantInt, StorageRef, UndefinedRef, FunctionRef]


# =============================================================================
# Arithmetic
# =============================================================================

class ArithmeticOp(Enum):
    """Scoreboard arithmetic operators, folded with 32-bit semantics."""
    
    ADD = ('+', np.add)
    SUBTRACT = ('-', np.subtract)
    MULTIPLY = ('*', np.multiply)
    DIVIDE = ('/', np.floor_divide)
    
    @property
    def symbol(self) -> str:
        return self.value[0]
    
    def fold(self, left: int, right: int) -> int:
        """
        Evaluate the operator at compile time the way the scoreboard does:
        results wrap around at 32 bits and division rounds toward negative
        infinity. The caller rejects division by zero.
        """
        lhs = np.array([left], dtype=np.int32)
        rhs = np.array([right], dtype=np.int32)
        with np.errstate(over='ignore'):
            result = self.value[1](lhs, rhs)
        return int(result[0])


# =============================================================================
# Scope and Context
# =============================================================================

@dataclass
class Scope:
    """
    Symbol table of one function body.
    
    Lookups only consult this scope; `parent` links the enclosing scope but
    is never searched.
    """
    
    block: InstructionBlock
    parent: Optional['Scope'] = field(default=None, repr=False)
    names: Set[str] = field(default_factory=set)
    functions: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    
    def declares(self, name: str) -> bool:
        return name in self.names
    
    def declare_variable(self, name: str) -> None:
        self.names.add(name)
    
    def declare_function(self, name: str, parameters: Tuple[str, ...]) -> None:
        self.names.add(name)
        self.functions[name] = parameters
    
    def is_function(self, name: str) -> bool:
        return name in self.functions
    
    def variable(self, name: str) -> StorageRef:
        """Storage slot of a variable declared in this scope."""
        return StorageRef(self.block.name, variable_slot(name))


@dataclass(frozen=True)
class Context:
    """
    Per-call compilation context; never mutated, only rebuilt.
    
    `scratch_depth` selects the scratch slot a binary operation falls back
    to when no destination is preferred. Right operands that must not
    disturb a live scratch value compile one level deeper.
    """
    
    preferred_destination: Optional[StorageRef] = None
    scratch_depth: int = 0
    
    def with_destination(self, destination: StorageRef) -> 'Context':
        return Context(destination, self.scratch_depth)
    
    def cleared(self) -> 'Context':
        return Context(None, self.scratch_depth)
    
    def deeper(self) -> 'Context':
        return Context(None, self.scratch_depth + 1)
    
    def scratch(self, block: str) -> StorageRef:
        if self.scratch_depth == 0:
            return StorageRef(block, SCRATCH_SLOT)
        return StorageRef(block, f"{SCRATCH_SLOT}{self.scratch_depth}")
