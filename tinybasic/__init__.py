"""
Tiny BASIC interpreter

Line-numbered BASIC with floating-point scalars (A..Z, A0..Z9), arrays via
DIM, and LET, PRINT, GOTO, IF ... THEN <lineno>, FOR/NEXT and END.
"""

from .errors import (
    ArrayBoundsError, BasicError, BasicSyntaxError, ControlFlowError,
    ProgramCapacityError, UndeclaredArrayError,
)
from .grammar import parse_statement
from .program import ProgramStore
from .runtime import BasicRuntime, RunResult
from .variables import VariableStore, resolve_name

__version__ = "0.1.0"
__all__ = [
    'BasicRuntime', 'RunResult', 'ProgramStore', 'VariableStore',
    'parse_statement', 'resolve_name',
    'BasicError', 'BasicSyntaxError', 'UndeclaredArrayError',
    'ArrayBoundsError', 'ControlFlowError', 'ProgramCapacityError',
]
