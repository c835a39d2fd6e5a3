import logging
import sys
from collections import namedtuple

from .errors import BasicError, BasicSyntaxError, ControlFlowError
from .evaluator import ExpressionEvaluator
from .program import MAX_LINES, ProgramStore, split_program_line
from .variables import VariableStore, slot_name

log = logging.getLogger(__name__)

MAX_FOR_DEPTH = 256

ForFrame = namedtuple('ForFrame', 'slot limit step for_pc')


class RunResult(namedtuple('RunResult', 'status lineno error')):
    """Outcome of BasicRuntime.run().

    status is 'end' (END executed), 'done' (ran past the last line) or
    'error' (halted; lineno and error identify the failing line).
    """
    __slots__ = ()

    @property
    def ok(self):
        return self.status != 'error'


class BasicRuntime:
    """One interpreter session: program, variables, arrays and FOR stack."""

    def __init__(self, out=None, err=None, max_lines=MAX_LINES,
                 max_for_depth=MAX_FOR_DEPTH):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.program = ProgramStore(max_lines)
        self.variables = VariableStore()
        self.evaluator = ExpressionEvaluator(self.variables, self._report)
        self.max_for_depth = max_for_depth
        self.for_stack = []
        self.pc_index = 0
        self.running = False

    # ----- program editing -----
    def insert_line(self, lineno, text):
        self.program.insert_or_replace(lineno, text)

    def delete_line(self, lineno):
        self.program.delete(lineno)

    def enter_line(self, raw):
        """Apply a typed program line: '<n> <text>' inserts, '<n>' deletes."""
        lineno, text = split_program_line(raw)
        if text is None:
            self.delete_line(lineno)
        else:
            self.insert_line(lineno, text)

    def load_text(self, text):
        self.program.load_text(text, self.err)

    def load_file(self, path):
        self.program.load_file(path, self.err)

    def save_file(self, path):
        self.program.save_file(path)

    def list_program(self):
        self.program.list_program(self.out)

    def reset(self):
        self.variables.reset()
        self.for_stack = []
        self.pc_index = 0

    def new(self):
        self.program.clear()
        self.reset()

    # ----- execution -----
    def run(self):
        if self.running:
            raise RuntimeError("program is already running")
        self.reset()
        self.running = True
        self.program.frozen = True
        log.debug("run: %d lines", len(self.program))
        try:
            return self._run_loop()
        finally:
            self.program.frozen = False
            self.running = False

    def _run_loop(self):
        lines = self.program.lines
        while 0 <= self.pc_index < len(lines):
            line = lines[self.pc_index]
            try:
                cont = self.exec_line(line)
            except BasicError as e:
                e.lineno = line.lineno
                print(f"{e.label} in line {line.lineno}: {e}", file=self.err)
                log.debug("run halted at line %d: %r", line.lineno, e)
                return RunResult('error', line.lineno, e)
            if cont == 'HALT':
                return RunResult('end', line.lineno, None)
            if cont != 'JUMP':
                self.pc_index += 1
        return RunResult('done', None, None)

    def exec_line(self, line):
        if line.stmt is None:
            err = line.error
            raise BasicSyntaxError(err.message, line.lineno, err.column)
        return self.exec_stmt(line.stmt)

    def exec_stmt(self, st):
        """Execute one statement tuple.

        Returns 'JUMP' when pc_index was set, 'HALT' on END, else None.
        """
        typ = st[0]
        ev = self.evaluator
        if typ == 'LET':
            self._assign(st[1], st[2])
        elif typ == 'DIM':
            for letter, bound in st[1]:
                self.variables.declare_array(letter, ev.eval_expr(bound))
        elif typ == 'FOR':
            return self._exec_for(st)
        elif typ == 'NEXT':
            return self._exec_next(st)
        elif typ == 'PRINT_STR':
            print(st[1], file=self.out)
        elif typ == 'PRINT':
            value = ev.eval_expr(st[1]) if st[1] is not None else 0.0
            print('%g' % value, file=self.out)
        elif typ == 'GOTO':
            self.pc_index = self._lineno_to_index(st[1], 'GOTO')
            return 'JUMP'
        elif typ == 'IF':
            cond, target = st[1], st[2]
            truth = ev.eval_cond(cond)
            # IF without THEN does nothing
            if target is not None and truth:
                self.pc_index = self._lineno_to_index(target, 'THEN')
                return 'JUMP'
        elif typ == 'END':
            return 'HALT'
        else:
            raise RuntimeError(f"Unknown stmt {st}")
        return None

    def _assign(self, target, expr):
        ev = self.evaluator
        if target[0] == 'ARR':
            # the subscript is evaluated before the value
            index = ev.eval_expr(target[2])
            self.variables.write_array(target[1], index, ev.eval_expr(expr))
        else:
            self.variables.write_scalar(target[1], ev.eval_expr(expr))

    def _exec_for(self, st):
        _, slot, start, limit, step = st
        ev = self.evaluator
        start = ev.eval_expr(start)
        limit = ev.eval_expr(limit)
        step = 1.0 if step is None else ev.eval_expr(step)
        if step == 0.0:
            step = 1.0
        self.variables.write_scalar(slot, start)
        if (step > 0.0 and start > limit) or (step < 0.0 and start < limit):
            next_index = self._find_matching_next(self.pc_index + 1)
            if next_index is None:
                raise ControlFlowError("FOR without matching NEXT")
            self.pc_index = next_index + 1
            return 'JUMP'
        if len(self.for_stack) >= self.max_for_depth:
            raise ControlFlowError("FOR stack overflow")
        self.for_stack.append(ForFrame(slot, limit, step, self.pc_index))
        return None

    def _exec_next(self, st):
        slot = st[1]
        if not self.for_stack:
            raise ControlFlowError("NEXT without FOR")
        frame = self.for_stack[-1]
        if slot is not None and slot != frame.slot:
            raise ControlFlowError(
                f"NEXT variable does not match FOR "
                f"({slot_name(slot)} vs {slot_name(frame.slot)})")
        value = self.variables.read_scalar(frame.slot) + frame.step
        self.variables.write_scalar(frame.slot, value)
        if (frame.step > 0.0 and value <= frame.limit) or \
                (frame.step < 0.0 and value >= frame.limit):
            # jump back to the line after FOR
            self.pc_index = frame.for_pc + 1
            return 'JUMP'
        self.for_stack.pop()
        return None

    def _find_matching_next(self, start):
        depth = 1
        lines = self.program.lines
        for i in range(start, len(lines)):
            kind = lines[i].kind
            if kind == 'FOR':
                depth += 1
            elif kind == 'NEXT':
                depth -= 1
                if depth == 0:
                    return i
        return None

    def _lineno_to_index(self, target, keyword):
        idx = self.program.find_index(target)
        if idx is None:
            raise ControlFlowError(f"{keyword} to {target} not found")
        return idx

    def _report(self, error):
        print(f"{error.label}: {error}", file=self.err)
