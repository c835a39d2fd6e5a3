import logging
import sys
from collections import namedtuple

from .errors import BasicSyntaxError, ProgramCapacityError
from .grammar import parse_statement, statement_kind

log = logging.getLogger(__name__)

MAX_LINES = 1000

# stmt is the parsed tuple, or None when parsing failed (error holds the message)
Line = namedtuple('Line', 'lineno text kind stmt error')


def make_line(lineno, text):
    kind = statement_kind(text)
    try:
        return Line(lineno, text, kind, parse_statement(text, kind), None)
    except BasicSyntaxError as e:
        return Line(lineno, text, kind, None, e)


def split_program_line(raw, source_line=None):
    """Split '<lineno> <text>' into (lineno, text); text is None for a bare number."""
    head, _, rest = raw.strip().partition(' ')
    if not head.isdigit():
        where = f" at line {source_line}" if source_line is not None else ""
        raise BasicSyntaxError(f"expected a line number{where}: {raw.strip()}")
    rest = rest.strip()
    return int(head), (rest or None)


class ProgramStore:
    def __init__(self, max_lines=MAX_LINES):
        self.max_lines = max_lines
        self.lines = []
        self.frozen = False

    def __len__(self):
        return len(self.lines)

    def __iter__(self):
        return self.enumerate()

    def __getitem__(self, index):
        return self.lines[index]

    def _check_mutable(self):
        if self.frozen:
            raise RuntimeError("program cannot be changed while it is running")

    def find_index(self, lineno):
        for i, line in enumerate(self.lines):
            if line.lineno == lineno:
                return i
        return None

    def insert_or_replace(self, lineno, text):
        self._check_mutable()
        text = text.strip()
        idx = self.find_index(lineno)
        if idx is not None:
            self.lines[idx] = make_line(lineno, text)
            return
        if len(self.lines) >= self.max_lines:
            raise ProgramCapacityError(
                f"Program full ({self.max_lines} lines), line {lineno} dropped",
                lineno)
        self.lines.append(make_line(lineno, text))
        self.lines.sort(key=lambda line: line.lineno)

    def delete(self, lineno):
        self._check_mutable()
        idx = self.find_index(lineno)
        if idx is not None:
            del self.lines[idx]

    def clear(self):
        self._check_mutable()
        self.lines = []

    def enumerate(self):
        for line in self.lines:
            yield line.lineno, line.text

    # ----- text format -----
    def load_text(self, text, err=None):
        """Replace the program with the lines of text.

        Every line is validated before the store is touched. Lines that do not
        fit are reported on err and dropped.
        """
        entries = []
        for n, raw in enumerate(text.splitlines(), 1):
            if not raw.strip():
                continue
            entries.append(split_program_line(raw, n))
        self.clear()
        for lineno, stmt_text in entries:
            if stmt_text is None:
                self.delete(lineno)
                continue
            try:
                self.insert_or_replace(lineno, stmt_text)
            except ProgramCapacityError as e:
                print(e, file=err if err is not None else sys.stderr)
        log.debug("loaded %d lines", len(self.lines))

    def load_file(self, path, err=None):
        with open(path, 'r') as f:
            self.load_text(f.read(), err)

    def dump_text(self):
        return ''.join(f"{lineno} {text}\n" for lineno, text in self.enumerate())

    def list_program(self, out=None):
        (out if out is not None else sys.stdout).write(self.dump_text())

    def save_file(self, path):
        with open(path, 'w') as f:
            f.write(self.dump_text())
        log.debug("saved %d lines to %s", len(self.lines), path)
