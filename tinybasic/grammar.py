# Statement grammar, keyword classification and Tree -> tuple IR.
#
# Every program line is classified by its leading keyword, then only the rule
# for that keyword is parsed. The result is a tagged tuple:
#
#   ('LET', target, expr)              target: ('VAR', slot) | ('ARR', letter, expr)
#   ('DIM', [(letter, expr), ...])
#   ('FOR', slot, start, limit, step)  step may be None
#   ('NEXT', slot)                     slot may be None
#   ('PRINT_STR', text)
#   ('PRINT', expr)                    expr may be None
#   ('GOTO', lineno)
#   ('IF', cond, lineno)               lineno is None unless THEN <lineno> follows
#   ('END',)
#
# Expressions: ('NUM', value), ('VAR', slot), ('ARR', letter, expr),
# ('UN', op, x), ('BIN', op, a, b). Conditions: ('CMP', op, left, right),
# op and right are None for a bare expression.

import logging
import re

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput, VisitError

from .errors import BasicSyntaxError
from .variables import NUM_LETTERS, resolve_name, slot_name

log = logging.getLogger(__name__)

GRAMMAR = r"""
let_stmt: "LET"i target "=" expr
assign_stmt: target "=" expr

dim_stmt: "DIM"i dim_item ("," dim_item)*
dim_item: NAME "(" expr ")"

for_stmt: "FOR"i NAME "=" expr "TO"i expr ["STEP"i expr]
next_stmt: "NEXT"i [NAME]

print_stmt: "PRINT"i STRING    -> print_text
          | "PRINT"i [expr]    -> print_expr

goto_stmt: "GOTO"i INT
if_stmt: "IF"i cond ["THEN"i INT]

target: NAME                   -> scalar_ref
      | NAME "(" expr ")"      -> array_ref

// ----- COND / EXPR -----
cond: expr [relop expr]
!relop: "<=" | ">=" | "<>" | "==" | "<" | ">" | "="

?expr: term
     | expr "+" term           -> add
     | expr "-" term           -> sub
?term: factor
     | term "*" factor         -> mul
     | term "/" factor         -> div
?factor: "-" factor            -> neg
       | "+" factor            -> pos
       | "(" expr ")"
       | NAME "(" expr ")"     -> array_read
       | NAME                  -> var
       | NUMBER                -> number

NAME: /[A-Za-z][0-9]?/
NUMBER: /(\d+\.?\d*|\.\d+)([eE][+\-]?\d+)?/
INT: /\d+/
STRING: /"[^"]*"?/ | /'[^']*'?/

%import common.WS_INLINE
%ignore WS_INLINE
"""

START_RULES = {
    'LET': 'let_stmt',
    'DIM': 'dim_stmt',
    'FOR': 'for_stmt',
    'PRINT': 'print_stmt',
    'GOTO': 'goto_stmt',
    'IF': 'if_stmt',
    'NEXT': 'next_stmt',
    'ASSIGN': 'assign_stmt',
}

# precedence order matters: END is a bare prefix and must not shadow NEXT etc.
_KEYWORDS = [
    ('LET', re.compile(r'LET\s', re.I)),
    ('DIM', re.compile(r'DIM\s', re.I)),
    ('FOR', re.compile(r'FOR\s', re.I)),
    ('PRINT', re.compile(r'PRINT( |$)', re.I)),
    ('GOTO', re.compile(r'GOTO\s', re.I)),
    ('IF', re.compile(r'IF\s', re.I)),
    ('END', re.compile(r'END', re.I)),
    ('NEXT', re.compile(r'NEXT( |$)', re.I)),
]

_parser = None


def get_parser():
    global _parser
    if _parser is None:
        _parser = Lark(GRAMMAR, parser="lalr", start=list(START_RULES.values()))
    return _parser


def statement_kind(text):
    """Classify trimmed statement text by its leading keyword."""
    for kind, pattern in _KEYWORDS:
        if pattern.match(text):
            return kind
    return 'ASSIGN'


def _slot(tok):
    slot, _ = resolve_name(str(tok))
    return slot


def _letter(tok):
    slot = _slot(tok)
    if slot >= NUM_LETTERS:
        raise BasicSyntaxError(
            f"arrays only supported for A-Z, not {slot_name(slot)}",
            column=tok.column)
    return slot


@v_args(inline=True)
class StatementTransformer(Transformer):
    # ----- expressions -----
    def number(self, tok):
        return ('NUM', float(tok))

    def var(self, tok):
        return ('VAR', _slot(tok))

    def array_read(self, tok, index):
        return ('ARR', _letter(tok), index)

    def add(self, a, b): return ('BIN', '+', a, b)
    def sub(self, a, b): return ('BIN', '-', a, b)
    def mul(self, a, b): return ('BIN', '*', a, b)
    def div(self, a, b): return ('BIN', '/', a, b)

    def neg(self, x): return ('UN', '-', x)
    def pos(self, x): return ('UN', '+', x)

    def relop(self, tok):
        return str(tok)

    def cond(self, left, op, right):
        return ('CMP', op, left, right)

    # ----- assignment targets -----
    def scalar_ref(self, tok):
        return ('VAR', _slot(tok))

    def array_ref(self, tok, index):
        return ('ARR', _letter(tok), index)

    # ----- statements -----
    def let_stmt(self, target, expr):
        return ('LET', target, expr)

    def assign_stmt(self, target, expr):
        return ('LET', target, expr)

    def dim_item(self, tok, bound):
        return (_letter(tok), bound)

    def dim_stmt(self, *items):
        return ('DIM', list(items))

    def for_stmt(self, tok, start, limit, step):
        return ('FOR', _slot(tok), start, limit, step)

    def next_stmt(self, tok):
        return ('NEXT', None if tok is None else _slot(tok))

    def print_text(self, tok):
        s = str(tok)
        quote = s[0]
        s = s[1:]
        if s.endswith(quote):
            s = s[:-1]
        return ('PRINT_STR', s)

    def print_expr(self, expr):
        return ('PRINT', expr)

    def goto_stmt(self, tok):
        return ('GOTO', int(tok))

    def if_stmt(self, cond, tok):
        return ('IF', cond, None if tok is None else int(tok))


def _parse(text, kind):
    try:
        tree = get_parser().parse(text, start=START_RULES[kind])
        return StatementTransformer().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, BasicSyntaxError):
            raise e.orig_exc from None
        if not isinstance(e.orig_exc, RecursionError):
            raise
    except RecursionError:
        pass
    raise BasicSyntaxError("expression too deeply nested")


def _parse_prefix(text, kind, error):
    """Reparse text up to the token that failed.

    A quoted PRINT and an IF without THEN ignore whatever follows them, so
    the prefix is accepted when it parses to one of those. Returns None
    otherwise.
    """
    if kind not in ('PRINT', 'IF'):
        return None
    pos = getattr(error, 'pos_in_stream', None)
    token = getattr(error, 'token', None)
    if not isinstance(pos, int) or pos <= 0:
        return None
    # running out of input is not trailing text
    if token is not None and token.type == '$END':
        return None
    try:
        stmt = _parse(text[:pos], kind)
    except UnexpectedInput:
        return None
    if stmt[0] == 'PRINT_STR' or (stmt[0] == 'IF' and stmt[2] is None):
        log.debug("ignoring trailing text %r", text[pos:])
        return stmt
    return None


def parse_statement(text, kind=None):
    """Parse one statement (without its line number) into a tagged tuple."""
    text = text.strip()
    if kind is None:
        kind = statement_kind(text)
    if kind == 'END':
        return ('END',)
    try:
        return _parse(text, kind)
    except UnexpectedInput as e:
        log.debug("parse failed for %r: %s", text, e)
        stmt = _parse_prefix(text, kind, e)
        if stmt is not None:
            return stmt
        column = getattr(e, 'column', None)
        if not isinstance(column, int):
            column = None
        if kind == 'ASSIGN':
            raise BasicSyntaxError(f"unknown statement: {text}", column=column) from None
        raise BasicSyntaxError(f"malformed {kind} statement: {text}", column=column) from None
