import logging

from .errors import ArrayBoundsError, UndeclaredArrayError

log = logging.getLogger(__name__)


class ExpressionEvaluator:
    """Evaluates expression and condition tuples against a VariableStore.

    Array reads fail soft: an undeclared array or a bad index is passed to
    ``report`` and the read yields 0.0. Writes are not handled here.
    """

    def __init__(self, variables, report=None):
        self.variables = variables
        self.report = report

    def eval_expr(self, node):
        typ = node[0]
        if typ == 'NUM':
            return node[1]
        if typ == 'VAR':
            return self.variables.read_scalar(node[1])
        if typ == 'ARR':
            letter, index = node[1], self.eval_expr(node[2])
            try:
                return self.variables.read_array(letter, index)
            except (UndeclaredArrayError, ArrayBoundsError) as e:
                self._diagnostic(e)
                return 0.0
        if typ == 'UN':
            v = self.eval_expr(node[2])
            return -v if node[1] == '-' else v
        if typ == 'BIN':
            op, a, b = node[1], self.eval_expr(node[2]), self.eval_expr(node[3])
            if op == '+': return a + b
            if op == '-': return a - b
            if op == '*': return a * b
            if op == '/':
                # x/0 yields x
                if b == 0.0:
                    b = 1.0
                return a / b
        raise RuntimeError(f"Unknown expr node {node}")

    def eval_cond(self, node):
        _, op, left, right = node
        l = self.eval_expr(left)
        if op is None:
            return l != 0.0
        r = self.eval_expr(right)
        if op == '<=': return l <= r
        if op == '>=': return l >= r
        if op == '<>': return l != r
        if op == '<': return l < r
        if op == '>': return l > r
        if op in ('=', '=='): return l == r
        raise RuntimeError(f"Unknown relational operator {op}")

    def _diagnostic(self, error):
        log.debug("fail-soft array read: %s", error)
        if self.report is not None:
            self.report(error)
