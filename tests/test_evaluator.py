import pytest

from tinybasic.errors import ArrayBoundsError, UndeclaredArrayError
from tinybasic.evaluator import ExpressionEvaluator
from tinybasic.grammar import parse_statement
from tinybasic.variables import VariableStore


@pytest.fixture
def reported():
    return []


@pytest.fixture
def ev(reported):
    return ExpressionEvaluator(VariableStore(), reported.append)


def expr(text):
    return parse_statement("PRINT " + text)[1]


def cond(text):
    return parse_statement("IF " + text + " THEN 10")[1]


@pytest.mark.parametrize("text, value", [
    ("2+3*4", 14.0),
    ("(2+3)*4", 20.0),
    ("--5", 5.0),
    ("-+-2", 2.0),
    ("10/0", 10.0),
    ("0/0", 0.0),
    ("8/4/2", 1.0),
    ("7-2-1", 4.0),
    ("-(3-5)", 2.0),
    ("1e2+.5", 100.5),
    (" 2 *  ( 1 + 1 ) ", 4.0),
])
def test_arithmetic(ev, text, value):
    assert ev.eval_expr(expr(text)) == value


def test_variables(ev):
    ev.variables.write_scalar(0, 3.0)
    ev.variables.write_scalar(26, 10.0)
    assert ev.eval_expr(expr("A*2")) == 6.0
    assert ev.eval_expr(expr("A0-A")) == 7.0
    assert ev.eval_expr(expr("B")) == 0.0


def test_array_read(ev, reported):
    ev.variables.declare_array(0, 3)
    ev.variables.write_array(0, 2, 5.0)
    assert ev.eval_expr(expr("A(1+1)")) == 5.0
    assert reported == []


def test_out_of_bounds_read_is_soft(ev, reported):
    ev.variables.declare_array(0, 3)
    assert ev.eval_expr(expr("A(9)+1")) == 1.0
    assert len(reported) == 1
    assert isinstance(reported[0], ArrayBoundsError)


def test_undeclared_read_is_soft(ev, reported):
    assert ev.eval_expr(expr("Q(0)")) == 0.0
    assert isinstance(reported[0], UndeclaredArrayError)


def test_negative_index_read_is_soft(ev, reported):
    ev.variables.declare_array(0, 3)
    assert ev.eval_expr(expr("A(-1)")) == 0.0
    assert isinstance(reported[0], ArrayBoundsError)


def test_no_reporter_is_fine():
    ev = ExpressionEvaluator(VariableStore())
    assert ev.eval_expr(expr("A(0)")) == 0.0


@pytest.mark.parametrize("text, truth", [
    ("1<2", True),
    ("2<2", False),
    ("2<=2", True),
    ("3>=4", False),
    ("4>3", True),
    ("1<>1", False),
    ("1<>2", True),
    ("2=2", True),
    ("2==2", True),
    ("1+1=3", False),
    ("0", False),
    ("5", True),
    ("-1", True),
])
def test_conditions(ev, text, truth):
    assert ev.eval_cond(cond(text)) is truth


def test_bare_variable_condition(ev):
    assert ev.eval_cond(cond("A")) is False
    ev.variables.write_scalar(0, 0.5)
    assert ev.eval_cond(cond("A")) is True
