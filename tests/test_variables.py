import math

import pytest

from tinybasic.errors import ArrayBoundsError, UndeclaredArrayError
from tinybasic.variables import NUM_VARS, VariableStore, resolve_name, slot_name


@pytest.mark.parametrize("text, expected", [
    ("A", (0, 1)),
    ("z", (25, 1)),
    ("B3", (39, 2)),
    ("Z9", (285, 2)),
    ("X5Y", (261, 2)),
    ("9", (None, 0)),
    ("", (None, 0)),
])
def test_resolve_name(text, expected):
    assert resolve_name(text) == expected


def test_resolve_name_from_position():
    assert resolve_name("A+B", 2) == (1, 3)
    assert resolve_name("A+B", 1) == (None, 1)


def test_slot_name_inverts_resolution():
    for name in ("A", "Q", "A0", "M7", "Z9"):
        slot, _ = resolve_name(name)
        assert slot_name(slot) == name


def test_scalars_default_to_zero():
    store = VariableStore()
    assert len(store.scalars) == NUM_VARS == 286
    assert all(v == 0.0 for v in store.scalars)
    store.write_scalar(39, 2.5)
    assert store.read_scalar(39) == 2.5
    assert store.read_scalar(1) == 0.0


def test_declare_array_is_inclusive():
    store = VariableStore()
    store.declare_array(0, 3)
    assert store.array_size(0) == 4
    store.write_array(0, 3, 7)
    assert store.read_array(0, 3) == 7.0
    with pytest.raises(ArrayBoundsError):
        store.read_array(0, 4)
    with pytest.raises(ArrayBoundsError):
        store.write_array(0, -1, 1.0)


def test_negative_bound_gives_single_cell():
    store = VariableStore()
    store.declare_array(2, -5)
    assert store.array_size(2) == 1
    assert store.read_array(2, 0) == 0.0


def test_redeclare_discards_old_array():
    store = VariableStore()
    store.declare_array(0, 2)
    store.write_array(0, 1, 9.0)
    store.declare_array(0, 5)
    assert store.array_size(0) == 6
    assert store.read_array(0, 1) == 0.0


def test_index_is_truncated():
    store = VariableStore()
    store.declare_array(0, 3)
    store.write_array(0, 2.9, 4.0)
    assert store.read_array(0, 2) == 4.0


def test_non_finite_index_is_out_of_bounds():
    store = VariableStore()
    store.declare_array(0, 3)
    with pytest.raises(ArrayBoundsError):
        store.read_array(0, math.nan)
    with pytest.raises(ArrayBoundsError):
        store.read_array(0, math.inf)


def test_undeclared_array():
    store = VariableStore()
    with pytest.raises(UndeclaredArrayError, match="array C not DIM'd"):
        store.read_array(2, 0)
    with pytest.raises(UndeclaredArrayError):
        store.write_array(2, 0, 1.0)


def test_reset_clears_everything():
    store = VariableStore()
    store.write_scalar(0, 1.0)
    store.declare_array(0, 1)
    store.reset()
    assert store.read_scalar(0) == 0.0
    assert store.array_size(0) == 0
