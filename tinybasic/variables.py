import math
import string

from .errors import ArrayBoundsError, UndeclaredArrayError

NUM_LETTERS = 26
# A..Z plus A0..Z9
NUM_VARS = NUM_LETTERS + NUM_LETTERS * 10


def resolve_name(text, pos=0):
    """Read a variable name (one letter, optional digit) starting at pos.

    Returns (slot, new_pos); slot is None when text[pos] is not a letter.
    """
    if pos >= len(text) or text[pos] not in string.ascii_letters:
        return None, pos
    base = ord(text[pos].upper()) - ord('A')
    pos += 1
    if pos < len(text) and text[pos] in string.digits:
        slot = NUM_LETTERS + base * 10 + int(text[pos])
        return slot, pos + 1
    return base, pos


def slot_name(slot):
    if slot < NUM_LETTERS:
        return chr(ord('A') + slot)
    base, digit = divmod(slot - NUM_LETTERS, 10)
    return f"{chr(ord('A') + base)}{digit}"


def letter_name(letter):
    return chr(ord('A') + letter)


def to_index(value):
    # C-style truncation; non-finite values have no index
    if not math.isfinite(value):
        return None
    return int(value)


class VariableStore:
    def __init__(self):
        self.scalars = [0.0] * NUM_VARS
        self.arrays = [None] * NUM_LETTERS

    def reset(self):
        self.scalars = [0.0] * NUM_VARS
        self.arrays = [None] * NUM_LETTERS

    # scalars
    def read_scalar(self, slot):
        return self.scalars[slot]

    def write_scalar(self, slot, value):
        self.scalars[slot] = float(value)

    # arrays
    def declare_array(self, letter, upper_bound):
        bound = to_index(upper_bound)
        if bound is None or bound < 0:
            bound = 0
        self.arrays[letter] = [0.0] * (bound + 1)

    def array_size(self, letter):
        cells = self.arrays[letter]
        return 0 if cells is None else len(cells)

    def _checked(self, letter, index):
        cells = self.arrays[letter]
        if cells is None:
            raise UndeclaredArrayError(f"array {letter_name(letter)} not DIM'd")
        idx = to_index(index)
        if idx is None or idx < 0 or idx >= len(cells):
            shown = idx if idx is not None else index
            raise ArrayBoundsError(
                f"array {letter_name(letter)} index {shown} out of bounds")
        return cells, idx

    def read_array(self, letter, index):
        cells, idx = self._checked(letter, index)
        return cells[idx]

    def write_array(self, letter, index, value):
        cells, idx = self._checked(letter, index)
        cells[idx] = float(value)
