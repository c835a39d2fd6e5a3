class BasicError(Exception):
    """Base class for errors raised while loading or running a program."""
    label = 'Runtime error'

    def __init__(self, message, lineno=None):
        super().__init__(message)
        self.message = message
        self.lineno = lineno


class BasicSyntaxError(BasicError):
    label = 'Syntax error'

    def __init__(self, message, lineno=None, column=None):
        super().__init__(message, lineno)
        self.column = column

    def __str__(self):
        if self.column is not None and self.column > 0:
            return f"{self.message} (column {self.column})"
        return self.message


class UndeclaredArrayError(BasicError):
    pass


class ArrayBoundsError(BasicError):
    pass


class ControlFlowError(BasicError):
    pass


class ProgramCapacityError(BasicError):
    pass
