## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class SeqaltError(Exception):
    """Base class for all errors raised while lexing, parsing or evaluating."""

    def __init__(self, message: str = "", *, token: str | None = None, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.token = token
        self.line = line
        self.column = column

    def locate(self, token: str | None, line: int | None, column: int | None) -> "SeqaltError":
        """Attach a source position, unless a more precise one was recorded already."""
        if self.line is None:
            self.line, self.column = line, column
            self.token = self.token or token
        return self


class SeqaltSyntaxError(SeqaltError, SyntaxError):
    pass

class SeqaltIncompleteParse(SeqaltSyntaxError):
    """Input ended while a group was still open; more text could complete it."""
    pass


class UnboundNameError(SeqaltError, NameError):
    pass


class TypeMismatchError(SeqaltError, TypeError):
    """An operation received an operand shape it cannot handle."""
    pass
