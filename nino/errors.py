from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from nino.reader.lexer import Token


class NinoError(Exception):
    """ Base class for all Nino errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NinoSyntaxError(NinoError):
    """ Raised when source text cannot be tokenized or parsed"""

    @property
    def span(self) -> Optional[tuple[int, int]]:
        return None


class NinoLexerError(NinoSyntaxError):
    """ Raised when the tokenizer meets a character it cannot handle"""

    def __init__(self, message: str, position: int):
        super().__init__(message)
        self.position = position

    @property
    def span(self) -> Optional[tuple[int, int]]:
        return self.position, self.position


class NinoParserError(NinoSyntaxError):
    """ Raised when the token stream does not match the grammar"""

    def __init__(self, message: str, token: Optional[Token] = None):
        super().__init__(message)
        self.token = token

    @property
    def span(self) -> Optional[tuple[int, int]]:
        if self.token is None:
            return None
        return self.token.begin, self.token.end


class NinoRuntimeError(NinoError):
    """ Base class for errors raised while evaluating a program"""

    def __init__(self, message: str):
        super().__init__(message)
        # Index of the top-level item that failed, filled in by run()
        self.statement: Optional[int] = None


class NinoUnboundSymbol(NinoRuntimeError):
    """ Raised when a name is used before it is declared"""


class NinoTypeError(NinoRuntimeError):
    """ Raised when an operation is applied to values of the wrong type"""


class NinoMatchError(NinoTypeError):
    """ Raised when a match arm evaluates to a different variant than the scrutinee"""


class NinoNoMatchError(NinoRuntimeError):
    """ Raised when no match arm applies and no default arm was supplied"""


class NinoArityError(NinoRuntimeError):
    """ Raised when the number of arguments passed to a function is incorrect"""


class NinoInvalidCall(NinoRuntimeError):
    """ Raised when calling a name that is not bound to a function"""


class NinoFormatError(NinoRuntimeError):
    """ Raised when print cannot render a value"""


class NinoRecursionError(NinoRuntimeError):
    """ Raised when non-tail recursion exhausts the host stack"""
