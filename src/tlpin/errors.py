## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark


class TlpinError(Exception):
    def __init__(self, message: str = "", *, tlpin_op=None, tlpin_token=None):
        """Base class for all tlpin-raised errors."""
        super().__init__(message)
        self.tlpin_op: object = tlpin_op
        self.tlpin_token: str = tlpin_token

class TlpinLexError(TlpinError, lark.exceptions.LexError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, tlpin_token=token)
        self.message = message
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token

class TlpinEscapeError(TlpinLexError):
    pass

class TlpinUnterminatedError(TlpinLexError):
    """String or character literal still open at the end of the source."""
    pass

class TlpinTokenSizeError(TlpinLexError):
    pass

class TlpinNumberRangeError(TlpinLexError):
    def __init__(self, message, *, kind, filename=None, line=None, column=None, token=None):
        super().__init__(message, filename=filename, line=line, column=column, token=token)
        self.kind: str = kind  # "overflow" or "underflow"


class TlpinNameError(TlpinError, NameError):
    pass

class TlpinTypeError(TlpinError, TypeError):
    """Loading-time problems with native operations, usually from Python-side."""
    pass


class TlpinStackError(TlpinError, TypeError):
    """Runtime faults found by checking the stack and its content before a native runs."""
    def __init__(self, message: str = "", *, tlpin_op=None, tlpin_token=None, tlpin_stack=None):
        super().__init__(message, tlpin_op=tlpin_op, tlpin_token=tlpin_token)
        self.tlpin_stack = tlpin_stack

class TlpinStackUnderflow(TlpinStackError):
    pass

class TlpinTypeMismatch(TlpinStackError):
    pass
