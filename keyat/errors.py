"""Exception hierarchy for the KeyAT serial helper."""


class KeyATError(RuntimeError):
    """Base class for all errors raised by this package."""
    pass


class LinkUnavailableError(KeyATError):
    """Raised when the serial link cannot be opened."""
    def __init__(self, message, port=None):
        super().__init__(message)
        self.port = port


class LinkFaultError(KeyATError):
    """Raised when an open link fails while reading or writing."""
    pass


class ScriptSourceError(KeyATError):
    """Raised when the script file cannot be read into memory."""
    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class DirectiveParseError(KeyATError, ValueError):
    """Raised when a ~Z directive is not followed by an integer."""
    def __init__(self, message, line=None):
        super().__init__(message)
        self.line = line


class ConsoleUnavailableError(KeyATError):
    """Raised when interactive mode is requested without a usable console."""
    pass
