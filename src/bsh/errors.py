"""Error taxonomy shared by the store, the parser and both front-ends."""

# Exit codes follow sysexits.h so they stay clear of the codes most
# commands return.
EXIT_USAGE = 64
EXIT_DATAERR = 65
EXIT_NOINPUT = 66
EXIT_UNAVAILABLE = 69
EXIT_CANTCREAT = 73
EXIT_IOERR = 74
EXIT_INTERRUPTED = 130


class BshError(Exception):
    """Base class for recoverable bsh errors."""

    exit_code = 1


class AlreadyExists(BshError):
    """A category or alias with that name is already defined."""

    exit_code = EXIT_CANTCREAT


class NotFound(BshError):
    """A category or alias does not exist."""

    exit_code = EXIT_NOINPUT


class MalformedTemplate(BshError):
    """A command template has an unterminated or empty placeholder."""

    exit_code = EXIT_DATAERR

    def __init__(self, message: str, template: str = "", position: int = -1):
        super().__init__(message)
        self.template = template
        self.position = position


class ValidationError(BshError):
    """A name or value is empty or contains illegal characters."""

    exit_code = EXIT_DATAERR


class StorageError(BshError):
    """The command store could not be read or written."""

    exit_code = EXIT_IOERR


class SpawnError(BshError):
    """The shell could not be launched."""

    exit_code = EXIT_UNAVAILABLE
