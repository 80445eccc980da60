"""Custom exceptions for reverse-make."""

from __future__ import annotations


class ReverseMakeError(Exception):
    """Base exception for all reverse-make errors."""


class ClassificationError(ReverseMakeError):
    """Raised when a command line cannot be mapped onto an invocation."""

    def __init__(self, message: str, token: str, line: int | None = None):
        self.token = token
        self.line = line
        self.detail = message
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line is None:
            return self.detail
        return f"line {self.line}: {self.detail}"

    def at_line(self, line: int) -> ClassificationError:
        """Attach the logical line number the error was raised on."""
        self.line = line
        self.args = (self._format(),)
        return self


class UnsupportedCommand(ClassificationError):
    """Raised when a compiler line does not start with gcc or g++."""

    def __init__(self, token: str, line: int | None = None):
        super().__init__(f"Unsupported command: {token}", token, line)


class UnsupportedArchiveForm(ClassificationError):
    """Raised when an ar line is not ``ar cr|rc <output> <inputs...>``."""

    def __init__(self, token: str, line: int | None = None):
        super().__init__(
            f"Unsupported ar form {token!r}: only `ar cr|rc <output> <inputs...>` is supported",
            token,
            line,
        )


class UnhandledArgument(ClassificationError):
    """Raised for flags that are recognized but deliberately unsupported."""

    def __init__(self, token: str, line: int | None = None):
        super().__init__(f'Unhandled argument type: "{token}"', token, line)


class MissingArgument(ClassificationError):
    """Raised when a two-token flag is the last token on the line."""

    def __init__(self, token: str, line: int | None = None):
        super().__init__(f"No argument after '{token}'", token, line)


class GroupingError(ReverseMakeError):
    """Raised when a target's inputs cannot be grouped."""

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message)


class UnknownDependency(GroupingError):
    """Raised when an input has no compile, link or archive recipe in the log."""

    def __init__(self, path: str):
        super().__init__(f'Compilation command for dependency "{path}" not found.', path)


class MalformedGroupSeed(GroupingError):
    """Raised when a compiled object was built from other than one source."""

    def __init__(self, path: str, input_count: int):
        self.input_count = input_count
        super().__init__(
            f"Expected compile target {path} to have one input, found {input_count}",
            path,
        )
