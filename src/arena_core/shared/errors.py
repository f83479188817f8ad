"""Base exceptions for Arena.

Domain-specific exceptions extend these in ``arena_core.domain.errors``.
"""


class ArenaError(Exception):
    """Base exception for all Arena errors."""

    def __init__(self, message: str, *args: object, **kwargs: object) -> None:
        self.message = message
        super().__init__(message, *args)


class ConfigurationError(ArenaError):
    """Raised for invalid settings or battle configurations.

    ``problems`` keeps the individual validation messages so callers can
    show all of them instead of just the first.
    """

    def __init__(
        self,
        message: str,
        problems: list[str] | None = None,
        *args: object,
        **kwargs: object,
    ) -> None:
        self.problems = list(problems or [])
        if self.problems:
            message = message + "\n  - " + "\n  - ".join(self.problems)
        super().__init__(message, *args)


class FileSystemError(ArenaError):
    """Raised when battle records cannot be read or written."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        *args: object,
        **kwargs: object,
    ) -> None:
        self.file_path = file_path
        if file_path:
            message = f"[{file_path}] {message}"
        super().__init__(message, *args)
