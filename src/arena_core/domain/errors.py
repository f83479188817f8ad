from arena_core.shared.constants import (
    ERROR_PATTERNS,
    PERMISSION_ERROR_PATTERNS,
    RETRYABLE_ERROR_TYPES,
)
from arena_core.shared.errors import (
    ArenaError,
    ConfigurationError,
    FileSystemError,
)

__all__ = [
    "RETRYABLE_ERROR_TYPES",
    "ArenaError",
    "BattleStateError",
    "CompletionError",
    "ConfigurationError",
    "ErrorClassification",
    "ExceptionClassifier",
    "FatalError",
    "FileSystemError",
    "InputError",
    "ModelError",
    "ModelResponseError",
    "PersistenceError",
    "TerminalCompletionError",
    "TransientCompletionError",
]


class FatalError(ArenaError):
    pass


class ModelError(ArenaError):
    def __init__(
        self,
        message: str,
        model_key: str | None = None,
        *args: object,
        **kwargs: object,
    ) -> None:
        self.model_key = model_key
        enhanced_message = message

        if model_key:
            enhanced_message = f"[{model_key}] {enhanced_message}"

        super().__init__(enhanced_message, *args)


class ModelResponseError(ModelError):
    pass


class CompletionError(ModelError):
    """A remote completion failed; ``error_type`` names the classification."""

    transient = False

    def __init__(
        self,
        message: str,
        model_key: str | None = None,
        error_type: str = "general",
        *args: object,
        **kwargs: object,
    ) -> None:
        self.error_type = error_type
        super().__init__(message, model_key, *args)


class TransientCompletionError(CompletionError):
    """Rate limiting, timeouts and network trouble. Worth retrying."""

    transient = True


class TerminalCompletionError(CompletionError):
    """Bad credentials or a malformed request. Retrying will not help."""

    transient = False


class InputError(ArenaError):
    pass


class BattleStateError(ArenaError):
    pass


class PersistenceError(FileSystemError):
    pass


class ErrorClassification:
    __slots__ = ("error_type", "is_retryable", "message")

    def __init__(
        self, error_type: str, message: str, is_retryable: bool
    ) -> None:
        self.error_type = error_type
        self.message = message
        self.is_retryable = is_retryable

    def to_error(self, model_key: str | None = None) -> CompletionError:
        error_class = (
            TransientCompletionError
            if self.is_retryable
            else TerminalCompletionError
        )
        return error_class(
            self.message, model_key=model_key, error_type=self.error_type
        )


class ExceptionClassifier:
    # Order matters: "timeout" must win over "error" style catch-alls
    _EXCEPTION_TYPE_MAP: dict[str, tuple[str, bool]] = {
        "ratelimiterror": ("rate_limit", True),
        "timeouterror": ("timeout", True),
        "timeout": ("timeout", True),
        "apiconnectionerror": ("connection", True),
        "connectionerror": ("connection", True),
        "serviceunavailableerror": ("service_unavailable", True),
        "internalservererror": ("service", True),
        "authenticationerror": ("authentication", False),
        "permissiondeniederror": ("permission_denied", False),
        "badrequesterror": ("bad_request", False),
        "notfounderror": ("not_found", False),
        "modelresponseerror": ("model_response_error", False),
    }

    _TYPE_LABELS = {
        "rate_limit": "Rate limit exceeded",
        "timeout": "Request timed out",
        "authentication": "Authentication failed",
        "not_found": "Model not found",
        "bad_request": "Malformed request",
        "service_unavailable": "Service unavailable",
        "service": "Server error",
        "overloaded": "Server overloaded",
        "connection": "Connection error",
        "permission_denied": "Permission denied",
        "model_response_error": "Invalid model response",
        "general": "Unexpected error",
    }

    @classmethod
    def classify(
        cls,
        exc: BaseException,
        context: str = "",
    ) -> ErrorClassification:
        if isinstance(exc, CompletionError):
            return ErrorClassification(
                exc.error_type,
                cls._format_message(exc.error_type, exc, context),
                exc.transient,
            )

        exc_name = type(exc).__name__.lower()
        error_msg = str(exc).lower()

        for type_pattern, (
            mapped_type,
            is_retryable,
        ) in cls._EXCEPTION_TYPE_MAP.items():
            if type_pattern in exc_name:
                error_type = (
                    "overloaded"
                    if mapped_type == "service" and "overload" in error_msg
                    else mapped_type
                )
                msg = cls._format_message(error_type, exc, context)
                return ErrorClassification(error_type, msg, is_retryable)

        if any(p in error_msg for p in PERMISSION_ERROR_PATTERNS):
            msg = cls._format_message("permission_denied", exc, context)
            return ErrorClassification("permission_denied", msg, False)

        for error_type, patterns in ERROR_PATTERNS.items():
            if any(p in error_msg for p in patterns):
                is_retryable = error_type in RETRYABLE_ERROR_TYPES
                msg = cls._format_message(error_type, exc, context)
                return ErrorClassification(error_type, msg, is_retryable)

        msg = cls._format_message("general", exc, context)
        return ErrorClassification("general", msg, False)

    @classmethod
    def _format_message(
        cls, error_type: str, exc: BaseException, context: str
    ) -> str:
        label = cls._TYPE_LABELS.get(error_type, "Error")
        detail = str(exc) or type(exc).__name__
        if context:
            return f"{label} with {context}: {detail}"
        return f"{label}: {detail}"
