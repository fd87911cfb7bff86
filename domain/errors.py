class TranslationError(Exception):
    """Message is safe to show a user, never upstream text."""

    status_code: int = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(TranslationError):
    status_code = 400


class RateLimitError(TranslationError):
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded. Please try again later.") -> None:
        super().__init__(message)


class ModerationRejection(TranslationError):
    status_code = 400

    def __init__(self, categories: list[str]) -> None:
        super().__init__(f"Content flagged as inappropriate: {', '.join(categories)}")
        self.categories = categories


class ConfigurationError(TranslationError):
    status_code = 500

    def __init__(self, message: str = "Translation service temporarily unavailable") -> None:
        super().__init__(message)


class UpstreamError(TranslationError):
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        status: str | int | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.status = status
