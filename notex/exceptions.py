"""Exception hierarchy for the notex pipeline."""


class NotexError(Exception):
    """Base class for all pipeline errors."""


class NoContentError(NotexError):
    """The model returned a completion without any text."""

    def __init__(self) -> None:
        super().__init__("No response content from LLM")


class GatewayError(NotexError):
    """Every attempt to reach the model failed."""

    def __init__(self, attempts: int, last_error: BaseException | None) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Max retries exceeded after {attempts} attempts: {last_error}")


class CategorizationError(NotexError):
    """A note could not be split into segments."""


class EnhancementError(NotexError):
    """A segment could not be enhanced."""


class WriterError(NotexError):
    """Writing, moving or appending to an output file failed."""


class DiscoveryError(NotexError):
    """The input directory could not be walked."""
