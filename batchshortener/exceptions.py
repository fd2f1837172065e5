class BatchShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:batchshortener_error'


class EmptyBatchError(BatchShortenerError):
    """Raised when a submission contains no URLs."""

    error_code = 'batch:empty_batch'


class TooManyEntriesError(BatchShortenerError):
    """Raised when a submission contains more URLs than allowed."""

    error_code = 'batch:too_many_entries'


class ValidationFailedError(BatchShortenerError):
    """Raised when one or more entries of a submission fail validation.

    Attributes:
        entry_errors (dict[int, EntryErrors]):
            Field errors keyed by the zero-based index of each failing entry.
    """

    error_code = 'batch:validation_failed'

    def __init__(self, message: str, entry_errors: dict | None = None):
        super().__init__(message)
        self.entry_errors = entry_errors or {}


class InsertConflictError(BatchShortenerError):
    """Raised when a resolved shortcode collides with a stored one on commit."""

    error_code = 'batch:insert_conflict'


class GenerationExhaustedError(BatchShortenerError):
    """Raised when no unique shortcode is found within the retry cap."""

    error_code = 'batch:generation_exhausted'


class ConfigurationError(BatchShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
