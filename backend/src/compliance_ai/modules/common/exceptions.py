"""Domain exception classes for business logic errors."""

from typing import Optional


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    pass


class ResourceNotFoundError(DomainError):
    """Raised when a requested resource cannot be found."""

    pass


class ValidationError(DomainError):
    """Raised when data validation fails."""

    pass


class DocumentNotFoundError(ResourceNotFoundError):
    """Raised when a document cannot be found or has been deleted."""

    pass


class KeyPointNotFoundError(ResourceNotFoundError):
    """Raised when a key point cannot be found or has been deleted."""

    pass


class ActionSuggestionNotFoundError(ResourceNotFoundError):
    """Raised when an action suggestion cannot be found or has been deleted."""

    pass


class ParameterNotFoundError(ResourceNotFoundError):
    """Raised when an application parameter key does not exist."""

    pass


class InvalidUploadError(DomainError):
    """Raised when an upload is rejected before anything is stored."""

    pass


class MissingFileError(InvalidUploadError):
    """Raised when the request carries no file."""

    pass


class UnsupportedMediaTypeError(InvalidUploadError):
    """Raised when the uploaded file's MIME type is not in the allow-list."""

    def __init__(self, content_type: Optional[str]):
        self.content_type = content_type
        super().__init__(f"Unsupported file type: {content_type or 'unknown'}")


class IngestionError(DomainError):
    """Base class for failures while storing, analyzing or persisting a document."""

    pass


class StorageUnavailableError(IngestionError):
    """Raised when the object store cannot be reached or refuses an operation."""

    pass


class ProviderKeyMissingError(IngestionError):
    """Raised when no API key is configured for the active AI provider."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"No API key configured for provider '{provider}'")


class ProviderRequestFailedError(IngestionError):
    """Raised when an AI provider call fails.

    ``status_code`` holds the HTTP status of a non-2xx response, or ``None``
    when the request never got a response (timeout, connection error).
    """

    def __init__(self, provider: str, status_code: Optional[int], message: str):
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class ProviderResponseMalformedError(IngestionError):
    """Raised when a provider response lacks the expected generated text."""

    pass


class AnalysisFormatInvalidError(IngestionError):
    """Raised when generated text is not a valid analysis JSON object."""

    pass


class PersistenceFailureError(IngestionError):
    """Raised when a database write of the ingestion pipeline fails."""

    pass


class DocumentProcessingError(IngestionError):
    """Raised when ingestion fails after the document row was created.

    The document has been moved to ERROR (best effort) and the original
    exception is available as ``cause`` and ``__cause__``.
    """

    def __init__(self, stage: str, document_id: int, cause: Exception):
        self.stage = stage
        self.document_id = document_id
        self.cause = cause
        super().__init__(f"Document {document_id} failed during {stage}: {cause}")
