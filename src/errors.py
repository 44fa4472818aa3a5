"""Exception types shared across the RAG core and its collaborators."""


class RAGError(Exception):
    """Base class for all errors raised by this package."""


class InvalidInputError(RAGError, ValueError):
    """A required vector or reference is missing or malformed."""


class NotFoundError(RAGError, LookupError):
    """An unknown document id or target word was referenced."""


class NotInitializedError(RAGError, RuntimeError):
    """The pipeline was used before its collaborators were ready."""


class CollaboratorError(RAGError):
    """An embedding or vector-index call failed."""
