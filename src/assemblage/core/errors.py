class AssemblageError(Exception):
    """Base error for all user-facing assemblage exceptions."""


class MissingInputError(AssemblageError):
    """Raised when the object identifier or file list is absent or empty."""


class InvalidConfigurationError(AssemblageError):
    """Raised when a style, bundle mode or option value is not recognized."""


class ObjectFileNotFoundError(AssemblageError, FileNotFoundError):
    """Raised when a referenced file does not exist on disk."""


class MetadataExtractionError(AssemblageError):
    """Raised when file metadata cannot be extracted."""
