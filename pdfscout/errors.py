"""Exception taxonomy shared by the tools and the HTTP layer."""


class PdfScoutError(Exception):
    """Base class for every error the service reports to a caller."""
    status_code = 500

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(PdfScoutError):
    """Caller input is missing or unusable (no file, empty query)."""
    status_code = 400


class ProcessingError(PdfScoutError):
    """An uploaded file could not be parsed."""
    status_code = 500


class UpstreamError(PdfScoutError):
    """Network or parse failure while talking to an external API."""
    status_code = 502


class ProviderEmptyResult(PdfScoutError):
    """The generation call succeeded but returned no usable text."""
    status_code = 200


class ConfigurationError(PdfScoutError):
    """A required setting (e.g. an API key) is not configured."""
    status_code = 503
