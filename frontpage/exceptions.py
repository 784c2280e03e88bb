"""Custom exception hierarchy for the front page pipeline."""


class FrontPageError(Exception):
    """Base exception for all front page pipeline errors."""


class ConfigurationError(FrontPageError):
    """Raised when required configuration (API key, data files) is missing."""


class DateValidationError(FrontPageError):
    """Raised when a requested date cannot be used."""


class InvalidDateFormat(DateValidationError):
    """Raised when a date string is not a real YYYY-MM-DD calendar day."""


class DateOutOfRange(DateValidationError):
    """Raised when a date falls before front pages are available."""


class AssetDownloadFailed(FrontPageError):
    """Raised when the front page PDF cannot be downloaded."""


class ArchiveFetchError(FrontPageError):
    """Raised when the NYT Archive API returns nothing usable."""


class RegistryError(FrontPageError):
    """Raised when the corrupted-PDF registry file cannot be read or written."""


class EntryCreationFailed(FrontPageError):
    """Raised when Day One refuses to create the entry."""

    def __init__(self, message: str, returncode: int = 1, output: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output
