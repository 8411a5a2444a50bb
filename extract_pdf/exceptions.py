"""Custom exceptions for the PDF extraction stage."""


class ExtractPDFError(Exception):
    """Base exception for the PDF extraction stage."""

    pass


class InvalidInputError(ExtractPDFError):
    """Exception raised when the incoming record is not declared as a PDF."""

    pass


class DecodeError(ExtractPDFError):
    """Exception raised when the document bytes cannot be decoded."""

    pass


class ConfigurationError(ExtractPDFError):
    """Exception raised when configuration is invalid."""

    pass


class ExtractionError(ExtractPDFError):
    """Exception raised when text extraction fails."""

    pass
