"""Errors raised while turning highlighted URIs into SAS URLs."""


class SasUriError(Exception):
    """Base exception for SAS URI operations."""
    pass


class EmptySelectionError(SasUriError):
    """Nothing is highlighted in the editor."""
    pass


class ParseError(SasUriError):
    """Highlighted text is not a syntactically valid URL."""
    pass


class LocatorError(SasUriError):
    """URL does not name an account, container and blob."""
    pass


class UserInterruptedError(SasUriError):
    """User dismissed a prompt without answering."""
    pass


class SigningError(SasUriError):
    """The SDK failed to produce a shared access signature."""
    pass
