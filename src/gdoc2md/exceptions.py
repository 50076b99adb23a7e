#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the gdoc2md library.

Exception Hierarchy
-------------------
- Gdoc2MdError (base exception)

  - InputError (document argument missing or structurally unusable)

  - FetchError (document source failures)
    - AuthenticationError (missing or rejected credentials)
    - DocumentNotFoundError (unknown document id)

  - ConfigurationError (invalid environment or CLI configuration)

The conversion engine itself only ever raises ``InputError``. Fetch errors
are raised by the Google Docs client and travel unchanged through the cache
and service layers to the caller.

"""

from typing import Any


class Gdoc2MdError(Exception):
    """Base exception class for all gdoc2md-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InputError(Gdoc2MdError):
    """Exception raised when the document to convert is missing or unusable.

    Parameters
    ----------
    message : str
        Description of the input problem
    parameter_name : str, optional
        Name of the offending argument
    parameter_value : any, optional
        The value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the input error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class FetchError(Gdoc2MdError):
    """Exception raised when a document cannot be fetched from its source.

    Parameters
    ----------
    message : str
        Description of the failure
    document_id : str, optional
        Identifier of the document being fetched
    status_code : int, optional
        HTTP status code returned by the API, if any
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the fetch error with request details."""
        super().__init__(message, original_error=original_error)
        self.document_id = document_id
        self.status_code = status_code


class AuthenticationError(FetchError):
    """Exception raised when credentials are missing, invalid or rejected."""


class DocumentNotFoundError(FetchError):
    """Exception raised when the requested document does not exist."""

    def __init__(self, document_id: str, status_code: int | None = 404, original_error: Exception | None = None):
        """Initialize with the missing document id."""
        super().__init__(
            f"Document not found: {document_id}",
            document_id=document_id,
            status_code=status_code,
            original_error=original_error,
        )


class ConfigurationError(Gdoc2MdError):
    """Exception raised for invalid configuration values.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    setting : str, optional
        Name of the offending setting

    """

    def __init__(self, message: str, setting: str | None = None, original_error: Exception | None = None):
        """Initialize with the offending setting name."""
        super().__init__(message, original_error=original_error)
        self.setting = setting


__all__ = [
    "Gdoc2MdError",
    "InputError",
    "FetchError",
    "AuthenticationError",
    "DocumentNotFoundError",
    "ConfigurationError",
]
