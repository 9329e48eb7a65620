"""
Exception taxonomy for wallet scans.

Every failure that can end a scan is a ScanError subclass carrying a fixed,
human-readable message. Failures of the metadata and transaction lookups
never reach this layer; the client absorbs them where they happen.
"""

from enum import Enum
from typing import Optional


UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class ScanError(Exception):
    """Base class for errors that end a wallet scan."""

    user_message = UNEXPECTED_ERROR_MESSAGE


class ValidationReason(Enum):
    """Why a candidate wallet address was rejected."""

    EMPTY = "Please enter a wallet address"
    BAD_LENGTH = "Wallet address must be between 32 and 44 characters long"
    BAD_ALPHABET = "Wallet address contains invalid characters"


class AddressValidationError(ScanError):
    """Raised when a wallet address fails syntactic validation."""

    def __init__(self, reason: ValidationReason):
        super().__init__(reason.value)
        self.reason = reason

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return self.reason.value


class ConfigurationError(ScanError):
    """Raised when the scanner configuration is unusable."""

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return str(self)


class ScanInProgressError(ScanError):
    """Raised when a scan is requested while another one is still running."""

    user_message = "A scan is already in progress"


class UnexpectedScanError(ScanError):
    """Wraps an exception the scanner did not anticipate."""


class HeliusAPIError(ScanError):
    """Exception raised for a failed balance lookup."""

    user_message = "Unable to connect to Solana network. Please try again."

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class WalletNotFoundError(HeliusAPIError):
    """The indexer returned 404 for the wallet."""

    user_message = "Wallet address not found or has no tokens"


class InvalidAddressError(HeliusAPIError):
    """The indexer rejected the wallet address (HTTP 400)."""

    user_message = "Invalid wallet address format"


class InvalidApiKeyError(HeliusAPIError):
    """The indexer rejected the API key (HTTP 401)."""

    user_message = "Invalid API key. Please check your configuration."


class HeliusNetworkError(HeliusAPIError):
    """The indexer could not be reached at all."""

    user_message = "Network error. Please check your connection."


def user_message_for(error: BaseException) -> str:
    """
    Map any exception to the single sentence shown to the user.

    Args:
        error: The exception that ended the scan

    Returns:
        A fixed human-readable message; never the raw technical error
    """
    if isinstance(error, ScanError):
        return error.user_message
    return UNEXPECTED_ERROR_MESSAGE
