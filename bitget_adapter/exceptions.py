"""
Typed exception hierarchy for the Bitget adapter.

Every error raised while talking to the venue derives from BitgetError and
carries the raw response body (when one exists) so callers can log or inspect
the exact payload that triggered it.

Hierarchy:
    BitgetError
    ├── ExchangeError                 - venue rejected the request
    │   ├── AuthenticationError
    │   │   └── PermissionDenied
    │   │       └── AccountSuspended
    │   ├── ArgumentsRequired
    │   ├── BadRequest
    │   │   └── BadSymbol
    │   ├── InsufficientFunds
    │   ├── InvalidAddress
    │   ├── InvalidOrder
    │   │   ├── OrderNotFound
    │   │   └── CancelPending
    │   └── NotSupported
    └── NetworkError                  - transient, the caller may retry
        ├── DDoSProtection
        │   └── RateLimitExceeded
        ├── ExchangeNotAvailable
        │   └── OnMaintenance
        ├── InvalidNonce
        └── RequestTimeout

Note:
    Nothing in this package retries. Classification into ExchangeError vs
    NetworkError only tells the caller which failures are worth retrying.
"""

from typing import Any, Optional


class BitgetError(Exception):
    """
    Base class for all adapter errors.

    Attributes:
        message: Human readable description.
        body: Raw response body text, if the error came from a response.
        payload: Decoded response payload, if available.
    """

    def __init__(
        self,
        message: str,
        body: Optional[str] = None,
        payload: Any = None,
    ):
        self.message = message
        self.body = body
        self.payload = payload
        super().__init__(message)


class ExchangeError(BitgetError):
    """The venue signalled a failure that did not match any known code."""


class AuthenticationError(ExchangeError):
    """Missing or invalid credentials, bad signature."""


class PermissionDenied(AuthenticationError):
    """Credentials are valid but not allowed to perform the operation."""


class AccountSuspended(PermissionDenied):
    """Account is locked, frozen or being liquidated."""


class ArgumentsRequired(ExchangeError):
    """A required argument was not supplied by the caller."""


class BadRequest(ExchangeError):
    """Malformed request or invalid parameter."""


class BadSymbol(BadRequest):
    """Unknown, removed or suspended market."""


class InsufficientFunds(ExchangeError):
    """Not enough balance or margin."""


class InvalidAddress(ExchangeError):
    """Withdrawal address missing or not verified."""


class InvalidOrder(ExchangeError):
    """Order parameters rejected by venue-side validation."""


class OrderNotFound(InvalidOrder):
    """The referenced order does not exist."""


class CancelPending(InvalidOrder):
    """The order is already being canceled."""


class NotSupported(ExchangeError):
    """Operation or market type not supported by this venue."""


class NetworkError(BitgetError):
    """Transient failure: transport, throttling or venue outage."""


class DDoSProtection(NetworkError):
    """Request rejected by the venue's traffic protection."""


class RateLimitExceeded(DDoSProtection):
    """Request rate limit hit."""


class ExchangeNotAvailable(NetworkError):
    """Venue is offline, busy or unreachable."""


class OnMaintenance(ExchangeNotAvailable):
    """Venue or contract under scheduled maintenance."""


class InvalidNonce(NetworkError):
    """Request timestamp outside the accepted window."""


class RequestTimeout(NetworkError):
    """Request did not complete in time."""
