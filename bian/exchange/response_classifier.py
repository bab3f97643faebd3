"""
HTTP status classification and response body decoding.

The status gate always runs before any decode attempt, so an error body
is never mistaken for a malformed success payload. The same rules apply to
every market segment.
"""

from typing import Optional, Type, TypeVar, Union

import msgspec

from .exceptions import (
    ApiError,
    Banned,
    ClientSideError,
    DecodeError,
    FreqWarning,
    ServerSideError,
    Unknown,
    WafLimit,
)

T = TypeVar("T")


def classify_status(status_code: int, body: str = "") -> Optional[ApiError]:
    """
    Map a status code to an error, or None for success.

    Precedence:
        < 300        success
        403          WafLimit (body discarded)
        429          FreqWarning (body discarded)
        418          Banned (body discarded)
        >= 500       ServerSideError(body)
        400..499     ClientSideError(body)
        other >= 300 Unknown(body), redirects are not followed

    Args:
        status_code: HTTP status code
        body: Raw response text

    Returns:
        The error to raise, or None if the call succeeded
    """
    if status_code < 300:
        return None
    if status_code == 403:
        return WafLimit()
    if status_code == 429:
        return FreqWarning()
    if status_code == 418:
        return Banned()
    if status_code >= 500:
        return ServerSideError(body, status_code)
    if status_code >= 400:
        return ClientSideError(body, status_code)
    return Unknown(body, status_code)


def check_response(status_code: int, body: str = "") -> None:
    """Raise the classified error for a non-success status."""
    error = classify_status(status_code, body)
    if error is not None:
        raise error


def decode_body(body: Union[str, bytes], response_type: Type[T]) -> T:
    """
    Decode a JSON body into ``response_type``.

    String-encoded numbers (Binance sends most prices as strings) are
    accepted wherever a numeric type is declared.

    Raises:
        DecodeError: If the body is not JSON or does not fit the type
    """
    try:
        return msgspec.json.decode(body, type=response_type, strict=False)
    except (msgspec.ValidationError, msgspec.DecodeError) as e:
        raise DecodeError(str(e)) from e

