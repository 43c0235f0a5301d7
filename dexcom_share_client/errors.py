"""Exception types raised by the Dexcom Share client"""

from typing import Optional


class ShareError(Exception):
    """Base class for every error raised by the client"""


class ShareTransportError(ShareError):
    """Network failure or unexpected HTTP status reaching the Share service"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ShareDecodeError(ShareError):
    """Response body is not JSON or does not have the expected shape"""


class ShareVendorError(ShareError):
    """The Share service answered with an error payload"""

    def __init__(self, message: str, code: Optional[str] = None, vendor_message: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.vendor_message = vendor_message


class ShareAuthenticationError(ShareVendorError):
    """Account name, password or application id rejected by the Share service"""


class ShareSessionError(ShareVendorError):
    """Session id rejected on a read call"""


class TimestampParseError(ShareError, ValueError):
    """Malformed `Date(<millis>)` timestamp"""
