# shopfront/exceptions.py
from typing import Optional


class ShopfrontError(Exception):
    """Base class for all recoverable client errors"""


class ValidationError(ShopfrontError):
    """Local precondition failed; no request was sent"""


class UploadError(ShopfrontError):
    """Payment proof image could not be uploaded"""


class SubmissionError(ShopfrontError):
    """Verify-and-create-order request failed or was declined"""


class FetchError(ShopfrontError):
    """Catalog, order or report data could not be fetched"""


class ChannelError(ShopfrontError):
    """Push channel dropped or delivered an unusable frame"""


class AuthError(ShopfrontError):
    """Bearer token was rejected by the backend"""


class ApiError(ShopfrontError):
    """HTTP or transport failure talking to the backend"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
