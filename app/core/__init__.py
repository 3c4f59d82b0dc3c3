"""Core infrastructure: settings, security, logging, exceptions."""

from .config import settings
from .exceptions import (
    AppException,
    AuthenticationError,
    BadRequestError,
    NoContentError,
    NotFoundError,
)
from .security import (
    TokenData,
    create_access_token,
    decode_access_token,
)
