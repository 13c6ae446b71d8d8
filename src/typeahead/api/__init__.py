"""HTTP access to the listing API."""

from .client import ApiClient
from .users import UsersApi

__all__ = ["ApiClient", "UsersApi"]
