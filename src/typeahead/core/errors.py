"""
Exception hierarchy for key encoding, cached producers and the users API.
"""

from typing import Any, Optional

SOME_ISSUE_WITH_RESPONSE = "Something went wrong! Please try again later."


class TypeaheadError(Exception):
    """Base class for every error raised by this package."""


class EncodingError(TypeaheadError, ValueError):
    """A cache key could not be built from the given parts."""


class ProducerError(TypeaheadError):
    """The producer behind a cache key failed; delivered to every waiter."""

    def __init__(self, key: str, cause: BaseException) -> None:
        super().__init__(f"producer for key=[{key}] failed: {cause!r}")
        self.key = key
        self.cause = cause
        self.__cause__ = cause


class ApiError(TypeaheadError):
    def __init__(
        self,
        status_text: str,
        user_message: str = SOME_ISSUE_WITH_RESPONSE,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(f"{status_text}: {user_message}")
        self.status_text = status_text
        self.user_message = user_message
        self.status_code = status_code


class ParseError(TypeaheadError):
    def __init__(self, error_data: Any) -> None:
        self.error_data = error_data
        self.user_message = "UnExpected error occurred !"
        self.developer_message = "Parsing error !"
        super().__init__(f"{self.developer_message} {error_data!r}")
