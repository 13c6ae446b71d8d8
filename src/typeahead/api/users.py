"""Users listing endpoint."""

from typeahead.core.schemas import UsersContent, to_users_content

from .client import ApiClient

GET_USERS = "/users"


class UsersApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def get_users(self) -> UsersContent:
        """Fetch ``GET /users`` and normalize it to ``UsersContent``.

        Raises ``ApiError`` on HTTP failure and ``ParseError`` on an
        unexpected payload shape.
        """
        body = await self._client.get(GET_USERS)
        return to_users_content(body)
