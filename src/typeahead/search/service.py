"""
Typeahead search box: debounced input, cached users listing, filtered suggestions.
"""

from typing import Awaitable, Callable, Iterable, List, Optional

from typeahead.config.settings import settings
from typeahead.core.cache import TTL, AsyncMemoCache
from typeahead.core.errors import ProducerError
from typeahead.core.keys import encode
from typeahead.core.logging import get_logger
from typeahead.core.schemas import User, UsersContent

from .debounce import Debouncer

logger = get_logger(__name__)

USERS_KEY = encode(["GET", "USERS"])


def filter_suggestions(users: Iterable[User], query: str) -> List[User]:
    """Users whose name contains ``query``, ignoring case. Blank query -> []."""
    needle = (query or "").strip().lower()
    if not needle:
        return []
    return [user for user in users if needle in user.name.lower()]


class SearchBox:
    """Headless search box.

    ``type`` feeds keystrokes through the debouncer; once input pauses the
    users listing is read through the cache and the filtered list is handed
    to ``on_suggestions``. Each box owns its own cache namespace unless one
    is passed in.
    """

    def __init__(
        self,
        fetch_users: Callable[[], Awaitable[UsersContent]],
        on_suggestions: Optional[Callable[[List[User]], None]] = None,
        cache: Optional[AsyncMemoCache] = None,
        ttl: Optional[TTL] = None,
        delay: Optional[float] = None,
    ) -> None:
        self.text = ""
        self.suggestions: List[User] = []
        self.cache = cache if cache is not None else AsyncMemoCache(name="users")
        self.ttl = ttl if ttl is not None else settings.search.cache_ttl
        self._fetch_users = fetch_users
        self._on_suggestions = on_suggestions
        self._debouncer = Debouncer(
            self.search, delay if delay is not None else settings.search.debounce_delay
        )

    def type(self, text: str) -> None:
        self.text = text
        self._debouncer.push(text)

    def select(self, value: str) -> None:
        """Put a chosen suggestion into the input without searching again."""
        self._debouncer.cancel()
        self.text = value

    async def settle(self) -> List[User]:
        """Wait for the pending debounced search and return the suggestions."""
        await self._debouncer.flush()
        return self.suggestions

    async def search(self, query: str) -> List[User]:
        if not query.strip():
            self._publish([])
            return self.suggestions
        try:
            content = await self.cache.get(USERS_KEY, self.ttl, self._fetch_users)
        except ProducerError as exc:
            logger.warning(f"Users lookup failed for query={query!r}: {exc.cause!r}")
            self._publish([])
        else:
            self._publish(filter_suggestions(content.data, query))
        return self.suggestions

    def _publish(self, suggestions: List[User]) -> None:
        self.suggestions = suggestions
        if self._on_suggestions is not None:
            self._on_suggestions(suggestions)
