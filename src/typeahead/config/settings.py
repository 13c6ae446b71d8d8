"""Configuration settings for the typeahead service."""
import os
from dataclasses import dataclass

# Try to load .env manually if not loaded
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

@dataclass
class ApiSettings:
    base_url: str = os.getenv("TYPEAHEAD_API_URL", "https://jsonplaceholder.typicode.com/")
    timeout: float = float(os.getenv("TYPEAHEAD_API_TIMEOUT", 5.0))

@dataclass
class SearchSettings:
    cache_ttl: float = float(os.getenv("TYPEAHEAD_CACHE_TTL", 10.0))
    debounce_delay: float = float(os.getenv("TYPEAHEAD_DEBOUNCE_DELAY", 0.5))

class Settings:
    api = ApiSettings()
    search = SearchSettings()
    log_level: str = os.getenv("TYPEAHEAD_LOG_LEVEL", "INFO")

settings = Settings()
