"""Configuration for the bookmark index builder and client search engine."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


DEFAULT_EXCLUDED_DIRS: Tuple[str, ...] = (".git", ".hg", ".svn", "node_modules", ".venv")

DEFAULT_QUICK_FILTERS: Tuple[str, ...] = (
    "ai",
    "prompt",
    "api",
    "context",
    "open source",
    "security",
    "inspiration",
)


@dataclass
class BuildConfig:
    """Configuration for the build-time index builder."""
    root_dir: Path = field(default_factory=Path.cwd)
    index_file: str = "search-index.json"
    compact_index_file: str = "search-index.min.json"
    excluded_dirs: Tuple[str, ...] = DEFAULT_EXCLUDED_DIRS

    @property
    def index_path(self) -> Path:
        return self.root_dir / self.index_file

    @property
    def compact_index_path(self) -> Path:
        return self.root_dir / self.compact_index_file

    @classmethod
    def from_env(cls) -> "BuildConfig":
        """Create config from environment variables."""
        root_str = os.environ.get("BOOKMARK_YARD_ROOT")
        return cls(
            root_dir=Path(root_str) if root_str else Path.cwd(),
        )


@dataclass
class ClientConfig:
    """Configuration for the client-side filter and search engine."""
    site_url: str = "http://localhost:4000"
    base_path: str = "/bookmark-yard"
    request_timeout: float = 10.0  # Seconds

    # Input handling
    debounce_ms: int = 150
    min_query_length: int = 2
    max_results: int = 20  # Results rendered in the global search panel

    sidebar_state_key: str = "sidebar-state"
    quick_filters: Tuple[str, ...] = DEFAULT_QUICK_FILTERS

    @property
    def index_path(self) -> str:
        return f"{self.base_path}/search-index.min.json"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create config from environment variables."""
        return cls(
            site_url=os.environ.get("BOOKMARK_YARD_SITE_URL", "http://localhost:4000"),
            base_path=os.environ.get("BOOKMARK_YARD_BASE_PATH", "/bookmark-yard"),
            request_timeout=float(os.environ.get("BOOKMARK_YARD_TIMEOUT", "10.0")),
        )


@dataclass
class Config:
    """Main configuration for Bookmark Yard."""
    build: BuildConfig = field(default_factory=BuildConfig.from_env)
    client: ClientConfig = field(default_factory=ClientConfig.from_env)
    state_db_path: Optional[Path] = None  # None = use default

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        db_path_str = os.environ.get("BOOKMARK_YARD_STATE_DB")
        db_path = Path(db_path_str) if db_path_str else None

        return cls(
            build=BuildConfig.from_env(),
            client=ClientConfig.from_env(),
            state_db_path=db_path,
        )


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global config instance.

    Returns:
        Config loaded from environment
    """
    global _config

    if _config is None:
        _config = Config.from_env()

    return _config
