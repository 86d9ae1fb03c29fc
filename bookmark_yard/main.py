"""Command-line entry point that rebuilds the search index."""
import sys

from bookmark_yard.config import get_config
from bookmark_yard.index_builder import build_search_index


def main() -> None:
    """Build ``search-index.json`` and ``search-index.min.json`` under the content root."""
    config = get_config()
    try:
        build_search_index(config.build)
    except OSError as e:
        print(f"Error building search index: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
