"""Build the site-wide search index from generated HTML pages."""
import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from dateutil.parser import ParserError, parse as parse_date

from bookmark_yard.config import DEFAULT_EXCLUDED_DIRS, BuildConfig
from bookmark_yard.extractor import extract_bookmarks, relative_page_path
from bookmark_yard.models import BookmarkRecord


# Missing date components are filled from here so parsing never depends on today's date.
_DATE_DEFAULT = datetime(1970, 1, 1)
# A date whose year changes with the default had no year of its own.
_YEAR_CHECK_DEFAULT = datetime(1971, 1, 1)


def find_html_files(
    directory: Path,
    excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
    files: Optional[List[Path]] = None,
) -> List[Path]:
    """Recursively find all HTML files under a directory.

    Entries are visited in name order so repeated builds see the same sequence.

    Args:
        directory: Directory to scan
        excluded_dirs: Directory names that are never descended into
        files: List to accumulate paths into

    Returns:
        List of HTML file paths

    Raises:
        OSError: If a directory or entry cannot be read
    """
    if files is None:
        files = []
    excluded = set(excluded_dirs)

    for name in sorted(os.listdir(directory)):
        full_path = directory / name
        if full_path.is_dir():
            if name not in excluded:
                find_html_files(full_path, excluded, files)
        elif name.endswith(".html"):
            files.append(full_path)

    return files


def collect_bookmarks(files: Sequence[Path], root: Path) -> List[BookmarkRecord]:
    """Extract bookmarks from every file, keeping the first record per URL.

    Bytes that are not valid UTF-8 are replaced rather than failing the build.

    Args:
        files: HTML files in traversal order
        root: Content root used to compute each record's page path

    Returns:
        Deduplicated records in encounter order

    Raises:
        OSError: If a file cannot be read
    """
    bookmarks: List[BookmarkRecord] = []
    seen = set()

    for path in files:
        html = path.read_text(encoding="utf-8", errors="replace")
        for bookmark in extract_bookmarks(html, relative_page_path(path, root)):
            if bookmark.url not in seen:
                seen.add(bookmark.url)
                bookmarks.append(bookmark)

    return bookmarks


def parse_bookmark_date(value: str) -> Optional[datetime]:
    """Parse a bookmark date, returning None when it isn't a calendar date.

    Values without a year, such as ``"May"`` or ``"Sun"``, are not dates.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = parse_date(value, default=_DATE_DEFAULT)
        if parse_date(value, default=_YEAR_CHECK_DEFAULT).year != parsed.year:
            return None
    except (ParserError, ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def sort_by_date(bookmarks: Sequence[BookmarkRecord]) -> List[BookmarkRecord]:
    """Order bookmarks newest first.

    Records with equal dates keep their encounter order. Records whose date
    is empty or unparsable go last, also in encounter order.
    """
    dated: List[Tuple[datetime, BookmarkRecord]] = []
    undated: List[BookmarkRecord] = []

    for bookmark in bookmarks:
        parsed = parse_bookmark_date(bookmark.date)
        if parsed is None:
            undated.append(bookmark)
        else:
            dated.append((parsed, bookmark))

    # list.sort is stable, also with reverse=True
    dated.sort(key=lambda item: item[0], reverse=True)

    return [bookmark for _, bookmark in dated] + undated


def build_index(config: BuildConfig) -> List[BookmarkRecord]:
    """Scan the content root and return the ordered, deduplicated index.

    Raises:
        OSError: If any directory or file under the root cannot be read
    """
    root = config.root_dir
    files = find_html_files(root, config.excluded_dirs)
    print(f"Found {len(files)} HTML files")

    bookmarks = collect_bookmarks(files, root)
    print(f"Extracted {len(bookmarks)} unique bookmarks")

    return sort_by_date(bookmarks)


def serialize_index(bookmarks: Sequence[BookmarkRecord], pretty: bool) -> str:
    """Serialize records to a JSON array, pretty-printed or compact."""
    data = [bookmark.to_dict() for bookmark in bookmarks]
    if pretty:
        return json.dumps(data, indent=2, ensure_ascii=False)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def _write_temp(target: Path, text: str) -> Path:
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)
    return Path(tmp_name)


def write_index(bookmarks: Sequence[BookmarkRecord], index_path: Path, compact_path: Path) -> None:
    """Write the pretty and compact index files.

    Both files are written to temporary siblings first and only moved into
    place once both have been written.

    Args:
        bookmarks: Ordered records
        index_path: Destination of the pretty-printed index
        compact_path: Destination of the compact index
    """
    pretty_text = serialize_index(bookmarks, pretty=True)
    compact_text = serialize_index(bookmarks, pretty=False)

    written: List[Tuple[Path, Path]] = []
    try:
        written.append((_write_temp(index_path, pretty_text), index_path))
        written.append((_write_temp(compact_path, compact_text), compact_path))
    except OSError:
        for tmp_path, _ in written:
            tmp_path.unlink(missing_ok=True)
        raise

    for tmp_path, target in written:
        os.replace(tmp_path, target)


def build_search_index(config: BuildConfig) -> List[BookmarkRecord]:
    """Run a full build: scan, extract, sort and write both index files.

    Returns:
        The records that were written
    """
    print("Building search index...")

    bookmarks = build_index(config)

    write_index(bookmarks, config.index_path, config.compact_index_path)
    print(f"Written to {config.index_path}")
    print(f"Written minified to {config.compact_index_path}")

    return bookmarks
