"""Filesystem store for raw page snapshots.

Saves and loads gzip-compressed HTML grouped by page kind, so converter
fixtures can be captured from live pages and replayed offline::

    base_dir/
      snapshots/
        match/2346065.html.gz
        team/6665.html.gz
        results/stars-1-matchType-All.html.gz
        upcoming/predefinedFilter-top_tier.html.gz
"""

import gzip
import re
from pathlib import Path

from hltv.converters import CONVERTERS

# Keys become file names; anything outside this set is replaced
_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class SnapshotStore:
    """Gzipped HTML save/load/exists filesystem layer.

    Usage::

        store = SnapshotStore("data")
        path = store.save(html, kind="match", key=2346065)
        html = store.load("match", 2346065)
    """

    KINDS = frozenset(CONVERTERS)

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def save(self, html: str, kind: str, key: str | int) -> Path:
        """Save HTML to disk as a gzip-compressed file.

        Returns:
            Path to the written file.

        Raises:
            ValueError: If ``kind`` is not a known page kind or ``key`` is
                empty once sanitized.
        """
        file_path = self._build_path(kind, key)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(gzip.compress(html.encode("utf-8")))
        return file_path

    def load(self, kind: str, key: str | int) -> str:
        """Load a saved snapshot.

        Raises:
            FileNotFoundError: If no snapshot exists for ``kind``/``key``.
            ValueError: If ``kind`` is not a known page kind.
        """
        file_path = self._build_path(kind, key)
        if not file_path.exists():
            raise FileNotFoundError(
                f"No saved {kind} snapshot for key {key!r}: {file_path}"
            )
        return gzip.decompress(file_path.read_bytes()).decode("utf-8")

    def exists(self, kind: str, key: str | int) -> bool:
        return self._build_path(kind, key).exists()

    def list_snapshots(self, kind: str) -> list[Path]:
        """All snapshots of one kind, sorted; empty if none were saved."""
        kind_dir = self._kind_dir(kind)
        if not kind_dir.exists():
            return []
        return sorted(kind_dir.glob("*.html.gz"))

    def _kind_dir(self, kind: str) -> Path:
        if kind not in self.KINDS:
            raise ValueError(
                f"Unknown snapshot kind {kind!r}. Valid kinds: {sorted(self.KINDS)}"
            )
        return self.base_dir / "snapshots" / kind

    def _build_path(self, kind: str, key: str | int) -> Path:
        kind_dir = self._kind_dir(kind)
        safe_key = _UNSAFE_KEY_CHARS.sub("-", str(key)).strip(".-")
        if not safe_key:
            raise ValueError(f"Snapshot key {key!r} is empty once sanitized")
        return kind_dir / f"{safe_key}.html.gz"


def read_html_file(path: str | Path) -> str:
    """Read a saved page, transparently decompressing ``.gz`` files."""
    path = Path(path)
    data = path.read_bytes()
    if path.suffix == ".gz":
        data = gzip.decompress(data)
    return data.decode("utf-8")
