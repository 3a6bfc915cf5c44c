"""On-disk JSON cache for model output, keyed by the hash of the input file."""

import json
from pathlib import Path

from .config import cache_dir
from .utils import file_digest


class ResultCache:
    """
    Stores ``<kind>-<sha256>.json`` files under one directory.

    Entries never go stale on their own: a different input file has a
    different digest. ``invalidate`` removes one entry, ``clear`` all of them.
    """

    def __init__(self, directory: str | Path | None = None):
        self.directory = Path(directory) if directory is not None else cache_dir()

    def key_for(self, source: str | Path) -> str:
        return file_digest(source)

    def _path(self, kind: str, key: str) -> Path:
        return self.directory / f"{kind}-{key}.json"

    def get(self, kind: str, key: str):
        path = self._path(kind, key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            print(f"[cache] Ignoring corrupt cache entry {path.name}")
            return None

    def put(self, kind: str, key: str, value) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(kind, key).write_text(json.dumps(value, indent=2, ensure_ascii=False), encoding="utf-8")

    def invalidate(self, kind: str, key: str) -> None:
        self._path(kind, key).unlink(missing_ok=True)

    def clear(self) -> None:
        if self.directory.exists():
            for path in self.directory.glob("*.json"):
                path.unlink()
