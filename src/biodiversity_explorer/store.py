"""JSON snapshots with freshness metadata.

Flows persist their outputs here, in two tiers:
  - reference/: Slow-changing provider data, 90-day TTL (region list)
  - derived/: Computed outputs, rewritten every run (place verification reports)

Every file is wrapped in a metadata envelope with ``source``,
``fetched_at`` and ``valid_until`` so a flow can skip work whose output is
still fresh. The interactive datasources never read from the store.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 — used at runtime, not just annotations
from typing import Any


class DataStore:
    """Reads and writes enveloped JSON files under a base directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.reference = base_dir / "reference"
        self.derived = base_dir / "derived"

    def read(self, path: Path) -> Any | None:
        """Return the ``data`` payload of a stored file, or None if missing."""
        envelope = self.read_raw(path)
        if envelope is None:
            return None
        return envelope.get("data")

    def read_raw(self, path: Path) -> dict[str, Any] | None:
        """Return the full envelope (meta + data), or None if missing."""
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open() as f:
            result: dict[str, Any] = json.load(f)
        return result

    def write(
        self,
        path: Path,
        data: Any,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Write ``data`` wrapped in a metadata envelope.

        Args:
            path: Path relative to the base (e.g. ``reference/regions.json``).
            data: JSON-serializable payload.
            source: Provider identifier (e.g. ``"gbif.org"``).
            valid_until: Expiry timestamp. None means always stale.
            **params: Extra metadata fields (country code, query params...).

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)

        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        if valid_until is not None:
            meta["valid_until"] = valid_until.isoformat()
        meta.update(params)

        with full.open("w") as f:
            json.dump({"meta": meta, "data": data}, f, indent=2)
        return full

    def is_fresh(self, path: Path) -> bool:
        """True if the file exists and its ``valid_until`` is in the future."""
        envelope = self.read_raw(path)
        if envelope is None:
            return False
        valid_until = envelope.get("meta", {}).get("valid_until")
        if valid_until is None:
            return False
        expiry = datetime.fromisoformat(valid_until)
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return datetime.now(UTC) < expiry

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full
