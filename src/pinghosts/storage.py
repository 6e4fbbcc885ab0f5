from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from pinghosts.models import AccessoryCache, AccessoryRecord

ACCESSORIES_FILE = "accessories.json"


class Database:
    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._accessories_path = data_dir / ACCESSORIES_FILE

    @property
    def path(self) -> Path:
        return self._data_dir

    @property
    def accessories_path(self) -> Path:
        return self._accessories_path

    def ensure_dirs(self) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)

    def load_accessories(self) -> dict[str, AccessoryRecord]:
        if not self._accessories_path.exists():
            return {}

        try:
            with self._accessories_path.open("r") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(
                f"Invalid JSON in accessory cache: {self._accessories_path}\n{exc}"
            ) from exc

        try:
            cache = AccessoryCache.model_validate(data or {})
        except ValidationError as exc:
            raise ValueError(
                f"Invalid accessory cache: {self._accessories_path}\n{exc}"
            ) from exc
        return cache.accessories

    def save_accessories(self, records: dict[str, AccessoryRecord]) -> None:
        self.ensure_dirs()
        cache = AccessoryCache(accessories=records)
        with self._accessories_path.open("w") as handle:
            json.dump(cache.model_dump(mode="json", by_alias=True), handle, indent=2)

    def init(self, force: bool = False) -> bool:
        """Create the data directory and an empty cache. Returns True if created."""
        existed = self._accessories_path.exists()
        self.ensure_dirs()
        if force or not existed:
            self.save_accessories({})
            return True
        return False
