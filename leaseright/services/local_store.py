import json
import threading
from pathlib import Path
from typing import Any

from leaseright.core.config import settings
from leaseright.core.logger import get_logger

logger = get_logger(__name__)

VENDOR_REGISTRATIONS = "vendor_registrations"
COMPANY_REGISTRATIONS = "company_registrations"
LEASE_REQUESTS = "lease_requests"
AVAILABLE_VEHICLES = "available_vehicles"
# token -> {userId, role, userName} for sessions issued by the local login
AUTH_TOKENS = "authToken"

_lock = threading.Lock()


class LocalStore:
    """
    JSON file standing in for the backend when ``USE_BACKEND_API`` is off.

    Every call re-reads the file so several workers pointed at the same path
    see each other's writes.
    """

    def __init__(self, path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.error(f"Local store {self.path} is not valid JSON, starting empty")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        with _lock:
            return self._read().get(key, default)

    def get_list(self, key: str) -> list:
        value = self.get(key, [])
        return value if isinstance(value, list) else []

    def set(self, key: str, value: Any) -> None:
        with _lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def append(self, key: str, item: dict) -> dict:
        with _lock:
            data = self._read()
            items = data.get(key)
            if not isinstance(items, list):
                items = []
            items.append(item)
            data[key] = items
            self._write(data)
        return item

    def update_item(self, key: str, item_id, changes: dict):
        """Merge ``changes`` into the list entry whose ``id`` matches; returns it or None."""
        with _lock:
            data = self._read()
            for item in data.get(key) or []:
                if str(item.get("id")) == str(item_id):
                    item.update(changes)
                    self._write(data)
                    return item
        return None

    def set_entry(self, key: str, entry_key: str, value: Any) -> None:
        with _lock:
            data = self._read()
            entries = data.get(key)
            if not isinstance(entries, dict):
                entries = {}
            entries[entry_key] = value
            data[key] = entries
            self._write(data)

    def pop_entry(self, key: str, entry_key: str):
        with _lock:
            data = self._read()
            entries = data.get(key)
            if not isinstance(entries, dict) or entry_key not in entries:
                return None
            value = entries.pop(entry_key)
            self._write(data)
        return value

    def remove(self, key: str) -> None:
        with _lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)


def get_store() -> LocalStore:
    return LocalStore(settings.LOCAL_STORE_PATH)
