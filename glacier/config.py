import logging
import os
from dataclasses import dataclass

from glacier.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    data_dir: str = "data"
    storage: str = "file"  # "file" | "memory"
    log_level: str = "INFO"
    seed_demo: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=os.environ.get("GLACIER_DATA_DIR", "data"),
            storage=os.environ.get("GLACIER_STORAGE", "file").lower(),
            log_level=os.environ.get("GLACIER_LOG_LEVEL", "INFO"),
            seed_demo=_flag(os.environ.get("GLACIER_SEED_DEMO", "")),
            host=os.environ.get("GLACIER_HOST", "127.0.0.1"),
            port=int(os.environ.get("GLACIER_PORT", 8000)),
        )

    def open_storage(self) -> KeyValueStorage:
        if self.storage == "memory":
            return InMemoryStorage()
        if self.storage == "file":
            return JsonFileStorage(self.data_dir)
        raise ValueError(f"Unknown storage backend '{self.storage}'")


def configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)
