import json
import os
import shutil
from typing import Any, List

from . import scraper_logging as log
from .config import ScraperConfig
from .models import ProfileRecord


class JsonFileStore:
    """JSON-on-disk persistence: whole-document read and full rewrite."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def read_collection(self, path: str) -> Any:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def write_collection(self, path: str, data: Any) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def backup(self, path: str) -> str:
        target = path + ".bak"
        shutil.copyfile(path, target)
        return target


def load_collection(store, path: str) -> List[Any]:
    """Load the persisted records, coercing a lone object into a list.

    A file that is not valid JSON is copied to `<path>.bak` and the
    collection restarts empty.
    """
    if not store.exists(path):
        return []
    try:
        existing = store.read_collection(path)
    except ValueError as e:
        backup = store.backup(path)
        log.warn(f"{path} is not valid JSON ({e}); copied to {backup}, starting a new list")
        return []
    if not isinstance(existing, list):
        log.warn(f"{path} does not hold a list; wrapping existing content")
        existing = [existing]
    return existing


def append_record(store, path: str, record: ProfileRecord) -> List[Any]:
    """Append one record and rewrite the whole collection.

    No de-duplication by source URL: every successful run adds a record.
    """
    records = load_collection(store, path)
    records.append(record.model_dump(mode="json"))
    store.write_collection(path, records)
    return records


def write_single(store, path: str, record: ProfileRecord) -> dict:
    data = record.model_dump(mode="json")
    store.write_collection(path, data)
    return data


def persist(store, config: ScraperConfig, record: ProfileRecord):
    if config.output_mode == "single":
        result = write_single(store, config.output_file, record)
    else:
        result = append_record(store, config.output_file, record)
    log.success(f"Data saved to: {os.path.abspath(config.output_file)}")
    return result
