from __future__ import annotations

import json
from pathlib import Path

from profile_scraper_pkg.config import ScraperConfig
from profile_scraper_pkg.models import ExperienceEntry, ProfileRecord
from profile_scraper_pkg.storage import JsonFileStore, append_record, load_collection, persist


def _record(url: str = "https://www.linkedin.com/in/jane-doe/") -> ProfileRecord:
    return ProfileRecord(
        source_url=url,
        scraped_at="2026-01-01T00:00:00+00:00",
        name="Jane Doe",
        headline="",
        experience=[ExperienceEntry(role="Engineer", company="Acme")],
        skills=["Distributed systems and databases"],
        retry_count=1,
        html_length=5000,
    )


def test_single_object_file_is_coerced_into_a_list(tmp_path: Path) -> None:
    path = tmp_path / "profile.json"
    path.write_text(json.dumps({"source_url": "https://old"}), encoding="utf-8")

    records = append_record(JsonFileStore(), str(path), _record())

    assert len(records) == 2
    assert records[0] == {"source_url": "https://old"}
    assert json.loads(path.read_text(encoding="utf-8"))[1]["name"] == "Jane Doe"


def test_append_round_trip_grows_by_one(tmp_path: Path) -> None:
    path = str(tmp_path / "profile.json")
    store = JsonFileStore()
    append_record(store, path, _record("https://www.linkedin.com/in/a/"))
    before = load_collection(store, path)

    record = _record("https://www.linkedin.com/in/a/")
    append_record(store, path, record)
    after = load_collection(store, path)

    assert len(after) == len(before) + 1
    assert ProfileRecord(**after[-1]) == record


def test_missing_file_starts_a_new_collection(tmp_path: Path) -> None:
    path = tmp_path / "new.json"

    append_record(JsonFileStore(), str(path), _record())

    data = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(data, list) and len(data) == 1
    assert data[0]["headline"] is None
    assert data[0]["experience"] == [
        {"role": "Engineer", "company": "Acme", "duration": None, "total_time": None}
    ]


def test_single_mode_writes_just_the_record(tmp_path: Path) -> None:
    path = tmp_path / "one.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    config = ScraperConfig(output_file=str(path), output_mode="single")

    persist(JsonFileStore(), config, _record())

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["source_url"] == "https://www.linkedin.com/in/jane-doe/"


def test_written_file_is_indented_utf8(tmp_path: Path) -> None:
    path = tmp_path / "profile.json"
    record = _record().model_copy(update={"name": "Zoë Ångström"})

    append_record(JsonFileStore(), str(path), record)

    text = path.read_text(encoding="utf-8")
    assert "Zoë Ångström" in text
    assert text.startswith("[\n  {")


def test_corrupt_file_is_backed_up_and_replaced(tmp_path: Path) -> None:
    path = tmp_path / "profile.json"
    path.write_text('[{"source_url": ', encoding="utf-8")

    records = append_record(JsonFileStore(), str(path), _record())

    assert len(records) == 1
    assert json.loads(path.read_text(encoding="utf-8"))[0]["name"] == "Jane Doe"
    assert (tmp_path / "profile.json.bak").read_text(encoding="utf-8") == '[{"source_url": '
