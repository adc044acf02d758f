from __future__ import annotations

import json
from pathlib import Path

import pytest

import scraper
from profile_scraper_pkg.config import ScraperConfig
from profile_scraper_pkg.controller import RetryState
from profile_scraper_pkg.errors import ExhaustedRetries
from profile_scraper_pkg.models import AttemptOutcome, ProfileRecord, RetryAttempt

URL = "https://www.linkedin.com/in/jane-doe/"


def _fail_if_called(*args, **kwargs):
    raise AssertionError("scrape_profile must not run")


def test_missing_url_prints_usage_and_exits_1(monkeypatch, capsys) -> None:
    monkeypatch.setattr(scraper, "scrape_profile", _fail_if_called)

    assert scraper.main([], environ={}) == 1
    assert "usage:" in capsys.readouterr().err


@pytest.mark.parametrize(
    "url",
    [
        "https://www.example.com/in/jane",
        "https://www.linkedin.com/company/acme/",
        "ftp://www.linkedin.com/in/jane",
        "not a url",
    ],
)
def test_invalid_url_exits_before_any_browser_work(monkeypatch, url: str) -> None:
    monkeypatch.setattr(scraper, "scrape_profile", _fail_if_called)

    assert scraper.main([url], environ={}) == 1


def test_profile_url_shapes() -> None:
    assert scraper.is_valid_profile_url("https://www.linkedin.com/in/jane-doe/")
    assert scraper.is_valid_profile_url("http://de.linkedin.com/pub/jane-doe/1/2/3")
    assert not scraper.is_valid_profile_url("https://linkedin.com/feed/")


def test_exhausted_retries_exits_nonzero_and_leaves_output_alone(monkeypatch, tmp_path: Path) -> None:
    output = tmp_path / "out.json"
    output.write_text('[{"source_url": "https://old"}]', encoding="utf-8")

    async def always_walled(url, config):
        raise ExhaustedRetries(
            [RetryAttempt(attempt_index=i, outcome=AttemptOutcome.AUTH_WALL_DETECTED) for i in range(3)]
        )

    monkeypatch.setattr(scraper, "scrape_profile", always_walled)

    assert scraper.main([URL], environ={"OUTPUT_FILE": str(output), "MAX_RETRIES": "3"}) == 1
    assert output.read_text(encoding="utf-8") == '[{"source_url": "https://old"}]'


def test_success_appends_and_prints_the_record(monkeypatch, tmp_path: Path, capsys) -> None:
    output = tmp_path / "out.json"
    record = ProfileRecord(source_url=URL, scraped_at="2026-01-01T00:00:00+00:00", name="Jane Doe")

    async def succeed(url, config):
        assert config.output_file == str(output)
        return RetryState(record=record)

    monkeypatch.setattr(scraper, "scrape_profile", succeed)

    assert scraper.main([URL], environ={"OUTPUT_FILE": str(output)}) == 0
    saved = json.loads(output.read_text(encoding="utf-8"))
    assert saved[-1]["name"] == "Jane Doe"
    assert '"name": "Jane Doe"' in capsys.readouterr().out


def test_config_defaults() -> None:
    config = ScraperConfig.from_env({})

    assert config.headless is False
    assert config.max_retries == 3
    assert config.page_timeout_ms == 30000
    assert config.navigation_timeout_ms == 60000
    assert config.output_file == "linkedin_public_profile.json"
    assert config.output_mode == "append"
    assert config.debug is False


def test_config_reads_environment_and_clamps_retries() -> None:
    config = ScraperConfig.from_env(
        {
            "HEADLESS": "true",
            "MAX_RETRIES": "0",
            "TIMEOUT": "abc",
            "NAVIGATION_TIMEOUT": "90000",
            "OUTPUT_FILE": "out.json",
            "OUTPUT_MODE": "SINGLE",
            "DEBUG": "1",
        }
    )

    assert config.headless is True
    assert config.max_retries == 1
    assert config.page_timeout_ms == 30000
    assert config.navigation_timeout_ms == 90000
    assert config.output_file == "out.json"
    assert config.output_mode == "single"
    assert config.debug is True


def test_config_is_immutable() -> None:
    config = ScraperConfig()

    with pytest.raises(Exception):
        config.max_retries = 10


def test_corrupt_output_file_still_saves_and_prints(monkeypatch, tmp_path: Path, capsys) -> None:
    output = tmp_path / "out.json"
    output.write_text('[{"source_url": ', encoding="utf-8")
    record = ProfileRecord(source_url=URL, scraped_at="2026-01-01T00:00:00+00:00", name="Jane Doe")

    async def succeed(url, config):
        return RetryState(record=record)

    monkeypatch.setattr(scraper, "scrape_profile", succeed)

    assert scraper.main([URL], environ={"OUTPUT_FILE": str(output)}) == 0
    assert json.loads(output.read_text(encoding="utf-8"))[0]["name"] == "Jane Doe"
    assert '"name": "Jane Doe"' in capsys.readouterr().out
    assert (tmp_path / "out.json.bak").exists()


def test_exhausted_retries_report_shows_attempt_trail_in_debug(monkeypatch, capsys) -> None:
    async def always_walled(url, config):
        raise ExhaustedRetries(
            [
                RetryAttempt(
                    attempt_index=0,
                    outcome=AttemptOutcome.AUTH_WALL_DETECTED,
                    debug=["loading", "popup_check", "auth_check", "URL:/authwall", "retry"],
                )
            ]
        )

    monkeypatch.setattr(scraper, "scrape_profile", always_walled)

    assert scraper.main([URL], environ={"DEBUG": "true"}) == 1
    assert "loading | popup_check | auth_check | URL:/authwall | retry" in capsys.readouterr().err

    assert scraper.main([URL], environ={}) == 1
    assert "auth_check | URL:/authwall" not in capsys.readouterr().err
