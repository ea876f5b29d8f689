"""Tests for the command-line interface."""

import json
import logging
import tempfile
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from board import cli, load_events, load_records
from galleryboard.logger import ROOT_LOGGER_NAME

EVENTS = [
    {
        "title": "夏の記憶",
        "venue": "ギャラリー青空",
        "prefecture": "東京都",
        "start_date": "2025-08-01",
        "end_date": "2025-09-05",
        "announce_url": "https://x.com/a/status/1",
    },
    {
        "title": "光と影",
        "venue": "ニコンサロン",
        "prefecture": "東京都",
        "start_date": "2025-09-01",
        "end_date": "2025-09-14",
        "announce_url": "https://x.com/b/status/2",
    },
    {
        "title": "土の詩",
        "venue": "横浜市民ギャラリー",
        "prefecture": "神奈川県",
        "start_date": "2025-09-20",
        "end_date": "2025-09-25",
        "announce_url": "https://www.instagram.com/p/xyz/",
    },
]


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(temp_dir):
    path = temp_dir / "config.yaml"
    path.write_text(
        "timezone: Asia/Tokyo\n"
        "default_range: upcoming\n"
        "logging:\n"
        "  log_level: WARNING\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def events_file(temp_dir):
    path = temp_dir / "events.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"events": EVENTS}, f, allow_unicode=True)
    return path


def _invoke(runner, config_file, *args):
    return runner.invoke(cli, ["--config", str(config_file), "--log-level", "WARNING", *args])


class TestLoadRecords:
    def test_yaml_mapping(self, events_file):
        assert len(load_records(events_file)) == 3

    def test_json_list(self, temp_dir):
        path = temp_dir / "events.json"
        path.write_text(json.dumps(EVENTS, ensure_ascii=False), encoding="utf-8")
        assert [r["title"] for r in load_records(path)] == ["夏の記憶", "光と影", "土の詩"]

    def test_scalar_rejected(self, temp_dir):
        path = temp_dir / "events.yaml"
        path.write_text("just text\n", encoding="utf-8")
        with pytest.raises(Exception, match="does not contain a list"):
            load_records(path)

    def test_load_events_skips_bad_records(self, temp_dir):
        path = temp_dir / "events.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump([EVENTS[0], {"title": "no dates"}], f, allow_unicode=True)
        assert [e.title for e in load_events(path)] == ["夏の記憶"]


class TestCli:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "filter" in result.output
        assert "check-aliases" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_invalid_config(self, runner, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("timezone: Nowhere/Land\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(path), "buckets", "2025-09-01", "2025-09-02"])
        assert result.exit_code == 1


class TestFilterCommand:
    def test_default_upcoming(self, runner, config_file, events_file):
        result = _invoke(runner, config_file, "filter", str(events_file), "--today", "2025-09-10")
        assert result.exit_code == 0
        assert "Range: upcoming" in result.output
        assert "光と影" in result.output
        assert "夏の記憶" not in result.output
        assert "Total: 2 of 3 events" in result.output

    def test_this_week_major(self, runner, config_file, events_file):
        result = _invoke(
            runner,
            config_file,
            "filter",
            str(events_file),
            "--today",
            "2025-09-10",
            "--range",
            "thisWeek",
            "--venue-type",
            "major",
        )
        assert result.exit_code == 0
        assert "Total: 1 of 3 events" in result.output
        assert "major" in result.output

    def test_unknown_range_falls_back(self, runner, config_file, events_file):
        result = _invoke(
            runner, config_file, "filter", str(events_file), "-t", "2025-09-10", "-r", "lastYear"
        )
        assert result.exit_code == 0
        assert "Range: upcoming" in result.output

    def test_json_output(self, runner, config_file, events_file):
        result = _invoke(
            runner,
            config_file,
            "filter",
            str(events_file),
            "--today",
            "2025-09-10",
            "--range",
            "all",
            "--links",
            "--json",
        )
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert [item["title"] for item in payload] == ["夏の記憶", "光と影", "土の詩"]
        assert payload[1]["venue_type"] == "major"
        assert payload[0]["venue_type"] == "independent"
        assert payload[1]["calendar_url"].startswith("https://calendar.google.com/")

    def test_prefecture(self, runner, config_file, events_file):
        result = _invoke(
            runner, config_file, "filter", str(events_file), "-r", "all", "-p", "神奈川県"
        )
        assert result.exit_code == 0
        assert "Total: 1 of 3 events" in result.output


class TestClassifyCommand:
    def test_major_venue(self, runner, config_file):
        result = _invoke(runner, config_file, "classify", "ニコン サロン 銀座")
        assert result.exit_code == 0
        assert "nikon-salon" in result.output
        assert "major" in result.output

    def test_exhibition_title(self, runner, config_file):
        result = _invoke(
            runner, config_file, "classify", "市民ギャラリー", "--title", "第10回東京カメラ部写展"
        )
        assert "tokyo-camera-club" in result.output
        assert "major" in result.output

    def test_independent(self, runner, config_file):
        result = _invoke(runner, config_file, "classify", "ギャラリー青空")
        assert "independent" in result.output


class TestBucketsCommand:
    def test_buckets(self, runner, config_file):
        result = _invoke(
            runner, config_file, "buckets", "2025-09-08", "2025-09-12", "--today", "2025-09-10"
        )
        assert result.exit_code == 0
        assert "Week:  2025-09-07 - 2025-09-13" in result.output
        assert "✓ thisWeek" in result.output
        assert "✗ next30" in result.output

    def test_end_before_start(self, runner, config_file):
        result = _invoke(runner, config_file, "buckets", "2025-09-12", "2025-09-08")
        assert result.exit_code != 0


class TestValidateCommand:
    def test_all_valid(self, runner, config_file, events_file):
        result = _invoke(runner, config_file, "validate", str(events_file))
        assert result.exit_code == 0
        assert "3 valid, 0 invalid" in result.output

    def test_invalid_records(self, runner, config_file, temp_dir):
        path = temp_dir / "bad.yaml"
        bad = dict(EVENTS[0], end_date="2025-07-01", announce_url="https://example.com/x")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump([EVENTS[1], bad], f, allow_unicode=True)
        result = _invoke(runner, config_file, "validate", str(path))
        assert result.exit_code == 1
        assert "1 valid, 1 invalid" in result.output
        assert "end_date: must be on or after start_date" in result.output
        assert "announce_url: domain is not accepted" in result.output


    def test_non_string_url_reported(self, runner, config_file, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text(
            "- title: 光と影\n"
            "  venue: ニコンサロン\n"
            "  prefecture: 東京都\n"
            "  start_date: 2025-09-01\n"
            "  end_date: 2025-09-14\n"
            "  announce_url: https://x.com/b/status/2\n"
            "  x_url: 123\n",
            encoding="utf-8",
        )
        result = _invoke(runner, config_file, "validate", str(path))
        assert result.exit_code == 1
        assert "x_url: must be an http(s) URL" in result.output


class TestCheckAliasesCommand:
    def test_bundled(self, runner, config_file):
        result = _invoke(runner, config_file, "check-aliases")
        assert result.exit_code == 0
        assert "Alias tables v1.0 are valid" in result.output

    def test_invalid_file(self, runner, config_file, temp_dir):
        path = temp_dir / "aliases.yaml"
        path.write_text("venues: []\n", encoding="utf-8")
        result = _invoke(runner, config_file, "check-aliases", "--aliases", str(path))
        assert result.exit_code == 1
