"""
Tests for a full tracker run with fake fetch and notify.
"""

import json

import pytest

from codetracker.config import MODE_SECTION, Config, ConfigError, SourceConfig
from codetracker.pipeline import collect_codes, current_timestamp, header_stamp, run
from codetracker.store import load_codes, save_codes, save_list

NOW = "2025-02-01T12:00:00+00:00"
T0 = "2025-01-01T00:00:00+00:00"

PAGE_A = "<ul><li><strong>FOO</strong> - 50 gems</li><li>BAR: 1 chest</li></ul>"
PAGE_B = """
<h2>Working codes</h2><ul><li>lom.2025</li></ul>
<h2>Expired codes</h2><ul><li>oldcode</li></ul>
"""

A_ONLY = {"a.example": PAGE_A}
BOTH_PAGES = {"a.example": PAGE_A, "b.example": PAGE_B}


class Recorder:
    def __init__(self, result=True):
        self.messages = []
        self.result = result

    def __call__(self, message):
        self.messages.append(message)
        return self.result


@pytest.fixture
def config(tmp_path):
    return Config(
        codes_path=tmp_path / "codes.json",
        manual_path=tmp_path / "manual.json",
        blocked_path=tmp_path / "blocked.json",
        sources=[
            SourceConfig(url="https://a.example/codes"),
            SourceConfig(url="https://b.example/guide", mode=MODE_SECTION),
        ],
    )


def pages(by_host):
    def fetch(url):
        for host, markup in by_host.items():
            if host in url:
                return markup
        return None
    return fetch


class TestCollect:
    """Source loop."""

    def test_aggregate_and_failures(self, config):
        aggregate, failed = collect_codes(config.sources, pages(A_ONLY))
        assert aggregate == {"FOO": {"https://a.example/codes"},
                             "BAR": {"https://a.example/codes"}}
        assert failed == ["https://b.example/guide"]


class TestRun:
    """End-to-end runs."""

    def test_first_run(self, config):
        notify = Recorder()
        result = run(config, fetch=pages(BOTH_PAGES), notify=notify, now=NOW)

        assert result.added == ["BAR", "FOO", "lom.2025"]
        assert result.found == 3
        assert result.notified
        assert notify.messages and notify.messages[0].endswith("BAR, FOO, lom.2025")
        assert "_(2025-02-01 12:00)_" in notify.messages[0].splitlines()[0]

        stored = load_codes(config.codes_path)
        assert stored["lom.2025"] == {
            "code": "lom.2025",
            "sources": ["https://b.example/guide"],
            "first_seen": NOW,
            "last_seen": NOW,
        }

    def test_second_run_quiet(self, config):
        fetch = pages(BOTH_PAGES)
        run(config, fetch=fetch, notify=Recorder(), now=T0)
        notify = Recorder()
        result = run(config, fetch=fetch, notify=notify, now=NOW)

        assert result.added == []
        assert notify.messages == []
        stored = load_codes(config.codes_path)
        assert stored["FOO"]["first_seen"] == T0
        assert stored["FOO"]["last_seen"] == NOW

    def test_existing_code_keeps_history(self, config):
        save_codes(config.codes_path, {
            "FOO": {"code": "FOO", "sources": ["siteA"], "first_seen": T0, "last_seen": T0},
        })
        result = run(config, fetch=pages(A_ONLY), notify=Recorder(), now=NOW)

        assert result.added == ["BAR"]
        foo = load_codes(config.codes_path)["FOO"]
        assert foo["first_seen"] == T0
        assert foo["last_seen"] == NOW
        assert foo["sources"] == ["https://a.example/codes", "siteA"]

    def test_manual_and_blocked(self, config):
        save_list(config.manual_path, ["GIFT2025"])
        save_list(config.blocked_path, ["BAR"])
        result = run(config, fetch=pages(A_ONLY), notify=Recorder(), now=NOW)

        assert result.added == ["FOO", "GIFT2025"]
        assert "BAR" not in load_codes(config.codes_path)

    def test_notify_failure_does_not_fail_run(self, config):
        result = run(config, fetch=pages(A_ONLY), notify=Recorder(result=False), now=NOW)
        assert result.added == ["BAR", "FOO"]
        assert not result.notified
        assert set(load_codes(config.codes_path)) == {"BAR", "FOO"}

    def test_malformed_store_treated_as_empty(self, config):
        config.codes_path.write_text("garbage", encoding="utf-8")
        result = run(config, fetch=pages(A_ONLY), notify=Recorder(), now=NOW)
        assert result.added == ["BAR", "FOO"]
        assert json.loads(config.codes_path.read_text(encoding="utf-8"))


class TestMixedModes:
    """Document and section sources agree on one record per code."""

    def test_same_code_different_case(self, config):
        fetch = pages({
            "a.example": "<ul><li>LOM2025 - gems</li></ul>",
            "b.example": "<h2>Working codes</h2><ul><li>LOM2025</li></ul>",
        })
        notify = Recorder()
        result = run(config, fetch=fetch, notify=notify, now=NOW)

        assert result.added == ["LOM2025"]
        assert result.found == 1
        stored = load_codes(config.codes_path)
        assert list(stored) == ["LOM2025"]
        assert stored["LOM2025"]["sources"] == ["https://a.example/codes",
                                                "https://b.example/guide"]
        assert notify.messages[0].endswith("LOM2025")


class TestExpiryPolicy:
    """Expiry needs an authoritative config and a complete run."""

    def _seed(self, config):
        save_codes(config.codes_path, {
            "GONE": {"code": "GONE", "sources": ["https://a.example/codes"],
                     "first_seen": T0, "last_seen": T0},
        })

    def test_not_authoritative_keeps_codes(self, config):
        self._seed(config)
        result = run(config, fetch=pages(BOTH_PAGES), notify=Recorder(), now=NOW)
        assert result.removed == []
        assert "GONE" in load_codes(config.codes_path)

    def test_authoritative_expires(self, config):
        self._seed(config)
        config.authoritative = True
        result = run(config, fetch=pages(BOTH_PAGES), notify=Recorder(), now=NOW)
        assert result.removed == ["GONE"]
        assert "GONE" not in load_codes(config.codes_path)

    def test_failed_source_skips_expiry(self, config):
        self._seed(config)
        config.authoritative = True
        result = run(config, fetch=pages(A_ONLY), notify=Recorder(), now=NOW)
        assert result.failed == ["https://b.example/guide"]
        assert result.removed == []


class TestClock:
    """Run timestamps."""

    def test_timestamp_has_offset(self):
        assert current_timestamp("UTC").endswith("+00:00")

    def test_header_stamp_in_run_zone(self):
        assert header_stamp("2025-02-01T13:05:00+01:00") == "2025-02-01 13:05"

    def test_unknown_zone(self):
        with pytest.raises(ConfigError):
            current_timestamp("Mars/Olympus_Mons")
