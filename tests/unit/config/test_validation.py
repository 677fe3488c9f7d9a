"""Tests for autossl.config.validation."""

from __future__ import annotations

import pytest

from autossl.config.validation import (
    ValidationSeverity,
    _suggest_key,
    validate_config,
)


class TestSuggestKey:
    """Tests for _suggest_key function."""

    def test_suggests_close_match(self) -> None:
        result = _suggest_key("retension", {"cache_dir", "retention"})
        assert result == "retention"

    def test_suggests_typo_fix(self) -> None:
        result = _suggest_key("runtim", {"runtime", "dump"})
        assert result == "runtime"

    def test_returns_none_for_no_match(self) -> None:
        result = _suggest_key("xyz", {"runtime", "dump"})
        assert result is None

    def test_handles_empty_valid_keys(self) -> None:
        result = _suggest_key("test", set())
        assert result is None


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid_config_returns_no_issues(self) -> None:
        data = {
            "runtime": {"cache_dir": "/var/cache/autossl", "retention": 3},
            "dump": {"output": "./out", "checksum": True},
        }
        assert validate_config(data, source="test.yml") == []

    def test_empty_config_is_valid(self) -> None:
        assert validate_config({}, source="test.yml") == []

    def test_warns_on_unknown_top_level_key(self) -> None:
        issues = validate_config({"unknown_key": "value"}, source="test.yml")
        assert len(issues) == 1
        assert "unknown_key" in issues[0].message
        assert issues[0].key == "unknown_key"
        assert issues[0].severity == ValidationSeverity.WARNING

    def test_warns_on_unknown_nested_key_with_suggestion(self) -> None:
        issues = validate_config({"runtime": {"retension": 1}}, source="test.yml")
        assert len(issues) == 1
        assert issues[0].key == "runtime.retension"
        assert issues[0].suggestion == "retention"

    def test_unknown_dump_key(self) -> None:
        issues = validate_config({"dump": {"outptu": "x"}}, source="test.yml")
        assert issues[0].key == "dump.outptu"
        assert issues[0].suggestion == "output"

    def test_warning_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        validate_config({"runtme": {}}, source="cfg.yml")
        assert "did you mean 'runtime'?" in caplog.text

    @pytest.mark.parametrize(
        "data,key",
        [
            ({"runtime": "fast"}, "runtime"),
            ({"runtime": {"retention": "two"}}, "runtime.retention"),
            ({"runtime": {"retention": True}}, "runtime.retention"),
            ({"runtime": {"retention": -1}}, "runtime.retention"),
            ({"runtime": {"cache_dir": 5}}, "runtime.cache_dir"),
            ({"dump": []}, "dump"),
            ({"dump": {"output": 1}}, "dump.output"),
            ({"dump": {"checksum": "yes"}}, "dump.checksum"),
        ],
    )
    def test_type_errors(self, data, key: str) -> None:
        issues = validate_config(data, source="test.yml")
        assert [(i.key, i.severity) for i in issues] == [(key, ValidationSeverity.ERROR)]

    def test_zero_retention_is_valid(self) -> None:
        assert validate_config({"runtime": {"retention": 0}}, source="test.yml") == []

    def test_source_recorded(self) -> None:
        issues = validate_config({"bogus": 1}, source="/etc/autossl.yml")
        assert issues[0].source == "/etc/autossl.yml"
