"""Tests for protected branch settings and their layered loading."""

import pytest

from gitedit.settings import (
    DEFAULT_PROTECTED_PATTERNS, ENABLED_KEY, PATTERNS_KEY, ProtectedBranchSettings,
    load_protected_settings, save_protected_settings,
)
from tests.fakes import FakeQSettings


class TestIsBranchProtected:
    def test_defaults(self):
        settings = ProtectedBranchSettings()
        assert settings.is_branch_protected("main")
        assert settings.is_branch_protected("master")
        assert not settings.is_branch_protected("feature/x")

    def test_glob_patterns(self):
        settings = ProtectedBranchSettings(patterns=["release/*", "prod"])
        assert settings.is_branch_protected("release/1.0")
        assert settings.is_branch_protected("prod")
        assert not settings.is_branch_protected("production")
        assert not settings.is_branch_protected("origin/release/1.0")

    def test_matching_is_case_sensitive(self):
        assert not ProtectedBranchSettings(patterns=["main"]).is_branch_protected("Main")

    def test_disabled(self):
        assert not ProtectedBranchSettings(patterns=["*"], enabled=False).is_branch_protected("main")


class TestLoadProtectedSettings:
    def test_defaults_without_sources(self):
        settings = load_protected_settings(env={})
        assert settings.patterns == DEFAULT_PROTECTED_PATTERNS
        assert settings.enabled

    def test_qsettings_override_defaults(self):
        qsettings = FakeQSettings({PATTERNS_KEY: "release/*, hotfix/*", ENABLED_KEY: "false"})
        settings = load_protected_settings(qsettings, env={})
        assert settings.patterns == ["release/*", "hotfix/*"]
        assert not settings.enabled

    def test_qsettings_list_value(self):
        qsettings = FakeQSettings({PATTERNS_KEY: ["main", "release/*"]})
        assert load_protected_settings(qsettings, env={}).patterns == ["main", "release/*"]

    def test_env_overrides_qsettings(self):
        qsettings = FakeQSettings({PATTERNS_KEY: "release/*", ENABLED_KEY: "false"})
        env = {"GIT_PROTECTED_BRANCHES_PATTERNS": "prod,stable", "GIT_PROTECTED_BRANCHES_ENABLED": "yes"}
        settings = load_protected_settings(qsettings, env=env)
        assert settings.patterns == ["prod", "stable"]
        assert settings.enabled

    def test_blank_env_patterns_are_ignored(self):
        settings = load_protected_settings(env={"GIT_PROTECTED_BRANCHES_PATTERNS": " , "})
        assert settings.patterns == DEFAULT_PROTECTED_PATTERNS

    def test_save_round_trip(self):
        qsettings = FakeQSettings()
        save_protected_settings(ProtectedBranchSettings(patterns=["release/*"], enabled=False), qsettings)
        assert qsettings.synced
        loaded = load_protected_settings(qsettings, env={})
        assert loaded.patterns == ["release/*"]
        assert not loaded.enabled


def test_real_qsettings_ini_file(tmp_path):
    QtCore = pytest.importorskip("PySide6.QtCore")
    path = str(tmp_path / "gitedit.ini")
    qsettings = QtCore.QSettings(path, QtCore.QSettings.IniFormat)
    save_protected_settings(ProtectedBranchSettings(patterns=["release/*", "main"]), qsettings)

    reopened = QtCore.QSettings(path, QtCore.QSettings.IniFormat)
    loaded = load_protected_settings(reopened, env={})
    assert loaded.patterns == ["release/*", "main"]
    assert loaded.enabled
