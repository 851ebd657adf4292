"""Protected branch configuration.

Patterns hold branch names without a remote qualifier (``main``,
``release/*``) and are matched shell-style. Resolution order, later wins:
built-in defaults, persisted QSettings values, environment variables.
"""

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)

DEFAULT_PROTECTED_PATTERNS: List[str] = ["main", "master"]

PATTERNS_KEY = "protected_branches/patterns"
ENABLED_KEY = "protected_branches/enabled"

ENV_PATTERNS = "GIT_PROTECTED_BRANCHES_PATTERNS"
ENV_ENABLED = "GIT_PROTECTED_BRANCHES_ENABLED"


def _parse_patterns(value):
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(p).strip() for p in value if str(p).strip()]


def _parse_bool(value):
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass
class ProtectedBranchSettings:
    """Protected branch patterns for a repository session."""

    patterns: List[str] = field(
        default_factory=lambda: list(DEFAULT_PROTECTED_PATTERNS)
    )
    enabled: bool = True

    def is_branch_protected(self, branch_name):
        if not self.enabled:
            return False
        return any(fnmatch.fnmatchcase(branch_name, p) for p in self.patterns)


def load_protected_settings(qsettings=None, env=None):
    """Build ProtectedBranchSettings from defaults, QSettings and env vars.

    Args:
        qsettings: Optional QSettings instance holding persisted values.
        env: Mapping used instead of os.environ (tests).
    """
    env = os.environ if env is None else env
    patterns = list(DEFAULT_PROTECTED_PATTERNS)
    enabled = True

    if qsettings is not None:
        stored = _parse_patterns(qsettings.value(PATTERNS_KEY, None))
        if stored:
            patterns = stored
        stored_enabled = qsettings.value(ENABLED_KEY, None)
        if stored_enabled is not None:
            enabled = _parse_bool(stored_enabled)

    env_patterns = _parse_patterns(env.get(ENV_PATTERNS))
    if env_patterns:
        patterns = env_patterns
    env_enabled = env.get(ENV_ENABLED)
    if env_enabled is not None:
        enabled = _parse_bool(env_enabled)

    logger.debug("Protected branches: enabled=%s patterns=%s", enabled, patterns)
    return ProtectedBranchSettings(patterns=patterns, enabled=enabled)


def save_protected_settings(settings, qsettings):
    qsettings.setValue(PATTERNS_KEY, ",".join(settings.patterns))
    qsettings.setValue(ENABLED_KEY, settings.enabled)
    qsettings.sync()
