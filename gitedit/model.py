"""Value types passed between the gate, the actions and the UI."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from gitedit.errors import SelectionError


@dataclass(frozen=True)
class CommitRef:
    """A commit as shown in the log: its hash, its repository root and parents."""

    sha: str
    root: str
    parents: Tuple[str, ...] = ()

    @property
    def parent_count(self) -> int:
        return len(self.parents)

    @property
    def short_sha(self) -> str:
        return self.sha[:8]


@dataclass(frozen=True)
class RemoteBranch:
    """A remote-tracking branch, e.g. remote="origin", name="release/1.0"."""

    remote: str
    name: str

    @property
    def name_for_remote_operations(self) -> str:
        # Also how containment lists the remote-tracking branch
        return f"{self.remote}/{self.name}"

    @property
    def name_for_local_operations(self) -> str:
        # Protected patterns are written without a remote qualifier
        return self.name


@dataclass(frozen=True)
class Verdict:
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls):
        return cls(True)

    @classmethod
    def deny(cls, reason):
        return cls(False, reason)


@dataclass(frozen=True)
class EnablementResult:
    """How an editing action should be presented for the current selection."""

    visible: bool
    enabled: bool = False
    reason: Optional[str] = None

    @classmethod
    def hidden(cls):
        return cls(visible=False, enabled=False)

    @classmethod
    def available(cls):
        return cls(visible=True, enabled=True)

    @classmethod
    def disabled(cls, reason):
        return cls(visible=True, enabled=False, reason=reason)


@dataclass(frozen=True)
class Selection:
    commits: Tuple[CommitRef, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "commits", tuple(self.commits))

    @property
    def size(self) -> int:
        return len(self.commits)

    def single(self) -> CommitRef:
        """Return the only selected commit.

        Raises SelectionError when the selection is empty or holds several
        commits; callers are expected to have checked enablement first.
        """
        if self.size != 1:
            raise SelectionError(f"Expected exactly one selected commit, got {self.size}")
        return self.commits[0]
