"""Exception types raised by gitedit.

Policy denials (commit not in HEAD, commit already on a protected branch)
are not exceptions: they are reported to the user and the edit is skipped.
Everything here is either a git failure or a caller contract violation.
"""


class GitEditError(Exception):
    """Base class for all gitedit errors."""


class GitCommandError(GitEditError):
    """A git subprocess exited with a non-zero status."""

    def __init__(self, cmd, stderr="", returncode=None):
        self.cmd = list(cmd)
        self.stderr = (stderr or "").strip()
        self.returncode = returncode
        message = f"git command failed: {' '.join(self.cmd)}"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(message)


class SelectionError(GitEditError):
    """The selection does not hold exactly one commit."""


class RepositoryNotFoundError(GitEditError):
    """No git repository is registered for a commit root."""


class HistoryError(GitEditError):
    """The history to rewrite has a shape the edit cannot replay."""
