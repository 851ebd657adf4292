"""Repository lookup by commit root."""

import logging
import os
import threading

from gitedit.errors import GitCommandError
from gitedit.git_helpers import get_current_branch, get_repo_root, list_remote_branches

logger = logging.getLogger(__name__)


class GitRepository:
    """A git work tree. Branch data is read from git on every access."""

    def __init__(self, root):
        self.root = root

    @property
    def current_branch(self):
        return get_current_branch(self.root)

    @property
    def remote_branches(self):
        return list_remote_branches(self.root)

    def __repr__(self):
        return f"GitRepository({self.root!r})"


class RepositoryManager:
    """Resolves and remembers repositories by their root directory."""

    def __init__(self):
        self._repositories = {}
        self._lock = threading.Lock()

    def get_repository_for_root(self, root):
        """Returns the repository whose work tree contains root, or None."""
        key = os.path.normpath(os.path.abspath(root))
        with self._lock:
            repository = self._repositories.get(key)
        if repository is not None:
            return repository
        try:
            top_level = get_repo_root(key)
        except GitCommandError:
            logger.debug("No git repository at %s", key)
            return None
        with self._lock:
            repository = self._repositories.setdefault(top_level, GitRepository(top_level))
            self._repositories[key] = repository
        return repository
