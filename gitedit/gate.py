"""Decides whether a single commit may be edited (reworded, rebased, ...).

Two rules apply to a commit with exactly one parent:

1. the current branch (HEAD) must contain the commit;
2. the commit must not already be on a remote branch whose name, without
   the remote qualifier, matches a protected branch pattern.

check_enablement is the fast advisory check used to present an action. It
only reads the containment cache and optimistically allows the action when
nothing is cached yet. attempt_edit is the authoritative check run right
before the edit: it computes containment synchronously if needed and always
re-applies both rules.
"""

import logging
from typing import Iterable, Optional

from gitedit.errors import RepositoryNotFoundError
from gitedit.model import EnablementResult, Verdict

logger = logging.getLogger(__name__)

COMMIT_NOT_IN_HEAD = "The commit is not in the current branch"
COMMIT_PUSHED_TO_PROTECTED = "The commit is already pushed to protected branch "


class CommitEditingGate:
    def __init__(self, settings):
        self.settings = settings

    def check_enablement(self, selection, repositories, branches_getter) -> EnablementResult:
        if selection.size != 1:
            return EnablementResult.hidden()

        commit = selection.commits[0]
        repository = repositories.get_repository_for_root(commit.root)
        if repository is None:
            return EnablementResult.hidden()

        # editing merge commits is not allowed
        if commit.parent_count != 1:
            return EnablementResult.disabled(f"Selected commit has {commit.parent_count} parents")

        branches = branches_getter.get_cached(commit.root, commit.sha)
        if branches is None:
            # not computed yet; attempt_edit will check synchronously
            logger.debug("No cached containment for %s, enabling optimistically", commit.short_sha)
            return EnablementResult.available()

        verdict = self.verdict_for(repository, branches)
        if not verdict.allowed:
            return EnablementResult.disabled(verdict.reason)
        return EnablementResult.available()

    def attempt_edit(self, selection, repositories, branches_getter, presenter, failure_title) -> bool:
        """Re-validates the selected commit before it is edited.

        Shows an error through presenter and returns False when a rule
        denies the edit; returns True when the edit may go ahead.

        Raises:
            SelectionError: the selection does not hold exactly one commit.
            RepositoryNotFoundError: the commit root is not a known repository.
        """
        commit = selection.single()
        repository = repositories.get_repository_for_root(commit.root)
        if repository is None:
            raise RepositoryNotFoundError(f"No repository for root {commit.root}")

        if commit.parent_count != 1:
            verdict = Verdict.deny(f"Selected commit has {commit.parent_count} parents")
        else:
            branches = self.find_containing_branches(branches_getter, commit)
            verdict = self.verdict_for(repository, branches)
        if not verdict.allowed:
            logger.info("Editing %s denied: %s", commit.short_sha, verdict.reason)
            presenter.show_error(verdict.reason, failure_title)
            return False
        logger.debug("Editing %s allowed", commit.short_sha)
        return True

    @staticmethod
    def find_containing_branches(branches_getter, commit):
        branches = branches_getter.get_cached(commit.root, commit.sha)
        if branches is None:
            branches = branches_getter.get_synchronously(commit.root, commit.sha)
        return branches

    def verdict_for(self, repository, branches: Iterable[str]) -> Verdict:
        branches = set(branches)
        # allow editing only in the current branch
        if repository.current_branch not in branches:
            return Verdict.deny(COMMIT_NOT_IN_HEAD)

        # and not if pushed to a protected branch
        protected_branch = self.find_protected_remote_branch(repository, branches)
        if protected_branch is not None:
            return Verdict.deny(COMMIT_PUSHED_TO_PROTECTED + protected_branch)
        return Verdict.allow()

    def find_protected_remote_branch(self, repository, branches: Iterable[str]) -> Optional[str]:
        """Returns the local name of a protected remote branch containing the commit.

        Patterns carry no remote name, so they are matched against the local
        name; containment lists remote-tracking branches remote-qualified.
        """
        branches = set(branches)
        for remote_branch in repository.remote_branches:
            if not self.settings.is_branch_protected(remote_branch.name_for_local_operations):
                continue
            if remote_branch.name_for_remote_operations in branches:
                return remote_branch.name_for_local_operations
        return None
