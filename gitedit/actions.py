"""Commit editing actions offered on a single selected commit.

Each action asks the CommitEditingGate first: update() decides how the
action is presented, perform() re-validates and only then rewrites history.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol

from gitedit.containment import ContainingBranchesGetter
from gitedit.errors import GitCommandError, HistoryError
from gitedit.git_helpers import get_commits_since, get_full_commit_message, run_interactive_rebase
from gitedit.model import Selection
from gitedit.repository import RepositoryManager

logger = logging.getLogger(__name__)


class Presenter(Protocol):
    def show_error(self, message: str, title: str) -> None: ...


@dataclass
class ActionContext:
    """Collaborators for one action invocation, validated by the UI."""

    selection: Selection
    repositories: RepositoryManager
    branches: ContainingBranchesGetter
    presenter: Presenter


class CommitEditingAction(ABC):
    text = ""

    def __init__(self, gate):
        self.gate = gate

    @property
    @abstractmethod
    def failure_title(self):
        """Title of the error dialog shown when the edit is refused."""

    def update(self, context):
        return self.gate.check_enablement(context.selection, context.repositories, context.branches)

    def perform(self, context):
        """Runs the edit if the gate allows it. Returns True if history was rewritten."""
        if not self.gate.attempt_edit(
            context.selection, context.repositories, context.branches, context.presenter, self.failure_title
        ):
            return False

        commit = context.selection.single()
        try:
            done = self.do_edit(commit)
        except (GitCommandError, HistoryError) as e:
            logger.warning("%s failed on %s: %s", type(self).__name__, commit.short_sha, e)
            context.presenter.show_error(str(e), self.failure_title)
            return False
        finally:
            context.branches.invalidate(commit.root)
        return done

    @abstractmethod
    def do_edit(self, commit):
        """Rewrites history for commit. Returns False if the user cancelled."""


class RewordCommitAction(CommitEditingAction):
    text = "Edit Commit Message..."
    failure_title = "Can't Edit Message"

    def __init__(self, gate, message_provider):
        """message_provider(commit, current_message) returns the new message or None."""
        super().__init__(gate)
        self.message_provider = message_provider

    def do_edit(self, commit):
        current_message = get_full_commit_message(commit.root, commit.sha)
        new_message = self.message_provider(commit, current_message)
        if new_message is None or new_message == current_message:
            return False

        # Message goes through a file so multi-line text survives the todo list
        with tempfile.NamedTemporaryFile(mode='w', delete=False, suffix='.txt', encoding='utf-8') as mf:
            mf.write(new_message)
            message_file = mf.name
        try:
            todo = []
            for sha in get_commits_since(commit.root, commit.sha):
                todo.append(f"pick {sha}")
                if sha == commit.sha:
                    todo.append(f"exec git commit --amend --allow-empty -F \"{message_file}\"")
            run_interactive_rebase(commit.root, commit.sha, todo)
        finally:
            os.unlink(message_file)
        logger.info("Reworded %s", commit.short_sha)
        return True


class InteractiveRebaseAction(CommitEditingAction):
    text = "Interactively Rebase from Here..."
    failure_title = "Can't Start Rebase"

    def __init__(self, gate, todo_editor):
        """todo_editor(commit, todo_lines) returns the edited todo lines or None."""
        super().__init__(gate)
        self.todo_editor = todo_editor

    def do_edit(self, commit):
        todo = [f"pick {sha}" for sha in get_commits_since(commit.root, commit.sha)]
        edited = self.todo_editor(commit, todo)
        if edited is None:
            return False
        edited = [line for line in edited if line.strip() and not line.lstrip().startswith("#")]
        if not edited:
            return False
        run_interactive_rebase(commit.root, commit.sha, edited)
        logger.info("Rebased from %s", commit.short_sha)
        return True


def default_actions(gate, message_provider, todo_editor):
    return [
        RewordCommitAction(gate, message_provider),
        InteractiveRebaseAction(gate, todo_editor),
    ]
