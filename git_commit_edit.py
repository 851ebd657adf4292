#!/usr/bin/env python3
import argparse
import logging
import os
import sys

from gitedit.containment import ContainingBranchesGetter
from gitedit.errors import GitEditError
from gitedit.gate import CommitEditingGate
from gitedit.git_helpers import get_commit_ref, get_repo_root
from gitedit.model import Selection
from gitedit.repository import RepositoryManager
from gitedit.settings import ProtectedBranchSettings, load_protected_settings

logger = logging.getLogger("git_commit_edit")

EXIT_ALLOWED = 0
EXIT_DENIED = 1
EXIT_ERROR = 2


class ConsolePresenter:
    """Collects gate errors instead of showing dialogs."""
    def __init__(self):
        self.errors = []

    def show_error(self, message, title):
        self.errors.append((title, message))


def setup_logging(level=None):
    level = (level or os.environ.get("LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def open_qsettings():
    from PySide6.QtCore import QSettings
    return QSettings("gitedit", "GitCommitEdit")


def build_settings(args, qsettings=None):
    if args.protected:
        return ProtectedBranchSettings(patterns=list(args.protected))
    return load_protected_settings(qsettings)


def run_check(args):
    """Prints the verdict for one commit and returns the process exit code."""
    try:
        commit = get_commit_ref(args.location, args.commit_sha)
    except GitEditError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    gate = CommitEditingGate(build_settings(args))
    repositories = RepositoryManager()
    branches = ContainingBranchesGetter()
    selection = Selection([commit])
    presenter = ConsolePresenter()
    try:
        presentation = gate.check_enablement(selection, repositories, branches)
        if not presentation.visible:
            print(f"error: no repository for {commit.root}", file=sys.stderr)
            return EXIT_ERROR
        if not presentation.enabled:
            print(f"denied: {presentation.reason}")
            return EXIT_DENIED
        if not gate.attempt_edit(selection, repositories, branches, presenter, "Can't Edit Commit"):
            print(f"denied: {presenter.errors[-1][1]}")
            return EXIT_DENIED
    except GitEditError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR
    finally:
        branches.shutdown(wait=False)
    print("allowed")
    return EXIT_ALLOWED


def run_gui(args):
    from PySide6.QtWidgets import QApplication
    from gitedit.app_window import CommitEditingWindow

    try:
        repo_path = get_repo_root(args.location)
    except GitEditError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    app = QApplication(sys.argv)
    qsettings = open_qsettings()
    gate = CommitEditingGate(build_settings(args, qsettings))
    branches = ContainingBranchesGetter()
    window = CommitEditingWindow(repo_path, gate, RepositoryManager(), branches, qsettings)
    if args.commit_sha:
        window.select_commit(args.commit_sha)
    window.show()
    try:
        return app.exec()
    finally:
        branches.shutdown(wait=False)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Edit git commits that are safe to rewrite.")
    parser.add_argument("-C", "--location", type=str, default=os.getcwd())
    parser.add_argument("--protected", action="append", metavar="PATTERN",
                        help="Protected branch pattern (repeatable); overrides saved settings")
    parser.add_argument("--log-level", type=str, default=None)
    subparsers = parser.add_subparsers(dest="command")

    gui_parser = subparsers.add_parser("gui", help="Open the commit list (default)")
    gui_parser.add_argument("commit_sha", nargs="?")

    check_parser = subparsers.add_parser("check", help="Check whether a commit may be edited")
    check_parser.add_argument("commit_sha")

    args = parser.parse_args(argv)
    args.location = os.path.abspath(os.path.expanduser(args.location))
    setup_logging(args.log_level)

    if args.command == "check":
        return run_check(args)
    if args.command is None:
        args.commit_sha = None
    return run_gui(args)


if __name__ == "__main__":
    sys.exit(main())
