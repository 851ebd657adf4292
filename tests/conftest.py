"""Shared fixtures: throwaway git repositories for the git-backed tests."""

import os
import shutil
import subprocess

import pytest


class GitRepoBuilder:
    """Drives git in a temporary work tree."""

    def __init__(self, path):
        self.path = str(path)
        self.count = 0

    def git(self, *args):
        result = subprocess.run(
            ["git", *args], cwd=self.path, capture_output=True, text=True, check=True
        )
        return result.stdout.strip()

    def commit(self, message):
        self.count += 1
        with open(os.path.join(self.path, f"file{self.count}.txt"), "w") as f:
            f.write(message + "\n")
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)
        return self.git("rev-parse", "HEAD")


def _init_repo(path, bare=False):
    os.makedirs(path, exist_ok=True)
    builder = GitRepoBuilder(path)
    builder.git("init", "-q", *(["--bare"] if bare else []))
    builder.git("symbolic-ref", "HEAD", "refs/heads/main")
    if not bare:
        builder.git("config", "user.name", "Test User")
        builder.git("config", "user.email", "test@example.com")
        builder.git("config", "commit.gpgsign", "false")
    return builder


@pytest.fixture
def git_repo(tmp_path):
    """A repository on branch main with three linear commits."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo = _init_repo(tmp_path / "work")
    repo.commits = [repo.commit(f"commit {i}") for i in range(3)]
    repo.path = repo.git("rev-parse", "--show-toplevel")
    return repo


@pytest.fixture
def repo_with_remote(git_repo, tmp_path):
    """git_repo plus an "origin" remote that has main and release/1.0 pushed."""
    _init_repo(tmp_path / "origin.git", bare=True)
    git_repo.git("remote", "add", "origin", str(tmp_path / "origin.git"))
    git_repo.git("push", "-q", "origin", "main")
    git_repo.git("push", "-q", "origin", f"{git_repo.commits[0]}:refs/heads/release/1.0")
    git_repo.git("fetch", "-q", "origin")
    return git_repo
