if __name__ == "__main__":
    import sys
    print("Please run the main app: git_commit_edit.py")
    sys.exit(1)

import logging
import os
import subprocess
import sys
import tempfile

from gitedit.errors import GitCommandError, HistoryError
from gitedit.model import CommitRef, RemoteBranch

logger = logging.getLogger(__name__)

HEAD = "HEAD"


def run_git(repo_path, *args):
    """Runs a git command in repo_path and returns its stdout."""
    cmd = ["git", *args]
    logger.debug("Running %s in %s", " ".join(cmd), repo_path)
    try:
        result = subprocess.run(cmd, cwd=repo_path, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        raise GitCommandError(cmd, e.stderr, e.returncode) from e
    except OSError as e:
        raise GitCommandError(cmd, str(e)) from e
    return result.stdout


def get_repo_root(path):
    """Returns the top level of the work tree containing path."""
    return os.path.normpath(run_git(path, "rev-parse", "--show-toplevel").strip())


def get_current_branch(repo_path):
    """Fetches current branch name, or HEAD when detached."""
    cmd = ["git", "symbolic-ref", "--short", "-q", "HEAD"]
    result = subprocess.run(cmd, cwd=repo_path, capture_output=True, text=True)
    if result.returncode == 0:
        return result.stdout.strip()
    if result.returncode == 1:
        return HEAD
    raise GitCommandError(cmd, result.stderr, result.returncode)


def get_head_sha(repo_path):
    """Fetches current HEAD SHA (short)."""
    return run_git(repo_path, "rev-parse", "--short", "HEAD").strip()


def get_parent_shas(repo_path, commit_sha):
    """Returns (full_sha, parent_shas) for a commit."""
    line = run_git(repo_path, "rev-list", "--parents", "-n", "1", commit_sha, "--").strip()
    parts = line.split()
    if not parts:
        raise GitCommandError(["git", "rev-list", "--parents", "-n", "1", commit_sha], "unknown commit")
    return parts[0], tuple(parts[1:])


def get_commit_ref(repo_path, commit_sha):
    """Resolves commit_sha to a CommitRef rooted at the repository top level."""
    root = get_repo_root(repo_path)
    sha, parents = get_parent_shas(root, commit_sha)
    return CommitRef(sha=sha, root=root, parents=parents)


def get_git_history(repo_path, max_count=500):
    """Fetches (sha, subject) pairs from HEAD downwards."""
    out = run_git(repo_path, "log", f"--max-count={max_count}", "--format=%H %s", "HEAD")
    history = []
    for line in out.splitlines():
        if not line.strip():
            continue
        sha, _, subject = line.partition(" ")
        history.append((sha, subject))
    return history


def get_full_commit_message(repo_path, commit_sha):
    """Fetches the full (multi-line) commit message."""
    return run_git(repo_path, "log", "-1", "--format=%B", commit_sha).strip()


def is_ancestor(repo_path, ancestor, descendant):
    cmd = ["git", "merge-base", "--is-ancestor", ancestor, descendant]
    result = subprocess.run(cmd, cwd=repo_path, capture_output=True, text=True)
    if result.returncode in (0, 1):
        return result.returncode == 0
    raise GitCommandError(cmd, result.stderr, result.returncode)


def _short_ref_name(refname):
    if refname.startswith("refs/heads/"):
        return refname[len("refs/heads/"):]
    if refname.startswith("refs/remotes/"):
        return refname[len("refs/remotes/"):]
    return None


def get_containing_branches(repo_path, commit_sha):
    """Returns the names of all branches whose history includes commit_sha.

    Local branches are reported by name ("main"), remote-tracking branches
    with their remote ("origin/main"). HEAD is included when it is detached
    and reaches the commit, so that the current-branch check still works.
    """
    out = run_git(repo_path, "branch", "-a", "--format=%(refname) %(symref)", f"--contains={commit_sha}")
    branches = set()
    for line in out.splitlines():
        refname, _, symref = line.strip().partition(" ")
        if symref:
            continue  # origin/HEAD
        name = _short_ref_name(refname)
        if name:
            branches.add(name)
    if get_current_branch(repo_path) == HEAD and is_ancestor(repo_path, commit_sha, HEAD):
        branches.add(HEAD)
    return frozenset(branches)


def list_remote_branches(repo_path):
    """Lists remote-tracking branches, skipping symbolic refs like origin/HEAD."""
    remotes = [r for r in run_git(repo_path, "remote").split() if r]
    # Longest first so that "a/b" wins over "a" for nested remote names
    remotes.sort(key=len, reverse=True)
    out = run_git(repo_path, "for-each-ref", "--format=%(refname) %(symref)", "refs/remotes")
    branches = []
    for line in out.splitlines():
        refname, _, symref = line.strip().partition(" ")
        if symref or not refname:
            continue
        rest = refname[len("refs/remotes/"):]
        for remote in remotes:
            if rest.startswith(remote + "/"):
                branches.append(RemoteBranch(remote=remote, name=rest[len(remote) + 1:]))
                break
    return branches


def run_interactive_rebase(repo_path, base_sha, todo_lines):
    """
    Rewrites history from base_sha (inclusive) up to HEAD with git rebase -i.
    todo_lines: The rebase todo, oldest first ("pick <sha>", "exec ...", ...).
    Raises GitCommandError after aborting the rebase if git fails.
    """
    _, parents = get_parent_shas(repo_path, base_sha)
    upstream = parents[0] if parents else None

    # Build a sequence editor script that writes the rebase todo
    with tempfile.NamedTemporaryFile(mode='w', delete=False, suffix='.py') as f:
        f.write("import sys\n")
        f.write(f"todo = {list(todo_lines)!r}\n")
        f.write("with open(sys.argv[1], 'w') as f:\n")
        f.write("    for line in todo:\n")
        f.write("        f.write(line + '\\n')\n")
        editor_script = f.name

    env = os.environ.copy()
    env["GIT_SEQUENCE_EDITOR"] = f'"{sys.executable}" "{editor_script}"'
    env["GIT_EDITOR"] = "true"

    if upstream is None:
        cmd = ["git", "rebase", "-i", "--root"]
    else:
        cmd = ["git", "rebase", "-i", upstream]

    logger.info("Rebasing %s onto %s", repo_path, upstream or "root")
    try:
        result = subprocess.run(cmd, cwd=repo_path, env=env, capture_output=True, text=True)
    finally:
        os.unlink(editor_script)

    if result.returncode != 0:
        subprocess.run(["git", "rebase", "--abort"], cwd=repo_path, capture_output=True)
        logger.warning("Rebase failed and was aborted: %s", result.stderr.strip())
        raise GitCommandError(cmd, result.stderr, result.returncode)


def get_commits_since(repo_path, commit_sha):
    """Returns SHAs from commit_sha (inclusive) up to HEAD, oldest first.

    Raises HistoryError if a merge commit lies in that range, since a plain
    pick todo cannot replay it.
    """
    _, parents = get_parent_shas(repo_path, commit_sha)
    rev_range = f"{parents[0]}..HEAD" if parents else "HEAD"
    merges = run_git(repo_path, "rev-list", "--min-parents=2", rev_range).split()
    if merges:
        short = ", ".join(sha[:8] for sha in merges)
        raise HistoryError(f"Cannot rewrite history containing merge commits: {short}")
    out = run_git(repo_path, "rev-list", "--reverse", "--topo-order", rev_range)
    return [line.strip() for line in out.splitlines() if line.strip()]
