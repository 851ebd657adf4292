"""Cache of the branches containing a commit.

Computing containment walks the commit graph, so the UI only ever reads the
cache (get_cached) and asks for background population (request). Callers
that need an authoritative answer use get_synchronously, which blocks.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, FrozenSet, Optional

from gitedit.git_helpers import get_containing_branches

logger = logging.getLogger(__name__)


class ContainingBranchesGetter:
    def __init__(self, compute: Callable[[str, str], FrozenSet[str]] = get_containing_branches, max_workers: int = 2):
        self._compute = compute
        self._cache = {}
        # key -> generation the computation was started under
        self._pending = {}
        self._epoch = 0
        self._generations = {}
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="containing-branches")

    def _generation(self, root):
        # must hold self._lock
        return self._epoch, self._generations.get(root, 0)

    def get_cached(self, root: str, sha: str) -> Optional[FrozenSet[str]]:
        """Returns the cached branch set, or None if it was not computed yet."""
        with self._lock:
            return self._cache.get((root, sha))

    def get_synchronously(self, root: str, sha: str) -> FrozenSet[str]:
        with self._lock:
            cached = self._cache.get((root, sha))
            generation = self._generation(root)
        if cached is not None:
            return cached
        logger.debug("Computing containing branches of %s in %s", sha, root)
        branches = frozenset(self._compute(root, sha))
        self._store((root, sha), generation, branches)
        return branches

    def request(self, root: str, sha: str):
        """Schedules a background computation unless one is cached or pending.

        Returns the Future, or None when nothing was scheduled.
        """
        key = (root, sha)
        with self._lock:
            generation = self._generation(root)
            if key in self._cache or self._pending.get(key) == generation:
                return None
            self._pending[key] = generation
        return self._executor.submit(self._populate, key, generation)

    def _populate(self, key, generation):
        root, sha = key
        try:
            branches = frozenset(self._compute(root, sha))
        except Exception:
            logger.exception("Failed to compute containing branches of %s in %s", sha, root)
            with self._lock:
                if self._pending.get(key) == generation:
                    del self._pending[key]
            raise
        with self._lock:
            if self._pending.get(key) == generation:
                del self._pending[key]
        self._store(key, generation, branches)
        return branches

    def _store(self, key, generation, branches):
        with self._lock:
            if self._generation(key[0]) != generation:
                # invalidated while computing, the result may be stale
                logger.debug("Dropping containing branches of %s computed before invalidation", key[1])
                return
            self._cache[key] = branches

    def invalidate(self, root: Optional[str] = None):
        """Drops cached results for root, or for every root.

        Computations still running for those roots are not cached when they
        finish.
        """
        with self._lock:
            if root is None:
                self._epoch += 1
                self._cache.clear()
            else:
                self._generations[root] = self._generations.get(root, 0) + 1
                for key in [k for k in self._cache if k[0] == root]:
                    del self._cache[key]

    def shutdown(self, wait=True):
        self._executor.shutdown(wait=wait)
