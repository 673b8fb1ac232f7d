from heapq import heappop, heappush
from typing import Iterable, List, Optional, Set, Tuple

from yenksp.lib.algorithms.base import Cost
from yenksp.lib.path import Path, Route


class CandidatePool:
    """
    Paths discovered by deviation search but not yet accepted.

    Members are unique by route (see `Path.same_route`). Extraction always
    returns the cheapest member; among equal costs, the one inserted first.
    """

    def __init__(self) -> None:
        self._heap: List[Tuple[Cost, int, Path]] = []
        self._routes: Set[Route] = set()
        self._candidate_id = 0

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, path: Path) -> bool:
        """True if a member has the same route as `path`."""
        return path.route in self._routes

    def insert(self, path: Path) -> bool:
        """
        Add `path` unless a member with the same route is already held.

        Returns:
            True if the path was added.
        """
        if path.route in self._routes:
            return False
        heappush(self._heap, (path.cost, self._candidate_id, path))
        self._routes.add(path.route)
        self._candidate_id += 1
        return True

    def pop_best_unseen(self, accepted: Iterable[Path]) -> Optional[Path]:
        """
        Remove and return the cheapest member not structurally equal to any
        path in `accepted`.

        Members matching an accepted path are discarded on the way.

        Returns:
            The selected path, or None once the pool is exhausted.
        """
        accepted_routes = {p.route for p in accepted}
        while self._heap:
            _, _, path = heappop(self._heap)
            self._routes.discard(path.route)
            if path.route not in accepted_routes:
                return path
        return None
