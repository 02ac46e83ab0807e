"""Lineage graph traversal, cycle detection and polygamy tallies."""

from collections import Counter, defaultdict
from collections.abc import Iterable
from uuid import UUID

from family_kinship_ledger.domain.marriages import Marriage
from family_kinship_ledger.domain.relationships import KinshipEdge


class KinshipGraph:
    """Parent to child adjacency built from a family's lineage edges.

    Non-lineage edges (siblings, guardians, spouses) are ignored; they never
    participate in ancestry.
    """

    def __init__(self, edges: Iterable[KinshipEdge] = ()) -> None:
        self._children: dict[UUID, list[UUID]] = defaultdict(list)
        self._parents: dict[UUID, list[UUID]] = defaultdict(list)
        for edge in edges:
            pair = edge.lineage_pair
            if pair is not None:
                self.add_lineage(*pair)

    def add_lineage(self, parent_id: UUID, child_id: UUID) -> None:
        if child_id not in self._children[parent_id]:
            self._children[parent_id].append(child_id)
        if parent_id not in self._parents[child_id]:
            self._parents[child_id].append(parent_id)

    def children_of(self, member_id: UUID) -> list[UUID]:
        return list(self._children.get(member_id, []))

    def parents_of(self, member_id: UUID) -> list[UUID]:
        return list(self._parents.get(member_id, []))

    def is_reachable(self, start: UUID, target: UUID) -> bool:
        """True if target is a descendant of (or equal to) start."""
        visited: set[UUID] = set()
        stack = [start]
        while stack:
            node = stack.pop()
            if node == target:
                return True
            if node in visited:
                continue
            visited.add(node)
            stack.extend(self._children.get(node, []))
        return False

    def would_create_cycle(self, parent_id: UUID, child_id: UUID) -> bool:
        return parent_id == child_id or self.is_reachable(child_id, parent_id)

    def path_between(self, start: UUID, target: UUID) -> list[UUID]:
        """Descent path from start down to target, empty if none."""
        visited: set[UUID] = set()

        def dfs(node: UUID, path: list[UUID]) -> list[UUID]:
            if node == target:
                return path
            visited.add(node)
            for child in self._children.get(node, []):
                if child not in visited:
                    found = dfs(child, path + [child])
                    if found:
                        return found
            return []

        return dfs(start, [start])

    def find_cycle(self) -> list[UUID] | None:
        visited: set[UUID] = set()
        rec_stack: set[UUID] = set()
        path: list[UUID] = []

        def dfs(node: UUID) -> list[UUID] | None:
            visited.add(node)
            rec_stack.add(node)
            path.append(node)

            for child in self._children.get(node, []):
                if child not in visited:
                    result = dfs(child)
                    if result is not None:
                        return result
                elif child in rec_stack:
                    cycle_start = path.index(child)
                    return path[cycle_start:] + [child]

            path.pop()
            rec_stack.remove(node)
            return None

        for node in list(self._children):
            if node not in visited:
                cycle = dfs(node)
                if cycle is not None:
                    return cycle
        return None

    def generation_count(self) -> int:
        """Length of the longest parent to child chain, counted in people."""
        depth: dict[UUID, int] = {}

        def longest_from(node: UUID, seen: frozenset[UUID]) -> int:
            if node in depth:
                return depth[node]
            best = 1
            for child in self._children.get(node, []):
                if child not in seen:
                    best = max(best, 1 + longest_from(child, seen | {child}))
            depth[node] = best
            return best

        roots = [node for node in self._children if not self._parents.get(node)]
        if not roots:
            roots = list(self._children)
        return max((longest_from(root, frozenset({root})) for root in roots), default=0)


def active_marriage_tally(marriages: Iterable[Marriage]) -> Counter[UUID]:
    tally: Counter[UUID] = Counter()
    for marriage in marriages:
        if marriage.is_active:
            tally[marriage.spouse1_id] += 1
            tally[marriage.spouse2_id] += 1
    return tally


def is_polygamous(marriages: Iterable[Marriage], house_count: int = 0) -> bool:
    """Two simultaneous active marriages sharing a spouse, or two recorded houses."""
    if house_count >= 2:
        return True
    return any(count > 1 for count in active_marriage_tally(marriages).values())


__all__ = ["KinshipGraph", "active_marriage_tally", "is_polygamous"]
