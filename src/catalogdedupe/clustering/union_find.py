"""Union-Find (Disjoint Set Union) over item ids."""

from collections.abc import Iterable


class UnionFind:
    """Union-Find with path halving and union by size.

    Elements are created lazily on first use. Components are reported in
    a canonical order so clustering output never depends on insertion
    order.

    Attributes
    ----------
    parent : dict[str, str]
        Parent pointers for each element.
    size : dict[str, int]
        Component size, valid for roots only.
    """

    def __init__(self, elements: Iterable[str] = ()) -> None:
        """Initialize the structure, optionally with singleton sets."""
        self.parent: dict[str, str] = {}
        self.size: dict[str, int] = {}
        for element in elements:
            self.make_set(element)

    def __contains__(self, x: object) -> bool:
        return x in self.parent

    def __len__(self) -> int:
        return len(self.parent)

    def make_set(self, x: str) -> None:
        """Create a singleton set for *x* if it is not yet known."""
        if x not in self.parent:
            self.parent[x] = x
            self.size[x] = 1

    def find(self, x: str) -> str:
        """Find the root of the set containing *x*.

        Parameters
        ----------
        x : str
            Element to find (created if unknown).

        Returns
        -------
        str
            Root of set containing x.
        """
        self.make_set(x)
        parent = self.parent
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    def union(self, x: str, y: str) -> bool:
        """Merge the sets containing *x* and *y*.

        Parameters
        ----------
        x : str
            First element.
        y : str
            Second element.

        Returns
        -------
        bool
            True if two distinct sets were merged.
        """
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return False

        if self.size[root_x] < self.size[root_y]:
            root_x, root_y = root_y, root_x
        self.parent[root_y] = root_x
        self.size[root_x] += self.size.pop(root_y)
        return True

    def connected(self, x: str, y: str) -> bool:
        """Whether *x* and *y* belong to the same set."""
        return self.find(x) == self.find(y)

    def components(self, min_size: int = 1) -> list[tuple[str, ...]]:
        """Connected components as sorted tuples, in sorted order.

        Parameters
        ----------
        min_size : int, optional
            Drop components smaller than this.

        Returns
        -------
        list[tuple[str, ...]]
            Components ordered by their smallest element.
        """
        groups: dict[str, list[str]] = {}
        for element in self.parent:
            groups.setdefault(self.find(element), []).append(element)

        return sorted(
            tuple(sorted(members)) for members in groups.values() if len(members) >= min_size
        )
