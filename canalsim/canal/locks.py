"""Lock complexes at each end of the canal."""

from typing import List

from ..core.resource import CountingResource, ExclusiveResource


class LockComplex:
    """The locks on one side of the canal.

    Either a pool of interchangeable chambers (a counting resource) or,
    with ``dual`` set, a primary and a secondary chamber that are held
    exclusively and can be closed individually by accidents.
    """

    def __init__(self, scheduler, side, dual: bool = False, capacity: int = 2):
        self.side = side
        self.dual = dual
        label = side.value.capitalize()

        if dual:
            self.primary = ExclusiveResource(scheduler, f"{label} Lock 1")
            self.secondary = ExclusiveResource(scheduler, f"{label} Lock 2")
            self.pool = None
        else:
            self.primary = self.secondary = None
            self.pool = CountingResource(scheduler, f"{label} Locks", capacity)

    @property
    def chambers(self) -> List[ExclusiveResource]:
        """Exclusive chambers, empty for a pooled complex."""
        return [self.primary, self.secondary] if self.dual else []

    @property
    def resources(self) -> List[CountingResource]:
        return self.chambers if self.dual else [self.pool]

    def select_lock(self) -> CountingResource:
        """Pick the resource an arriving ship should queue on.

        The primary chamber when it is free, the secondary otherwise (even if
        that one is busy too). A pooled complex always returns the pool.
        """
        if not self.dual:
            return self.pool
        return self.secondary if self.primary.busy else self.primary

    def __repr__(self) -> str:
        return f"LockComplex(side={self.side.value}, resources={self.resources})"
