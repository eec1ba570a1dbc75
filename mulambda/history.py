import copy
from typing import Any, Dict, Iterator, List, Mapping

FITNESS_KEY = "fitness"  # Parent fitness per generation
OFFSPRING_FITNESS_KEY = "offspring_fitness"  # Offspring fitness per generation


class History(Mapping[str, List[Any]]):
    """
    Append-only store of per-generation snapshots keyed by metric name.

    The store is only written to if it is enabled. The optimizer appends to it once per generation and hands it to the
    caller at the end of a run, it never reads from it.

    Attributes
    ----------
    enabled : bool
        Whether snapshots are recorded at all.
    """

    def __init__(self, enabled: bool = False) -> None:
        """
        Initialize an empty history store.

        Parameters
        ----------
        enabled : bool, optional
            If False, :meth:`keep` is a no-op. Default is False.
        """
        self.enabled = enabled
        self._store: Dict[str, List[Any]] = {}

    def keep(self, key: str, value: Any) -> None:
        """
        Append a snapshot of ``value`` under ``key`` if the store is enabled.

        Parameters
        ----------
        key : str
            The metric name.
        value : Any
            The value to record. A copy is stored so later in-place changes do not leak into the history.
        """
        if self.enabled:
            self._store.setdefault(key, []).append(copy.copy(value))

    def __getitem__(self, key: str) -> List[Any]:
        """Return snapshots recorded for given metric."""
        return self._store[key]

    def __iter__(self) -> Iterator[str]:
        """Iterate over recorded metric names."""
        return iter(self._store)

    def __len__(self) -> int:
        """Return number of recorded metrics."""
        return len(self._store)

    def __repr__(self) -> str:
        """Return string representation of a ``History`` instance."""
        lengths = {key: len(values) for key, values in self._store.items()}
        return f"History(enabled={self.enabled}, {lengths})"
