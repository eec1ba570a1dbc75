from decimal import Decimal
from typing import Any, Iterator, Mapping, Union

import numpy as np


class Strategy(Mapping[str, Any]):
    """
    Self-adaptive strategy parameters controlling the mutation of one individual.

    A strategy is an immutable mapping of named parameters, e.g., the step size ``sigma`` and the learning rates
    ``tau`` and ``tau0``. Strategy mutations never change a strategy in place but build a new one with
    :meth:`replace`, so that one initial strategy can be shared by all population slots.

    Methods
    -------
    replace()
        Return a copy of the strategy with some parameters replaced.
    """

    def __init__(self, **params: Any) -> None:
        """
        Initialize a strategy from keyword parameters.

        Parameters
        ----------
        params : Any
            The named strategy parameters.
        """
        self._params = dict(params)

    def __getitem__(self, key: str) -> Any:
        """Return parameter value for given key."""
        return self._params[key]

    def __iter__(self) -> Iterator[str]:
        """Iterate over parameter names."""
        return iter(self._params)

    def __len__(self) -> int:
        """Return number of parameters."""
        return len(self._params)

    def replace(self, **params: Any) -> "Strategy":
        """
        Return a new strategy with the given parameters replaced.

        Parameters
        ----------
        params : Any
            The parameters to replace or add.

        Returns
        -------
        Strategy
            The updated copy.
        """
        new_params = dict(self._params)
        new_params.update(params)
        return Strategy(**new_params)

    def __eq__(self, other: object) -> bool:
        """Check parameter-wise equality, also for array-valued parameters."""
        if not isinstance(other, Strategy):
            return NotImplemented
        if self.keys() != other.keys():
            return False
        return all(np.array_equal(self[key], other[key]) for key in self)

    def __repr__(self) -> str:
        """Return string representation of a ``Strategy`` instance."""
        rep = {
            key: (f"{Decimal(value):.2E}" if isinstance(value, float) else value)
            for key, value in self._params.items()
        }
        return f"Strategy({rep})"


def _check_dimension(n: int, sigma: Union[float, np.ndarray]) -> None:
    if n < 1:
        raise ValueError(f"Strategy dimension must be at least 1 but was {n}.")
    if np.any(np.asarray(sigma) <= 0):
        raise ValueError(f"Step size must be positive but was {sigma}.")


def isotropic_strategy(n: int, sigma: float = 1.0) -> Strategy:
    """
    Create a strategy with one global step size for an ``n``-dimensional individual.

    The learning rate is set to ``tau = 1 / sqrt(2 n)``.

    Parameters
    ----------
    n : int
        The dimension of the individuals.
    sigma : float, optional
        The initial step size. Default is 1.0.

    Returns
    -------
    Strategy
        The isotropic strategy with parameters ``sigma`` and ``tau``.

    Raises
    ------
    ValueError
        If the dimension is smaller than one or the step size is not positive.
    """
    _check_dimension(n, sigma)
    return Strategy(sigma=float(sigma), tau=1.0 / np.sqrt(2 * n))


def anisotropic_strategy(n: int, sigma: Union[float, np.ndarray] = 1.0) -> Strategy:
    """
    Create a strategy with one step size per dimension for an ``n``-dimensional individual.

    The learning rates are set to ``tau = 1 / sqrt(2 sqrt(n))`` (coordinate-wise) and ``tau0 = 1 / sqrt(2 n)``
    (global).

    Parameters
    ----------
    n : int
        The dimension of the individuals.
    sigma : float | numpy.ndarray, optional
        The initial step size(s), broadcast to ``n`` dimensions. Default is 1.0.

    Returns
    -------
    Strategy
        The anisotropic strategy with parameters ``sigma``, ``tau``, and ``tau0``.

    Raises
    ------
    ValueError
        If the dimension is smaller than one or any step size is not positive.
    """
    _check_dimension(n, sigma)
    sigmas = np.broadcast_to(np.asarray(sigma, dtype=float), (n,)).copy()
    return Strategy(sigma=sigmas, tau=1.0 / np.sqrt(2 * np.sqrt(n)), tau0=1.0 / np.sqrt(2 * n))
