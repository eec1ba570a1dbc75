import copy
import random
from typing import Any, Optional, Sequence

import numpy as np

from ..strategy import Strategy
from .base import Operator


def first(inds: Sequence[Any]) -> Any:
    """Return an independent copy of the first selected individual."""
    return copy.deepcopy(inds[0])


def first_strategy(strategies: Sequence[Any]) -> Any:
    """Return the first selected strategy."""
    return strategies[0]


def average(inds: Sequence[Any]) -> np.ndarray:
    """
    Intermediate recombination: average the selected individuals element-wise.

    Parameters
    ----------
    inds : Sequence[array_like]
        The selected parent individuals, all of the same shape.

    Returns
    -------
    numpy.ndarray
        The centroid of the parents.
    """
    return np.mean(np.asarray(inds, dtype=float), axis=0)


def average_strategy(strategies: Sequence[Strategy]) -> Strategy:
    """
    Intermediate recombination of strategies: average every parameter over the selected strategies.

    Parameters
    ----------
    strategies : Sequence[mulambda.Strategy]
        The selected parent strategies, all with the same parameter names.

    Returns
    -------
    mulambda.Strategy
        The strategy with averaged parameters.

    Raises
    ------
    ValueError
        If the strategies do not share the same parameters.
    """
    keys = set(strategies[0].keys())
    if any(set(s.keys()) != keys for s in strategies):
        raise ValueError("Strategies to average must have the same parameters.")
    averaged = {}
    for key in strategies[0]:
        value = np.mean([np.asarray(s[key], dtype=float) for s in strategies], axis=0)
        averaged[key] = float(value) if np.ndim(value) == 0 else value
    return Strategy(**averaged)


class Marriage(Operator):
    """
    Discrete recombination: every component of the child is taken from a uniformly chosen parent.

    Notes
    -----
    The ``Marriage`` class inherits all methods and attributes from the ``Operator`` class.

    See Also
    --------
    :class:`Operator` : The parent class.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        """
        Initialize a discrete-recombination operator.

        Parameters
        ----------
        rng : random.Random, optional
            The separate random number generator for the operator.
        """
        super().__init__(rng)

    def __call__(self, inds: Sequence[Any]) -> np.ndarray:  # type: ignore[override]
        """
        Apply the discrete-recombination operator.

        Parameters
        ----------
        inds : Sequence[array_like]
            The selected parent individuals, all of the same length.

        Returns
        -------
        numpy.ndarray
            The recombined child, sharing no storage with any parent.
        """
        parents = np.asarray(inds)
        choice = [self.rng.randrange(len(parents)) for _ in range(parents.shape[1])]
        return parents[choice, np.arange(parents.shape[1])]
