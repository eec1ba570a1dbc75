from typing import Any, Callable, Optional

import numpy as np

from ..strategy import Strategy
from .base import Operator


def identity(ind: Any, strategy: Any) -> Any:
    """Return the individual unchanged."""
    return ind


def identity_strategy(strategy: Any) -> Any:
    """Return the strategy unchanged."""
    return strategy


class IsotropicMutation(Operator):
    """
    Add isotropic Gaussian noise scaled by the strategy's global step size ``sigma``.

    Notes
    -----
    The ``IsotropicMutation`` class inherits all methods and attributes from the ``Operator`` class.

    See Also
    --------
    :class:`Operator` : The parent class.
    """

    def __call__(self, ind: Any, strategy: Strategy) -> np.ndarray:  # type: ignore[override]
        """
        Apply the isotropic mutation.

        Parameters
        ----------
        ind : array_like
            The recombinant individual.
        strategy : mulambda.Strategy
            The mutated strategy with scalar parameter ``sigma``.

        Returns
        -------
        numpy.ndarray
            The mutated individual.
        """
        x = np.asarray(ind, dtype=float)
        return x + strategy["sigma"] * self._normal(len(x))


class AnisotropicMutation(Operator):
    """
    Add Gaussian noise with one step size per dimension taken from the strategy's vector ``sigma``.

    Notes
    -----
    The ``AnisotropicMutation`` class inherits all methods and attributes from the ``Operator`` class.

    See Also
    --------
    :class:`Operator` : The parent class.
    """

    def __call__(self, ind: Any, strategy: Strategy) -> np.ndarray:  # type: ignore[override]
        """
        Apply the anisotropic mutation.

        Parameters
        ----------
        ind : array_like
            The recombinant individual.
        strategy : mulambda.Strategy
            The mutated strategy with vector parameter ``sigma`` of the individual's length.

        Returns
        -------
        numpy.ndarray
            The mutated individual.
        """
        x = np.asarray(ind, dtype=float)
        return x + np.asarray(strategy["sigma"]) * self._normal(len(x))


class IsotropicSigma(Operator):
    """
    Self-adapt the global step size by a log-normal factor, ``sigma * exp(tau * N(0, 1))``.

    Notes
    -----
    The ``IsotropicSigma`` class inherits all methods and attributes from the ``Operator`` class.

    See Also
    --------
    :class:`Operator` : The parent class.
    """

    def __call__(self, strategy: Strategy) -> Strategy:  # type: ignore[override]
        """
        Apply the log-normal step-size mutation.

        Parameters
        ----------
        strategy : mulambda.Strategy
            The recombinant strategy with parameters ``sigma`` and ``tau``.

        Returns
        -------
        mulambda.Strategy
            The new strategy with mutated ``sigma``.
        """
        return strategy.replace(sigma=strategy["sigma"] * np.exp(strategy["tau"] * self.rng.gauss(0.0, 1.0)))


class AnisotropicSigma(Operator):
    """
    Self-adapt per-dimension step sizes, ``sigma * exp(tau0 * N(0, 1) + tau * N(0, I))``.

    The global factor is shared by all dimensions, the coordinate-wise factors are drawn independently.

    Notes
    -----
    The ``AnisotropicSigma`` class inherits all methods and attributes from the ``Operator`` class.

    See Also
    --------
    :class:`Operator` : The parent class.
    """

    def __call__(self, strategy: Strategy) -> Strategy:  # type: ignore[override]
        """
        Apply the log-normal step-size mutation.

        Parameters
        ----------
        strategy : mulambda.Strategy
            The recombinant strategy with parameters ``sigma``, ``tau``, and ``tau0``.

        Returns
        -------
        mulambda.Strategy
            The new strategy with mutated ``sigma``.
        """
        sigma = np.asarray(strategy["sigma"], dtype=float)
        global_step = strategy["tau0"] * self.rng.gauss(0.0, 1.0)
        return strategy.replace(sigma=sigma * np.exp(global_step + strategy["tau"] * self._normal(len(sigma))))


class InversionMutation(Operator):
    """
    Reverse the order of a randomly chosen contiguous segment of the individual.

    Inversion permutes the elements, so it works for any sequence representation, e.g., bit strings.

    Notes
    -----
    The ``InversionMutation`` class inherits all methods and attributes from the ``Operator`` class.

    See Also
    --------
    :class:`Operator` : The parent class.
    """

    def __call__(self, ind: Any) -> np.ndarray:  # type: ignore[override]
        """
        Apply the inversion mutation.

        Parameters
        ----------
        ind : array_like
            The individual to mutate.

        Returns
        -------
        numpy.ndarray
            A copy of the individual with one segment reversed.
        """
        x = np.array(ind)
        start, stop = sorted(self.rng.sample(range(len(x) + 1), 2))
        x[start:stop] = x[start:stop][::-1]
        return x


class SwapMutation(Operator):
    """
    Exchange the elements at two randomly chosen positions.

    Notes
    -----
    The ``SwapMutation`` class inherits all methods and attributes from the ``Operator`` class.

    See Also
    --------
    :class:`Operator` : The parent class.
    """

    def __call__(self, ind: Any) -> np.ndarray:  # type: ignore[override]
        """
        Apply the swap mutation.

        Parameters
        ----------
        ind : array_like
            The individual to mutate, with at least two elements.

        Returns
        -------
        numpy.ndarray
            A copy of the individual with two elements exchanged.
        """
        x = np.array(ind)
        i, j = self.rng.sample(range(len(x)), 2)
        x[i], x[j] = x[j], x[i]
        return x


class MutationWrapper:
    """
    Adapt a strategy-free mutation ``(individual) -> individual`` to the ``(individual, strategy)`` signature.

    The strategy is ignored, which makes e.g. permutation mutations usable in the evolution strategy.

    Attributes
    ----------
    mutation : Callable[[Any], Any]
        The wrapped mutation.
    """

    def __init__(self, mutation: Callable[[Any], Any]) -> None:
        """
        Initialize a mutation wrapper.

        Parameters
        ----------
        mutation : Callable[[Any], Any]
            The mutation to wrap.
        """
        self.mutation = mutation

    def __call__(self, ind: Any, strategy: Optional[Any] = None) -> Any:
        """Apply the wrapped mutation, ignoring the strategy."""
        return self.mutation(ind)

    def __repr__(self) -> str:
        """Return string representation of a ``MutationWrapper`` instance."""
        return f"MutationWrapper({self.mutation!r})"

