"""Constructors normalizing different initial-population inputs into a list of individuals."""
import logging
import random
from typing import Any, Callable, List, Optional

import numpy as np

from ._errors import ConfigurationError

log = logging.getLogger(__name__)  # Get logger instance.


def _random_multipliers(dtype: np.dtype, n: int, rng: random.Random) -> np.ndarray:
    """Draw ``n`` random multipliers from the distribution matching ``dtype``."""
    if np.issubdtype(dtype, np.bool_):
        return np.array([rng.random() < 0.5 for _ in range(n)], dtype=bool)
    return np.array([rng.random() for _ in range(n)], dtype=float)


def from_individual(individual: Any, mu: int = 1, rng: Optional[random.Random] = None) -> List[np.ndarray]:
    """
    Spawn ``mu`` variants of a seed individual.

    Each variant is the seed scaled element-wise by independently drawn random multipliers: uniform in [0, 1) for
    real-valued individuals, uniform booleans for boolean individuals (i.e., a random subset of the set elements), and
    uniform in [0, 1) rounded back to the element type for integer individuals.

    Parameters
    ----------
    individual : array_like
        The seed individual, a one-dimensional numeric vector.
    mu : int, optional
        The number of variants. Default is 1.
    rng : random.Random, optional
        The random number generator for the multipliers.

    Returns
    -------
    List[numpy.ndarray]
        The ``mu`` independent variants.

    Raises
    ------
    ConfigurationError
        If ``mu`` is smaller than one or the seed is not one-dimensional.
    """
    if mu < 1:
        raise ConfigurationError(f"Population size must be at least 1 but was mu={mu}.")
    seed = np.asarray(individual)
    if seed.ndim != 1:
        raise ConfigurationError(f"Seed individual must be one-dimensional but has shape {seed.shape}.")
    if rng is None:
        rng = random.Random()
    population = []
    for _ in range(mu):
        multipliers = _random_multipliers(seed.dtype, len(seed), rng)
        if np.issubdtype(seed.dtype, np.bool_):
            variant = seed & multipliers
        elif np.issubdtype(seed.dtype, np.integer):
            variant = np.rint(seed * multipliers).astype(seed.dtype)
        else:
            variant = seed * multipliers
        population.append(variant)
    log.debug(f"Spawned {mu} individuals from seed individual of length {len(seed)}.")
    return population


def from_matrix(matrix: Any) -> List[np.ndarray]:
    """
    Slice a matrix of individuals into a population, one individual per column.

    Parameters
    ----------
    matrix : array_like
        Two-dimensional array with dimensions along rows and individuals along columns.

    Returns
    -------
    List[numpy.ndarray]
        The individuals in column order, each an independent copy.

    Raises
    ------
    ConfigurationError
        If the input is not two-dimensional or has no columns.
    """
    matrix = np.asarray(matrix)
    if matrix.ndim != 2:
        raise ConfigurationError(f"Population matrix must be two-dimensional but has shape {matrix.shape}.")
    if matrix.shape[1] == 0:
        raise ConfigurationError("Population matrix has no columns, i.e., no individuals.")
    return [matrix[:, i].copy() for i in range(matrix.shape[1])]


def uniform_creation(rng: Optional[random.Random] = None) -> Callable[[int], np.ndarray]:
    """
    Return a creation function drawing uniform-random real vectors in [0, 1).

    Parameters
    ----------
    rng : random.Random, optional
        The random number generator used by the creation function.

    Returns
    -------
    Callable[[int], numpy.ndarray]
        Function mapping a length ``n`` to a new random vector.
    """
    if rng is None:
        rng = random.Random()

    def creation(n: int) -> np.ndarray:
        return np.array([rng.random() for _ in range(n)])

    return creation


def from_creator(
    n: int,
    mu: int = 1,
    creation: Optional[Callable[[int], Any]] = None,
    rng: Optional[random.Random] = None,
) -> List[Any]:
    """
    Create a population by calling a creation function once per individual.

    Parameters
    ----------
    n : int
        The length of each individual, passed to ``creation``.
    mu : int, optional
        The number of individuals. Default is 1.
    creation : Callable[[int], Any], optional
        The creation function. Default draws uniform-random real vectors from ``rng``.
    rng : random.Random, optional
        The random number generator for the default creation function.

    Returns
    -------
    List[Any]
        The ``mu`` newly created individuals.

    Raises
    ------
    ConfigurationError
        If ``mu`` or ``n`` is smaller than one.
    """
    if mu < 1:
        raise ConfigurationError(f"Population size must be at least 1 but was mu={mu}.")
    if n < 1:
        raise ConfigurationError(f"Individual length must be at least 1 but was n={n}.")
    if creation is None:
        creation = uniform_creation(rng)
    return [creation(n) for _ in range(mu)]
