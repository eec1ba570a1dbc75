"""Benchmark function module."""
from typing import Callable, Sequence, Tuple

import numpy as np


def sphere(x: np.ndarray) -> float:
    """
    Sphere function: continuous, convex, separable, differentiable, unimodal.

    Input domain: -5.12 <= x_i <= 5.12, i = 1,...,N
    Global minimum 0 at (x_i)_N = (0)_N

    Parameters
    ----------
    x : numpy.ndarray
        The function parameters.

    Returns
    -------
    float
        The function value.
    """
    return np.sum(np.asarray(x, dtype=float) ** 2).item()


def rosenbrock(x: np.ndarray) -> float:
    """
    Rosenbrock function. This function has a narrow minimum inside a parabola-shaped valley.

    Input domain: -2.048 <= x_i <= 2.048, i = 1,...,N
    Global minimum 0 at (x_i)_N = (1)_N

    Parameters
    ----------
    x : numpy.ndarray
        The function parameters, at least two.

    Returns
    -------
    float
        The function value.
    """
    x = np.asarray(x, dtype=float)
    return np.sum(100 * (x[1:] - x[:-1] ** 2) ** 2 + (1 - x[:-1]) ** 2).item()


def rastrigin(x: np.ndarray) -> float:
    """
    Rastrigin function: continuous, non-convex, separable, differentiable, multimodal.

    The local minima are located at a rectangular grid with size 1. Their functional values increase with the
    distance to the global minimum.

    Input domain: -5.12 <= x_i <= 5.12, i = 1,...,N
    Global minimum 0 at (x_i)_N = (0)_N

    Parameters
    ----------
    x : numpy.ndarray
        The function parameters.

    Returns
    -------
    float
        The function value.
    """
    a = 10.0
    x = np.asarray(x, dtype=float)
    return (a * len(x) + np.sum(x**2 - a * np.cos(2 * np.pi * x))).item()


def griewank(x: np.ndarray) -> float:
    """
    Griewank function.

    Input domain: -600 <= x_i <= 600, i = 1,...,N
    Global minimum 0 at (x_i)_N = (0)_N

    Parameters
    ----------
    x : numpy.ndarray
        The function parameters.

    Returns
    -------
    float
        The function value.
    """
    x = np.asarray(x, dtype=float)
    idx = np.arange(1, len(x) + 1)
    return (1 + np.sum(x**2) / 4000 - np.prod(np.cos(x / np.sqrt(idx)))).item()


def knapsack(mass: Sequence[float], utility: Sequence[float], capacity: float) -> Callable[[np.ndarray], float]:
    """
    Build a 0/1 knapsack objective to be maximized.

    Parameters
    ----------
    mass : Sequence[float]
        The mass of each object.
    utility : Sequence[float]
        The utility of each object.
    capacity : float
        The maximum total mass.

    Returns
    -------
    Callable[[numpy.ndarray], float]
        Function mapping a selection vector to its total utility, or 0 if the selection exceeds the capacity.
    """
    mass = np.asarray(mass, dtype=float)
    utility = np.asarray(utility, dtype=float)
    if mass.shape != utility.shape:
        raise ValueError(f"Got {len(mass)} masses but {len(utility)} utilities.")

    def total_utility(selection: np.ndarray) -> float:
        selection = np.asarray(selection, dtype=float)
        if np.sum(mass * selection) > capacity:
            return 0.0
        return np.sum(utility * selection).item()

    return total_utility


def get_function_search_space(fname: str) -> Tuple[Callable[[np.ndarray], float], Tuple[float, float]]:
    """
    Get function and per-dimension search-space limits from function name.

    Parameters
    ----------
    fname : str
        The function name.

    Returns
    -------
    Callable
        The callable function.
    Tuple[float, float]
        The lower and upper limit of each dimension.

    Raises
    ------
    ValueError
        If the function name is unknown.
    """
    if fname == "sphere":
        return sphere, (-5.12, 5.12)
    elif fname == "rosenbrock":
        return rosenbrock, (-2.048, 2.048)
    elif fname == "rastrigin":
        return rastrigin, (-5.12, 5.12)
    elif fname == "griewank":
        return griewank, (-600.0, 600.0)
    else:
        raise ValueError(f"Invalid function name {fname}.")
