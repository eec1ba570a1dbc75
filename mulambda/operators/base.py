import random
from typing import Any, Optional

import numpy as np


class Operator:
    """
    Abstract base class for all stochastic evolutionary operators.

    An operator is a callable transforming individuals or strategies. Stateless operators are plain functions, classes
    deriving from ``Operator`` carry their own random number generator.

    Attributes
    ----------
    rng : random.Random
        The separate random number generator for the operator.

    Methods
    -------
    __call__()
        Apply the operator.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        """
        Initialize an operator.

        Parameters
        ----------
        rng : random.Random, optional
            The separate random number generator for the operator.
        """
        if rng is None:
            rng = random.Random()
        self.rng = rng  # Random number generator

    def _normal(self, size: int) -> np.ndarray:
        """Draw ``size`` independent standard-normal samples."""
        return np.array([self.rng.gauss(0.0, 1.0) for _ in range(size)])

    def __call__(self, *args: Any) -> Any:
        """
        Apply the operator (not implemented for abstract base class).

        Raises
        ------
        NotImplementedError
            Whenever called (abstract base class method).
        """
        raise NotImplementedError()

    def __repr__(self) -> str:
        """Return string representation of an operator."""
        return f"{self.__class__.__name__}()"
