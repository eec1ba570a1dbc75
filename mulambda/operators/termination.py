from typing import Any

import numpy as np


def never(strategy: Any) -> bool:
    """Never terminate early, i.e., run until the generation limit."""
    return False


class SigmaTolerance:
    """
    Terminate once all step sizes of the best strategy have shrunk below a tolerance.

    Attributes
    ----------
    tol : float
        The step-size tolerance.
    """

    def __init__(self, tol: float = 1e-8) -> None:
        """
        Initialize the step-size termination criterion.

        Parameters
        ----------
        tol : float, optional
            The step-size tolerance. Default is 1e-8.

        Raises
        ------
        ValueError
            If the tolerance is not positive.
        """
        if tol <= 0:
            raise ValueError(f"Tolerance must be positive but was {tol}.")
        self.tol = tol

    def __call__(self, strategy: Any) -> bool:
        """Check whether every ``sigma`` of the strategy is below the tolerance."""
        return bool(np.all(np.asarray(strategy["sigma"]) < self.tol))

    def __repr__(self) -> str:
        """Return string representation of a ``SigmaTolerance`` instance."""
        return f"SigmaTolerance(tol={self.tol})"
