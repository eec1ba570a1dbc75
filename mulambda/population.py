from typing import Any, Generic, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")  # Individual type
S = TypeVar("S")  # Strategy type


def ranking(fitness: np.ndarray, maximize: bool = False) -> np.ndarray:
    """
    Return the indices that order fitness values from best to worst.

    The sort is stable, i.e., of two equally fit entries the one with the lower index is ranked first. NaN fitness
    values are always ranked last.

    Parameters
    ----------
    fitness : numpy.ndarray
        The fitness values.
    maximize : bool, optional
        If True, higher fitness is better. Default is False.

    Returns
    -------
    numpy.ndarray
        The rank-ordered indices.
    """
    fitness = np.asarray(fitness, dtype=float)
    return np.argsort(-fitness if maximize else fitness, kind="stable")


class Population(Generic[T, S]):
    """
    Ordered collection of (individual, strategy, fitness) triples.

    The same structure is used for the parent population of size mu and for the offspring buffer of size lambda.
    Individuals and strategies are opaque to the population, it only moves them between slots.

    Attributes
    ----------
    individuals : List[T]
        The individuals, i.e., candidate solutions.
    strategies : List[S]
        The strategy parameters, one per individual.
    fitness : numpy.ndarray
        The fitness values, one per individual.

    Methods
    -------
    rank()
        Reorder the population from best to worst.
    select_plus()
        Select survivors from parents and offspring.
    select_comma()
        Select survivors from offspring only.
    """

    def __init__(
        self,
        individuals: Sequence[T],
        strategies: Sequence[S],
        fitness: Optional[Sequence[float]] = None,
    ) -> None:
        """
        Initialize a population.

        Parameters
        ----------
        individuals : Sequence[T]
            The individuals.
        strategies : Sequence[S]
            The strategies, associated with the individuals by position.
        fitness : Sequence[float], optional
            The fitness values. Default is ``inf`` for every individual, i.e., not yet evaluated.

        Raises
        ------
        ValueError
            If the numbers of individuals, strategies, and fitness values differ.
        """
        self.individuals: List[T] = list(individuals)
        self.strategies: List[S] = list(strategies)
        if fitness is None:
            fitness = np.full(len(self.individuals), np.inf)
        self.fitness = np.array(fitness, dtype=float)
        if not len(self.individuals) == len(self.strategies) == len(self.fitness):
            raise ValueError(
                f"Got {len(self.individuals)} individuals, {len(self.strategies)} strategies, "
                f"and {len(self.fitness)} fitness values."
            )

    def __len__(self) -> int:
        """Return number of slots."""
        return len(self.individuals)

    def __getitem__(self, idx: int) -> Tuple[T, S, float]:
        """Return triple in given slot."""
        return self.individuals[idx], self.strategies[idx], float(self.fitness[idx])

    def __repr__(self) -> str:
        """Return string representation of a ``Population`` instance."""
        return f"Population(size={len(self)}, fitness={self.fitness})"

    def _take(self, others: Sequence["Population[T, S]"], idx: np.ndarray) -> None:
        """Fill this population in place with the triples at ``idx`` of the concatenated ``others``."""
        individuals: List[Any] = []
        strategies: List[Any] = []
        for pop in others:
            individuals.extend(pop.individuals)
            strategies.extend(pop.strategies)
        fitness = np.concatenate([pop.fitness for pop in others])
        self.individuals[:] = [individuals[i] for i in idx]
        self.strategies[:] = [strategies[i] for i in idx]
        self.fitness = fitness[idx]

    def rank(self, maximize: bool = False) -> None:
        """
        Reorder slots in place so that slot 0 holds the best individual.

        Parameters
        ----------
        maximize : bool, optional
            If True, higher fitness is better. Default is False.
        """
        self._take([self], ranking(self.fitness, maximize))

    def select_plus(self, offspring: "Population[T, S]", maximize: bool = False) -> None:
        """
        Plus-selection: keep the best ``len(self)`` triples out of parents and offspring.

        Parents are ranked before offspring, so a parent survives an exact fitness tie with an offspring. Surviving
        triples are carried over unchanged, the result is ordered from best to worst.

        Parameters
        ----------
        offspring : Population
            The evaluated offspring.
        maximize : bool, optional
            If True, higher fitness is better. Default is False.
        """
        mu = len(self)
        idx = ranking(np.concatenate([self.fitness, offspring.fitness]), maximize)[:mu]
        self._take([self, offspring], idx)

    def select_comma(self, offspring: "Population[T, S]", maximize: bool = False) -> None:
        """
        Comma-selection: replace all parents by the best ``len(self)`` offspring.

        Parameters
        ----------
        offspring : Population
            The evaluated offspring, at least as many as there are parents.
        maximize : bool, optional
            If True, higher fitness is better. Default is False.

        Raises
        ------
        ValueError
            If there are fewer offspring than parents.
        """
        mu = len(self)
        if len(offspring) < mu:
            raise ValueError(f"Has to have at least {mu} offspring to select {mu} parents from them.")
        self._take([offspring], ranking(offspring.fitness, maximize)[:mu])
