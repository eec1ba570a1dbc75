import logging
import random
from typing import Any, Callable, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from ._errors import ConfigurationError
from .bootstrap import from_creator, from_individual, from_matrix
from .history import FITNESS_KEY, OFFSPRING_FITNESS_KEY, History
from .operators import first, first_strategy, identity, identity_strategy, never
from .population import Population
from .strategy import Strategy

log = logging.getLogger(__name__)  # Get logger instance.

SELECTIONS = ("plus", "comma")
EXTREMA = ("min", "max")


class ESResult(NamedTuple):
    """Outcome of an evolution strategy run."""

    individual: Any  # Best individual of the final parent population
    fitness: float  # Its fitness
    generations: int  # Number of completed generations
    history: History  # Per-generation snapshots, empty unless interim tracking was requested


class EvolutionStrategy:
    """
    (mu/rho(+,)lambda)-evolution strategy.

    Each generation, lambda offspring are bred from the mu parents. For every offspring, rho distinct parents are
    drawn uniformly at random, their strategies and individuals are recombined, the recombinant strategy is mutated,
    and the recombinant individual is mutated under control of the mutated strategy. After evaluating all offspring,
    mu survivors are selected deterministically, either from parents and offspring (plus) or from the offspring only
    (comma).

    Individuals and strategies are opaque to the optimizer. They are only passed through the configured operators.

    Attributes
    ----------
    objective : Callable[[Any], float]
        The objective function mapping an individual to its fitness.
    init_strategy : Any
        The strategy every initial population slot starts with.
    recombination : Callable[[Sequence[Any]], Any]
        The individual recombination, mapping the selected parents to a recombinant that shares no storage with them.
    srecombination : Callable[[Sequence[Any]], Any]
        The strategy recombination.
    mutation : Callable[[Any, Any], Any]
        The individual mutation, parameterized by the mutated strategy.
    smutation : Callable[[Any], Any]
        The strategy mutation.
    termination : Callable[[Any], bool]
        The termination predicate evaluated on the best strategy after each generation.
    mu : int, optional
        The number of parents. None means the size of the initial population.
    rho : int, optional
        The number of parents recombined into one offspring. None means mu.
    lambda_ : int
        The number of offspring per generation.
    selection : str
        The selection scheme, ``"plus"`` or ``"comma"``.
    extremum : str
        The optimization direction, ``"min"`` or ``"max"``.
    maxiter : int, optional
        The maximum number of generations. None means 100 times the size of the initial population.
    interim : bool
        Whether to record per-generation fitness snapshots.
    evaluate_initial : bool
        Whether to evaluate the initial population. If False, initial parents get the worst possible fitness.
    map_fn : Callable
        The map used to evaluate the offspring of one generation, e.g., ``concurrent.futures.Executor.map``.
    rng : random.Random
        The separate random number generator for parent selection.

    Methods
    -------
    optimize()
        Run the evolution strategy on an initial population.
    """

    def __init__(
        self,
        objective: Callable[[Any], float],
        init_strategy: Any = None,
        recombination: Callable[[Sequence[Any]], Any] = first,
        srecombination: Callable[[Sequence[Any]], Any] = first_strategy,
        mutation: Callable[[Any, Any], Any] = identity,
        smutation: Callable[[Any], Any] = identity_strategy,
        termination: Callable[[Any], bool] = never,
        mu: Optional[int] = None,
        rho: Optional[int] = None,
        lambda_: int = 1,
        selection: str = "plus",
        extremum: str = "min",
        maxiter: Optional[int] = None,
        interim: bool = False,
        evaluate_initial: bool = True,
        map_fn: Callable[..., Iterable[float]] = map,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize the evolution strategy with given configuration.

        The configuration is validated against the initial population when :meth:`optimize` is called.

        Parameters
        ----------
        objective : Callable[[Any], float]
            The objective function. It must not modify the individual it is called with.
        init_strategy : Any, optional
            The initial strategy. Default is an empty ``Strategy``.
        recombination : Callable[[Sequence[Any]], Any], optional
            The individual recombination. Default returns an independent copy of the first selected parent.
        srecombination : Callable[[Sequence[Any]], Any], optional
            The strategy recombination. Default returns the first selected strategy.
        mutation : Callable[[Any, Any], Any], optional
            The individual mutation. Default is the identity.
        smutation : Callable[[Any], Any], optional
            The strategy mutation. Default is the identity.
        termination : Callable[[Any], bool], optional
            The termination predicate on the best strategy. Default never terminates.
        mu : int, optional
            The number of parents. Default is the size of the initial population.
        rho : int, optional
            The number of parents per offspring. Default is mu.
        lambda_ : int, optional
            The number of offspring. Default is 1.
        selection : str, optional
            ``"plus"`` or ``"comma"``. Default is ``"plus"``.
        extremum : str, optional
            ``"min"`` or ``"max"``. Default is ``"min"``.
        maxiter : int, optional
            The maximum number of generations. Default is 100 times the size of the initial population.
        interim : bool, optional
            Record per-generation fitness snapshots. Default is False.
        evaluate_initial : bool, optional
            Evaluate the initial population. Default is True.
        map_fn : Callable, optional
            The map evaluating the offspring. Default is the built-in ``map``.
        rng : random.Random, optional
            The separate random number generator for parent selection.
        """
        self.objective = objective
        self.init_strategy = Strategy() if init_strategy is None else init_strategy
        self.recombination = recombination
        self.srecombination = srecombination
        self.mutation = mutation
        self.smutation = smutation
        self.termination = termination
        self.mu = mu
        self.rho = rho
        self.lambda_ = lambda_
        self.selection = selection
        self.extremum = extremum
        self.maxiter = maxiter
        self.interim = interim
        self.evaluate_initial = evaluate_initial
        self.map_fn = map_fn
        if rng is None:
            rng = random.Random()
        self.rng = rng

    @property
    def maximize(self) -> bool:
        """Whether higher fitness is better."""
        return self.extremum == "max"

    def _validate(self, population: Sequence[Any]) -> Tuple[int, int, int]:
        """
        Check the configuration against the initial population and resolve defaults.

        Parameters
        ----------
        population : Sequence[Any]
            The initial population.

        Returns
        -------
        Tuple[int, int, int]
            The resolved mu, rho, and maxiter.

        Raises
        ------
        ConfigurationError
            If the configuration is invalid.
        """
        mu = len(population) if self.mu is None else self.mu
        rho = mu if self.rho is None else self.rho
        maxiter = 100 * len(population) if self.maxiter is None else self.maxiter

        if self.selection not in SELECTIONS:
            raise ConfigurationError(f"Unknown selection '{self.selection}', expected one of {SELECTIONS}.")
        if self.extremum not in EXTREMA:
            raise ConfigurationError(f"Unknown extremum '{self.extremum}', expected one of {EXTREMA}.")
        if mu < 1:
            raise ConfigurationError(f"Number of parents must be at least 1 but was mu={mu}.")
        if self.lambda_ < 1:
            raise ConfigurationError(f"Number of offspring must be at least 1 but was lambda={self.lambda_}.")
        if rho < 1 or rho > mu:
            raise ConfigurationError(
                f"Number of parents involved in the procreation of an offspring must be within [1, mu={mu}] "
                f"but was rho={rho}."
            )
        if self.selection == "comma" and mu >= self.lambda_:
            raise ConfigurationError(
                f"Comma selection requires more offspring than parents but mu={mu} >= lambda={self.lambda_}."
            )
        if maxiter < 1:
            raise ConfigurationError(f"Maximum number of generations must be at least 1 but was maxiter={maxiter}.")
        if len(population) < mu:
            raise ConfigurationError(f"Population size {len(population)} cannot be less than mu={mu}.")
        return mu, rho, maxiter

    def _select_parents(self, mu: int, rho: int) -> List[int]:
        """Draw ``rho`` distinct parent indices uniformly at random."""
        if rho == 1:
            return [self.rng.randrange(mu)]
        return self.rng.sample(range(mu), rho)

    def _breed(self, parents: Population, rho: int) -> Population:
        """
        Breed ``lambda_`` unevaluated offspring from the current parents.

        Parameters
        ----------
        parents : Population
            The current parent population.
        rho : int
            The number of parents per offspring.

        Returns
        -------
        Population
            The offspring with ``inf`` placeholder fitness.
        """
        individuals, strategies = [], []
        for _ in range(self.lambda_):
            idx = self._select_parents(len(parents), rho)
            recombinant_strategy = self.srecombination([parents.strategies[i] for i in idx])
            recombinant = self.recombination([parents.individuals[i] for i in idx])
            # The mutated strategy controls the mutation of the individual.
            strategy = self.smutation(recombinant_strategy)
            individuals.append(self.mutation(recombinant, strategy))
            strategies.append(strategy)
        return Population(individuals, strategies)

    def _evaluate(self, individuals: Sequence[Any]) -> np.ndarray:
        """Evaluate the objective on each individual, keeping the order."""
        return np.array([float(f) for f in self.map_fn(self.objective, individuals)], dtype=float)

    def optimize(self, population: Sequence[Any], logging_interval: int = 10) -> ESResult:
        """
        Run the evolution strategy.

        Parameters
        ----------
        population : Sequence[Any]
            The initial individuals. If there are more than mu, only the first mu are used.
        logging_interval : int, optional
            Log progress every ``logging_interval``-th generation. Default is 10.

        Returns
        -------
        ESResult
            The best individual, its fitness, the number of generations, and the history store.

        Raises
        ------
        ConfigurationError
            If the configuration or the logging interval is invalid. Nothing is evaluated in this case.
        """
        if logging_interval < 1:
            raise ConfigurationError(f"Logging interval must be at least 1 but was {logging_interval}.")
        population = list(population)
        mu, rho, maxiter = self._validate(population)
        maximize = self.maximize
        history = History(self.interim)

        log.info(
            f"Starting ({mu}/{rho}{'+' if self.selection == 'plus' else ','}{self.lambda_})-ES "
            f"({'maximization' if maximize else 'minimization'}, at most {maxiter} generations)."
        )

        # Initialize parent population.
        individuals = population[:mu]
        if self.evaluate_initial:
            fitness = self._evaluate(individuals)
        else:
            fitness = np.full(mu, -np.inf if maximize else np.inf)
        parents = Population(individuals, [self.init_strategy] * mu, fitness)
        parents.rank(maximize)
        history.keep(FITNESS_KEY, parents.fitness)

        # Generation cycle
        generation = 0
        while True:
            offspring = self._breed(parents, rho)
            offspring.fitness = self._evaluate(offspring.individuals)

            if self.selection == "plus":
                parents.select_plus(offspring, maximize)
            else:
                parents.select_comma(offspring, maximize)
            history.keep(FITNESS_KEY, parents.fitness)
            history.keep(OFFSPRING_FITNESS_KEY, offspring.fitness)

            generation += 1
            log.debug("Generation %d: best fitness %s, strategy %s", generation, parents.fitness[0], parents.strategies[0])
            if generation % logging_interval == 0:
                log.info(f"Generation {generation}: best fitness {parents.fitness[0]}")
            if generation == maxiter or self.termination(parents.strategies[0]):
                break

        best, _, best_fitness = parents[0]
        log.info(f"OPTIMIZATION DONE after {generation} generations. Best fitness {best_fitness}.")
        return ESResult(best, best_fitness, generation, history)


def es(
    objective: Callable[[Any], float],
    population: Union[int, np.ndarray, Sequence[Any]],
    mu: Optional[int] = None,
    creation: Optional[Callable[[int], Any]] = None,
    rng: Optional[random.Random] = None,
    **kwargs: Any,
) -> ESResult:
    """
    Optimize ``objective`` with a (mu/rho(+,)lambda)-evolution strategy.

    The initial population can be given in four forms:

    - an ``int`` N: mu individuals of length N are created with ``creation`` (default: uniform-random real vectors),
    - a two-dimensional array: one individual per column,
    - a one-dimensional array: mu variants of this seed individual are spawned by random scaling,
    - any other sequence: the individuals themselves.

    For the first and third form, mu defaults to 1.

    Parameters
    ----------
    objective : Callable[[Any], float]
        The objective function.
    population : int | numpy.ndarray | Sequence[Any]
        The initial population in one of the forms above.
    mu : int, optional
        The number of parents.
    creation : Callable[[int], Any], optional
        The creation function for the ``int`` form. Only valid together with an ``int`` population.
    rng : random.Random, optional
        The separate random number generator, used for bootstrapping and for the optimization.
    kwargs : Any
        Further configuration passed to :class:`EvolutionStrategy`.

    Returns
    -------
    ESResult
        The best individual, its fitness, the number of generations, and the history store. Unpacks as a tuple.

    Raises
    ------
    ConfigurationError
        If ``creation`` is given for a population that is not an ``int``, or if the configuration is invalid.
    """
    if rng is None:
        rng = random.Random()
    is_size = isinstance(population, (int, np.integer)) and not isinstance(population, bool)
    if creation is not None and not is_size:
        raise ConfigurationError("A creation function can only be used with an individual length as population.")
    if is_size:
        mu = 1 if mu is None else mu
        population = from_creator(int(population), mu, creation, rng)
    elif isinstance(population, np.ndarray) and population.ndim == 2:
        population = from_matrix(population)
    elif isinstance(population, np.ndarray) and population.ndim == 1:
        mu = 1 if mu is None else mu
        population = from_individual(population, mu, rng)
    return EvolutionStrategy(objective, mu=mu, rng=rng, **kwargs).optimize(population)
