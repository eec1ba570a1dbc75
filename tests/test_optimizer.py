import logging
import random
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from mulambda import ConfigurationError, EvolutionStrategy, History, Strategy, es, isotropic_strategy
from mulambda.operators import IsotropicMutation, IsotropicSigma, SigmaTolerance, average, average_strategy
from mulambda.utils import set_logger_config
from mulambda.utils.benchmark_functions import get_function_search_space, sphere

log = logging.getLogger()  # Get root logger instance.


class CountingObjective:
    """Sphere objective counting its calls."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, x: np.ndarray) -> float:
        self.calls += 1
        return sphere(x)


def self_adaptive_es(seed: int, **kwargs):
    """Set up a self-adaptive ES on the 5-dimensional sphere with all randomness derived from ``seed``."""
    rng = random.Random(seed)
    options = dict(
        init_strategy=isotropic_strategy(5, sigma=1.0),
        mutation=IsotropicMutation(rng=rng),
        smutation=IsotropicSigma(rng=rng),
        rng=rng,
    )
    options.update(kwargs)
    population = [np.array([rng.uniform(-5.12, 5.12) for _ in range(5)]) for _ in range(4)]
    return sphere, population, options


@pytest.fixture(params=["plus", "comma"])
def selection(request: pytest.FixtureRequest) -> str:
    """Iterate over selection schemes."""
    return request.param


@pytest.mark.parametrize(
    "options, size",
    [
        (dict(mu=2, rho=3), 4),  # rho > mu
        (dict(mu=3, lambda_=3, selection="comma"), 4),  # comma with mu >= lambda
        (dict(mu=5), 4),  # population smaller than mu
        (dict(selection="elitist"), 4),
        (dict(extremum="median"), 4),
        (dict(maxiter=0), 4),
        (dict(lambda_=0), 4),
        (dict(rho=0), 4),
    ],
)
def test_invalid_configuration(options, size):
    """Test that invalid configurations fail before the objective is called even once."""
    objective = CountingObjective()
    population = [np.ones(2) for _ in range(size)]
    with pytest.raises(ConfigurationError):
        EvolutionStrategy(objective, **options).optimize(population)
    assert objective.calls == 0


def test_configuration_error_is_value_error():
    """Test that configuration errors can be handled as value errors."""
    with pytest.raises(ValueError):
        es(sphere, [np.ones(2)], mu=2)


def test_truncate_population():
    """Test that only the first mu individuals are used."""
    objective = CountingObjective()
    population = [np.full(2, float(i)) for i in range(6)]
    result = EvolutionStrategy(objective, mu=3, rho=1, maxiter=2).optimize(population)
    assert objective.calls == 3 + 2
    assert np.array_equal(result.individual, np.zeros(2))


def test_maxiter():
    """Test that exactly maxiter generations are run if the termination criterion never holds."""
    objective = CountingObjective()
    best, fitness, generations, history = es(objective, [np.ones(2), np.zeros(2)], lambda_=3, maxiter=7)
    assert generations == 7
    assert objective.calls == 2 + 7 * 3
    assert isinstance(history, History)
    assert len(history) == 0
    assert fitness == 0.0


def test_default_maxiter():
    """Test that the generation limit defaults to 100 generations per initial individual."""
    _, _, generations, _ = es(sphere, [np.ones(2), np.zeros(2)])
    assert generations == 200


def test_termination():
    """Test that the termination predicate on the best strategy stops the run early."""
    sphere_fn, population, options = self_adaptive_es(42, lambda_=10, maxiter=10000)
    result = es(sphere_fn, population, termination=SigmaTolerance(1e-3), **options)
    assert result.generations < 10000

    _, _, generations, _ = es(sphere, [np.ones(2)], termination=lambda s: True, maxiter=50)
    assert generations == 1


def test_plus_monotonic():
    """Test that plus-selection never loses the best individual."""
    sphere_fn, population, options = self_adaptive_es(42, mu=4, rho=2, lambda_=12, maxiter=100, interim=True)
    options.update(recombination=average, srecombination=average_strategy)
    best, fitness, generations, history = es(sphere_fn, population, **options)
    best_per_generation = np.array([f[0] for f in history["fitness"]])
    assert len(best_per_generation) == generations + 1
    assert np.all(np.diff(best_per_generation) <= 0.0)
    assert fitness == best_per_generation[-1]
    assert fitness == pytest.approx(sphere(best))
    assert fitness < best_per_generation[0]


def test_comma_may_regress():
    """Test that comma-selection discards parents even if all offspring are worse."""
    population = [np.zeros(1)]
    worsen = lambda x, s: x + 1.0  # noqa: E731
    objective = lambda x: float(x[0])  # noqa: E731

    _, fitness, _, history = es(objective, population, mutation=worsen, lambda_=2, selection="comma", maxiter=3, interim=True)
    best_per_generation = [f[0] for f in history["fitness"]]
    assert best_per_generation == [0.0, 1.0, 2.0, 3.0]
    assert fitness == 3.0

    best, fitness, _, _ = es(objective, population, mutation=worsen, lambda_=2, selection="plus", maxiter=3)
    assert fitness == 0.0
    assert np.array_equal(best, np.zeros(1))


def test_population_size(selection):
    """Test that the parent population has exactly mu individuals after every generation."""
    sphere_fn, population, options = self_adaptive_es(
        42, mu=3, rho=1, lambda_=9, selection=selection, maxiter=20, interim=True
    )
    _, _, generations, history = es(sphere_fn, population, **options)
    assert len(history["fitness"]) == generations + 1
    assert all(len(f) == 3 for f in history["fitness"])
    assert len(history["offspring_fitness"]) == generations
    assert all(len(f) == 9 for f in history["offspring_fitness"])


def test_ranked_population(selection):
    """Test that the recorded parent fitness is always ordered from best to worst."""
    sphere_fn, population, options = self_adaptive_es(
        7, mu=3, rho=2, lambda_=6, selection=selection, maxiter=15, interim=True
    )
    _, _, _, history = es(sphere_fn, population, **options)
    for f in history["fitness"]:
        assert np.all(np.diff(f) >= 0.0)


def test_determinism():
    """Test that seeded runs are exactly reproducible."""
    results = []
    for _ in range(2):
        rng = random.Random(123)
        result = es(
            sphere,
            [np.array([1.0, -2.0, 3.0])],
            init_strategy=Strategy(sigma=0.5, tau=0.3),
            mutation=IsotropicMutation(rng=rng),
            smutation=IsotropicSigma(rng=rng),
            mu=1,
            rho=1,
            lambda_=1,
            maxiter=30,
            interim=True,
            rng=rng,
        )
        results.append(result)
    assert np.array_equal(results[0].individual, results[1].individual)
    assert results[0].fitness == results[1].fitness
    assert np.array_equal(results[0].history["offspring_fitness"], results[1].history["offspring_fitness"])


def test_maximize():
    """Test that maximization keeps the individual with the highest fitness."""
    rng = random.Random(42)
    objective = lambda x: -sphere(x - 1.0)  # noqa: E731
    best, fitness, _, _ = es(
        objective,
        [np.zeros(2), np.full(2, 3.0)],
        init_strategy=isotropic_strategy(2, 0.5),
        mutation=IsotropicMutation(rng=rng),
        smutation=IsotropicSigma(rng=rng),
        lambda_=10,
        extremum="max",
        maxiter=100,
        rng=rng,
    )
    assert fitness > -0.1
    assert np.allclose(best, 1.0, atol=0.3)


def test_no_aliasing():
    """Test that in-place mutations of recombinants never change the parents."""
    parent = np.zeros(2)

    def mutate_in_place(x, s):
        x += 1.0
        return x

    best, fitness, _, _ = es(sphere, [parent], mutation=mutate_in_place, lambda_=3, maxiter=2)
    assert np.array_equal(parent, np.zeros(2))
    assert np.array_equal(best, np.zeros(2))
    assert fitness == 0.0


def test_skip_initial_evaluation():
    """Test that the initial population can be used without evaluating it."""
    objective = CountingObjective()
    result = EvolutionStrategy(objective, evaluate_initial=False, lambda_=2, maxiter=3, interim=True).optimize(
        [np.ones(2), np.ones(2)]
    )
    assert objective.calls == 3 * 2
    assert np.all(np.isinf(result.history["fitness"][0]))
    assert result.fitness == 2.0


def test_parallel_map():
    """Test that evaluating offspring with a parallel map does not change the results."""
    results = []
    for map_fn in [map, None]:
        sphere_fn, population, options = self_adaptive_es(3, mu=2, rho=1, lambda_=8, maxiter=25)
        if map_fn is None:
            with ThreadPoolExecutor(max_workers=4) as executor:
                results.append(es(sphere_fn, population, map_fn=executor.map, **options))
        else:
            results.append(es(sphere_fn, population, map_fn=map_fn, **options))
    assert np.array_equal(results[0].individual, results[1].individual)
    assert results[0].fitness == results[1].fitness


def test_objective_errors_propagate():
    """Test that failures in caller-supplied callables abort the run unmodified."""

    def broken(x):
        raise RuntimeError("broken objective")

    with pytest.raises(RuntimeError, match="broken objective"):
        es(broken, [np.ones(2)])

    def broken_mutation(x, s):
        raise KeyError("sigma")

    with pytest.raises(KeyError):
        es(sphere, [np.ones(2)], mutation=broken_mutation)


@pytest.mark.parametrize("fname", ["sphere", "rastrigin", "griewank"])
def test_benchmark_functions(fname):
    """Test a (4/2+20)-ES on benchmark functions."""
    set_logger_config(level=logging.DEBUG)
    function, (low, high) = get_function_search_space(fname)
    rng = random.Random(42)
    population = np.array([[rng.uniform(low, high) for _ in range(4)] for _ in range(3)])
    initial_best = min(function(population[:, i]) for i in range(4))
    result = es(
        function,
        population,
        init_strategy=isotropic_strategy(3, sigma=(high - low) / 10),
        mutation=IsotropicMutation(rng=rng),
        smutation=IsotropicSigma(rng=rng),
        rho=2,
        lambda_=20,
        maxiter=50,
        rng=rng,
    )
    assert result.fitness <= initial_best
    log.handlers.clear()


def test_mutation_uses_mutated_strategy():
    """Test that the individual mutation is controlled by the strategy returned from the strategy mutation."""
    seen = []

    def record(x, s):
        seen.append(s["k"])
        return x

    es(
        sphere,
        [np.ones(2)],
        init_strategy=Strategy(k=0),
        smutation=lambda s: s.replace(k=s["k"] + 1),
        mutation=record,
        lambda_=3,
        maxiter=1,
    )
    assert seen == [1, 1, 1]


@pytest.mark.parametrize("extremum, expected", [("min", -1.0), ("max", 7.0)])
def test_termination_sees_best_strategy(extremum, expected):
    """Test that the termination predicate gets the strategy of the fittest survivor."""
    tags = iter([5.0, -1.0, 7.0])
    seen = []

    def terminate(s):
        seen.append(s["tag"])
        return False

    result = es(
        lambda x: float(x[0]),
        [np.full(1, 2.0), np.full(1, 4.0)],
        init_strategy=Strategy(tag=0.0),
        smutation=lambda s: s.replace(tag=next(tags)),
        mutation=lambda x, s: np.full(1, s["tag"]),  # Fitness of an offspring equals its strategy tag.
        termination=terminate,
        rho=1,
        lambda_=3,
        extremum=extremum,
        maxiter=1,
    )
    assert seen == [expected]
    assert result.fitness == expected


def test_invalid_logging_interval():
    """Test that a non-positive logging interval fails before the objective is called."""
    objective = CountingObjective()
    with pytest.raises(ConfigurationError):
        EvolutionStrategy(objective, maxiter=2).optimize([np.ones(2)], logging_interval=0)
    assert objective.calls == 0


@pytest.mark.parametrize("population", [[np.ones(2)], np.ones(2), np.ones((2, 3))])
def test_creation_requires_size(population):
    """Test that a creation function is rejected for populations not given by their individual length."""
    objective = CountingObjective()
    with pytest.raises(ConfigurationError):
        es(objective, population, creation=lambda n: np.zeros(n))
    assert objective.calls == 0
