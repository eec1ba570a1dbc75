import random

import numpy as np
import pytest

from mulambda import ConfigurationError, from_creator, from_individual, from_matrix


def test_from_individual_real():
    """Test spawning scaled variants of a real-valued seed individual."""
    rng = random.Random(42)
    seed = np.array([1.0, 2.0, 4.0])
    population = from_individual(seed, mu=5, rng=rng)
    assert len(population) == 5
    for ind in population:
        assert ind.shape == seed.shape
        assert np.all(ind >= 0.0)
        assert np.all(ind < seed)
    # Every variant is drawn independently.
    assert not np.array_equal(population[0], population[1])


def test_from_individual_bool():
    """Test that boolean seeds are scaled by random subsets."""
    rng = random.Random(42)
    seed = np.array([True, False, True, True])
    population = from_individual(seed, mu=20, rng=rng)
    for ind in population:
        assert ind.dtype == bool
        assert not np.any(ind & ~seed)


def test_from_individual_int():
    """Test that integer seeds keep their element type."""
    population = from_individual(np.array([10, 20, 30]), mu=3, rng=random.Random(42))
    for ind in population:
        assert np.issubdtype(ind.dtype, np.integer)
        assert np.all((ind >= 0) & (ind <= [10, 20, 30]))


def test_from_individual_invalid():
    """Test that fewer than one variant is rejected."""
    with pytest.raises(ConfigurationError):
        from_individual(np.ones(3), mu=0)
    with pytest.raises(ConfigurationError):
        from_individual(np.ones((3, 3)), mu=2)


def test_from_matrix():
    """Test slicing a matrix into one individual per column without aliasing."""
    matrix = np.arange(12.0).reshape(3, 4)
    population = from_matrix(matrix)
    assert len(population) == 4
    for i, ind in enumerate(population):
        assert np.array_equal(ind, matrix[:, i])
    population[0][0] = -1.0
    assert matrix[0, 0] == 0.0
    assert population[1][0] == 1.0


def test_from_matrix_invalid():
    """Test that non-matrix input is rejected."""
    with pytest.raises(ConfigurationError):
        from_matrix(np.ones(3))
    with pytest.raises(ConfigurationError):
        from_matrix(np.ones((3, 0)))


def test_from_creator_default():
    """Test the default uniform-random creation function."""
    population = from_creator(4, mu=6, rng=random.Random(42))
    assert len(population) == 6
    for ind in population:
        assert ind.shape == (4,)
        assert np.all((ind >= 0.0) & (ind < 1.0))
    population[0][0] = 5.0
    assert all(ind[0] < 1.0 for ind in population[1:])


def test_from_creator_calls():
    """Test that the creation function is called once per individual."""
    calls = []

    def creation(n):
        calls.append(n)
        return np.zeros(n, dtype=bool)

    population = from_creator(7, mu=3, creation=creation)
    assert calls == [7, 7, 7]
    assert len(population) == 3
    population[0][0] = True
    assert not population[1][0] and not population[2][0]


def test_from_creator_invalid():
    """Test that invalid population sizes and lengths are rejected."""
    with pytest.raises(ConfigurationError):
        from_creator(3, mu=0)
    with pytest.raises(ConfigurationError):
        from_creator(0, mu=2)
