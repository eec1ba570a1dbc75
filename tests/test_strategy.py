import numpy as np
import pytest

from mulambda import Strategy, anisotropic_strategy, isotropic_strategy


def test_strategy_mapping():
    """Test that strategies behave like read-only mappings."""
    s = Strategy(sigma=1.0, tau=0.5)
    assert len(s) == 2
    assert s["sigma"] == 1.0
    assert set(s.keys()) == {"sigma", "tau"}
    with pytest.raises(TypeError):
        s["sigma"] = 2.0  # type: ignore[index]


def test_strategy_replace():
    """Test that replacing parameters returns a new strategy and leaves the original untouched."""
    s = Strategy(sigma=1.0, tau=0.5)
    t = s.replace(sigma=2.0)
    assert s["sigma"] == 1.0
    assert t["sigma"] == 2.0
    assert t["tau"] == 0.5


def test_strategy_equality():
    """Test equality of strategies with array-valued parameters."""
    assert Strategy(sigma=np.ones(3)) == Strategy(sigma=np.ones(3))
    assert Strategy(sigma=np.ones(3)) != Strategy(sigma=np.zeros(3))
    assert Strategy(sigma=1.0) != Strategy(step=1.0)
    assert Strategy() == Strategy()


def test_isotropic_strategy():
    """Test the learning rate of the isotropic strategy."""
    s = isotropic_strategy(8, sigma=0.5)
    assert s["sigma"] == 0.5
    assert s["tau"] == pytest.approx(0.25)


def test_anisotropic_strategy():
    """Test the step sizes and learning rates of the anisotropic strategy."""
    s = anisotropic_strategy(4, sigma=2.0)
    assert s["sigma"].shape == (4,)
    assert np.all(s["sigma"] == 2.0)
    assert s["tau"] == pytest.approx(0.5)
    assert s["tau0"] == pytest.approx(1 / np.sqrt(8))


@pytest.mark.parametrize("n, sigma", [(0, 1.0), (3, 0.0), (3, -1.0)])
def test_invalid_strategy(n, sigma):
    """Test that invalid dimensions and step sizes are rejected."""
    with pytest.raises(ValueError):
        isotropic_strategy(n, sigma)
    with pytest.raises(ValueError):
        anisotropic_strategy(n, sigma)
