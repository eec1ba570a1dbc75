from importlib.metadata import PackageNotFoundError, version

try:
    # Change here if project is renamed and does not equal the package name
    __version__ = version(__name__)
except PackageNotFoundError:
    __version__ = "unknown"
finally:
    del version, PackageNotFoundError

from . import operators
from ._errors import ConfigurationError
from .bootstrap import from_creator, from_individual, from_matrix
from .history import History
from .optimizer import ESResult, EvolutionStrategy, es
from .population import Population
from .strategy import Strategy, anisotropic_strategy, isotropic_strategy
from .utils import set_logger_config

__all__ = [
    "ConfigurationError",
    "ESResult",
    "EvolutionStrategy",
    "History",
    "Population",
    "Strategy",
    "anisotropic_strategy",
    "es",
    "from_creator",
    "from_individual",
    "from_matrix",
    "isotropic_strategy",
    "operators",
    "set_logger_config",
]
