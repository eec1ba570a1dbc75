"""This package bundles the recombination, mutation, and termination operators of the evolution strategy."""

from .base import Operator
from .mutation import (
    AnisotropicMutation,
    AnisotropicSigma,
    InversionMutation,
    IsotropicMutation,
    IsotropicSigma,
    MutationWrapper,
    SwapMutation,
    identity,
    identity_strategy,
)
from .recombination import Marriage, average, average_strategy, first, first_strategy
from .termination import SigmaTolerance, never

__all__ = [
    "Operator",
    "first",
    "first_strategy",
    "average",
    "average_strategy",
    "Marriage",
    "identity",
    "identity_strategy",
    "IsotropicMutation",
    "AnisotropicMutation",
    "IsotropicSigma",
    "AnisotropicSigma",
    "InversionMutation",
    "SwapMutation",
    "MutationWrapper",
    "never",
    "SigmaTolerance",
]
