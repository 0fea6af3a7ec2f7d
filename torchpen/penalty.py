"""
Smooth (differentiable) penalties and the hook for non-smooth ones.

A penalty is any object offering ``value`` and ``gradients`` with the
signatures of :class:`SmoothPenalty`. The optimizer is generic over the
type of tuning parameters the penalty consumes, so new penalty families
plug in without changes to the driver or the line search.
"""
from typing import List, Protocol, TypeVar, runtime_checkable
import torch
from torch import Tensor

from .tuning import TuningParametersEnet

__all__ = ['SmoothPenalty', 'NonSmoothPenalty', 'RidgePenalty', 'NoPenalty']

T = TypeVar('T', contravariant=True)


@runtime_checkable
class SmoothPenalty(Protocol[T]):
    """Differentiable penalty over tuning parameters of type ``T``."""

    def value(self, x: Tensor, labels: List[str], tuning: T) -> float:
        ...

    def gradients(self, x: Tensor, labels: List[str], tuning: T) -> Tensor:
        ...


@runtime_checkable
class NonSmoothPenalty(Protocol[T]):
    """Value of a non-differentiable penalty (e.g. lasso).

    Its minimization belongs to a proximal-operator collaborator; the BFGS
    driver only adds the value to the fit. When no such penalty is given
    the term is zero.
    """

    def value(self, x: Tensor, labels: List[str], tuning: T) -> float:
        ...


class RidgePenalty(object):
    """Ridge part of an elastic-net penalty.

    For each parameter p the contribution is

        (1 - alpha[p]) * lmbda[p] * weights[p] * x[p]**2

    If all ``alpha`` equal 1 (pure lasso) the ridge term vanishes and both
    value and gradients are exactly zero.
    """

    def value(self, x: Tensor, labels: List[str],
              tuning: TuningParametersEnet) -> float:
        if tuning.is_pure_lasso:
            return 0.
        scale = tuning.ridge_scale(x)
        return float(torch.sum(scale * x.square()))

    def gradients(self, x: Tensor, labels: List[str],
                  tuning: TuningParametersEnet) -> Tensor:
        if tuning.is_pure_lasso:
            return torch.zeros_like(x)
        scale = tuning.ridge_scale(x)
        return scale * 2 * x


class NoPenalty(object):
    """Zero penalty for unpenalized fits; accepts any tuning type."""

    def value(self, x, labels, tuning):
        return 0.

    def gradients(self, x, labels, tuning):
        return torch.zeros_like(x)
