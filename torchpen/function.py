from typing import List, Protocol, runtime_checkable
import torch
import torch.autograd as autograd
from torch import Tensor

__all__ = ['Model', 'AutogradModel']


@runtime_checkable
class Model(Protocol):
    """The differentiable part of the objective (e.g. a -2 log-likelihood).

    Both methods must tolerate arbitrary trial points; returning a
    non-finite value is allowed and is handled by the line search.
    """

    def fit(self, x: Tensor, labels: List[str]) -> float:
        ...

    def gradients(self, x: Tensor, labels: List[str]) -> Tensor:
        ...


class AutogradModel(object):
    """Model collaborator backed by a scalar torch function.

    Gradients are computed with autograd, so ``fun`` only needs to return
    the objective value.

    Parameters
    ----------
    fun : callable
        Scalar objective ``fun(x)`` (or ``fun(x, labels)`` when
        `pass_labels` is True) returning a single-element Tensor.
    pass_labels : bool
        Whether to pass the parameter labels on to `fun`.
    """
    def __init__(self, fun, pass_labels=False):
        self._fun = fun
        self._pass_labels = pass_labels
        self.nfev = 0
        self.ngev = 0

    def _call(self, x, labels):
        f = self._fun(x, labels) if self._pass_labels else self._fun(x)
        if not isinstance(f, Tensor):
            f = torch.as_tensor(f, dtype=x.dtype, device=x.device)
        if f.numel() != 1:
            raise RuntimeError('AutogradModel was supplied a function '
                               'that does not return scalar outputs.')
        return f

    @torch.no_grad()
    def fit(self, x, labels):
        f = self._call(x, labels)
        self.nfev += 1
        return float(f)

    def gradients(self, x, labels):
        x = x.detach().requires_grad_(True)
        with torch.enable_grad():
            f = self._call(x, labels)
            if not f.requires_grad:
                # objective does not depend on x
                grad = torch.zeros_like(x)
            else:
                grad = autograd.grad(f, x)[0]
        self.ngev += 1
        return grad.detach()
