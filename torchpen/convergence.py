"""
Convergence criteria of the outer BFGS iterations.

Each criterion is a small function of the iteration state returning a
bool; :func:`check_convergence` selects one by its
:class:`~torchpen.control.ConvergenceCriterion`.
"""
from collections import namedtuple
import torch

from .control import ConvergenceCriterion

__all__ = ['ConvergenceComputationError', 'IterationState',
           'glmnet_criterion', 'fit_change_criterion', 'gradients_criterion',
           'check_convergence']


class ConvergenceComputationError(RuntimeError):
    """Raised when the convergence criterion cannot be computed."""
    pass


# state of the outer iteration after the Hessian update
IterationState = namedtuple('IterationState', ['hess', 'd', 'fits', 'n_iter', 'grad'])


def glmnet_criterion(state, tol):
    # diag(H) * d**2 approximates the decrease of the quadratic model in
    # each coordinate
    decrease = torch.diagonal(state.hess) * state.d.square()
    return bool(decrease.max() < tol)


def fit_change_criterion(state, tol):
    change = (state.fits[state.n_iter] - state.fits[state.n_iter - 1]).abs()
    return bool(change < tol)


def gradients_criterion(state, tol):
    return bool((state.grad.abs() < tol).all())


_criteria = {
    ConvergenceCriterion.GLMNET: glmnet_criterion,
    ConvergenceCriterion.FIT_CHANGE: fit_change_criterion,
    ConvergenceCriterion.GRADIENTS: gradients_criterion,
}


def check_convergence(criterion, state, tol):
    """Evaluate `criterion` on `state` with threshold `tol`.

    Any failure is fatal and raised as ConvergenceComputationError.
    """
    criterion_fn = _criteria[ConvergenceCriterion.parse(criterion)]
    try:
        return criterion_fn(state, tol)
    except Exception as exc:
        raise ConvergenceComputationError(
            'Error while computing convergence criterion') from exc
