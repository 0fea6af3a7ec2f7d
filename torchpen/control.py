from enum import Enum
from numbers import Number
from typing import Any, NamedTuple
import torch

__all__ = ['ConvergenceCriterion', 'ControlBFGS', 'DEBUG_HESSIAN']

# `verbose` value that switches the BFGS update to debug output
DEBUG_HESSIAN = -99


class ConvergenceCriterion(Enum):
    """Convergence criteria available for the outer BFGS iterations.

    GLMNET
        Decrease-based criterion of Yuan et al. (2012); for BFGS this is
        max(diag(H) * d**2) < break_outer.
    FIT_CHANGE
        Absolute change in the penalized fit between iterations.
    GRADIENTS
        All gradients (close to) zero.
    """
    GLMNET = 0
    FIT_CHANGE = 1
    GRADIENTS = 2

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.lower().rstrip('_').replace('-', '_')
            key = {'fitchange': 'fit_change'}.get(key, key)
            try:
                return cls[key.upper()]
            except KeyError:
                raise ValueError('invalid convergence criterion "{}".'
                                 .format(value)) from None
        return cls(value)


class ControlBFGS(NamedTuple):
    """Settings for the BFGS optimizer.

    Attributes
    ----------
    initial_hessian : Tensor, float or None
        Initial Hessian approximation. ``None`` uses the identity, a float
        ``c`` uses ``c * I``.
    step_size : float
        Base factor of the backtracking sequence; trial steps are
        ``step_size ** i``. Values >= 1 are replaced by 0.9.
    sigma : float
        Sufficient-decrease constant of Yuan et al. (2012), Eq. 20.
    gamma : float
        Weight of the curvature term in the decrease test. 0 (the value
        used by Yuan et al.) disables it.
    max_iter_out, max_iter_in, max_iter_line : int
        Caps on outer, inner and line search iterations. Inner iterations
        are reserved for non-smooth penalties and unused by BFGS.
    break_outer, break_inner : float
        Convergence thresholds for outer and inner iterations.
    convergence_criterion : ConvergenceCriterion, str or int
        Which criterion ends the outer iterations.
    verbose : int
        0 is silent; > 0 prints the fit every `verbose` iterations;
        ``DEBUG_HESSIAN`` prints diagnostics of the Hessian update.
    """
    initial_hessian: Any = None
    step_size: float = 0.9
    sigma: float = 1e-5
    gamma: float = 0.
    max_iter_out: int = 1000
    max_iter_in: int = 1000
    max_iter_line: int = 500
    break_outer: float = 1e-8
    break_inner: float = 1e-10
    convergence_criterion: Any = ConvergenceCriterion.GLMNET
    verbose: int = 0

    @property
    def criterion(self):
        return ConvergenceCriterion.parse(self.convergence_criterion)

    def validate(self):
        if self.max_iter_out < 1:
            raise ValueError('max_iter_out must be at least 1.')
        if self.max_iter_line < 0:
            raise ValueError('max_iter_line must be non-negative.')
        if self.step_size <= 0:
            raise ValueError('step_size must be positive.')
        if not 0 <= self.sigma < 1:
            raise ValueError('sigma must lie in [0, 1).')
        if self.gamma < 0:
            raise ValueError('gamma must be non-negative.')
        ConvergenceCriterion.parse(self.convergence_criterion)
        return self

    def hessian_for(self, x):
        """Materialize the initial Hessian for parameters `x`."""
        n = x.numel()
        eye = torch.eye(n, dtype=x.dtype, device=x.device)
        if self.initial_hessian is None:
            return eye
        if isinstance(self.initial_hessian, Number):
            return eye.mul(float(self.initial_hessian))
        hess = torch.as_tensor(self.initial_hessian, dtype=x.dtype,
                               device=x.device).clone()
        if hess.shape != (n, n):
            raise ValueError('initial_hessian must have shape {}; got {}.'
                             .format((n, n), tuple(hess.shape)))
        return hess
