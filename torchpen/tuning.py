import torch
from torch import Tensor

__all__ = ['TuningParametersEnet']


def _as_vector(value, name):
    value = torch.as_tensor(value, dtype=torch.float64)
    if value.dim() != 1:
        raise ValueError('{} must be a 1-D sequence; got shape {}.'
                         .format(name, tuple(value.shape)))
    return value


class TuningParametersEnet(object):
    """Elastic-net tuning parameters, one entry per model parameter.

    Parameters
    ----------
    alpha : sequence of float
        Mixing weights in [0, 1]. 0 is a pure ridge penalty, 1 is a pure
        lasso penalty (no ridge contribution).
    lmbda : sequence of float
        Non-negative regularization strengths.
    weights : sequence of float
        Non-negative per-parameter weights. A weight of 0 excludes the
        parameter from penalization.
    """
    __slots__ = ('alpha', 'lmbda', 'weights')

    def __init__(self, alpha, lmbda, weights):
        alpha = _as_vector(alpha, 'alpha')
        lmbda = _as_vector(lmbda, 'lmbda')
        weights = _as_vector(weights, 'weights')
        if not (alpha.numel() == lmbda.numel() == weights.numel()):
            raise ValueError('alpha, lmbda and weights must have the same '
                             'length; got {}, {} and {}.'.format(
                                 alpha.numel(), lmbda.numel(), weights.numel()))
        if ((alpha < 0) | (alpha > 1)).any():
            raise ValueError('alpha must lie in [0, 1].')
        if (lmbda < 0).any():
            raise ValueError('lmbda must be non-negative.')
        if (weights < 0).any():
            raise ValueError('weights must be non-negative.')
        self.alpha = alpha
        self.lmbda = lmbda
        self.weights = weights

    @classmethod
    def broadcast(cls, n, alpha=0., lmbda=0., weights=1.):
        """Build tuning parameters for `n` parameters from scalars or
        sequences of length `n`."""
        def expand(v):
            v = torch.as_tensor(v, dtype=torch.float64)
            return v.expand(n).clone() if v.dim() == 0 else v
        return cls(expand(alpha), expand(lmbda), expand(weights))

    def __len__(self):
        return self.alpha.numel()

    def __repr__(self):
        return 'TuningParametersEnet(alpha={}, lmbda={}, weights={})'.format(
            self.alpha.tolist(), self.lmbda.tolist(), self.weights.tolist())

    @property
    def is_pure_lasso(self) -> bool:
        # ridge is switched off when every alpha equals 1
        return float(self.alpha.sum()) == self.alpha.numel()

    def ridge_scale(self, like: Tensor) -> Tensor:
        """(1 - alpha) * lmbda * weights, cast to the dtype/device of `like`."""
        scale = (1. - self.alpha) * self.lmbda * self.weights
        return scale.to(dtype=like.dtype, device=like.device)

    def check_size(self, n):
        if len(self) != n:
            raise ValueError('tuning parameters have length {} but there are '
                             '{} parameters.'.format(len(self), n))
