from .bfgs import bfgs_optim, resolve_starting_values
from .control import ControlBFGS
from .function import AutogradModel
from .penalty import RidgePenalty, NoPenalty
from .tuning import TuningParametersEnet

_penalties = {
    'ridge': RidgePenalty,
    'none': NoPenalty,
}


def minimize_penalized(
        fun, x0, labels=None, alpha=0., lmbda=0., weights=1.,
        penalty='ridge', control=None, generator=None, callback=None,
        check_interrupt=None, **control_kwargs):
    """Minimize a scalar torch function plus an elastic-net ridge penalty.

    .. note::
        This is a convenience front end to :func:`bfgs_optim`. Gradients
        of `fun` are computed with autograd.

    Parameters
    ----------
    fun : callable
        Scalar objective function ``fun(x)`` of a 1-D Tensor.
    x0 : Mapping, sequence or Tensor
        Starting values, optionally as ``{label: value}``.
    labels : sequence of str, optional
        Parameter labels when `x0` is not a mapping.
    alpha, lmbda, weights : float or sequence of float
        Elastic-net tuning parameters; scalars are broadcast to all
        parameters.
    penalty : str
        Smooth penalty to use. One of {'ridge', 'none'}.
    control : ControlBFGS, optional
        Optimizer settings. Mutually exclusive with `control_kwargs`.
    generator : torch.Generator or int, optional
        Random source of the line search.
    callback : callable, optional
        Called after each outer iteration as ``callback(n_iter, fit, x)``.
    check_interrupt : callable, optional
        Polled once per outer iteration; truthy aborts the run.
    **control_kwargs
        Fields of :class:`ControlBFGS`, e.g. ``max_iter_out`` or
        ``convergence_criterion``.

    Returns
    -------
    result : FitResult
        Result of the optimization routine.
    """
    penalty = penalty.lower()
    if penalty not in _penalties:
        raise ValueError('invalid penalty "{}"; expected one of {}.'
                         .format(penalty, sorted(_penalties)))
    if control is None:
        control = ControlBFGS(**control_kwargs)
    elif control_kwargs:
        raise ValueError('pass either control or control keyword '
                         'arguments, not both.')

    x, labels = resolve_starting_values(x0, labels)
    tuning = TuningParametersEnet.broadcast(x.numel(), alpha, lmbda, weights)

    return bfgs_optim(AutogradModel(fun), x, _penalties[penalty](), tuning,
                      control=control, labels=labels, generator=generator,
                      callback=callback, check_interrupt=check_interrupt)
