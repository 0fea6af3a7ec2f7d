"""
BFGS optimizer for smooth penalized objectives.

This is not the BFGS of, e.g., scipy. The outer iterations mirror the GLMNET
optimizer of Friedman, Hastie & Tibshirani (2010) and Yuan, Ho & Lin (2012):
a quasi-Newton direction from the (non-inverted) Hessian approximation, a
backtracking line search with the GLMNET sufficient-decrease test, and a
damped BFGS update of the Hessian approximation.
"""
from collections.abc import Mapping
import warnings
import torch
from torch import Tensor
from scipy.optimize import OptimizeResult

from .control import ControlBFGS, DEBUG_HESSIAN
from .convergence import IterationState, check_convergence
from .hessian import bfgs_update
from .line_search import glmnet_line_search, combined_fit, combined_gradients

try:
    from scipy.optimize._optimize import _status_message
except ImportError:
    from scipy.optimize.optimize import _status_message

__all__ = ['bfgs_optim', 'FitResult', 'ConvergenceWarning',
           'OptimizationInterrupted', 'resolve_starting_values']


class ConvergenceWarning(UserWarning):
    """The outer iterations reached max_iter_out without converging."""
    pass


class OptimizationInterrupted(KeyboardInterrupt):
    """The interrupt hook asked to abort the optimization."""
    pass


class FitResult(OptimizeResult):
    """Read-only result of :func:`bfgs_optim`.

    Attributes
    ----------
    convergence : bool
        Whether the convergence criterion was met. Also ``success``.
    fit : float
        Final penalized fit. Also ``fun``.
    fits : Tensor
        Fit at the starting values and after each outer iteration. Has
        length ``max_iter_out + 1``; unused entries are NaN.
    x : Tensor
        Final parameters.
    labels : list of str
        Parameter labels, aligned with `x`.
    hessian : Tensor
        Final Hessian approximation.
    nit : int
        Number of outer iterations.
    message : str
        Description of the cause of termination.
    """
    def _read_only(self, *args, **kwargs):
        raise TypeError('FitResult is read-only.')

    __setitem__ = __delitem__ = _read_only
    __setattr__ = __delattr__ = _read_only
    update = setdefault = pop = popitem = clear = _read_only


def _as_generator(generator):
    if isinstance(generator, torch.Generator):
        return generator
    gen = torch.Generator()
    if generator is None:
        gen.seed()
    else:
        gen.manual_seed(int(generator))
    return gen


def resolve_starting_values(starting_values, labels=None):
    """Split starting values into a parameter vector and its labels.

    `starting_values` is either a mapping ``{label: value}`` or a sequence
    (or Tensor) of values paired with `labels`. Non-tensor input is
    converted to float64; a Tensor keeps its floating dtype.
    """
    if isinstance(starting_values, Mapping):
        if labels is not None:
            raise ValueError('labels must not be given together with a '
                             'mapping of starting values.')
        labels = list(starting_values.keys())
        x = torch.tensor([float(v) for v in starting_values.values()],
                         dtype=torch.float64)
    elif isinstance(starting_values, Tensor):
        x = starting_values.detach()
        if not x.is_floating_point():
            x = x.to(torch.get_default_dtype())
    else:
        x = torch.as_tensor(starting_values, dtype=torch.float64)
    x = x.reshape(-1).clone(memory_format=torch.contiguous_format)

    if labels is None:
        labels = ['x%d' % i for i in range(x.numel())]
    labels = [str(label) for label in labels]
    if len(labels) != x.numel():
        raise ValueError('got {} labels for {} starting values.'
                         .format(len(labels), x.numel()))
    if len(set(labels)) != len(labels):
        raise ValueError('parameter labels must be unique.')
    return x, labels


@torch.no_grad()
def bfgs_optim(
        model, starting_values, smooth_penalty, tuning_parameters,
        control=None, labels=None, generator=None, callback=None,
        check_interrupt=None, non_smooth_penalty=None):
    """Minimize ``model.fit + smooth_penalty.value`` with GLMNET-style BFGS.

    Parameters
    ----------
    model : Model
        Object with ``fit(x, labels)`` and ``gradients(x, labels)``.
    starting_values : Mapping, sequence or Tensor
        Starting values; a mapping ``{label: value}`` or values paired with
        `labels`.
    smooth_penalty : SmoothPenalty
        Differentiable penalty, e.g. :class:`~torchpen.RidgePenalty`.
    tuning_parameters : object
        Tuning parameters of the penalties.
    control : ControlBFGS, optional
        Optimizer settings. Defaults to ``ControlBFGS()``.
    labels : sequence of str, optional
        Parameter labels when `starting_values` is not a mapping. Defaults
        to ``x0, x1, ...``.
    generator : torch.Generator or int, optional
        Random source of the line search. An int seeds a new generator;
        None creates a randomly seeded one.
    callback : callable, optional
        Called after each outer iteration as
        ``callback(n_iter, fit, x)``.
    check_interrupt : callable, optional
        Polled once per outer iteration; a truthy return aborts the run
        with :class:`OptimizationInterrupted`.
    non_smooth_penalty : NonSmoothPenalty, optional
        Value of a non-differentiable penalty added to the fit. Treated as
        zero when None.

    Returns
    -------
    result : FitResult
        Result of the optimization routine.
    """
    if control is None:
        control = ControlBFGS()
    control.validate()
    criterion = control.criterion
    verbose = int(control.verbose)
    generator = _as_generator(generator)

    x, labels = resolve_starting_values(starting_values, labels)
    if hasattr(tuning_parameters, 'check_size'):
        tuning_parameters.check_size(x.numel())

    if verbose != 0:
        print('Optimizing with bfgs.')

    def fun(x):
        return combined_fit(model, smooth_penalty, x, labels,
                            tuning_parameters, non_smooth_penalty)

    def grad(x):
        return combined_gradients(model, smooth_penalty, x, labels,
                                  tuning_parameters)

    # compute initial f(x) and f'(x)
    f = fun(x)
    g = grad(x)
    hess = control.hessian_for(x)
    if verbose > 1:
        print('initial fval: %0.4f' % f)

    fits = torch.full((control.max_iter_out + 1,), float('nan'),
                      dtype=torch.float64)
    fits[0] = f

    x_new, f_new, hess_new = x, f, hess
    converged = False
    n_iter = 0
    for n_iter in range(1, control.max_iter_out + 1):

        if check_interrupt is not None and check_interrupt():
            raise OptimizationInterrupted(
                'optimization interrupted in iteration %d' % n_iter)

        # ==================================
        #   compute Quasi-Newton direction
        # ==================================

        d = torch.linalg.solve(hess, g.neg())

        # ======================
        #   update parameter
        # ======================

        ls = glmnet_line_search(
            model, smooth_penalty, x, labels, d, f, g, hess,
            tuning_parameters, step_size=control.step_size,
            sigma=control.sigma, gamma=control.gamma,
            max_iter_line=control.max_iter_line, verbose=verbose,
            generator=generator, non_smooth_penalty=non_smooth_penalty)
        x_new = ls.x
        g_new = grad(x_new)
        f_new = fun(x_new)
        fits[n_iter] = f_new

        if verbose > 0 and (n_iter - 1) % verbose == 0:
            print('iter %3d - fval: %0.4f' % (n_iter, f_new))
            print(dict(zip(labels, x_new.tolist())))
        if callback is not None:
            callback(n_iter, f_new, x_new)

        # ================================
        #   update hessian approximation
        # ================================

        hess_new = bfgs_update(x, g, hess, x_new, g_new, damped=True,
                               hessian_eps=1e-3,
                               debug=verbose == DEBUG_HESSIAN)

        # =========================================
        #   check conditions and update buffers
        # =========================================

        state = IterationState(hess=hess_new, d=d, fits=fits,
                               n_iter=n_iter, grad=g_new)
        converged = check_convergence(criterion, state, control.break_outer)
        if converged:
            break

        x, f, g, hess = x_new, f_new, g_new, hess_new

    if converged:
        msg = _status_message['success']
    else:
        msg = _status_message['maxiter']
        warnings.warn('Outer iterations did not converge', ConvergenceWarning)

    if verbose != 0:
        print(msg)
        print("         Current function value: %f" % f_new)
        print("         Iterations: %d" % n_iter)

    return FitResult(convergence=converged, success=converged,
                     fit=f_new, fun=f_new, fits=fits, x=x_new,
                     labels=labels, hessian=hess_new, nit=n_iter,
                     message=msg)
