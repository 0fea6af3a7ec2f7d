import math
import warnings
from collections import namedtuple
import torch
from scipy.optimize._linesearch import LineSearchWarning

__all__ = ['glmnet_line_search', 'combined_fit', 'combined_gradients']

# line search result
ls_value = namedtuple('ls_value', ['x', 'f', 'grad', 'step', 'success', 'n_iter'])


def combined_fit(model, smooth_penalty, x, labels, tuning,
                 non_smooth_penalty=None):
    """Model fit plus smooth penalty, plus the non-smooth penalty if any."""
    f = model.fit(x, labels) + smooth_penalty.value(x, labels, tuning)
    if non_smooth_penalty is not None:
        f = f + non_smooth_penalty.value(x, labels, tuning)
    return float(f)


def combined_gradients(model, smooth_penalty, x, labels, tuning):
    """Gradients of the differentiable part (model plus smooth penalty)."""
    return model.gradients(x, labels) + smooth_penalty.gradients(x, labels, tuning)


@torch.no_grad()
def glmnet_line_search(
        model, smooth_penalty, x, labels, d, f, g, hess, tuning,
        step_size=0.9, sigma=1e-5, gamma=0., max_iter_line=500,
        verbose=0, generator=None, non_smooth_penalty=None):
    """Backtracking line search with the GLMNET sufficient-decrease test.

    Tries the steps ``t = step_size ** i`` for ``i = 0, 1, ...`` and accepts
    the first candidate ``x + t * d`` that satisfies Eq. 20 of Yuan, Ho &
    Lin (2012), "An improved GLMNET for l1-regularized logistic regression":

        f(x + t d) - f(x) <= sigma * t * (g^T d + gamma * d^T H d)

    Candidates with a non-finite fit or non-finite gradients are skipped.

    Parameters
    ----------
    model : Model
        Differentiable part of the objective.
    smooth_penalty : SmoothPenalty
        Smooth penalty added to the model fit.
    x : Tensor
        Parameters of the previous iteration.
    labels : list of str
        Parameter labels, aligned with `x`.
    d : Tensor
        Descent direction.
    f : float
        Penalized fit at `x`.
    g : Tensor
        Gradients at `x`.
    hess : Tensor
        Hessian approximation at `x`.
    tuning : object
        Tuning parameters passed on to the penalties.
    step_size : float
        Base of the geometric step sequence. Values >= 1 would not shrink
        the step and are replaced by 0.9.
    sigma : float
        Sufficient-decrease constant. With 0 no decrease is required.
    gamma : float
        Weight of the curvature term ``d^T H d``.
    max_iter_line : int
        Maximal number of trial steps.
    verbose : int
        Print trial steps if > 1.
    generator : torch.Generator, optional
        Source of the random step-size restart.
    non_smooth_penalty : NonSmoothPenalty, optional
        Non-differentiable penalty; zero when None.

    Returns
    -------
    result : ls_value
        Accepted (or last computed) parameters, their fit and gradients,
        the step, whether the test was satisfied and the number of trials.
    """
    if step_size >= 1:
        step_size = 0.9

    # randomly resetting the step size can help if the optimizer is stuck.
    # The draw only advances the generator; the trial steps below always
    # follow step_size ** i.
    current_step = step_size
    if float(torch.rand((), generator=generator, dtype=torch.float64)) < 0.25:
        current_step = float(torch.rand((), generator=generator,
                                        dtype=torch.float64))

    # penalized fit at step size 0 and the decrease predicted by the
    # quadratic model; both are fixed for all trials
    f_0 = f
    expected = float(g.dot(d)) + gamma * float(torch.dot(d, torch.mv(hess, d)))

    x_new = x
    f_new = f
    g_new = g
    success = False
    n_iter = 0
    for n_iter in range(1, max_iter_line + 1):
        current_step = step_size ** (n_iter - 1)
        x_new = x + d.mul(current_step)

        f_new = combined_fit(model, smooth_penalty, x_new, labels, tuning,
                             non_smooth_penalty)
        if not math.isfinite(f_new):
            # try a smaller step size
            continue

        if verbose > 1:
            print('  line search %3d - step: %0.4e - fval: %0.4f'
                  % (n_iter, current_step, f_new))

        if sigma == 0:
            success = True
        else:
            success = f_new - f_0 <= sigma * current_step * expected

        if success:
            # the gradients often cannot be computed at the new location
            g_new = combined_gradients(model, smooth_penalty, x_new,
                                       labels, tuning)
            if not torch.isfinite(g_new).all():
                success = False
                continue
            break

    if not success:
        warnings.warn('Line search did not converge.', LineSearchWarning)

    return ls_value(x=x_new, f=f_new, grad=g_new, step=current_step,
                    success=success, n_iter=n_iter)
