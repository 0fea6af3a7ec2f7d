import math
import torch
from torch import Tensor

__all__ = ['bfgs_update']


@torch.no_grad()
def bfgs_update(
        x_prev: Tensor, g_prev: Tensor, hess_prev: Tensor,
        x: Tensor, g: Tensor, damped: bool = True,
        hessian_eps: float = 1e-3, debug: bool = False) -> Tensor:
    """Damped BFGS update of a Hessian approximation (not its inverse).

    With ``s = x - x_prev`` and ``y = g - g_prev`` the updated matrix is

        B - (B s)(B s)^T / (s^T B s) + y y^T / (s^T y)

    which satisfies the secant equation ``B_new s = y``. When the curvature
    ``s^T y`` is too small, Powell's damping replaces ``y`` by a convex
    combination of ``y`` and ``B s`` so that ``s^T y >= 0.2 s^T B s`` and
    ``B_new`` stays positive definite.

    Parameters
    ----------
    x_prev, g_prev : Tensor
        Parameters and gradients of the previous iteration.
    hess_prev : Tensor
        Hessian approximation of the previous iteration.
    x, g : Tensor
        Parameters and gradients of the current iteration.
    damped : bool
        Use Powell's damping. If False, updates with ``s^T y <= hessian_eps``
        are skipped instead.
    hessian_eps : float
        Small positive constant. Also the eigenvalue floor used if the
        update loses positive definiteness numerically.
    debug : bool
        Print diagnostics.

    Returns
    -------
    hess : Tensor
        New Hessian approximation. The inputs are not modified.
    """
    s = x.sub(x_prev)
    y = g.sub(g_prev)
    B = hess_prev.clone()

    Bs = torch.mv(B, s)
    sBs = float(s.dot(Bs))
    sy = float(s.dot(y))
    if debug:
        print('BFGS update: s^T y = %0.4e, s^T B s = %0.4e' % (sy, sBs))

    if not (math.isfinite(sBs) and math.isfinite(sy) and sBs > 0):
        if debug:
            print('BFGS update: no step or degenerate curvature; '
                  'keeping previous Hessian')
        return B

    if damped:
        if sy < 0.2 * sBs:
            theta = 0.8 * sBs / (sBs - sy)
            if debug:
                print('BFGS update: damping with theta = %0.4f' % theta)
            y = theta * y + (1 - theta) * Bs
            sy = float(s.dot(y))
    elif sy <= hessian_eps:
        if debug:
            print('BFGS update: curvature condition violated; skipping')
        return B

    B.addr_(Bs, Bs, alpha=-1. / sBs)
    B.addr_(y, y, alpha=1. / sy)
    B = 0.5 * (B + B.t())

    _, info = torch.linalg.cholesky_ex(B)
    if info != 0:
        eig_min = float(torch.linalg.eigvalsh(B).min())
        shift = hessian_eps - eig_min
        if debug:
            print('BFGS update: Hessian not positive definite; '
                  'shifting diagonal by %0.4e' % shift)
        B.diagonal().add_(shift)

    return B
