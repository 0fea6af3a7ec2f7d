"""
Ridge-penalized logistic regression with torchpen, compared to
scipy.optimize.minimize on the same objective.

The objective is the negative log-likelihood plus the elastic-net ridge
term sum((1 - alpha) * lmbda * weights * b**2). The intercept gets weight
0 and is not penalized.
"""
import numpy as np
import torch
from scipy import optimize

from torchpen import ControlBFGS, minimize_penalized

torch.set_default_dtype(torch.float64)


def print_header(title, num_breaks=1):
    print('\n'*num_breaks + '='*50)
    print(' '*20 + title)
    print('='*50 + '\n')


def main():
    torch.manual_seed(991)
    N, D = 500, 5
    X = torch.cat([torch.ones(N, 1), torch.randn(N, D)], dim=1)
    b_true = torch.tensor([-0.5, 1., -1., 0.5, 0., 2.])
    y = torch.bernoulli(torch.sigmoid(X @ b_true))

    labels = ['intercept'] + ['b%d' % i for i in range(1, D + 1)]
    lmbda = 5.
    weights = [0.] + [1.] * D

    def nll(b):
        eta = X @ b
        return torch.sum(torch.nn.functional.softplus(eta) - y * eta)

    # ---- torchpen ----
    print_header('torchpen BFGS')
    control = ControlBFGS(convergence_criterion='gradients',
                          break_outer=1e-8, verbose=5)
    result = minimize_penalized(nll, torch.zeros(D + 1), labels=labels,
                                alpha=0., lmbda=lmbda, weights=weights,
                                control=control, generator=0)
    print('converged: %s' % result.convergence)
    print('final fit: %0.6f' % result.fit)
    print(dict(zip(result.labels, result.x.tolist())))

    # ---- scipy ----
    print_header('scipy BFGS')
    X_np, y_np = X.numpy(), y.numpy()
    w_np = lmbda * np.asarray(weights)

    def fun(b):
        eta = X_np @ b
        return np.sum(np.logaddexp(0, eta) - y_np * eta) + np.sum(w_np * b**2)

    def jac(b):
        p = 1 / (1 + np.exp(-(X_np @ b)))
        return X_np.T @ (p - y_np) + 2 * w_np * b

    res = optimize.minimize(fun, np.zeros(D + 1), jac=jac, method='BFGS',
                            options=dict(gtol=1e-8))
    print('converged: %s' % res.success)
    print('final fit: %0.6f' % res.fun)
    print(dict(zip(labels, res.x.tolist())))

    print_header('max abs difference')
    print('%0.3e' % np.abs(result.x.numpy() - res.x).max())


if __name__ == '__main__':
    main()
