import torch

__all__ = ['rosen', 'QuadraticModel', 'LeastSquaresModel', 'NonFiniteModel']


# =============================
#     Rosenbrock function
# =============================


def rosen(x, reduce=True):
    val = 100. * (x[...,1:] - x[...,:-1]**2)**2 + (1 - x[...,:-1])**2
    if reduce:
        return val.sum()
    else:
        # don't reduce batch dimensions
        return val.sum(-1)


# =============================
#       Model collaborators
# =============================


class QuadraticModel(object):
    """f(x) = 0.5 * (x - center)^T A (x - center), minimized at `center`."""
    def __init__(self, A, center):
        self.A = torch.as_tensor(A, dtype=torch.float64)
        self.center = torch.as_tensor(center, dtype=torch.float64)

    def fit(self, x, labels):
        r = x - self.center
        return float(0.5 * r.dot(torch.mv(self.A, r)))

    def gradients(self, x, labels):
        return torch.mv(self.A, x - self.center)


class LeastSquaresModel(object):
    """Residual sum of squares ||y - X b||^2 of a linear regression."""
    def __init__(self, X, y):
        self.X = torch.as_tensor(X, dtype=torch.float64)
        self.y = torch.as_tensor(y, dtype=torch.float64)

    def fit(self, b, labels):
        return float((self.y - torch.mv(self.X, b)).square().sum())

    def gradients(self, b, labels):
        return -2 * torch.mv(self.X.t(), self.y - torch.mv(self.X, b))

    def ridge_solution(self, lmbda):
        """Closed-form minimizer of ||y - X b||^2 + lmbda * ||b||^2."""
        XtX = self.X.t() @ self.X
        XtX.diagonal().add_(lmbda)
        return torch.linalg.solve(XtX, torch.mv(self.X.t(), self.y))


class NonFiniteModel(object):
    """Model whose fit is NaN everywhere except at the starting point."""
    def __init__(self, x0):
        self.x0 = torch.as_tensor(x0, dtype=torch.float64)

    def fit(self, x, labels):
        if torch.equal(x, self.x0):
            return float(x.square().sum())
        return float('nan')

    def gradients(self, x, labels):
        return 2 * x
