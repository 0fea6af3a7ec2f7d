"""Shared pytest fixtures for torchpen tests."""
import pytest
import torch

from torchpen.benchmarks import QuadraticModel, LeastSquaresModel


@pytest.fixture
def generator():
    """Seeded random source for reproducible line searches."""
    return torch.Generator().manual_seed(42)


# =============================================================================
# Problem Fixtures
# =============================================================================
# A problem is a dict with:
#   - 'model': model collaborator with fit() and gradients()
#   - 'x0': Tensor, starting values
#   - 'labels': list of str, parameter labels
#   - 'solution': Tensor, known optimal solution
#   - 'name': str, descriptive name for the problem


@pytest.fixture(scope='session')
def quadratic_problem():
    """Convex quadratic with minimum at (1, -2)."""
    A = torch.tensor([[3., 1.], [1., 2.]], dtype=torch.float64)
    center = torch.tensor([1., -2.], dtype=torch.float64)

    return {
        'model': QuadraticModel(A, center),
        'x0': torch.zeros(2, dtype=torch.float64),
        'labels': ['a', 'b'],
        'solution': center,
        'name': 'quadratic',
    }


@pytest.fixture(scope='session')
def least_squares_problem():
    """
    Linear regression ||y - X b||^2 with a known ridge solution.

    Returns
    -------
    dict
        Problem dict with an additional 'lmbda' entry; 'solution' is the
        ridge estimate for that lmbda.
    """
    g = torch.Generator().manual_seed(42)
    N, D = 50, 4
    X = torch.randn(N, D, generator=g, dtype=torch.float64)
    b = torch.tensor([1., -0.5, 0.25, 2.], dtype=torch.float64)
    y = X @ b + 0.1 * torch.randn(N, generator=g, dtype=torch.float64)
    model = LeastSquaresModel(X, y)
    lmbda = 2.

    return {
        'model': model,
        'x0': torch.zeros(D, dtype=torch.float64),
        'labels': ['b%d' % i for i in range(D)],
        'lmbda': lmbda,
        'solution': model.ridge_solution(lmbda),
        'name': 'least_squares',
    }
