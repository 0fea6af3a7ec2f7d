import pytest
import torch

from torchpen import minimize_penalized, ControlBFGS
from torchpen.benchmarks import rosen


def test_ridge_regression_autograd(least_squares_problem):
    p = least_squares_problem
    X, y = p['model'].X, p['model'].y

    def objective(b):
        return (y - X @ b).square().sum()

    result = minimize_penalized(objective, p['x0'], labels=p['labels'],
                                alpha=0., lmbda=p['lmbda'], generator=0)

    assert result.convergence
    assert result.labels == p['labels']
    torch.testing.assert_close(result.x, p['solution'], rtol=1e-4, atol=1e-4)


def test_rosenbrock():
    x0 = torch.tensor([-1.2, 1.], dtype=torch.float64)
    result = minimize_penalized(rosen, x0, penalty='none',
                                convergence_criterion='gradients',
                                break_outer=1e-6, generator=0)

    assert result.convergence
    torch.testing.assert_close(result.x, torch.ones(2, dtype=torch.float64),
                               rtol=1e-3, atol=1e-3)


def test_mapping_starting_values():
    result = minimize_penalized(lambda x: (x - 3).square().sum(),
                                {'mu': 0., 'nu': 1.}, lmbda=1., generator=0)

    # (x - 3)^2 + x^2 is minimized at 1.5
    assert result.labels == ['mu', 'nu']
    torch.testing.assert_close(result.x, torch.full((2,), 1.5, dtype=torch.float64),
                               rtol=1e-4, atol=1e-4)


def test_control_object():
    control = ControlBFGS(max_iter_out=3)
    with pytest.warns(UserWarning):
        result = minimize_penalized(rosen, [-1.2, 1.], control=control,
                                    generator=0)
    assert result.fits.shape == (4,)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        minimize_penalized(rosen, [0., 0.], penalty='lasso')
    with pytest.raises(ValueError):
        minimize_penalized(rosen, [0., 0.], control=ControlBFGS(),
                           max_iter_out=10)
