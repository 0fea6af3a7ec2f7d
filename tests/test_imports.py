"""Test that all public APIs are importable and accessible."""
import pytest


def test_import_main_package():
    """Test importing the main torchpen package."""
    import torchpen
    assert hasattr(torchpen, '__version__')


def test_import_core_functions():
    """Test importing the optimizer and its collaborators."""
    from torchpen import (bfgs_optim, minimize_penalized, ControlBFGS,
                          RidgePenalty, TuningParametersEnet, FitResult)


def test_import_benchmarks():
    """Test importing benchmark models."""
    from torchpen.benchmarks import rosen, QuadraticModel, LeastSquaresModel


@pytest.mark.parametrize('criterion', ['glmnet', 'fit_change', 'gradients'])
def test_criterion_available(criterion):
    """Test that all advertised convergence criteria are usable."""
    import torch
    from torchpen import minimize_penalized

    x0 = torch.zeros(2, dtype=torch.float64)
    result = minimize_penalized(lambda x: (x - 1).square().sum(), x0,
                                convergence_criterion=criterion,
                                generator=0)
    assert result.convergence
