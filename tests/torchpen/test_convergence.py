import pytest
import torch

from torchpen import ConvergenceCriterion, ConvergenceComputationError
from torchpen.convergence import IterationState, check_convergence


def make_state(hess=None, d=None, fits=None, n_iter=1, grad=None):
    return IterationState(hess=hess, d=d, fits=fits, n_iter=n_iter, grad=grad)


@pytest.mark.parametrize('tol,expected', [(1e-6, True), (1e-12, False)])
def test_fit_change(tol, expected):
    fits = torch.tensor([10.0, 10.0 - 1e-9], dtype=torch.float64)
    state = make_state(fits=fits, n_iter=1)
    assert check_convergence(ConvergenceCriterion.FIT_CHANGE, state, tol) is expected


def test_fit_change_uses_current_iteration():
    nan = float('nan')
    fits = torch.tensor([5., 3., 3., nan], dtype=torch.float64)
    assert not check_convergence('fit_change', make_state(fits=fits, n_iter=1), 1e-6)
    assert check_convergence('fit_change', make_state(fits=fits, n_iter=2), 1e-6)


def test_glmnet():
    hess = torch.tensor([[4., 1.], [1., 100.]], dtype=torch.float64)
    d = torch.tensor([1e-3, 1e-4], dtype=torch.float64)
    # diag(H) * d**2 = (4e-6, 1e-6)
    assert check_convergence('glmnet', make_state(hess=hess, d=d), 1e-5)
    assert not check_convergence('glmnet', make_state(hess=hess, d=d), 2e-6)


def test_gradients():
    grad = torch.tensor([1e-9, -1e-7], dtype=torch.float64)
    assert check_convergence('gradients', make_state(grad=grad), 1e-6)
    assert not check_convergence('gradients', make_state(grad=grad), 1e-8)


@pytest.mark.parametrize('criterion', list(ConvergenceCriterion))
def test_failure_is_fatal(criterion):
    with pytest.raises(ConvergenceComputationError):
        check_convergence(criterion, make_state(n_iter=1), 1e-6)


@pytest.mark.parametrize('value,expected', [
    ('glmnet', ConvergenceCriterion.GLMNET),
    ('GLMNET_', ConvergenceCriterion.GLMNET),
    ('fitChange', ConvergenceCriterion.FIT_CHANGE),
    ('fit-change', ConvergenceCriterion.FIT_CHANGE),
    ('gradients_', ConvergenceCriterion.GRADIENTS),
    (2, ConvergenceCriterion.GRADIENTS),
    (ConvergenceCriterion.FIT_CHANGE, ConvergenceCriterion.FIT_CHANGE),
])
def test_parse_criterion(value, expected):
    assert ConvergenceCriterion.parse(value) is expected


@pytest.mark.parametrize('value', ['armijo', 5])
def test_parse_invalid_criterion(value):
    with pytest.raises(ValueError):
        ConvergenceCriterion.parse(value)
