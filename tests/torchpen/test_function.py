import pytest
import torch

from torchpen import AutogradModel, Model
from torchpen.benchmarks import QuadraticModel, LeastSquaresModel


def test_gradients_match_analytic(least_squares_problem):
    model = least_squares_problem['model']
    X, y = model.X, model.y
    auto = AutogradModel(lambda b: (y - X @ b).square().sum())
    b = torch.tensor([0.5, -1., 2., 0.], dtype=torch.float64)

    assert auto.fit(b, None) == pytest.approx(model.fit(b, None))
    torch.testing.assert_close(auto.gradients(b, None), model.gradients(b, None))
    assert auto.nfev == 1
    assert auto.ngev == 1


def test_pass_labels():
    seen = []

    def fun(x, labels):
        seen.append(labels)
        return x.sum()

    auto = AutogradModel(fun, pass_labels=True)
    x = torch.ones(2, dtype=torch.float64)
    auto.fit(x, ['a', 'b'])
    torch.testing.assert_close(auto.gradients(x, ['a', 'b']), torch.ones_like(x))
    assert seen == [['a', 'b'], ['a', 'b']]


def test_constant_objective():
    auto = AutogradModel(lambda x: 1.)
    x = torch.ones(3, dtype=torch.float64)
    assert auto.fit(x, None) == 1.
    assert torch.equal(auto.gradients(x, None), torch.zeros_like(x))


def test_non_scalar_raises():
    auto = AutogradModel(lambda x: x * 2)
    with pytest.raises(RuntimeError):
        auto.fit(torch.ones(2), None)


def test_models_satisfy_protocol(least_squares_problem):
    assert isinstance(AutogradModel(torch.sum), Model)
    assert isinstance(QuadraticModel([[1.]], [0.]), Model)
    assert isinstance(least_squares_problem['model'], LeastSquaresModel)
    assert isinstance(least_squares_problem['model'], Model)
