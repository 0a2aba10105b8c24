#!/usr/bin/env python
# Created by "Thieu" at 17:02, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

import numpy as np
import pytest
from xmlp.helpers.activation import Activation
from xmlp.helpers.loss import Loss, EPSILON


@pytest.fixture
def Z():
    return np.array([[-2., -0.5, 0.], [0.3, 1., 4.]])


def test_activation_get():
    assert Activation.get("relu") is Activation.RELU
    assert Activation.get("TANH") is Activation.TANH
    assert Activation.get(Activation.LOGISTIC) is Activation.LOGISTIC
    assert Activation.names() == ["identity", "logistic", "tanh", "relu"]
    with pytest.raises(ValueError):
        Activation.get("softmax")
    with pytest.raises(ValueError):
        Activation.get(3)


@pytest.mark.parametrize("act, func", [
    (Activation.IDENTITY, lambda z: z),
    (Activation.LOGISTIC, lambda z: 1. / (1. + np.exp(-z))),
    (Activation.TANH, np.tanh),
    (Activation.RELU, lambda z: np.maximum(z, 0.)),
])
def test_activation_forward(act, func, Z):
    out = np.empty_like(Z)
    result = act.forward(Z, out)
    assert result is out
    assert np.allclose(out, func(Z))


def test_forward_into_non_contiguous_view(Z):
    buffer = np.ones((2, 4))
    view = buffer[:, 1:]
    Activation.TANH.forward(Z, view)
    assert np.allclose(buffer[:, 1:], np.tanh(Z))
    assert np.all(buffer[:, 0] == 1.)


def test_logistic_does_not_overflow():
    Z = np.array([[-1000., 1000.]])
    out = np.empty_like(Z)
    Activation.LOGISTIC.forward(Z, out)
    assert np.all(np.isfinite(out))
    assert out[0, 0] == pytest.approx(0.) and out[0, 1] == pytest.approx(1.)


@pytest.mark.parametrize("act", [Activation.IDENTITY, Activation.LOGISTIC, Activation.TANH])
def test_activation_derivative_matches_finite_difference(act, Z):
    h = 1e-6
    Ypred = act.forward(Z, np.empty_like(Z))
    deriv = act.derivative(Z, Ypred, np.empty_like(Z))
    plus = act.forward(Z + h, np.empty_like(Z))
    minus = act.forward(Z - h, np.empty_like(Z))
    assert np.allclose(deriv, (plus - minus) / (2 * h), atol=1e-6)


def test_relu_derivative(Z):
    Ypred = Activation.RELU.forward(Z, np.empty_like(Z))
    deriv = Activation.RELU.derivative(Z, Ypred, np.empty_like(Z))
    assert np.array_equal(deriv, np.array([[0., 0., 0.], [1., 1., 1.]]))


def test_loss_get():
    assert Loss.get("square") is Loss.SQUARE
    assert Loss.get("log") is Loss.LOG
    assert Loss.SQUARE.value == "square"
    assert Loss.names() == ["square", "log", "cross-entropy"]
    assert Loss.get("cross-entropy") is Loss.CROSS_ENTROPY
    assert not Loss.SQUARE.is_probabilistic
    assert Loss.LOG.is_probabilistic and Loss.CROSS_ENTROPY.is_probabilistic
    with pytest.raises(ValueError):
        Loss.get("hinge")


def test_square_loss():
    Ytrue = np.array([[1.], [2.]])
    Ypred = np.array([[2.], [0.]])
    grad = np.empty_like(Ytrue)
    J = Loss.SQUARE.compute(Ytrue, Ypred, grad)
    assert J == pytest.approx((1. + 4.) / 2. / 2.)
    assert np.array_equal(grad, Ypred - Ytrue)


def test_log_loss():
    Ytrue = np.array([[1., 0.], [0., 1.]])
    Ypred = np.array([[0.8, 0.3], [0.4, 0.5]])
    grad = np.empty_like(Ytrue)
    J = Loss.LOG.compute(Ytrue, Ypred, grad)
    assert J == pytest.approx(-(np.log(0.8) + np.log(0.5)) / 2.)
    assert np.allclose(grad, -Ytrue / Ypred)


def test_cross_entropy_loss():
    Ytrue = np.array([[1.], [0.]])
    Ypred = np.array([[0.9], [0.2]])
    grad = np.empty_like(Ytrue)
    J = Loss.CROSS_ENTROPY.compute(Ytrue, Ypred, grad)
    assert J == pytest.approx(-(np.log(0.9) + np.log(0.8)) / 2.)
    assert np.allclose(grad, np.array([[-1. / 0.9], [1. / 0.8]]))


def test_probabilistic_losses_are_clipped():
    Ytrue = np.array([[1.], [0.]])
    Ypred = np.array([[0.], [1.]])
    # One saturated term per row for log, two for cross-entropy
    for loss, n_terms in ((Loss.LOG, 1), (Loss.CROSS_ENTROPY, 2)):
        grad = np.empty_like(Ytrue)
        J = loss.compute(Ytrue, Ypred, grad)
        assert np.isfinite(J) and np.all(np.isfinite(grad))
        assert J == pytest.approx(-np.log(EPSILON) * n_terms / 2., rel=1e-5)


def test_loss_shape_mismatch():
    with pytest.raises(ValueError, match="Loss square: shape mismatch"):
        Loss.SQUARE.compute(np.zeros((3, 1)), np.zeros((3, 2)))
