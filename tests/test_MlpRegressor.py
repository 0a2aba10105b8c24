#!/usr/bin/env python
# Created by "Thieu" at 18:40, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

import numpy as np
import pytest
from sklearn.base import clone
from sklearn.exceptions import NotFittedError
from xmlp import MlpRegressor
from xmlp.models.base_mlp import BaseGdMlp


@pytest.fixture
def sample_data():
    """Fixture to generate consistent synthetic regression data."""
    rng = np.random.default_rng(42)
    X = rng.standard_normal((80, 4))
    y = np.sin(X[:, 0]) + 0.5 * X[:, 1] - 0.2 * X[:, 2] * X[:, 3]
    return X, y


@pytest.fixture
def model():
    """Fixture to initialize the MlpRegressor model."""
    return MlpRegressor(hidden_layer_sizes=(10,), act_name="tanh", optim="Adam", optim_params={"lr": 0.01},
                        epochs=50, batch_size=16, seed=42, verbose=False)


def test_linear_model_reaches_least_squares():
    rng = np.random.default_rng(0)
    X = rng.standard_normal((200, 3))
    y = X @ np.array([1.5, -2., 0.5]) + 0.3 + 0.01 * rng.standard_normal(200)
    model = MlpRegressor(hidden_layer_sizes=(), act_name="identity", optim="sgd", optim_params={"lr": 0.002},
                         epochs=500, batch_size=200, shuffle=False, seed=1)
    model.fit(X, y)

    X1 = np.hstack([np.ones((200, 1)), X])
    coef, *_ = np.linalg.lstsq(X1, y, rcond=None)
    resid = y - X1 @ coef
    loss_ls = np.sum(resid ** 2) / 2. / 200
    assert model.loss_first_ > model.loss_
    assert model.loss_ == pytest.approx(loss_ls, rel=1e-4)
    assert np.allclose(model.network_.output_layer.weights[:, 0], coef, atol=1e-4)


def test_fit(model, sample_data):
    X, y = sample_data
    result = model.fit(X, y)
    assert result is model
    assert model.n_epochs_ == 50
    assert model.batch_size_ == 16
    assert len(model.loss_train) == 50
    assert model.loss_first_ == model.loss_train[0]
    assert model.loss_ == model.loss_train[-1]
    assert model.loss_ < model.loss_first_
    assert model.loss_valid is None


def test_predict_shape(model, sample_data):
    X, y = sample_data
    model.fit(X, y)
    assert model.predict(X).shape == (80,)
    Y = np.column_stack([y, -y])
    model.fit(X, Y)
    assert model.predict(X).shape == (80, 2)
    assert model.task == "multi_regression"


def test_score(model, sample_data):
    X, y = sample_data
    model.set_params(epochs=300)
    model.fit(X, y)
    assert model.score(X, y) > 0.8


def test_probabilistic_loss_score_is_accuracy(sample_data):
    X, _ = sample_data
    y = (X[:, 0] > 0).astype(float)
    model = MlpRegressor(hidden_layer_sizes=(5,), act_name="tanh", loss="cross-entropy",
                         optim_params={"lr": 0.05}, epochs=100, batch_size=20, seed=1)
    model.fit(X, y)
    assert model.network_.output_layer.act.value == "logistic"
    y_pred = model.predict(X)
    assert np.all((y_pred >= 0.) & (y_pred <= 1.))
    assert model.score(X, y) == pytest.approx(np.mean((y_pred >= 0.5) == y))


def test_same_seed_same_model(model, sample_data):
    X, y = sample_data
    other = clone(model)
    model.fit(X, y)
    other.fit(X, y)
    assert np.array_equal(model.network_.get_weights(), other.network_.get_weights())
    assert model.loss_train == other.loss_train


def test_fit_does_not_modify_inputs(model, sample_data):
    X, y = sample_data
    X_copy, y_copy = X.copy(), y.copy()
    model.fit(X, y)
    assert np.array_equal(X, X_copy) and np.array_equal(y, y_copy)


def test_valid_rate(sample_data):
    X, y = sample_data
    model = MlpRegressor(hidden_layer_sizes=(5,), epochs=10, valid_rate=0.25, seed=3)
    model.fit(X, y)
    assert len(model.loss_valid) == 10
    assert np.all(np.isfinite(model.loss_valid))
    with pytest.raises(ValueError):
        MlpRegressor(epochs=1, valid_rate=1.5).fit(X, y)


def test_epoch_and_batch_size_rules():
    assert BaseGdMlp._get_epochs(None, 300) == 3334
    assert BaseGdMlp._get_epochs(0, 1000) == 1000
    assert BaseGdMlp._get_epochs(-5, 3) == 333334
    assert BaseGdMlp._get_epochs(7, 300) == 7
    assert BaseGdMlp._get_batch_size(32, 50) == 32
    assert BaseGdMlp._get_batch_size(50, 50) == 50
    assert BaseGdMlp._get_batch_size(1000, 50) == 50
    assert BaseGdMlp._get_batch_size(0, 50) == 50
    assert BaseGdMlp._get_batch_size(None, 500) == 200
    assert BaseGdMlp._get_batch_size(-1, 500) == 200


def test_last_minibatch_is_shrunk(sample_data):
    X, y = sample_data
    model = MlpRegressor(hidden_layer_sizes=(3,), epochs=1, batch_size=30, shuffle=False, seed=0)
    model.fit(X, y)
    # 80 rows in windows of 30, 30 and 20
    assert model.network_.output_layer.n_samples == 20
    assert model.network_.output_layer.capacity("z") == 30


def test_invalid_config(sample_data):
    X, y = sample_data
    with pytest.raises(ValueError):
        MlpRegressor(act_name="softsign", epochs=1).fit(X, y)
    with pytest.raises(ValueError):
        MlpRegressor(loss="hinge", epochs=1).fit(X, y)
    with pytest.raises(ValueError):
        MlpRegressor(optim="LBFGS", epochs=1).fit(X, y)
    with pytest.raises(ValueError):
        MlpRegressor(optim="Adam", optim_params={"weight_decay": 0.01}, epochs=1).fit(X, y)
    with pytest.raises(ValueError):
        MlpRegressor(l1_ratio=1.5, epochs=1).fit(X, y)
    with pytest.raises(ValueError):
        MlpRegressor(alpha=-1., epochs=1).fit(X, y)
    with pytest.raises(TypeError):
        MlpRegressor(hidden_layer_sizes="10", epochs=1).fit(X, y)
    with pytest.raises(ValueError):
        MlpRegressor(epochs=1).fit(X, y[:10])


def test_predict_errors(model, sample_data):
    X, y = sample_data
    with pytest.raises(NotFittedError):
        model.predict(X)
    model.fit(X, y)
    with pytest.raises(ValueError):
        model.predict(X[:, :3])


def test_check_finite_stops_divergence(sample_data):
    X, y = sample_data
    model = MlpRegressor(hidden_layer_sizes=(), act_name="identity", optim="SGD", optim_params={"lr": 1e6},
                         epochs=500, batch_size=80, check_finite=True, seed=0)
    with pytest.raises(FloatingPointError):
        with np.errstate(over="ignore", invalid="ignore"):
            model.fit(X, y)


def test_gradient_clipping_keeps_training_finite(sample_data):
    X, y = sample_data
    model = MlpRegressor(hidden_layer_sizes=(5,), act_name="tanh", optim="SGD", optim_params={"lr": 0.01},
                         gradient_clipping=1., epochs=20, batch_size=80, check_finite=True, seed=0)
    model.fit(X, y * 1e6)
    assert np.all(np.isfinite(model.network_.get_weights()))


def test_verbose_logs_epochs(sample_data, capsys):
    X, y = sample_data
    MlpRegressor(hidden_layer_sizes=(3,), epochs=2, verbose=True, seed=0).fit(X, y)
    err = capsys.readouterr().err
    assert "Epoch: 1, Train Loss:" in err
    assert "Epoch: 2, Train Loss:" in err


def test_evaluate(model, sample_data):
    X, y = sample_data
    model.fit(X, y)
    results = model.evaluate(y, model.predict(X), list_metrics=("MSE", "MAE"))
    assert set(results.keys()) == {"MSE", "MAE"}
    assert "RMSE" in MlpRegressor.SUPPORTED_REG_METRICS


def test_save_and_load(model, sample_data, tmp_path):
    X, y = sample_data
    model.fit(X, y)
    model.save_training_loss(save_path=str(tmp_path), filename="loss.csv")
    model.save_evaluation_metrics(y, model.predict(X), list_metrics=("RMSE", "MAE"), save_path=str(tmp_path))
    model.save_y_predicted(X, y, save_path=str(tmp_path))
    model.save_model(save_path=str(tmp_path), filename="model")
    for filename in ("loss.csv", "metrics.csv", "y_predicted.csv", "model.pkl"):
        assert (tmp_path / filename).exists()
    loaded = MlpRegressor.load_model(load_path=str(tmp_path), filename="model.pkl")
    assert np.allclose(loaded.predict(X), model.predict(X))
    loaded.set_params(epochs=2).fit(X, y)


def test_set_seed(sample_data):
    X, y = sample_data
    first = MlpRegressor(hidden_layer_sizes=(4,), epochs=3).set_seed(7).fit(X, y)
    second = MlpRegressor(hidden_layer_sizes=(4,), epochs=3, seed=7).fit(X, y)
    assert first.seed == 7
    assert np.array_equal(first.network_.get_weights(), second.network_.get_weights())
