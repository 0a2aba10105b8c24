#!/usr/bin/env python
# Created by "Thieu" at 19:15, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

import numpy as np
import pytest
from sklearn.datasets import make_blobs
from sklearn.exceptions import NotFittedError
from sklearn.metrics import recall_score
from sklearn.preprocessing import StandardScaler
from xmlp import MlpClassifier


@pytest.fixture
def binary_data():
    rng = np.random.default_rng(11)
    X = rng.standard_normal((60, 3))
    y = np.where(X[:, 0] + 0.5 * X[:, 1] > 0, "yes", "no")
    return X, y


@pytest.fixture
def multiclass_data():
    X, y = make_blobs(n_samples=150, centers=3, n_features=4, cluster_std=0.6, random_state=1)
    return StandardScaler().fit_transform(X), y


@pytest.fixture
def model():
    """Fixture to initialize the MlpClassifier model."""
    return MlpClassifier(hidden_layer_sizes=(8,), act_name="tanh", optim="Adam", optim_params={"lr": 0.01},
                         epochs=200, batch_size=32, seed=42, verbose=False)


def test_xor():
    X = np.array([[-1., -1.], [-1., 1.], [1., -1.], [1., 1.]])
    y = np.array([0, 1, 1, 0])
    model = MlpClassifier(hidden_layer_sizes=(8,), act_name="tanh", optim="Adam", optim_params={"lr": 0.05},
                          epochs=1000, batch_size=4, seed=42)
    model.fit(X, y)
    assert model.task == "binary_classification"
    assert model.network_.output_layer.n_outputs == 1
    assert np.array_equal(model.predict(X), y)
    assert model.score(X, y) == 1.
    assert model.loss_ < model.loss_first_


def test_relu_xor():
    X = np.array([[-1., -1.], [-1., 1.], [1., -1.], [1., 1.]])
    y = np.array([0, 1, 1, 0])
    model = MlpClassifier(hidden_layer_sizes=(4,), act_name="relu", optim="Adam", optim_params={"lr": 0.01},
                          alpha=0., loss="log", epochs=3000, batch_size=4, seed=0)
    model.fit(X, y)
    assert model.network_.output_layer.act.value == "logistic"
    assert np.array_equal(model.predict(X), y)


def test_binary_labels_map_back(model, binary_data):
    X, y = binary_data
    model.fit(X, y)
    assert list(model.classes_) == ["no", "yes"]
    assert model.predict_proba(X).shape == (60, 1)
    y_pred = model.predict(X)
    assert set(np.unique(y_pred)) <= {"no", "yes"}
    assert model.score(X, y) > 0.9


def test_tie_at_half_maps_to_one(model, binary_data):
    X, y = binary_data
    model.set_params(epochs=1)
    model.fit(X, y)
    model.network_.set_weights(np.zeros(model.network_.get_weights_size()))
    assert np.all(model.predict_proba(X) == 0.5)
    assert np.all(model.predict(X) == "yes")


def test_multiclass(model, multiclass_data):
    X, y = multiclass_data
    model.set_params(loss="cross-entropy")
    model.fit(X, y)
    assert model.task == "classification"
    assert model.network_.output_layer.n_outputs == 3
    assert model.network_.output_layer.act.value == "logistic"
    assert model.predict_proba(X).shape == (150, 3)
    assert set(np.unique(model.predict(X))) <= set(model.classes_)
    assert model.score(X, y) > 0.95


def test_indicator_targets(model):
    rng = np.random.default_rng(5)
    X = rng.standard_normal((80, 3))
    Y = np.column_stack([X[:, 0] > 0, X[:, 1] > 0]).astype(int)
    model.fit(X, Y)
    assert model.task == "multilabel_classification"
    y_pred = model.predict(X)
    assert y_pred.shape == (80, 2)
    assert set(np.unique(y_pred)) <= {0, 1}
    model.network_.set_weights(np.zeros(model.network_.get_weights_size()))
    assert np.all(model.predict(X) == 1)


def test_cross_entropy_loss(binary_data):
    X, y = binary_data
    model = MlpClassifier(hidden_layer_sizes=(4,), loss="cross-entropy", epochs=50, seed=0)
    model.fit(X, y)
    assert len(model.loss_train) == 50


def test_valid_rate_is_stratified(binary_data):
    X, y = binary_data
    model = MlpClassifier(hidden_layer_sizes=(4,), epochs=5, valid_rate=0.2, seed=0)
    model.fit(X, y)
    assert len(model.loss_valid) == 5


def test_invalid_targets(binary_data):
    X, y = binary_data
    with pytest.raises(ValueError):
        MlpClassifier(epochs=1).fit(X, np.zeros(60))
    with pytest.raises(ValueError):
        MlpClassifier(epochs=1).fit(X, np.full((60, 2), 2))
    with pytest.raises(ValueError):
        MlpClassifier(epochs=1).fit(X, y[:30])


def test_predict_before_fit(model, binary_data):
    X, _ = binary_data
    with pytest.raises(NotFittedError):
        model.predict(X)


def test_evaluate(model, multiclass_data):
    X, y = multiclass_data
    model.fit(X, y)
    results = model.evaluate(y, model.predict(X), list_metrics=("AS", "RS"))
    assert set(results.keys()) == {"AS", "RS"}
    assert "AS" in MlpClassifier.SUPPORTED_CLS_METRICS


def test_evaluate_multiclass_is_macro_averaged(model, multiclass_data):
    X, y = multiclass_data
    model.fit(X, y)
    y_pred = model.predict(X)
    results = model.evaluate(y, y_pred, list_metrics=("AS", "RS"))
    assert np.isscalar(results["RS"])
    assert results["RS"] == pytest.approx(recall_score(y, y_pred, average="macro"), abs=1e-6)


def test_evaluate_binary(model, binary_data):
    X, y = binary_data
    y = (y == "yes").astype(int)
    model.fit(X, y)
    results = model.evaluate(y, model.predict(X), list_metrics=("AS", "RS"))
    assert set(results.keys()) == {"AS", "RS"}
    assert all(0. <= results[name] <= 1. for name in ("AS", "RS"))


def test_square_loss(model, binary_data):
    X, y = binary_data
    model.set_params(loss="square")
    model.fit(X, y)
    assert model.network_.output_layer.act.value == "tanh"
    assert set(np.unique(model.predict(X))) <= set(model.classes_)
    assert model.loss_ < model.loss_first_
    assert model.score(X, y) > 0.8
