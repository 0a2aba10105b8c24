#!/usr/bin/env python
# Created by "Thieu" at 15:30, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

from typing import TypeVar
import inspect
import math
import pickle
import numpy as np
import pandas as pd
from pathlib import Path
from sklearn.base import BaseEstimator
from sklearn.model_selection import train_test_split
from sklearn.utils import check_random_state
from sklearn.utils.validation import check_array, check_is_fitted
from permetrics import ClassificationMetric, RegressionMetric
from xmlp.core.network import Network
from xmlp.helpers.activation import Activation
from xmlp.helpers.loss import Loss
from xmlp.helpers.logger import Logger
from xmlp.helpers.metric_util import get_all_regression_metrics, get_all_classification_metrics
from xmlp.helpers.optimizer import SUPPORTED_OPTIMIZERS, OPTIMIZER_ALIASES, get_optimizer_creator
from xmlp.helpers.preprocessor import shuffle_together
from xmlp.helpers import validator


# Create a TypeVar for the base class
EstimatorType = TypeVar('EstimatorType', bound='BaseMlp')


class BaseMlp(BaseEstimator):
    """
    BaseMlp is a scikit-learn style base class for managing and evaluating
    a multi-layer perceptron trained from scratch by backpropagation.

    It keeps the shared configuration, metric evaluation through permetrics and the
    helpers to save the training history, metrics, predictions and the model itself.

    Parameters
    ----------
    hidden_layer_sizes : list, tuple or np.ndarray of int
        Units of every hidden layer. An empty tuple gives a single dense layer.
    act_name : str
        Hidden activation, one of {"identity", "logistic", "tanh", "relu"}.
    optim : str
        Optimizer name, a torch.optim class name or one of the short aliases
        {"sgd", "agd", "adagrad", "rmsprop", "adadelta", "adam"}.
    optim_params : dict or None
        Optimizer hyper-parameters, e.g. {"lr": 0.01}.
    alpha : float
        Regularization strength. 0 disables the regularization.
    loss : str or None
        Training loss, one of {"square", "log", "cross-entropy"}. None picks the estimator default.
    seed : int or None
        Random seed for the weight initialization and the shuffling.
    verbose : bool
        Log the training progress to the console.

    Attributes
    ----------
    network_ : Network or None
        The underlying network, built by `fit`.
    loss_train : list or None
        Total training loss of every epoch.
    """

    SUPPORTED_CLS_METRICS = get_all_classification_metrics()
    SUPPORTED_REG_METRICS = get_all_regression_metrics()
    SUPPORTED_ACTIVATIONS = Activation.names()
    SUPPORTED_LOSSES = Loss.names()
    SUPPORTED_OPTIMIZERS = SUPPORTED_OPTIMIZERS + list(OPTIMIZER_ALIASES.keys())

    def __init__(self, hidden_layer_sizes=(100,), act_name="relu", optim="Adam", optim_params=None,
                 alpha=0., loss=None, seed=None, verbose=False):
        self.hidden_layer_sizes = hidden_layer_sizes
        self.act_name = act_name
        self.optim = optim
        self.optim_params = optim_params
        self.alpha = alpha
        self.loss = loss
        self.seed = seed
        self.verbose = verbose
        self.loss_train = None

    def set_seed(self, seed):
        """
        Set the random seed for the model to ensure reproducibility.

        Parameters:
            seed (int, None): The seed value used for the weight initialization and the shuffling.
        """
        self.seed = seed
        return self

    def _get_default_loss(self):
        return "square"

    def _get_loss_name(self):
        return Loss.get(self._get_default_loss() if self.loss is None else self.loss).value

    def __evaluate_reg(self, y_true, y_pred, list_metrics=("MSE", "MAE")):
        """
        Evaluate regression performance metrics.

        Parameters
        ----------
        y_true : array-like
            True target values.
        y_pred : array-like
            Predicted values.
        list_metrics : tuple of str, list of str
            List of metrics for evaluation (e.g., "MSE" and "MAE").

        Returns
        -------
        dict
            Dictionary of calculated metric values.
        """
        rm = RegressionMetric(y_true=y_true, y_pred=y_pred)
        return rm.get_metrics_by_list_names(list_metrics)

    def __evaluate_cls(self, y_true, y_pred, list_metrics=("AS", "RS"), average=None):
        """
        Evaluate classification performance metrics.

        Parameters
        ----------
        y_true : array-like
            True target values.
        y_pred : array-like
            Predicted labels.
        list_metrics : tuple of str, list of str
            List of metrics for evaluation (e.g., "AS" and "RS").
        average : str or None
            Averaging passed to every metric that takes one (e.g., "macro" for multi-class labels).
            None keeps the permetrics defaults.

        Returns
        -------
        dict
            Dictionary of calculated metric values.
        """
        cm = ClassificationMetric(y_true, y_pred)
        if average is None:
            return cm.get_metrics_by_list_names(list_metrics)
        results = {}
        for name in list_metrics:
            metric = getattr(cm, name)
            params = inspect.signature(metric).parameters
            takes_average = "average" in params or any(p.kind is p.VAR_KEYWORD for p in params.values())
            results[name] = metric(average=average) if takes_average else metric()
        return results

    def evaluate(self, y_true, y_pred, list_metrics=None):
        """
        Evaluate the model using specified metrics. Implemented by the regressor and the classifier.
        """
        raise NotImplementedError(f"{self.__class__.__name__} does not implement evaluate().")

    def save_training_loss(self, save_path="history", filename="loss.csv"):
        """
        Save training loss history to a CSV file.

        Parameters
        ----------
        save_path : str, optional
            Path to save the file (default: "history").
        filename : str, optional
            Filename for saving loss history (default: "loss.csv").
        """
        if self.loss_train is None:
            raise ValueError(f"{self.__class__.__name__} model doesn't have training loss, call fit() first.")
        Path(save_path).mkdir(parents=True, exist_ok=True)
        data = {"epoch": list(range(1, len(self.loss_train) + 1)), "loss": self.loss_train}
        pd.DataFrame(data).to_csv(f"{save_path}/{filename}", index=False)

    def save_evaluation_metrics(self, y_true, y_pred, list_metrics=("RMSE", "MAE"), save_path="history", filename="metrics.csv"):
        """
        Save evaluation metrics to a CSV file.

        Parameters
        ----------
        y_true : array-like
            Ground truth values.
        y_pred : array-like
            Model predictions.
        list_metrics : list of str, optional
            Metrics for evaluation (default: ("RMSE", "MAE")).
        save_path : str, optional
            Path to save the file (default: "history").
        filename : str, optional
            Filename for saving metrics (default: "metrics.csv").
        """
        Path(save_path).mkdir(parents=True, exist_ok=True)
        results = self.evaluate(y_true, y_pred, list_metrics)
        pd.DataFrame([results]).to_csv(f"{save_path}/{filename}", index=False)

    def save_y_predicted(self, X, y_true, save_path="history", filename="y_predicted.csv"):
        """
        Save true and predicted values to a CSV file.

        Parameters
        ----------
        X : array-like
            Input features.
        y_true : array-like
            True values.
        save_path : str, optional
            Path to save the file (default: "history").
        filename : str, optional
            Filename for saving predicted values (default: "y_predicted.csv").
        """
        Path(save_path).mkdir(parents=True, exist_ok=True)
        y_pred = self.predict(X)
        data = {"y_true": np.squeeze(np.asarray(y_true)), "y_pred": np.squeeze(np.asarray(y_pred))}
        pd.DataFrame(data).to_csv(f"{save_path}/{filename}", index=False)

    def save_model(self, save_path="history", filename="model.pkl"):
        """
        Save the trained model to a pickle file.

        Parameters
        ----------
        save_path : str, optional
            Path to save the model (default: "history").
        filename : str, optional
            Filename for saving model, with ".pkl" extension (default: "model.pkl").
        """
        Path(save_path).mkdir(parents=True, exist_ok=True)
        if filename[-4:] != ".pkl":
            filename += ".pkl"
        with open(f"{save_path}/{filename}", 'wb') as f:
            pickle.dump(self, f)

    @staticmethod
    def load_model(load_path="history", filename="model.pkl") -> EstimatorType:
        """
        Load a model from a pickle file.

        Parameters
        ----------
        load_path : str, optional
            Path to load the model from (default: "history").
        filename : str, optional
            Filename of the saved model (default: "model.pkl").

        Returns
        -------
        BaseMlp
            The loaded model.
        """
        if filename[-4:] != ".pkl":
            filename += ".pkl"
        with open(f"{load_path}/{filename}", 'rb') as f:
            return pickle.load(f)


class BaseGdMlp(BaseMlp):
    """
    A multi-layer perceptron trained by minibatch backpropagation.

    Each epoch optionally shuffles the training rows, cuts them into contiguous
    minibatches, and runs forward + backward + optimizer update on each one. The epoch
    loss is the sum of the minibatch losses, each weighted by its share of the rows.

    Parameters
    ----------
    hidden_layer_sizes : list, tuple or np.ndarray of int, default=(100,)
        Units of every hidden layer.
    act_name : str, default="relu"
        Hidden activation.
    optim : str, default="Adam"
        Optimizer name, see `BaseMlp.SUPPORTED_OPTIMIZERS`.
    optim_params : dict or None, default=None
        Optimizer hyper-parameters.
    alpha : float, default=0.
        Elastic-net regularization strength. The bias rows are never penalised.
    l1_ratio : float, default=0.
        Share of L1 in the penalty: 0 is pure L2 (ridge), 1 is pure L1 (lasso).
    gradient_clipping : float, default=0.
        Maximum Frobenius norm of each layer gradient. 0 disables clipping.
    epochs : int or None, default=0
        Number of epochs. None or a non-positive value means ceil(1_000_000 / n_samples).
    batch_size : int or None, default=0
        Minibatch size. None or a non-positive value means min(n_samples, 200);
        a value above n_samples means full batch.
    loss : str or None, default=None
        Training loss; None picks the estimator default.
    shuffle : bool, default=True
        Shuffle the training rows before every epoch.
    valid_rate : float or None, default=None
        Fraction of the rows held out to report a validation loss after every epoch.
    seed : int or None, default=None
        Random seed.
    check_finite : bool, default=False
        Debug mode: raise FloatingPointError on the first NaN/Inf produced during training.
    verbose : bool, default=False
        Log the loss of every epoch.

    Attributes
    ----------
    network_ : Network
        The trained network.
    n_epochs_ : int
        Number of epochs actually run.
    batch_size_ : int
        Minibatch size actually used.
    loss_ : float
        Total loss of the last epoch.
    loss_first_ : float
        Total loss of the first epoch.
    loss_train : list of float
        Total loss of every epoch.
    loss_valid : list of float or None
        Validation loss of every epoch when `valid_rate` is set.
    """

    def __init__(self, hidden_layer_sizes=(100,), act_name="relu", optim="Adam", optim_params=None,
                 alpha=0., l1_ratio=0., gradient_clipping=0., epochs=0, batch_size=0, loss=None,
                 shuffle=True, valid_rate=None, seed=None, check_finite=False, verbose=False):
        super().__init__(hidden_layer_sizes, act_name, optim, optim_params, alpha, loss, seed, verbose)
        self.l1_ratio = l1_ratio
        self.gradient_clipping = gradient_clipping
        self.epochs = epochs
        self.batch_size = batch_size
        self.shuffle = shuffle
        self.valid_rate = valid_rate
        self.check_finite = check_finite

        # Internal attributes, set by fit()
        self.size_input = None
        self.size_output = None
        self.valid_mode = False
        self.loss_valid = None

    def _check_config(self):
        hidden = validator.check_tuple_int("hidden_layer_sizes", self.hidden_layer_sizes, [1, float("inf")])
        self._alpha = validator.check_float("alpha", self.alpha, [0., float("inf")])
        self._l1_ratio = validator.check_float("l1_ratio", self.l1_ratio, [0., 1.])
        self._gradient_clipping = validator.check_float("gradient_clipping", self.gradient_clipping, [0., float("inf")])
        validator.check_bool("shuffle", self.shuffle)
        validator.check_bool("check_finite", self.check_finite)
        if self.epochs is not None:
            validator.check_int("epochs", self.epochs)
        if self.batch_size is not None:
            validator.check_int("batch_size", self.batch_size)
        return hidden

    def build_model(self):
        """
        Validate the configuration and build the network, its optimizers and the logger.

        Unknown activation, loss or optimizer names raise ValueError here, before any training.
        """
        hidden = self._check_config()
        act = Activation.get(self.act_name)
        loss = Loss.get(self._get_loss_name())
        optimizer_creator = get_optimizer_creator(self.optim, self.optim_params)
        log_to = "console" if self.verbose else None
        self.logger = Logger(log_to=log_to).create_logger(name=f"{__name__}.{self.__class__.__name__}")

        rng = np.random.default_rng(self.seed)
        self._shuffle_state = check_random_state(self.seed)
        self.network_ = Network(self.size_input, hidden, self.size_output, act=act, loss=loss,
                                optimizer_creator=optimizer_creator, rnd=rng.standard_normal,
                                check_finite=self.check_finite)
        self.logger.info(f"Built {self.network_}")

    def process_data(self, X, Y, stratify=None):
        """
        Split off the validation rows when `valid_rate` is set.

        Parameters
        ----------
        X : np.ndarray, shape (n_samples, n_features)
            Training features.
        Y : np.ndarray, shape (n_samples, n_outputs)
            Encoded training targets.
        stratify : array-like or None
            Labels used to stratify the split.

        Returns
        -------
        tuple : (X_train, Y_train, X_valid, Y_valid)
        """
        X_valid, Y_valid = None, None
        self.valid_mode = False
        if self.valid_rate is not None:
            if 0 < self.valid_rate < 1:
                self.valid_mode = True
                X, X_valid, Y, Y_valid = train_test_split(X, Y, test_size=self.valid_rate,
                                                          random_state=self.seed, shuffle=True, stratify=stratify)
            else:
                raise ValueError("Validation rate must be between 0 and 1.")
        return X, Y, X_valid, Y_valid

    @staticmethod
    def _get_epochs(epochs, n_samples):
        if epochs is None or epochs <= 0:
            return int(math.ceil(1_000_000 / n_samples))
        return int(epochs)

    @staticmethod
    def _get_batch_size(batch_size, n_samples):
        if batch_size is not None and 0 < batch_size <= n_samples:
            return int(batch_size)
        if batch_size is not None and batch_size > n_samples:
            return n_samples
        return min(n_samples, 200)

    def _fit(self, data, **kwargs):
        """
        Run the epoch loop on the processed data.

        Parameters
        ----------
        data : tuple
            (X_train, Y_train, X_valid, Y_valid), as returned by `process_data`.
        """
        X, Y, X_valid, Y_valid = data
        n_samples = X.shape[0]
        # Private copies: shuffling never touches the caller's arrays
        X = np.array(X, dtype=np.float64)
        Y = np.array(Y, dtype=np.float64)

        self.loss_ = np.inf
        self.loss_first_ = None
        self.n_epochs_ = self._get_epochs(self.epochs, n_samples)
        self.batch_size_ = self._get_batch_size(self.batch_size, n_samples)
        self.loss_train = []
        self.loss_valid = [] if self.valid_mode else None
        self.logger.info(f"Training on {n_samples} samples: epochs={self.n_epochs_}, batch_size={self.batch_size_}")

        for epoch in range(self.n_epochs_):
            X, Y, total_loss = self._fit_epoch(X, Y)
            if epoch == 0:
                self.loss_first_ = total_loss
            self.loss_ = total_loss
            self.loss_train.append(total_loss)

            if self.valid_mode:
                val_loss = self.network_.compute_loss(X_valid, Y_valid, n_samples=n_samples,
                                                      alpha=self._alpha, l1_ratio=self._l1_ratio)
                self.loss_valid.append(val_loss)
                self.logger.info(f"Epoch: {epoch + 1}, Train Loss: {total_loss:.6f}, Validation Loss: {val_loss:.6f}")
            else:
                self.logger.info(f"Epoch: {epoch + 1}, Train Loss: {total_loss:.6f}")
        return self

    def _fit_epoch(self, X, Y):
        """
        One pass over all minibatches.

        Returns
        -------
        tuple : (X, Y, total_loss), X and Y in the (possibly shuffled) order used.
        """
        n_samples = X.shape[0]
        if self.shuffle:
            X, Y = shuffle_together(X, Y, random_state=self._shuffle_state)
        batch_start = 0
        total_loss = 0.
        while batch_start < n_samples:
            batch_end = min(batch_start + self.batch_size_, n_samples)
            total_loss += self._fit_mini_batch(X[batch_start:batch_end], Y[batch_start:batch_end], n_samples)
            batch_start = batch_end
        return X, Y, total_loss

    def _fit_mini_batch(self, X_batch, Y_batch, n_samples):
        self.network_.forward(X_batch)
        return self.network_.backward(X_batch, Y_batch, batch_fraction=X_batch.shape[0] / n_samples,
                                      n_samples=n_samples, alpha=self._alpha, l1_ratio=self._l1_ratio,
                                      gradient_clipping=self._gradient_clipping, apply_updates=True)

    def _check_X(self, X):
        check_is_fitted(self, "network_")
        X = check_array(X, dtype=np.float64)
        if X.shape[1] != self.size_input:
            raise ValueError(f"X has {X.shape[1]} features, but {self.__class__.__name__} "
                             f"was fitted with {self.size_input} features.")
        return X

    def _predict_raw(self, X):
        """Forward pass only; returns a copy of the output layer's prediction."""
        X = self._check_X(X)
        y_out = np.empty((X.shape[0], self.size_output), dtype=np.float64)
        self.network_.forward(X, y_out=y_out)
        return y_out
