#!/usr/bin/env python
# Created by "Thieu" at 16:12, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

import numpy as np
from sklearn.metrics import accuracy_score, r2_score
from sklearn.base import ClassifierMixin, RegressorMixin
from sklearn.preprocessing import LabelBinarizer
from sklearn.utils.validation import check_array
from xmlp.helpers.loss import Loss
from xmlp.models.base_mlp import BaseGdMlp


class MlpClassifier(ClassifierMixin, BaseGdMlp):
    """
    Multi-layer Perceptron Classifier trained by minibatch backpropagation.

    The output layer is logistic with the "log" and "cross-entropy" losses. With
    the "square" loss it uses the hidden activation and the thresholded outputs
    are no longer probabilities. Binary labels use a single output unit,
    more than two labels are one-hot encoded with one output per class, and a 2-D
    0/1 indicator matrix is learned as is (one output per column).

    Attributes
    ----------
    classes_ : np.ndarray
        Class labels seen during `fit` (column indices for indicator targets).
    task : str
        "binary_classification", "classification" or "multilabel_classification".
    network_ : Network
        The trained network.

    Parameters
    ----------
    hidden_layer_sizes : list, tuple or np.ndarray of int, default=(100,)
        Units of every hidden layer.
    act_name : str, default="relu"
        Hidden activation, one of {"identity", "logistic", "tanh", "relu"}.
    optim : str, default="Adam"
        Optimizer name.
    optim_params : dict, default=None
        Optimizer hyper-parameters.
    alpha : float, default=0.
        Elastic-net regularization strength.
    l1_ratio : float, default=0.
        Share of L1 in the penalty.
    gradient_clipping : float, default=0.
        Maximum Frobenius norm of each layer gradient, 0 disables clipping.
    epochs : int, default=0
        Number of epochs, non-positive means ceil(1_000_000 / n_samples).
    batch_size : int, default=0
        Minibatch size, non-positive means min(n_samples, 200).
    loss : str, default=None
        "log" (the default), "cross-entropy" or "square".
    shuffle : bool, default=True
        Shuffle the rows before every epoch.
    valid_rate : float, default=None
        Share of the rows held out to report a validation loss.
    seed : int, default=None
        Random seed for reproducibility.
    check_finite : bool, default=False
        Raise FloatingPointError on the first NaN/Inf produced during training.
    verbose : bool, default=False
        Log the training progress.

    Methods
    -------
    fit(X, y):
        Trains the network on the provided data.

    predict(X):
        Predicts the class labels (or the 0/1 indicator matrix).

    predict_proba(X):
        Returns the raw network outputs.

    score(X, y):
        Computes the accuracy score.

    evaluate(y_true, y_pred, list_metrics=("AS", "RS")):
        Returns permetrics classification metrics.
    """

    def __init__(self, hidden_layer_sizes=(100,), act_name="relu", optim="Adam", optim_params=None,
                 alpha=0., l1_ratio=0., gradient_clipping=0., epochs=0, batch_size=0, loss=None,
                 shuffle=True, valid_rate=None, seed=None, check_finite=False, verbose=False):
        super().__init__(hidden_layer_sizes, act_name, optim, optim_params, alpha, l1_ratio,
                         gradient_clipping, epochs, batch_size, loss, shuffle, valid_rate, seed,
                         check_finite, verbose)
        self.classes_ = None
        self.task = None

    def _get_default_loss(self):
        return "log"

    def _encode_y(self, y):
        y = np.asarray(y)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()
        if y.ndim == 2:
            if not np.all(np.isin(y, (0, 1))):
                raise ValueError("2-D targets should be a 0/1 indicator matrix.")
            self.task = "multilabel_classification"
            self.classes_ = np.arange(y.shape[1])
            self._label_binarizer = None
            return y.astype(np.float64)
        if y.ndim != 1:
            raise ValueError(f"y should be 1-D labels or a 2-D indicator matrix, got shape {y.shape}.")
        self._label_binarizer = LabelBinarizer()
        Y = self._label_binarizer.fit_transform(y).astype(np.float64)
        self.classes_ = self._label_binarizer.classes_
        if len(self.classes_) < 2:
            raise ValueError(f"{self.__class__.__name__} needs at least 2 classes, got {len(self.classes_)}.")
        self.task = "binary_classification" if len(self.classes_) == 2 else "classification"
        return Y

    def fit(self, X, y, **kwargs):
        """
        Trains the network on the provided data.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Training data.

        y : array-like, shape (n_samples,) or (n_samples, n_outputs)
            Class labels, or a 0/1 indicator matrix.

        Returns
        -------
        self : object
            Fitted classifier.
        """
        X = check_array(X, dtype=np.float64)
        Y = self._encode_y(y)
        if Y.shape[0] != X.shape[0]:
            raise ValueError(f"X has {X.shape[0]} rows but y has {Y.shape[0]}.")
        self.size_input = X.shape[1]
        self.size_output = Y.shape[1]

        stratify = np.ravel(y) if self.task != "multilabel_classification" else None
        data = self.process_data(X, Y, stratify=stratify)
        self.build_model()
        self._fit(data, **kwargs)
        return self

    def predict_proba(self, X):
        """
        Returns the raw network outputs.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Input data.

        Returns
        -------
        numpy.ndarray, shape (n_samples, n_outputs)
            One output per unit (a single column for binary labels). These are
            probabilities with the "log" and "cross-entropy" losses.
        """
        return self._predict_raw(X)

    def predict(self, X):
        """
        Predicts the class labels for the given input data.

        Every output is thresholded with `p >= 0.5 -> 1`, so a probability of exactly 0.5 maps to 1.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Input data.

        Returns
        -------
        numpy.ndarray
            Predicted labels, or the 0/1 indicator matrix for indicator targets.
        """
        probs = self._predict_raw(X)
        if self.task == "binary_classification":
            return self.classes_[(probs[:, 0] >= 0.5).astype(int)]
        if self.task == "classification":
            return self.classes_[np.argmax(probs, axis=1)]
        return (probs >= 0.5).astype(int)

    def score(self, X, y):
        """
        Computes the accuracy score for the classifier.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Input data.

        y : array-like
            True class labels.

        Returns
        -------
        float
            Accuracy score of the classifier.
        """
        y_pred = self.predict(X)
        return accuracy_score(y, y_pred)

    def evaluate(self, y_true, y_pred, list_metrics=("AS", "RS")):
        """
        Returns performance metrics for the model on the provided test data.

        Parameters
        ----------
        y_true : array-like of shape (n_samples,)
            True class labels.

        y_pred : array-like of shape (n_samples,)
            Predicted class labels.

        list_metrics : list, default=("AS", "RS")
            List of performance metrics to calculate. Refer to Permetrics (https://github.com/thieu1995/permetrics) library for available metrics.
            With more than two classes the per-class scores are macro averaged.

        Returns
        -------
        dict
            Dictionary with results for the specified metrics.
        """
        average = None
        if np.ndim(y_true) == 1 and np.unique(np.asarray(y_true)).size > 2:
            average = "macro"
        return self._BaseMlp__evaluate_cls(y_true, y_pred, list_metrics, average=average)


class MlpRegressor(RegressorMixin, BaseGdMlp):
    """
    Multi-layer Perceptron Regressor trained by minibatch backpropagation.

    The output layer uses the hidden activation unless the loss is "log" or
    "cross-entropy", in which case it is logistic. Single and multi-output targets
    are supported.

    Attributes
    ----------
    task : str
        "regression" or "multi_regression".
    network_ : Network
        The trained network.

    Parameters
    ----------
    hidden_layer_sizes : list, tuple or np.ndarray of int, default=(100,)
        Units of every hidden layer; () fits a single dense layer.
    act_name : str, default="relu"
        Activation of the hidden layers and of the output layer.
    optim : str, default="Adam"
        Optimizer name.
    optim_params : dict, default=None
        Optimizer hyper-parameters.
    alpha : float, default=0.
        Elastic-net regularization strength.
    l1_ratio : float, default=0.
        Share of L1 in the penalty.
    gradient_clipping : float, default=0.
        Maximum Frobenius norm of each layer gradient, 0 disables clipping.
    epochs : int, default=0
        Number of epochs, non-positive means ceil(1_000_000 / n_samples).
    batch_size : int, default=0
        Minibatch size, non-positive means min(n_samples, 200).
    loss : str, default=None
        "square" (the default), "log" or "cross-entropy".
    shuffle : bool, default=True
        Shuffle the rows before every epoch.
    valid_rate : float, default=None
        Share of the rows held out to report a validation loss.
    seed : int, default=None
        Random seed for reproducibility.
    check_finite : bool, default=False
        Raise FloatingPointError on the first NaN/Inf produced during training.
    verbose : bool, default=False
        Log the training progress.

    Methods
    -------
    fit(X, y):
        Fits the network to the provided training data.

    predict(X):
        Predicts the target values for the given input features.

    score(X, y):
        Computes the R2 score (square loss) or the accuracy of the thresholded predictions.

    evaluate(y_true, y_pred, list_metrics=("MSE", "MAE")):
        Returns a list of performance metrics for the predictions.
    """

    def __init__(self, hidden_layer_sizes=(100,), act_name="relu", optim="Adam", optim_params=None,
                 alpha=0., l1_ratio=0., gradient_clipping=0., epochs=0, batch_size=0, loss=None,
                 shuffle=True, valid_rate=None, seed=None, check_finite=False, verbose=False):
        super().__init__(hidden_layer_sizes, act_name, optim, optim_params, alpha, l1_ratio,
                         gradient_clipping, epochs, batch_size, loss, shuffle, valid_rate, seed,
                         check_finite, verbose)
        self.task = None

    def fit(self, X, y, **kwargs):
        """
        Fits the network to the provided training data.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Training data.

        y : array-like, shape (n_samples,) or (n_samples, n_outputs)
            Target values.

        Returns
        -------
        self : object
            Fitted regressor.
        """
        X = check_array(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        self._y_ndim = y.ndim
        if y.ndim == 1:
            Y = y.reshape(-1, 1)
        elif y.ndim == 2:
            Y = y
        else:
            raise ValueError(f"y should be 1-D or 2-D, got shape {y.shape}.")
        if Y.shape[0] != X.shape[0]:
            raise ValueError(f"X has {X.shape[0]} rows but y has {Y.shape[0]}.")
        self.task = "multi_regression" if Y.shape[1] > 1 else "regression"
        self.size_input = X.shape[1]
        self.size_output = Y.shape[1]

        data = self.process_data(X, Y)
        self.build_model()
        self._fit(data, **kwargs)
        return self

    def predict(self, X):
        """
        Predicts the target values for the given input features.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Input features.

        Returns
        -------
        numpy.ndarray
            Predictions shaped like the training target (1-D when fitted on 1-D y).
        """
        y_pred = self._predict_raw(X)
        if self._y_ndim == 1:
            return y_pred[:, 0]
        return y_pred

    def score(self, X, y):
        """
        Computes the R2 score of the predictions with the square loss, otherwise the
        accuracy of the predictions thresholded at 0.5.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Input features.

        y : array-like
            True target values.

        Returns
        -------
        float
            The score.
        """
        y_pred = self.predict(X)
        if Loss.get(self._get_loss_name()) is Loss.SQUARE:
            return r2_score(y, y_pred)
        return accuracy_score(np.asarray(y).astype(int), (y_pred >= 0.5).astype(int))

    def evaluate(self, y_true, y_pred, list_metrics=("MSE", "MAE")):
        """
        Return the list of performance metrics of the prediction.

        Parameters
        ----------
        y_true : array-like of shape (n_samples,) or (n_samples, n_outputs)
            True values for `X`.

        y_pred : array-like of shape (n_samples,) or (n_samples, n_outputs)
            Predicted values for `X`.

        list_metrics : list, default=("MSE", "MAE")
            List of metrics to compute. Refer to Permetrics (https://github.com/thieu1995/permetrics) library for available metrics.

        Returns
        -------
        results : dict
            The results of the list metrics
        """
        return self._BaseMlp__evaluate_reg(y_true, y_pred, list_metrics)
