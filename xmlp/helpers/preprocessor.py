#!/usr/bin/env python
# Created by "Thieu" at 11:20, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

import numpy as np
from sklearn.model_selection import train_test_split
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import StandardScaler, MinMaxScaler, MaxAbsScaler, RobustScaler, LabelEncoder
from sklearn.utils import shuffle


SUPPORTED_SCALERS = {
    "standard": StandardScaler,
    "minmax": MinMaxScaler,
    "max-abs": MaxAbsScaler,
    "robust": RobustScaler,
}


def shuffle_together(X, Y, random_state=None):
    """Permute the rows of X and Y with the same permutation."""
    return shuffle(X, Y, random_state=random_state)


class Data:
    """
    The structure of our supported Data class

    Parameters
    ----------
    X : np.ndarray
        The features of your data

    y : np.ndarray
        The labels of your data
    """

    SUPPORT = {
        "scaler": list(SUPPORTED_SCALERS.keys())
    }

    def __init__(self, X=None, y=None, name="Unknown"):
        self.X = X
        self.y = self.check_y(y)
        self.name = name
        self.X_train, self.y_train, self.X_test, self.y_test = None, None, None, None

    @staticmethod
    def check_y(y):
        if y is None:
            return y
        y = np.squeeze(np.asarray(y))
        if y.ndim == 0:
            y = y.reshape(1)
        return y

    @staticmethod
    def scale(X, scaling_methods=("standard",)):
        """
        Fit a chain of scikit-learn scalers on X.

        Parameters
        ----------
        X : array-like
            The data to scale.
        scaling_methods : tuple, list, str
            Names from Data.SUPPORT["scaler"], applied in order.

        Returns
        -------
        tuple : (X_scaled, fitted scaler)
        """
        if isinstance(scaling_methods, str):
            scaling_methods = (scaling_methods,)
        steps = []
        for method in scaling_methods:
            if method not in SUPPORTED_SCALERS:
                raise ValueError(f"Unsupported scaling method: {method}. Supported methods are: {Data.SUPPORT['scaler']}")
            steps.append(SUPPORTED_SCALERS[method]())
        scaler = make_pipeline(*steps)
        X = np.asarray(X, dtype=float)
        if X.ndim == 1:
            X_scaled = np.squeeze(scaler.fit_transform(X.reshape(-1, 1)))
        else:
            X_scaled = scaler.fit_transform(X)
        return X_scaled, scaler

    @staticmethod
    def encode_label(y):
        le = LabelEncoder()
        return le.fit_transform(np.ravel(y)), le

    def split_train_test(self, test_size=0.2, train_size=None,
                         random_state=41, shuffle=True, stratify=None, inplace=True):
        """
        The wrapper of the split_train_test function in scikit-learn library.
        """
        self.X_train, self.X_test, self.y_train, self.y_test = train_test_split(
            self.X, self.y, test_size=test_size, train_size=train_size,
            random_state=random_state, shuffle=shuffle, stratify=stratify)
        if not inplace:
            return self.X_train, self.X_test, self.y_train, self.y_test
        return self

    def set_train_test(self, X_train=None, y_train=None, X_test=None, y_test=None):
        """
        Function use to set your own X_train, y_train, X_test, y_test in case you don't want to use our split function
        """
        self.X_train = X_train
        self.y_train = y_train
        self.X_test = X_test
        self.y_test = y_test
        return self
