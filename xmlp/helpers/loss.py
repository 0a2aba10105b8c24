#!/usr/bin/env python
# Created by "Thieu" at 09:41, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

from enum import Enum
import numpy as np

EPSILON = 1e-12


class Loss(Enum):
    """
    Loss functions used to seed the backward pass.

    `compute` returns the mean loss over the rows of the batch. When a gradient buffer is
    given it also receives the per-sample derivative of the loss with respect to the
    prediction (not divided by the batch size).

    Supported losses:
        - square: (Ypred - Ytrue)^2 / 2
        - log: -Ytrue * log(Ypred)
        - cross-entropy: -Ytrue * log(Ypred) - (1 - Ytrue) * log(1 - Ypred)
    """

    SQUARE = "square"
    LOG = "log"
    CROSS_ENTROPY = "cross-entropy"

    @classmethod
    def get(cls, name):
        """
        Resolve a loss by its name.

        Raises:
            ValueError: If the name is not a supported loss.
        """
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            for member in cls:
                if member.value == name.lower():
                    return member
        raise ValueError(f"Unsupported loss: {name}. Supported losses are: {cls.names()}")

    @classmethod
    def names(cls):
        return [member.value for member in cls]

    @property
    def is_probabilistic(self):
        """True for losses that expect outputs in (0, 1)."""
        return self is not Loss.SQUARE

    def compute(self, Ytrue, Ypred, grad=None):
        """
        Compute the loss of a batch, optionally writing dLoss/dYpred into `grad`.

        Parameters:
            Ytrue (np.ndarray): Targets, shape (n_samples, n_outputs).
            Ypred (np.ndarray): Predictions, same shape as Ytrue.
            grad (np.ndarray, None): Destination for the loss gradient.

        Returns:
            float: The mean loss over the batch rows.
        """
        if Ytrue.shape != Ypred.shape:
            raise ValueError(f"Loss {self.value}: shape mismatch {Ytrue.shape} != {Ypred.shape}.")
        n_samples = Ytrue.shape[0]
        if self is Loss.SQUARE:
            diff = Ypred - Ytrue
            J = np.sum(diff * diff) / 2. / n_samples
            if grad is not None:
                np.subtract(Ypred, Ytrue, out=grad)
            return float(J)
        h = np.clip(Ypred, EPSILON, 1. - EPSILON)
        if self is Loss.LOG:
            J = -np.sum(Ytrue * np.log(h)) / n_samples
            if grad is not None:
                np.divide(-Ytrue, h, out=grad)
            return float(J)
        J = -np.sum(Ytrue * np.log(h) + (1. - Ytrue) * np.log(1. - h)) / n_samples
        if grad is not None:
            np.copyto(grad, -Ytrue / h + (1. - Ytrue) / (1. - h))
        return float(J)
