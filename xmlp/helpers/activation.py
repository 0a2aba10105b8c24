#!/usr/bin/env python
# Created by "Thieu" at 09:20, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

from enum import Enum
import numpy as np
from scipy.special import expit


class Activation(Enum):
    """
    Activation functions supported by the dense layers.

    Every member knows how to write its forward value and its derivative into a
    caller-supplied buffer, so the layers never allocate per minibatch.

    Supported activations:
        - identity: f(z) = z
        - logistic: f(z) = 1 / (1 + exp(-z))
        - tanh: f(z) = tanh(z)
        - relu: f(z) = max(0, z)
    """

    IDENTITY = "identity"
    LOGISTIC = "logistic"
    TANH = "tanh"
    RELU = "relu"

    @classmethod
    def get(cls, name):
        """
        Resolve an activation by its name.

        Parameters:
            name (str or Activation): Case-insensitive activation name.

        Returns:
            Activation: The matching member.

        Raises:
            ValueError: If the name is not a supported activation.
        """
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            for member in cls:
                if member.value == name.lower():
                    return member
        raise ValueError(f"Unsupported activation: {name}. Supported activations are: {cls.names()}")

    @classmethod
    def names(cls):
        return [member.value for member in cls]

    def forward(self, Z, out):
        """
        Write activation(Z) into `out` and return it.

        `out` may be a non-contiguous view (the prediction view of a layer).
        """
        if self is Activation.IDENTITY:
            np.copyto(out, Z)
        elif self is Activation.LOGISTIC:
            expit(Z, out=out)
        elif self is Activation.TANH:
            np.tanh(Z, out=out)
        else:
            np.maximum(Z, 0., out=out)
        return out

    def derivative(self, Z, Ypred, out):
        """
        Write d activation / dZ into `out` and return it.

        Parameters:
            Z (np.ndarray): Pre-activation values.
            Ypred (np.ndarray): activation(Z), reused where it is cheaper than Z.
            out (np.ndarray): Destination buffer with the shape of Z.
        """
        if self is Activation.IDENTITY:
            out.fill(1.)
        elif self is Activation.LOGISTIC:
            # y * (1 - y)
            np.subtract(1., Ypred, out=out)
            np.multiply(out, Ypred, out=out)
        elif self is Activation.TANH:
            # 1 - y^2
            np.multiply(Ypred, Ypred, out=out)
            np.subtract(1., out, out=out)
        else:
            np.greater(Z, 0., out=out)
        return out
