#!/usr/bin/env python
# Created by "Thieu" at 13:10, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

import numpy as np
from xmlp.helpers.activation import Activation


def ones_added_matmul(X, W, out):
    """out = [1 X] . W, without materialising the column of ones."""
    np.matmul(X, W[1:], out=out)
    out += W[0]
    return out


def ones_added_t_matmul(X, D, out):
    """out = [1 X]^T . D, without materialising the column of ones."""
    np.sum(D, axis=0, out=out[0])
    np.matmul(X.T, D, out=out[1:])
    return out


class Layer:
    """
    A dense layer: one affine transform (weights + bias row) followed by an activation.

    The layer owns a window of the network's parameter, gradient and update arenas, plus
    a set of per-minibatch scratch buffers that are resized without being reallocated
    while their capacity suffices.

    Parameters:
        n_inputs (int): Number of input columns (without the bias column).
        n_outputs (int): Number of units.
        act (Activation or str): Activation applied to the pre-activation.
        optimizer (GradientOptimizer): Private optimizer turning `gradient` into `update`.
        weights (np.ndarray): View of shape (n_inputs + 1, n_outputs); row 0 is the bias row.
        gradient (np.ndarray): View with the shape of `weights`.
        update (np.ndarray): View with the shape of `weights`.
        rnd (callable, None): `rnd(shape)` draws the initial weights, standard normal by default.

    Attributes:
        z (np.ndarray): Pre-activation, (n_samples, n_outputs).
        next_x1 (np.ndarray): Augmented output (n_samples, 1 + n_outputs) whose column 0 is 1.0,
            read by the next layer as its augmented input.
        y_pred (np.ndarray): activation(z), a writable view on next_x1[:, 1:].
        x1 (np.ndarray, None): Read-only view on the previous layer's next_x1, None for the first layer.
        y_true, y_diff, h_grad (np.ndarray): Backpropagation scratch, (n_samples, n_outputs).
    """

    SCRATCH_BUFFERS = ("z", "y_true", "next_x1", "y_diff", "h_grad")

    def __init__(self, n_inputs, n_outputs, act, optimizer, weights, gradient, update, rnd=None):
        self.n_inputs = n_inputs
        self.n_outputs = n_outputs
        self.act = Activation.get(act)
        self.optimizer = optimizer
        shape = (n_inputs + 1, n_outputs)
        for name, arr in (("weights", weights), ("gradient", gradient), ("update", update)):
            if arr.shape != shape:
                raise ValueError(f"Layer {name} should have shape {shape}, got {arr.shape}.")
        if rnd is None:
            rnd = np.random.default_rng().standard_normal
        self.weights = weights
        self.weights[...] = rnd(shape)
        self.gradient = gradient
        self.gradient.fill(0.)
        self.update = update
        self.update.fill(0.)
        self._reset_scratch()

    def _reset_scratch(self):
        self._storage = {}
        self.n_samples = 0
        self.z, self.y_true, self.next_x1, self.y_diff, self.h_grad = None, None, None, None, None
        self.y_pred, self.x1 = None, None

    def _buffer(self, name, n_rows, n_cols):
        # Grow-only: the backing storage is replaced only when it is too small
        size = n_rows * n_cols
        storage = self._storage.get(name)
        if storage is None or storage.size < size:
            storage = np.empty(size, dtype=np.float64)
            self._storage[name] = storage
        return storage[:size].reshape(n_rows, n_cols)

    def capacity(self, name):
        """Number of float64 slots currently backing a scratch buffer."""
        storage = self._storage.get(name)
        return 0 if storage is None else storage.size

    def initialize_for(self, n_samples, prev_layer=None):
        """
        Size the scratch buffers for a batch of `n_samples` rows.

        Column 0 of `next_x1` is reset to 1.0, `y_pred` is rebound to the remaining
        columns, and `x1` is rebound to the previous layer's `next_x1` as a read-only view.
        """
        self.n_samples = n_samples
        self.z = self._buffer("z", n_samples, self.n_outputs)
        self.y_true = self._buffer("y_true", n_samples, self.n_outputs)
        self.next_x1 = self._buffer("next_x1", n_samples, 1 + self.n_outputs)
        self.y_diff = self._buffer("y_diff", n_samples, self.n_outputs)
        self.h_grad = self._buffer("h_grad", n_samples, self.n_outputs)
        self.next_x1[:, 0] = 1.
        self.y_pred = self.next_x1[:, 1:]
        if prev_layer is None:
            self.x1 = None
        else:
            if prev_layer.n_outputs != self.n_inputs:
                raise ValueError(f"Previous layer has {prev_layer.n_outputs} outputs, "
                                 f"this layer expects {self.n_inputs} inputs.")
            if prev_layer.n_samples != n_samples:
                raise ValueError(f"Previous layer holds {prev_layer.n_samples} rows, expected {n_samples}.")
            self.x1 = prev_layer.next_x1.view()
            self.x1.flags.writeable = False
        return self

    def activate(self, X):
        """
        Forward step: z = [1 X] . weights, y_pred = activation(z).

        X is the unaugmented input; when the augmented input of the previous layer is
        bound it is multiplied directly, bias row included.
        """
        if self.x1 is not None:
            np.matmul(self.x1, self.weights, out=self.z)
        else:
            if X.ndim != 2 or X.shape[1] != self.n_inputs:
                raise ValueError(f"Layer expects inputs with {self.n_inputs} columns, got shape {X.shape}.")
            ones_added_matmul(X, self.weights, self.z)
        self.act.forward(self.z, self.y_pred)
        return self.y_pred

    def fold_activation_gradient(self):
        """y_diff <- y_diff * activation'(z), i.e. dLoss/dz."""
        self.act.derivative(self.z, self.y_pred, self.h_grad)
        np.multiply(self.y_diff, self.h_grad, out=self.y_diff)
        return self.y_diff

    def compute_gradient(self, X):
        """gradient <- [1 X]^T . y_diff."""
        if self.x1 is not None:
            np.matmul(self.x1.T, self.y_diff, out=self.gradient)
        else:
            ones_added_t_matmul(X, self.y_diff, self.gradient)
        return self.gradient

    def penalty(self, alpha, l1_ratio, n_samples):
        """Elastic-net penalty of the non-bias weights."""
        weights_reg = self.weights[1:]
        R = 0.
        if l1_ratio > 0.:
            R += alpha * l1_ratio / n_samples * np.sum(np.abs(weights_reg))
        if l1_ratio < 1.:
            R += alpha * (1. - l1_ratio) / 2. / n_samples * np.sum(weights_reg * weights_reg)
        return float(R)

    def add_regularization(self, alpha, l1_ratio, n_samples):
        """
        Add the elastic-net gradient to `gradient` and return the penalty.

        The bias row is never penalised.
        """
        R = self.penalty(alpha, l1_ratio, n_samples)
        weights_reg = self.weights[1:]
        gradient_reg = self.gradient[1:]
        if l1_ratio > 0.:
            gradient_reg += alpha * l1_ratio / n_samples * np.sign(weights_reg)
        if l1_ratio < 1.:
            gradient_reg += alpha * (1. - l1_ratio) / n_samples * weights_reg
        return R

    def clip_gradient(self, threshold):
        """
        Rescale the whole gradient so its Frobenius norm does not exceed `threshold`.

        Returns:
            float: The norm before clipping.
        """
        norm = float(np.linalg.norm(self.gradient))
        if norm > threshold:
            self.gradient *= threshold / norm
        return norm

    def apply_update(self):
        """Ask the optimizer for an update and add it to the weights in place."""
        self.optimizer.get_update(self.gradient, self.update)
        self.weights += self.update
        return self.weights

    def __getstate__(self):
        state = self.__dict__.copy()
        # Views are rebuilt by the owning network and on the next forward pass
        for name in self.SCRATCH_BUFFERS + ("y_pred", "x1", "weights", "gradient", "update"):
            state[name] = None
        state["_storage"] = {}
        state["n_samples"] = 0
        return state

    def __repr__(self):
        return f"{self.__class__.__name__}(n_inputs={self.n_inputs}, n_outputs={self.n_outputs}, act={self.act.value!r})"
