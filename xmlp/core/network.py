#!/usr/bin/env python
# Created by "Thieu" at 14:02, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

import numpy as np
from xmlp.core.layer import Layer
from xmlp.helpers.activation import Activation
from xmlp.helpers.loss import Loss
from xmlp.helpers.optimizer import get_optimizer_creator
from xmlp.helpers import validator


class ParameterArena:
    """
    Three flat float64 stores (coefficients, gradients, updates) shared by every layer.

    Each layer owns the disjoint window `[offset, offset + rows * cols)` of each store,
    so whole-network operations (norms, serialisation) work on the flat arrays directly.

    Parameters:
        shapes (list of tuple): Parameter shape of every layer, in layer order.
    """

    def __init__(self, shapes):
        self.shapes = [tuple(shape) for shape in shapes]
        self.offsets = []
        total = 0
        for rows, cols in self.shapes:
            self.offsets.append(total)
            total += rows * cols
        self.size = total
        self.coefs = np.zeros(total, dtype=np.float64)
        self.grads = np.zeros(total, dtype=np.float64)
        self.updates = np.zeros(total, dtype=np.float64)

    def window(self, idx):
        """Return the (coefs, grads, updates) views of layer `idx`."""
        shape = self.shapes[idx]
        start = self.offsets[idx]
        stop = start + shape[0] * shape[1]
        return tuple(store[start:stop].reshape(shape) for store in (self.coefs, self.grads, self.updates))

    def grad_norm(self):
        return float(np.linalg.norm(self.grads))

    def __len__(self):
        return len(self.shapes)


class Network:
    """
    A feed-forward stack of dense layers trained by backpropagation.

    The layers are sized from (n_features, *hidden_layer_sizes, n_outputs). Hidden layers
    use `act`; the output layer uses it too, except with the "log" and "cross-entropy"
    losses where the output is forced to logistic.

    Parameters:
        n_features (int): Number of input columns.
        hidden_layer_sizes (tuple of int): Units of each hidden layer, may be empty.
        n_outputs (int): Number of output units.
        act (str or Activation): Hidden activation.
        loss (str or Loss): Training loss.
        optimizer_creator (callable, None): `optimizer_creator(shape)` returns a fresh optimizer
            for a parameter tensor of that shape. Adam by default.
        rnd (callable, None): `rnd(shape)` draws initial weights. Standard normal by default.
        check_finite (bool): Debug mode. Fail with FloatingPointError on the first NaN/Inf
            produced by the forward or backward pass.
    """

    def __init__(self, n_features, hidden_layer_sizes=(), n_outputs=1, act="relu", loss="square",
                 optimizer_creator=None, rnd=None, check_finite=False):
        self.n_features = n_features
        self.hidden_layer_sizes = tuple(hidden_layer_sizes)
        self.n_outputs = n_outputs
        self.act = Activation.get(act)
        self.loss = Loss.get(loss)
        self.check_finite = check_finite
        if optimizer_creator is None:
            optimizer_creator = get_optimizer_creator("Adam")
        if rnd is None:
            rnd = np.random.default_rng().standard_normal
        if self.loss.is_probabilistic:
            self.output_act = Activation.LOGISTIC
        else:
            self.output_act = self.act
        # "log" on a single output is the binary cross-entropy
        if self.loss is Loss.LOG and n_outputs == 1:
            self.output_loss = Loss.CROSS_ENTROPY
        else:
            self.output_loss = self.loss

        sizes = [n_features, *self.hidden_layer_sizes, n_outputs]
        shapes = [(1 + n_in, n_out) for n_in, n_out in zip(sizes[:-1], sizes[1:])]
        self.arena = ParameterArena(shapes)
        self.layers = []
        for idx, shape in enumerate(shapes):
            act_layer = self.output_act if idx == len(shapes) - 1 else self.act
            coefs, grads, updates = self.arena.window(idx)
            self.layers.append(Layer(shape[0] - 1, shape[1], act_layer, optimizer_creator(shape),
                                     coefs, grads, updates, rnd))

    @property
    def output_layer(self):
        return self.layers[-1]

    def _validate(self, stage, idx, *arrays):
        if self.check_finite:
            validator.check_finite(f"{stage} of layer {idx}", *arrays)

    def _check_input(self, X):
        if X.ndim != 2 or X.shape[1] != self.n_features:
            raise ValueError(f"X has shape {X.shape}, but the network expects {self.n_features} features.")

    @staticmethod
    def _copy_out(name, dst, src):
        # np.copyto would broadcast silently
        if dst.shape != src.shape:
            raise ValueError(f"{name} buffer has shape {dst.shape}, expected {src.shape}.")
        np.copyto(dst, src)

    def forward(self, X, z_out=None, y_out=None):
        """
        Run the forward pass, filling every layer's z and y_pred for the rows of X.

        Parameters:
            X (np.ndarray): Inputs, shape (n_samples, n_features).
            z_out (np.ndarray, None): Receives the output layer's pre-activation.
            y_out (np.ndarray, None): Receives the output layer's prediction.

        Returns:
            np.ndarray: The output layer's y_pred view (overwritten by the next pass).
        """
        self._check_input(X)
        n_samples = X.shape[0]
        prev_layer = None
        for idx, layer in enumerate(self.layers):
            layer.initialize_for(n_samples, prev_layer)
            layer.activate(X if prev_layer is None else prev_layer.y_pred)
            self._validate("forward", idx, layer.z, layer.y_pred)
            prev_layer = layer
        if z_out is not None:
            self._copy_out("z_out", z_out, self.output_layer.z)
        if y_out is not None:
            self._copy_out("y_out", y_out, self.output_layer.y_pred)
        return self.output_layer.y_pred

    def backward(self, X, Y, batch_fraction=1., n_samples=None, alpha=0., l1_ratio=0.,
                 gradient_clipping=0., apply_updates=True):
        """
        Backpropagate the error of the last forward pass and update the weights.

        Layers are visited from the output to the input. Every layer ends with
        `y_diff = dLoss/dz` and `gradient = [1 X]^T . y_diff` (plus the elastic-net term
        and clipping); the optimizer updates are applied once all gradients are known.

        Parameters:
            X (np.ndarray): The minibatch inputs used in the last forward pass.
            Y (np.ndarray): The minibatch targets, shape (n_samples, n_outputs).
            batch_fraction (float): Minibatch rows / training set rows, scales the data loss.
            n_samples (int, None): Training set rows, used by the regularization. Default: rows of X.
            alpha (float): Regularization strength; 0 skips the regularization entirely.
            l1_ratio (float): Share of L1 in the elastic-net penalty, in [0, 1].
            gradient_clipping (float): Max Frobenius norm of each layer gradient; 0 disables clipping.
            apply_updates (bool): When False the gradients are computed but weights are left untouched.

        Returns:
            float: The minibatch loss (scaled data loss plus the penalty of every layer).
        """
        if n_samples is None:
            n_samples = X.shape[0]
        output_layer = self.output_layer
        if Y.shape != output_layer.y_pred.shape:
            raise ValueError(f"Y has shape {Y.shape}, but the last forward pass produced {output_layer.y_pred.shape}.")
        last = len(self.layers) - 1
        J = 0.
        for idx in range(last, -1, -1):
            layer = self.layers[idx]
            X_l = X if idx == 0 else self.layers[idx - 1].y_pred
            if idx == last:
                np.copyto(layer.y_true, Y)
                np.subtract(layer.y_pred, Y, out=layer.y_diff)
                J = self.output_loss.compute(layer.y_true, layer.y_pred, layer.y_diff) * batch_fraction
            else:
                # Error reaching this layer's outputs through the next layer's non-bias weights
                next_layer = self.layers[idx + 1]
                np.matmul(next_layer.y_diff, next_layer.weights[1:].T, out=layer.y_diff)
                np.subtract(layer.y_pred, layer.y_diff, out=layer.y_true)
                # Square loss of the pseudo-target writes y_pred - y_true back into y_diff
                Loss.SQUARE.compute(layer.y_true, layer.y_pred, layer.y_diff)
            self._validate("delta", idx, layer.y_diff)

            layer.fold_activation_gradient()
            layer.compute_gradient(X_l)
            if alpha > 0.:
                J += layer.add_regularization(alpha, l1_ratio, n_samples)
            if gradient_clipping > 0.:
                layer.clip_gradient(gradient_clipping)
            self._validate("gradient", idx, layer.gradient)

        if apply_updates:
            for idx, layer in enumerate(self.layers):
                layer.apply_update()
                self._validate("update", idx, layer.update, layer.weights)
        return J

    def compute_loss(self, X, Y, n_samples=None, alpha=0., l1_ratio=0.):
        """
        The objective reported by `backward` for a whole batch, without touching the weights.

        Returns:
            float: Mean data loss over the rows of X plus the elastic-net penalty.
        """
        if n_samples is None:
            n_samples = X.shape[0]
        y_pred = self.forward(X)
        if Y.shape != y_pred.shape:
            raise ValueError(f"Y has shape {Y.shape}, expected {y_pred.shape}.")
        J = self.output_loss.compute(Y, y_pred)
        if alpha > 0.:
            for layer in self.layers:
                J += layer.penalty(alpha, l1_ratio, n_samples)
        return J

    def gradient_norm(self):
        """Frobenius norm of every layer gradient taken together."""
        return self.arena.grad_norm()

    def get_weights(self):
        """Flat copy of all parameters, layer after layer, bias rows included."""
        return self.arena.coefs.copy()

    def set_weights(self, solution):
        solution = np.asarray(solution, dtype=np.float64).ravel()
        if solution.size != self.arena.size:
            raise ValueError(f"Expected {self.arena.size} weights, got {solution.size}.")
        np.copyto(self.arena.coefs, solution)

    def get_weights_size(self):
        return self.arena.size

    def __setstate__(self, state):
        self.__dict__.update(state)
        # Rebind the layer windows onto the unpickled arena
        for idx, layer in enumerate(self.layers):
            layer.weights, layer.gradient, layer.update = self.arena.window(idx)

    def __repr__(self):
        sizes = [self.n_features, *self.hidden_layer_sizes, self.n_outputs]
        return (f"{self.__class__.__name__}(sizes={sizes}, act={self.act.value!r}, "
                f"output_act={self.output_act.value!r}, loss={self.loss.value!r})")
