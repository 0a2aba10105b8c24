#!/usr/bin/env python
# Created by "Thieu" at 10:05, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

from functools import partial
import numpy as np
import torch
import torch.nn as nn


SUPPORTED_OPTIMIZERS = [
    "Adadelta", "Adagrad", "Adam", "Adamax", "AdamW", "ASGD",
    "NAdam", "RAdam", "RMSprop", "Rprop", "SGD",
]

# Short names kept from the original solver registry, with their default hyper-parameters.
OPTIMIZER_ALIASES = {
    "sgd": ("SGD", {"lr": 0.01}),
    "agd": ("SGD", {"lr": 0.01, "momentum": 0.9, "nesterov": True}),
    "adagrad": ("Adagrad", {"lr": 0.01}),
    "rmsprop": ("RMSprop", {"lr": 0.001}),
    "adadelta": ("Adadelta", {"lr": 1.0}),
    "adam": ("Adam", {"lr": 0.001}),
}


def resolve_optimizer(optim="Adam", optim_params=None):
    """
    Resolve an optimizer name into a torch.optim class name and its keyword arguments.

    Weight decay acts on the zero shadow parameter and would never reach the real weights, so
    it is rejected here and switched off for AdamW. Use `alpha` for an L2 penalty instead.

    Parameters:
        optim (str): A name from SUPPORTED_OPTIMIZERS or a key of OPTIMIZER_ALIASES.
        optim_params (dict, None): Hyper-parameters that override the defaults.

    Returns:
        tuple: (class name, dict of keyword arguments)

    Raises:
        ValueError: If the optimizer is not supported, or a nonzero `weight_decay` is given.
    """
    params = {}
    if not isinstance(optim, str):
        raise ValueError(f"optim should be a string and belong to {SUPPORTED_OPTIMIZERS} or {list(OPTIMIZER_ALIASES.keys())}")
    if optim in OPTIMIZER_ALIASES:
        optim, defaults = OPTIMIZER_ALIASES[optim]
        params.update(defaults)
    elif optim not in SUPPORTED_OPTIMIZERS:
        raise ValueError(f"Unsupported optimizer: {optim}. Supported optimizers are: "
                         f"{SUPPORTED_OPTIMIZERS} and aliases {list(OPTIMIZER_ALIASES.keys())}")
    if optim_params:
        params.update(optim_params)
    if params.get("weight_decay"):
        raise ValueError(f"weight_decay is not supported by {optim}, use alpha with l1_ratio=0 for an L2 penalty.")
    if optim == "AdamW":
        params["weight_decay"] = 0.
    return optim, params


class GradientOptimizer:
    """
    Turns a gradient into a parameter update, keeping its own state across calls.

    The update rule is delegated to a torch.optim optimizer that drives a zero-valued
    float64 shadow parameter. Before every step the shadow is reset to zero and the
    gradient is installed as its `.grad`; after the step the shadow holds exactly the
    delta the optimizer wants to add to the real weights. Momentum, running averages
    and step counters live inside the torch optimizer and persist between calls.

    One instance serves one parameter tensor: it must not be shared between layers.

    Parameters:
        shape (tuple): Shape of the parameter tensor this optimizer serves.
        optim (str): Optimizer name, see `resolve_optimizer`.
        optim_params (dict, None): Optimizer hyper-parameters (e.g. {"lr": 0.01}).
    """

    def __init__(self, shape, optim="Adam", optim_params=None):
        self.shape = tuple(shape)
        self.name, self.params = resolve_optimizer(optim, optim_params)
        self._shadow = nn.Parameter(torch.zeros(self.shape, dtype=torch.float64))
        self.optimizer = getattr(torch.optim, self.name)([self._shadow], **self.params)

    def get_update(self, gradient, update=None):
        """
        Compute the parameter update for a gradient.

        Parameters:
            gradient (np.ndarray): Gradient of the loss, shape `self.shape`.
            update (np.ndarray, None): Destination buffer; allocated when None.

        Returns:
            np.ndarray: The update to add to the parameters.
        """
        if gradient.shape != self.shape:
            raise ValueError(f"Optimizer expects a gradient of shape {self.shape}, got {gradient.shape}.")
        with torch.no_grad():
            self._shadow.zero_()
        self._shadow.grad = torch.tensor(gradient, dtype=torch.float64)
        self.optimizer.step()
        result = self._shadow.detach().numpy()
        if update is None:
            return result.copy()
        np.copyto(update, result)
        return update

    def __repr__(self):
        return f"{self.__class__.__name__}(shape={self.shape}, optim={self.name!r}, params={self.params})"


def get_optimizer_creator(optim="Adam", optim_params=None):
    """
    Build a factory producing one fresh GradientOptimizer per parameter shape.

    The name is validated immediately, so a misconfigured optimizer fails before any
    layer is allocated.

    Returns:
        Callable[[tuple], GradientOptimizer]
    """
    resolve_optimizer(optim, optim_params)
    return partial(GradientOptimizer, optim=optim, optim_params=optim_params)
