#!/usr/bin/env python
# Created by "Thieu" at 10:32, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

import operator
import numbers
import numpy as np


def is_in_bound(value, bound):
    ops = None
    if type(bound) is tuple:
        ops = operator.lt
    elif type(bound) is list:
        ops = operator.le
    if bound[0] == float("-inf") and bound[1] == float("inf"):
        return True
    elif bound[0] == float("-inf") and ops(value, bound[1]):
        return True
    elif ops(bound[0], value) and bound[1] == float("inf"):
        return True
    elif ops(bound[0], value) and ops(value, bound[1]):
        return True
    return False


def check_int(name: str, value, bound=None):
    if isinstance(value, numbers.Number) and not isinstance(value, bool):
        if bound is None:
            return int(value)
        elif is_in_bound(value, bound):
            return int(value)
    bound = "" if bound is None else f"and value should be in range: {bound}"
    raise ValueError(f"'{name}' is an integer {bound}.")


def check_float(name: str, value, bound=None):
    if isinstance(value, numbers.Number) and not isinstance(value, bool):
        if bound is None:
            return float(value)
        elif is_in_bound(value, bound):
            return float(value)
    bound = "" if bound is None else f"and value should be in range: {bound}"
    raise ValueError(f"'{name}' is a float {bound}.")


def check_bool(name: str, value: bool, bound=(True, False)):
    if type(value) is bool:
        if value in bound:
            return value
    bound = "" if bound is None else f"and value should be one of this: {bound}"
    raise ValueError(f"'{name}' is a boolean {bound}.")


def check_tuple_int(name: str, values, bound=None):
    """
    Check a sequence of integers such as the hidden layer sizes.

    Returns:
        tuple: The validated integers.

    Raises:
        TypeError: If `values` is not a list, tuple or 1-D numpy array.
        ValueError: If an item is not an integer inside `bound`.
    """
    if isinstance(values, np.ndarray) and values.ndim == 1:
        values = values.tolist()
    if not isinstance(values, (list, tuple)):
        raise TypeError(f"'{name}' should be a list, tuple or 1-D np.ndarray of integers.")
    result = []
    for idx, value in enumerate(values):
        if not isinstance(value, numbers.Integral) or isinstance(value, bool):
            raise ValueError(f"'{name}[{idx}]' is not an integer.")
        if bound is not None and not is_in_bound(value, bound):
            raise ValueError(f"'{name}[{idx}]' should be in range: {bound}.")
        result.append(int(value))
    return tuple(result)


def check_finite(name: str, *arrays):
    """
    Fail fast on the first NaN or Inf found in `arrays`.

    Raises:
        FloatingPointError: naming the offending buffer.
    """
    for arr in arrays:
        if arr is not None and not np.all(np.isfinite(arr)):
            raise FloatingPointError(f"Non-finite value detected in {name}. The training has diverged, "
                                     f"try a smaller learning rate or enable gradient clipping.")
    return True
