#!/usr/bin/env python
# Created by "Thieu" at 16:40, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

__version__ = "0.1.0"

from xmlp.helpers.activation import Activation
from xmlp.helpers.loss import Loss
from xmlp.helpers.preprocessor import Data
from xmlp.core.network import Network
from xmlp.models.gd_mlp import MlpClassifier, MlpRegressor
