#!/usr/bin/env python
# Created by "Thieu" at 20:02, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

import numpy as np
from xmlp import Data, MlpRegressor
from sklearn.datasets import load_diabetes


## Load data object
X, y = load_diabetes(return_X_y=True)
data = Data(X, y)

## Split train and test
data.split_train_test(test_size=0.2, random_state=2)
print(data.X_train.shape, data.X_test.shape)

## Scaling dataset
data.X_train, scaler_X = data.scale(data.X_train, scaling_methods=("standard"))
data.X_test = scaler_X.transform(data.X_test)

data.y_train, scaler_y = data.scale(data.y_train, scaling_methods=("minmax", ))
data.y_test = np.ravel(scaler_y.transform(np.reshape(data.y_test, (-1, 1))))

## Create model
model = MlpRegressor(hidden_layer_sizes=(30, 10), act_name="tanh", optim="Adam", optim_params={"lr": 0.005},
                     alpha=1e-3, l1_ratio=0.2, gradient_clipping=5., epochs=300, batch_size=32,
                     valid_rate=0.1, seed=42, verbose=True)
## Train the model
model.fit(data.X_train, data.y_train)

## Test the model
y_pred = model.predict(data.X_test)
print(y_pred)

## Calculate some metrics
print(model.score(data.X_test, data.y_test))
print(model.evaluate(y_true=data.y_test, y_pred=y_pred, list_metrics=["R", "NSE", "MAPE", "KGE", "R2S", "R2"]))

## Save the history
model.save_training_loss(save_path="history", filename="loss.csv")
model.save_model(save_path="history", filename="mlp_regressor.pkl")
