#!/usr/bin/env python
# Created by "Thieu" at 20:15, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

from xmlp import Data, MlpClassifier
from sklearn.datasets import load_breast_cancer


## Load data object
X, y = load_breast_cancer(return_X_y=True)
data = Data(X, y)

## Split train and test
data.split_train_test(test_size=0.2, random_state=2, inplace=True, shuffle=True)
print(data.X_train.shape, data.X_test.shape)

## Scaling dataset
data.X_train, scaler_X = data.scale(data.X_train, scaling_methods=("standard", "minmax"))
data.X_test = scaler_X.transform(data.X_test)

## Create model
model = MlpClassifier(hidden_layer_sizes=(20,), act_name="relu", optim="agd", optim_params={"lr": 0.001},
                      alpha=1e-4, epochs=200, batch_size=64, seed=42, verbose=True)
## Train the model
model.fit(X=data.X_train, y=data.y_train)

## Test the model
y_pred = model.predict(data.X_test)
print(y_pred)
print(model.predict_proba(data.X_test)[:5])

## Calculate some metrics
print(model.score(data.X_test, data.y_test))
print(model.evaluate(y_true=data.y_test, y_pred=y_pred, list_metrics=["AS", "F1S", "PS", "RS"]))
