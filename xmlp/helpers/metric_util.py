#!/usr/bin/env python
# Created by "Thieu" at 10:48, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

from permetrics import RegressionMetric, ClassificationMetric


def get_all_regression_metrics():
    # Element-wise metrics return arrays, not a single score
    UNUSED_METRICS = ("RE", "RB", "AE", "SE", "SLE")
    dict_results = {}
    for key, value in RegressionMetric.SUPPORT.items():
        if (key not in UNUSED_METRICS) and value["type"] in ("min", "max"):
            dict_results[key] = value["type"]
    return dict_results


def get_all_classification_metrics():
    dict_results = {}
    for key, value in ClassificationMetric.SUPPORT.items():
        if value["type"] in ("min", "max"):
            dict_results[key] = value["type"]
    return dict_results
