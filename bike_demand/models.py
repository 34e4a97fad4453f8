"""Regression models behind one fit / predict interface.

``linear`` is ordinary least squares with categorical predictors expanded to
indicator columns (first level dropped as the baseline). It is fitted for
inspection of its coefficients. ``forest`` is a random forest left at library
defaults apart from the seed, the per-split feature subset and ``n_jobs``;
it is the model the submission is built from.
"""
import logging
from typing import List, NamedTuple

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.ensemble import RandomForestRegressor
from sklearn.linear_model import LinearRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder

from bike_demand.constants import (
    DEFAULT_OUTCOME,
    DEFAULT_PREDICTORS,
    DEFAULT_SEED,
    FOREST_MAX_FEATURES,
)
from bike_demand.errors import ConfigurationError, DataIntegrityError

log = logging.getLogger(__name__)

STRATEGIES = ("linear", "forest")


class ModelFormula(NamedTuple):
    """``outcome ~ predictors``, the one place the modelled columns are named."""

    outcome: str
    predictors: List[str]

    def __str__(self):
        return f"{self.outcome} ~ {' + '.join(self.predictors)}"


DEFAULT_FORMULA = ModelFormula(DEFAULT_OUTCOME, list(DEFAULT_PREDICTORS))


def _is_categorical(series):
    return isinstance(series.dtype, pd.CategoricalDtype) or series.dtype == object


def _check_columns(table, columns):
    missing = [c for c in columns if c not in table.columns]
    if missing:
        raise ConfigurationError(f"Columns {missing} not found in table")
    incomplete = [c for c in columns if table[c].isna().any()]
    if incomplete:
        raise DataIntegrityError(f"Missing values in columns {incomplete}")


def _min_rows(table, categorical):
    levels = [2]
    for c in categorical:
        col = table[c]
        if isinstance(col.dtype, pd.CategoricalDtype):
            levels.append(len(col.cat.categories))
        else:
            levels.append(col.nunique())
    return max(levels)


def build_pipeline(strategy, numeric, categorical, seed=DEFAULT_SEED):
    if strategy == "linear":
        encoder = OneHotEncoder(drop="first", sparse_output=False, handle_unknown="ignore")
        model = LinearRegression()
    elif strategy == "forest":
        encoder = OneHotEncoder(sparse_output=False, handle_unknown="ignore")
        model = RandomForestRegressor(
            max_features=FOREST_MAX_FEATURES, random_state=seed, n_jobs=-1
        )
    else:
        raise ConfigurationError(f"Unknown strategy {strategy!r}, expected one of {STRATEGIES}")

    preprocessor = ColumnTransformer(transformers=[
        ("num", "passthrough", numeric),
        ("cat", encoder, categorical),
    ])
    return Pipeline(steps=[
        ("pre", preprocessor),
        ("model", model),
    ])


class DemandModel:
    """Fit ``formula`` on a transformed table and predict the outcome for new rows."""

    def __init__(self, formula=DEFAULT_FORMULA, strategy="forest", seed=DEFAULT_SEED):
        if strategy not in STRATEGIES:
            raise ConfigurationError(f"Unknown strategy {strategy!r}, expected one of {STRATEGIES}")
        self.formula = formula
        self.strategy = strategy
        self.seed = seed
        self.pipeline = None

    def __repr__(self):
        return f"DemandModel({self.strategy}, {self.formula}, seed={self.seed})"

    def fit(self, table):
        predictors = list(self.formula.predictors)
        _check_columns(table, predictors + [self.formula.outcome])

        categorical = [c for c in predictors if _is_categorical(table[c])]
        numeric = [c for c in predictors if c not in categorical]

        needed = _min_rows(table, categorical)
        if len(table) < needed:
            raise ConfigurationError(
                f"Fit table has {len(table)} rows, {self.strategy} model needs at least {needed}"
            )

        self.pipeline = build_pipeline(self.strategy, numeric, categorical, self.seed)
        log.info("Fitting %s model: %s on %d rows", self.strategy, self.formula, len(table))
        self.pipeline.fit(table[predictors], table[self.formula.outcome])
        return self

    def predict(self, table):
        """One prediction per row of ``table``, on the outcome's scale, in row order."""
        if self.pipeline is None:
            raise ConfigurationError("Model must be fitted before predicting")
        predictors = list(self.formula.predictors)
        _check_columns(table, predictors)
        return np.asarray(self.pipeline.predict(table[predictors]), dtype=float)

    def feature_weights(self):
        """Coefficients (linear) or impurity importances (forest) per encoded feature."""
        if self.pipeline is None:
            raise ConfigurationError("Model must be fitted before inspecting it")
        names = self.pipeline.named_steps["pre"].get_feature_names_out()
        model = self.pipeline.named_steps["model"]
        if self.strategy == "linear":
            weights = model.coef_
        else:
            weights = model.feature_importances_

        weights_df = pd.DataFrame({
            "feature": names,
            "weight": weights,
            "importance": np.abs(weights),
        })
        return weights_df.sort_values("importance", ascending=False).reset_index(drop=True)
