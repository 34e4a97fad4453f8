"""RMSLE scoring: held-out validation and k-fold cross validation."""
import logging

import numpy as np
from sklearn.model_selection import KFold

from bike_demand.constants import COUNT_COLUMN, CV_FOLDS, DEFAULT_SEED
from bike_demand.errors import ConfigurationError, ShapeMismatchError
from bike_demand.models import DEFAULT_FORMULA, DemandModel

log = logging.getLogger(__name__)


def _check_lengths(a, b):
    if len(a) != len(b):
        raise ShapeMismatchError(f"Length mismatch: {len(a)} predictions vs {len(b)} actual values")


def rmsle(y_true, y_pred):
    """Root mean squared log error on the count scale, the competition metric."""
    _check_lengths(y_pred, y_true)
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.maximum(0, np.asarray(y_pred, dtype=float))
    return float(np.sqrt(np.mean((np.log1p(y_pred) - np.log1p(y_true)) ** 2)))


def evaluate(log_predictions, actual):
    """Score predictions made on the ``ln(count)`` scale against raw counts.

    The predictions are exponentiated back to counts first, the metric then
    applies its own ``log1p`` to both sides.
    """
    _check_lengths(log_predictions, actual)
    return rmsle(actual, np.exp(np.asarray(log_predictions, dtype=float)))


def validate(model, table):
    pred_log = model.predict(table)
    score = evaluate(pred_log, table[COUNT_COLUMN].to_numpy())
    log.info("%s model validation RMSLE: %.5f on %d rows", model.strategy, score, len(table))
    return score


def cross_validate(table, formula=DEFAULT_FORMULA, strategy="forest",
                   n_splits=CV_FOLDS, seed=DEFAULT_SEED):
    """Shuffled k-fold RMSLE, fitting a fresh model on every fold."""
    if not 2 <= n_splits <= len(table):
        raise ConfigurationError(
            f"n_splits must be between 2 and the number of rows ({len(table)}), got {n_splits}"
        )
    kf = KFold(n_splits=n_splits, shuffle=True, random_state=seed)

    scores = []
    for fold, (tr_idx, val_idx) in enumerate(kf.split(table), start=1):
        log.info("Fold %d: train rows=%d, val rows=%d", fold, len(tr_idx), len(val_idx))
        tr, val = table.iloc[tr_idx], table.iloc[val_idx]

        model = DemandModel(formula, strategy=strategy, seed=seed).fit(tr)
        pred_log = model.predict(val)
        fold_rmsle = evaluate(pred_log, val[COUNT_COLUMN].to_numpy())
        scores.append(fold_rmsle)
        log.info("Fold %d RMSLE: %.5f", fold, fold_rmsle)

    log.info("AVG RMSLE: %.5f (std %.5f)", np.mean(scores), np.std(scores))
    return scores
