"""Derived columns shared by the training and test tables.

Both tables go through :func:`add_features` with the same epoch, taken from
the training table by :func:`training_epoch`, so ``hours_elapsed`` means the
same thing on either side.
"""
import logging

import numpy as np
import pandas as pd

from bike_demand.constants import (
    CATEGORY_LEVELS,
    COUNT_COLUMN,
    DATETIME_FORMAT,
    ELAPSED_COLUMN,
    HOUR_COLUMN,
    KEY_COLUMN,
    LOG_COUNT_COLUMN,
    MERGED_WEATHER,
    RARE_WEATHER,
    TIMESTAMP_COLUMN,
)
from bike_demand.errors import DataIntegrityError

log = logging.getLogger(__name__)

REQUIRED_COLUMNS = [KEY_COLUMN, "workingday", "weather"]
OPTIONAL_CATEGORICALS = ["season", "holiday"]
ONE_HOUR = pd.Timedelta(hours=1)


def _parse_timestamps(df):
    parsed = pd.to_datetime(df[KEY_COLUMN], format=DATETIME_FORMAT, errors="coerce")
    bad = parsed.isna()
    if bad.any():
        rows = df.index[bad][:10].tolist()
        raise DataIntegrityError(f"Unparseable {KEY_COLUMN} values in rows {rows}")
    return parsed


def _as_category(series, name):
    levels = CATEGORY_LEVELS[name]
    unknown = ~series.isin(levels)
    if unknown.any():
        rows = series.index[unknown][:10].tolist()
        raise DataIntegrityError(f"Column {name!r} has values outside {levels} in rows {rows}")
    return pd.Series(pd.Categorical(series, categories=levels), index=series.index, name=name)


def training_epoch(train):
    """Earliest timestamp of the training table, the zero of ``hours_elapsed``."""
    return _parse_timestamps(train).min()


def add_features(df, epoch):
    """Return a copy of ``df`` with hour, elapsed hours, recoded categoricals and log count.

    Rows keep their order and labels. ``log_count`` is only added when a
    ``count`` column is present, i.e. on training rows.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataIntegrityError(f"Missing required columns {missing}")

    out = df.copy()
    log.info("Feature engineering started: shape=%s", out.shape)

    out[TIMESTAMP_COLUMN] = _parse_timestamps(out)
    out[HOUR_COLUMN] = _as_category(out[TIMESTAMP_COLUMN].dt.hour, HOUR_COLUMN)
    out[ELAPSED_COLUMN] = (out[TIMESTAMP_COLUMN] - pd.Timestamp(epoch)) / ONE_HOUR

    # weather 4 (heavy rain / snow) is almost never observed, fold it into 3
    weather = out["weather"].where(out["weather"] != RARE_WEATHER, MERGED_WEATHER)
    out["weather"] = _as_category(weather, "weather")
    out["workingday"] = _as_category(out["workingday"], "workingday")
    for col in OPTIONAL_CATEGORICALS:
        if col in out.columns:
            out[col] = _as_category(out[col], col)

    if COUNT_COLUMN in out.columns:
        counts = out[COUNT_COLUMN]
        bad = counts.isna() | (counts < 1)
        if bad.any():
            rows = out.index[bad][:10].tolist()
            raise DataIntegrityError(f"{COUNT_COLUMN} must be >= 1, offending rows {rows}")
        out[LOG_COUNT_COLUMN] = np.log(counts.astype(float))

    log.info("Feature engineering completed: new shape=%s", out.shape)
    return out
