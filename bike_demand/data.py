import logging

import pandas as pd

from bike_demand.constants import COUNT_COLUMN, KEY_COLUMN, LEAK_COLUMNS, RAW_COLUMNS
from bike_demand.errors import DataIntegrityError

log = logging.getLogger(__name__)


def load_table(path, is_train=True):
    """Read a Kaggle-layout CSV and check it carries the expected columns.

    The datetime column is kept as the raw string so the submission can echo
    it back unchanged. ``casual`` and ``registered`` are dropped from training
    tables since they add up to the outcome.
    """
    df = pd.read_csv(path, dtype={KEY_COLUMN: str})
    log.info("Loaded %s | shape=%s", path, df.shape)

    required = RAW_COLUMNS + ([COUNT_COLUMN] if is_train else [])
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise DataIntegrityError(f"{path}: missing required columns {missing}")

    if is_train:
        df = df.drop(columns=LEAK_COLUMNS, errors="ignore")

    log.debug("Columns: %s", list(df.columns))
    return df
