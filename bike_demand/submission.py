import logging
from pathlib import Path

import numpy as np
import pandas as pd

from bike_demand.constants import COUNT_COLUMN, KEY_COLUMN

log = logging.getLogger(__name__)


def build_submission(model, test_table):
    """Pair each raw test timestamp with its predicted count, keeping row order.

    ``model.predict`` returns ``ln(count)``; counts are exponentiated, clipped
    at zero and rounded.
    """
    pred_log = model.predict(test_table)
    test_pred = np.maximum(0, np.exp(pred_log))

    return pd.DataFrame({
        KEY_COLUMN: test_table[KEY_COLUMN].astype(str).to_numpy(),
        COUNT_COLUMN: np.round(test_pred).astype(int),
    })


def write_submission(submission, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    submission.to_csv(path, index=False)
    log.info("Saved %s (%d rows)", path, len(submission))
    return path
