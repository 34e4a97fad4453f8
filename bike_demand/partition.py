"""Reproducible fit / validation split of the training table.

Rows are grouped by outcome quantile and each group is sampled separately, so
both subsets keep roughly the outcome distribution of the full table.
"""
import logging

import numpy as np
import pandas as pd

from bike_demand.constants import COUNT_COLUMN, DEFAULT_SEED, FIT_FRACTION, OUTCOME_GROUPS
from bike_demand.errors import ConfigurationError

log = logging.getLogger(__name__)


def _outcome_groups(values, groups):
    groups = max(1, min(groups, len(values)))
    # rank first so heavy ties in the outcome cannot collapse the quantile edges
    ranks = values.rank(method="first")
    return pd.qcut(ranks, q=groups, labels=False)


def _group_quotas(sizes, fraction):
    """Fit rows per group, summing to round(fraction * total) and leaving both subsets non-empty."""
    total = sum(sizes)
    target = min(max(round(fraction * total), 1), total - 1)
    exact = [fraction * s for s in sizes]
    quotas = [min(int(e), s) for e, s in zip(exact, sizes)]
    # hand out what is left by largest remainder, stable on ties
    order = sorted(range(len(sizes)), key=lambda i: quotas[i] - exact[i])
    short = target - sum(quotas)
    for i in order:
        if short <= 0:
            break
        if quotas[i] < sizes[i]:
            quotas[i] += 1
            short -= 1
    return quotas


def partition_indices(df, fraction=FIT_FRACTION, seed=DEFAULT_SEED,
                      outcome=COUNT_COLUMN, groups=OUTCOME_GROUPS):
    """Return ``(fit_labels, validation_labels)`` as row labels of ``df`` in table order.

    ``round(fraction * len(df))`` rows go to the fit set, shared across the
    outcome groups in proportion to their size. Both subsets must come out non-empty. The same
    ``seed`` on the same table always yields the same split.
    """
    if not 0 < fraction < 1:
        raise ConfigurationError(f"fraction must be in (0, 1), got {fraction}")
    if df.empty:
        raise ConfigurationError("Cannot partition an empty table")
    if outcome not in df.columns:
        raise ConfigurationError(f"Outcome column {outcome!r} not in table")

    rng = np.random.default_rng(seed)
    labels = _outcome_groups(df[outcome], groups).to_numpy()
    members = [np.flatnonzero(labels == g) for g in np.sort(np.unique(labels))]
    quotas = _group_quotas([len(m) for m in members], fraction)

    fit_pos = []
    for group_rows, take in zip(members, quotas):
        fit_pos.extend(rng.permutation(group_rows)[:take])

    fit_mask = np.zeros(len(df), dtype=bool)
    fit_mask[fit_pos] = True
    fit_labels = df.index[fit_mask]
    val_labels = df.index[~fit_mask]
    if len(fit_labels) == 0 or len(val_labels) == 0:
        raise ConfigurationError(
            f"Split of {len(df)} rows at fraction={fraction} leaves an empty subset "
            f"(fit={len(fit_labels)}, validation={len(val_labels)})"
        )

    log.info("Partition: fit rows=%d, validation rows=%d (fraction=%.2f, seed=%s)",
             len(fit_labels), len(val_labels), fraction, seed)
    return fit_labels, val_labels


def partition(df, fraction=FIT_FRACTION, seed=DEFAULT_SEED,
              outcome=COUNT_COLUMN, groups=OUTCOME_GROUPS):
    """Split ``df`` into ``(fit, validation)`` frames; see :func:`partition_indices`."""
    fit_labels, val_labels = partition_indices(df, fraction, seed, outcome, groups)
    return df.loc[fit_labels], df.loc[val_labels]
