import numpy as np
import pytest

from bike_demand.errors import ConfigurationError
from bike_demand.features import add_features, training_epoch
from bike_demand.partition import partition, partition_indices
from tests.conftest import make_frame


def test_same_seed_same_split(train_fe):
    fit_a, val_a = partition_indices(train_fe, fraction=0.7, seed=11)
    fit_b, val_b = partition_indices(train_fe.copy(), fraction=0.7, seed=11)
    assert list(fit_a) == list(fit_b)
    assert list(val_a) == list(val_b)


def test_different_seed_different_split(train_fe):
    fit_a, _ = partition_indices(train_fe, seed=1)
    fit_b, _ = partition_indices(train_fe, seed=2)
    assert set(fit_a) != set(fit_b)


def test_split_is_disjoint_and_covering(train_fe):
    fit, val = partition(train_fe, fraction=0.7, seed=3)
    assert len(fit) + len(val) == len(train_fe)
    assert set(fit.index).isdisjoint(val.index)
    assert set(fit.index) | set(val.index) == set(train_fe.index)


def test_fit_share_is_close_to_fraction(train_fe):
    fit, _ = partition(train_fe, fraction=0.7, seed=3)
    assert abs(len(fit) / len(train_fe) - 0.7) < 0.03


def test_outcome_distribution_is_balanced(train_fe):
    fit, val = partition(train_fe, fraction=0.7, seed=5)
    full_mean = train_fe["count"].mean()
    for part in (fit, val):
        assert abs(part["count"].mean() - full_mean) / full_mean < 0.15
    assert np.isclose(fit["count"].median(), train_fe["count"].median(), rtol=0.2)


def test_row_order_is_preserved(train_fe):
    fit, val = partition(train_fe, seed=3)
    assert fit.index.is_monotonic_increasing
    assert val.index.is_monotonic_increasing


@pytest.mark.parametrize("fraction", [0, 1, -0.2, 1.5])
def test_fraction_out_of_range(train_fe, fraction):
    with pytest.raises(ConfigurationError):
        partition(train_fe, fraction=fraction)


def test_empty_table_is_rejected(train_fe):
    with pytest.raises(ConfigurationError):
        partition(train_fe.iloc[0:0])


def test_missing_outcome_is_rejected(train_fe):
    with pytest.raises(ConfigurationError, match="count"):
        partition(train_fe.drop(columns=["count"]))


def test_high_fraction_on_small_table_keeps_validation_rows():
    raw = make_frame(periods=30)
    fe = add_features(raw, training_epoch(raw))

    fit, val = partition(fe, fraction=0.9, seed=0)
    assert len(val) > 0
    assert len(fit) == 27
    assert len(val) == 3


def test_split_leaving_an_empty_subset_is_rejected(train_fe):
    with pytest.raises(ConfigurationError, match="empty subset"):
        partition(train_fe.iloc[:1], fraction=0.5)
