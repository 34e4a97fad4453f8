import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from bike_demand.features import add_features, training_epoch


def make_frame(start="2011-01-01 00:00:00", periods=240, with_count=True, seed=0):
    """Synthetic hourly table in the Kaggle bike sharing layout."""
    rng = np.random.default_rng(seed)
    stamps = pd.date_range(start, periods=periods, freq="h")
    hour = np.asarray(stamps.hour)
    temp = rng.uniform(5, 30, periods).round(2)

    df = pd.DataFrame({
        "datetime": stamps.strftime("%Y-%m-%d %H:%M:%S"),
        "season": 1,
        "holiday": 0,
        "workingday": (np.asarray(stamps.dayofweek) < 5).astype(int),
        "weather": rng.integers(1, 5, periods),
        "temp": temp,
        "atemp": (temp + rng.normal(0, 1, periods)).round(2),
        "humidity": rng.integers(20, 100, periods),
        "windspeed": rng.uniform(0, 30, periods).round(4),
    })
    if with_count:
        base = 5 + 200 * np.sin(np.pi * hour / 24) ** 2 + 3 * temp
        counts = np.maximum(1, rng.poisson(base))
        df["casual"] = counts // 3
        df["registered"] = counts - df["casual"]
        df["count"] = counts
    return df


@pytest.fixture
def raw_train():
    return make_frame()


@pytest.fixture
def raw_test():
    return make_frame(start="2011-01-20 00:00:00", periods=48, with_count=False, seed=1)


@pytest.fixture
def train_fe(raw_train):
    return add_features(raw_train, training_epoch(raw_train))


@pytest.fixture
def csv_files(tmp_path, raw_train, raw_test):
    train_path = tmp_path / "train.csv"
    test_path = tmp_path / "test.csv"
    raw_train.to_csv(train_path, index=False)
    raw_test.to_csv(test_path, index=False)
    return train_path, test_path
