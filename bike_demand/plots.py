"""Charts for eyeballing the data and the fitted models. Nothing reads them back."""
import logging
from pathlib import Path

import matplotlib.pyplot as plt
import seaborn as sns

from bike_demand.constants import COUNT_COLUMN, HOUR_COLUMN

log = logging.getLogger(__name__)

sns.set(style="whitegrid")


def _save(path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    log.info("Saved %s", path)
    return path


def plot_hourly_demand(train, path):
    """Mean rentals per hour of day, one line per working-day flag."""
    hourly = (train.groupby([HOUR_COLUMN, "workingday"], observed=True)[COUNT_COLUMN]
              .mean().reset_index())
    hourly[HOUR_COLUMN] = hourly[HOUR_COLUMN].astype(int)
    hourly["workingday"] = hourly["workingday"].astype(int)
    plt.figure(figsize=(10, 5))
    sns.lineplot(data=hourly, x=HOUR_COLUMN, y=COUNT_COLUMN, hue="workingday", marker="o")
    plt.xlabel("Hour of day")
    plt.ylabel("Mean count")
    plt.title("Average rentals by hour")
    return _save(path)


def plot_residuals(y_true, y_pred, path, title="Residual Plot"):
    residuals = y_true - y_pred

    plt.figure(figsize=(8, 5))
    plt.scatter(y_pred, residuals, alpha=0.3, s=10)
    plt.axhline(0, color="red", linestyle="--", linewidth=1)
    plt.xlabel("Predicted Count")
    plt.ylabel("Residuals (y_true - y_pred)")
    plt.title(title)
    return _save(path)


def plot_feature_weights(weights_df, path, title="Feature importances", top_n=25):
    top = weights_df.head(top_n)
    plt.figure(figsize=(10, min(0.4 * len(top) + 2, 12)))
    sns.barplot(x="importance", y="feature", data=top)
    plt.title(title)
    plt.xlabel("Absolute weight")
    plt.ylabel("Feature")
    return _save(path)
