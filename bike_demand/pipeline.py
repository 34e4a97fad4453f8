"""End-to-end run: load, engineer, validate, cross validate, submit.

The reported validation score comes from a forest fitted on the fit subset
only, while the submission forest is refitted on the full training table.
"""
import argparse
import logging
from pathlib import Path

import numpy as np

from bike_demand import constants, plots
from bike_demand.data import load_table
from bike_demand.errors import BikeDemandError
from bike_demand.evaluate import cross_validate, validate
from bike_demand.features import add_features, training_epoch
from bike_demand.models import DEFAULT_FORMULA, DemandModel
from bike_demand.partition import partition
from bike_demand.submission import build_submission, write_submission

log = logging.getLogger(__name__)


def run(train_path=constants.TRAIN_PATH, test_path=constants.TEST_PATH,
        output_path=constants.SUBMISSION_PATH, formula=DEFAULT_FORMULA,
        seed=constants.DEFAULT_SEED, fraction=constants.FIT_FRACTION,
        folds=constants.CV_FOLDS, plots_dir=None):
    """Run the whole pipeline and return a dict of scores and the submission frame."""
    train = load_table(train_path, is_train=True)
    test = load_table(test_path, is_train=False)

    epoch = training_epoch(train)
    log.info("Elapsed hours measured from %s", epoch)
    train_fe = add_features(train, epoch)
    test_fe = add_features(test, epoch)

    fit_df, val_df = partition(train_fe, fraction=fraction, seed=seed)

    # linear model is only inspected, never submitted
    linear = DemandModel(formula, strategy="linear", seed=seed).fit(fit_df)
    linear_rmsle = validate(linear, val_df)
    coef_df = linear.feature_weights()
    log.info("Top linear coefficients:\n%s", coef_df.head(10).to_string(index=False))

    forest = DemandModel(formula, strategy="forest", seed=seed).fit(fit_df)
    forest_rmsle = validate(forest, val_df)

    cv_scores = []
    if folds and folds > 1:
        log.info("Starting %d-fold cross validation", folds)
        cv_scores = cross_validate(train_fe, formula, strategy="forest", n_splits=folds, seed=seed)

    if plots_dir is not None:
        plots_dir = Path(plots_dir)
        plots.plot_hourly_demand(train_fe, plots_dir / "avg_by_hour.png")
        val_counts = val_df[constants.COUNT_COLUMN].to_numpy()
        plots.plot_residuals(val_counts, np.exp(forest.predict(val_df)), plots_dir / "residuals_forest.png",
                             title="Residual Plot - Random Forest")
        plots.plot_feature_weights(coef_df, plots_dir / "coefficients_linear.png",
                                   title="Linear Regression coefficients")
        plots.plot_feature_weights(forest.feature_weights(), plots_dir / "importance_forest.png",
                                   title="Random Forest feature importances")

    log.info("Training final forest on FULL dataset...")
    final = DemandModel(formula, strategy="forest", seed=seed).fit(train_fe)
    submission = build_submission(final, test_fe)
    write_submission(submission, output_path)

    log.info("===== SUMMARY =====")
    log.info("Formula               : %s", formula)
    log.info("Linear validation RMSLE: %.5f", linear_rmsle)
    log.info("Forest validation RMSLE: %.5f", forest_rmsle)
    if cv_scores:
        log.info("Forest CV mean RMSLE   : %.5f", sum(cv_scores) / len(cv_scores))
    log.info("Submission saved to    : %s", output_path)

    return {
        "linear_rmsle": linear_rmsle,
        "forest_rmsle": forest_rmsle,
        "cv_rmsle": cv_scores,
        "submission": submission,
    }


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Hourly bike demand: validate a random forest and write a submission")
    p.add_argument("--train", default=str(constants.TRAIN_PATH), help="Training CSV (with count)")
    p.add_argument("--test", default=str(constants.TEST_PATH), help="Test CSV (no count)")
    p.add_argument("--output", default=str(constants.SUBMISSION_PATH), help="Submission CSV to write")
    p.add_argument("--seed", type=int, default=constants.DEFAULT_SEED, help="Seed for the split, folds and forest")
    p.add_argument("--fraction", type=float, default=constants.FIT_FRACTION, help="Share of training rows in the fit subset")
    p.add_argument("--folds", type=int, default=constants.CV_FOLDS, help="Cross validation folds (0 to skip)")
    p.add_argument("--plots-dir", default=None, help="Directory for diagnostic PNGs (omit to skip plotting)")
    p.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING)")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s"
    )
    try:
        run(args.train, args.test, args.output, seed=args.seed, fraction=args.fraction,
            folds=args.folds, plots_dir=args.plots_dir)
    except BikeDemandError as e:
        log.error("Run aborted, no submission written: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
