import pandas as pd

from bike_demand.pipeline import main, run
from tests.conftest import make_frame


def test_run_end_to_end(csv_files, raw_test, tmp_path):
    train_path, test_path = csv_files
    output = tmp_path / "submission.csv"

    result = run(train_path, test_path, output, seed=0, folds=2)

    assert len(result["cv_rmsle"]) == 2
    assert result["forest_rmsle"] >= 0
    assert result["linear_rmsle"] >= 0

    written = pd.read_csv(output)
    assert list(written.columns) == ["datetime", "count"]
    assert list(written["datetime"]) == list(raw_test["datetime"])
    assert (written["count"] >= 0).all()


def test_main_writes_plots(csv_files, tmp_path):
    train_path, test_path = csv_files
    plots_dir = tmp_path / "plots"

    code = main([
        "--train", str(train_path), "--test", str(test_path),
        "--output", str(tmp_path / "sub.csv"), "--folds", "0",
        "--plots-dir", str(plots_dir),
    ])

    assert code == 0
    assert (tmp_path / "sub.csv").exists()
    assert sorted(p.name for p in plots_dir.iterdir()) == [
        "avg_by_hour.png", "coefficients_linear.png",
        "importance_forest.png", "residuals_forest.png",
    ]


def test_main_aborts_without_writing(tmp_path, raw_train, raw_test):
    train_path = tmp_path / "train.csv"
    test_path = tmp_path / "test.csv"
    raw_train.assign(count=0).to_csv(train_path, index=False)
    raw_test.to_csv(test_path, index=False)
    output = tmp_path / "sub.csv"

    code = main(["--train", str(train_path), "--test", str(test_path), "--output", str(output)])

    assert code == 1
    assert not output.exists()


def test_main_with_high_fraction_on_small_table(tmp_path, raw_test):
    train_path = tmp_path / "train.csv"
    test_path = tmp_path / "test.csv"
    make_frame(periods=30).to_csv(train_path, index=False)
    raw_test.to_csv(test_path, index=False)
    output = tmp_path / "sub.csv"

    code = main(["--train", str(train_path), "--test", str(test_path), "--output", str(output),
                 "--fraction", "0.9", "--folds", "0"])

    assert code == 0
    assert len(pd.read_csv(output)) == len(raw_test)


def test_main_rejects_more_folds_than_rows(csv_files, tmp_path):
    train_path, test_path = csv_files
    output = tmp_path / "sub.csv"

    code = main(["--train", str(train_path), "--test", str(test_path), "--output", str(output),
                 "--folds", "500"])

    assert code == 1
    assert not output.exists()
