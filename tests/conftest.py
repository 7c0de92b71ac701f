"""
Shared fixtures: a small, deterministic transaction file.

Fraud happens exactly on travel transactions, which are also the only large
ones, so the label is a function of the features and a fully grown tree can
reproduce every training row.
"""

import pytest

HEADER = ["step", "customer", "age", "gender", "zipcodeOri", "merchant", "zipMerchant", "category", "amount", "fraud"]
AGES = ["1", "2", "3", "4", "5", "U"]
CATEGORIES = ["es_travel", "es_food", "es_transportation", "es_health"]


def make_rows(n: int = 40):
    rows = []
    for i in range(n):
        category = CATEGORIES[i % 4]
        fraud = 1 if category == "es_travel" else 0
        amount = 500 + 10 * i + 0.25 if fraud else 10 + i + 0.5
        rows.append([
            str(i),
            f"C{1000 + i}",
            AGES[i % 6],
            "M" if i % 2 == 0 else "F",
            "28007",
            f"M{i % 5}",
            "28007",
            category,
            f"{amount:.2f}",
            str(fraud),
        ])
    return rows


def write_csv(path, rows, header=HEADER):
    lines = [",".join(header)] + [",".join(row) for row in rows]
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def transaction_rows():
    return make_rows()


@pytest.fixture
def transactions_csv(tmp_path, transaction_rows):
    return write_csv(tmp_path / "transactions.csv", transaction_rows)


@pytest.fixture
def loader():
    from fraud_detector.data import DataLoader
    return DataLoader()


@pytest.fixture
def trainer(tmp_path, transactions_csv):
    from fraud_detector.workflow import FraudDetectionTrainer
    return FraudDetectionTrainer(transactions_csv, model_path=tmp_path / "fraud_detector.model")


@pytest.fixture
def training_result(trainer):
    return trainer.train_and_save()


@pytest.fixture
def processed(transactions_csv, loader):
    """Preprocessed training dataset and its captured state."""
    from fraud_detector.data import PreprocessingPipeline
    return PreprocessingPipeline().execute_pipeline(loader.load(transactions_csv), mode='train')
