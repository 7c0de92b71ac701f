"""
Command line entry point.

Usage:
    fraud-detector <path-to-your-data.csv> [--config FILE] [--model-path FILE]
                   [--records FILE] [--predict-only] [--debug]
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd
from loguru import logger

from .exceptions import DataFormatError, FraudDetectorError, UsageError
from .utils.config import Config
from .utils.logging import setup_logging
from .workflow import FraudDetectionTrainer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fraud-detector',
        description="Train, evaluate and apply a decision-tree fraud detector"
    )

    parser.add_argument(
        'source',
        nargs='?',
        help='Path to the transaction CSV (last column is the label)'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='YAML file merged over the default configuration'
    )

    parser.add_argument(
        '--model-path',
        type=str,
        help='Model file to write and read (default: fraud_detector.model)'
    )

    parser.add_argument(
        '--records',
        type=str,
        help='CSV of records to classify instead of the configured examples'
    )

    parser.add_argument(
        '--predict-only',
        action='store_true',
        help='Skip training and classify with an existing model file'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    return parser


def read_records(path: Path) -> Tuple[List[dict], Optional[List[str]]]:
    """Read a batch of records; an optional ``name`` column labels each one."""
    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise DataFormatError(f"Cannot read records from {path}: {exc}") from exc

    names = None
    if 'name' in frame.columns:
        names = frame.pop('name').tolist()
    return frame.to_dict(orient='records'), names


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.source is None:
        error = UsageError("Please provide the path to your CSV dataset as an argument.")
        print(error, file=sys.stderr)
        print(f"Usage: {parser.prog} <path-to-your-data.csv>", file=sys.stderr)
        return 1

    for path in (args.source, args.config, args.records):
        if path is not None and not Path(path).exists():
            print(f"Error: The file '{path}' was not found.", file=sys.stderr)
            return 1
    source = Path(args.source)

    try:
        config = Config(args.config)
        setup_logging(args.debug, config.get_output_config().get('log_dir'))

        trainer = FraudDetectionTrainer(source, config, args.model_path)

        if not args.predict_only:
            print(f"--- Training and Saving Model from {source.name} ---")
            result = trainer.train_and_save()
            print(result.fitted.classifier.describe())
            print(f"=== Model Evaluation ({result.report.n_folds}-fold Cross-Validation) ===")
            print(result.report.to_summary_string())
            print(result.report.to_class_details_string())
            print(result.report.to_matrix_string())
            print(f"Model successfully trained and saved to '{result.model_path}'")
            print("\n-----------------------------------\n")

        records, names = (None, None)
        if args.records:
            records, names = read_records(Path(args.records))

        print("--- Loading Model and Making Predictions ---")
        for prediction in trainer.load_and_predict(records, names):
            print(prediction)

    except FraudDetectorError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except Exception as e:
        logger.opt(exception=e).error(f"Run failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
