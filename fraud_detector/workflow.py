"""
Fraud Detection Workflow
========================

Trains, evaluates and persists a decision tree on a transaction file, then
reloads the persisted model and classifies new records.

"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from loguru import logger

from .data import DataLoader, PreprocessingPipeline
from .evaluation import CrossValidator, EvaluationReport
from .models import FittedModel, ModelFactory, ModelStore
from .prediction import PredictionDriver, Prediction, Record
from .utils.config import Config


@dataclass
class TrainingResult:
    fitted: FittedModel
    report: EvaluationReport
    model_path: Path


class FraudDetectionTrainer:
    """Main training orchestrator that reads all settings from a Config."""

    def __init__(
        self,
        source_path: Union[str, Path],
        config: Optional[Config] = None,
        model_path: Optional[Union[str, Path]] = None
    ):
        """
        Args:
            source_path: Transaction CSV used for training and structure replay
            config: Configuration, defaults to the packaged defaults
            model_path: Model file, defaults to ``output.model_path``
        """
        self.source_path = Path(source_path)
        self.config = config or Config()
        self.model_path = Path(model_path or self.config.get_output_config().get('model_path', 'fraud_detector.model'))
        self.loader = DataLoader.from_config(self.config.get_data_config())

    def train_and_save(self) -> TrainingResult:
        """Load, preprocess, fit, cross-validate and persist."""
        logger.info("=" * 60)
        logger.info(f"TRAINING FROM {self.source_path.name}")
        logger.info("=" * 60)

        raw = self.loader.load(self.source_path)
        pipeline = PreprocessingPipeline(self.config.get_preprocessing_config())
        dataset, state = pipeline.execute_pipeline(raw, mode='train')

        model = ModelFactory.create_model(self.config.get_model_name(), self.config.get_model_config())
        model.train(dataset)

        eval_config = self.config.get_evaluation_config()
        validator = CrossValidator(
            n_folds=int(eval_config.get('n_folds', 10)),
            random_state=int(eval_config.get('random_state', 1)),
            stratify=bool(eval_config.get('stratify', True))
        )
        report = validator.evaluate(model, dataset)

        fitted = FittedModel(
            classifier=model,
            preprocessing_state=state,
            schema=dataset.schema,
            source_name=self.source_path.name
        )
        ModelStore.write(self.model_path, fitted)
        return TrainingResult(fitted, report, self.model_path)

    def load_and_predict(
        self,
        records: Optional[Sequence[Record]] = None,
        names: Optional[Sequence[str]] = None
    ) -> List[Prediction]:
        """
        Reload the persisted model and classify records.

        Without ``records`` the configured example transactions are used.
        """
        logger.info("=" * 60)
        logger.info("LOADING MODEL AND MAKING PREDICTIONS")
        logger.info("=" * 60)

        fitted = ModelStore.read(self.model_path)
        driver = PredictionDriver.from_source(
            fitted,
            self.source_path,
            loader=self.loader,
            positive_label=self.config.get_prediction_config().get('positive_label', '1')
        )

        if records is None:
            examples = self.config.get_examples()
            records = [example.get('values', {}) for example in examples]
            names = [example.get('name', f"Example {i}") for i, example in enumerate(examples, 1)]

        predictions = driver.predict(records, names)
        for prediction in predictions:
            logger.debug(f"{prediction.name}: label {prediction.label}")
        return predictions

    def run(self, records: Optional[Sequence[Record]] = None,
            names: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        """Execute training followed by prediction."""
        result = self.train_and_save()
        predictions = self.load_and_predict(records, names)
        return {'training': result, 'predictions': predictions}
