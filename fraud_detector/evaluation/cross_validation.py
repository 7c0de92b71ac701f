"""
Cross-Validation
================

Stratified k-fold evaluation of a classifier. A fresh model is fit for every
fold and predictions on the held-out folds are pooled into one report. The
model passed in is only used as a template and is never fit.

"""

from typing import List, Tuple

import numpy as np
from loguru import logger
from sklearn.metrics import confusion_matrix, precision_recall_fscore_support
from sklearn.model_selection import KFold, StratifiedKFold

from .report import ClassMetrics, EvaluationReport
from ..data.dataset import TabularDataset
from ..exceptions import DataFormatError
from ..metrics import MetricsWrapper
from ..models.base import BaseModel


class CrossValidator:
    """Runs k-fold cross-validation with a fixed seed for fold assignment."""

    def __init__(self, n_folds: int = 10, random_state: int = 1, stratify: bool = True):
        """
        Args:
            n_folds: Requested number of folds
            random_state: Seed for shuffling before fold assignment
            stratify: Keep label proportions equal across folds
        """
        if n_folds < 2:
            raise ValueError(f"n_folds must be at least 2, got {n_folds}")
        self.n_folds = n_folds
        self.random_state = random_state
        self.stratify = stratify

    def evaluate(self, model: BaseModel, dataset: TabularDataset) -> EvaluationReport:
        """
        Cross-validate ``model`` on ``dataset``.

        Rows with a missing label are excluded.

        Returns:
            Pooled evaluation report with a confusion matrix over every label
        """
        labels = dataset.schema.label.categories
        y_all = dataset.label_codes()
        labeled = np.flatnonzero(y_all >= 0)
        data = dataset.subset(labeled)
        y = y_all[labeled].astype(int)

        n_folds, stratify = self._plan_folds(y)
        if stratify:
            splitter = StratifiedKFold(n_splits=n_folds, shuffle=True, random_state=self.random_state)
            logger.info(f'Using Stratified KFold of {n_folds} folds')
        else:
            splitter = KFold(n_splits=n_folds, shuffle=True, random_state=self.random_state)
            logger.info(f'Using KFold of {n_folds} folds')

        y_pred = np.empty_like(y)
        y_proba = np.zeros((len(y), len(labels)))
        fold_accuracies: List[float] = []

        for fold, (train_idx, test_idx) in enumerate(splitter.split(np.zeros(len(y)), y), 1):
            fold_model = model.spawn()
            fold_model.train(data.subset(train_idx))

            held_out = data.subset(test_idx)
            y_pred[test_idx] = fold_model.predict(held_out.features)
            y_proba[test_idx] = fold_model.predict_proba(held_out.features)

            accuracy = float(np.mean(y_pred[test_idx] == y[test_idx]))
            fold_accuracies.append(accuracy)
            logger.debug(f"  Fold {fold} ✓ Complete - accuracy: {accuracy:.4f} ({len(test_idx)} rows)")

        label_range = list(range(len(labels)))
        precision, recall, f1, support = precision_recall_fscore_support(
            y, y_pred, labels=label_range, zero_division=0
        )
        per_class = [
            ClassMetrics(labels[i], float(precision[i]), float(recall[i]), float(f1[i]), int(support[i]))
            for i in label_range
        ]

        report = EvaluationReport(
            labels=tuple(labels),
            n_folds=n_folds,
            fold_accuracies=fold_accuracies,
            metrics=MetricsWrapper.get_eval_metrics(
                ['accuracy', 'kappa', 'precision', 'recall', 'f1'], y, y_pred
            ),
            per_class=per_class,
            confusion_matrix=confusion_matrix(y, y_pred, labels=label_range),
            seed=self.random_state,
            errors=MetricsWrapper.get_error_metrics(y, y_proba, len(labels)),
        )

        logger.info(f"  ✓ Cross-validation complete: {n_folds} folds, accuracy {report.accuracy:.4f}")
        return report

    def _plan_folds(self, y: np.ndarray) -> Tuple[int, bool]:
        """
        Reduce the fold count when the data cannot fill every fold.

        Stratification needs at least two rows in some label; otherwise the
        folds are drawn unstratified.

        Returns:
            (number of folds, whether to stratify)
        """
        if len(y) < 2:
            raise DataFormatError(f"Too few labeled rows ({len(y)}) for cross-validation")

        stratify = self.stratify
        limit = len(y)
        if stratify:
            largest = int(np.bincount(y).max())
            if largest < 2:
                logger.warning("Every label has a single row; using unstratified folds")
                stratify = False
            else:
                limit = largest

        n_folds = min(self.n_folds, limit)
        if n_folds < self.n_folds:
            logger.warning(f"Reducing cross-validation from {self.n_folds} to {n_folds} folds")
        return n_folds, stratify
