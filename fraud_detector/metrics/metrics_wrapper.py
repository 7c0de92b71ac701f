import numpy as np
from typing import Union, List, Dict, Optional
from sklearn.metrics import (
    accuracy_score, precision_score, recall_score, f1_score,
    matthews_corrcoef, balanced_accuracy_score, cohen_kappa_score
)


class MetricsWrapper:
    """
    A metrics wrapper for classification evaluation.

    Provides a unified interface for computing classification metrics on
    label indices, plus the probability-based error measures reported
    alongside cross-validation.
    """

    # Define once, use everywhere
    METRICS = {
        'accuracy': accuracy_score,
        'f1': lambda y_t, y_p: f1_score(y_t, y_p, average='weighted', zero_division=0),
        'f1_macro': lambda y_t, y_p: f1_score(y_t, y_p, average='macro', zero_division=0),
        'precision': lambda y_t, y_p: precision_score(y_t, y_p, average='weighted', zero_division=0),
        'precision_macro': lambda y_t, y_p: precision_score(y_t, y_p, average='macro', zero_division=0),
        'recall': lambda y_t, y_p: recall_score(y_t, y_p, average='weighted', zero_division=0),
        'recall_macro': lambda y_t, y_p: recall_score(y_t, y_p, average='macro', zero_division=0),
        'balanced_accuracy': balanced_accuracy_score,
        'matthews_corrcoef': matthews_corrcoef,
        'kappa': cohen_kappa_score,
    }

    @staticmethod
    def get_eval_metrics(metrics_names: Union[str, List[str]] = None,
                         y_true=None, y_pred=None) -> Union[Dict, float, None]:
        """
        Compute scores for predicted label indices.

        Args:
            metrics_names: Metric name(s) to compute. If None, computes all metrics.
            y_true: True label indices. If None, returns None.
            y_pred: Predicted label indices.

        Returns:
            Dict of computed scores, or a single score when one name is given.

        Examples:
            >>> scores = MetricsWrapper.get_eval_metrics(y_true=y_true, y_pred=y_pred)
            >>> kappa = MetricsWrapper.get_eval_metrics('kappa', y_true, y_pred)
        """
        if y_true is None:
            return None

        is_single_metric = isinstance(metrics_names, str)

        if metrics_names is None:
            selected = MetricsWrapper.METRICS
        else:
            names = [metrics_names] if is_single_metric else metrics_names
            selected = {}
            for name in names:
                if name not in MetricsWrapper.METRICS:
                    raise ValueError(f"Metric '{name}' not found. Available metrics: {list(MetricsWrapper.METRICS.keys())}")
                selected[name] = MetricsWrapper.METRICS[name]

        y_true = np.asarray(y_true).astype(int)
        y_pred = np.asarray(y_pred).astype(int)

        # Kappa and MCC are undefined when only one label occurs on both sides
        single_label = len(np.union1d(y_true, y_pred)) < 2
        results = {}
        for name, func in selected.items():
            if single_label and name in ('kappa', 'matthews_corrcoef'):
                results[name] = 1.0 if np.array_equal(y_true, y_pred) else 0.0
            else:
                results[name] = float(func(y_true, y_pred))

        if is_single_metric:
            return list(results.values())[0]

        return results

    @staticmethod
    def get_error_metrics(y_true, y_proba: np.ndarray, n_labels: Optional[int] = None) -> Dict[str, float]:
        """
        Mean absolute and root mean squared error of predicted distributions.

        Each true label is one-hot encoded and compared with the predicted
        distribution, averaged over labels and instances.

        Args:
            y_true: True label indices of shape (n_samples,)
            y_proba: Predicted probabilities of shape (n_samples, n_labels)
            n_labels: Number of label categories, defaults to y_proba's width
        """
        y_true = np.asarray(y_true).astype(int)
        n_labels = n_labels or y_proba.shape[1]
        if len(y_true) == 0:
            return {'mean_absolute_error': np.nan, 'root_mean_squared_error': np.nan}

        actual = np.eye(n_labels)[y_true]
        diff = actual - y_proba
        return {
            'mean_absolute_error': float(np.abs(diff).mean()),
            'root_mean_squared_error': float(np.sqrt((diff ** 2).mean())),
        }
