"""Cross-validation results and their console rendering."""

import string
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np


@dataclass
class ClassMetrics:
    label: str
    precision: float
    recall: float
    f1: float
    support: int


@dataclass
class EvaluationReport:
    """
    Pooled cross-validation results.

    ``confusion_matrix[i][j]`` counts instances of label ``i`` classified as
    label ``j``; rows and columns follow ``labels``.
    """
    labels: Tuple[str, ...]
    n_folds: int
    fold_accuracies: List[float]
    metrics: Dict[str, float]
    per_class: List[ClassMetrics]
    confusion_matrix: np.ndarray
    seed: int = 1
    errors: Dict[str, float] = field(default_factory=dict)

    @property
    def n_instances(self) -> int:
        return int(self.confusion_matrix.sum())

    @property
    def n_correct(self) -> int:
        return int(np.trace(self.confusion_matrix))

    @property
    def accuracy(self) -> float:
        return self.n_correct / self.n_instances if self.n_instances else float('nan')

    def to_summary_string(self, title: str = "\nResults\n======\n") -> str:
        n = self.n_instances
        correct = self.n_correct
        wrong = n - correct

        def pct(count: int) -> float:
            return 100.0 * count / n if n else float('nan')

        rows = [
            ("Correctly Classified Instances", f"{correct:>8d}", f"{pct(correct):>12.4f} %"),
            ("Incorrectly Classified Instances", f"{wrong:>8d}", f"{pct(wrong):>12.4f} %"),
            ("Kappa statistic", f"{self.metrics.get('kappa', float('nan')):>8.4f}", ""),
            ("Mean absolute error", f"{self.errors.get('mean_absolute_error', float('nan')):>8.4f}", ""),
            ("Root mean squared error", f"{self.errors.get('root_mean_squared_error', float('nan')):>8.4f}", ""),
            ("Weighted F1", f"{self.metrics.get('f1', float('nan')):>8.4f}", ""),
            ("Total Number of Instances", f"{n:>8d}", ""),
        ]
        lines = [title]
        lines.extend(f"{name:<36}{value}{extra}".rstrip() for name, value, extra in rows)
        if self.fold_accuracies:
            folds = ', '.join(f"{a:.4f}" for a in self.fold_accuracies)
            lines.append("")
            lines.append(f"Fold accuracies ({self.n_folds} folds, seed {self.seed}): {folds}")
            lines.append(
                f"Mean fold accuracy: {np.mean(self.fold_accuracies):.4f} ± {np.std(self.fold_accuracies):.4f}"
            )
        return '\n'.join(lines)

    def to_class_details_string(self, title: str = "\n=== Detailed Accuracy By Class ===\n") -> str:
        lines = [title, f"{'Precision':>11}{'Recall':>10}{'F-Measure':>11}{'Support':>9}   Class"]
        for cm in self.per_class:
            lines.append(f"{cm.precision:>11.3f}{cm.recall:>10.3f}{cm.f1:>11.3f}{cm.support:>9d}   {cm.label}")
        lines.append(
            f"{self.metrics.get('precision', float('nan')):>11.3f}"
            f"{self.metrics.get('recall', float('nan')):>10.3f}"
            f"{self.metrics.get('f1', float('nan')):>11.3f}"
            f"{self.n_instances:>9d}   Weighted Avg."
        )
        return '\n'.join(lines)

    def to_matrix_string(self, title: str = "\n=== Confusion Matrix ===\n") -> str:
        letters = _column_letters(len(self.labels))
        width = max([len(str(int(v))) for v in self.confusion_matrix.flat] + [len(letter) for letter in letters]) + 1

        header = ''.join(f"{letter:>{width}}" for letter in letters) + "   <-- classified as"
        lines = [title, header]
        for i, label in enumerate(self.labels):
            counts = ''.join(f"{int(v):>{width}}" for v in self.confusion_matrix[i])
            lines.append(f"{counts} | {letters[i]:>{width - 1}} = {label}")
        return '\n'.join(lines)


def _column_letters(n: int) -> List[str]:
    letters = []
    for i in range(n):
        name = ''
        i += 1
        while i:
            i, rem = divmod(i - 1, 26)
            name = string.ascii_lowercase[rem] + name
        letters.append(name)
    return letters
