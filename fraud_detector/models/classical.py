"""Classical machine learning models."""

import numpy as np
import pandas as pd
from typing import Any, Dict, Optional, Tuple
from sklearn.tree import DecisionTreeClassifier, export_text
from loguru import logger

from .base import BaseModel, ModelFactory, safe_float, safe_int
from ..data.dataset import TabularDataset
from ..data.schema import Attribute, ColumnKind
from ..exceptions import DataFormatError


class SklearnModel(BaseModel):
    """Base wrapper for sklearn models over nominal and numeric columns."""

    def __init__(self, model_class, config: Optional[Dict[str, Any]] = None, **defaults):
        super().__init__(config)

        # Start with defaults
        params = defaults.copy()

        # Only update with config params that model accepts
        if config:
            sig = model_class.__init__.__code__.co_varnames
            for k, v in config.items():
                if k in sig:
                    params[k] = v

        self.model = model_class(**params)
        self.feature_attributes: Tuple[Attribute, ...] = ()
        self.label_attribute: Optional[Attribute] = None

    @property
    def label_categories(self) -> Tuple[str, ...]:
        return self.label_attribute.categories if self.label_attribute else ()

    def train(self, dataset: TabularDataset) -> None:
        schema = dataset.schema
        y = dataset.label_codes()
        labeled = y >= 0
        if not labeled.any():
            raise DataFormatError("No labeled rows to train on")
        if not labeled.all():
            logger.warning(f"Ignoring {int((~labeled).sum())} rows with a missing label")

        X = self._encode(dataset.features, schema.feature_attributes)
        self.model.fit(X[labeled], y[labeled])

        self.feature_attributes = schema.feature_attributes
        self.label_attribute = schema.label
        self.fitted = True
        logger.info(f"{self.model_name} trained on {int(labeled.sum())} rows")

    def predict(self, features: pd.DataFrame) -> np.ndarray:
        if not self.fitted:
            raise ValueError("Model not trained")
        X = self._encode(features, self.feature_attributes)
        return self.model.predict(X).astype(int)

    def predict_proba(self, features: pd.DataFrame) -> np.ndarray:
        if not self.fitted:
            raise ValueError("Model not trained")
        X = self._encode(features, self.feature_attributes)
        proba = self.model.predict_proba(X)

        # A model fit on a fold may have seen only some label categories
        full = np.zeros((X.shape[0], len(self.label_categories)))
        full[:, self.model.classes_.astype(int)] = proba
        return full

    @staticmethod
    def _encode(features: pd.DataFrame, attributes: Tuple[Attribute, ...]) -> np.ndarray:
        """Nominal columns become category codes, missing values become NaN."""
        names = [a.name for a in attributes]
        if [str(c) for c in features.columns] != names:
            raise DataFormatError(f"Feature columns {list(features.columns)} do not match {names}")

        columns = []
        for attr in attributes:
            values = features[attr.name]
            if attr.kind == ColumnKind.NOMINAL:
                if not isinstance(values.dtype, pd.CategoricalDtype) or \
                        tuple(str(c) for c in values.dtype.categories) != attr.categories:
                    raise DataFormatError(f"Column '{attr.name}' does not carry the trained vocabulary")
                codes = values.cat.codes.to_numpy().astype(float)
                codes[codes < 0] = np.nan
                columns.append(codes)
            elif attr.kind == ColumnKind.NUMERIC:
                columns.append(pd.to_numeric(values, errors='raise').to_numpy(dtype=float))
            else:
                raise DataFormatError(f"Column '{attr.name}' is free text; convert it to nominal first")

        if not columns:
            return np.empty((len(features), 0))
        return np.column_stack(columns)


# Individual model classes for cleaner imports

class DecisionTreeModel(SklearnModel):
    """Entropy-based decision tree classifier."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = dict(config or {})
        if 'min_samples_leaf' in config:
            config['min_samples_leaf'] = safe_int(config['min_samples_leaf'], 1)
        if 'ccp_alpha' in config:
            config['ccp_alpha'] = safe_float(config['ccp_alpha'], 0.0)
        if config.get('max_depth') is not None:
            config['max_depth'] = safe_int(config['max_depth'], None)
        super().__init__(DecisionTreeClassifier, config, criterion='entropy', random_state=1)

    def describe(self) -> str:
        if not self.fitted:
            return f"{self.model_name}: no model built yet."

        tree = self.model
        class_names = [self.label_categories[int(c)] for c in tree.classes_]
        text = export_text(
            tree,
            feature_names=[a.name for a in self.feature_attributes],
            class_names=class_names,
            decimals=3
        )

        lines = [f"Decision tree ({tree.criterion})", "-" * 40, "", text.rstrip(), ""]
        nominal = [a for a in self.feature_attributes if a.is_nominal]
        if nominal:
            lines.append("Nominal encodings:")
            for attr in nominal:
                codes = ', '.join(f"{i}={c}" for i, c in enumerate(attr.categories))
                lines.append(f"  {attr.name}: {codes}")
            lines.append("")
        lines.append(f"Number of Leaves  : {tree.get_n_leaves()}")
        lines.append(f"Size of the tree  : {tree.tree_.node_count}")
        return '\n'.join(lines)


# Register all models
ModelFactory.register_model('decision_tree', DecisionTreeModel)
