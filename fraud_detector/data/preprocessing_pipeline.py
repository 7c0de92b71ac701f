"""
Preprocessing Pipeline Implementation
=========================================================

A fixed, ordered preprocessing pipeline for transaction data.
Single execute_pipeline method with mode parameter for simplicity.

Pipeline Stages:
1. Column removal (identifier-like columns)
2. String to nominal conversion (vocabulary fit on training data only)
3. Numeric to nominal conversion of the label

"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger

from .dataset import TabularDataset
from .schema import Schema
from .transforms import NumericToCategorical, RemoveColumns, StringToCategorical, Transform
from ..exceptions import DataFormatError

STAGE_ORDER = ('remove', 'string_to_nominal', 'numeric_to_nominal')

DEFAULT_COLUMNS = {
    'remove': '2,5-7',
    'string_to_nominal': 'first-last',
    'numeric_to_nominal': 'last',
}


@dataclass
class PreprocessingState:
    """Stores fitted preprocessing parameters for replay at inference."""
    stages: List[Dict[str, Any]] = field(default_factory=list)
    input_schema: Optional[Schema] = None
    output_schema: Optional[Schema] = None
    config: Dict[str, Any] = field(default_factory=dict)


class PreprocessingPipeline:
    """
    A preprocessing pipeline with single execute method.

    Modes:
    - 'train': Fit every transform on the dataset and capture its parameters
    - 'inference': Replay captured parameters on new data, never refitting
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize with configuration dictionary.

        Args:
            config: ``preprocessing`` section; each stage may set ``columns``
        """
        self.config = config or {}
        self.transforms: List[Transform] = [
            RemoveColumns(self._stage_columns('remove')),
            StringToCategorical(self._stage_columns('string_to_nominal')),
            NumericToCategorical(self._stage_columns('numeric_to_nominal')),
        ]

    def _stage_columns(self, stage: str) -> Any:
        stage_config = self.config.get(stage) or {}
        return stage_config.get('columns', DEFAULT_COLUMNS[stage])

    def execute_pipeline(
        self,
        dataset: TabularDataset,
        mode: str = 'train',
        saved_state: Optional[PreprocessingState] = None
    ) -> Union[Tuple[TabularDataset, PreprocessingState], TabularDataset]:
        """
        Execute preprocessing with specified mode.

        Args:
            dataset: Raw dataset as produced by the loader
            mode: 'train' or 'inference'
            saved_state: Required for mode='inference'

        Returns:
            For 'train': (processed dataset, preprocessing state)
            For 'inference': processed dataset
        """
        if mode == 'train':
            return self._train_mode(dataset)

        elif mode == 'inference':
            if saved_state is None:
                raise ValueError("saved_state required for inference mode")
            self.validate_inference_state(saved_state)
            return self._inference_mode(dataset, saved_state)

        else:
            raise ValueError(f"Invalid mode: {mode}. Must be 'train' or 'inference'")

    def _train_mode(self, dataset: TabularDataset) -> Tuple[TabularDataset, PreprocessingState]:
        state = PreprocessingState(input_schema=dataset.schema, config=self.config)
        n_features_start = dataset.num_attributes

        for transform in self.transforms:
            n_in = dataset.num_attributes
            params, dataset = transform.fit_apply(dataset)
            state.stages.append({
                'name': transform.name,
                'params': params,
                'n_features_in': n_in,
                'n_features_out': dataset.num_attributes,
            })
            logger.info(f"  {transform.name}: {n_in} → {dataset.num_attributes} attributes")

        state.output_schema = dataset.schema
        logger.info(f"Preprocessing complete: {n_features_start} → {dataset.num_attributes} attributes")
        return dataset, state

    def _inference_mode(self, dataset: TabularDataset, saved_state: PreprocessingState) -> TabularDataset:
        transforms = {t.name: t for t in self.transforms}
        for stage in saved_state.stages:
            dataset = transforms[stage['name']].apply(stage['params'], dataset)

        problems = saved_state.output_schema.diff(dataset.schema)
        if problems:
            raise DataFormatError("Schema mismatch after preprocessing: " + '; '.join(problems))
        return dataset

    def structure(self, dataset: TabularDataset, saved_state: PreprocessingState) -> Schema:
        """
        Replay the captured parameters on a zero-row copy of ``dataset``.

        Returns:
            The post-pipeline schema, identical to the training-time schema
        """
        return self.execute_pipeline(dataset.empty_copy(), mode='inference', saved_state=saved_state).schema

    def validate_inference_state(self, state: PreprocessingState) -> None:
        """Check that a saved state has every stage, in order, with an output schema."""
        names = tuple(stage.get('name') for stage in state.stages)
        if names != STAGE_ORDER:
            raise DataFormatError(f"Invalid preprocessing stages {list(names)}; expected {list(STAGE_ORDER)}")
        if state.output_schema is None:
            raise DataFormatError("Preprocessing state has no output schema")
        for stage in state.stages:
            if 'params' not in stage:
                raise DataFormatError(f"Missing parameters for {stage['name']}")
