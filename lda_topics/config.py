"""
Run configuration for the LDA topic pipeline.

Configuration is a tree of frozen dataclasses built once at startup and passed
explicitly into every component constructor. Values come from, in increasing
priority:
    1. The DEFAULT_* dataclass defaults below
    2. A YAML file (see config/default.yaml), merged over the defaults
    3. CLI flags, applied with dataclasses.replace

validate() is called before any pipeline work and raises ConfigurationError.
"""

import dataclasses
import logging
import string
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from lda_topics.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATE_TOPICS = (2, 3, 4, 5, 10, 20, 30, 40, 50, 75, 100)
FOLD_VOCABULARY_MODES = ("per_fold", "global")
EXECUTOR_KINDS = ("process", "thread")
COMPLETION_TYPES = ("prevalent", "first", "shortest", "longest")


@dataclass(frozen=True)
class NormalizerConfig:
    lowercase: bool = True
    punctuation: str = string.punctuation
    remove_numbers: bool = True
    min_word_length: int = 3
    stopwords_kind: str = "smart"
    extra_stopwords: Tuple[str, ...] = ()
    stemming: bool = True
    language: str = "english"


@dataclass(frozen=True)
class MatrixConfig:
    # Terms missing from at least this fraction of documents are pruned
    sparsity: float = 0.95


@dataclass(frozen=True)
class LDAHyperparameters:
    """
    Fixed hyperparameters for every model fit.

    alpha=None means the symmetric prior 50/k + 1 is derived per topic count.
    burnin and thin are Gibbs-sampling settings; engines without a sampler
    record them in the fit metadata but do not use them.
    """

    alpha: Optional[float] = None
    delta: float = 0.1
    iterations: int = 2000
    burnin: int = 100
    thin: int = 2000
    seed: int = 42
    # Variational engines: evaluate perplexity every n iterations and stop
    # once it improves by less than perp_tol (0 disables early stopping)
    evaluate_every: int = 10
    perp_tol: float = 0.1

    def alpha_for(self, k: int) -> float:
        if self.alpha is not None:
            return self.alpha
        return 50.0 / k + 1.0


@dataclass(frozen=True)
class CrossValidationConfig:
    # Values <= 2 disable cross-validation
    n_folds: int = -1
    candidate_topics: Tuple[int, ...] = DEFAULT_CANDIDATE_TOPICS
    seed: int = 42
    # None = os.cpu_count()
    workers: Optional[int] = None
    executor: str = "process"
    fold_vocabulary: str = "per_fold"


@dataclass(frozen=True)
class ExtractionConfig:
    n_terms: int = 3
    dictionary_path: Optional[str] = None
    completion_type: str = "prevalent"


@dataclass(frozen=True)
class PipelineConfig:
    n_topics: int = 2
    normalizer: NormalizerConfig = field(default_factory=NormalizerConfig)
    matrix: MatrixConfig = field(default_factory=MatrixConfig)
    lda: LDAHyperparameters = field(default_factory=LDAHyperparameters)
    cross_validation: CrossValidationConfig = field(default_factory=CrossValidationConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)

    @property
    def cross_validation_enabled(self) -> bool:
        return self.cross_validation.n_folds > 2

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PipelineConfig":
        """
        Build a config by merging a nested dict over the defaults.

        Unknown keys raise ConfigurationError so typos in YAML files are not
        silently ignored.
        """
        data = dict(data or {})
        sections = {
            "normalizer": NormalizerConfig,
            "matrix": MatrixConfig,
            "lda": LDAHyperparameters,
            "cross_validation": CrossValidationConfig,
            "extraction": ExtractionConfig,
        }

        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key in sections:
                kwargs[key] = _build_section(sections[key], key, value)
            elif key == "n_topics":
                kwargs[key] = value
            else:
                raise ConfigurationError(f"Unknown configuration key: '{key}'")

        return cls(**kwargs)

    def with_overrides(self, **sections: Dict[str, Any]) -> "PipelineConfig":
        """
        Return a copy with selected fields replaced.

        Example:
            config.with_overrides(n_topics=5, extraction={"n_terms": 10})
        """
        top_level = {}
        for key, value in sections.items():
            if value is None:
                continue
            if isinstance(value, dict):
                current = getattr(self, key)
                updates = {k: v for k, v in value.items() if v is not None}
                top_level[key] = dataclasses.replace(current, **updates)
            else:
                top_level[key] = value
        return dataclasses.replace(self, **top_level)

    def validate(self) -> "PipelineConfig":
        """Check every parameter; raises ConfigurationError on the first problem."""
        _require_int("n_topics", self.n_topics, minimum=1)
        _require_int("extraction.n_terms", self.extraction.n_terms, minimum=1)
        _require_int("cross_validation.n_folds", self.cross_validation.n_folds)
        _require_int("normalizer.min_word_length", self.normalizer.min_word_length, minimum=1)

        sparsity = self.matrix.sparsity
        if isinstance(sparsity, bool) or not isinstance(sparsity, (int, float)) or not 0 < sparsity < 1:
            raise ConfigurationError(f"matrix.sparsity must be in (0, 1), got {sparsity!r}")

        cv = self.cross_validation
        if cv.fold_vocabulary not in FOLD_VOCABULARY_MODES:
            raise ConfigurationError(
                f"cross_validation.fold_vocabulary must be one of {FOLD_VOCABULARY_MODES}, "
                f"got '{cv.fold_vocabulary}'"
            )
        if cv.executor not in EXECUTOR_KINDS:
            raise ConfigurationError(
                f"cross_validation.executor must be one of {EXECUTOR_KINDS}, got '{cv.executor}'"
            )
        if cv.workers is not None:
            _require_int("cross_validation.workers", cv.workers, minimum=1)
        if self.cross_validation_enabled:
            if not cv.candidate_topics:
                raise ConfigurationError("cross_validation.candidate_topics must not be empty")
            for k in cv.candidate_topics:
                _require_int("cross_validation.candidate_topics", k, minimum=1)

        if self.extraction.completion_type not in COMPLETION_TYPES:
            raise ConfigurationError(
                f"extraction.completion_type must be one of {COMPLETION_TYPES}, "
                f"got '{self.extraction.completion_type}'"
            )

        lda = self.lda
        _require_int("lda.iterations", lda.iterations, minimum=1)
        if lda.alpha is not None and lda.alpha <= 0:
            raise ConfigurationError(f"lda.alpha must be positive, got {lda.alpha}")
        if lda.delta <= 0:
            raise ConfigurationError(f"lda.delta must be positive, got {lda.delta}")

        return self


def load_config(path: Optional[Union[str, Path]] = None) -> PipelineConfig:
    """
    Load a PipelineConfig from a YAML file.

    Args:
        path: YAML file; None returns the defaults

    Raises:
        ConfigurationError: If the file is missing, unparsable or has unknown keys
    """
    if path is None:
        return PipelineConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")

    logger.info(f"Loaded configuration from {config_path}")
    return PipelineConfig.from_dict(data)


def _build_section(section_cls, name: str, value: Any):
    if value is None:
        return section_cls()
    if not isinstance(value, dict):
        raise ConfigurationError(f"Configuration section '{name}' must be a mapping")

    known = {f.name for f in dataclasses.fields(section_cls)}
    unknown = set(value) - known
    if unknown:
        raise ConfigurationError(f"Unknown keys in '{name}': {sorted(unknown)}")

    # YAML gives lists; the frozen configs hold tuples
    converted = {k: tuple(v) if isinstance(v, list) else v for k, v in value.items()}
    return section_cls(**converted)


def _require_int(name: str, value: Any, minimum: Optional[int] = None) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {value}")
