"""
lda-topics

Turns a corpus of text lines into a ranked (topic, term, weight) table with
Latent Dirichlet Allocation, optionally choosing the number of topics by
k-fold cross-validation on held-out perplexity.

Core modules:
    - models: Data classes (Document, DocumentTermMatrix, ResultRow, etc.)
    - interfaces: Abstract interfaces (InputProvider, TopicModelEngine, ...)
    - normalizer / vocabulary: Text-to-features pipeline
    - folds / cross_validation: Model selection
    - trainer / extractor: Final model and result table
    - pipeline: Orchestration
"""

from lda_topics.config import PipelineConfig, load_config
from lda_topics.errors import (
    ConfigurationError,
    DataError,
    EvaluationError,
    LDATopicsError,
    TrainingError,
)
from lda_topics.interfaces import InputProvider, TopicModelEngine
from lda_topics.models import (
    CandidateResult,
    Document,
    DocumentTermMatrix,
    ResultRow,
    SearchResult,
    TopicModelFit,
    Vocabulary,
)
from lda_topics.pipeline import LDAPipeline, build_pipeline, run_source

__all__ = [
    "PipelineConfig",
    "load_config",
    "ConfigurationError",
    "DataError",
    "EvaluationError",
    "LDATopicsError",
    "TrainingError",
    "InputProvider",
    "TopicModelEngine",
    "CandidateResult",
    "Document",
    "DocumentTermMatrix",
    "ResultRow",
    "SearchResult",
    "TopicModelFit",
    "Vocabulary",
    "LDAPipeline",
    "build_pipeline",
    "run_source",
]
