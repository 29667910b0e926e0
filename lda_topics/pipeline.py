"""
LDAPipeline - End-to-end topic extraction for one input.

This class orchestrates:
    1. Read raw lines from an InputProvider
    2. Normalize them into token sequences
    3. Build the full-corpus document-term matrix
    4. Optionally pick k by cross-validation
    5. Train the final model
    6. Extract the (topic, term, weight) table

Every collaborator is injected; build_pipeline() wires the defaults from a
PipelineConfig.
"""

import logging
from typing import Optional

from lda_topics.completion import StemCompleter, WordListDictionary
from lda_topics.config import PipelineConfig
from lda_topics.connectors import connector_for
from lda_topics.cross_validation import CrossValidationSearch
from lda_topics.errors import DataError
from lda_topics.extractor import TopicTermExtractor
from lda_topics.interfaces import InputProvider, TopicModelEngine
from lda_topics.models import NormalizedCorpus, RunResult
from lda_topics.normalizer import TextNormalizer, to_documents
from lda_topics.stemming import stemmer_for
from lda_topics.stopwords import BuiltinStopwords
from lda_topics.topic_models import SklearnLDAEngine
from lda_topics.trainer import ModelTrainer
from lda_topics.vocabulary import build_document_term_matrix

logger = logging.getLogger(__name__)


class LDAPipeline:
    """
    Args:
        config: Validated PipelineConfig
        normalizer: TextNormalizer
        engine: TopicModelEngine used for both the search and the final fit
        extractor: TopicTermExtractor
        search: CrossValidationSearch, required when cross-validation is enabled
    """

    def __init__(
        self,
        config: PipelineConfig,
        normalizer: TextNormalizer,
        engine: TopicModelEngine,
        extractor: TopicTermExtractor,
        search: Optional[CrossValidationSearch] = None,
    ):
        self.config = config
        self.normalizer = normalizer
        self.engine = engine
        self.extractor = extractor
        self.trainer = ModelTrainer(engine, config.lda)
        self.search = search

        if config.cross_validation_enabled and search is None:
            raise ValueError("Cross-validation is enabled but no CrossValidationSearch was given")

    def run(self, source: str, provider: InputProvider) -> RunResult:
        """Read `source` through `provider` and run the whole pipeline."""
        try:
            lines = provider.read(source)
        finally:
            provider.close()
        return self.run_lines(lines)

    def run_lines(self, lines) -> RunResult:
        """Run the pipeline on already-read text lines."""
        documents = to_documents(lines)
        corpus = self.normalizer.normalize_corpus(documents)
        self._check_corpus(corpus)

        matrix = build_document_term_matrix(corpus.sequences, self.config.matrix.sparsity)

        search_result = None
        k = self.config.n_topics
        if self.config.cross_validation_enabled:
            global_matrix = matrix if self.config.cross_validation.fold_vocabulary == "global" else None
            search_result = self.search.run(corpus, global_matrix=global_matrix)
            k = search_result.best_k
        else:
            logger.info(f"Cross-validation disabled, using k={k}")

        model = self.trainer.train(matrix, k)
        rows = self.extractor.extract(model)

        dropped = sorted(set(corpus.dropped_ids) | set(matrix.dropped_ids))
        return RunResult(
            rows=rows,
            k=k,
            search=search_result,
            n_documents=corpus.n_documents,
            dropped_ids=dropped,
        )

    @staticmethod
    def _check_corpus(corpus: NormalizedCorpus) -> None:
        if corpus.n_documents == 0:
            raise DataError("Input contains no documents")
        if not corpus.sequences:
            raise DataError(
                f"All {corpus.n_documents} documents are empty after normalization"
            )


def build_pipeline(
    config: PipelineConfig,
    engine: Optional[TopicModelEngine] = None,
) -> LDAPipeline:
    """Wire an LDAPipeline with the default collaborators for `config`."""
    config.validate()
    norm = config.normalizer

    stopwords = BuiltinStopwords(extra=norm.extra_stopwords).stopwords(norm.stopwords_kind)
    stemmer = stemmer_for(norm.language) if norm.stemming else None
    normalizer = TextNormalizer(norm, stopwords=stopwords, stemmer=stemmer)

    engine = engine or SklearnLDAEngine()

    completer = None
    if config.extraction.dictionary_path:
        dictionary = WordListDictionary.from_file(
            config.extraction.dictionary_path,
            completion_type=config.extraction.completion_type,
        )
        completer = StemCompleter(dictionary)
    extractor = TopicTermExtractor(config.extraction.n_terms, completer=completer)

    search = None
    if config.cross_validation_enabled:
        search = CrossValidationSearch(
            engine,
            config.lda,
            config.cross_validation,
            sparsity=config.matrix.sparsity,
        )

    return LDAPipeline(config, normalizer, engine, extractor, search=search)


def run_source(source: str, config: PipelineConfig, has_header: bool = True) -> RunResult:
    """Convenience wrapper: build the default pipeline and run it on a path or s3:// URL."""
    pipeline = build_pipeline(config)
    return pipeline.run(source, connector_for(source, has_header=has_header))
