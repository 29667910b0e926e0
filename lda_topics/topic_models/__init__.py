"""
Topic model engines for the LDA topic pipeline.

Available engines:
    - SklearnLDAEngine: scikit-learn LatentDirichletAllocation
"""

from lda_topics.topic_models.sklearn_lda import SklearnLDAEngine

__all__ = ["SklearnLDAEngine"]
