"""
Input providers for the LDA topic pipeline.

Available connectors:
    - LocalTextConnector: Local text/CSV file, one document per line
    - S3TextConnector: Same format stored in an S3 bucket
"""

from lda_topics.connectors.local_file import LocalTextConnector
from lda_topics.connectors.s3_connector import S3TextConnector, connector_for

__all__ = ["LocalTextConnector", "S3TextConnector", "connector_for"]
