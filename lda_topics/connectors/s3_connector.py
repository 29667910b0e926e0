"""
S3TextConnector - Reads one document per line from an S3 object.

Sources are s3://bucket/key URLs. The object is downloaded whole and split
into lines with the same header/blank handling as LocalTextConnector.
"""

import logging
from typing import List, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from lda_topics.connectors.local_file import LocalTextConnector, clean_lines
from lda_topics.errors import DataError
from lda_topics.interfaces import InputProvider

logger = logging.getLogger(__name__)

S3_PREFIX = "s3://"


def parse_s3_url(url: str) -> Tuple[str, str]:
    """
    Split an s3:// URL into (bucket, key).

    Raises:
        ValueError: If the URL is not a complete s3://bucket/key reference
    """
    if not url.startswith(S3_PREFIX):
        raise ValueError(f"Not an S3 URL: {url}")
    bucket, _, key = url[len(S3_PREFIX):].partition("/")
    if not bucket or not key:
        raise ValueError(f"S3 URL must look like s3://bucket/key, got {url}")
    return bucket, key


class S3TextConnector(InputProvider):
    """
    Args:
        has_header: Whether the first line is a column header
        region: AWS region for the S3 client (None = boto3 default resolution)
        encoding: Object encoding
    """

    def __init__(self, has_header: bool = True, region: Optional[str] = None, encoding: str = "utf-8"):
        self.has_header = has_header
        self.region = region
        self.encoding = encoding

    def read(self, source: str) -> List[str]:
        """
        Raises:
            DataError: For malformed URLs, S3 errors (including NoSuchKey) and
                objects that cannot be decoded with the configured encoding
        """
        try:
            bucket, key = parse_s3_url(source)
        except ValueError as e:
            raise DataError(str(e)) from e

        s3 = boto3.client("s3", region_name=self.region)
        try:
            response = s3.get_object(Bucket=bucket, Key=key)
            content = response["Body"].read().decode(self.encoding)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            raise DataError(f"Cannot read s3://{bucket}/{key}: {error_code}") from e
        except BotoCoreError as e:
            raise DataError(f"Cannot read s3://{bucket}/{key}: {e}") from e
        except UnicodeDecodeError as e:
            raise DataError(f"s3://{bucket}/{key} is not valid {self.encoding} text: {e}") from e

        records = clean_lines(content.splitlines(), has_header=self.has_header)

        logger.info(f"Read {len(records)} text records from s3://{bucket}/{key}")
        return records


def connector_for(source: str, has_header: bool = True) -> InputProvider:
    """Pick the connector matching a source location."""
    if source.startswith(S3_PREFIX):
        return S3TextConnector(has_header=has_header)
    return LocalTextConnector(has_header=has_header)
