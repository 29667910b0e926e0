"""
LocalTextConnector - Reads one document per line from a local file.

Key behaviors:
    - The first line is a header and skipped unless has_header=False
    - Lines are stripped; blank lines are dropped (treated as missing values)
"""

import logging
from pathlib import Path
from typing import Iterable, List

from lda_topics.errors import DataError
from lda_topics.interfaces import InputProvider

logger = logging.getLogger(__name__)


def clean_lines(lines: Iterable[str], has_header: bool = True) -> List[str]:
    """Strip lines, drop the header and any blank entries."""
    records = []
    for i, line in enumerate(lines):
        if has_header and i == 0:
            continue
        text = line.strip()
        if text:
            records.append(text)
    return records


class LocalTextConnector(InputProvider):
    """
    Args:
        has_header: Whether the first line is a column header
        encoding: File encoding
    """

    def __init__(self, has_header: bool = True, encoding: str = "utf-8"):
        self.has_header = has_header
        self.encoding = encoding

    def read(self, source: str) -> List[str]:
        """
        Raises:
            FileNotFoundError: If the file does not exist
            DataError: If the file cannot be decoded with the configured encoding
        """
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {source}")

        try:
            with open(path, encoding=self.encoding) as f:
                records = clean_lines(f, has_header=self.has_header)
        except UnicodeDecodeError as e:
            raise DataError(f"Input file {source} is not valid {self.encoding} text: {e}") from e

        logger.info(f"Read {len(records)} text records from {source}")
        return records
