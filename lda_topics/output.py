"""
Result table rendering.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import pandas as pd

from lda_topics.models import ResultRow

logger = logging.getLogger(__name__)

COLUMNS = ["topic", "term", "weight"]


def results_to_frame(rows: Sequence[ResultRow]) -> pd.DataFrame:
    """Convert result rows to a DataFrame with columns topic, term, weight."""
    frame = pd.DataFrame(
        [(r.topic, r.term, r.weight) for r in rows],
        columns=COLUMNS,
    )
    return frame.astype({"topic": str, "term": str, "weight": float})


def write_results(rows: Sequence[ResultRow], output: Optional[Union[str, Path]] = None) -> pd.DataFrame:
    """
    Print the table to stdout, or write it as CSV when output is given.
    """
    frame = results_to_frame(rows)
    if output is None:
        print(frame.to_string())
    else:
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(output, index=False)
        logger.info(f"Wrote {len(frame)} rows to {output}")
    return frame
