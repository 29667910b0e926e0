#!/usr/bin/env python3
"""
lda-topics CLI

Fit an LDA topic model to a file of text lines and print the most relevant
terms per topic.

Environment Variables:
    LDA_TOPICS_CONFIG: YAML config file (overridden by --config)
    LOG_LEVEL: Logging level (overridden by --log-level, default: INFO)

Usage:
    lda-topics -f data/lines.csv -T 5 -n 10
    lda-topics -f s3://bucket/lines.csv -k 5            # choose k by 5-fold CV
    lda-topics -f data/lines.csv --config config/default.yaml --output topics.csv
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from lda_topics.config import load_config
from lda_topics.errors import ConfigurationError, LDATopicsError
from lda_topics.output import write_results
from lda_topics.pipeline import run_source

logger = logging.getLogger("lda-topics")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lda-topics",
        description="Create an LDA topic model and list the most relevant terms per topic",
    )
    parser.add_argument("-f", "--file", help="input file (one document per line), may be an s3:// URL")
    parser.add_argument("-n", "--numterms", type=int, default=None,
                        help="number of most relevant terms per topic [default: 3]")
    parser.add_argument("-T", "--numtopics", type=int, default=None,
                        help="number of topics [default: 2]")
    parser.add_argument("-k", "--cvfolds", default=None,
                        help="number of cross-validation folds used to choose the number of topics; "
                             "must be > 2 for CV to run, otherwise numtopics is used [default: -1]")
    parser.add_argument("--config", default=None, help="YAML configuration file")
    parser.add_argument("--sparsity", type=float, default=None,
                        help="drop terms missing from at least this fraction of documents [default: 0.95]")
    parser.add_argument("--workers", type=int, default=None,
                        help="cross-validation worker count [default: CPU count]")
    parser.add_argument("--fold-vocabulary", choices=["per_fold", "global"], default=None,
                        help="build each fold's vocabulary from its training split, or reuse the corpus vocabulary")
    parser.add_argument("--no-stemming", action="store_true", help="disable stemming")
    parser.add_argument("--dictionary", default=None, help="word list used to complete stems")
    parser.add_argument("--no-header", action="store_true", help="the first input line is a document, not a header")
    parser.add_argument("--output", default=None, help="write the table as CSV instead of printing it")
    parser.add_argument("--log-level", default=None, help="logging level [default: INFO]")
    return parser


def _parse_folds(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Number of folds must be an integer, got '{value}'")


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(Path.cwd() / ".env")

    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = (args.log_level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    level_known = isinstance(logging.getLevelName(log_level), int)
    logging.basicConfig(
        level=log_level if level_known else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        if not level_known:
            raise ConfigurationError(f"Unknown log level '{log_level}'")
        if not args.file:
            raise ConfigurationError("An input file has not been specified")

        config = load_config(args.config or os.environ.get("LDA_TOPICS_CONFIG"))
        config = config.with_overrides(
            n_topics=args.numtopics,
            extraction={"n_terms": args.numterms, "dictionary_path": args.dictionary},
            cross_validation={
                "n_folds": _parse_folds(args.cvfolds),
                "workers": args.workers,
                "fold_vocabulary": args.fold_vocabulary,
            },
            matrix={"sparsity": args.sparsity},
            normalizer={"stemming": False} if args.no_stemming else None,
        )
        config.validate()

        result = run_source(args.file, config, has_header=not args.no_header)
    except ConfigurationError as e:
        parser.print_help(sys.stderr)
        logger.error(str(e))
        return 2
    except LDATopicsError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except OSError as e:
        logger.error(str(e))
        return 1

    write_results(result.rows, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
