#!/usr/bin/env python
"""
Script to run the HTML chunker over fixture sets.

Reads every fixture-*/manifest.json under the fixtures directory, chunks each
listed source and writes <output>/<source_id>/chunks.json.
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from html_chunking.models.chunks import ChunkingStatus
from html_chunking.settings import get_settings
from html_chunking.utils.logging_setup import setup_logging
from html_chunking.utils.text_chunker import SourceChunker

DEFAULT_OUTPUT_DIR = "data/processed/chunks"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Chunk HTML sources into sentence-aligned, word-bounded segments"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=settings.config_path,
        help="Path to configuration file (defaults to the packaged config.yaml)",
    )
    parser.add_argument(
        "--fixtures",
        type=str,
        default=settings.fixtures_dir,
        help="Directory containing fixture-* folders with manifest.json",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for chunks.json files (defaults to runtime.output_dir)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level,
        help="Logging level",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the text chunker script."""
    load_dotenv()
    args = parse_args(argv)
    setup_logging(args.log_level)

    logger.info("Starting HTML chunking")

    try:
        chunker = SourceChunker(config_path=args.config)
        output_dir = Path(
            args.output
            or (chunker.config.get("runtime") or {}).get("output_dir")
            or DEFAULT_OUTPUT_DIR
        )

        results = chunker.process_fixtures_dir(Path(args.fixtures))

        total = len(results)
        if total == 0:
            logger.warning("No sources were processed")
            return 0

        for result in results:
            chunker.save_chunks(result, output_dir)

        successful = sum(1 for r in results if r.status == ChunkingStatus.SUCCESS)
        failed = total - successful
        total_chunks = sum(r.total_chunks for r in results)
        total_time = sum(r.processing_time for r in results)

        logger.info("=" * 60)
        logger.info("HTML Chunking Summary")
        logger.info("=" * 60)
        logger.info(f"Sources processed: {total}")
        logger.info(f"  Successful: {successful}")
        logger.info(f"  Failed: {failed}")
        logger.info(f"Total chunks generated: {total_chunks}")
        logger.info(f"Total processing time: {total_time:.2f}s")

        if failed > 0:
            logger.warning("Failed sources:")
            for r in results:
                if r.status == ChunkingStatus.FAILED:
                    logger.warning(f"  - {r.source_id}: {r.error_message}")

        return 0 if failed == 0 else 1

    except Exception as e:
        logger.exception(f"Error chunking sources: {e}")
        return 1


if __name__ == "__main__":
    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.warning("Process interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Error running text chunker: {e}")
        sys.exit(1)
