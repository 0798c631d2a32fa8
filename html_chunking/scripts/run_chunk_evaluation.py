#!/usr/bin/env python
"""
Script to evaluate chunking quality over fixture sets.

Chunks every source listed in the fixture manifests and checks, per source:
- sentence boundaries: every chunk ends cleanly
- heading context: heading coverage meets the per-type threshold
- max words: no chunk exceeds the configured ceiling

Exits with status 1 when any check fails.
"""

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from loguru import logger

from html_chunking.models.chunks import ChunkingResult, ChunkingStatus, HtmlType
from html_chunking.settings import get_settings
from html_chunking.utils.chunk_evaluator import (
    ChunkEvaluation,
    WordCountDistribution,
    evaluate_chunks,
)
from html_chunking.utils.logging_setup import setup_logging
from html_chunking.utils.text_chunker import SourceChunker


@dataclass
class SourceReport:
    """Evaluation outcome for one source."""

    result: ChunkingResult
    evaluation: ChunkEvaluation
    checks: dict[str, bool]

    @property
    def passed(self) -> bool:
        return all(self.checks.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_id": self.result.source_id,
            "source_title": self.result.source_title,
            "html_type": self.result.html_type.value if self.result.html_type else None,
            "checks": self.checks,
            "evaluation": self.evaluation.to_dict(),
        }


def _coverage_thresholds(config: dict[str, Any]) -> dict[HtmlType, float]:
    raw = config.get("evaluation", {}).get("heading_coverage", {}) or {}
    return {HtmlType(name): float(value) for name, value in raw.items()}


def evaluate_results(
    results: list[ChunkingResult], config: dict[str, Any]
) -> list[SourceReport]:
    """Evaluate every successfully chunked source."""
    thresholds = _coverage_thresholds(config)
    ceiling = config.get("evaluation", {}).get("max_word_ceiling", 450)

    reports = []
    for result in results:
        evaluation = evaluate_chunks(result.chunks, result.html_type, thresholds)
        checks = {
            "chunked": result.status == ChunkingStatus.SUCCESS,
            "sentence_boundaries": evaluation.no_mid_sentence_splits,
            "heading_context": evaluation.heading_context_preserved,
            "max_words": evaluation.max_word_count <= ceiling,
        }
        reports.append(SourceReport(result, evaluation, checks))
    return reports


def log_summary(reports: list[SourceReport]) -> None:
    """Log per-source lines, per-mode summaries and the overall distribution."""
    for report in reports:
        ev = report.evaluation
        status = " | ".join(
            f"{name}: {'PASS' if ok else 'FAIL'}" for name, ok in report.checks.items()
        )
        logger.info(
            f"{report.result.source_id}: {ev.chunk_count} chunks | "
            f"words {ev.min_word_count}-{ev.max_word_count} "
            f"(avg {ev.mean_word_count:.0f}) | "
            f"coverage {ev.heading_coverage * 100:.0f}% | {status}"
        )

    logger.info("=" * 60)
    logger.info("Chunk Evaluation Summary")
    logger.info("=" * 60)

    for html_type in HtmlType:
        subset = [r for r in reports if r.result.html_type == html_type]
        if not subset:
            continue
        coverage = sum(r.evaluation.heading_coverage for r in subset) / len(subset)
        boundaries = all(r.evaluation.no_mid_sentence_splits for r in subset)
        logger.info(
            f"{html_type.value}: {len(subset)} sources, "
            f"{sum(r.evaluation.chunk_count for r in subset)} chunks | "
            f"sentence boundaries {'ALL PASS' if boundaries else 'SOME FAIL'} | "
            f"heading coverage {coverage * 100:.0f}%"
        )

    word_counts = [c.word_count for r in reports for c in r.result.chunks]
    distribution = WordCountDistribution.from_counts(word_counts)
    logger.info(f"Word count distribution: {distribution.to_dict()}")

    total_checks = sum(len(r.checks) for r in reports)
    failed_checks = sum(1 for r in reports for ok in r.checks.values() if not ok)
    logger.info(
        f"Total checks: {total_checks} "
        f"({total_checks - failed_checks} PASS, {failed_checks} FAIL)"
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the chunk evaluation script."""
    load_dotenv()
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Evaluate chunking quality on fixtures"
    )
    parser.add_argument("--config", type=str, default=settings.config_path)
    parser.add_argument("--fixtures", type=str, default=settings.fixtures_dir)
    parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Optional path for a JSON evaluation report",
    )
    parser.add_argument("--log-level", type=str, default=settings.log_level)
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        chunker = SourceChunker(config_path=args.config)
        results = chunker.process_fixtures_dir(Path(args.fixtures))
        if not results:
            logger.warning("No sources were evaluated")
            return 0

        reports = evaluate_results(results, chunker.config)
        log_summary(reports)

        if args.report:
            report_path = Path(args.report)
            report_path.parent.mkdir(parents=True, exist_ok=True)
            with open(report_path, "w", encoding="utf-8") as f:
                json.dump(
                    [r.to_dict() for r in reports], f, indent=2, ensure_ascii=False
                )
            logger.info(f"Saved evaluation report to {report_path}")

        overall = all(r.passed for r in reports)
        logger.info(f"Overall: {'PASS' if overall else 'FAIL'}")
        return 0 if overall else 1

    except Exception as e:
        logger.exception(f"Error evaluating chunks: {e}")
        return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.warning("Process interrupted by user")
        sys.exit(130)
