"""CLI for the equipment intelligence pipeline."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, field_validator

from equipment_intel.config import get_default_config_path, load_config
from equipment_intel.config.factory import create_from_config
from equipment_intel.data import QueryResult
from equipment_intel.run_logger import _serialize

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    query: str
    config: Path
    region: str | None = None
    report: bool = False
    output: Path | None = None
    json_output: bool = False
    log: bool = False
    log_dir: str = "logs"
    deadline: float | None = None

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Query must not be empty")
        return v

    @field_validator("deadline")
    @classmethod
    def deadline_positive(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("Deadline must be positive")
        return v


async def run(args: CLIArgs) -> QueryResult:
    """Execute the pipeline with the given configuration.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    pipeline, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )

    logger.info(f"Running pipeline for: {args.query}")
    logger.info(f"Config: {args.config}")

    include_report = args.report or args.output is not None
    result = await asyncio.wait_for(
        pipeline.run(args.query, region=args.region, include_report=include_report),
        timeout=args.deadline,
    )

    if args.json_output:
        payload = _serialize(result)
        payload["report"] = result.report.render() if result.report else None
        print(json.dumps(payload, indent=2))
    else:
        _print_summary(result)

    if result.report is not None:
        if args.output is not None:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(result.report.render())
            logger.info(f"\nReport written to: {args.output}")
        elif args.report and not args.json_output:
            print()
            print(result.report.render())

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")

    return result


def _print_summary(result: QueryResult) -> None:
    record = result.record
    print(f"\n{record.name} ({record.type}): {result.status}")
    if result.error:
        logger.info(f"Extraction error [{result.error_type}]: {result.error}")
    logger.info(f"Cards processed: {len(result.card_outcomes)}")
    for key, value in record.specifications.items():
        logger.info(f"   {key}: {value}")
    logger.info(f"Variants ({record.variants_status}): {', '.join(record.variants) or '-'}")
    logger.info(f"Operators ({record.operators_status}): {', '.join(record.operators) or '-'}")
    logger.info(
        f"News: {len(result.articles)} articles "
        f"({result.failed_news_fetches}/{result.news_fetches} fetches failed)"
    )
    for i, article in enumerate(result.articles, 1):
        logger.info(f"{i}. {article.title}")
        logger.info(f"   Source: {article.source}")
        if article.link:
            logger.info(f"   URL: {article.link}")
        if article.published_at:
            logger.info(f"   Published: {article.published_at}")
    if result.from_cache:
        logger.info("(served from cache)")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Gather structured intelligence on military equipment.")
    parser.add_argument(
        "query",
        help="Equipment name, e.g. 'T-90'",
    )
    parser.add_argument(
        "--region",
        "-r",
        type=str,
        default=None,
        help="Region code for news scoping (default: config news.default_region)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        default=False,
        help="Render the intelligence report",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the rendered report to this file (implies --report)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the full result as JSON",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable intermediate pipeline logging to JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )
    parser.add_argument(
        "--deadline",
        type=float,
        default=None,
        help="Overall deadline for the query, in seconds",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            query=ns.query,
            config=config_path,
            region=ns.region,
            report=ns.report,
            output=ns.output,
            json_output=ns.json,
            log=ns.log,
            log_dir=ns.log_dir,
            deadline=ns.deadline,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        result = asyncio.run(run(args))
    except TimeoutError:
        logger.error(f"Query exceeded deadline of {args.deadline}s")
        sys.exit(2)
    except KeyboardInterrupt:
        sys.exit(130)

    if result.status == "failed":
        sys.exit(1)
