"""Command-line entry point: load the dataset, apply a selection, print the views."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from salary_explorer.config.environment import EnvironmentConfig
from salary_explorer.config.exceptions import ConfigurationError
from salary_explorer.config.loader import load_config
from salary_explorer.config.models import AppConfig
from salary_explorer.coordination import SelectionSnapshot
from salary_explorer.domain.models import SIZE_BUCKETS, TRACKS, Track
from salary_explorer.logging import get_logger
from salary_explorer.logging.config import configure_logging
from salary_explorer.repository import IngestionError
from salary_explorer.service import DashboardService

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path],
    dataset_override: Optional[str] = None,
    log_level_override: Optional[str] = None,
) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and apply command-line overrides.

    Priority for the dataset path and log level: CLI > environment > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)
    app_config = app_config.with_dataset_path(dataset_override)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def summarize(service: DashboardService, snapshot: SelectionSnapshot) -> Dict[str, Any]:
    """Plain-JSON summary of the national view and the active selection."""
    views = snapshot.views
    graph = views.flow_graph
    return {
        "selection": {
            "region": snapshot.state.selected_region,
            "track": snapshot.state.selected_track.value if snapshot.state.selected_track else None,
            "size": snapshot.state.selected_size.value if snapshot.state.selected_size else None,
            "breadcrumb": snapshot.state.describe(),
        },
        "national_median": service.get_national_median(),
        "dropped_records": service.repository.dropped_count,
        "region_statistics": [stat.model_dump() for stat in service.get_region_statistics()],
        "filtered_count": len(views.filtered_records),
        "skill_frequency": {skill.value: round(share, 4) for skill, share in views.skill_frequency.items()},
        "size_stats": [
            {
                "bucket": stat.bucket.value,
                "count": stat.count,
                "mean_salary": round(stat.mean_salary, 2),
                "min_salary": round(stat.min_salary, 2),
                "max_salary": round(stat.max_salary, 2),
            }
            for stat in views.size_stats
        ],
        "flow_graph": {
            "nodes": [node.label for node in graph.nodes],
            "links": [
                {
                    "source": link.source,
                    "target": link.target,
                    "weight": link.weight,
                    "mean_salary": round(link.mean_salary, 2) if link.mean_salary is not None else None,
                }
                for link in graph.links
            ],
        },
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the salary explorer CLI.

    Returns:
        Exit code (0 for success, 1 for configuration or ingestion failure)
    """
    start_time = time.time()
    parser = argparse.ArgumentParser(
        description="Salary Explorer - salary statistics and linked dashboard views from job postings"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument("--dataset", default=None, help="Dataset CSV path (overrides config)")
    parser.add_argument("--region", default=None, help="Two-letter state code to select")
    parser.add_argument(
        "--track",
        default=None,
        choices=[track.value for track in TRACKS] + [Track.SOFTWARE_ENGINEER.value],
        help="Job track to select (requires --region)",
    )
    parser.add_argument(
        "--size",
        default=None,
        choices=[bucket.value for bucket in SIZE_BUCKETS],
        help="Company size to record (requires --region)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    args = parser.parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.dataset, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )
        logger.info(
            "Salary explorer starting",
            extra={
                "event": "service.starting",
                "dataset": app_config.dataset.path,
                "ingestion_timeout_seconds": app_config.ingestion.timeout_seconds,
            },
        )

        service = DashboardService.from_config(app_config)
        snapshot = service.start()

        if args.region:
            snapshot = service.coordinator.select_region(args.region) or snapshot
        if args.track:
            snapshot = service.coordinator.select_track(args.track) or snapshot
        if args.size:
            snapshot = service.coordinator.select_size(args.size) or snapshot

        print(json.dumps(summarize(service, snapshot), indent=2))

        logger.info(
            "Salary explorer finished",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except IngestionError as e:
        print(f"Ingestion Error: {e}", file=sys.stderr)
        logger.error(
            f"Dataset ingestion failed: {e}",
            extra={"event": "service.ingestion.failed", "dataset": e.source},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0


if __name__ == "__main__":
    sys.exit(main())
