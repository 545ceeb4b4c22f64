"""
Relay Fit CLI - Main entry point.

Provides command-line interface for fitting and inspecting zone characteristics.
"""

import argparse
import dataclasses
import json
import logging
import sys
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from relay_io.logging import LogEvent, StructuredLogger
from relay_io.schemas import zone_key
from relay_processor.config import JobConfig
from relay_processor.service import FitService
from relay_zone.analytics.counter import evaluate_zones
from relay_zone.geometry.shapes import build_characteristic


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to YAML file

    Returns:
        Dictionary with job configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If YAML is invalid
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
        return config
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")


def load_job(args: argparse.Namespace) -> JobConfig:
    """Job from the YAML file, with command-line overrides applied."""
    events = StructuredLogger(component="cli")
    try:
        job = JobConfig.from_dict(load_yaml_config(args.config))
    except ValueError as e:
        events.error(
            event=LogEvent.CONFIG_ERROR,
            message=f"Invalid job config {args.config}",
            exc_info=e,
        )
        raise

    overrides = {}
    if getattr(args, 'seed', None) is not None:
        overrides['rng_seed'] = args.seed
    if getattr(args, 'generations', None) is not None:
        overrides['generations'] = args.generations
    if getattr(args, 'population', None) is not None:
        overrides['population_size'] = args.population
    if getattr(args, 'trim_reactance', False):
        overrides['trim_reactance'] = True

    if overrides:
        job = dataclasses.replace(
            job, fit_config=dataclasses.replace(job.fit_config, **overrides)
        )

    events.info(
        event=LogEvent.CONFIG_LOADED,
        message=f"Loaded job {job.job_id}",
        metadata={'config': args.config, 'points': len(job.points), 'overrides': overrides},
    )
    return job


def command_fit(job: JobConfig) -> Dict[str, Any]:
    return FitService(job).run().to_dict()


def command_evaluate(job: JobConfig) -> Dict[str, Any]:
    stats = evaluate_zones(job.zones, job.points, trim_reactance=job.fit_config.trim_reactance)
    return {zone_key(zone): s.to_dict() for zone, s in stats.items()}


def command_polygon(job: JobConfig) -> Dict[str, Any]:
    trim = job.fit_config.trim_reactance
    return {
        zone_key(zone): [list(v) for v in build_characteristic(params, trim_reactance=trim).to_list()]
        for zone, params in job.zones.items()
    }


COMMANDS = {
    'fit': command_fit,
    'evaluate': command_evaluate,
    'polygon': command_polygon,
}


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Relay Fit CLI - Fit distance protection zone characteristics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fit zones 1-3 to the job's labeled points
  relay-fit fit config/fit_job.yaml --seed 42

  # Quick run with a smaller search
  relay-fit fit config/fit_job.yaml --population 50 --generations 20

  # Classification stats of the job's current settings
  relay-fit evaluate config/fit_job.yaml

  # Boundary vertices of the job's current settings
  relay-fit polygon config/fit_job.yaml --trim-reactance
"""
    )

    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON output indentation (default: 2)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # fit command
    fit = subparsers.add_parser('fit', help='Fit zones 1-3 from a job YAML')
    fit.add_argument('config', help='Path to job config YAML')
    fit.add_argument('--seed', type=int, help='Random seed override')
    fit.add_argument('--generations', type=int, help='Generations per zone override')
    fit.add_argument('--population', type=int, help='Population size override')
    fit.add_argument('--trim-reactance', action='store_true', help='Clip boundary at -X in result stats')

    # evaluate command
    evaluate = subparsers.add_parser('evaluate', help='Classification stats of current settings')
    evaluate.add_argument('config', help='Path to job config YAML')
    evaluate.add_argument('--trim-reactance', action='store_true', help='Clip boundary at -X')

    # polygon command
    polygon = subparsers.add_parser('polygon', help='Boundary vertices of current settings')
    polygon.add_argument('config', help='Path to job config YAML')
    polygon.add_argument('--trim-reactance', action='store_true', help='Clip boundary at -X')

    # Parse arguments
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Execute command
    try:
        job = load_job(args)
        output = COMMANDS[args.command](job)
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(output, indent=args.indent))


if __name__ == '__main__':
    main()
