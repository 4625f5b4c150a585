"""Command-line entry point: ethstreamer [options] <task> [task options]."""

import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from .config import load_config
from .exceptions import DeploymentError
from .runtime import RuntimeEnvironment
from .tasks import get_task, list_tasks

LOG_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Send log records to stderr at the requested level."""
    level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per registered task."""
    parser = argparse.ArgumentParser(
        prog="ethstreamer",
        description="Build and deploy the EthStreamer contract",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="config file (default: $ETHSTREAMER_CONFIG or ./ethstreamer.config.json)",
    )
    parser.add_argument(
        "--network",
        default=None,
        help="network to connect to (default: defaultNetwork from the config)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="only log warnings and errors")

    subparsers = parser.add_subparsers(dest="task", metavar="TASK", required=True)
    for task in list_tasks():
        task_parser = subparsers.add_parser(
            task.name, help=task.description, description=task.description
        )
        for flags, kwargs in task.params:
            task_parser.add_argument(*flags, **kwargs)

    return parser


def _dest(flags, kwargs) -> str:
    # Same rule argparse uses for optional arguments
    return kwargs.get("dest") or flags[-1].lstrip("-").replace("-", "_")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run a task.

    Returns:
        0 on success, 1 if the task failed with a DeploymentError.
        Other exceptions propagate.
    """
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    task = get_task(args.task)
    task_kwargs = {}
    for flags, kwargs in task.params:
        dest = _dest(flags, kwargs)
        task_kwargs[dest] = getattr(args, dest)

    try:
        config = load_config(args.config)
        env = RuntimeEnvironment(config, args.network)
        task.run(env, **task_kwargs)
    except DeploymentError as e:
        logger.error(f"{task.name} failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
