"""Entry point for the kill-zen-all agent."""

import logging
import os
import sys

from .agent import Agent
from .exceptions import KillZenAllError

LOG_LEVEL_ENV = "KILL_ZEN_ALL_LOG_LEVEL"

logger = logging.getLogger("kill_zen_all")


def configure_logging(environ=None):
    """Configure root logging from KILL_ZEN_ALL_LOG_LEVEL (default INFO)."""
    if environ is None:
        environ = os.environ
    level_name = environ.get(LOG_LEVEL_ENV, "INFO").strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    return level


def main():
    """Main entry point of the agent."""
    configure_logging()
    try:
        agent = Agent.create()
    except KillZenAllError as e:
        logger.error(f"Failed to start: {e}")
        sys.exit(1)
    try:
        agent.run()
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
