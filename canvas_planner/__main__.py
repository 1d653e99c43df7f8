import logging
import sys

from .planner import Planner
from .utils.config import Config

logger = logging.getLogger('canvas_planner')

USAGE = """Usage:
  canvas-planner weekly    - Run weekly review
  canvas-planner daily     - Run daily update
  canvas-planner sync      - Sync Canvas tasks to Notion
  canvas-planner test      - Run all jobs for testing
  canvas-planner schedule  - Run the jobs on their configured schedule"""

COMMANDS = {
    'weekly': Planner.weekly,
    'daily': Planner.daily,
    'sync': Planner.sync,
    'test': Planner.run_all,
    'schedule': Planner.run_forever,
}


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    command = COMMANDS.get(args[0]) if len(args) == 1 else None
    if command is None:
        print(USAGE)
        return 1

    try:
        config = Config.from_env()
        logging.basicConfig(
            level=config.log_level,
            format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        )
        logger.info("Canvas AI Planner")
        command(Planner(config.validate()))
    except Exception as e:
        logger.error(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
