# main.py

import sys

from server_engine.core.logging import get_logger
from server_engine.core.server import Server
from dancing_npc.plugin import DancingNPC

logger = get_logger()


def main(config_path: str = "server.json") -> int:
    server = Server(config_path)
    server.initialize()

    if not server.plugins.load(DancingNPC()):
        logger.error("Dancing NPC failed to load, see the log above")

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
