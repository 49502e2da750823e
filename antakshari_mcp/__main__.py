"""Run the Antakshari MCP server over stdio: python -m antakshari_mcp"""

import logging
import sys

from antakshari_mcp.server import mcp


def main():
    # stdout carries the MCP protocol
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run()


if __name__ == "__main__":
    main()
