#!/usr/bin/env python3
"""Journey map MCP server — browse, chart and delete journey maps."""

import json
import logging
import sys

from mcp.server.fastmcp import FastMCP

from journeymap.config import Config, load_config
from journeymap.db import JourneyMapDB
from journeymap.errors import JourneyMapError
from journeymap.output import map_queries as mq

mcp = FastMCP("journeymap")
logger = logging.getLogger(__name__)

# Redirect all logging to stderr so stdout stays clean for MCP stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_db: JourneyMapDB | None = None
_config: Config | None = None


def _get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _get_db() -> JourneyMapDB:
    global _db
    if _db is None:
        _db = JourneyMapDB(_get_config())
        _db.init_db()
    return _db


@mcp.tool()
def list_journey_maps(idea_id: str) -> str:
    """List journey maps for an idea, newest first."""
    result = mq.list_journey_maps(idea_id, _get_db())
    return json.dumps(result, default=str)


@mcp.tool()
def get_journey_map(map_id: str) -> str:
    """Get a journey map with its ordered steps."""
    try:
        return json.dumps(mq.get_journey_map(map_id, _get_db()), default=str)
    except JourneyMapError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def get_journey_chart(map_id: str) -> str:
    """Get pain/opportunity chart coordinates and SVG polylines for a journey map."""
    try:
        return json.dumps(mq.get_journey_chart(map_id, _get_db(), _get_config()))
    except JourneyMapError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def delete_journey_map(map_id: str) -> str:
    """Delete a journey map."""
    try:
        return json.dumps(mq.delete_journey_map(map_id, _get_db()))
    except JourneyMapError as e:
        return json.dumps({"error": str(e)})


if __name__ == "__main__":
    mcp.run()
