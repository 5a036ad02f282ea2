"""MCP application instance.

This module exists to avoid circular import issues when running with `python -m`.
All tool modules should import `mcp` from here, not from server.py.
"""

from mcp.server.fastmcp import FastMCP

# Initialize the MCP server
mcp = FastMCP(
    "Airport Departure Planner",
    instructions=(
        "Plan when to leave for JFK, LGA or EWR - traffic-aware travel time, "
        "weather delay and cab buffer"
    ),
)
