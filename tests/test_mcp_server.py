"""Tests for journey map MCP server tool registration and basic returns."""

import json

import journeymap.mcp_server as mcp_mod
from journeymap.mcp_server import mcp


EXPECTED_TOOLS = {
    "list_journey_maps",
    "get_journey_map",
    "get_journey_chart",
    "delete_journey_map",
}


class TestMCPToolRegistration:
    def test_all_tools_registered(self):
        """All expected tools are registered on the mcp object."""
        # FastMCP stores tools in _tool_manager._tools dict
        registered = set(mcp._tool_manager._tools.keys())
        assert EXPECTED_TOOLS.issubset(registered), (
            f"Missing tools: {EXPECTED_TOOLS - registered}"
        )


class TestMCPToolReturns:
    def test_list_returns_json(self, tmp_db, saved_map, monkeypatch):
        monkeypatch.setattr(mcp_mod, "_db", tmp_db)
        data = json.loads(mcp_mod.list_journey_maps("idea-1"))
        assert isinstance(data, list)
        assert data[0]["id"] == saved_map

    def test_chart_returns_json(self, tmp_db, saved_map, config, monkeypatch):
        monkeypatch.setattr(mcp_mod, "_db", tmp_db)
        monkeypatch.setattr(mcp_mod, "_config", config)
        data = json.loads(mcp_mod.get_journey_chart(saved_map))
        assert len(data["points"]) == 4

    def test_error_returns_json_error(self, tmp_db, monkeypatch):
        """Tools return {"error": ...} on engine errors."""
        monkeypatch.setattr(mcp_mod, "_db", tmp_db)
        data = json.loads(mcp_mod.get_journey_map("nonexistent"))
        assert "error" in data

    def test_delete(self, tmp_db, saved_map, monkeypatch):
        monkeypatch.setattr(mcp_mod, "_db", tmp_db)
        data = json.loads(mcp_mod.delete_journey_map(saved_map))
        assert data["status"] == "ok"
        assert tmp_db.get(saved_map) is None
