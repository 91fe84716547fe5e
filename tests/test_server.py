"""Tests for tool registration and dispatch."""
import json

import pytest
from mcp.types import CallToolRequest, ListToolsRequest

from linear_mcp import handlers, server, tools


class TestToolRegistry:

    def test_every_tool_has_a_handler(self):
        names = [tool.name for tool in tools.get_tools()]
        assert len(names) == len(set(names)) == 12
        assert set(names) == set(server.HANDLERS)

    def test_schemas_use_camel_case_arguments(self):
        schema = {t.name: t.inputSchema for t in tools.get_tools()}["linear_create_issue"]

        assert schema["type"] == "object"
        assert {"teamId", "teamName", "stateName", "labelIds"} <= set(schema["properties"])
        assert schema["required"] == ["title"]

    def test_read_only_annotations(self):
        annotations = {t.name: t.annotations for t in tools.get_tools()}
        assert annotations["linear_get_issue"].readOnlyHint is True
        assert annotations["linear_create_issue"].readOnlyHint is False
        assert annotations["linear_create_issue"].idempotentHint is False


class TestDispatch:

    @pytest.mark.asyncio
    async def test_unknown_tool(self, fake_client):
        context = handlers.ToolContext.create(fake_client)

        result = await server.dispatch("linear_delete_everything", {}, context)

        assert result.isError is True
        assert result.content[0].text == "Error: Unknown tool: linear_delete_everything"

    @pytest.mark.asyncio
    async def test_routes_to_handler(self, fake_client):
        context = handlers.ToolContext.create(fake_client)

        result = await server.dispatch("linear_list_teams", None, context)

        assert [t["key"] for t in json.loads(result.content[0].text)] == ["ENG", "OPS"]

    def test_create_server(self, fake_client):
        app = server.create_server(handlers.ToolContext.create(fake_client))

        assert app.name == "linear-mcp-server"
        assert ListToolsRequest in app.request_handlers
        assert CallToolRequest in app.request_handlers
