"""Tests for the Things3 tool catalog and argument handling."""

import pytest

from things3_mcp.errors import ThingsError, ToolArgumentError
from things3_mcp.server.dispatcher import Dispatcher
from things3_mcp.server.registry import ToolRegistry
from things3_mcp.things import scripts
from things3_mcp.tools import build_all_tools
from things3_mcp.tools._common import check_arguments, object_schema
from conftest import FakeBridge


def _tools(bridge):
    return {d.name: d for d in build_all_tools(bridge)}


class TestCatalog:
    def test_catalog(self, fake_bridge):
        tools = build_all_tools(fake_bridge)
        names = [t.name for t in tools]
        assert len(names) == 25
        assert len(set(names)) == 25
        assert names[0] == "todos_list"

    @pytest.mark.parametrize("prefix,count", [
        ("todos_", 7), ("projects_", 5), ("areas_", 2), ("tags_", 4),
        ("bulk_", 3), ("logbook_", 1), ("system_", 3),
    ])
    def test_groups(self, fake_bridge, prefix, count):
        assert sum(1 for name in _tools(fake_bridge) if name.startswith(prefix)) == count

    def test_schemas_are_objects(self, fake_bridge):
        for tool in build_all_tools(fake_bridge):
            assert tool.input_schema["type"] == "object"
            assert tool.input_schema["additionalProperties"] is False
            for key in tool.input_schema.get("required", []):
                assert key in tool.input_schema["properties"]

    def test_registers_cleanly(self, fake_bridge):
        registry = ToolRegistry(build_all_tools(fake_bridge))
        assert registry.get_tool_count() == 25


class TestCheckArguments:
    SCHEMA = object_schema(
        {
            "id": {"type": "string"},
            "limit": {"type": "integer", "minimum": 1, "maximum": 10, "default": 5},
            "flag": {"type": "boolean"},
            "tags": {"type": "array", "items": {"type": "string"}, "minItems": 1},
            "when": {"type": "string", "format": "date"},
            "kind": {"type": "string", "enum": ["a", "b"]},
        },
        required=["id"],
    )

    def test_defaults_filled(self):
        assert check_arguments({"id": "x"}, self.SCHEMA) == {"id": "x", "limit": 5}

    def test_null_treated_as_absent(self):
        assert check_arguments({"id": "x", "flag": None}, self.SCHEMA) == {"id": "x", "limit": 5}

    @pytest.mark.parametrize("args,fragment", [
        ({}, "Missing required argument(s): id"),
        ({"id": "x", "extra": 1}, "Unknown argument(s): extra"),
        ({"id": 1}, "'id' must be a string"),
        ({"id": "x", "limit": "3"}, "'limit' must be an integer"),
        ({"id": "x", "limit": True}, "'limit' must be an integer"),
        ({"id": "x", "limit": 0}, "'limit' must be >= 1"),
        ({"id": "x", "limit": 11}, "'limit' must be <= 10"),
        ({"id": "x", "flag": "yes"}, "'flag' must be a boolean"),
        ({"id": "x", "tags": "work"}, "'tags' must be an array"),
        ({"id": "x", "tags": []}, "'tags' needs at least 1 item(s)"),
        ({"id": "x", "tags": ["ok", 3]}, "'tags[1]' must be a string"),
        ({"id": "x", "when": "tomorrow"}, "'when' must be a date in YYYY-MM-DD format"),
        ({"id": "x", "kind": "c"}, "'kind' must be one of: a, b"),
    ])
    def test_rejections(self, args, fragment):
        with pytest.raises(ToolArgumentError) as exc_info:
            check_arguments(args, self.SCHEMA)
        assert exc_info.value.message == fragment


class TestTodoTools:
    @pytest.mark.asyncio
    async def test_list_wraps_items(self):
        bridge = FakeBridge(result=[{"id": "1", "title": "Test"}])
        result = await _tools(bridge)["todos_list"].handler({"filter": "today"})
        assert result == {"items": [{"id": "1", "title": "Test"}], "count": 1}
        assert bridge.calls[0]["script"] == scripts.TODOS_LIST
        assert bridge.calls[0]["payload"] == {"filter": "today", "limit": 100}

    @pytest.mark.asyncio
    async def test_list_with_no_script_output(self):
        result = await _tools(FakeBridge(result=None))["todos_list"].handler({})
        assert result == {"items": [], "count": 0}

    @pytest.mark.asyncio
    async def test_list_rejects_two_sources(self, fake_bridge):
        with pytest.raises(ToolArgumentError, match="only one of"):
            await _tools(fake_bridge)["todos_list"].handler({"filter": "today", "project_id": "p"})
        assert fake_bridge.calls == []

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_filter(self, fake_bridge):
        with pytest.raises(ToolArgumentError):
            await _tools(fake_bridge)["todos_list"].handler({"filter": "tomorrow"})

    @pytest.mark.asyncio
    async def test_create(self):
        bridge = FakeBridge(result={"id": "new"})
        args = {"title": "Buy milk", "when": "2026-10-20", "tags": ["errand"]}
        assert await _tools(bridge)["todos_create"].handler(args) == {"id": "new"}
        assert bridge.calls[0]["payload"] == args

    @pytest.mark.asyncio
    @pytest.mark.parametrize("when", ["today", "anytime", "someday", "2026-01-31"])
    async def test_create_accepts_when(self, fake_bridge, when):
        await _tools(fake_bridge)["todos_create"].handler({"title": "x", "when": when})
        assert fake_bridge.calls[0]["payload"]["when"] == when

    @pytest.mark.asyncio
    async def test_create_rejects_bad_when(self, fake_bridge):
        with pytest.raises(ToolArgumentError, match="'when'"):
            await _tools(fake_bridge)["todos_create"].handler({"title": "x", "when": "tonight"})

    @pytest.mark.asyncio
    async def test_create_requires_title(self, fake_bridge):
        with pytest.raises(ToolArgumentError, match="title"):
            await _tools(fake_bridge)["todos_create"].handler({"notes": "n"})

    @pytest.mark.asyncio
    async def test_update_needs_a_field(self, fake_bridge):
        with pytest.raises(ToolArgumentError, match="Nothing to update"):
            await _tools(fake_bridge)["todos_update"].handler({"id": "1"})

    @pytest.mark.asyncio
    async def test_complete_and_uncomplete(self, fake_bridge):
        tools = _tools(fake_bridge)
        await tools["todos_complete"].handler({"id": "1"})
        await tools["todos_uncomplete"].handler({"id": "1"})
        assert [c["payload"] for c in fake_bridge.calls] == [
            {"id": "1", "status": "completed"},
            {"id": "1", "status": "open"},
        ]
        assert all(c["script"] == scripts.TODOS_SET_STATUS for c in fake_bridge.calls)

    @pytest.mark.asyncio
    async def test_bridge_errors_propagate(self):
        bridge = FakeBridge(error=ThingsError("Things3 is not running"))
        with pytest.raises(ThingsError, match="Things3 is not running"):
            await _tools(bridge)["todos_get"].handler({"id": "1"})


class TestOtherTools:
    @pytest.mark.asyncio
    async def test_projects_update_area_only(self, fake_bridge):
        await _tools(fake_bridge)["projects_update"].handler({"id": "p", "area_id": "a"})
        assert fake_bridge.calls[0]["script"] == scripts.PROJECTS_UPDATE

    @pytest.mark.asyncio
    async def test_projects_list_default(self, fake_bridge):
        await _tools(fake_bridge)["projects_list"].handler({})
        assert fake_bridge.calls[0]["payload"] == {"include_items": False}

    @pytest.mark.asyncio
    async def test_tags_add_and_remove_modes(self, fake_bridge):
        tools = _tools(fake_bridge)
        await tools["tags_add"].handler({"id": "1", "tags": ["work"]})
        await tools["tags_remove"].handler({"id": "1", "tags": ["work"]})
        assert [c["payload"]["mode"] for c in fake_bridge.calls] == ["add", "remove"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "  ", "a,b"])
    async def test_tags_create_rejects_bad_names(self, fake_bridge, name):
        with pytest.raises(ToolArgumentError):
            await _tools(fake_bridge)["tags_create"].handler({"name": name})

    @pytest.mark.asyncio
    async def test_tags_create_strips_name(self, fake_bridge):
        await _tools(fake_bridge)["tags_create"].handler({"name": " work "})
        assert fake_bridge.calls[0]["payload"] == {"name": "work"}

    @pytest.mark.asyncio
    async def test_bulk_move_needs_exactly_one_target(self, fake_bridge):
        tools = _tools(fake_bridge)
        with pytest.raises(ToolArgumentError, match="Provide one of"):
            await tools["bulk_move"].handler({"ids": ["1"]})
        with pytest.raises(ToolArgumentError, match="only one of"):
            await tools["bulk_move"].handler({"ids": ["1"], "list": "today", "area_id": "a"})
        await tools["bulk_move"].handler({"ids": ["1", "2"], "list": "someday"})
        assert len(fake_bridge.calls) == 1

    @pytest.mark.asyncio
    async def test_bulk_rejects_empty_and_oversized_batches(self, fake_bridge):
        tools = _tools(fake_bridge)
        with pytest.raises(ToolArgumentError):
            await tools["bulk_complete"].handler({"ids": []})
        with pytest.raises(ToolArgumentError):
            await tools["bulk_complete"].handler({"ids": [str(i) for i in range(101)]})

    @pytest.mark.asyncio
    async def test_bulk_update_dates_needs_a_date(self, fake_bridge):
        with pytest.raises(ToolArgumentError):
            await _tools(fake_bridge)["bulk_update_dates"].handler({"ids": ["1"]})

    @pytest.mark.asyncio
    async def test_logbook_search(self):
        bridge = FakeBridge(result=[{"id": "9"}])
        result = await _tools(bridge)["logbook_search"].handler({"query": "report", "since": "2026-01-01"})
        assert result == {"items": [{"id": "9"}], "count": 1}
        assert bridge.calls[0]["payload"]["limit"] == 50

    @pytest.mark.asyncio
    async def test_logbook_search_with_no_script_output(self):
        result = await _tools(FakeBridge(result=None))["logbook_search"].handler({})
        assert result == {"items": [], "count": 0}

    @pytest.mark.asyncio
    async def test_logbook_search_rejects_inverted_range(self, fake_bridge):
        with pytest.raises(ToolArgumentError, match="since"):
            await _tools(fake_bridge)["logbook_search"].handler({"since": "2026-02-01", "until": "2026-01-01"})

    @pytest.mark.asyncio
    async def test_system_tools_do_not_require_running_app(self, fake_bridge):
        tools = _tools(fake_bridge)
        await tools["system_launch"].handler({})
        await tools["system_status"].handler({})
        await tools["system_refresh"].handler({})
        assert [c["require_running"] for c in fake_bridge.calls] == [False, False, True]


class TestThroughDispatcher:
    @pytest.mark.asyncio
    async def test_argument_error_is_domain_failure(self, fake_bridge):
        dispatcher = Dispatcher(ToolRegistry(build_all_tools(fake_bridge)))
        result = await dispatcher.call_tool({"name": "todos_get", "arguments": {}})
        assert result == {
            "content": [{"type": "text", "text": '{"error":"Missing required argument(s): id"}'}],
            "isError": True,
        }

    @pytest.mark.asyncio
    async def test_not_running(self):
        bridge = FakeBridge(error=ThingsError("Things3 is not running"))
        dispatcher = Dispatcher(ToolRegistry(build_all_tools(bridge)))
        result = await dispatcher.call_tool({"name": "todos_list", "arguments": {"filter": "today"}})
        assert result == {
            "content": [{"type": "text", "text": '{"error":"Things3 is not running"}'}],
            "isError": True,
        }
