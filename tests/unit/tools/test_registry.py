"""
Tests for Tool Registry.

Test Categories:
- register / get / list / has / unregister
- Source attribution and name collisions
- Atomic source replacement
- Concurrent writers and readers

Pattern: Service Registry with copy-on-write snapshots
"""

import threading

import pytest


# =============================================================================
# Basic Operations
# =============================================================================


class TestToolRegistryBasics:
    """Tests for single-tool operations."""

    def test_starts_empty(self, registry) -> None:
        assert len(registry) == 0
        assert registry.list() == ()

    def test_register_and_get(self, registry, make_tool) -> None:
        tool = make_tool("lookup")

        registry.register(tool)

        assert registry.get("lookup") is tool
        assert registry.has("lookup")
        assert "lookup" in registry

    def test_get_unknown_raises(self, registry) -> None:
        from src.core.exceptions import ToolNotFoundError

        with pytest.raises(ToolNotFoundError) as exc_info:
            registry.get("nope")

        assert exc_info.value.tool_name == "nope"

    def test_register_same_source_replaces(self, registry, make_tool) -> None:
        registry.register(make_tool("lookup", source_id="shop"))
        replacement = make_tool("lookup", required=["id"], source_id="shop")

        registry.register(replacement)

        assert registry.get("lookup") is replacement
        assert len(registry) == 1

    def test_register_other_source_collides(self, registry, make_tool) -> None:
        from src.core.exceptions import NameCollisionError

        original = make_tool("lookup", source_id="shop")
        registry.register(original)

        with pytest.raises(NameCollisionError) as exc_info:
            registry.register(make_tool("lookup", source_id="crm"))

        assert exc_info.value.existing_source_id == "shop"
        assert registry.get("lookup") is original

    def test_unregister(self, registry, make_tool) -> None:
        registry.register(make_tool("lookup"))

        registry.unregister("lookup")

        assert not registry.has("lookup")

    def test_unregister_unknown_is_noop(self, registry) -> None:
        registry.unregister("nope")

        assert len(registry) == 0

    def test_list_is_snapshot(self, registry, make_tool) -> None:
        registry.register(make_tool("a"))
        snapshot = registry.list()

        registry.register(make_tool("b"))

        assert [t.name for t in snapshot] == ["a"]
        assert {t.name for t in registry.list()} == {"a", "b"}

    def test_returned_tool_contract_is_read_only(self, registry, make_tool) -> None:
        registry.register(make_tool("lookup", required=["id"]))
        tool = registry.get("lookup")

        with pytest.raises(TypeError):
            del tool.parameters["id"]
        with pytest.raises(TypeError):
            registry.list()[0].parameters["extra"] = tool.parameters["id"]

        assert registry.get("lookup").required_parameters == ["id"]
        assert set(registry.get("lookup").parameters) == {"id"}


# =============================================================================
# Source Operations
# =============================================================================


class TestSourceOperations:
    """Tests for replace_for_source / remove_source."""

    def test_replace_for_source_assigns_source(self, registry, make_tool) -> None:
        names = registry.replace_for_source("shop", [make_tool("a"), make_tool("b")])

        assert names == ["a", "b"]
        assert registry.get("a").source_id == "shop"
        assert registry.sources() == {"shop"}

    def test_replace_for_source_drops_previous_generation(self, registry, make_tool) -> None:
        registry.replace_for_source("shop", [make_tool("a"), make_tool("b")])

        registry.replace_for_source("shop", [make_tool("b"), make_tool("c")])

        assert {t.name for t in registry.tools_for_source("shop")} == {"b", "c"}
        assert not registry.has("a")

    def test_replace_for_source_leaves_other_sources(self, registry, make_tool) -> None:
        registry.replace_for_source("crm", [make_tool("contacts")])

        registry.replace_for_source("shop", [make_tool("items")])

        assert registry.sources() == {"crm", "shop"}

    def test_collision_leaves_registry_unchanged(self, registry, make_tool) -> None:
        from src.core.exceptions import NameCollisionError

        registry.replace_for_source("crm", [make_tool("shared")])
        registry.replace_for_source("shop", [make_tool("a")])
        before = registry.list()

        with pytest.raises(NameCollisionError):
            registry.replace_for_source("shop", [make_tool("b"), make_tool("shared")])

        assert registry.list() == before
        assert registry.has("a")
        assert not registry.has("b")

    def test_duplicate_names_in_new_set_rejected(self, registry, make_tool) -> None:
        from src.core.exceptions import NameCollisionError

        with pytest.raises(NameCollisionError):
            registry.replace_for_source("shop", [make_tool("a"), make_tool("a")])

        assert len(registry) == 0

    def test_remove_source(self, registry, make_tool) -> None:
        registry.replace_for_source("shop", [make_tool("a"), make_tool("b")])
        registry.replace_for_source("crm", [make_tool("c")])

        removed = registry.remove_source("shop")

        assert removed == 2
        assert [t.name for t in registry.list()] == ["c"]

    def test_remove_unknown_source(self, registry) -> None:
        assert registry.remove_source("nope") == 0


# =============================================================================
# Concurrency
# =============================================================================


class TestRegistryConcurrency:
    """Tests for concurrent writers and readers."""

    def test_concurrent_registrations_all_visible(self, registry, make_tool) -> None:
        tools = [make_tool(f"tool_{i}") for i in range(200)]
        start = threading.Barrier(len(tools))

        def register(tool):
            start.wait()
            registry.register(tool)

        threads = [threading.Thread(target=register, args=(t,)) for t in tools]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registry.list()) == 200
        assert {t.name for t in registry.list()} == {f"tool_{i}" for i in range(200)}

    def test_readers_never_see_partial_replacement(self, registry, make_tool) -> None:
        old = [make_tool(f"old_{i}") for i in range(20)]
        new = [make_tool(f"new_{i}") for i in range(20)]
        registry.replace_for_source("shop", old)
        observed: list[set[str]] = []
        done = threading.Event()

        def reader():
            while not done.is_set():
                observed.append({t.name for t in registry.list()})

        def writer():
            for _ in range(50):
                registry.replace_for_source("shop", new)
                registry.replace_for_source("shop", old)
            done.set()

        threads = [threading.Thread(target=reader) for _ in range(4)]
        threads.append(threading.Thread(target=writer))
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        old_names = {t.name for t in old}
        new_names = {t.name for t in new}
        assert observed
        assert all(names in (old_names, new_names) for names in observed)
