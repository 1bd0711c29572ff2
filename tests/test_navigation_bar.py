from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from outlinebar.behaviors import (
    DID_CHANGE_ACTIVE_DOCUMENT,
    DID_CHANGE_SELECTED_IDENTIFIER,
    DID_GENERATE_IDENTIFIERS,
    register_default_behaviors,
)
from outlinebar.documents import DocumentHandle
from outlinebar.identifiers import Position
from outlinebar.navigation_bar import NavigationBar
from outlinebar.outline import OutlineSourceRegistry, StaticOutlineSource


def method(name: str, start: tuple[int, int], end: tuple[int, int]) -> dict[str, object]:
    return {"kind": "method", "plainText": name, "startPosition": start, "endPosition": end}


class NavigationBarTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        patcher = mock.patch("outlinebar.runtime.config.CONFIG_PATH", Path(tmp.name) / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

        self.source = StaticOutlineSource(
            [
                {
                    "kind": "class",
                    "plainText": "Widget",
                    "startPosition": (0, 0),
                    "endPosition": (9, 0),
                    "children": [method("draw", (1, 4), (4, 0)), method("resize", (5, 4), (8, 0))],
                }
            ]
        )
        self.bar = NavigationBar(registry=OutlineSourceRegistry([self.source]))
        self.addCleanup(self.bar.dispose)
        self.events: list[tuple[str, object]] = []
        manager = self.bar.behavior_manager
        for name, subscribe in (
            (DID_CHANGE_ACTIVE_DOCUMENT, manager.on_did_change_active_document),
            (DID_GENERATE_IDENTIFIERS, manager.on_did_generate_identifiers),
            (DID_CHANGE_SELECTED_IDENTIFIER, manager.on_did_change_selected_identifier),
        ):
            subscribe(lambda event, name=name: self.events.append((name, event)), "recorder")

    def names(self) -> list[str]:
        return [name for name, _event in self.events]

    async def test_switching_documents_builds_one_provider_each(self) -> None:
        first = DocumentHandle(text="\n" * 10)
        second = DocumentHandle(text="\n" * 10)
        provider = await self.bar.set_active_document(first, (2, 0))
        self.assertIs(self.bar.active_provider(), provider)
        self.assertEqual(self.bar.cursor_position, Position(2, 0))
        self.assertIs(await self.bar.set_active_document(first), provider)
        self.assertEqual(self.names(), [DID_CHANGE_ACTIVE_DOCUMENT])

        other = await self.bar.set_active_document(second)
        self.assertIsNot(other, provider)
        self.assertEqual(self.bar.cursor_position, Position(0, 0))
        self.assertIs(self.events[-1][1].document, second)
        self.assertIs(await self.bar.pool.provider_for(first), provider)

    async def test_regeneration_is_forwarded_only_for_the_active_document(self) -> None:
        first = DocumentHandle(text="\n" * 10)
        second = DocumentHandle(text="\n" * 10)
        first_provider = await self.bar.set_active_document(first)
        await self.bar.set_active_document(second)
        self.events.clear()

        await first_provider.generate_identifiers()
        self.assertEqual(self.events, [])

        await self.bar.refresh()
        self.assertEqual(self.names(), [DID_GENERATE_IDENTIFIERS])
        self.assertIs(self.events[0][1].provider, self.bar.active_provider())

    async def test_stale_selection_is_resolved_from_cursor_after_rebuild(self) -> None:
        document = DocumentHandle(text="\n" * 20)
        provider = await self.bar.set_active_document(document, (6, 0))
        resize = provider.get_identifier_for_position((6, 0))
        await self.bar.set_selected_identifier(resize)

        self.source.outline = [
            {
                "kind": "class",
                "plainText": "Widget",
                "startPosition": (0, 0),
                "endPosition": (12, 0),
                "children": [method("draw", (1, 4), (4, 0)), method("paint", (5, 4), (7, 0)),
                             method("resize", (8, 4), (11, 0))],
            }
        ]
        await self.bar.notify_saved()
        selection = self.bar.resolved_selection(provider)
        self.assertIsNot(selection, resize)
        self.assertEqual(selection.name, "paint")
        self.assertIs(self.bar.selected_identifier, selection)

    async def test_grammar_change_switches_language_and_rebuilds(self) -> None:
        document = DocumentHandle(text="\n" * 10)
        await self.bar.set_active_document(document)
        self.events.clear()
        await self.bar.notify_grammar_changed("python")
        self.assertEqual(document.language, "python")
        self.assertEqual(self.names(), [DID_GENERATE_IDENTIFIERS])

    async def test_closing_active_document_clears_bar(self) -> None:
        document = DocumentHandle(text="\n" * 10)
        await self.bar.set_active_document(document)
        await self.bar.notify_document_closed(document)
        self.assertIsNone(self.bar.active_document)
        self.assertIsNone(self.bar.active_provider())
        self.assertIsNone(self.bar.pool.cached(document))
        self.assertIsNone(self.events[-1][1].document)

    async def test_selection_events_carry_user_flag(self) -> None:
        document = DocumentHandle(text="\n" * 10)
        provider = await self.bar.set_active_document(document)
        widget = provider.get_top_scope_identifier().children[0]
        await self.bar.set_selected_identifier(widget, selected_by_user=True)
        event = self.events[-1][1]
        self.assertIs(event.selected_identifier, widget)
        self.assertTrue(event.selected_by_user)

    async def test_line_shifts_move_positions_until_next_rebuild(self) -> None:
        self.assertEqual(self.bar.notify_lines_shifted(0, 3), 0)
        document = DocumentHandle(text="\n" * 20)
        provider = await self.bar.set_active_document(document)
        self.assertEqual(self.bar.notify_lines_shifted(5, 3), 2)
        widget = provider.get_top_scope_identifier().children[0]
        self.assertEqual(widget.end_position, Position(12, 0))
        self.assertEqual(provider.get_identifier_for_position((9, 0)).name, "resize")

    async def test_invalid_cursor_position_raises(self) -> None:
        with self.assertRaises(ValueError):
            await self.bar.set_cursor_position("top")

    async def test_refresh_without_document_is_a_no_op(self) -> None:
        await self.bar.refresh()
        await self.bar.notify_grammar_changed("python")
        self.assertEqual(self.events, [])


class NavigationBarWithBehaviorsTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        patcher = mock.patch("outlinebar.runtime.config.CONFIG_PATH", Path(tmp.name) / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

    async def test_rebuild_reselects_identifier_at_cursor(self) -> None:
        source = StaticOutlineSource([method("first", (0, 0), (3, 0))])
        bar = NavigationBar(registry=OutlineSourceRegistry([source]))
        self.addCleanup(bar.dispose)
        register_default_behaviors(bar.behavior_manager)
        await bar.behavior_manager.activate_all()

        document = DocumentHandle(text="\n" * 10)
        await bar.set_active_document(document, (1, 0))
        self.assertEqual(bar.selected_identifier.name, "first")

        source.outline = [method("renamed", (0, 0), (3, 0))]
        await bar.refresh()
        self.assertEqual(bar.selected_identifier.name, "renamed")
        display = bar.behavior_manager.get_behavior("display-identifiers")
        self.assertIs(display.last_update.selected_child(), bar.selected_identifier)


if __name__ == "__main__":
    unittest.main()
