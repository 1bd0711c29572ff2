from __future__ import annotations

import unittest

from outlinebar.documents import DocumentHandle
from outlinebar.identifiers import Position, TopScopeIdentifier
from outlinebar.outline import OutlineNode, OutlineTranslator, OutlineTree, TextToken


def node(kind, name, start, end=None, children=None) -> dict[str, object]:
    out: dict[str, object] = {"kind": kind, "plainText": name, "startPosition": start}
    if end is not None:
        out["endPosition"] = end
    out["children"] = children or []
    return out


class OutlineTranslatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.document = DocumentHandle(text="\n" * 40)
        self.translator = OutlineTranslator(self.document)

    def test_requires_document(self) -> None:
        with self.assertRaises(ValueError):
            OutlineTranslator(None)

    def test_missing_outline_yields_empty_root(self) -> None:
        root = self.translator.translate(None)
        self.assertIsInstance(root, TopScopeIdentifier)
        self.assertEqual(root.children, ())

    def test_grouping_kinds_are_spliced_into_parent(self) -> None:
        outline = {
            "outlineTrees": [
                node(
                    "module",
                    "pkg",
                    {"row": 0, "column": 0},
                    children=[
                        node("namespace", "ns", (1, 0), children=[node("class", "A", (2, 0), (5, 0))]),
                        node("function", "f", (6, 0), (7, 0)),
                    ],
                )
            ]
        }
        root = self.translator.translate(outline)
        self.assertEqual([child.name for child in root.children], ["A", "f"])
        self.assertEqual(root.children[0].kind, ["class"])

    def test_containers_recurse_and_callables_stop(self) -> None:
        outline = OutlineTree(
            children=[
                OutlineNode(
                    kind="class",
                    plain_text="A",
                    start_position=Position(0, 0),
                    end_position=Position(9, 0),
                    children=[
                        OutlineNode(
                            kind="method",
                            plain_text="run",
                            start_position=Position(1, 4),
                            end_position=Position(4, 0),
                            children=[OutlineNode(kind="variable", plain_text="local", start_position=Position(2, 8))],
                        ),
                        OutlineNode(kind="field", plain_text="size", start_position=Position(5, 4)),
                        OutlineNode(
                            kind="enum",
                            plain_text="Mode",
                            start_position=Position(6, 4),
                            end_position=Position(8, 0),
                            children=[OutlineNode(kind="constant", plain_text="ON", start_position=Position(7, 8))],
                        ),
                    ],
                )
            ]
        )
        root = self.translator.translate(outline)
        cls = root.children[0]
        run, size, mode = cls.children
        self.assertEqual(run.kind, ["method"])
        self.assertFalse(run.has_children())
        self.assertEqual(size.end_position, Position(5, 4))
        self.assertEqual([child.name for child in mode.children], ["ON"])
        self.assertEqual(mode.children[0].scope_level, 2)

    def test_unknown_and_missing_kinds_still_create_nodes(self) -> None:
        outline = {
            "outlineTrees": [
                {"plainText": "mystery", "startPosition": (0, 0)},
                {"kind": "typeParameter", "representativeName": "T", "startPosition": (1, 0)},
                {"kind": "property", "startPosition": (2, 0)},
            ]
        }
        root = self.translator.translate(outline)
        self.assertEqual(
            [(child.name, child.kind) for child in root.children],
            [("mystery", ["unknown"]), ("T", ["typeParameter"]), ("unnamed", ["property"])],
        )

    def test_tokenized_text_expands_to_token_leaves(self) -> None:
        outline = [
            {
                "kind": "class",
                "startPosition": (3, 0),
                "endPosition": (3, 20),
                "tokenizedText": [
                    {"kind": "keyword", "value": "class"},
                    TextToken(kind="class-name", value="Widget"),
                ],
                "children": [node("method", "ignored", (4, 0))],
            }
        ]
        root = self.translator.translate(outline)
        self.assertEqual(
            [(child.name, child.kind) for child in root.children],
            [("class", ["tt-keyword"]), ("Widget", ["tt-class-name"])],
        )
        self.assertEqual(root.children[1].start_position, Position(3, 0))
        self.assertEqual(root.children[1].end_position, Position(3, 20))

    def test_retranslation_reuses_root_and_drops_old_tree(self) -> None:
        root = self.translator.translate([node("class", "A", (0, 0), (2, 0))])
        old = root.children[0]
        again = self.translator.translate([node("class", "B", (0, 0), (2, 0))], root=root)
        self.assertIs(again, root)
        self.assertEqual([child.name for child in root.children], ["B"])
        self.assertIsNot(root.children[0], old)

    def test_every_translated_node_has_a_kind(self) -> None:
        outline = [node(None, "x", (0, 0)), {"tokenizedText": [{"value": "v"}], "startPosition": (1, 0)}]
        root = self.translator.translate(outline)
        self.assertEqual(OutlineTranslator.nodes_without_kind(root), [])
        self.assertEqual(root.children[1].kind, ["tt-plain"])

    def test_none_nodes_are_skipped_with_warning(self) -> None:
        with self.assertLogs("outlinebar.outline.translator", level="WARNING"):
            root = self.translator.translate([None, node("field", "a", (0, 0))])
        self.assertEqual([child.name for child in root.children], ["a"])


if __name__ == "__main__":
    unittest.main()
