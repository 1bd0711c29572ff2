from __future__ import annotations

import unittest

from outlinebar.documents import DocumentHandle
from outlinebar.identifiers import (
    EmptyIdentifier,
    Identifier,
    Position,
    TopScopeIdentifier,
    belongs_to_tree,
    debug_label,
    iter_identifiers,
    shift_positions,
)
from outlinebar.outline import OutlineTranslator
from outlinebar.synchronizer import SelectionSynchronizer


def make(document, parent, name, kind, start, end=None) -> Identifier:
    identifier = Identifier(document=document, name=name, kind=[kind], parent=parent)
    identifier.set_positions(start, end)
    parent.add_child(identifier)
    return identifier


class IdentifierTests(unittest.TestCase):
    def setUp(self) -> None:
        self.document = DocumentHandle(text="class A:\n    def x(self):\n        pass\n")
        self.root = TopScopeIdentifier(self.document)

    def test_document_is_required(self) -> None:
        with self.assertRaises(ValueError):
            Identifier(document=None, name="x")

    def test_kind_tags_have_set_semantics(self) -> None:
        identifier = Identifier(document=self.document, kind=["export", "function", "export"])
        identifier.add_kind("function")
        self.assertEqual(identifier.kind, ["export", "function"])
        self.assertTrue(identifier.is_kind("export"))
        identifier.remove_kind("export")
        self.assertFalse(identifier.is_kind("export"))

    def test_missing_end_position_collapses_to_start(self) -> None:
        identifier = Identifier(document=self.document)
        identifier.set_positions((2, 4))
        self.assertEqual(identifier.start_position, Position(2, 4))
        self.assertEqual(identifier.end_position, Position(2, 4))

    def test_scope_level_counts_from_minus_one_at_root(self) -> None:
        cls = make(self.document, self.root, "A", "class", (0, 0), (2, 12))
        method = make(self.document, cls, "x", "method", (1, 4), (2, 12))
        self.assertEqual(self.root.scope_level, -1)
        self.assertEqual(cls.scope_level, 0)
        self.assertEqual(method.scope_level, 1)

    def test_add_child_rejects_invalid_children(self) -> None:
        other_root = TopScopeIdentifier(self.document)
        owned = make(self.document, other_root, "B", "class", (0, 0))
        with self.assertRaises(ValueError):
            self.root.add_child(None)
        with self.assertRaises(ValueError):
            self.root.add_child(owned)
        with self.assertRaises(ValueError):
            self.root.add_child(EmptyIdentifier(other_root))

    def test_add_child_is_idempotent_and_adopts_orphans(self) -> None:
        orphan = Identifier(document=self.document, name="a", kind=["field"])
        self.root.add_child(orphan)
        self.root.add_child(orphan)
        self.assertIs(orphan.parent, self.root)
        self.assertEqual(self.root.num_children(), 1)
        self.assertIs(self.root.child_at(0), orphan)
        self.assertIsNone(self.root.child_at(1))

    def test_remove_child_matches_by_identity(self) -> None:
        first = make(self.document, self.root, "a", "field", (0, 0))
        second = make(self.document, self.root, "b", "field", (1, 0))
        self.root.remove_child(first)
        self.assertEqual(self.root.children, (second,))
        self.root.remove_all_children()
        self.assertFalse(self.root.has_children())

    def test_ids_combine_document_name_and_start(self) -> None:
        cls = make(self.document, self.root, "A", "class", (0, 0), (2, 12))
        self.assertEqual(cls.id, f"doc{self.document.doc_id}|A|{{0:0}}")
        self.assertEqual(self.root.id, f"doc{self.document.doc_id}|^")
        self.assertEqual(EmptyIdentifier(cls).id, f"{cls.id}|$")

    def test_id_without_start_uses_placeholder(self) -> None:
        identifier = Identifier(document=self.document, name="n")
        self.assertEqual(identifier.id, f"doc{self.document.doc_id}|n|{{x:x}}")

    def test_duplicate_siblings_get_an_ordinal(self) -> None:
        first = make(self.document, self.root, "dup", "field", (3, 1))
        second = make(self.document, self.root, "dup", "field", (3, 1))
        self.assertNotEqual(first.id, second.id)
        self.assertTrue(second.id.endswith("#1"))
        self.assertFalse(Identifier.are_equal(first, second))

    def test_equality_is_by_id_across_instances(self) -> None:
        first = make(self.document, self.root, "A", "class", (0, 0))
        rebuilt_root = TopScopeIdentifier(self.document)
        again = make(self.document, rebuilt_root, "A", "class", (0, 0))
        self.assertIsNot(first, again)
        self.assertTrue(Identifier.are_equal(first, again))

    def test_ids_differ_between_documents(self) -> None:
        other = DocumentHandle(text=self.document.text)
        first = make(self.document, self.root, "A", "class", (0, 0))
        second = make(other, TopScopeIdentifier(other), "A", "class", (0, 0))
        self.assertFalse(Identifier.are_equal(first, second))


class PositionlessIdentifierTests(unittest.TestCase):
    def setUp(self) -> None:
        self.document = DocumentHandle(text="\n" * 5)
        outline = [
            {"kind": "class", "plainText": "Outer", "children": [{"kind": "class", "plainText": "Inner"}]},
            {"kind": "class", "plainText": "Inner"},
        ]
        self.root = OutlineTranslator(self.document).translate(outline)
        self.outer, self.top_inner = self.root.children
        self.nested_inner = self.outer.children[0]

    def test_same_name_under_different_parents_gets_distinct_ids(self) -> None:
        self.assertIsNone(self.nested_inner.start_position)
        self.assertNotEqual(self.nested_inner.id, self.top_inner.id)
        self.assertTrue(self.nested_inner.id.startswith(self.outer.id + "/"))
        self.assertFalse(Identifier.are_equal(self.nested_inner, self.top_inner))

    def test_nested_selection_highlights_its_own_parent(self) -> None:
        update = SelectionSynchronizer(self.root).build(self.nested_inner)
        self.assertEqual(update.parent_selected_index, 1)
        self.assertIs(update.selected_parent(), self.outer)
        self.assertIs(update.children_identifiers[0].parent, self.nested_inner)


class SentinelTests(unittest.TestCase):
    def setUp(self) -> None:
        self.document = DocumentHandle(text="one\ntwo\nthree")
        self.root = TopScopeIdentifier(self.document)

    def test_top_scope_spans_the_document(self) -> None:
        self.assertEqual(self.root.start_position, Position(0, 0))
        self.assertEqual(self.root.end_position, Position(2, 5))
        self.assertIsNone(self.root.parent)

    def test_top_scope_reset_drops_children_and_rereads_range(self) -> None:
        make(self.document, self.root, "a", "variable", (0, 0))
        self.document.set_text("x")
        self.root.reset()
        self.assertEqual(self.root.children, ())
        self.assertEqual(self.root.end_position, Position(0, 1))
        self.assertEqual(self.document.revision, 1)

    def test_empty_identifier_sits_at_container_end_without_being_a_child(self) -> None:
        cls = make(self.document, self.root, "A", "class", (0, 0), (1, 3))
        empty = EmptyIdentifier(cls)
        self.assertIs(empty.parent, cls)
        self.assertEqual(empty.start_position, Position(1, 3))
        self.assertEqual(empty.end_position, Position(1, 3))
        self.assertEqual(cls.children, ())

    def test_empty_identifier_requires_container(self) -> None:
        with self.assertRaises(ValueError):
            EmptyIdentifier(None)


class TreeHelperTests(unittest.TestCase):
    def setUp(self) -> None:
        self.document = DocumentHandle(text="\n" * 20)
        self.root = TopScopeIdentifier(self.document)
        self.cls = make(self.document, self.root, "A", "class", (1, 0), (8, 0))
        self.method = make(self.document, self.cls, "run", "method", (2, 4), (4, 0))
        self.field = make(self.document, self.cls, "size", "field", (6, 4), (6, 12))
        self.func = make(self.document, self.root, "main", "function", (10, 0), (12, 0))

    def test_iter_identifiers_is_preorder(self) -> None:
        names = [node.name for node in iter_identifiers(self.root)]
        self.assertEqual(names, ["", "A", "run", "size", "main"])

    def test_belongs_to_tree_detects_stale_references(self) -> None:
        self.assertTrue(belongs_to_tree(self.method, self.root))
        self.assertTrue(belongs_to_tree(EmptyIdentifier(self.cls), self.root))
        self.root.reset()
        self.assertFalse(belongs_to_tree(self.method, self.root))
        self.assertFalse(belongs_to_tree(EmptyIdentifier(self.cls), self.root))

    def test_shift_positions_moves_rows_after_edit(self) -> None:
        touched = shift_positions(self.root, 5, 2)
        self.assertEqual(touched, 3)
        self.assertEqual(self.cls.start_position, Position(1, 0))
        self.assertEqual(self.cls.end_position, Position(10, 0))
        self.assertEqual(self.method.start_position, Position(2, 4))
        self.assertEqual(self.field.start_position, Position(8, 4))
        self.assertEqual(self.func.end_position, Position(14, 0))
        self.assertEqual(shift_positions(self.root, 0, 0), 0)

    def test_debug_label_lists_kinds_data_and_range(self) -> None:
        self.field.additional_data["static"] = True
        self.assertEqual(debug_label(self.field), "[field] size {static=True} <6:4-6:12>")
        bare = Identifier(document=self.document, name="n", kind=["unknown"])
        self.assertEqual(debug_label(bare), "[unknown] n <x:x-x:x>")


if __name__ == "__main__":
    unittest.main()
