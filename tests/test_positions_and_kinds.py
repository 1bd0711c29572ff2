from __future__ import annotations

import unittest
from types import SimpleNamespace

from outlinebar.identifiers.kinds import KindClass, classify_kind, has_kind_class, token_kind
from outlinebar.identifiers.positions import Position


class PositionTests(unittest.TestCase):
    def test_coerce_accepts_supported_shapes(self) -> None:
        self.assertEqual(Position.coerce((3, 4)), Position(3, 4))
        self.assertEqual(Position.coerce([3, 4]), Position(3, 4))
        self.assertEqual(Position.coerce({"row": 1, "column": 2}), Position(1, 2))
        self.assertEqual(Position.coerce(SimpleNamespace(row=5, column=0)), Position(5, 0))
        same = Position(7, 7)
        self.assertIs(Position.coerce(same), same)

    def test_coerce_rejects_invalid_shapes(self) -> None:
        self.assertIsNone(Position.coerce(None))
        self.assertIsNone(Position.coerce((1, 2, 3)))
        self.assertIsNone(Position.coerce({"row": "1", "column": 2}))
        self.assertIsNone(Position.coerce((True, 2)))
        self.assertIsNone(Position.coerce("1:2"))

    def test_positions_order_row_major(self) -> None:
        self.assertLess(Position(1, 9), Position(2, 0))
        self.assertLess(Position(2, 0), Position(2, 1))
        self.assertLessEqual(Position(2, 1), Position(2, 1))

    def test_shifted_clamps_at_zero(self) -> None:
        self.assertEqual(Position(4, 2).shifted(3), Position(7, 2))
        self.assertEqual(Position(1, 2).shifted(-5), Position(0, 2))
        self.assertEqual(str(Position(4, 2)), "4:2")


class KindClassificationTests(unittest.TestCase):
    def test_known_kinds_classify_by_role(self) -> None:
        self.assertIs(classify_kind("namespace"), KindClass.GROUPING)
        self.assertIs(classify_kind("interface"), KindClass.CONTAINER)
        self.assertIs(classify_kind("constructor"), KindClass.CALLABLE)
        self.assertIs(classify_kind("constant"), KindClass.LEAF)
        self.assertIs(classify_kind("tt-keyword"), KindClass.TOKEN)

    def test_missing_and_provider_specific_kinds_are_other(self) -> None:
        self.assertIs(classify_kind(None), KindClass.OTHER)
        self.assertIs(classify_kind(""), KindClass.OTHER)
        self.assertIs(classify_kind("unknown"), KindClass.OTHER)
        self.assertIs(classify_kind("typeParameter"), KindClass.OTHER)

    def test_token_kind_prefixes_and_defaults_to_plain(self) -> None:
        self.assertEqual(token_kind("keyword"), "tt-keyword")
        self.assertEqual(token_kind(None), "tt-plain")

    def test_has_kind_class_checks_any_tag(self) -> None:
        self.assertTrue(has_kind_class(["export", "function"], KindClass.CALLABLE))
        self.assertFalse(has_kind_class(["export", "field"], KindClass.CALLABLE))


if __name__ == "__main__":
    unittest.main()
