import unittest

from errors import ParseFailure, PathNotFound, TreeOperationError
from tree_editor import JsonKind, TreeWorkingCopy, is_embedded_json, kind_of


class TreeWorkingCopyTests(unittest.TestCase):
    def _tree(self, text='{"a":[1,2,3],"b":{"c":null}}'):
        return TreeWorkingCopy.from_cell(0, 0, text)

    def test_only_objects_and_arrays_open(self):
        self.assertTrue(is_embedded_json(' [1] '))
        self.assertFalse(is_embedded_json("3"))
        self.assertFalse(is_embedded_json('"s"'))
        self.assertFalse(is_embedded_json("{broken"))
        with self.assertRaises(ParseFailure):
            TreeWorkingCopy.from_cell(0, 0, "plain")
        with self.assertRaises(ParseFailure):
            TreeWorkingCopy.from_cell(0, 0, "[1e400]")

    def test_kinds(self):
        tree = self._tree()

        self.assertEqual(tree.kind(), JsonKind.OBJECT)
        self.assertEqual(tree.kind(("a",)), JsonKind.ARRAY)
        self.assertEqual(tree.kind(("a", 0)), JsonKind.NUMBER)
        self.assertEqual(tree.kind(("b", "c")), JsonKind.NULL)
        self.assertEqual(kind_of(False), JsonKind.BOOL)

    def test_set_classifies_text(self):
        tree = self._tree()

        tree.set(("a", 1), "false")
        tree.set(("b", "c"), "2.5")
        tree.set(("a", 2), "hello")

        self.assertEqual(tree.get(), {"a": [1, False, "hello"], "b": {"c": 2.5}})

    def test_set_empty_path_replaces_root(self):
        tree = self._tree()

        tree.set((), "null")

        self.assertIsNone(tree.root)
        self.assertEqual(tree.serialize(), "null")

    def test_delete_shifts_array_indices(self):
        tree = self._tree()

        tree.delete(("a", 0))

        self.assertEqual(tree.get(("a",)), [2, 3])
        with self.assertRaises(PathNotFound):
            tree.get(("a", 2))

    def test_delete_root_is_refused(self):
        with self.assertRaises(TreeOperationError):
            self._tree().delete(())

    def test_rename_key_moves_to_end(self):
        tree = self._tree()

        new_path = tree.rename_key((), "a", "z")

        self.assertEqual(new_path, ("z",))
        self.assertEqual(list(tree.get().keys()), ["b", "z"])

    def test_rename_to_existing_key_is_refused(self):
        tree = self._tree()

        with self.assertRaises(TreeOperationError):
            tree.rename_key((), "a", "b")
        self.assertEqual(list(tree.get().keys()), ["a", "b"])

    def test_insert_into_object_picks_free_key(self):
        tree = self._tree('{"newKey":1}')

        self.assertEqual(tree.insert((), False), ("newKey1",))
        self.assertEqual(tree.insert((), False), ("newKey2",))
        self.assertEqual(tree.get(("newKey1",)), "")

    def test_insert_into_array_appends(self):
        tree = self._tree()

        self.assertEqual(tree.insert(("a",), True), ("a", 3))
        self.assertEqual(tree.get(("a",)), [1, 2, 3, ""])

    def test_insert_kind_mismatch(self):
        tree = self._tree()

        with self.assertRaises(TreeOperationError):
            tree.insert(("a",), False)
        with self.assertRaises(TreeOperationError):
            tree.insert(("b",), True)

    def test_stale_paths(self):
        tree = self._tree()

        with self.assertRaises(PathNotFound) as ctx:
            tree.get(("a", 9))
        self.assertEqual(str(ctx.exception), "Path not found: a/9")
        with self.assertRaises(PathNotFound):
            tree.get(("a", "0"))
        with self.assertRaises(PathNotFound):
            tree.get(("a", True))
        with self.assertRaises(PathNotFound):
            tree.set(("missing",), "1")

    def test_serialize_is_compact(self):
        tree = self._tree('{ "a" : [ 1 , 2 ] }')

        self.assertEqual(tree.serialize(), '{"a":[1,2]}')


if __name__ == "__main__":
    unittest.main()
