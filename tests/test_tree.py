#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
test_tree.py
------------

Exercises the RedBlackTree engine:

* rotations (parent links, key order, fail-fast on a missing child)
* insertion scenarios with known final shapes and colors
* fixup traces for mirrored inputs
* duplicate rejection and version independence
* deletion by rebuild
* validation of red-black invariants, including corrupted trees
* randomised bulk insertion checked against a sorted set
"""

import math
import random
import unittest

import rbtree
from rbtree import Color, FixupStep, InvariantViolation, RedBlackTree, RotationError

R, B = "RED", "BLACK"


def leaf(key, color):
    return (key, color, None, None)


def build(*keys):
    tree = None
    for k in keys:
        tree = rbtree.insert(tree, k)
    return tree


class TestRotations(unittest.TestCase):
    # ------------------------------------------------------------------
    #  4B(2B(1R,3R), 6B(5R,7R)): every rotation moves an inner subtree
    # ------------------------------------------------------------------
    def setUp(self):
        self.tree = RedBlackTree.from_keys([4, 2, 6, 1, 3, 5, 7])
        self.original = self.tree.structure()

    def test_rotate_right_relinks_parents(self):
        four = self.tree._root
        two = four.left
        three = two.right

        new_root = self.tree._rotate_right(four)

        self.assertIs(new_root, two)
        self.assertIs(self.tree._root, two)
        self.assertIsNone(two.parent)
        self.assertIs(two.right, four)
        self.assertIs(four.parent, two)
        # 2's former right subtree is now 4's left subtree
        self.assertIs(four.left, three)
        self.assertIs(three.parent, four)
        self.assertEqual(self.tree.keys(), [1, 2, 3, 4, 5, 6, 7])

    def test_rotate_left_relinks_parents(self):
        four = self.tree._root
        six = four.right
        five = six.left

        new_root = self.tree._rotate_left(four)

        self.assertIs(new_root, six)
        self.assertIsNone(six.parent)
        self.assertIs(six.left, four)
        self.assertIs(four.parent, six)
        self.assertIs(four.right, five)
        self.assertIs(five.parent, four)
        self.assertEqual(self.tree.keys(), [1, 2, 3, 4, 5, 6, 7])

    def test_rotation_below_root_keeps_root(self):
        two = self.tree._root.left
        new_root = self.tree._rotate_left(two)

        self.assertIs(new_root, self.tree._root)
        self.assertEqual(new_root.key, 4)
        three = new_root.left
        self.assertEqual(three.key, 3)
        self.assertIs(three.parent, new_root)
        self.assertIs(three.left, two)
        self.assertIs(two.parent, three)
        self.assertIsNone(two.right)
        self.assertEqual(self.tree.keys(), [1, 2, 3, 4, 5, 6, 7])

    def test_rotations_are_inverse(self):
        root = self.tree._rotate_right(self.tree._root)
        self.tree._rotate_left(root)
        self.assertEqual(self.tree.structure(), self.original)
        # parent links must survive the round trip too
        self.tree.validate()

    def test_rotation_without_child_fails_fast(self):
        seven = self.tree._root.right.right
        with self.assertRaises(RotationError):
            self.tree._rotate_left(seven)
        with self.assertRaises(RotationError):
            self.tree._rotate_right(seven)
        self.assertEqual(self.tree.structure(), self.original)


class TestInsertion(unittest.TestCase):
    # ------------------------------------------------------------------
    #  Concrete scenarios
    # ------------------------------------------------------------------
    def test_ascending_three_rotates_left(self):
        tree = build(10, 20, 30)
        self.assertEqual(tree.structure(), (20, B, leaf(10, R), leaf(30, R)))

    def test_descending_three_rotates_right(self):
        tree = build(30, 20, 10)
        self.assertEqual(tree.structure(), (20, B, leaf(10, R), leaf(30, R)))

    def test_one_to_seven(self):
        tree = build(*range(1, 8))
        self.assertEqual(
            tree.structure(),
            (2, B,
                leaf(1, B),
                (4, R,
                    leaf(3, B),
                    (6, B, leaf(5, R), leaf(7, R)))),
        )
        self.assertEqual(tree.validate(), 2)

    def test_clrs_example(self):
        tree = build(8, 18, 5, 15, 17, 25, 40, 80)
        self.assertEqual(
            tree.structure(),
            (17, B,
                (8, R, leaf(5, B), leaf(15, B)),
                (25, R,
                    leaf(18, B),
                    (40, B, None, leaf(80, R)))),
        )
        tree.validate()

    def test_first_key_is_black_root(self):
        tree = rbtree.insert(None, 5)
        self.assertEqual(tree.structure(), leaf(5, B))
        self.assertEqual(len(tree), 1)

    def test_new_node_is_red_when_no_fixup_needed(self):
        tree = build(10, 5)
        self.assertIs(tree.search(5).color, Color.RED)

    def test_root_forced_black_after_recolor(self):
        # inserting 1 recolors up to the root, which must end BLACK again
        tree = build(10, 5, 15, 1)
        self.assertEqual(
            tree.structure(),
            (10, B, (5, B, leaf(1, R), None), leaf(15, B)),
        )

    # ------------------------------------------------------------------
    #  Duplicates
    # ------------------------------------------------------------------
    def test_duplicate_single_node(self):
        tree = build(5)
        again = tree.insert(5)
        self.assertIs(again, tree)
        self.assertEqual(again.structure(), leaf(5, B))

    def test_duplicate_insert_is_idempotent(self):
        tree = build(8, 18, 5, 15, 17)
        once = tree.insert(25)
        twice = once.insert(25)
        self.assertIs(twice, once)
        self.assertEqual(twice.structure(), once.structure())
        self.assertEqual(len(twice), 6)

    # ------------------------------------------------------------------
    #  Fixup traces: mirrored inputs produce mirrored cases
    # ------------------------------------------------------------------
    def test_line_case_trace(self):
        self.assertEqual(build(10, 20, 30).fixup_trace,
                         (FixupStep("line", "right", 30),))
        self.assertEqual(build(30, 20, 10).fixup_trace,
                         (FixupStep("line", "left", 10),))

    def test_triangle_case_trace(self):
        right = build(10, 30, 20)
        left = build(30, 10, 20)
        self.assertEqual(right.fixup_trace,
                         (FixupStep("triangle", "right", 20), FixupStep("line", "right", 30)))
        self.assertEqual(left.fixup_trace,
                         (FixupStep("triangle", "left", 20), FixupStep("line", "left", 10)))
        self.assertEqual(right.structure(), (20, B, leaf(10, R), leaf(30, R)))
        self.assertEqual(left.structure(), right.structure())

    def test_recolor_case_trace(self):
        self.assertEqual(build(10, 5, 15, 1).fixup_trace,
                         (FixupStep("recolor", "left", 1),))
        self.assertEqual(build(10, 5, 15, 20).fixup_trace,
                         (FixupStep("recolor", "right", 20),))

    def test_recolor_then_rotate(self):
        # last insert of the CLRS sequence recolors then rotates at the root
        tree = build(8, 18, 5, 15, 17, 25, 40, 80)
        self.assertEqual(
            [(s.case, s.side) for s in tree.fixup_trace],
            [("recolor", "right"), ("line", "right")],
        )

    def test_trace_only_on_inserting_version(self):
        tree = RedBlackTree.from_keys([1, 2, 3])
        self.assertEqual(tree.fixup_trace, ())
        self.assertEqual(tree.delete(2).fixup_trace, ())

    def test_trace_cannot_be_reassigned(self):
        tree = build(10, 20, 30)
        with self.assertRaises(AttributeError):
            tree.fixup_trace = ()
        self.assertEqual(tree.fixup_trace, (FixupStep("line", "right", 30),))

    # ------------------------------------------------------------------
    #  Versioning
    # ------------------------------------------------------------------
    def test_insert_leaves_previous_version_untouched(self):
        v1 = build(10, 20)
        before = v1.structure()
        v2 = v1.insert(30)

        self.assertEqual(v1.structure(), before)
        self.assertEqual(len(v1), 2)
        self.assertNotEqual(v2.structure(), before)
        v1.validate()
        v2.validate()

    def test_versions_share_ids_not_nodes(self):
        v1 = build(10, 20)
        v2 = v1.insert(30)
        self.assertEqual(v1.search(10).id, v2.search(10).id)
        self.assertNotEqual(v1.search(10), v2.search(10))
        self.assertIsNone(v1.search(30))

    # ------------------------------------------------------------------
    #  Randomised bulk insertion
    # ------------------------------------------------------------------
    def test_random_inserts_hold_invariants(self):
        rng = random.Random(12345)
        tree = RedBlackTree()
        reference = set()

        for _ in range(400):
            k = rng.randint(0, 1000)
            tree = tree.insert(k)
            reference.add(k)
            tree.validate()

        self.assertEqual(tree.keys(), sorted(reference))
        self.assertEqual(len(tree), len(reference))

        height = _height(tree._root)
        self.assertLessEqual(height, 2 * math.log2(len(tree) + 1))

        for k in reference:
            self.assertEqual(tree.search(k).key, k)
        for k in range(1001, 1100):
            self.assertIsNone(tree.search(k))

    def test_string_keys(self):
        tree = RedBlackTree.from_keys(["pear", "apple", "fig", "kiwi", "banana"])
        tree.validate()
        self.assertEqual(tree.keys(), ["apple", "banana", "fig", "kiwi", "pear"])


class TestSearch(unittest.TestCase):
    def setUp(self):
        self.tree = RedBlackTree.from_keys([10, 5, 15, 2, 7, 12, 20])

    def test_hit_and_miss(self):
        self.assertEqual(self.tree.search(7).key, 7)
        self.assertIsNone(self.tree.search(8))
        self.assertIn(12, self.tree)
        self.assertNotIn(13, self.tree)

    def test_descent_path(self):
        self.assertEqual([n.key for n in self.tree.descent_path(7)], [10, 5, 7])
        self.assertEqual([n.key for n in self.tree.descent_path(8)], [10, 5, 7])
        self.assertEqual([n.key for n in self.tree.descent_path(10)], [10])
        self.assertEqual(RedBlackTree().descent_path(1), [])

    def test_find_by_id(self):
        node = self.tree.search(12)
        self.assertEqual(self.tree.find_by_id(node.id), node)
        self.assertIsNone(self.tree.find_by_id("n-missing"))

    def test_min_max(self):
        self.assertEqual(self.tree.min_key(), 2)
        self.assertEqual(self.tree.max_key(), 20)
        with self.assertRaises(ValueError):
            RedBlackTree().min_key()

    def test_functional_surface_on_empty(self):
        self.assertIsNone(rbtree.search(None, 1))
        self.assertEqual(len(rbtree.delete(None, 1)), 0)


class TestDeletion(unittest.TestCase):
    def test_delete_rebuilds_without_key(self):
        tree = RedBlackTree.from_keys(range(1, 11))
        smaller = rbtree.delete(tree, 4)

        self.assertEqual(smaller.keys(), [1, 2, 3, 5, 6, 7, 8, 9, 10])
        smaller.validate()
        # shape is whatever sorted reinsertion produces
        self.assertEqual(
            smaller.structure(),
            RedBlackTree.from_keys([1, 2, 3, 5, 6, 7, 8, 9, 10]).structure(),
        )
        # old version untouched
        self.assertEqual(tree.keys(), list(range(1, 11)))

    def test_delete_miss_returns_same_tree(self):
        tree = RedBlackTree.from_keys([1, 2, 3])
        self.assertIs(tree.delete(99), tree)

    def test_delete_everything(self):
        tree = RedBlackTree.from_keys([3, 1, 2])
        for k in [1, 2, 3]:
            tree = tree.delete(k)
            tree.validate()
        self.assertEqual(len(tree), 0)
        self.assertIsNone(tree.root)


class TestValidate(unittest.TestCase):
    def setUp(self):
        # 10B(5B(2R,7R), 15B(12R,20R))
        self.tree = RedBlackTree.from_keys([10, 5, 15, 2, 7, 12, 20])

    def test_valid_tree(self):
        self.assertEqual(self.tree.validate(), 2)
        self.assertTrue(self.tree.is_valid())
        self.assertEqual(RedBlackTree().validate(), 0)

    def test_red_root(self):
        self.tree._root.color = Color.RED
        with self.assertRaises(InvariantViolation):
            self.tree.validate()
        self.assertFalse(self.tree.is_valid())

    def test_red_red_edge(self):
        self.tree._root.left.color = Color.RED
        with self.assertRaises(InvariantViolation):
            self.tree.validate()

    def test_black_height_mismatch(self):
        self.tree._root.left.left.color = Color.BLACK
        with self.assertRaises(InvariantViolation):
            self.tree.validate()

    def test_stale_parent_link(self):
        self.tree._root.right.left.parent = self.tree._root
        with self.assertRaises(InvariantViolation):
            self.tree.validate()

    def test_order_violation(self):
        self.tree._root.left.right.key = 11
        with self.assertRaises(InvariantViolation):
            self.tree.validate()


class TestSnapshot(unittest.TestCase):
    def test_to_dict(self):
        tree = build(10, 20, 30)
        snap = tree.to_dict()
        root = tree.root

        self.assertEqual(snap["root"], root.id)
        self.assertEqual([n["key"] for n in snap["nodes"]], [20, 10, 30])
        self.assertEqual(snap["nodes"][0], {
            "id": root.id,
            "key": 20,
            "color": "BLACK",
            "left": root.left.id,
            "right": root.right.id,
        })
        self.assertEqual(RedBlackTree().to_dict(), {"root": None, "nodes": []})

    def test_node_view_is_read_only(self):
        view = build(1, 2).root
        self.assertFalse(hasattr(view, "parent"))
        with self.assertRaises(AttributeError):
            view.key = 5
        with self.assertRaises(AttributeError):
            view.color = Color.RED


def _height(node):
    if node is None:
        return 0
    return 1 + max(_height(node.left), _height(node.right))


if __name__ == "__main__":
    unittest.main(verbosity=2)
