"""Tests for balanced Merkle root and path construction."""

import threading
import unittest

from balanced_merkle.base import leaf_digest, leaf_digests, pair_digest
from balanced_merkle.errors import EmptyTreeError, InvalidLeafError, MerkleTreeError
from balanced_merkle.tree import (
    BalancedMerkleTree,
    build_path,
    build_path_from_digests,
    build_proof,
    build_root,
    build_root_from_digests,
)
from balanced_merkle.verify import fold_path, verify_proof
from tests.test_base import (
    H0,
    H1,
    H2,
    H3,
    H4,
    P01,
    P23,
    REFERENCE_ROOTS,
    MerkleTestCase,
    get_n_records,
)


class TestBuildRoot(MerkleTestCase):

    def test_reference_roots(self):
        for n, expected in REFERENCE_ROOTS.items():
            with self.subTest(n=n):
                self.assertEqual(build_root(get_n_records(n)), expected)

    def test_single_leaf_root_is_leaf_digest(self):
        for record in [b"\x00", b"\xff", b"some record"]:
            with self.subTest(record=record):
                self.assertEqual(build_root([record]), leaf_digest(record))

    def test_deterministic(self):
        for n in [1, 2, 5, 13, 100]:
            records = get_n_records(n)
            with self.subTest(n=n):
                self.assertEqual(build_root(records), build_root(records))

    def test_empty_leaf_set(self):
        with self.assertRaises(EmptyTreeError):
            build_root([])
        with self.assertRaises(EmptyTreeError):
            build_root_from_digests([])

    def test_error_hierarchy(self):
        with self.assertRaises(MerkleTreeError):
            build_root([])
        with self.assertRaises(ValueError):
            build_root([])

    def test_five_leaf_shape(self):
        # first two leaves pair, the other three carry forward into a level of four
        root_of_three = REFERENCE_ROOTS[3]
        self.assertEqual(build_root(get_n_records(5)), pair_digest(root_of_three, pair_digest(H3, H4)))

    def test_root_differs_from_unbalanced_shape(self):
        # carrying the odd node forward at every level gives ((p01, p23), h4)
        unbalanced = pair_digest(REFERENCE_ROOTS[4], H4)
        self.assertNotEqual(build_root(get_n_records(5)), unbalanced)

    def test_accepts_iterables(self):
        records = get_n_records(6)
        self.assertEqual(build_root(iter(records)), REFERENCE_ROOTS[6])
        self.assertEqual(build_root(tuple(records)), REFERENCE_ROOTS[6])

    def test_does_not_mutate_input(self):
        records = get_n_records(7)
        snapshot = list(records)
        build_root(records)
        build_path(records[3], records)
        self.assertEqual(records, snapshot)

    def test_empty_records_inside_leaf_set(self):
        records = [b"", b"\x01", b""]
        root = build_root(records)
        self.assertEqual(build_path(b"\x01", records), build_path_from_digests(H1, leaf_digests(records)))
        self.assertEqual(fold_path(H1, build_path(b"\x01", records)), root)


class TestBuildPath(MerkleTestCase):

    def test_single_leaf_path_is_empty(self):
        self.assertEqual(build_path(b"\x00", [b"\x00"]), [])

    def test_two_leaves(self):
        records = get_n_records(2)
        self.assertEqual(build_path(b"\x00", records), [H1])
        self.assertEqual(build_path(b"\x01", records), [H0])

    def test_three_leaves(self):
        records = get_n_records(3)
        self.assertEqual(build_path(b"\x00", records), [H1, H2])
        self.assertEqual(build_path(b"\x01", records), [H0, H2])
        self.assertEqual(build_path(b"\x02", records), [P01])

    def test_four_leaves(self):
        records = get_n_records(4)
        self.assertEqual(build_path(b"\x00", records), [H1, P23])
        self.assertEqual(build_path(b"\x01", records), [H0, P23])
        self.assertEqual(build_path(b"\x02", records), [H3, P01])
        self.assertEqual(build_path(b"\x03", records), [H2, P01])

    def test_five_leaves(self):
        records = get_n_records(5)
        root_of_three = REFERENCE_ROOTS[3]
        paths = [build_path(record, records) for record in records]

        # paired leaves sit one level deeper than carried leaves
        self.assertEqual([len(p) for p in paths], [3, 3, 2, 2, 2])
        self.assertEqual(paths[0][:2], [H1, H2])
        self.assertEqual(paths[1][:2], [H0, H2])
        self.assertEqual(paths[2][0], P01)
        self.assertEqual(paths[3], [H4, root_of_three])
        self.assertEqual(paths[4], [H3, root_of_three])
        # leaves 0..2 share the (h3, h4) subtree as their top sibling
        self.assertEqual(paths[0][-1], paths[1][-1])
        self.assertEqual(paths[0][-1], paths[2][-1])
        self.assert_all_paths_fold(records)

    def test_fold_law(self):
        for n in list(range(1, 34)) + [63, 64, 65, 100, 257]:
            self.assert_all_paths_fold(get_n_records(n))

    def test_fold_law_arbitrary_records(self):
        records = [f"record-{i}".encode() * (i + 1) for i in range(23)]
        self.assert_all_paths_fold(records)

    def test_empty_leaf(self):
        with self.assertRaises(InvalidLeafError):
            build_path(b"", get_n_records(3))
        with self.assertRaises(InvalidLeafError):
            build_path(b"", [b""])

    def test_empty_leaf_checked_before_empty_leaf_set(self):
        with self.assertRaises(InvalidLeafError):
            build_path(b"", [])

    def test_empty_leaf_set(self):
        with self.assertRaises(EmptyTreeError):
            build_path(b"\x00", [])
        with self.assertRaises(EmptyTreeError):
            build_path_from_digests(H0, [])

    def test_absent_leaf_does_not_fold_to_root(self):
        records = get_n_records(6)
        root = build_root(records)
        with self.assertLogs("balanced_merkle", level="WARNING"):
            path = build_path(b"\xaa", records)
        self.assertEqual(path, [])
        self.assertNotEqual(fold_path(leaf_digest(b"\xaa"), path), root)

    def test_absent_leaf_single_leaf_tree(self):
        with self.assertLogs("balanced_merkle", level="WARNING"):
            self.assertEqual(build_path(b"\x01", [b"\x00"]), [])

    def test_duplicate_records_still_fold(self):
        records = [b"\x00", b"\x01", b"\x00", b"\x02", b"\x00"]
        root = build_root(records)
        path = build_path(b"\x00", records)
        self.assertEqual(fold_path(H0, path), root)

    def test_concurrent_calls_over_shared_leaves(self):
        records = get_n_records(1000)
        root = build_root(records)
        failures = []

        def worker(offset):
            for index in range(offset, len(records), 100):
                path = build_path(records[index], records)
                if fold_path(leaf_digest(records[index]), path) != root:
                    failures.append(index)
            if build_root(records) != root:
                failures.append(-1)

        threads = [threading.Thread(target=worker, args=(offset,)) for offset in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(failures, [])

    def test_path_from_digests_matches_path_from_records(self):
        records = get_n_records(11)
        digests = leaf_digests(records)
        for index, record in enumerate(records):
            with self.subTest(index=index):
                self.assertEqual(build_path(record, records), build_path_from_digests(digests[index], digests))


class TestBuildProof(MerkleTestCase):

    def test_proof_carries_leaf_and_path(self):
        records = get_n_records(5)
        for index, record in enumerate(records):
            with self.subTest(index=index):
                proof = build_proof(record, records)
                self.assertEqual(proof.leaf, record)
                self.assertEqual(list(proof.path), build_path(record, records))
                self.assertEqual(len(proof), len(proof.path))

    def test_proof_root(self):
        records = get_n_records(7)
        proof = build_proof(b"\x04", records)
        self.assertEqual(proof.compute_root(), REFERENCE_ROOTS[7])
        self.assertEqual(proof.leaf_hash, leaf_digest(b"\x04"))

    def test_single_leaf_proof(self):
        proof = build_proof(b"\x00", [b"\x00"])
        self.assertEqual(proof.path, ())
        self.assertEqual(proof.compute_root(), H0)

    def test_hex_path(self):
        proof = build_proof(b"\x00", get_n_records(2))
        self.assertEqual(proof.hex_path(), ["0x" + H1.hex()])

    def test_proof_owns_its_leaf_bytes(self):
        records = get_n_records(6)
        root = build_root(records)
        leaf = bytearray(b"\x02")
        proof = build_proof(leaf, records)
        leaf[0] = 9

        self.assertEqual(proof.leaf, b"\x02")
        self.assertIsInstance(proof.leaf, bytes)
        self.assertTrue(verify_proof(proof, root))
        self.assertEqual(hash(proof), hash(build_proof(b"\x02", records)))

    def test_errors(self):
        with self.assertRaises(EmptyTreeError):
            build_proof(b"\x00", [])
        with self.assertRaises(InvalidLeafError):
            build_proof(b"", get_n_records(1))


class TestBalancedMerkleTree(MerkleTestCase):

    def test_operations(self):
        records = get_n_records(8)
        self.assertEqual(BalancedMerkleTree.generate_tree_root(records), REFERENCE_ROOTS[8])
        self.assertEqual(BalancedMerkleTree.generate_merkle_path(b"\x00", records), build_path(b"\x00", records))
        proof = BalancedMerkleTree.merkle_proof(b"\x05", records)
        self.assertEqual(proof.leaf, b"\x05")
        self.assertEqual(proof.compute_root(), REFERENCE_ROOTS[8])

    def test_errors(self):
        with self.assertRaises(EmptyTreeError):
            BalancedMerkleTree.generate_tree_root([])
        with self.assertRaises(InvalidLeafError):
            BalancedMerkleTree.generate_merkle_path(b"", get_n_records(1))
        with self.assertRaises(EmptyTreeError):
            BalancedMerkleTree.merkle_proof(b"\x00", [])


if __name__ == "__main__":
    unittest.main()
