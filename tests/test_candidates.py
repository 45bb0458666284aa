import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from levelwise.candidates import filter_by_support, frequent_items, generate_candidates


def test_level_one_comes_from_item_counts():
    assert frequent_items({"c": 2, "a": 3, "b": 1}, 2) == {("a",): 3, ("c",): 2}


def test_singletons_all_join():
    frequent = {("a",): 3, ("b",): 3, ("c",): 2}
    candidates = generate_candidates(frequent)
    assert candidates == {("a", "b"): 0, ("a", "c"): 0, ("b", "c"): 0}
    assert list(candidates) == [("a", "b"), ("a", "c"), ("b", "c")]


def test_only_itemsets_sharing_a_prefix_join():
    assert generate_candidates({("a", "b"): 2, ("b", "c"): 2}) == {}
    assert generate_candidates({("a", "b"): 2, ("a", "c"): 2, ("b", "d"): 2}) == {("a", "b", "c"): 0}


def test_candidates_are_not_pruned_by_subsets():
    # ("b", "c") is not frequent, yet the join still proposes ("a", "b", "c")
    assert generate_candidates({("a", "b"): 5, ("a", "c"): 5}) == {("a", "b", "c"): 0}


def test_empty_level_generates_nothing():
    assert generate_candidates({}) == {}
    assert generate_candidates({("a",): 4}) == {}


def test_input_order_does_not_matter():
    forward = {("a",): 1, ("b",): 1, ("c",): 1, ("d",): 1}
    backward = dict(reversed(list(forward.items())))
    assert list(generate_candidates(forward)) == list(generate_candidates(backward))


def test_threshold_is_inclusive():
    counts = {("a",): 2, ("b",): 1, ("c",): 3}
    assert filter_by_support(counts, 2) == {("a",): 2, ("c",): 3}
