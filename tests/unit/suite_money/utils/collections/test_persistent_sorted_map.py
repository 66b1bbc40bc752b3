import random

import pytest

from suite_money.utils.collections.persistent_sorted_map import PersistentSortedMap


def test_updates_return_new_maps_and_keep_originals():
    empty = PersistentSortedMap()
    one = empty.set("USD", 10)
    two = one.set("EUR", 5)
    replaced = two.set("USD", 11)

    assert len(empty) == 0
    assert dict(one.iter_items()) == {"USD": 10}
    assert list(two) == ["EUR", "USD"]
    assert replaced["USD"] == 11
    assert two["USD"] == 10
    assert len(replaced) == 2


def test_remove_of_missing_key_returns_same_map():
    items = PersistentSortedMap([("USD", 1)])

    assert items.remove("EUR") is items
    assert len(items.remove("USD")) == 0
    assert "USD" in items


def test_get_and_missing_keys():
    items = PersistentSortedMap([("B", 2), ("A", 1)])

    assert items.get("A") == 1
    assert items.get("Z") is None
    assert items.get("Z", 0) == 0
    assert 42 not in items
    with pytest.raises(KeyError):
        items["Z"]


def test_later_pairs_win_for_equal_keys():
    items = PersistentSortedMap([("A", 1), ("A", 2)])

    assert len(items) == 1
    assert items["A"] == 2


def test_random_updates_match_dict_and_stay_balanced():
    rng = random.Random(7)
    expected: dict[int, int] = {}
    versions = []
    items = PersistentSortedMap()

    for step in range(2000):
        key = rng.randrange(300)
        if rng.random() < 0.35:
            items = items.remove(key)
            expected.pop(key, None)
        else:
            items = items.set(key, step)
            expected[key] = step
        if step % 250 == 0:
            versions.append((items, dict(expected)))

    assert list(items.iter_items()) == sorted(expected.items())
    assert len(items) == len(expected)
    # AVL height bound: 1.44 * log2(n + 2)
    assert items._root.height <= 1.45 * (len(items) + 2).bit_length()
    # Older versions are untouched by later updates
    for version, snapshot in versions:
        assert dict(version.iter_items()) == snapshot
