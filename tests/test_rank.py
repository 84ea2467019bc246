from ipstats.rank import apply_threshold, rank, sort_ascending, take_top


TABLE = {"1.2.3.4": 2, "5.6.7.8": 1, "9.9.9.9": 5, "4.4.4.4": 2}


def test_sort_ascending_with_address_tie_break():
    assert sort_ascending(TABLE.items()) == [
        ("5.6.7.8", 1),
        ("1.2.3.4", 2),
        ("4.4.4.4", 2),
        ("9.9.9.9", 5),
    ]


def test_threshold_keeps_equal_counts():
    kept = apply_threshold(TABLE.items(), 2)
    assert sorted(kept) == [("1.2.3.4", 2), ("4.4.4.4", 2), ("9.9.9.9", 5)]
    assert apply_threshold(TABLE.items(), None) == list(TABLE.items())


def test_take_top_keeps_heaviest_in_ascending_order():
    items = sort_ascending(TABLE.items())
    assert take_top(items, 2) == [("4.4.4.4", 2), ("9.9.9.9", 5)]
    assert take_top(items, 10) == items
    assert take_top(items, None) == items


def test_rank_scenarios():
    table = {"1.2.3.4": 2, "5.6.7.8": 1}
    assert rank(table) == [("5.6.7.8", 1), ("1.2.3.4", 2)]
    assert rank(table, min_threshold=2) == [("1.2.3.4", 2)]


def test_threshold_applies_before_limit():
    out = rank(TABLE, min_threshold=2, max_results=2)
    assert out == [("4.4.4.4", 2), ("9.9.9.9", 5)]
    assert all(c >= 2 for _, c in out)
    assert rank(TABLE, min_threshold=6, max_results=2) == []


def test_rank_is_repeatable_regardless_of_insertion_order():
    reordered = dict(reversed(list(TABLE.items())))
    assert rank(TABLE) == rank(reordered)
