from botframe.ordered_map import OrderedMap


def test_get_missing_returns_none():
    assert OrderedMap().get("x") is None


def test_insert_and_get():
    m = OrderedMap()
    m.insert("a", 1)
    m.insert("b", 2)
    assert m.get("a") == 1
    assert m.get("b") == 2
    assert len(m) == 2


def test_insert_overwrites_in_place_keeping_order():
    m = OrderedMap()
    m.insert("a", 1)
    m.insert("b", 2)
    m.insert("a", 3)
    assert list(m) == [("a", 3), ("b", 2)]
    assert len(m) == 2


def test_unhashable_keys_are_supported():
    m = OrderedMap()
    m.insert(["k"], "v")
    assert m.get(["k"]) == "v"


def test_get_or_insert_with_inserts_once():
    m = OrderedMap()
    calls = []

    def factory():
        calls.append(1)
        return []

    first = m.get_or_insert_with("k", factory)
    first.append("x")
    second = m.get_or_insert_with("k", factory)
    assert second is first
    assert m.get("k") == ["x"]
    assert len(calls) == 1


def test_get_or_insert_with_existing_skips_factory():
    m = OrderedMap([("k", 5)])

    def factory():
        raise AssertionError("should not be called")

    assert m.get_or_insert_with("k", factory) == 5


def test_iteration_preserves_insertion_order():
    pairs = [("z", 1), ("a", 2), ("m", 3)]
    m = OrderedMap(pairs)
    assert list(m) == pairs
    assert "a" in m
    assert "q" not in m