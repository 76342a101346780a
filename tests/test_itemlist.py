import pytest

from kernsync.itemlist import ItemList


def test_append_keeps_fifo_order():
    items = ItemList()
    for word in ["a", "b", "c"]:
        items.append(word)
    assert [items.remove() for _ in range(3)] == ["a", "b", "c"]
    assert items.is_empty()


def test_prepend_puts_items_at_front():
    items = ItemList()
    items.append("middle")
    items.prepend("first")
    items.append("last")
    assert list(items) == ["first", "middle", "last"]


def test_is_empty_and_len():
    items = ItemList()
    assert items.is_empty()
    assert len(items) == 0
    items.append(1)
    items.append(2)
    assert not items.is_empty()
    assert len(items) == 2


def test_remove_empty_raises():
    with pytest.raises(IndexError):
        ItemList().remove()


def test_sorted_remove_empty_raises():
    with pytest.raises(IndexError):
        ItemList().sorted_remove()


def test_sorted_insert_orders_by_key():
    items = ItemList()
    items.sorted_insert("x", 5)
    items.sorted_insert("y", 1)
    items.sorted_insert("z", 3)
    assert list(items) == ["y", "z", "x"]


def test_sorted_insert_equal_keys_keep_insertion_order():
    items = ItemList()
    items.sorted_insert("first", 2)
    items.sorted_insert("second", 2)
    items.sorted_insert("early", 1)
    items.sorted_insert("third", 2)
    assert list(items) == ["early", "first", "second", "third"]


def test_sorted_remove_returns_item_and_key():
    items = ItemList()
    items.sorted_insert("late", 10)
    items.sorted_insert("soon", 4)
    assert items.sorted_remove() == ("soon", 4)
    assert items.sorted_remove() == ("late", 10)
    assert items.is_empty()


def test_append_gives_key_zero():
    items = ItemList()
    items.append("plain")
    assert items.sorted_remove() == ("plain", 0)


def test_sorted_remove_yields_non_decreasing_keys():
    items = ItemList()
    keys = [7, 3, 9, 3, 0, 5]
    for index, key in enumerate(keys):
        items.sorted_insert(index, key)
    removed = [items.sorted_remove()[1] for _ in keys]
    assert removed == sorted(keys)


def test_mapcar_visits_every_item_in_order():
    items = ItemList()
    for value in [10, 20, 30]:
        items.append(value)
    seen = []
    items.mapcar(seen.append)
    assert seen == [10, 20, 30]
    assert len(items) == 3


def test_iteration_does_not_consume():
    items = ItemList()
    items.append("only")
    assert list(items) == ["only"]
    assert items.remove() == "only"