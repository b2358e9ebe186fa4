import pytest

from clipkeep.models import Entry
from clipkeep.registry import EntryRegistry


def make_entries(*texts: str) -> list[Entry]:
    return [Entry(memory_id=i, text=t) for i, t in enumerate(texts, start=1)]


@pytest.fixture
def registry() -> EntryRegistry:
    return EntryRegistry(make_entries("a", "b", "c", "d"))


def texts(entries) -> list[str]:
    return [e.text for e in entries]


def test_ordered_oldest_to_newest(registry: EntryRegistry):
    assert texts(registry.ordered()) == ["a", "b", "c", "d"]
    assert texts(registry.reversed()) == ["d", "c", "b", "a"]
    assert registry.first().text == "a"
    assert registry.last().text == "d"
    assert len(registry) == 4


def test_ordered_is_restartable(registry: EntryRegistry):
    assert list(registry) == list(registry)


def test_lookup_by_content(registry: EntryRegistry):
    assert registry.lookup_by_content("c").memory_id == 3
    assert registry.lookup_by_content("zzz") is None


def test_append_existing_moves_to_newest(registry: EntryRegistry):
    b = registry.lookup_by_content("b")
    registry.append(b)
    assert texts(registry) == ["a", "c", "d", "b"]
    assert len(registry) == 4


def test_append_newest_is_noop(registry: EntryRegistry):
    registry.append(registry.last())
    assert texts(registry) == ["a", "b", "c", "d"]


def test_duplicate_content_is_rejected(registry: EntryRegistry):
    with pytest.raises(ValueError):
        registry.append(Entry(memory_id=99, text="a"))
    assert len(registry) == 4


def test_prepend(registry: EntryRegistry):
    registry.prepend(Entry(memory_id=10, text="z"))
    assert texts(registry) == ["z", "a", "b", "c", "d"]
    registry.prepend(registry.lookup_by_content("c"))
    assert texts(registry) == ["c", "z", "a", "b", "d"]


def test_prepend_into_empty_registry():
    registry = EntryRegistry()
    registry.prepend(Entry(memory_id=1, text="x"))
    assert registry.first() is registry.last()


def test_remove_unlinks_and_forgets_content(registry: EntryRegistry):
    c = registry.lookup_by_content("c")
    registry.remove(c)
    assert texts(registry) == ["a", "b", "d"]
    assert registry.lookup_by_content("c") is None
    assert c not in registry
    registry.remove(registry.first())
    registry.remove(registry.last())
    assert texts(registry) == ["b"]
    assert registry.first() is registry.last()


def test_remove_unknown_entry_raises(registry: EntryRegistry):
    with pytest.raises(KeyError):
        registry.remove(Entry(memory_id=1, text="a"))


def test_cyclic_neighbours_wrap(registry: EntryRegistry):
    a = registry.first()
    d = registry.last()
    assert registry.successor_cyclic(a).text == "b"
    assert registry.successor_cyclic(d) is a
    assert registry.predecessor_cyclic(a) is d
    assert registry.predecessor_cyclic(d).text == "c"


def test_cyclic_single_entry_is_its_own_neighbour():
    only = Entry(memory_id=1, text="x")
    registry = EntryRegistry([only])
    assert registry.successor_cyclic(only) is only
    assert registry.predecessor_cyclic(only) is only


def test_partition_views(registry: EntryRegistry):
    registry.lookup_by_content("b").favorite = True
    assert texts(registry.favorites()) == ["b"]
    assert texts(registry.history()) == ["d", "c", "a"]
    # Favorites stay in the shared order
    assert texts(registry) == ["a", "b", "c", "d"]


def test_renumber_is_dense_and_keeps_order():
    entries = [Entry(memory_id=i, text=t) for i, t in [(7, "a"), (3, "b"), (12, "c")]]
    registry = EntryRegistry(entries)
    next_id = registry.renumber()
    assert next_id == 4
    assert [e.memory_id for e in registry] == [1, 2, 3]
    assert texts(registry) == ["a", "b", "c"]
    assert registry.get(2).text == "b"
    assert registry.lookup_by_content("c").memory_id == 3
