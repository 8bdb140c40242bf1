import pytest

from chrislang.heap import (
    HEADER_SIZE,
    INITIAL_THRESHOLD,
    GCObject,
    Heap,
    ObjectKind,
    Root,
)


@pytest.fixture
def heap():
    h = Heap()
    yield h
    h.shutdown()


@pytest.mark.parametrize(
    "tag, expected",
    [
        (0, ObjectKind.STRING),
        (1, ObjectKind.OBJECT),
        (2, ObjectKind.ARRAY),
        (3, ObjectKind.CONTAINER),
    ],
)
def test_object_kind_tags(heap, tag, expected):
    obj = heap.alloc(8, tag)
    assert obj.kind is expected
    assert int(obj.kind) == tag


def test_alloc_accounts_header_and_size(heap):
    heap.alloc(16, ObjectKind.STRING)
    heap.alloc(32, ObjectKind.OBJECT)
    assert heap.bytes_allocated() == 2 * HEADER_SIZE + 16 + 32
    assert heap.object_count() == 2
    assert heap.total_collections() == 0


def test_alloc_accepts_integer_kind(heap):
    obj = heap.alloc(8, 2)
    assert obj.kind is ObjectKind.ARRAY
    assert obj.slots == [None]


def test_alloc_rejects_bad_size_and_kind(heap):
    with pytest.raises(ValueError):
        heap.alloc(-1, ObjectKind.STRING)
    with pytest.raises(ValueError):
        heap.alloc(8, 9)


def test_collect_without_roots_frees_everything(heap):
    finalized = []
    obj = heap.alloc(8, ObjectKind.CONTAINER, finalized.append)
    heap.collect()
    assert heap.object_count() == 0
    assert heap.bytes_allocated() == 0
    assert heap.total_collections() == 1
    assert finalized == [obj]
    assert obj.freed


def test_rooted_object_survives_and_mark_is_cleared(heap):
    obj = heap.alloc(8, ObjectKind.STRING)
    heap.push_root(Root(obj))
    heap.collect()
    assert heap.object_count() == 1
    assert not obj.marked
    assert not obj.freed


def test_children_traced_only_within_num_pointers(heap):
    parent = heap.alloc(16, ObjectKind.OBJECT)
    first = heap.alloc(4, ObjectKind.STRING)
    second = heap.alloc(4, ObjectKind.STRING)
    parent.slots[0] = first
    parent.slots[1] = second
    heap.set_num_pointers(parent, 1)
    heap.push_root(Root(parent))
    heap.collect()
    assert not first.freed
    assert second.freed
    assert heap.object_count() == 2


def test_children_untraced_when_num_pointers_zero(heap):
    parent = heap.alloc(8, ObjectKind.ARRAY)
    child = heap.alloc(4, ObjectKind.STRING)
    parent.slots[0] = child
    heap.push_root(Root(parent))
    heap.collect()
    assert child.freed
    assert list(parent.children()) == []


@pytest.mark.parametrize("kind", [ObjectKind.STRING, ObjectKind.CONTAINER])
def test_leaf_kinds_are_not_traced(heap, kind):
    parent = heap.alloc(8, kind)
    child = heap.alloc(4, ObjectKind.STRING)
    parent.slots[0] = child
    heap.set_num_pointers(parent, 1)
    assert list(parent.children()) == []
    heap.push_root(Root(parent))
    heap.collect()
    assert child.freed
    assert not parent.freed


def test_unrooted_cycle_is_collected(heap):
    a = heap.alloc(8, ObjectKind.OBJECT)
    b = heap.alloc(8, ObjectKind.OBJECT)
    a.slots[0] = b
    b.slots[0] = a
    heap.set_num_pointers(a, 1)
    heap.set_num_pointers(b, 1)
    heap.collect()
    assert a.freed and b.freed
    assert heap.object_count() == 0


def test_rooted_cycle_survives(heap):
    a = heap.alloc(8, ObjectKind.OBJECT)
    b = heap.alloc(8, ObjectKind.OBJECT)
    a.slots[0] = b
    b.slots[0] = a
    heap.set_num_pointers(a, 1)
    heap.set_num_pointers(b, 1)
    heap.push_root(Root(b))
    heap.collect()
    assert heap.object_count() == 2


def test_long_chain_survives_without_recursion_error(heap):
    head = heap.alloc(8, ObjectKind.OBJECT)
    node = head
    for _ in range(5000):
        nxt = heap.alloc(8, ObjectKind.OBJECT)
        node.slots[0] = nxt
        heap.set_num_pointers(node, 1)
        node = nxt
    heap.push_root(Root(head))
    heap.collect()
    assert heap.object_count() == 5001


def test_root_slot_is_read_at_collection_time(heap):
    old = heap.alloc(8, ObjectKind.STRING)
    new = heap.alloc(8, ObjectKind.STRING)
    root = Root(old)
    heap.push_root(root)
    root.value = new
    heap.collect()
    assert old.freed
    assert not new.freed


def test_empty_root_is_skipped(heap):
    heap.alloc(8, ObjectKind.STRING)
    heap.push_root(Root())
    heap.collect()
    assert heap.object_count() == 0


def test_pop_root_unprotects(heap):
    obj = heap.alloc(8, ObjectKind.STRING)
    heap.push_root(Root(obj))
    heap.pop_root()
    heap.pop_root()  # popping an empty stack is harmless
    heap.collect()
    assert obj.freed


def test_pop_roots_partial_and_excess(heap):
    objs = [heap.alloc(8, ObjectKind.STRING) for _ in range(3)]
    for obj in objs:
        heap.push_root(Root(obj))
    heap.pop_roots(2)
    heap.collect()
    assert [o.freed for o in objs] == [False, True, True]
    heap.pop_roots(10)
    heap.collect()
    assert heap.object_count() == 0


def test_pop_roots_negative_raises(heap):
    with pytest.raises(ValueError):
        heap.pop_roots(-1)


def test_set_num_pointers_validation(heap):
    obj = heap.alloc(8, ObjectKind.OBJECT)
    heap.set_num_pointers(None, 3)
    with pytest.raises(ValueError):
        heap.set_num_pointers(obj, 0x10000)
    with pytest.raises(ValueError):
        heap.set_num_pointers(obj, -1)
    heap.set_num_pointers(obj, 1)
    assert obj.num_pointers == 1


def test_threshold_triggers_automatic_collection(heap):
    big = INITIAL_THRESHOLD // 2 + 1000
    first = heap.alloc(big, ObjectKind.STRING)
    assert heap.total_collections() == 0
    second = heap.alloc(big, ObjectKind.STRING)
    assert heap.total_collections() == 1
    assert first.freed
    assert not second.freed
    assert heap.object_count() == 1
    assert heap.bytes_allocated() == HEADER_SIZE + big


def test_automatic_collection_keeps_rooted(heap):
    big = INITIAL_THRESHOLD // 2 + 1000
    first = heap.alloc(big, ObjectKind.STRING)
    heap.push_root(Root(first))
    heap.alloc(big, ObjectKind.STRING)
    assert heap.total_collections() == 1
    assert not first.freed
    assert heap.object_count() == 2


def test_shutdown_finalizes_and_resets():
    heap = Heap()
    finalized = []
    kept = heap.alloc(8, ObjectKind.CONTAINER, finalized.append)
    heap.push_root(Root(kept))
    other = heap.alloc(8, ObjectKind.CONTAINER, finalized.append)
    heap.shutdown()
    assert finalized == [other, kept]
    assert heap.object_count() == 0
    assert heap.bytes_allocated() == 0
    heap.shutdown()
    assert len(finalized) == 2
    with pytest.raises(RuntimeError):
        heap.alloc(8, ObjectKind.STRING)
    with pytest.raises(RuntimeError):
        heap.push_root(Root())


def test_context_manager_shuts_down():
    finalized = []
    with Heap() as heap:
        obj = heap.alloc(8, ObjectKind.CONTAINER, finalized.append)
    assert finalized == [obj]
    assert obj.freed


def test_gcobject_slots_sized_from_bytes():
    obj = GCObject(kind=ObjectKind.OBJECT, size=24)
    assert obj.slots == [None, None, None]
    assert obj.total_size == HEADER_SIZE + 24