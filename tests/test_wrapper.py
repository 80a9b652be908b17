"""Tests for SourceWrapper and reclamation of object sources."""

import gc
import logging

from weakassoc import SourceWrapper, associate, associated, disassociate, store_for


class Thing:
    pass


class TestSourceWrapper:
    def test_primitive(self):
        w = SourceWrapper("k")
        assert w.is_primitive is True
        assert w.value == "k"
        assert w.ref is None
        assert w.get() == "k"
        assert w.alive
        assert not w.reclaimable

    def test_none_is_primitive(self):
        w = SourceWrapper(None)
        assert w.is_primitive
        assert w.refers_to(None)
        assert not w.refers_to(0)

    def test_object(self):
        obj = Thing()
        w = SourceWrapper(obj)
        assert w.is_primitive is False
        assert w.value is None
        assert w.get() is obj
        assert w.reclaimable
        assert w.refers_to(obj)
        assert not w.refers_to(Thing())

    def test_object_without_weakref_support_is_pinned(self):
        source = [1, 2, 3]
        w = SourceWrapper(source)
        assert not w.is_primitive
        assert not w.reclaimable
        assert w.get() is source
        assert w.refers_to(source)
        assert not w.refers_to([1, 2, 3])

    def test_broadcast(self):
        w = SourceWrapper("k")
        w.associations.update(a=1, b=2)
        w.broadcast(0)
        assert w.associations == {"a": 0, "b": 0}

    def test_repr(self):
        assert "keys=0" in repr(SourceWrapper("k"))
        obj = Thing()
        w = SourceWrapper(obj)
        assert "Thing" in repr(w)
        del obj
        gc.collect()
        assert "<reclaimed>" in repr(w)


class TestReclamation:
    def test_associations_cleared_when_source_collected(self):
        obj = Thing()
        associate("v", obj, "a")
        associate("w", obj, "b")
        wrapper = store_for().wrapper_for(obj)

        del obj
        gc.collect()

        assert wrapper.associations == {}
        assert wrapper.get() is None
        assert not wrapper.alive

    def test_entry_kept_until_pruned(self):
        obj = Thing()
        associate("v", obj)
        store = store_for()

        del obj
        gc.collect()

        assert len(store) == 1
        assert store.entries() == []
        assert store.prune() == 1
        assert len(store) == 0

    def test_dead_wrapper_never_matches_new_object(self):
        obj = Thing()
        associate("v", obj)
        wrapper = store_for().wrapper_for(obj)

        del obj
        gc.collect()

        newcomer = Thing()
        assert not wrapper.refers_to(newcomer)
        assert associated(newcomer) is None

    def test_logs_reclamation(self, caplog):
        obj = Thing()
        associate("v", obj)

        with caplog.at_level(logging.DEBUG, logger="weakassoc.wrapper"):
            del obj
            gc.collect()

        assert "dropped 1 associations" in caplog.text

    def test_hook_is_noop_after_disassociate(self, caplog):
        obj = Thing()
        associate("v", obj)
        assert disassociate(obj) is True

        with caplog.at_level(logging.DEBUG, logger="weakassoc.wrapper"):
            del obj
            gc.collect()

        assert "Source reclaimed" not in caplog.text

    def test_primitive_never_reclaimed(self):
        associate("kept", "k")
        gc.collect()
        assert associated("k") == "kept"
