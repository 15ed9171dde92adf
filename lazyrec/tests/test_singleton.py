# -*- coding: utf-8; -*-

import gc
import pickle
import threading

import pytest

from ..singleton import Singleton

# Defined at the top level to allow pickling.
class Foo(Singleton):
    pass
class Bar(Foo):
    pass
class Baz(Singleton):
    def __init__(self, x=42):
        self.x = x

def test_second_instance_refused():
    # Keep the reference the constructor gives you; this is the only time you'll see it.
    foo = Foo()
    with pytest.raises(TypeError):
        Foo()
    del foo  # the registry is weak, so this kills the instance
    gc.collect()  # PyPy needs a nudge
    foo = Foo()
    assert isinstance(foo, Foo)

def test_subclass_is_separate_singleton():
    bar = Bar()  # noqa: F841, keeps the instance alive while testing
    with pytest.raises(TypeError):
        Bar()

def test_pickling_returns_existing_instance():
    baz = Baz(17)
    s = pickle.dumps(baz)
    assert pickle.loads(s) is baz
    # The default `__setstate__` restores the pickled state into the existing instance.
    baz.x = 23
    assert pickle.loads(s) is baz
    assert baz.x == 17
    del baz
    gc.collect()

def test_threads_get_at_most_one_instance():
    class Qux(Singleton):
        pass
    n = 8
    barrier = threading.Barrier(n)
    created = []
    errors = []
    def worker():
        barrier.wait()
        try:
            created.append(Qux())
        except TypeError as err:
            errors.append(err)
    threads = [threading.Thread(target=worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(created) == 1
    assert len(errors) == n - 1
