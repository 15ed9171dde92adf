# -*- coding: utf-8; -*-
"""Named sentinel values. Pickle-aware.

A `sym` is a lightweight, human-readable, process-wide unique marker, compared
by object identity. We use them for the internal state markers of promises,
where `None` is a perfectly valid user value and cannot serve as "no value".
"""

__all__ = ["sym", "gensym"]

from weakref import WeakValueDictionary
import threading

_symbols = WeakValueDictionary()
_symbols_update_lock = threading.Lock()

class sym:
    """An interned (by default) or uninterned named marker.

    Interned symbols with the same name are the same object, also across
    a pickle round trip::

        done = sym("done")
        assert done is sym("done")

    Uninterned symbols (see `gensym`) are unique; use them like `object()`
    when a readable label helps debugging.
    """
    def __new__(cls, name, intern=True):  # also called when unpickling
        if not intern:
            return super().__new__(cls)
        try:  # EAFP, the registry is weak
            return _symbols[name]
        except KeyError:
            with _symbols_update_lock:
                instance = _symbols.get(name)
                if instance is None:
                    instance = _symbols[name] = super().__new__(cls)
            return instance

    def __init__(self, name, intern=True):
        self.name = name
        self.interned = intern

    def __getnewargs__(self):
        return (self.name, self.interned)

    def __str__(self):
        return self.name if self.interned else repr(self)

    def __repr__(self):
        if self.interned:
            return 'sym("{}")'.format(self.name)
        return '<uninterned symbol "{}" at 0x{:x}>'.format(self.name, id(self))

def gensym(name):
    """Create an uninterned symbol. Shorthand for `sym(name, intern=False)`."""
    return sym(name, intern=False)
