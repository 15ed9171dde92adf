# -*- coding: utf-8; -*-
"""A pickle-aware singleton base class.

Inherit from `Singleton` to allow at most one live instance of the class.

- Calling the constructor while an instance exists raises `TypeError`. Keep
  the reference the constructor gives you; it is the only time you get it
  from the constructor.

- Unpickling an instance of a singleton type returns the existing instance,
  if there is one, so identity checks keep working across pickle dumps. The
  default `__setstate__` then overwrites its instance data from the dump.

- The registry holds weak references only. When the last reference to the
  instance dies, a new instance may be created.
"""

__all__ = ["Singleton"]

import threading
from weakref import WeakValueDictionary

# Outside the classes, so that unpickling cannot clobber it.
_instances = WeakValueDictionary()
_instances_update_lock = threading.RLock()

class ThereCanBeOnlyOne(type):
    """Metaclass. Refuse to construct a second instance.

    Pickle never calls the class, so this does not run at unpickling time;
    `Singleton.__new__` handles that case.
    """
    def __call__(cls, *args, **kwargs):
        with _instances_update_lock:
            if cls in _instances:
                raise TypeError("Singleton instance of {} already exists".format(cls))
            instance = cls.__new__(cls, *args, **kwargs)
            cls.__init__(instance, *args, **kwargs)
            return instance

class Singleton(metaclass=ThereCanBeOnlyOne):
    """Base class for singletons. Can be used as a mixin."""
    def __new__(cls, *args, **kwargs):
        try:
            return _instances[cls]
        except KeyError:
            with _instances_update_lock:
                instance = _instances.get(cls)
                if instance is None:
                    instance = _instances[cls] = super().__new__(cls)
            return instance
