# -*- coding: utf-8 -*-
"""Delayed evaluation, with memoization. (A.k.a. *promise* in Racket.)

A `Lazy` wraps a 0-argument callable, the *thunk*. Nothing happens until the
promise is forced; then the thunk runs exactly once, and its return value (or
the exception it raised) is cached for all later forces.

Promises can be sequenced without forcing them::

    a = Lazy(lambda: expensive())
    b = a.map(lambda x: 2 * x)                  # nothing computed yet
    c = b.flatmap(lambda y: Lazy.pure(y + 1))   # still nothing
    c.force()                                   # now `expensive` runs, once

**Stack safety**. A chain of `map`/`flatmap` can be arbitrarily long, and its
links can be created lazily, while it is being forced (this is what
`lazyrec.rec.lazyrec` does). Forcing does not recurse into the chain; it runs
a trampoline, keeping the pending continuations in an explicit stack on the
heap. So the depth of the Python call stack does not depend on the length of
the chain.

**Threads**. A promise may be forced concurrently from several threads. Each
promise has a lock around its one-time transition to the evaluated state, so
each thunk, and each `flatmap` continuation, is called at most once. The
losers of the race wait, and then return the cached result.

See:
    https://docs.racket-lang.org/reference/Delayed_Evaluation.html
"""

__all__ = ["Lazy", "lazy", "pure", "join", "force1"]

import threading

from .symbol import sym

_uninitialized = sym("_uninitialized")

# Tags for the entries of the continuation stack in `_drive`.
_apply = sym("_apply")  # call the continuation of a sequencing node with the value
_cache = sym("_cache")  # store the value into a sequencing node whose continuation has run

def _identity(x):
    return x

class Lazy:
    """Delayed evaluation, with memoization.

    Construct from a thunk with `Lazy(thunk)`, or from an already known value
    with `Lazy.pure(value)`. Force with `force()`.
    """

    def __init__(self, thunk):
        """`thunk`: 0-argument callable to be stored for delayed evaluation."""
        if not callable(thunk):
            raise TypeError(f"`thunk` must be a callable, got {type(thunk)} with value {repr(thunk)}")
        self._thunk = thunk
        self._value = _uninitialized
        self._returned_normally = _uninitialized
        self._lock = threading.RLock()

    @classmethod
    def pure(cls, value):
        """Create an already evaluated promise holding `value`.

        No thunk is involved; forcing just returns `value`.
        """
        self = object.__new__(cls)
        self._thunk = None
        self._value = value
        self._returned_normally = True
        self._lock = None  # never transitions
        return self

    @property
    def evaluated(self):
        """Whether this promise has been forced. Does not force it.

        Also a promise whose thunk raised counts as evaluated; forcing it
        again re-raises the cached exception.
        """
        return self._returned_normally is not _uninitialized

    def force(self):
        """Compute and return the value of the promise.

        If the promise is not already evaluated, evaluate it now, and cache
        its value. If the evaluation raises, cache the exception instance
        instead.

        Then in any case, return the cached value, or raise the cached exception.
        """
        if self._returned_normally is _uninitialized:
            return _drive(self)
        return self._result()

    def map(self, f):
        """Return a promise of `f(x)`, where `x` is the value of this promise.

        Neither promise is forced now.
        """
        if not callable(f):
            raise TypeError(f"`f` must be a callable, got {type(f)} with value {repr(f)}")
        return _Bind(self, lambda x: Lazy.pure(f(x)))

    def flatmap(self, f):
        """Sequence. Return a promise of the value of `f(x)`.

        Here `x` is the value of this promise, and `f` must return a `Lazy`.
        Neither promise is forced now. Chains of `flatmap` of any length are
        forced without growing the call stack.
        """
        if not callable(f):
            raise TypeError(f"`f` must be a callable, got {type(f)} with value {repr(f)}")
        return _Bind(self, f)

    def zip(self, *others):
        """Return a promise of the tuple of the values of `self` and `others`.

        When forced, the promises are forced left to right.
        """
        result = self.map(lambda x: (x,))
        for other in others:
            result = result.flatmap(lambda xs, other=other: other.map(lambda x: xs + (x,)))
        return result

    def discardl(self, other):
        """Sequence `self` then `other`; the result is the value of `other`."""
        return self.flatmap(lambda _: other)

    def discardr(self, other):
        """Sequence `self` then `other`; the result is the value of `self`."""
        return self.flatmap(lambda x: other.map(lambda _: x))

    def __repr__(self):
        if self._returned_normally is _uninitialized:
            return "<Lazy at 0x{:x}: unevaluated>".format(id(self))
        if self._returned_normally:
            return "<Lazy at 0x{:x}: value={}>".format(id(self), repr(self._value))
        return "<Lazy at 0x{:x}: raised {}>".format(id(self), repr(self._value))

    # Internal protocol used by `_drive`.

    def _result(self):
        if self._returned_normally:
            return self._value
        raise self._value

    def _evaluate(self):
        """Run the thunk, unless some other thread already has. Cache the outcome."""
        with self._lock:
            if self._returned_normally is _uninitialized:
                try:
                    self._value = self._thunk()
                    self._returned_normally = True
                except Exception as err:
                    self._value = err
                    self._returned_normally = False
                self._thunk = None

class _Bind(Lazy):
    """A sequencing node: the promise of `cont(source.force()).force()`.

    Goes through three states: pending (has `_source` and `_cont`), continued
    (`_cont` has run and returned the promise `_inner`), and evaluated.
    """

    def __init__(self, source, cont):
        self._source = source
        self._cont = cont
        self._inner = None
        self._value = _uninitialized
        self._returned_normally = _uninitialized
        self._lock = threading.RLock()

    def _continue(self, value):
        """Call the continuation with `value`, at most once. Return the promise to force next."""
        with self._lock:
            if self._returned_normally is not _uninitialized:
                return self
            if self._inner is not None:
                return self._inner
            try:
                inner = self._cont(value)
                if not isinstance(inner, Lazy):
                    raise TypeError(f"`flatmap` continuation must return a Lazy, got {type(inner)} with value {repr(inner)}")
            except Exception as err:
                self._fail(err)
                raise
            self._inner = inner
            self._source = self._cont = None
            return inner

    def _settle(self, value):
        with self._lock:
            if self._returned_normally is _uninitialized:
                self._value = value
                self._returned_normally = True
            self._inner = None

    def _fail(self, err):
        with self._lock:
            if self._returned_normally is _uninitialized:
                self._value = err
                self._returned_normally = False
            self._source = self._cont = self._inner = None

def _drive(promise):
    """Force `promise`, iteratively. Return its value.

    The stack holds `(tag, node)` pairs for the sequencing nodes we have
    descended through: `_apply` when `node`'s continuation still has to be
    called with the value of its source, `_cache` when `node` is waiting
    for the value of the promise its continuation returned.

    If anything on the way raises, every node still on the stack caches
    the exception, and it propagates.
    """
    stack = []
    try:
        return _run(promise, stack)
    except Exception as err:
        while stack:
            _, bind = stack.pop()
            bind._fail(err)
        raise

def _run(node, stack):
    while True:
        # Descend until we find a promise that can produce a value by itself.
        while node._returned_normally is _uninitialized:
            if not isinstance(node, _Bind):
                node._evaluate()
                break
            inner = node._inner
            if inner is not None:
                stack.append((_cache, node))
                node = inner
                continue
            source = node._source
            if source is None:  # another thread just continued or settled it; look again
                continue
            stack.append((_apply, node))
            node = source
        value = node._result()

        # Ascend, caching the value into the nodes waiting for it, until some
        # continuation hands us a new promise to descend into.
        while stack:
            tag, bind = stack.pop()
            if tag is _cache:
                bind._settle(value)
                continue
            node = bind._continue(value)
            stack.append((_cache, bind))
            break
        else:
            return value

def lazy(thunk):
    """Create a promise of the value of `thunk()`. Same as `Lazy(thunk)`."""
    return Lazy(thunk)

def pure(value):
    """Create an already evaluated promise. Same as `Lazy.pure(value)`."""
    return Lazy.pure(value)

def join(promise):
    """Flatten a promise of a promise into a promise.

    Does not force anything now; forcing the result forces both layers,
    without growing the call stack.
    """
    return promise.flatmap(_identity)

def force1(x):
    """Force a `Lazy` promise.

    If `x` is not a promise, it is returned as-is (à la Racket).
    """
    return x.force() if isinstance(x, Lazy) else x
