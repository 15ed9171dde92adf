# -*- coding: utf-8 -*-
"""Stack-safe lazy recursion.

Given a step function `fn(self, a)` that returns a `Lazy`, and an input `a`,
`lazyrec(fn, a)` returns a promise that, when forced, runs the recursion to
completion without growing the call stack with the recursion depth.

Inside `fn`, the recursive call `self(b)` does not recurse; it just returns
a new, unforced promise of the recursion at `b`. Combine it with `map`,
`flatmap` or `zip`, and return the result; the trampoline in `Lazy.force`
takes care of the rest. A base case just returns a promise without calling
`self`.

**Examples**::

    from lazyrec import lazyrec, pure

    # non-tail recursion, 50000 levels deep
    def fact(self, n):
        if n <= 1:
            return pure(1)
        return self(n - 1).map(lambda m: n * m)
    lazyrec(fact, 50000).force()  # no crash

    # as a decorator (curried form)
    @lazyrec
    def fib(self, n):
        if n < 2:
            return pure(n)
        return self(n - 1).zip(self(n - 2)).map(lambda ab: ab[0] + ab[1])
    assert fib(20).force() == 6765

Calling `self` several times (binary recursion, as in `fib`) is fine; each
call gives an independent promise. There is no memoization across inputs.
"""

__all__ = ["LazyRec", "lazyrec"]

from functools import wraps

from .lazy import Lazy, join
from .singleton import Singleton
from .symbol import sym

_noarg = sym("_noarg")

class LazyRec(Singleton):
    """The recursion combinator. A stateless singleton; get it from `lazyrec()`.

    Calling the instance as `rec(fn, a)` returns the promise of the recursion
    of `fn` at `a`.
    """

    def __call__(self, fn, a):
        if not callable(fn):
            raise TypeError(f"`fn` must be a callable, got {type(fn)} with value {repr(fn)}")
        # Building the promise performs no calls of `fn`. When forced, the
        # outer layer runs one step; the step's result is flattened in, so
        # the next step runs in the same drive loop.
        return join(Lazy(lambda: fn(lambda nexta: self(fn, nexta), a)))

    def curried(self, fn):
        """Fix `fn`. Return a 1-argument function `a -> Lazy`."""
        if not callable(fn):
            raise TypeError(f"`fn` must be a callable, got {type(fn)} with value {repr(fn)}")
        @wraps(fn)
        def rec(a):
            return self(fn, a)
        return rec

    def __repr__(self):
        return "<LazyRec singleton at 0x{:x}>".format(id(self))

_instance = LazyRec()

def lazyrec(fn=_noarg, a=_noarg):
    """Stack-safe lazy recursion.

    Three forms:

        lazyrec()         -> the `LazyRec` singleton
        lazyrec(fn)       -> a function `a -> Lazy`; usable as a decorator
        lazyrec(fn, a)    -> the promise of the recursion of `fn` at `a`

    `fn(self, a)` is the step function. It must return a `Lazy`. To recurse,
    it calls `self(b)`, which returns the (unforced) promise of the recursion
    at `b`.

    Nothing is computed until the returned promise is forced.
    """
    if fn is _noarg:
        return _instance
    if a is _noarg:
        return _instance.curried(fn)
    return _instance(fn, a)
