# -*- coding: utf-8 -*
"""Stack-safe lazy recursion for Python.

`Lazy` is a memoizing promise whose `map`/`flatmap` chains are forced by
a trampoline, and `lazyrec` builds recursive computations on top of it
that do not grow the call stack.

See ``dir(lazyrec)`` and submodule docstrings for more.
"""

__version__ = '0.1.0'

from .lazy import *  # noqa: F401, F403
from .rec import *  # noqa: F401, F403
from .singleton import *  # noqa: F401, F403
from .symbol import *  # noqa: F401, F403
