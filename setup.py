# -*- coding: utf-8 -*-
#
"""setuptools-based setup.py for lazyrec.

Usage as usual with setuptools:
    python3 setup.py sdist
    python3 setup.py bdist_wheel
    pip install -e .[test]
"""

import ast
import os

from setuptools import setup  # type: ignore[import]


def read(*relpath, **kwargs):  # https://blog.ionelmc.ro/2014/05/25/python-packaging/#the-setup-script
    with open(os.path.join(os.path.dirname(__file__), *relpath),
              encoding=kwargs.get('encoding', 'utf8')) as fh:
        return fh.read()

# Extract __version__ from the package __init__.py, without running it.
init_py_path = os.path.join(os.path.dirname(__file__), "lazyrec", "__init__.py")
version = None
with open(init_py_path) as f:
    for line in f:
        if line.startswith("__version__"):
            module = ast.parse(line, filename=init_py_path)
            expr = module.body[0]
            assert isinstance(expr, ast.Assign)
            v = expr.value
            assert isinstance(v, ast.Constant)
            version = v.value
            break
if not version:
    raise RuntimeError(f"Version information not found in {init_py_path}")

#########################################################
# Call setup()
#########################################################

setup(
    name="lazyrec",
    version=version,
    # The unit tests in `lazyrec.tests` are NOT deployed.
    packages=["lazyrec"],
    provides=["lazyrec"],
    keywords=["functional-programming", "lazy-evaluation", "promise", "trampoline",
              "recursion", "stack-safety", "memoization", "monad"],
    install_requires=[],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.8",
    description="Stack-safe lazy recursion: memoizing promises with trampolined sequencing.",
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    license="BSD",
    classifiers=["Development Status :: 4 - Beta",
                 "Intended Audience :: Developers",
                 "License :: OSI Approved :: BSD License",
                 "Programming Language :: Python",
                 "Programming Language :: Python :: 3",
                 "Programming Language :: Python :: Implementation :: CPython",
                 "Programming Language :: Python :: Implementation :: PyPy",
                 "Topic :: Software Development :: Libraries",
                 "Topic :: Software Development :: Libraries :: Python Modules"
                 ],
    zip_safe=True
)
