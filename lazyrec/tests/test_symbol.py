# -*- coding: utf-8; -*-

import pickle

from ..symbol import sym, gensym

def test_interned():
    cat = sym("cat")
    assert cat is sym("cat")
    assert cat is not sym("dog")
    assert str(cat) == "cat"
    assert repr(cat) == 'sym("cat")'

def test_interned_survives_pickling():
    cat = sym("cat")
    assert pickle.loads(pickle.dumps(cat)) is cat

def test_gensym():
    tabby = gensym("cat")
    scottishfold = gensym("cat")
    assert tabby is not scottishfold
    assert tabby is not sym("cat")
    assert "uninterned" in str(tabby)
    assert pickle.loads(pickle.dumps(tabby)) is not tabby
