import pytest

import artdice.standard as standard
from artdice.dice import Die, Side, Symbol


@pytest.fixture
def pip():
    return standard.pip()


@pytest.fixture
def custom_d4():
    a, b = Symbol("A"), Symbol("B")
    return Die([Side([a]), Side([b]), Side([a, b]), Side()])
