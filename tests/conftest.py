import random

import pytest

from typedash.words import VocabularyPool


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def vocab() -> VocabularyPool:
    return VocabularyPool(["alpha", "beta", "gamma"])
