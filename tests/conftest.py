import pytest

from config_space import Configuration, SearchSpace
from debug import Debug
from utilities import DEFAULT_PLUGBOARD, DEFAULT_REFLECTOR, catalog_subset

PLAINTEXT = (
    "IN THE HEART THE FOREST THERE WAS AN HIDDEN VILLAGE SYSTEMATICALLY WHERE PEOPLE LIVED "
    "IN PERFECT HARMONY EVERY MORNING THE SUN WOULD RISE OVER THE TALL TREES CASTING AN WARM GLOW OVER "
    "THE LAND THE CHILDREN WOULD RUN OUT TO PLAY IN THE MEADOWS WHILE THE ADULTS TENDED TO THEIR TASKS "
    "THERE WAS ALWAYS SENSE OF PEACE AND CONTENTMENT"
)

SECRET = Configuration(("II", "I", "III"), (1, 3, 0))


@pytest.fixture(autouse=True)
def _restore_debug_switches():
    components = dict(Debug._components)
    enabled = Debug._enabled
    yield
    Debug._components.clear()
    Debug._components.update(components)
    Debug._enabled = enabled


@pytest.fixture
def plaintext():
    return PLAINTEXT.replace(" ", "")


@pytest.fixture
def small_space():
    # 3 rotors × 4 start letters → 6 · 4³ = 384 configurations
    return SearchSpace(catalog_subset(["I", "II", "III"]), "ABCD")


@pytest.fixture
def secret():
    return SECRET


@pytest.fixture
def ciphertext(plaintext, small_space, secret):
    engine = secret.build_engine(small_space.catalog, DEFAULT_PLUGBOARD, DEFAULT_REFLECTOR)
    return engine.encrypt(plaintext)
