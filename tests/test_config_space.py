from random import Random

import pytest

from cipher_engine import CipherEngine
from config_space import Candidate, Configuration, Evaluator, SearchSpace
from errors import ConfigurationError
from utilities import DEFAULT_PLUGBOARD, DEFAULT_REFLECTOR, catalog_subset


def test_configuration_is_immutable_and_normalised():
    config = Configuration(["I", "II", "III"], [27, 0, -1])
    assert config.rotors == ("I", "II", "III")
    assert config.positions == (1, 0, 25)
    assert config.window == "BAZ"
    with pytest.raises(AttributeError):
        config.positions = (0, 0, 0)


@pytest.mark.parametrize(
    "rotors, positions",
    [
        (("I", "I", "II"), (0, 0, 0)),
        (("I", "II"), (0, 0, 0)),
        (("I", "II", "III"), (0, 0)),
    ],
)
def test_invalid_configurations(rotors, positions):
    with pytest.raises(ConfigurationError):
        Configuration(rotors, positions)


def test_configuration_str():
    assert str(Configuration(("I", "II", "III"))) == "Rotors: I-II-III, Positions: A-A-A"
    assert str(Configuration(("V", "I", "IV"), (1, 2, 3), (0, 0, 1))) == (
        "Rotors: V-I-IV, Positions: B-C-D, Rings: A-A-B"
    )


def test_build_engine_matches_raw_settings():
    config = Configuration(("III", "I", "V"), (4, 17, 9))
    engine = config.build_engine()
    raw = CipherEngine.from_settings(
        ["BDFHJLCPRTXVZNYEIWGAKMUSQO", "EKMFLGDQVZNTOWYHXUSPAIBRCJ", "VZBRGITYUPSDNHLXAWMJQOFECK"],
        ["V", "Q", "Z"],
        (4, 17, 9),
        plugboard=DEFAULT_PLUGBOARD,
        reflector=DEFAULT_REFLECTOR,
    )
    message = "WEATHERREPORTFORTHENORTHSEA"
    assert engine.process(message) == raw.process(message)


def test_build_engine_unknown_rotor():
    with pytest.raises(ConfigurationError):
        Configuration(("I", "II", "IX")).build_engine()


def test_default_space_size():
    assert SearchSpace().size == 5 * 4 * 3 * 26 ** 3 == 1_054_560


def test_enumeration_visits_each_configuration_once():
    space = SearchSpace(catalog_subset(["I", "II", "III", "IV"]), "AB")
    configs = list(space)
    assert len(configs) == space.size == 24 * 8
    assert len(set(configs)) == len(configs)
    assert configs[0] == Configuration(("I", "II", "III"), (0, 0, 0))
    assert configs[1] == Configuration(("I", "II", "III"), (0, 0, 1))
    assert all(c in space for c in configs)


def test_contains():
    space = SearchSpace(catalog_subset(["I", "II", "III"]), "AB")
    assert Configuration(("III", "I", "II"), (1, 0, 1)) in space
    assert Configuration(("III", "I", "II"), (2, 0, 1)) not in space
    assert Configuration(("IV", "I", "II")) not in space
    assert "I-II-III" not in space


@pytest.mark.parametrize("letters", ["", "A1", "AA"])
def test_bad_letters(letters):
    with pytest.raises(ConfigurationError):
        SearchSpace(letters=letters)


def test_catalog_too_small():
    with pytest.raises(ConfigurationError):
        SearchSpace(catalog_subset(["I", "II"]))


def test_random_configurations_stay_in_space(small_space):
    rng = Random(1)
    for _ in range(200):
        config = small_space.random(rng)
        assert config in small_space
        assert len(set(config.rotors)) == 3


def test_mutation_changes_at_most_one_field():
    space = SearchSpace()
    rng = Random(5)
    config = space.random(rng)
    for _ in range(500):
        neighbour = space.mutate(config, rng)
        changed = [a != b for a, b in zip(config.rotors + config.positions,
                                          neighbour.rotors + neighbour.positions)]
        assert sum(changed) <= 1
        assert neighbour in space
        config = neighbour


def test_mutation_reaches_every_move():
    space = SearchSpace()
    rng = Random(11)
    start = Configuration(("I", "II", "III"), (0, 0, 0))
    touched = set()
    for _ in range(500):
        neighbour = space.mutate(start, rng)
        for i, (a, b) in enumerate(zip(start.rotors + start.positions,
                                       neighbour.rotors + neighbour.positions)):
            if a != b:
                touched.add(i)
    assert touched == set(range(6))


def test_mutation_is_reproducible():
    space = SearchSpace()
    a, b = Random(3), Random(3)
    config = space.random(a)
    assert config == space.random(b)
    assert [space.mutate(config, a) for _ in range(20)] == [space.mutate(config, b) for _ in range(20)]


def test_evaluator_decrypts_and_scores(plaintext, ciphertext, secret, small_space):
    evaluate = Evaluator(ciphertext, small_space.catalog)
    candidate = evaluate(secret)
    assert isinstance(candidate, Candidate)
    assert candidate.plaintext == plaintext
    assert candidate.configuration == secret
    # engines are fresh every call
    assert evaluate(secret) == candidate


def test_evaluator_custom_scorer(ciphertext, secret, small_space):
    evaluate = Evaluator(ciphertext, small_space.catalog, scorer=len)
    assert evaluate(secret).score == len(ciphertext)
