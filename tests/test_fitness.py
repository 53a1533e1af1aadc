import math

import pytest

from config_space import Configuration
from errors import DegenerateInputWarning
from fitness import (
    ENGLISH_FREQUENCIES,
    analyze,
    count_common_trigrams,
    fitness,
    frequency_score,
    index_of_coincidence,
    letters_only,
)
from utilities import catalog_subset, clean_text


def test_letters_only_view():
    assert letters_only("The cat, 9 lives!") == "THECATLIVES"


def test_letters_only_skips_non_ascii():
    assert letters_only("Straße ıs") == "STRAES"
    assert clean_text("Straße ıs") == "STRAES"


@pytest.mark.parametrize("text", ["", "A", "a", "1 2 3", "A!"])
def test_ioc_needs_two_letters(text):
    assert index_of_coincidence(text) == 0.0


def test_ioc_values():
    assert index_of_coincidence("AA") == 1.0
    assert index_of_coincidence("AB") == 0.0
    # 2·1 + 2·1 over 4·3
    assert index_of_coincidence("AABB") == pytest.approx(4 / 12)


def test_trigram_hits_overlap():
    assert count_common_trigrams("THETHE") == 2
    assert count_common_trigrams("the the") == 2
    # INT, NTH and THE share letters
    assert count_common_trigrams("INTHE") == 3
    assert count_common_trigrams("") == 0


def test_frequency_score_single_letter():
    expected = sum(ENGLISH_FREQUENCIES) - 13 + (100 - 13) ** 2 / 13
    assert frequency_score("E") == pytest.approx(expected)
    assert frequency_score("e e") == pytest.approx(expected)


def test_frequency_score_without_letters_is_maximal():
    assert frequency_score("") == math.inf
    assert frequency_score("12345") == math.inf


def test_empty_text_scores_with_sentinels():
    with pytest.warns(DegenerateInputWarning):
        score = fitness("")
    assert score == pytest.approx(0.4 * (1 - 0.067))


def test_symbol_only_text_warns():
    with pytest.warns(DegenerateInputWarning):
        stats = analyze("?!?")
    assert stats.letters == 0
    assert stats.chi_square == math.inf
    assert stats.trigrams == 0


def test_analyze_agrees_with_individual_statistics(plaintext):
    stats = analyze(plaintext)
    assert stats.letters == len(plaintext)
    assert stats.ioc == pytest.approx(index_of_coincidence(plaintext))
    assert stats.chi_square == pytest.approx(frequency_score(plaintext))
    assert stats.trigrams == count_common_trigrams(plaintext)
    assert stats.fitness == pytest.approx(fitness(plaintext))


def test_combined_formula():
    text = "THETHE"
    ioc = index_of_coincidence(text)
    chi = frequency_score(text)
    expected = 0.4 * (1 - abs(0.067 - ioc)) + 0.4 / (1 + chi) + 0.2 * 2 / 6
    assert fitness(text) == pytest.approx(expected)


def test_english_beats_ciphertext(plaintext, ciphertext):
    assert fitness(plaintext) > fitness(ciphertext)
    assert index_of_coincidence(plaintext) > index_of_coincidence(ciphertext)
    assert frequency_score(plaintext) < frequency_score(ciphertext)


def test_english_ioc_is_close_to_reference(plaintext):
    assert index_of_coincidence(plaintext) == pytest.approx(0.067, abs=0.015)


def test_wrong_rotor_order_scores_lower(plaintext, ciphertext, secret):
    wrong = Configuration(("I", "II", "III"), secret.positions)
    garbled = wrong.build_engine(catalog_subset(["I", "II", "III"])).decrypt(ciphertext)
    assert fitness(garbled) < fitness(plaintext)
