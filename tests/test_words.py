from __future__ import annotations

from essaywords.text.words import in_dictionary, is_valid, is_well_formed, tokenize, valid_words

DICTIONARY = frozenset({"cat", "dog", "run", "a1b", "it's", "ox"})


def test_is_valid_accepts_dictionary_words_any_case():
    assert is_valid("cat", DICTIONARY)
    assert is_valid("CaT", DICTIONARY)
    assert not is_valid("ran", DICTIONARY)


def test_rejects_malformed_tokens_even_if_in_dictionary():
    for token in ("a1b", "it's", "ox", "", "do-g"):
        assert not is_well_formed(token)
        assert not is_valid(token, DICTIONARY)
    assert in_dictionary("a1b", DICTIONARY)


def test_non_ascii_letters_are_not_well_formed():
    assert not is_well_formed("café")
    assert is_well_formed("cafe")


def test_tokenize_lowercases_and_keeps_order():
    text = "The cat ran and the dog ran too cat cat"
    assert tokenize(text) == ["the", "cat", "ran", "and", "the", "dog", "ran", "too", "cat", "cat"]


def test_tokenize_skips_short_and_mixed_runs():
    assert tokenize("an ox, x2yz abc4 it's co-op hello.") == ["hello"]


def test_valid_words_filters_against_dictionary():
    words = valid_words("The cat ran and the dog ran too cat cat", frozenset({"cat", "dog", "run"}))
    assert words == ["cat", "dog", "cat", "cat"]
