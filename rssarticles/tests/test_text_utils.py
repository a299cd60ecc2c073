# rssarticles/tests/test_text_utils.py
from rssarticles.utils.text import strip_html, word_with_most_vowels


def test_word_with_most_vowels_basic():
    assert word_with_most_vowels("The Quick Brown Fox") == "Quick"


def test_tie_prefers_longer_word():
    # "cat" e "dogs" têm 1 vogal cada -> a mais longa vence
    assert word_with_most_vowels("cat dogs") == "dogs"


def test_tie_with_same_length_keeps_first():
    assert word_with_most_vowels("cat dog") == "cat"


def test_y_counts_as_vowel():
    assert word_with_most_vowels("rhythm is") == "rhythm"


def test_only_lowercase_vowels_count():
    # comportamento atual: maiúsculas não contam
    assert word_with_most_vowels("AEIOUAEIOU be") == "be"
    assert word_with_most_vowels("EUROPE") == "EUROPE"  # 0 vogais, mas é a única palavra
    assert word_with_most_vowels("OUI non") == "non"


def test_no_vowels_returns_longest_word():
    assert word_with_most_vowels("Brr Hmmm") == "Hmmm"


def test_empty_title():
    assert word_with_most_vowels("") == ""
    assert word_with_most_vowels(None) == ""
    assert word_with_most_vowels("   ") == ""


def test_extra_whitespace_is_ignored():
    assert word_with_most_vowels("  hello   world  ") == "hello"


def test_strip_html():
    assert strip_html("<p>Some <b>news</b>\n text</p>") == "Some news text"
    assert strip_html("plain text") == "plain text"
    assert strip_html(None) == ""
