from typing import Optional

from bs4 import BeautifulSoup

# só minúsculas contam (comportamento herdado, ver DESIGN.md)
VOWELS = frozenset("aeiouy")


def word_with_most_vowels(title: Optional[str]) -> str:
    """Palavra do título com mais vogais; empate -> a mais longa (primeira vence se igual)."""
    best = ""
    most = 0
    for word in (title or "").split():
        count = sum(1 for letter in word if letter in VOWELS)
        if count > most:
            most = count
            best = word
        elif count == most and len(word) > len(best):
            best = word
    return best


def strip_html(content: Optional[str]) -> str:
    """Remove tags HTML e normaliza espaços (equivalente ao contentSnippet)."""
    if not content:
        return ""
    text = BeautifulSoup(content, "html.parser").get_text(separator=" ")
    return " ".join(text.split())
