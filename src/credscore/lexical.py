from __future__ import annotations

import math
import re
from collections.abc import Sequence

from .dictionaries import TermDictionaries
from .models import LexicalSignals

SENTENCE_SPLIT = re.compile(r"[.!?]+")
PUNCTUATION = re.compile(r"[!?.,;:]")
UPPERCASE = re.compile(r"[A-Z]")
LETTERS = re.compile(r"[A-Za-z]")
SILENT_ENDING = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
LEADING_Y = re.compile(r"^y")
VOWEL_GROUP = re.compile(r"[aeiouy]{1,2}")

FLESCH_BASE = 206.835
FLESCH_SENTENCE_WEIGHT = 1.015
FLESCH_SYLLABLE_WEIGHT = 84.6


def estimate_syllables(word: str) -> int:
    word = word.lower()
    if len(word) <= 3:
        return 1
    word = SILENT_ENDING.sub("", word)
    word = LEADING_Y.sub("", word)
    return len(VOWEL_GROUP.findall(word)) or 1


def count_sentences(text: str) -> int:
    sentences = [chunk for chunk in SENTENCE_SPLIT.split(text) if chunk.strip()]
    return max(len(sentences), 1)


def punctuation_ratio(text: str) -> float:
    if not text:
        return 0.0
    return len(PUNCTUATION.findall(text)) / len(text)


def caps_ratio(text: str) -> float:
    letters = len(LETTERS.findall(text))
    if not letters:
        return 0.0
    return len(UPPERCASE.findall(text)) / letters


def term_density(lowered: str, terms: Sequence[str], word_count: int) -> float:
    """Percentage of dictionary hits per word; phrases match by substring."""
    if not word_count:
        return 0.0
    hits = sum(1 for term in terms if term in lowered)
    return min(100.0, hits / word_count * 100)


class LexicalSignalExtractor:
    """Surface statistics over raw text. Pure and deterministic."""

    def __init__(self, dictionaries: TermDictionaries) -> None:
        self._dictionaries = dictionaries

    def extract(self, text: str) -> LexicalSignals:
        words = text.split()
        word_count = len(words)
        if not word_count:
            return LexicalSignals(
                punctuation_ratio=punctuation_ratio(text),
                caps_ratio=caps_ratio(text),
            )

        sentence_count = count_sentences(text)
        avg_words_per_sentence = word_count / sentence_count
        avg_syllables_per_word = sum(estimate_syllables(word) for word in words) / word_count
        readability = (
            FLESCH_BASE
            - FLESCH_SENTENCE_WEIGHT * avg_words_per_sentence
            - FLESCH_SYLLABLE_WEIGHT * avg_syllables_per_word
        )

        lowered = text.lower()
        unique_words = {word.lower() for word in words}
        terms = self._dictionaries
        return LexicalSignals(
            readability=readability,
            emotional_intensity=term_density(lowered, terms.emotional_words, word_count),
            urgency_score=term_density(lowered, terms.urgency_words, word_count),
            sensationalism_score=term_density(lowered, terms.sensationalism_words, word_count),
            bias_indicators=term_density(lowered, terms.bias_words, word_count),
            vocabulary_diversity=len(unique_words) / math.sqrt(word_count),
            punctuation_ratio=punctuation_ratio(text),
            caps_ratio=caps_ratio(text),
            word_count=word_count,
            sentence_count=sentence_count,
        )
