from __future__ import annotations

from collections.abc import Sequence

from .dictionaries import TermDictionaries
from .lexical import caps_ratio, punctuation_ratio
from .models import RiskPatternResult, RiskPatterns

EXCESSIVE_PUNCTUATION_THRESHOLD = 0.10
ALL_CAPS_THRESHOLD = 0.30
CONSPIRACY_TERM_STEP = 0.2

WEIGHTS = {
    "punctuation": 0.15,
    "caps": 0.15,
    "conspiracy": 0.30,
    "emotive": 0.20,
    "urgency": 0.20,
}


def detect_terms(lowered: str, terms: Sequence[str]) -> list[str]:
    return [term for term in terms if term in lowered]


class RiskPatternDetector:
    """Rhetorical red flags scored against the conspiracy, emotive and urgency dictionaries."""

    def __init__(self, dictionaries: TermDictionaries) -> None:
        self._dictionaries = dictionaries

    def analyze(self, text: str) -> RiskPatternResult:
        lowered = text.lower()
        analysis: list[str] = []

        punct = punctuation_ratio(text)
        excessive_punctuation = punct > EXCESSIVE_PUNCTUATION_THRESHOLD
        if excessive_punctuation:
            analysis.append(f"High punctuation ratio detected: {punct * 100:.1f}%")

        caps = caps_ratio(text)
        all_caps = caps > ALL_CAPS_THRESHOLD
        if all_caps:
            analysis.append(f"High uppercase ratio detected: {caps * 100:.1f}%")

        conspiracy = detect_terms(lowered, self._dictionaries.conspiracy_terms)
        if conspiracy:
            analysis.append(f"Conspiracy-related terms detected: {', '.join(conspiracy)}")

        emotive = detect_terms(lowered, self._dictionaries.emotive_words)
        if emotive:
            analysis.append("Excessive emotional language detected")

        urgency = detect_terms(lowered, self._dictionaries.urgency_phrases)
        if urgency:
            analysis.append("Urgency-inducing language detected")

        score = self._risk_score(
            punct=punct if excessive_punctuation else 0.0,
            caps=caps if all_caps else 0.0,
            conspiracy_count=len(conspiracy),
            emotive=bool(emotive),
            urgency=bool(urgency),
        )
        return RiskPatternResult(
            patterns=RiskPatterns(
                excessive_punctuation=excessive_punctuation,
                all_caps=all_caps,
                conspiracy_terms=tuple(conspiracy),
                emotive_language=bool(emotive),
                urgency_indicators=bool(urgency),
            ),
            risk_score=score,
            flagged_terms=tuple(dict.fromkeys(conspiracy + emotive + urgency)),
            analysis=tuple(analysis),
        )

    @staticmethod
    def _risk_score(*, punct: float, caps: float, conspiracy_count: int, emotive: bool, urgency: bool) -> float:
        total = 0.0
        total += WEIGHTS["punctuation"] * punct
        total += WEIGHTS["caps"] * caps
        total += WEIGHTS["conspiracy"] * min(1.0, conspiracy_count * CONSPIRACY_TERM_STEP)
        total += WEIGHTS["emotive"] * (1.0 if emotive else 0.0)
        total += WEIGHTS["urgency"] * (1.0 if urgency else 0.0)
        return min(1.0, max(0.0, total))
