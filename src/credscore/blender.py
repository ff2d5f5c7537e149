"""
Deterministic blending of every signal into one P(fake) confidence.

    confidence = clamp(base + trust_adjustment + fact_check_modifier)

base is the internal classifier confidence (0 when it is unavailable). Lexical
and risk signals only contribute reasoning lines. The trust nudge is bounded
well below the fact-check modifier so it never overrides an external verdict.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .classifier import ClassifierUnavailable
from .models import (
    CredibilityResult,
    ErrorVerdict,
    FactCheckVerdict,
    LexicalSignals,
    NoResultVerdict,
    Prediction,
    RiskPatternResult,
    TrustTier,
    UnavailableVerdict,
    VerifiedVerdict,
)

FAKE_THRESHOLD = 0.5
TRUST_NUDGE = 0.05
LEXICAL_FLAG_THRESHOLD = 70.0
READABILITY_FLOOR = 50.0

# checked in order, first match wins
RATING_MODIFIERS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("false", "untrue"), -0.4),
    (("misleading", "mixture"), -0.2),
    (("true", "accurate"), 0.2),
)


def fact_check_modifier(verdict: FactCheckVerdict | None) -> float:
    if not isinstance(verdict, VerifiedVerdict):
        return 0.0
    rating = verdict.rating.lower()
    for keywords, modifier in RATING_MODIFIERS:
        if any(keyword in rating for keyword in keywords):
            return modifier
    return 0.0


def lexical_notes(lexical: LexicalSignals) -> list[str]:
    notes = []
    if lexical.emotional_intensity > LEXICAL_FLAG_THRESHOLD:
        notes.append(f"Lexical signal: excessive emotional language ({lexical.emotional_intensity:.1f})")
    if lexical.sensationalism_score > LEXICAL_FLAG_THRESHOLD:
        notes.append(f"Lexical signal: sensationalist style ({lexical.sensationalism_score:.1f})")
    if lexical.bias_indicators > LEXICAL_FLAG_THRESHOLD:
        notes.append(f"Lexical signal: strong bias indicators ({lexical.bias_indicators:.1f})")
    if lexical.readability_clamped < READABILITY_FLOOR:
        notes.append(f"Lexical signal: difficult to read (readability {lexical.readability_clamped:.1f})")
    return notes


@dataclass
class _Trail:
    reasoning: list[str] = field(default_factory=list)
    indicators: list[str] = field(default_factory=list)

    def note(self, line: str, *, suspicious: bool = False) -> None:
        self.reasoning.append(line)
        if suspicious:
            self.indicators.append(line)


@dataclass
class CredibilityBlender:
    trust_nudge: float = TRUST_NUDGE
    threshold: float = FAKE_THRESHOLD

    def blend(
        self,
        classifier_confidence: float | ClassifierUnavailable | None,
        lexical: LexicalSignals | None,
        risk: RiskPatternResult | None,
        verdict: FactCheckVerdict | None,
        trust_tier: TrustTier = TrustTier.UNKNOWN,
        *,
        timed_out: bool = False,
        processing_time_ms: int = 0,
    ) -> CredibilityResult:
        trail = _Trail()

        base = self._base_confidence(classifier_confidence, trail, timed_out=timed_out)

        if verdict is None:
            verdict = UnavailableVerdict(reason="timed out" if timed_out else "not requested")
        modifier = fact_check_modifier(verdict)
        self._fact_check_note(verdict, modifier, trail)

        if lexical is not None:
            for line in lexical_notes(lexical):
                trail.note(line, suspicious=True)

        if risk is not None:
            for line in risk.analysis:
                trail.note(line, suspicious=True)

        trust_adjustment = self._trust_adjustment(trust_tier, trail)

        if timed_out:
            trail.note("Analysis timed out; unresolved signals were treated as unavailable")

        confidence = min(1.0, max(0.0, base + trust_adjustment + modifier))
        prediction = Prediction.FAKE if confidence > self.threshold else Prediction.REAL
        return CredibilityResult(
            prediction=prediction,
            confidence=confidence,
            reasoning=tuple(trail.reasoning),
            suspicious_indicators=tuple(trail.indicators),
            fact_check=verdict,
            processing_time_ms=max(0, int(processing_time_ms)),
            trust_tier=trust_tier,
            components={
                "base": base,
                "trust_adjustment": trust_adjustment,
                "fact_check_modifier": modifier,
            },
            lexical=lexical,
            risk=risk,
            timed_out=timed_out,
        )

    def _base_confidence(
        self,
        classifier_confidence: float | ClassifierUnavailable | None,
        trail: _Trail,
        *,
        timed_out: bool,
    ) -> float:
        if classifier_confidence is None:
            reason = "internal classifier timed out" if timed_out else "internal classifier was not run"
            trail.note(f"Classifier unavailable: {reason}; confidence set to 0")
            return 0.0
        if isinstance(classifier_confidence, ClassifierUnavailable):
            trail.note(f"Classifier unavailable: {classifier_confidence.reason}; confidence set to 0")
            return 0.0
        base = min(1.0, max(0.0, float(classifier_confidence)))
        trail.note(
            f"Internal classifier confidence: {base * 100:.1f}%",
            suspicious=base > self.threshold,
        )
        return base

    @staticmethod
    def _fact_check_note(verdict: FactCheckVerdict, modifier: float, trail: _Trail) -> None:
        if isinstance(verdict, VerifiedVerdict):
            trail.note(
                f"External fact-check: '{verdict.rating}' from {verdict.publisher}",
                suspicious=modifier < 0,
            )
        elif isinstance(verdict, NoResultVerdict):
            trail.note("External fact-check found no rated claims (inconclusive)")
        elif isinstance(verdict, UnavailableVerdict):
            trail.note(f"External fact-check unavailable: {verdict.reason} (inconclusive)")
        elif isinstance(verdict, ErrorVerdict):
            trail.note(f"External fact-check failed: {verdict.message} (inconclusive)")

    def _trust_adjustment(self, tier: TrustTier, trail: _Trail) -> float:
        if tier is TrustTier.TRUSTED:
            trail.note("Source is on the trusted outlet list")
            return -self.trust_nudge
        if tier is TrustTier.SUSPICIOUS:
            trail.note("Source is hosted on a generic publishing platform", suspicious=True)
            return self.trust_nudge
        trail.note("Source trust is unknown")
        return 0.0
