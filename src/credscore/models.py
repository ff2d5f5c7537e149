from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Prediction(str, Enum):
    REAL = "REAL"
    FAKE = "FAKE"


class TrustTier(str, Enum):
    TRUSTED = "trusted"
    SUSPICIOUS = "suspicious"
    UNKNOWN = "unknown"


class AnalysisRequest(BaseModel):
    text: str
    title: str | None = None
    source: str | None = None
    url: str | None = None

    @property
    def content(self) -> str:
        """Text fed to the lexical, risk and classifier stages."""
        if self.title and self.title.strip():
            return f"{self.title.strip()}\n{self.text}"
        return self.text

    @property
    def source_hint(self) -> str | None:
        return self.source or self.url


class LexicalSignals(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Flesch reading ease, unclamped; see readability_clamped
    readability: float = 206.835
    emotional_intensity: float = Field(0.0, ge=0.0, le=100.0)
    urgency_score: float = Field(0.0, ge=0.0, le=100.0)
    sensationalism_score: float = Field(0.0, ge=0.0, le=100.0)
    bias_indicators: float = Field(0.0, ge=0.0, le=100.0)
    vocabulary_diversity: float = Field(0.0, ge=0.0)
    punctuation_ratio: float = Field(0.0, ge=0.0, le=1.0)
    caps_ratio: float = Field(0.0, ge=0.0, le=1.0)
    word_count: int = Field(0, ge=0)
    sentence_count: int = Field(1, ge=1)

    @property
    def readability_clamped(self) -> float:
        return max(0.0, min(100.0, self.readability))

    @property
    def vocabulary_diversity_clamped(self) -> float:
        return min(1.0, self.vocabulary_diversity)


class RiskPatterns(BaseModel):
    model_config = ConfigDict(frozen=True)

    excessive_punctuation: bool = False
    all_caps: bool = False
    conspiracy_terms: tuple[str, ...] = ()
    emotive_language: bool = False
    urgency_indicators: bool = False


class RiskPatternResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    patterns: RiskPatterns = Field(default_factory=RiskPatterns)
    risk_score: float = Field(0.0, ge=0.0, le=1.0)
    flagged_terms: tuple[str, ...] = ()
    analysis: tuple[str, ...] = ()


class VerifiedVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["verified"] = "verified"
    rating: str
    publisher: str
    claim_text: str | None = None
    review_url: str | None = None


class NoResultVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["no_result"] = "no_result"


class UnavailableVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["unavailable"] = "unavailable"
    reason: str


class ErrorVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["error"] = "error"
    message: str


FactCheckVerdict = Annotated[
    Union[VerifiedVerdict, NoResultVerdict, UnavailableVerdict, ErrorVerdict],
    Field(discriminator="kind"),
]


class CredibilityResult(BaseModel):
    """Outcome of one analysis. `confidence` is the blended probability of FAKE."""

    model_config = ConfigDict(frozen=True)

    prediction: Prediction
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: tuple[str, ...] = ()
    suspicious_indicators: tuple[str, ...] = ()
    fact_check: FactCheckVerdict
    processing_time_ms: int = Field(0, ge=0)
    trust_tier: TrustTier = TrustTier.UNKNOWN
    components: dict[str, float] = Field(default_factory=dict)
    lexical: LexicalSignals | None = None
    risk: RiskPatternResult | None = None
    timed_out: bool = False


class SourceVerifyRequest(BaseModel):
    url: str | None = None


class SourceVerification(BaseModel):
    """Trust assessment of a single source, without any content analysis."""

    model_config = ConfigDict(frozen=True)

    source: str
    host: str = ""
    trust_tier: TrustTier = TrustTier.UNKNOWN
    status: Literal["verified", "suspicious", "unverified"] = "unverified"
    warnings: tuple[str, ...] = ()
