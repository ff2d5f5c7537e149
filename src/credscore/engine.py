from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field

from .blender import CredibilityBlender
from .classifier import ClassifierAdapter, ClassifierUnavailable, build_classifier
from .config import Settings, get_settings
from .dictionaries import TermDictionaries, load_dictionaries
from .errors import InputError
from .fact_check import FactCheckClient, FactChecker
from .lexical import LexicalSignalExtractor
from .models import (
    AnalysisRequest,
    CredibilityResult,
    ErrorVerdict,
    FactCheckVerdict,
)
from .risk_patterns import RiskPatternDetector
from .source_trust import SourceTrustLookup

logger = logging.getLogger(__name__)


@dataclass
class CredibilityEngine:
    extractor: LexicalSignalExtractor
    detector: RiskPatternDetector
    classifier: ClassifierAdapter
    fact_checker: FactChecker
    trust_lookup: SourceTrustLookup
    blender: CredibilityBlender = field(default_factory=CredibilityBlender)
    timeout: float = 30.0

    async def analyze(self, request: AnalysisRequest) -> CredibilityResult:
        if not request.text or not request.text.strip():
            raise InputError("text is required")

        started = time.perf_counter()
        content = request.content
        lexical = self.extractor.extract(content)
        risk = self.detector.analyze(content)
        tier = self.trust_lookup.trust_tier(request.source_hint)

        classifier_task = asyncio.create_task(self.classifier.confidence(content))
        fact_check_task = asyncio.create_task(self.fact_checker.verify_claim(request.text))
        done, pending = await asyncio.wait({classifier_task, fact_check_task}, timeout=self.timeout)
        if pending:
            logger.warning("Analysis timed out after %.1fs; %d signal(s) unresolved", self.timeout, len(pending))
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        result = self.blender.blend(
            self._classifier_outcome(classifier_task, done),
            lexical,
            risk,
            self._fact_check_outcome(fact_check_task, done),
            tier,
            timed_out=bool(pending),
            processing_time_ms=int((time.perf_counter() - started) * 1000),
        )
        logger.info(
            "Analysis completed: prediction=%s confidence=%.3f tier=%s fact_check=%s in %dms",
            result.prediction.value,
            result.confidence,
            result.trust_tier.value,
            result.fact_check.kind,
            result.processing_time_ms,
        )
        return result

    def analyze_sync(self, request: AnalysisRequest) -> CredibilityResult:
        """Blocking entry point for callers outside an event loop."""
        return asyncio.run(self.analyze(request))

    @staticmethod
    def _classifier_outcome(task: asyncio.Task, done: set) -> float | ClassifierUnavailable | None:
        if task not in done:
            return None
        exc = task.exception()
        if exc is not None:
            logger.error("Classifier task raised: %s", exc)
            return ClassifierUnavailable()
        return task.result()

    @staticmethod
    def _fact_check_outcome(task: asyncio.Task, done: set) -> FactCheckVerdict | None:
        if task not in done:
            return None
        exc = task.exception()
        if exc is not None:
            logger.error("Fact-check task raised: %s", exc)
            return ErrorVerdict(message=str(exc) or type(exc).__name__)
        return task.result()


def build_engine(
    settings: Settings | None = None,
    *,
    dictionaries: TermDictionaries | None = None,
) -> CredibilityEngine:
    settings = settings or get_settings()
    dictionaries = dictionaries or load_dictionaries(
        settings.data_dir,
        extra_trusted_domains=settings.trusted_domains,
        extra_suspicious_suffixes=settings.suspicious_suffixes,
    )
    return CredibilityEngine(
        extractor=LexicalSignalExtractor(dictionaries),
        detector=RiskPatternDetector(dictionaries),
        classifier=build_classifier(dictionaries, settings),
        fact_checker=FactCheckClient(settings=settings),
        trust_lookup=SourceTrustLookup(dictionaries),
        timeout=settings.analysis_timeout,
    )
