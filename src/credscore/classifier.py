from __future__ import annotations

import asyncio
import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .config import Settings, get_settings
from .dictionaries import TermDictionaries
from .errors import ClassifierError

logger = logging.getLogger(__name__)

BUSY = "internal classifier busy"


@runtime_checkable
class ConfidenceClassifier(Protocol):
    """Anything that maps text to P(fake) in [0, 1]."""

    def confidence(self, text: str) -> float:
        ...


@dataclass(frozen=True)
class ClassifierUnavailable:
    """Returned instead of a score when the classifier could not run."""

    reason: str = "internal classifier failed"


class RuleBasedClassifier:
    """Dictionary stand-in: sensationalist wording raises P(fake), sourcing language lowers it."""

    PRIOR = 0.5
    STEP = 0.1

    def __init__(self, dictionaries: TermDictionaries) -> None:
        self._sensationalist = dictionaries.sensationalist_words
        self._credible = dictionaries.credibility_indicators

    def confidence(self, text: str) -> float:
        lowered = text.lower()
        score = self.PRIOR
        score += self.STEP * sum(1 for word in self._sensationalist if word in lowered)
        score -= self.STEP * sum(1 for phrase in self._credible if phrase in lowered)
        return round(max(0.0, min(1.0, score)), 3)


class TransformerClassifier:
    """
    Hugging Face text-classification model loaded lazily on first use.
    Any load or inference problem is raised as ClassifierError.
    """

    def __init__(self, *, model_name: str | None = None, fake_label: str | None = None) -> None:
        if model_name is None or fake_label is None:
            settings = get_settings()
            model_name = model_name or settings.classifier_model_name
            fake_label = fake_label or settings.classifier_fake_label
        self._model_name = model_name
        self._fake_label = fake_label.lower()
        self._pipeline: Any = None
        self._lock = threading.Lock()

    def confidence(self, text: str) -> float:
        classifier = self._ensure_pipeline()
        try:
            outputs = classifier(text, truncation=True, top_k=None)
        except Exception as exc:  # pragma: no cover - depends on runtime
            raise ClassifierError(f"Inference failed: {exc}") from exc
        # batched calls nest one more level
        if outputs and isinstance(outputs[0], list):
            outputs = outputs[0]
        for item in outputs:
            if str(item.get("label", "")).lower() == self._fake_label:
                return float(item["score"])
        raise ClassifierError(f"Model produced no '{self._fake_label}' label")

    def _ensure_pipeline(self) -> Any:
        with self._lock:
            if self._pipeline is not None:
                return self._pipeline
            try:
                from transformers import pipeline  # type: ignore
            except ImportError as exc:
                raise ClassifierError(f"transformers not available: {exc}") from exc
            try:
                self._pipeline = pipeline("text-classification", model=self._model_name)
            except Exception as exc:  # pragma: no cover - depends on runtime
                raise ClassifierError(f"Failed to load {self._model_name}: {exc}") from exc
            logger.info("Loaded classifier model %s", self._model_name)
            return self._pipeline


class ClassifierAdapter:
    """
    Runs a ConfidenceClassifier off the event loop and absorbs its failures.

    A timed-out request cannot stop its worker thread, so the adapter counts
    inferences still running and reports itself busy once every worker is taken.
    """

    def __init__(self, classifier: ConfidenceClassifier, *, max_workers: int = 1) -> None:
        self._classifier = classifier
        self._max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._in_flight = 0
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return type(self._classifier).__name__

    @property
    def in_flight(self) -> int:
        return self._in_flight

    async def confidence(self, text: str) -> float | ClassifierUnavailable:
        if not self._reserve():
            logger.warning("Classifier %s busy: %d inference(s) still running", self.name, self._max_workers)
            return ClassifierUnavailable(reason=BUSY)
        try:
            future = self._executor.submit(self._classifier.confidence, text)
        except RuntimeError as exc:
            self._release()
            logger.error("Classifier %s could not be scheduled: %s", self.name, exc)
            return ClassifierUnavailable()
        # runs on completion or cancellation, from whichever thread finishes it
        future.add_done_callback(lambda _: self._release())

        try:
            value = await asyncio.wrap_future(future)
            value = float(value)
        except Exception as exc:
            logger.error("Classifier %s failed: %s", self.name, exc)
            return ClassifierUnavailable()
        if not math.isfinite(value):
            logger.error("Classifier %s returned non-finite confidence %r", self.name, value)
            return ClassifierUnavailable()
        return max(0.0, min(1.0, value))

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)

    def _reserve(self) -> bool:
        with self._lock:
            if self._in_flight >= self._max_workers:
                return False
            self._in_flight += 1
            return True

    def _release(self) -> None:
        with self._lock:
            self._in_flight -= 1


def build_classifier(dictionaries: TermDictionaries, settings: Settings | None = None) -> ClassifierAdapter:
    settings = settings or get_settings()
    backend = settings.classifier_backend.lower()
    if backend == "transformer":
        classifier: ConfidenceClassifier = TransformerClassifier(
            model_name=settings.classifier_model_name,
            fake_label=settings.classifier_fake_label,
        )
    elif backend == "rules":
        classifier = RuleBasedClassifier(dictionaries)
    else:
        raise ValueError(f"Unknown classifier backend: {settings.classifier_backend}")
    return ClassifierAdapter(classifier, max_workers=settings.classifier_max_workers)
