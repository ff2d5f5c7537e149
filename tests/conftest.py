import asyncio
import threading
import sys
from pathlib import Path

import pytest


# Ensure project src is on path for imports in tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for p in (ROOT, SRC):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from credscore.blender import CredibilityBlender  # noqa: E402
from credscore.classifier import ClassifierAdapter  # noqa: E402
from credscore.config import Settings  # noqa: E402
from credscore.dictionaries import load_dictionaries  # noqa: E402
from credscore.engine import CredibilityEngine  # noqa: E402
from credscore.lexical import LexicalSignalExtractor  # noqa: E402
from credscore.models import NoResultVerdict  # noqa: E402
from credscore.risk_patterns import RiskPatternDetector  # noqa: E402
from credscore.source_trust import SourceTrustLookup  # noqa: E402


class FixedClassifier:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    def confidence(self, text):
        self.calls += 1
        return self.value


class BlockingClassifier:
    """Holds its worker thread until released."""

    def __init__(self, value=0.9):
        self.value = value
        self.release = threading.Event()

    def confidence(self, text):
        self.release.wait(5)
        return self.value


class StubFactChecker:
    configured = True

    def __init__(self, verdict=None, delay=0.0):
        self.verdict = verdict or NoResultVerdict()
        self.delay = delay
        self.queries = []

    async def verify_claim(self, text):
        self.queries.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.verdict


@pytest.fixture(scope="session")
def dictionaries():
    return load_dictionaries()


@pytest.fixture
def offline_settings():
    return Settings(fact_check_api_key=None, classifier_backend="rules", analysis_timeout=5.0)


@pytest.fixture
def make_engine(dictionaries):
    def _make(classifier_value=0.5, verdict=None, *, classifier=None, fact_checker=None, timeout=5.0):
        return CredibilityEngine(
            extractor=LexicalSignalExtractor(dictionaries),
            detector=RiskPatternDetector(dictionaries),
            classifier=ClassifierAdapter(classifier or FixedClassifier(classifier_value)),
            fact_checker=fact_checker or StubFactChecker(verdict),
            trust_lookup=SourceTrustLookup(dictionaries),
            blender=CredibilityBlender(),
            timeout=timeout,
        )

    return _make
