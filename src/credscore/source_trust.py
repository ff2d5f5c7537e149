from __future__ import annotations

import re
from urllib.parse import urlparse

import tldextract

from .dictionaries import TermDictionaries
from .models import SourceVerification, TrustTier

# bundled public-suffix snapshot only, never fetched
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)

NON_ALNUM = re.compile(r"[^a-z0-9]+")

SUSPICIOUS_PATTERN_WARNING = "Suspicious domain pattern detected"
UNKNOWN_SOURCE_WARNING = "Source is not on the trusted outlet list"

STATUS_BY_TIER = {
    TrustTier.TRUSTED: "verified",
    TrustTier.SUSPICIOUS: "suspicious",
    TrustTier.UNKNOWN: "unverified",
}


def normalize_host(source: str) -> str:
    """Lowercased host for a URL, bare domain or host:port; empty if none."""
    value = source.strip().lower()
    if not value:
        return ""
    parsed = urlparse(value if "://" in value else f"http://{value}")
    host = (parsed.hostname or "").rstrip(".")
    if host.startswith("www."):
        host = host[4:]
    extracted = _EXTRACT(host)
    if extracted.domain and extracted.suffix:
        return ".".join(part for part in (extracted.subdomain, extracted.domain, extracted.suffix) if part)
    return host


def squash_name(name: str) -> str:
    """'The Hindu' -> 'thehindu'"""
    return NON_ALNUM.sub("", name.lower())


class SourceTrustLookup:
    """Static allow/deny matching of a source to a coarse trust tier."""

    def __init__(self, dictionaries: TermDictionaries) -> None:
        self._trusted_domains = frozenset(dictionaries.trusted_domains)
        self._trusted_outlets = frozenset(filter(None, map(squash_name, dictionaries.trusted_outlets)))
        self._suspicious_suffixes = dictionaries.suspicious_suffixes
        self._domain_order = dictionaries.trusted_domains

    @property
    def trusted_domains(self) -> tuple[str, ...]:
        return self._domain_order

    def trust_tier(self, source: str | None) -> TrustTier:
        if not source or not source.strip():
            return TrustTier.UNKNOWN
        if "." not in source:
            return self._outlet_tier(source)

        host = normalize_host(source)
        if not host:
            return TrustTier.UNKNOWN
        if self._is_trusted_host(host):
            return TrustTier.TRUSTED
        if self._is_suspicious_host(host):
            return TrustTier.SUSPICIOUS
        return TrustTier.UNKNOWN

    def verify_source(self, source: str) -> SourceVerification:
        tier = self.trust_tier(source)
        warnings = []
        if tier is TrustTier.SUSPICIOUS:
            warnings.append(SUSPICIOUS_PATTERN_WARNING)
        elif tier is TrustTier.UNKNOWN:
            warnings.append(UNKNOWN_SOURCE_WARNING)
        return SourceVerification(
            source=source,
            host=normalize_host(source) if "." in source else "",
            trust_tier=tier,
            status=STATUS_BY_TIER[tier],
            warnings=tuple(warnings),
        )

    def _is_trusted_host(self, host: str) -> bool:
        labels = host.split(".")
        return any(".".join(labels[i:]) in self._trusted_domains for i in range(len(labels)))

    def _is_suspicious_host(self, host: str) -> bool:
        return any(host.endswith(suffix) for suffix in self._suspicious_suffixes)

    def _outlet_tier(self, name: str) -> TrustTier:
        if squash_name(name) in self._trusted_outlets:
            return TrustTier.TRUSTED
        return TrustTier.UNKNOWN
