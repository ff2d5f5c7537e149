import httpx
import pytest

from credscore.config import Settings
from credscore.fact_check import FactCheckClient, FactChecker, normalize_response
from credscore.models import ErrorVerdict, NoResultVerdict, UnavailableVerdict, VerifiedVerdict


def _claims(rating="False", publisher="PolitiFact"):
    return {
        "claims": [
            {
                "text": "The moon landing was staged",
                "claimReview": [
                    {
                        "publisher": {"name": publisher, "site": "politifact.com"},
                        "url": "https://www.politifact.com/factchecks/moon",
                        "textualRating": rating,
                    },
                    {"publisher": {"name": "Other"}, "textualRating": "True"},
                ],
            },
            {"text": "second claim", "claimReview": [{"textualRating": "True"}]},
        ]
    }


def _client(handler, **overrides):
    settings = Settings(fact_check_api_key="test-key", **overrides)
    return FactCheckClient(settings=settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_missing_key_is_unavailable_without_calling_api():
    def handler(request):
        raise AssertionError("API must not be called without a key")

    client = FactCheckClient(
        settings=Settings(fact_check_api_key=None),
        transport=httpx.MockTransport(handler),
    )
    verdict = await client.verify_claim("anything")
    assert verdict == UnavailableVerdict(reason="not configured")
    assert not client.configured


@pytest.mark.asyncio
async def test_query_parameters():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json={})

    await _client(handler).verify_claim("Vaccines contain microchips")
    assert seen == {
        "query": "Vaccines contain microchips",
        "key": "test-key",
        "languageCode": "en-US",
        "pageSize": "5",
    }


@pytest.mark.asyncio
async def test_first_claim_first_review_is_used():
    verdict = await _client(lambda request: httpx.Response(200, json=_claims())).verify_claim("claim")
    assert isinstance(verdict, VerifiedVerdict)
    assert verdict.rating == "False"
    assert verdict.publisher == "PolitiFact"
    assert verdict.claim_text == "The moon landing was staged"
    assert verdict.review_url == "https://www.politifact.com/factchecks/moon"


@pytest.mark.asyncio
async def test_empty_claims_is_no_result():
    verdict = await _client(lambda request: httpx.Response(200, json={"claims": []})).verify_claim("claim")
    assert isinstance(verdict, NoResultVerdict)


@pytest.mark.asyncio
async def test_http_error_status_is_error_verdict():
    verdict = await _client(lambda request: httpx.Response(403, json={"error": "denied"})).verify_claim("claim")
    assert isinstance(verdict, ErrorVerdict)
    assert "403" in verdict.message


@pytest.mark.asyncio
async def test_unreachable_service_is_error_verdict():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    verdict = await _client(handler).verify_claim("claim")
    assert isinstance(verdict, ErrorVerdict)


@pytest.mark.asyncio
async def test_non_json_body_is_error_verdict():
    verdict = await _client(lambda request: httpx.Response(200, text="<html>oops</html>")).verify_claim("claim")
    assert isinstance(verdict, ErrorVerdict)


def test_normalize_malformed_payloads():
    assert isinstance(normalize_response(["not", "a", "dict"]), ErrorVerdict)
    assert isinstance(normalize_response({"claims": "nope"}), ErrorVerdict)
    assert isinstance(normalize_response({"claims": [{"claimReview": "nope"}]}), ErrorVerdict)
    assert isinstance(normalize_response({"claims": [{"claimReview": ["nope"]}]}), ErrorVerdict)


def test_normalize_unrated_is_no_result():
    assert isinstance(normalize_response({"claims": [{"text": "x"}]}), NoResultVerdict)
    assert isinstance(normalize_response(_claims(rating="")), NoResultVerdict)


def test_normalize_missing_publisher_defaults_to_unknown():
    payload = {"claims": [{"claimReview": [{"textualRating": "Mostly True"}]}]}
    verdict = normalize_response(payload)
    assert verdict == VerifiedVerdict(rating="Mostly True", publisher="Unknown")


@pytest.mark.parametrize("rating", ["Unrated", "NOT RATED", "No rating", " unrated "])
def test_normalize_unrated_labels_are_no_result(rating):
    assert isinstance(normalize_response(_claims(rating=rating)), NoResultVerdict)


def test_client_satisfies_fact_checker_protocol():
    client = FactCheckClient(settings=Settings(fact_check_api_key="k"))
    assert isinstance(client, FactChecker)
    assert client.configured
