"""
Tests for the search cascade.

Scenarios follow the order of the tiers: keyword short-circuit, semantic
fallback, refined fallback, not found, and the failure paths between them.
"""

import httpx
import pytest

from server.api.services.SearchService import SearchService
from shared.clients.embed.gemini.EmbedClientGemini import EmbedClientGemini
from shared.helper.errors import DocumentStoreError, ServiceUnavailableError
from shared.models.config import SearchTuning
from shared.models.search import NOT_FOUND_SUGGESTIONS, NotFoundResponse, SearchResponse


@pytest.fixture
def service(helper_config, store, embed_client, llm_client):
    return SearchService(helper_config, store, embed_client, llm_client, tuning=SearchTuning())


# ---------------------------------------------------------------------------
# TIER 1: KEYWORD
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_keyword_hit_short_circuits(service, embed_client, llm_client):
    outcome = await service.do_search("scholarship form")

    assert isinstance(outcome, SearchResponse)
    assert outcome.search_type == "keyword"
    assert [r.id for r in outcome.results] == ["t-1"]
    assert outcome.results[0].collection == "Tender"
    assert outcome.results[0].match_type == "keyword"
    embed_client.do_embed.assert_not_awaited()
    llm_client.do_generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_keyword_results_have_normalised_dates(service):
    outcome = await service.do_search("  Health ")
    assert outcome.results[0].created_at == "2024-03-05T10:30:00.000Z"

    outcome = await service.do_search("holiday circular")
    assert outcome.results[0].created_at == "2024-02-01"


@pytest.mark.asyncio
async def test_download_links_when_storage_configured(helper_config, store, embed_client, llm_client, monkeypatch):
    monkeypatch.setenv("STORAGE_PUBLIC_URL", "https://files.example.org")
    service = SearchService(helper_config, store, embed_client, llm_client, tuning=SearchTuning())

    outcome = await service.do_search("staff nurse")

    assert outcome.results[0].download_url == (
        "https://files.example.org/storage/v1/object/public/Employment%20Notice/2024/staff_nurse_notice.pdf"
    )


@pytest.mark.asyncio
async def test_empty_query_is_rejected_before_store_access(service, store):
    with pytest.raises(ValueError):
        await service.do_search("   ")
    assert store.calls == []


@pytest.mark.asyncio
async def test_store_down_propagates_from_keyword_tier(service, store, embed_client):
    store.failing = set(store.get_collections())
    with pytest.raises(DocumentStoreError):
        await service.do_search("anything")
    embed_client.do_embed.assert_not_awaited()


# ---------------------------------------------------------------------------
# TIER 2: SEMANTIC
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_semantic_match_without_lexical_overlap(service, embed_client, llm_client):
    embed_client.do_embed.return_value = [0.0, 1.0, 0.0]

    outcome = await service.do_search("caregiver vacancies")

    assert outcome.search_type == "semantic"
    assert [r.id for r in outcome.results] == ["en-1"]
    assert outcome.results[0].similarity >= 0.7
    assert outcome.results[0].match_type == "semantic"
    embed_client.do_embed.assert_awaited_once_with("caregiver vacancies")
    llm_client.do_generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_embedding_failure_falls_through_to_refinement(service, embed_client, llm_client):
    embed_client.do_embed.side_effect = ServiceUnavailableError("gemini down")
    llm_client.do_generate.return_value = "education, scholarships"

    outcome = await service.do_search("student aid")

    assert outcome.search_type == "refined"
    llm_client.do_generate.assert_awaited_once()


@pytest.mark.asyncio
async def test_missing_api_key_skips_semantic_tier(helper_config, store, llm_client):
    def unexpected_request(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request may be sent without an API key")

    embed_client = EmbedClientGemini(helper_config)
    embed_client._client = httpx.AsyncClient(transport=httpx.MockTransport(unexpected_request))
    llm_client.do_generate.return_value = "holidays"
    service = SearchService(helper_config, store, embed_client, llm_client, tuning=SearchTuning())

    outcome = await service.do_search("days off")

    assert outcome.search_type == "refined"
    assert [r.id for r in outcome.results] == ["nc-1"]
    await embed_client.close()


# ---------------------------------------------------------------------------
# TIER 3: REFINEMENT
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_refined_search_matches_keywords_or_categories_exactly(service, llm_client, store):
    llm_client.do_generate.return_value = "education, circular, nursing jobs"

    outcome = await service.do_search("student aid")

    assert outcome.search_type == "refined"
    assert outcome.refined_keywords == ["education", "circular", "nursing jobs"]
    # "nursing jobs" is not an exact keyword of en-1
    assert [r.id for r in outcome.results] == ["nc-1", "t-1"]
    assert all(r.match_type == "refined" for r in outcome.results)


@pytest.mark.asyncio
async def test_refinement_samples_every_collection_without_embeddings(service, llm_client, store):
    await service.do_search("student aid")

    sample_calls = [c for c in store.calls if c[1] == {} and c[2] == 5]
    assert [c[0] for c in sample_calls] == ["EmploymentNotice", "NotificationCircular", "Tender"]
    prompt = llm_client.do_generate.await_args.args[0]
    assert "Recruitment of Staff Nurses" in prompt
    assert "Applications are invited" not in prompt


@pytest.mark.asyncio
async def test_refined_results_capped_across_collections(helper_config, make_store, embed_client, llm_client):
    records = {
        name: [{"_id": f"{name}-{i}", "keywords": ["roads"]} for i in range(12)]
        for name in ("EmploymentNotice", "NotificationCircular", "Tender")
    }
    store = make_store(records)
    llm_client.do_generate.return_value = "roads"
    service = SearchService(helper_config, store, embed_client, llm_client, tuning=SearchTuning())

    outcome = await service.do_search("highways")

    assert len(outcome.results) == 20
    assert {r.collection for r in outcome.results} == {"EmploymentNotice", "NotificationCircular"}


# ---------------------------------------------------------------------------
# NOT FOUND
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_not_found_when_every_tier_is_empty(service, llm_client):
    llm_client.do_generate.return_value = ""

    outcome = await service.do_search("zebra crossings")

    assert isinstance(outcome, NotFoundResponse)
    assert outcome.suggestions == list(NOT_FOUND_SUGGESTIONS)
    assert len(outcome.suggestions) == 3


@pytest.mark.asyncio
async def test_not_found_when_refined_keywords_match_nothing(service, llm_client):
    llm_client.do_generate.return_value = "zebra, crossing"
    assert isinstance(await service.do_search("zebra crossings"), NotFoundResponse)
