"""
Tests for the advice service.
"""

import pytest

from server.api.services.AdviceService import AdviceService
from shared.helper.errors import ServiceUnavailableError


@pytest.mark.asyncio
async def test_suggestions_are_cleaned_and_deduplicated(helper_config, llm_client):
    llm_client.do_generate.return_value = "1. road tenders\n2) highway works\n\n- road tenders\n* bridge repair\n• culverts"

    advice = await AdviceService(helper_config, llm_client).do_advise("  roads ")

    assert advice.suggestions == ["road tenders", "highway works", "bridge repair", "culverts"]
    assert advice.message == (
        "Here are the suggested queries:\n* road tenders\n* highway works\n* bridge repair\n* culverts"
    )
    assert '"roads"' in llm_client.do_generate.await_args.args[0]


@pytest.mark.asyncio
async def test_suggestions_are_capped(helper_config, llm_client):
    llm_client.do_generate.return_value = "\n".join(f"query {i}" for i in range(15))

    advice = await AdviceService(helper_config, llm_client).do_advise("roads")

    assert advice.suggestions == [f"query {i}" for i in range(10)]


@pytest.mark.asyncio
async def test_empty_query_is_rejected(helper_config, llm_client):
    with pytest.raises(ValueError):
        await AdviceService(helper_config, llm_client).do_advise("")
    llm_client.do_generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_model_errors_propagate(helper_config, llm_client):
    llm_client.do_generate.side_effect = ServiceUnavailableError("down")
    with pytest.raises(ServiceUnavailableError):
        await AdviceService(helper_config, llm_client).do_advise("roads")
