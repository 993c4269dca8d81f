"""Tests for the message-based analysis worker.

Async code is driven with ``asyncio.run`` so no pytest plugin is needed.
"""

from __future__ import annotations

import asyncio

import pytest

from contentmesh.analysis.models import Document, HealthResult
from contentmesh.worker.messages import (
    AnalyzeHealthRequest,
    BuildMeshRequest,
    HealthResultResponse,
    MeshResultResponse,
    MessageType,
    message_from_dict,
)
from contentmesh.worker.worker import AnalysisWorker, analyze_documents, handle_message

SITE = "https://example.com"
_DOCS = [
    Document(i, f"Post number {i}", f"{SITE}/post-{i}/", f"post-{i}", "2026-10-01", f"<p>{'word ' * i * 100}</p>")
    for i in range(1, 9)
]


# ---------------------------------------------------------------------------
# handle_message
# ---------------------------------------------------------------------------

class TestHandleMessage:
    def test_health_request(self) -> None:
        response = handle_message(AnalyzeHealthRequest(id=5, content="<p>hi</p>", modified="2026-10-01", site_url=SITE))
        assert isinstance(response, HealthResultResponse)
        assert response.type is MessageType.HEALTH_RESULT
        assert response.result.id == 5

    def test_mesh_request_keeps_order(self) -> None:
        response = handle_message(BuildMeshRequest(documents=tuple(_DOCS)))
        assert isinstance(response, MeshResultResponse)
        assert response.type is MessageType.MESH_RESULT
        assert [n.id for n in response.nodes] == [d.id for d in _DOCS]

    def test_unknown_request_raises(self) -> None:
        with pytest.raises(ValueError):
            handle_message(object())  # type: ignore[arg-type]

    def test_request_tags(self) -> None:
        assert AnalyzeHealthRequest(1, "", "", SITE).type is MessageType.ANALYZE_HEALTH
        assert BuildMeshRequest(()).type is MessageType.BUILD_MESH

    def test_response_to_dict(self) -> None:
        response = handle_message(BuildMeshRequest(documents=(_DOCS[0],)))
        data = response.to_dict()
        assert data["type"] == "MESH_RESULT"
        assert data["nodes"][0]["id"] == 1


# ---------------------------------------------------------------------------
# message_from_dict
# ---------------------------------------------------------------------------

class TestMessageFromDict:
    def test_health(self) -> None:
        request = message_from_dict(
            {"type": "ANALYZE_HEALTH", "payload": {"id": "3", "content": "x", "modified": "2026-01-01", "site_url": SITE}}
        )
        assert request == AnalyzeHealthRequest(id=3, content="x", modified="2026-01-01", site_url=SITE)

    def test_mesh(self) -> None:
        request = message_from_dict(
            {"type": "BUILD_MESH", "payload": {"posts": [{"id": 1, "title": {"rendered": "A"}, "link": "/a", "slug": "a"}]}}
        )
        assert isinstance(request, BuildMeshRequest)
        assert request.documents[0].title == "A"

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "NOPE"},
            {"type": "ANALYZE_HEALTH", "payload": {}},
            {"type": "BUILD_MESH", "payload": {"posts": "not a list"}},
        ],
    )
    def test_invalid(self, data) -> None:
        with pytest.raises(ValueError):
            message_from_dict(data)


# ---------------------------------------------------------------------------
# AnalysisWorker
# ---------------------------------------------------------------------------

class TestAnalysisWorker:
    def test_submit_returns_tagged_responses(self) -> None:
        async def run():
            async with AnalysisWorker(concurrency=2) as worker:
                health = await worker.submit(AnalyzeHealthRequest(1, "<p>x</p>", "2026-10-01", SITE))
                mesh = await worker.submit(BuildMeshRequest(tuple(_DOCS)))
            return health, mesh

        health, mesh = asyncio.run(run())
        assert health.type is MessageType.HEALTH_RESULT
        assert mesh.type is MessageType.MESH_RESULT
        assert len(mesh.nodes) == len(_DOCS)

    def test_concurrent_requests_match_direct_calls(self) -> None:
        requests = [AnalyzeHealthRequest(d.id, d.content, d.modified, SITE) for d in _DOCS]

        async def run():
            async with AnalysisWorker(concurrency=3) as worker:
                return await asyncio.gather(*(worker.submit(r) for r in requests))

        responses = asyncio.run(run())
        assert [r.result.id for r in responses] == [d.id for d in _DOCS]
        for request, response in zip(requests, responses):
            expected = handle_message(request).result
            assert response.result.metrics.word_count == expected.metrics.word_count
            assert response.result.seo_score == expected.seo_score

    def test_errors_propagate_to_the_caller_only(self) -> None:
        async def run():
            async with AnalysisWorker(concurrency=1) as worker:
                with pytest.raises(ValueError):
                    await worker.submit(object())  # type: ignore[arg-type]
                # The worker keeps serving after a failed request.
                return await worker.submit(AnalyzeHealthRequest(2, "", "2026-10-01", SITE))

        assert asyncio.run(run()).result.id == 2

    def test_submit_before_start_raises(self) -> None:
        async def run():
            await AnalysisWorker().submit(AnalyzeHealthRequest(1, "", "", SITE))

        with pytest.raises(RuntimeError):
            asyncio.run(run())

    def test_close_is_idempotent(self) -> None:
        async def run():
            worker = AnalysisWorker(concurrency=1)
            await worker.start()
            assert worker.running
            await worker.close()
            await worker.close()
            return worker.running

        assert asyncio.run(run()) is False


class TestAnalyzeDocuments:
    def test_results_in_input_order(self) -> None:
        results = asyncio.run(analyze_documents(list(reversed(_DOCS)), SITE, concurrency=4))
        assert all(isinstance(r, HealthResult) for r in results)
        assert [r.id for r in results] == [d.id for d in reversed(_DOCS)]

    def test_empty(self) -> None:
        assert asyncio.run(analyze_documents([], SITE)) == []
