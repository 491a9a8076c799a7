"""Integration tests for the CORTEX assessment HTTP API.

Exercises every route through an in-process ASGI client, including the
422 mapping of engine validation errors.
"""

from typing import Any

import pytest
from fastapi import status
from httpx import AsyncClient

from cortex_assessment.api.errors import UNPROCESSABLE_CONTENT
from cortex_assessment.api.routes.evaluation import get_evaluation_service
from cortex_assessment.core.services import EvaluationService
from cortex_assessment.main import app
from tests.factories import answers_for_scores, profile_dict, uniform_answers

_PREFIX = "/api/v1"


def _regulated_request() -> dict[str, Any]:
    return {
        "context_profile": profile_dict(regulatory_intensity=4, safety_criticality=4),
        "pulse_responses": answers_for_scores({p: 1.0 for p in "CORTEX"}),
    }


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TestCatalog:
    """GET /catalog."""

    @pytest.mark.asyncio()
    async def test_catalog_contents(self, client: AsyncClient) -> None:
        response = await client.get(f"{_PREFIX}/catalog")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [pillar["key"] for pillar in data["pillars"]] == ["C", "O", "R", "T", "E", "X"]
        assert len(data["questions"]) == 18
        assert len(data["context_items"]) == 12
        assert data["answer_values"] == {"no": 0.0, "started": 0.25, "mostly": 0.5, "yes": 1.0}
        assert len(data["maturity_stages"]) == 4
        assert len(data["metrics"]) == 18

    @pytest.mark.asyncio()
    async def test_slider_items_have_scale_labels(self, client: AsyncClient) -> None:
        data = (await client.get(f"{_PREFIX}/catalog")).json()
        items = {item["key"]: item for item in data["context_items"]}
        assert items["regulatory_intensity"]["scale_labels"][4] == "Heavily Regulated"
        assert items["edge_operations"]["scale_labels"] == []


# ---------------------------------------------------------------------------
# Evaluations
# ---------------------------------------------------------------------------


class TestCreateEvaluation:
    """POST /evaluations."""

    @pytest.mark.asyncio()
    async def test_full_evaluation(self, client: AsyncClient) -> None:
        response = await client.post(f"{_PREFIX}/evaluations", json=_regulated_request())

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["pillar_scores"]["scores"] == {p: 1.0 for p in "CORTEX"}
        assert data["pillar_scores"]["is_complete"] is True
        assert [gate["id"] for gate in data["gates"]] == ["require_hitl", "assurance_cadence"]
        assert data["gates"][0]["thresholds"] == {
            "regulatory_intensity": "≥3",
            "safety_criticality": "≥3",
        }
        assert data["insights"][0]["type"] == "compliance"
        assert len(data["insights"]) <= 3
        assert len(data["priorities"]) <= 3
        assert len(data["priority_moves"]) == 6
        assert data["priority_moves"][0]["rank"] == 1
        assert data["content_tags"] == ["regulated", "high_safety"]
        assert list(data["value_overlay"]) == ["C", "O", "R", "T", "E", "X"]
        assert data["maturity"]["avg"] == pytest.approx(1.0)
        assert data["priority_levels"][0] == {"pillar": "C", "priority": 1}
        assert [level["priority"] for level in data["priority_levels"]] == [1, 2, 3, 4, 5, 6]
        assert data["gates"][0]["explain_labels"] == {
            "regulatory_intensity": "Heavily Regulated (4/4)",
            "safety_criticality": "Physical Safety (4/4)",
        }

    @pytest.mark.asyncio()
    async def test_partial_answers_accepted(self, client: AsyncClient) -> None:
        body = {"context_profile": profile_dict(), "pulse_responses": {"C1": 1, "C2": None}}
        response = await client.post(f"{_PREFIX}/evaluations", json=body)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["pillar_scores"]["scores"] == {}
        assert data["pillar_scores"]["answered_count"] == 1
        assert data["insights"] == []

    @pytest.mark.asyncio()
    async def test_invalid_profile_returns_422_with_fields(self, client: AsyncClient) -> None:
        body = {"context_profile": profile_dict(latency_edge=7), "pulse_responses": {}}
        response = await client.post(f"{_PREFIX}/evaluations", json=body)

        assert response.status_code == UNPROCESSABLE_CONTENT
        detail = response.json()["detail"]
        assert detail["error_code"] == "INVALID_CONTEXT_PROFILE"
        assert "latency_edge" in detail["fields"]

    @pytest.mark.asyncio()
    async def test_missing_profile_returns_422(self, client: AsyncClient) -> None:
        response = await client.post(f"{_PREFIX}/evaluations", json={"pulse_responses": {}})

        assert response.status_code == UNPROCESSABLE_CONTENT
        assert response.json()["detail"]["fields"] == {"context_profile": "missing"}

    @pytest.mark.asyncio()
    async def test_unknown_dimension_returns_422(self, client: AsyncClient) -> None:
        body = {"context_profile": profile_dict(competitive_speed=2), "pulse_responses": {}}
        response = await client.post(f"{_PREFIX}/evaluations", json=body)

        assert response.status_code == UNPROCESSABLE_CONTENT
        assert response.json()["detail"]["error_code"] == "UNKNOWN_CONTEXT_DIMENSION"

    @pytest.mark.asyncio()
    async def test_invalid_answer_returns_422(self, client: AsyncClient) -> None:
        body = {"context_profile": profile_dict(), "pulse_responses": {"C1": 0.75}}
        response = await client.post(f"{_PREFIX}/evaluations", json=body)

        assert response.status_code == UNPROCESSABLE_CONTENT
        assert response.json()["detail"]["error_code"] == "INVALID_PULSE_ANSWER"

    @pytest.mark.asyncio()
    async def test_service_override_caps(self, client: AsyncClient) -> None:
        app.dependency_overrides[get_evaluation_service] = lambda: EvaluationService(
            insight_limit=1, priority_limit=1, priority_move_limit=1
        )
        response = await client.post(f"{_PREFIX}/evaluations", json=_regulated_request())

        data = response.json()
        assert len(data["insights"]) == 1
        assert len(data["priorities"]) == 1
        assert len(data["priority_moves"]) == 1


# ---------------------------------------------------------------------------
# Pillar scores and gates
# ---------------------------------------------------------------------------


class TestPillarScores:
    """POST /pillar-scores."""

    @pytest.mark.asyncio()
    async def test_scores_complete_answers(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{_PREFIX}/pillar-scores", json={"pulse_responses": uniform_answers(0.5)}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["scores"] == {p: 1.5 for p in "CORTEX"}
        assert data["stages"]["C"] == "Emerging"
        assert data["is_complete"] is True

    @pytest.mark.asyncio()
    async def test_unknown_question_returns_422(self, client: AsyncClient) -> None:
        response = await client.post(f"{_PREFIX}/pillar-scores", json={"pulse_responses": {"Z1": 1}})

        assert response.status_code == UNPROCESSABLE_CONTENT
        assert response.json()["detail"]["error_code"] == "UNKNOWN_PULSE_QUESTION"


class TestGates:
    """POST /gates."""

    @pytest.mark.asyncio()
    async def test_gates_for_profile(self, client: AsyncClient) -> None:
        body = {"context_profile": profile_dict(build_readiness=0, edge_operations=True)}
        response = await client.post(f"{_PREFIX}/gates", json=body)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 2
        assert [gate["id"] for gate in data["gates"]] == [
            "build_readiness_gate",
            "edge_operations_security",
        ]
        assert data["gates"][1]["explain"] == {"edge_operations": True}
        assert data["gates"][1]["thresholds"] == {"edge_operations": "True"}
        assert data["gates"][1]["explain_labels"] == {"edge_operations": "Yes"}
        assert data["gates"][0]["explain_labels"] == {"build_readiness": "None (0/4)"}
        assert data["gates"][0]["status"] == "unmet"

    @pytest.mark.asyncio()
    async def test_no_gates(self, client: AsyncClient) -> None:
        response = await client.post(f"{_PREFIX}/gates", json={"context_profile": profile_dict()})
        assert response.json() == {"gates": [], "total": 0}


# ---------------------------------------------------------------------------
# Value overlay
# ---------------------------------------------------------------------------


class TestValueOverlay:
    """/value-overlay/*."""

    @pytest.mark.asyncio()
    async def test_defaults_with_explanations(self, client: AsyncClient) -> None:
        body = {"context_profile": profile_dict(scale_throughput=4, finops_priority=3)}
        response = await client.post(f"{_PREFIX}/value-overlay/defaults", json=body)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["overlay"]["O"]["metric_id"] == "o_latency_availability"
        assert data["overlay"]["O"]["baseline"] is None
        assert data["overlay"]["X"]["cadence"] == "quarterly"
        assert data["explanations"]["O"] == "Selected due to high scale requirements"
        assert data["explanations"]["E"] == "Selected due to high FinOps priority"
        assert data["explanations"]["C"] is None

    @pytest.mark.asyncio()
    async def test_defaults_invalid_profile(self, client: AsyncClient) -> None:
        response = await client.post(f"{_PREFIX}/value-overlay/defaults", json={})
        assert response.status_code == UNPROCESSABLE_CONTENT

    @pytest.mark.asyncio()
    async def test_switch_metric(self, client: AsyncClient) -> None:
        overlay = (
            await client.post(
                f"{_PREFIX}/value-overlay/defaults", json={"context_profile": profile_dict()}
            )
        ).json()["overlay"]
        entry = {**overlay["R"], "baseline": 12.0}

        response = await client.post(
            f"{_PREFIX}/value-overlay/switch",
            json={"entry": entry, "metric_id": "r_audit_pass_rate"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["metric_id"] == "r_audit_pass_rate"
        assert data["baseline"] is None

    @pytest.mark.asyncio()
    async def test_switch_to_other_pillar_returns_422(self, client: AsyncClient) -> None:
        overlay = (
            await client.post(
                f"{_PREFIX}/value-overlay/defaults", json={"context_profile": profile_dict()}
            )
        ).json()["overlay"]

        response = await client.post(
            f"{_PREFIX}/value-overlay/switch",
            json={"entry": overlay["R"], "metric_id": "t_adoption"},
        )

        assert response.status_code == UNPROCESSABLE_CONTENT
        assert response.json()["detail"]["error_code"] == "INVALID_OVERLAY_EDIT"

    @pytest.mark.asyncio()
    async def test_update_only_sent_fields(self, client: AsyncClient) -> None:
        overlay = (
            await client.post(
                f"{_PREFIX}/value-overlay/defaults", json={"context_profile": profile_dict()}
            )
        ).json()["overlay"]
        entry = {**overlay["T"], "baseline": 20.0}

        response = await client.post(
            f"{_PREFIX}/value-overlay/update",
            json={"entry": entry, "target": 60.0, "cadence": "quarterly"},
        )

        data = response.json()
        assert data["baseline"] == 20.0
        assert data["target"] == 60.0
        assert data["cadence"] == "quarterly"

    @pytest.mark.asyncio()
    async def test_update_invalid_cadence_returns_422(self, client: AsyncClient) -> None:
        overlay = (
            await client.post(
                f"{_PREFIX}/value-overlay/defaults", json={"context_profile": profile_dict()}
            )
        ).json()["overlay"]

        response = await client.post(
            f"{_PREFIX}/value-overlay/update",
            json={"entry": overlay["T"], "cadence": "daily"},
        )

        assert response.status_code == UNPROCESSABLE_CONTENT


    @pytest.mark.asyncio()
    async def test_pillar_metrics(self, client: AsyncClient) -> None:
        response = await client.get(f"{_PREFIX}/value-overlay/metrics/O")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["default_metric_id"] == "o_value_gate_pass"
        assert [metric["metric_id"] for metric in data["metrics"]] == [
            "o_value_gate_pass",
            "o_latency_availability",
            "o_drift_incidents",
        ]

    @pytest.mark.asyncio()
    async def test_pillar_metrics_unknown_pillar(self, client: AsyncClient) -> None:
        response = await client.get(f"{_PREFIX}/value-overlay/metrics/Z")

        assert response.status_code == UNPROCESSABLE_CONTENT
        assert response.json()["detail"]["error_code"] == "UNKNOWN_PILLAR"


# ---------------------------------------------------------------------------
# Implementation guides
# ---------------------------------------------------------------------------


class TestGuides:
    """POST /guides."""

    @pytest.mark.asyncio()
    async def test_guides_for_weak_pillar(self, client: AsyncClient) -> None:
        body = {
            "context_profile": profile_dict(),
            "pulse_responses": {"R1": 0, "R2": 0, "R3": 0},
            "pillar": "R",
        }
        response = await client.post(f"{_PREFIX}/guides", json=body)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["pillar_score"] == 0.0
        assert data["total_evaluated"] == 15
        assert len(data["guides"]) == 5
        top = data["guides"][0]
        assert top["id"] == "pillar_r_deep"
        assert top["explain"]["gap_boost"] == pytest.approx(1.2)
        assert top["explanation"].startswith("Selected because it addresses weak Risk")

    @pytest.mark.asyncio()
    async def test_unknown_pillar_returns_422(self, client: AsyncClient) -> None:
        body = {"context_profile": profile_dict(), "pulse_responses": {}, "pillar": "Z"}
        response = await client.post(f"{_PREFIX}/guides", json=body)

        assert response.status_code == UNPROCESSABLE_CONTENT
        assert response.json()["detail"]["error_code"] == "UNKNOWN_PILLAR"


class TestHealth:
    @pytest.mark.asyncio()
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "ok"
