"""
API Contract Test Module

Exercises the FastAPI routers through TestClient with the historical data
source replaced via dependency_overrides.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from cyclescope.core.dependencies import get_data_source
from cyclescope.main import app


@pytest.fixture
def client(data_source) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_data_source] = lambda: data_source
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def history_json(history):
    return [point.model_dump(mode="json") for point in history]


class TestRootEndpoints:

    def test_health(self, client) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client) -> None:
        body = client.get("/").json()
        assert body["docs"] == "/docs"
        assert "version" in body


class TestCycleEndpoints:

    def test_detect(self, client, emami_input) -> None:
        response = client.post("/cycles/detect", json=emami_input.model_dump(mode="json"))

        assert response.status_code == 200
        body = response.json()
        assert body["currentPhase"] == "expansion"
        assert body["phaseStrength"] == "moderate"
        assert body["indicators"]["growthScore"] == 70.0
        assert body["trends"]["phaseTransitions"] == []

    def test_detect_rejects_missing_company(self, client, emami_history) -> None:
        response = client.post("/cycles/detect", json={"historicalData": history_json(emami_history)})
        assert response.status_code == 422

    def test_indicators(self, client, emami_history) -> None:
        response = client.post(
            "/cycles/indicators",
            json={"historicalData": history_json(emami_history), "companyType": "non_finance"},
        )

        assert response.status_code == 200
        assert response.json()["sectorSpecificScore"] == 85.0

    def test_classify(self, client, bank_history) -> None:
        response = client.post(
            "/cycles/classify",
            json={"historicalData": history_json(bank_history), "companyType": "finance"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["currentPhase"] == "expansion"
        assert body["phaseStrength"] == "strong"

    def test_company_detection(self, client) -> None:
        response = client.get(
            "/cycles/companies/sample-industries",
            params={"name": "Sample Industries", "sector": "Manufacturing", "type": "non_finance"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["company"] == "Sample Industries"
        assert body["currentPhase"] == "stable"
        assert body["trends"]["phaseTransitions"][0]["transitionYear"] == "2024"

    def test_unknown_company_is_404(self, client) -> None:
        response = client.get(
            "/cycles/companies/missing",
            params={"name": "Missing", "sector": "FMCG", "type": "non_finance"},
        )
        assert response.status_code == 404

    def test_company_without_history_is_422(self, client) -> None:
        response = client.get(
            "/cycles/companies/new-listing",
            params={"name": "New Listing", "sector": "FMCG", "type": "non_finance"},
        )
        assert response.status_code == 422
        assert "new-listing" in response.json()["detail"]

    def test_company_type_is_required(self, client) -> None:
        response = client.get("/cycles/companies/emami", params={"name": "Emami Ltd", "sector": "FMCG"})
        assert response.status_code == 422


class TestValidationEndpoints:

    def test_accuracy_uses_configured_tolerances(self, client, accurate_ratios, emami_expected_ratios) -> None:
        response = client.post(
            "/validation/accuracy",
            json={"actualRatios": accurate_ratios, "expectedRatios": emami_expected_ratios},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["overallAccuracy"] == 1.0
        assert body["validatedCount"] == 3

    def test_accuracy_reports_missing_metrics(self, client, emami_expected_ratios) -> None:
        response = client.post(
            "/validation/accuracy",
            json={"actualRatios": {"roe": None}, "expectedRatios": emami_expected_ratios},
        )

        body = response.json()
        assert len(body["criticalErrors"]) == 3
        assert body["criticalErrors"][0]["type"] == "missing_metric"

    def test_cross_source(self, client) -> None:
        sources = [
            {"source": f"vendor-{i}", "company": "Emami Ltd", "ratios": {"roe": 0.2}}
            for i in range(5)
        ]
        sources.append({"source": "stale-feed", "company": "Emami Ltd", "ratios": {"roe": 0.5}})

        response = client.post("/validation/cross-source", json=sources)

        assert response.status_code == 200
        assert [outlier["source"] for outlier in response.json()["outliers"]] == ["stale-feed"]

    def test_report(self, client, emami_benchmarks) -> None:
        response = client.post(
            "/validation/report",
            json={"targets": [{"name": "Emami", "target": emami_benchmarks.model_dump(mode="json")}]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["companiesValidated"] == 1
        assert body["totalRatiosValidated"] == 3
        assert body["performanceBenchmarksMet"] is True

    def test_report_computes_ratios_from_statements(self, client, emami_benchmarks, emami_statements) -> None:
        target = emami_benchmarks.model_dump(mode="json")
        target["actualRatios"] = None
        target["financialData"] = [statement.model_dump(mode="json") for statement in emami_statements]

        response = client.post("/validation/report", json={"targets": [{"name": "Emami", "target": target}]})

        assert response.status_code == 200
        assert response.json()["summary"]["accuracy"] == pytest.approx(100.0)

    def test_report_without_targets_is_400(self, client) -> None:
        response = client.post("/validation/report", json={"targets": []})
        assert response.status_code == 400

    def test_benchmarks(self, client, monkeypatch) -> None:
        monkeypatch.setenv("BENCHMARK_BATCH_SIZE", "2")
        response = client.post(
            "/validation/benchmarks",
            json={"cycleDetectionTargetMs": 60000, "batchDetectionTargetMs": 600000},
        )

        assert response.status_code == 200
        assert response.json()["overallAccuracy"] == 1.0


class TestRatioEndpoints:

    def test_calculate(self, client, manufacturer_statement) -> None:
        response = client.post(
            "/ratios/calculate",
            json={
                "financialData": [manufacturer_statement.model_dump(mode="json")],
                "companyInfo": {"name": "Sample Industries", "sector": "Manufacturing", "type": "non_finance"},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["finance"] is None
        assert body["nonFinance"]["operatingProfitMargin"] == pytest.approx(0.2)
        assert body["nonFinance"]["debtorDays"] == pytest.approx(40.0)

    def test_calculate_without_statements_is_400(self, client) -> None:
        response = client.post(
            "/ratios/calculate",
            json={
                "financialData": [],
                "companyInfo": {"name": "New Listing", "sector": "FMCG", "type": "non_finance"},
            },
        )
        assert response.status_code == 400
