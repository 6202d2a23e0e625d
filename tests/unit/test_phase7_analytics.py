"""
Unit tests for Phase 7: Deployment Analytics and Metrics.

Tests cover:
- Footprint estimation
- Deployment recording with fallbacks
- Summary, per-plan and per-region views
- Prometheus metrics export
"""

import pytest

from greenops.monitoring.analytics import AnalyticsTracker, estimate_footprint
from greenops.monitoring.metrics import PlannerMetrics


class TestEstimateFootprint:
    """Tests for estimate_footprint."""

    def test_basic(self):
        footprint = estimate_footprint(2, carbon_intensity=210, cost_per_replica=0.26)

        assert footprint.replicas == 2
        assert footprint.energy_kwh == pytest.approx(0.2)
        assert footprint.co2_kg == pytest.approx(0.042)
        assert footprint.cost_usd == pytest.approx(0.52)
        assert footprint.cost_inr == pytest.approx(44.2)

    @pytest.mark.parametrize("replicas", [None, 0, -3, "2", 1.5])
    def test_invalid_replicas_count_as_one(self, replicas):
        footprint = estimate_footprint(replicas, carbon_intensity=500, cost_per_replica=0.25)

        assert footprint.replicas == 1
        assert footprint.co2_kg == pytest.approx(0.05)

    def test_to_dict_keys(self):
        data = estimate_footprint(1, 100, 0.1).to_dict()

        assert set(data) == {
            "estimatedHourlyEnergyKwh",
            "estimatedHourlyCO2Kg",
            "estimatedHourlyCostUsd",
            "estimatedHourlyCostInr",
        }


class TestAnalyticsTracker:
    """Tests for AnalyticsTracker."""

    def _populate(self, tracker: AnalyticsTracker) -> None:
        tracker.record("max-green", "FRA1", 2, 210, region_label="Frankfurt, Germany")
        tracker.record("budget", "BLR1", None, None)
        tracker.record("max-green", "XYZ9", 1, 300)

    def test_empty_summary(self, tracker):
        summary = tracker.summary()

        assert summary.total_deployments == 0
        assert summary.average_carbon_intensity == 0.0
        assert summary.savings_usd == 0.0
        assert tracker.report()["deployments"] == []

    def test_record_fallbacks(self, tracker, fixed_now):
        record = tracker.record("budget", "XYZ9", None, None)

        assert record.replicas == 1
        assert record.carbon_intensity == 500.0
        assert record.region_label == "XYZ9"
        assert record.footprint.cost_usd == pytest.approx(0.25)
        assert record.timestamp == fixed_now
        assert len(tracker) == 1

    def test_catalog_cost_used(self, tracker):
        record = tracker.record("budget", "BLR1", 3, 650)

        assert record.footprint.cost_usd == pytest.approx(0.54)

    def test_summary(self, tracker):
        self._populate(tracker)

        summary = tracker.summary()

        assert summary.total_deployments == 3
        assert summary.total_co2_kg == pytest.approx(0.122)
        assert summary.average_carbon_intensity == pytest.approx(1010 / 3)
        assert summary.total_cost_usd == pytest.approx(0.95)
        assert summary.baseline_cost_usd == pytest.approx(1.08)
        assert summary.savings_usd == pytest.approx(0.13)
        assert summary.savings_inr == pytest.approx(0.13 * 85)

    def test_by_plan(self, tracker):
        self._populate(tracker)

        groups = tracker.by_plan()

        assert [g.key for g in groups] == ["max-green", "budget"]
        assert groups[0].deployments == 2
        assert groups[0].avg_ci == pytest.approx(255.0)

    def test_by_region(self, tracker):
        self._populate(tracker)

        groups = tracker.by_region()

        assert [g.key for g in groups] == ["FRA1", "BLR1", "XYZ9"]
        assert groups[0].label == "Frankfurt, Germany"

    def test_report_shape(self, tracker):
        self._populate(tracker)

        report = tracker.report()

        assert set(report) == {"summary", "byPlan", "byRegion", "deployments", "currency"}
        assert report["summary"]["totalDeployments"] == 3
        assert report["byPlan"][0]["planId"] == "max-green"
        assert report["byRegion"][0]["region"] == "FRA1"
        assert report["byRegion"][0]["regionLabel"] == "Frankfurt, Germany"
        assert report["deployments"][0]["planId"] == "max-green"
        assert report["deployments"][0]["estimatedHourlyCO2Kg"] == pytest.approx(0.042)
        assert report["currency"] == {"usdToInr": 85.0}

    def test_custom_rates(self, catalog):
        tracker = AnalyticsTracker(catalog, usd_to_inr=80, power_kw_per_replica=0.2)

        record = tracker.record("balanced", "LON1", 1, 250)

        assert record.footprint.energy_kwh == pytest.approx(0.2)
        assert record.footprint.co2_kg == pytest.approx(0.05)
        assert record.footprint.cost_inr == pytest.approx(19.2)


class TestPlannerMetrics:
    """Tests for PlannerMetrics."""

    def test_counters(self, metrics):
        metrics.record_plan("balanced", "LON1")
        metrics.record_plan("balanced", "LON1")
        metrics.record_deployment("dry-run")

        assert metrics.get_value("plans_total", {"strategy": "balanced", "region": "LON1"}) == 2
        assert metrics.get_value("deployments_total", {"status": "dry-run"}) == 1
        assert metrics.get_value("deployments_total", {"status": "ok"}) == 0

    def test_duration(self, metrics):
        metrics.record_planning_request("ok", 0.02)

        assert metrics.get_value("planning_duration_seconds_count") == 1

    def test_registries_are_isolated(self):
        first = PlannerMetrics()
        second = PlannerMetrics()

        first.record_carbon_reading("live")

        assert second.get_value("carbon_readings_total", {"source": "live"}) == 0

    def test_export(self, metrics):
        metrics.record_carbon_reading("fallback-static")

        text = metrics.export().decode()

        assert 'greenops_carbon_readings_total{source="fallback-static"} 1.0' in text
