"""
Fit service tests: blocking run, background worker and event logging.
"""

import dataclasses

import pytest

from relay_processor.config import JobConfig
from relay_processor.service import FitService
from relay_zone.config import FitConfig
from relay_zone.errors import DomainError, EmptyDatasetError


FAST = FitConfig(population_size=10, generations=2, rng_seed=1)


def events(caplog):
    return [
        r.structured["event"]
        for r in caplog.records
        if r.name == "relay_io.fit_service"
    ]


@pytest.fixture
def job(scenario_points, nested_settings):
    return JobConfig(
        job_id="unit_job",
        points=tuple(scenario_points),
        zones=nested_settings,
        fit_config=FAST,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# BLOCKING RUN
# ═══════════════════════════════════════════════════════════════════════════════

class TestRun:

    def test_result_message(self, job):
        result = FitService(job).run()

        assert result.job_id == "unit_job"
        assert list(result.zones) == [1, 2, 3]
        assert list(result.stats) == [1, 2, 3]
        assert result.zones[1].x_reach < result.zones[2].x_reach < result.zones[3].x_reach
        assert all(s.total_points == 3 for s in result.stats.values())
        assert result.elapsed_s >= 0

    def test_event_sequence(self, job, caplog):
        FitService(job).run()
        logged = events(caplog)

        assert logged[0] == "fit.started"
        assert logged[-1] == "fit.completed"
        assert logged.count("fit.zone.started") == 3
        assert logged.count("fit.zone.completed") == 3
        # Generation progress is DEBUG, filtered at INFO
        assert "fit.generation.completed" not in logged

    def test_debug_level_logs_generations(self, job, caplog):
        FitService(dataclasses.replace(job, log_level="DEBUG")).run()
        assert events(caplog).count("fit.generation.completed") == 3 * FAST.generations

    def test_zone_started_before_first_generation(self, job, caplog):
        FitService(dataclasses.replace(job, log_level="DEBUG")).run()

        per_zone = (
            ["fit.zone.started"]
            + ["fit.generation.completed"] * FAST.generations
            + ["fit.zone.completed"]
        )
        assert events(caplog) == ["fit.started"] + per_zone * 3 + ["fit.completed"]

    def test_empty_job_raises_and_logs(self, caplog):
        service = FitService(JobConfig(job_id="empty", fit_config=FAST))

        with pytest.raises(EmptyDatasetError):
            service.run()
        assert "error.empty_dataset" in events(caplog)
        assert "fit.completed" not in events(caplog)

    def test_baseline_stats_of_current_settings(self, job):
        result = FitService(job).run()
        # The nested settings already classify every point
        assert all(s.correct == 3 for s in result.baseline_stats.values())

    def test_degenerate_current_settings_raise_and_log(self, job, caplog):
        zones = dict(job.zones)
        zones[3] = zones[3].replace(a2_angle=90)
        service = FitService(dataclasses.replace(job, zones=zones))

        with pytest.raises(DomainError):
            service.run()
        assert "error.domain" in events(caplog)
        assert "fit.zone.started" not in events(caplog)


# ═══════════════════════════════════════════════════════════════════════════════
# BACKGROUND WORKER
# ═══════════════════════════════════════════════════════════════════════════════

class TestWorker:

    def test_start_wait_matches_run(self, job):
        expected = FitService(job).run()

        service = FitService(job)
        service.start()
        result = service.wait(timeout=60)

        assert result.zones == expected.zones
        assert not service.is_running

    def test_wait_without_start(self, job):
        with pytest.raises(RuntimeError):
            FitService(job).wait()

    def test_error_reaches_waiting_thread(self):
        service = FitService(JobConfig(job_id="empty", fit_config=FAST))
        service.start()
        with pytest.raises(EmptyDatasetError):
            service.wait(timeout=60)

    def test_restart_after_finish(self, job):
        service = FitService(job)
        service.start()
        first = service.wait(timeout=60)
        service.start()
        assert service.wait(timeout=60).zones == first.zones
