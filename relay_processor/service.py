"""
Fit Service - runs a zone fitting job end to end.

This module provides the FitService class which orchestrates a job:
job validation, sequential zone fitting, classification statistics and the
result message.

Threading Model:
- run() fits synchronously on the calling thread
- start() runs the same job on one daemon worker thread; wait() joins it
- A running fit is atomic: there is no mid-run cancellation
"""

import logging
import threading
import time
from typing import Optional

from relay_io.logging import LogEvent, StructuredLogger
from relay_io.schemas import FitResultMessage, Timestamp
from relay_processor.config import JobConfig
from relay_zone.analytics.counter import evaluate_zones
from relay_zone.errors import DomainError, EmptyDatasetError
from relay_zone.geometry.shapes import CharacteristicParams
from relay_zone.optimizer.genetic import SearchState
from relay_zone.pipeline import FitterBuilder

logger = logging.getLogger(__name__)


class FitService:
    """
    Zone fitting service.

    Usage:
        config = JobConfig.from_yaml("config/fit_job.yaml")
        service = FitService(config)

        result = service.run()          # blocking

        service.start()                 # background
        result = service.wait()
    """

    def __init__(self, config: JobConfig, structured_logger: Optional[StructuredLogger] = None):
        """
        Args:
            config: Job configuration
            structured_logger: JSON event logger (default: component "fit_service")
        """
        self.config = config
        events = structured_logger or StructuredLogger(
            component="fit_service", level=config.log_level_value
        )
        self.events = events.bind(job_id=config.job_id)

        self._thread: Optional[threading.Thread] = None
        self._done = threading.Event()
        self._result: Optional[FitResultMessage] = None
        self._error: Optional[BaseException] = None

    # ─────────────────────────────────────────────────────────────
    # Progress reporting
    # ─────────────────────────────────────────────────────────────

    def _on_zone_start(self, zone: int, previous: Optional[CharacteristicParams]) -> None:
        self.events.info(
            event=LogEvent.ZONE_FIT_STARTED,
            message=f"Fitting zone {zone}",
            metadata={
                'zone': zone,
                'previous': previous.to_dict() if previous is not None else None,
            },
        )

    def _on_generation(self, zone: int, state: SearchState) -> None:
        metadata = {
            'zone': zone,
            'generation': state.generation,
            'fitness': state.best_fitness,
        }
        self.events.debug(
            event=LogEvent.GENERATION_COMPLETED,
            message=f"Zone {zone} generation {state.generation}",
            metadata=metadata,
        )

        if state.generation == self.config.fit_config.generations:
            self.events.info(
                event=LogEvent.ZONE_FIT_COMPLETED,
                message=f"Zone {zone} fitted",
                metadata=metadata,
            )

    # ─────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────

    def run(self) -> FitResultMessage:
        """
        Fit all zones of the job (blocking).

        Returns:
            Result message with fitted parameters and statistics

        Raises:
            EmptyDatasetError: If the job has no data points
            DomainError: If a zone's angles are degenerate
        """
        job = self.config
        self.events.info(
            event=LogEvent.FIT_STARTED,
            message=f"Fitting zones for job {job.job_id}",
            metadata={
                'points': len(job.points),
                'population_size': job.fit_config.population_size,
                'generations': job.fit_config.generations,
                'rng_seed': job.fit_config.rng_seed,
            },
        )

        fitter = (
            FitterBuilder()
            .with_config(job.fit_config)
            .with_zone_start_callback(self._on_zone_start)
            .with_generation_callback(self._on_generation)
            .build()
        )

        trim = job.fit_config.trim_reactance
        started = time.monotonic()
        try:
            baseline = evaluate_zones(job.zones, job.points, trim_reactance=trim)
            fitted = fitter.fit(job.zones, job.points)
            stats = evaluate_zones(fitted, job.points, trim_reactance=trim)
        except EmptyDatasetError as e:
            self.events.error(
                event=LogEvent.EMPTY_DATASET_ERROR,
                message="Job has no data points",
                exc_info=e,
            )
            raise
        except DomainError as e:
            self.events.error(
                event=LogEvent.DOMAIN_ERROR,
                message="Degenerate characteristic angle in current settings",
                exc_info=e,
            )
            raise
        elapsed = time.monotonic() - started

        result = FitResultMessage(
            job_id=job.job_id,
            timestamp=Timestamp.now(),
            zones=fitted,
            stats=stats,
            baseline_stats=baseline,
            elapsed_s=elapsed,
        )

        self.events.info(
            event=LogEvent.FIT_COMPLETED,
            message=f"Job {job.job_id} fitted in {elapsed:.2f}s",
            metadata={
                'accuracy': {zone: s.accuracy for zone, s in stats.items()},
                'baseline_accuracy': {zone: s.accuracy for zone, s in baseline.items()},
            },
        )
        return result

    def _worker(self) -> None:
        try:
            self._result = self.run()
        except Exception as e:
            # Handed to the thread calling wait()
            self._error = e
        finally:
            self._done.set()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and not self._done.is_set()

    def start(self) -> None:
        """
        Run the job on a daemon worker thread.

        Raises:
            RuntimeError: If a job is already running
        """
        if self.is_running:
            raise RuntimeError("Fit job already running")

        self._done.clear()
        self._result = None
        self._error = None
        self._thread = threading.Thread(
            target=self._worker, name=f"fit-{self.config.job_id}", daemon=True
        )
        self._thread.start()
        logger.info("Fit worker thread started")

    def wait(self, timeout: Optional[float] = None) -> FitResultMessage:
        """
        Block until the background job finishes.

        Returns:
            Result message of the job

        Raises:
            RuntimeError: If start() was never called
            TimeoutError: If the job did not finish within timeout
            Exception: Whatever the job raised
        """
        if self._thread is None:
            raise RuntimeError("Fit job not started (call start() first)")

        if not self._done.wait(timeout):
            raise TimeoutError(f"Fit job {self.config.job_id} still running after {timeout}s")

        self._thread.join()
        logger.info("Fit worker thread finished")
        if self._error is not None:
            raise self._error
        return self._result
