"""
Pathway Coordinator Module

Owns the application state machine:

    Idle -> Submitting -> Ready | Failed
    Ready | Failed -> Idle (reset)

Persistence and the generation service are injected collaborators. While a
request is in flight a cosmetic progress value advances on a timer; it never
reaches completion until the real result arrives.
"""

import asyncio
import random
import uuid
from enum import Enum
from typing import Awaitable, Callable, Optional

from pathfinder.agents.pathway_generator import PathwayGenerator
from pathfinder.models.config import ProgressConfig
from pathfinder.models.pathway import TrainingPathway
from pathfinder.models.profile import LearnerProfile
from pathfinder.utils.errors import PathwayParseError, PathwayServiceError
from pathfinder.utils.logger import get_logger
from pathfinder.utils.storage import PathwayStore

GENERIC_ERROR_MESSAGE = (
    "An unexpected error occurred. Please review your input and try again."
)


class AppState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    READY = "ready"
    FAILED = "failed"


def progress_status_text(progress: int) -> str:
    """Status line shown under the progress bar."""
    if progress < 33:
        return "Analyzing market trends for your role..."
    if progress < 66:
        return "Mapping NSQF levels to your skills..."
    return "Just a moment while we craft your future..."


Observer = Callable[["PathwayCoordinator"], None]


class PathwayCoordinator:
    """
    Top-level controller for one learner session.

    Observers are called synchronously after every state or progress change.
    """

    def __init__(
        self,
        generator: PathwayGenerator,
        store: PathwayStore,
        progress: Optional[ProgressConfig] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        correlation_id: str | None = None,
    ):
        """
        Initialize coordinator.

        Args:
            generator: Pathway generation service
            store: Persistence for the last profile+pathway pair
            progress: Simulated progress settings
            rng: Random source for progress increments
            sleep: Awaitable delay, replaceable in tests
            correlation_id: Correlation ID for logging (auto-generated if None)
        """
        self.generator = generator
        self.store = store
        self.progress_config = progress or ProgressConfig()
        self.rng = rng or random.Random()
        self.sleep = sleep

        if correlation_id is None:
            correlation_id = str(uuid.uuid4())
        self.correlation_id = correlation_id
        self.logger = get_logger(
            correlation_id=correlation_id,
            phase="coordinator",
            component="pathway_coordinator",
        )

        self.state = AppState.IDLE
        self.profile: Optional[LearnerProfile] = None
        self.pathway: Optional[TrainingPathway] = None
        self.error: Optional[str] = None
        self.progress = 0
        self._observers: list[Observer] = []
        self._ticker: Optional[asyncio.Task] = None

    @property
    def status_text(self) -> str:
        if self.state != AppState.SUBMITTING:
            return ""
        return progress_status_text(self.progress)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            observer(self)

    def _transition(self, state: AppState) -> None:
        self._stop_ticker()
        previous = self.state
        self.state = state
        self.logger.info("State transition", from_state=previous.value, to_state=state.value)
        self._notify()

    def restore(self) -> bool:
        """
        Restore the stored pair, if any, into the Ready state.

        Returns:
            True if a pathway was restored
        """
        snapshot = self.store.load()
        if snapshot is None:
            return False
        self.profile = snapshot.profile
        self.pathway = snapshot.pathway
        self.error = None
        self._transition(AppState.READY)
        return True

    async def submit(self, profile: LearnerProfile) -> AppState:
        """
        Generate a pathway for a submitted profile.

        Returns:
            The resulting state, Ready or Failed

        Raises:
            RuntimeError: If a request is already in flight
        """
        if self.state == AppState.SUBMITTING:
            raise RuntimeError("A pathway request is already in progress")

        self.profile = profile
        self.pathway = None
        self.error = None
        self.progress = 0
        self._transition(AppState.SUBMITTING)
        self._ticker = asyncio.get_running_loop().create_task(self._tick())

        pathway: Optional[TrainingPathway] = None
        try:
            pathway = await self.generator.generate_pathway(profile)
            self.store.save(profile, pathway)
        except (PathwayServiceError, PathwayParseError) as e:
            self.logger.error("Pathway request failed", error_type=type(e).__name__)
            self.error = str(e)
        except Exception as e:
            self.logger.exception("Unexpected error during pathway request", error=str(e))
            self.error = GENERIC_ERROR_MESSAGE

        self._stop_ticker()
        self.progress = 100
        self._notify()
        await self.sleep(self.progress_config.completion_delay_seconds)

        if self.error is None:
            self.pathway = pathway
            self._transition(AppState.READY)
        else:
            self._transition(AppState.FAILED)
        return self.state

    def reset(self) -> None:
        """Return to Idle and clear persistence. Safe to call repeatedly."""
        self.profile = None
        self.pathway = None
        self.error = None
        self.progress = 0
        self.store.clear()
        self._transition(AppState.IDLE)

    async def _tick(self) -> None:
        config = self.progress_config
        while self.state == AppState.SUBMITTING and self.progress < config.cap:
            await asyncio.sleep(config.tick_seconds)
            increment = self.rng.randint(config.min_increment, config.max_increment)
            self.progress = min(self.progress + increment, config.cap)
            self._notify()

    def _stop_ticker(self) -> None:
        if self._ticker is not None and not self._ticker.done():
            self._ticker.cancel()
        self._ticker = None
