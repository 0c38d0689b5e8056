"""Base controller abstraction."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..services.client import GenerationProvider
from .errors import ClassifiedError, classify_error
from .session import StoryboardSession

logger = logging.getLogger(__name__)

CLIENT_UNAVAILABLE_MESSAGE = "Generation client is not initialized."


class BaseController(ABC):
    """Abstract base class for generation controllers.

    Provides the shared entry checks (client available, quota intact) and
    the conversion of provider failures into session state. Subclasses
    never let a provider exception escape their public coroutines.
    """

    def __init__(
        self,
        session: StoryboardSession,
        client: Optional[GenerationProvider] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            session: Session whose scenes this controller drives.
            client: Generation provider. ``None`` means setup failed.
        """
        self._session = session
        self._client = client
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the controller's name."""
        ...

    @property
    def session(self) -> StoryboardSession:
        return self._session

    def _ready(self) -> bool:
        """Check the preconditions shared by every generation request."""
        if self._client is None:
            self._session.report_setup_error(CLIENT_UNAVAILABLE_MESSAGE)
            return False
        if self._session.quota_exceeded:
            self._logger.debug("Quota exceeded; ignoring generation request")
            return False
        return True

    def _classify(self, error: BaseException, context: str) -> ClassifiedError:
        """Classify and log a provider failure."""
        classified = classify_error(error)
        self._logger.error(f"{context}: {classified.message}")
        return classified

    def _escalate(self, classified: ClassifiedError) -> None:
        """Trip the quota guard for quota failures.

        Called after the failing scene has recorded its own error, so the
        guard's force-fail only reaches the other in-flight scenes.
        """
        if classified.is_quota_error:
            self._session.quota.trip()
