"""Generation orchestration for storyboard sessions."""

from .errors import ClassifiedError, classify_error
from .images import ImageController
from .poller import PollScheduler
from .quota import QuotaGuard
from .registry import InvalidTransition
from .session import StoryboardSession
from .studio import Studio
from .video import VideoController

__all__ = [
    "ClassifiedError",
    "classify_error",
    "ImageController",
    "PollScheduler",
    "QuotaGuard",
    "InvalidTransition",
    "StoryboardSession",
    "Studio",
    "VideoController",
]
