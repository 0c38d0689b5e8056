import json

import pytest

from storyboard.config import config
from storyboard.models import Character, Scene
from storyboard.services import ImageResult, ProviderError, VideoJobStatus
from storyboard.studio import StoryboardSession, Studio


def quota_failure() -> ProviderError:
    body = {
        "error": {
            "code": 429,
            "message": "Quota exceeded for aiplatform.googleapis.com/online_prediction_requests",
            "status": "RESOURCE_EXHAUSTED",
        }
    }
    return ProviderError(json.dumps(body), status_code=429)


class FakeProvider:
    """In-memory generation provider.

    ``image_failures`` maps a prompt substring to the exception raised for
    prompts containing it. ``job_scripts`` maps a job handle to the sequence
    of statuses (or exceptions) returned by successive queries; unscripted
    jobs stay running unless ``complete_jobs`` is set.
    """

    def __init__(self):
        self.image_prompts: list[str] = []
        self.image_failures: dict[str, Exception] = {}
        self.submissions: list[tuple[str, bytes, str]] = []
        self.submit_error = None
        self.job_scripts: dict[str, list] = {}
        self.complete_jobs = False
        self.queries: list[str] = []
        self.downloads: dict[str, object] = {}

    def generate_image(self, prompt, aspect_ratio, count):
        self.image_prompts.append(prompt)
        for key, error in self.image_failures.items():
            if key in prompt:
                raise error
        return ImageResult(prompt=prompt, images=[f"png-{len(self.image_prompts)}".encode()])

    def submit_video_job(self, prompt, image_bytes, mime_type):
        self.submissions.append((prompt, image_bytes, mime_type))
        if self.submit_error is not None:
            raise self.submit_error
        return f"operations/{len(self.submissions)}"

    def query_video_job(self, job):
        self.queries.append(job)
        script = self.job_scripts.get(job)
        if script:
            item = script.pop(0)
        elif self.complete_jobs:
            item = VideoJobStatus(done=True, result_uri=f"gs://bucket/{job}.mp4")
        else:
            item = VideoJobStatus(done=False)
        if isinstance(item, Exception):
            raise item
        return item

    def fetch_video(self, uri):
        item = self.downloads.get(uri, f"mp4:{uri}".encode())
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture(autouse=True)
def no_cloud_config(monkeypatch):
    """Make sure no test reaches a real Google Cloud project."""
    monkeypatch.setattr(config, "google_cloud_project", "")
    monkeypatch.setattr(config, "veo_output_bucket", "")


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def quota_error():
    return quota_failure()


@pytest.fixture
def session():
    """Three described scenes and two characters."""
    scenes = [
        Scene(scene_number=1, scene_description="Zara on the rooftop"),
        Scene(scene_number=2, scene_description="Close up on Zara", animation_prompt="Slow zoom-in"),
        Scene(scene_number=3, scene_description="Alex emerges from the shadows"),
    ]
    characters = [
        Character(name="zara", description="pink hair, leather jacket"),
        Character(name="ALEX", description="trench coat, blue eyes"),
    ]
    return StoryboardSession(scenes, characters)


@pytest.fixture
def studio(session, provider):
    """Studio whose scheduler never ticks on its own during a test."""
    return Studio(session, provider, poll_interval=3600)
