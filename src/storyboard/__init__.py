"""AI storyboard generator: still images and animated clips per scene."""

__version__ = "0.1.0"
