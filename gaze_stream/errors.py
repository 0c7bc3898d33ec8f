"""Exceptions raised by the gaze stream processor."""


class GazeStreamError(Exception):
    """Base class for processor failures that reach the host."""


class IngestionError(GazeStreamError):
    """The sample buffer could not record a sample, even after reinitialisation."""
