"""Exception types raised by the asset pipeline.

Every error aborts the build. The command line entry point is the only
place that catches them.
"""


class AssetPipelineError(Exception):
    """Base class for all pipeline failures.

    Args:
        message (str): Human readable description
        path: Offending file or directory, if any
    """

    def __init__(self, message, path=None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self):
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


class ConfigurationError(AssetPipelineError):
    """Output directory missing, bad config file or double initialization."""


class FilesystemError(AssetPipelineError):
    """A source entry could not be read or a destination could not be written."""


class ContentError(AssetPipelineError):
    """A web asset could not be decoded or minified."""


__all__ = ["AssetPipelineError", "ConfigurationError", "FilesystemError", "ContentError"]
