"""Exception types raised by build_notifier."""


class BuildNotifierError(Exception):
    """Base class for all build_notifier errors."""
    pass


class BuildNotFoundError(BuildNotifierError):
    """Raised when a referenced project or build is not known to the repository."""

    def __init__(self, project: str, number: int):
        super().__init__(f"Build not found: {project} #{number}")
        self.project = project
        self.number = number


class HistoryFormatError(BuildNotifierError):
    """Raised when a build history document cannot be parsed."""
    pass


class ConfigError(BuildNotifierError):
    """Raised for invalid configuration values."""
    pass


class UpstreamCycleError(BuildNotifierError):
    """Raised when upstream causes lead back to a build already visited."""

    def __init__(self, project: str, number: int):
        super().__init__(f"Upstream causes loop back to {project} #{number}")
        self.project = project
        self.number = number
