"""Exceptions raised across the monitor's adapter seams."""


class MonitorError(Exception):
    """Base class for monitor failures."""


class StartupError(MonitorError):
    """A resource needed before the main loop could not be acquired."""


class AcquisitionError(MonitorError):
    """A block read failed while the monitor was running."""
