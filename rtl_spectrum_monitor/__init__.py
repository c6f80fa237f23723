"""Real-time RTL-SDR power spectrum monitor."""

__version__ = "0.1.0"
