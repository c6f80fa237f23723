"""Application entrypoint wiring for the spectrum monitor.

Parses the command line, builds the config, and hands the RTL-SDR source and
Qt renderer factories to the monitor loop. This module must not contain DSP or
drawing logic beyond orchestration.
"""

import argparse
import logging
import re
import sys
from typing import Optional, Sequence

from rtl_spectrum_monitor.config import MonitorConfig
from rtl_spectrum_monitor.errors import StartupError
from rtl_spectrum_monitor.monitor import run_monitor

logger = logging.getLogger(__name__)

_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_float(text: str) -> float:
    """Parse the longest numeric prefix of ``text``, or 0.0 if there is none."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return 0.0
    return float(match.group(0))


class _UsageParser(argparse.ArgumentParser):
    def error(self, message: str):
        self.print_usage(sys.stdout)
        self.exit(1)


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = _UsageParser(
        prog=prog,
        usage="%(prog)s [-s sample_rate] frequency",
        add_help=False,
    )
    parser.add_argument("-s", dest="sample_rate_mhz", type=parse_float, default=2.4)
    parser.add_argument("frequency", type=parse_float)
    # Trailing arguments are accepted and ignored.
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    return parser


def config_from_args(argv: Optional[Sequence[str]] = None) -> MonitorConfig:
    args = build_parser().parse_args(argv)
    return MonitorConfig(
        center_freq_mhz=args.frequency,
        sample_rate_mhz=args.sample_rate_mhz,
    )


def _open_renderer(cfg: MonitorConfig):
    from rtl_spectrum_monitor.ui.renderer import create_renderer

    return create_renderer(
        cfg.window_width,
        cfg.window_height,
        cfg.antialias_samples,
        title=cfg.title,
    )


def _open_source(cfg: MonitorConfig):
    # pyrtlsdr loads librtlsdr on import, so defer it until a device is needed.
    try:
        from rtl_spectrum_monitor.sdr.rtl import RtlSdrSource
    except ImportError as exc:
        raise StartupError(f"Failed to load librtlsdr: {exc}") from exc

    return RtlSdrSource(cfg)


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    cfg = config_from_args(argv)
    try:
        cfg.validate()
    except ValueError as exc:
        logger.error("%s", exc)
        return 1
    try:
        return run_monitor(cfg, _open_renderer, _open_source)
    except StartupError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
