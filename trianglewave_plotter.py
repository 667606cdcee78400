#!/usr/bin/env python3
"""trianglewave_plotter.py

Generates a gnuplot script for a triangle wave and runs gnuplot to render it
to a PNG file.

Key features:
- Validated, normalizing plot configuration (period, amplitude, shift, ...).
- Single-pass placeholder substitution into a gnuplot script template.
- Built-in template, or any template file with the same placeholders.
- Script-only mode for inspecting or piping the generated script.

Run:
  python trianglewave_plotter.py out.png
  python trianglewave_plotter.py --period=3.14 --color=#1bc --lineWidth=4 out.png
  python trianglewave_plotter.py --script-only --shift=-1.5 out.png
  python trianglewave_plotter.py --help
"""

from __future__ import annotations

import argparse
import math
import os
import re
import subprocess
import sys
import tempfile
from collections.abc import Callable, Iterable
from typing import Any

TWO_PI = 2.0 * math.pi


# -------------------------
# Errors / Validation
# -------------------------


class ConfigError(ValueError):
    pass


class InvalidParameterError(ConfigError):
    pass


class UnknownParameterError(ConfigError):
    pass


class MissingResourceError(OSError):
    pass


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise InvalidParameterError(msg)


def _as_number(x: Any, name: str) -> float:
    _require(
        isinstance(x, (int, float)) and not isinstance(x, bool),
        f"{name} must be a number, got {x!r}",
    )
    return float(x)


def _finite(x: Any, name: str) -> float:
    d = _as_number(x, name)
    _require(not math.isnan(d), f"{name} is NaN")
    _require(not math.isinf(d), f"{name} is infinite")
    return d


def _positive(x: Any, name: str) -> float:
    d = _as_number(x, name)
    _require(not math.isnan(d), f"{name} is NaN")
    _require(d > 0.0, f"{name} must be positive, got {d!r}")
    _require(not math.isinf(d), f"{name} is infinite")
    return d


_SHORT_HEX_COLOR = re.compile(r"#[0-9a-f]{3}", re.IGNORECASE)


def validate_color(candidate: str) -> str:
    """Expand a short ``#RGB`` color to ``#rrggbb``.

    Anything else (long hex, color names, garbage) is returned unchanged and
    left for gnuplot to interpret.
    """
    if _SHORT_HEX_COLOR.fullmatch(candidate):
        r, g, b = candidate[1:].lower()
        return f"#{r}{r}{g}{g}{b}{b}"
    return candidate


def normalize_shift(shift: float) -> float:
    # Python's % already takes the sign of the divisor; a tiny negative input
    # can still round up to exactly 2*pi.
    s = float(shift) % TWO_PI
    if s >= TWO_PI:
        s = 0.0
    return s


# -------------------------
# Configuration model
# -------------------------


DEFAULT_PERIOD = TWO_PI
DEFAULT_AMPLITUDE = 1.0
DEFAULT_SHIFT = 0.0
DEFAULT_COLOR = "#ffd500"
DEFAULT_LINE_WIDTH = 8
DEFAULT_X_RANGE_START = -4.0 * math.pi
DEFAULT_X_RANGE_END = 4.0 * math.pi
DEFAULT_Y_RANGE_START = -1.5
DEFAULT_Y_RANGE_END = 1.5
DEFAULT_PLOT_WIDTH = "960"
DEFAULT_PLOT_HEIGHT = "600"


class PlotConfiguration:
    """Plot parameters for a single triangle-wave rendering.

    Every assignment goes through a validating setter, so the getters only
    ever return normalized values. Keyword arguments to the constructor are
    assigned the same way, which makes the constructor a fail-fast builder.
    """

    def __init__(
        self,
        *,
        period: float = DEFAULT_PERIOD,
        amplitude: float = DEFAULT_AMPLITUDE,
        shift: float = DEFAULT_SHIFT,
        color: str = DEFAULT_COLOR,
        line_width: int = DEFAULT_LINE_WIDTH,
        x_range_start: float = DEFAULT_X_RANGE_START,
        x_range_end: float = DEFAULT_X_RANGE_END,
        y_range_start: float = DEFAULT_Y_RANGE_START,
        y_range_end: float = DEFAULT_Y_RANGE_END,
        plot_width: str = DEFAULT_PLOT_WIDTH,
        plot_height: str = DEFAULT_PLOT_HEIGHT,
    ) -> None:
        self.period = period
        self.amplitude = amplitude
        self.shift = shift
        self.color = color
        self.line_width = line_width
        self.x_range_start = x_range_start
        self.x_range_end = x_range_end
        self.y_range_start = y_range_start
        self.y_range_end = y_range_end
        self.plot_width = plot_width
        self.plot_height = plot_height

    @property
    def period(self) -> float:
        return self._period

    @period.setter
    def period(self, value: float) -> None:
        self._period = _positive(value, "period")

    @property
    def amplitude(self) -> float:
        return self._amplitude

    @amplitude.setter
    def amplitude(self, value: float) -> None:
        self._amplitude = _positive(value, "amplitude")

    @property
    def shift(self) -> float:
        """Phase shift, always in [0, 2*pi)."""
        return self._shift

    @shift.setter
    def shift(self, value: float) -> None:
        self._shift = normalize_shift(_as_number(value, "shift"))

    @property
    def color(self) -> str:
        return self._color

    @color.setter
    def color(self, value: str) -> None:
        self._color = validate_color(str(value))

    @property
    def line_width(self) -> int:
        return self._line_width

    @line_width.setter
    def line_width(self, value: int) -> None:
        _require(
            isinstance(value, int) and not isinstance(value, bool),
            f"lineWidth must be an integer, got {value!r}",
        )
        _require(value >= 1, f"Line width is too small: {value}. Must be at least 1.")
        self._line_width = value

    @property
    def x_range_start(self) -> float:
        return self._x_range_start

    @x_range_start.setter
    def x_range_start(self, value: float) -> None:
        self._x_range_start = _finite(value, "xRangeStart")

    @property
    def x_range_end(self) -> float:
        return self._x_range_end

    @x_range_end.setter
    def x_range_end(self, value: float) -> None:
        self._x_range_end = _finite(value, "xRangeEnd")

    @property
    def y_range_start(self) -> float:
        return self._y_range_start

    @y_range_start.setter
    def y_range_start(self, value: float) -> None:
        self._y_range_start = _finite(value, "yRangeStart")

    @property
    def y_range_end(self) -> float:
        return self._y_range_end

    @y_range_end.setter
    def y_range_end(self, value: float) -> None:
        self._y_range_end = _finite(value, "yRangeEnd")

    @property
    def plot_width(self) -> str:
        return self._plot_width

    @plot_width.setter
    def plot_width(self, value: str) -> None:
        # Passed through untouched: gnuplot accepts units such as "10cm".
        self._plot_width = str(value)

    @property
    def plot_height(self) -> str:
        return self._plot_height

    @plot_height.setter
    def plot_height(self, value: str) -> None:
        self._plot_height = str(value)

    def as_dict(self) -> dict[str, Any]:
        return {name: getattr(self, attr) for name, (_, attr) in PARAMETERS.items()}


# -------------------------
# Argument processing
# -------------------------


# command-line name -> (parser, PlotConfiguration attribute)
PARAMETERS: dict[str, tuple[Callable[[str], Any], str]] = {
    "period": (float, "period"),
    "amplitude": (float, "amplitude"),
    "shift": (float, "shift"),
    "color": (str, "color"),
    "lineWidth": (int, "line_width"),
    "xRangeStart": (float, "x_range_start"),
    "xRangeEnd": (float, "x_range_end"),
    "yRangeStart": (float, "y_range_start"),
    "yRangeEnd": (float, "y_range_end"),
    "plotWidth": (str, "plot_width"),
    "plotHeight": (str, "plot_height"),
}


def apply_argument(config: PlotConfiguration, token: str) -> None:
    """Apply a single ``--name=value`` token to ``config``."""
    name, sep, raw = token.partition("=")
    if not name.startswith("--") or name[2:] not in PARAMETERS:
        raise UnknownParameterError(f"Unknown parameter '{name}'")
    _require(bool(sep), f"{name} expects a value: {name}=<value>")

    parse, attr = PARAMETERS[name[2:]]
    try:
        value = parse(raw)
    except ValueError as e:
        raise InvalidParameterError(f"Bad value for {name}: {raw!r}") from e
    setattr(config, attr, value)


def build_configuration(tokens: Iterable[str]) -> PlotConfiguration:
    config = PlotConfiguration()
    for token in tokens:
        apply_argument(config, token)
    return config


# -------------------------
# Template rendering
# -------------------------


TEMPLATE_TOKENS = (
    "{PERIOD}",
    "{AMPLITUDE}",
    "{SHIFT}",
    "{COLOR}",
    "{LINE_WIDTH}",
    "{X_RANGE_START}",
    "{X_RANGE_END}",
    "{Y_RANGE_START}",
    "{Y_RANGE_END}",
    "{PLOT_WIDTH}",
    "{PLOT_HEIGHT}",
    "{OUTPUT_FILE_NAME}",
)

_TOKEN_RE = re.compile("|".join(re.escape(t) for t in TEMPLATE_TOKENS))


def _fmt(x: float) -> str:
    # Shortest repr that round-trips, e.g. "6.283185307179586" or "1.0".
    return repr(float(x))


def template_values(config: PlotConfiguration, output_file_name: str) -> dict[str, str]:
    return {
        "{PERIOD}": _fmt(config.period),
        "{AMPLITUDE}": _fmt(config.amplitude),
        "{SHIFT}": _fmt(config.shift),
        "{COLOR}": config.color,
        "{LINE_WIDTH}": str(config.line_width),
        "{X_RANGE_START}": _fmt(config.x_range_start),
        "{X_RANGE_END}": _fmt(config.x_range_end),
        "{Y_RANGE_START}": _fmt(config.y_range_start),
        "{Y_RANGE_END}": _fmt(config.y_range_end),
        "{PLOT_WIDTH}": config.plot_width,
        "{PLOT_HEIGHT}": config.plot_height,
        "{OUTPUT_FILE_NAME}": output_file_name,
    }


def render_script(
    template: str, config: PlotConfiguration, output_file_name: str
) -> str:
    """Substitute every placeholder in ``template`` in a single pass.

    Substituted text is never rescanned, so a value that happens to contain a
    placeholder (say, an output file named ``{COLOR}.png``) is emitted as-is.
    Tokens absent from the template are simply not used.
    """
    values = template_values(config, output_file_name)
    return _TOKEN_RE.sub(lambda m: values[m.group(0)], template)


# -------------------------
# Template loading
# -------------------------


DEFAULT_TEMPLATE = """\
set terminal pngcairo size {PLOT_WIDTH},{PLOT_HEIGHT} enhanced
set output '{OUTPUT_FILE_NAME}'

set xrange [{X_RANGE_START}:{X_RANGE_END}]
set yrange [{Y_RANGE_START}:{Y_RANGE_END}]
set samples 2000
set grid
set xzeroaxis
unset key

period = {PERIOD}
amplitude = {AMPLITUDE}
shift = {SHIFT}

triangle(x) = (2.0 * amplitude / pi) * asin(sin(2.0 * pi * (x - shift) / period))

plot triangle(x) with lines linewidth {LINE_WIDTH} linecolor rgb '{COLOR}'
"""


def load_template(path: str | None = None) -> str:
    if path is None:
        return DEFAULT_TEMPLATE
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise MissingResourceError(
            f"Could not read the gnuplot template {path}: {e}"
        ) from e


# -------------------------
# gnuplot invocation
# -------------------------


_SCRIPT_PREFIX = "triangle-wave-"
_SCRIPT_SUFFIX = ".plt"


def default_gnuplot_executable() -> str:
    return "gnuplot.exe" if os.name == "nt" else "gnuplot"


def run_gnuplot(script: str, *, executable: str) -> int:
    """Write ``script`` to a temporary file and run gnuplot on it.

    Blocks until gnuplot exits and returns its exit status. The temporary
    script is removed afterwards whatever the outcome.
    """
    fd, script_path = tempfile.mkstemp(prefix=_SCRIPT_PREFIX, suffix=_SCRIPT_SUFFIX)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(script)
        proc = subprocess.run([executable, os.path.abspath(script_path)])
        return proc.returncode
    finally:
        os.remove(script_path)


# -------------------------
# CLI / Help
# -------------------------

HELP_EPILOG = r"""
PLOT PARAMETERS

Every parameter is given as a single --name=value token. Unknown names abort
the run before anything is read or written.

  --period=<number > 0>        wave period (default 2*pi)
  --amplitude=<number > 0>     wave amplitude (default 1.0)
  --shift=<number>             phase shift, normalized into [0, 2*pi) (default 0)
  --color=<color>              line color; #RGB is expanded to #rrggbb,
                               anything else (e.g. "green") is passed to gnuplot
                               (default #ffd500)
  --lineWidth=<integer >= 1>   line width (default 8)
  --xRangeStart=<number>       x range start (default -4*pi)
  --xRangeEnd=<number>         x range end (default 4*pi)
  --yRangeStart=<number>       y range start (default -1.5)
  --yRangeEnd=<number>         y range end (default 1.5)
  --plotWidth=<size>           image width, passed through as-is (default 960)
  --plotHeight=<size>          image height, passed through as-is (default 600)

TEMPLATES

A template is a gnuplot script containing the placeholders

  {PERIOD} {AMPLITUDE} {SHIFT} {COLOR} {LINE_WIDTH}
  {X_RANGE_START} {X_RANGE_END} {Y_RANGE_START} {Y_RANGE_END}
  {PLOT_WIDTH} {PLOT_HEIGHT} {OUTPUT_FILE_NAME}

Each occurrence is replaced with the corresponding value. Placeholders may be
repeated or omitted.

Examples

  python trianglewave_plotter.py wave.png
  python trianglewave_plotter.py --period=3 --amplitude=0.5 --color=#f0a wave.png
  python trianglewave_plotter.py --template example/triangle-wave.plt wave.png
  python trianglewave_plotter.py --script-only wave.png > wave.plt
"""


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="trianglewave_plotter.py",
        description="Plot a triangle wave to a PNG file via gnuplot.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_EPILOG,
        allow_abbrev=False,
    )
    p.add_argument("output", help="Name of the PNG file gnuplot should write.")
    p.add_argument(
        "--template",
        default=None,
        help="Path to a gnuplot template file. Default: the built-in template.",
    )
    p.add_argument(
        "--gnuplot",
        default=default_gnuplot_executable(),
        help="gnuplot executable to run. Default: %(default)s.",
    )
    p.add_argument(
        "--script-only",
        action="store_true",
        help="Print the generated gnuplot script instead of running gnuplot.",
    )
    p.add_argument(
        "--show-config",
        action="store_true",
        help="Print the normalized plot parameters before plotting.",
    )
    return p


# -------------------------
# Commands
# -------------------------


def cmd_plot(
    params: list[str],
    output: str,
    *,
    template_path: str | None,
    executable: str,
    script_only: bool,
    show_config: bool,
) -> int:
    config = build_configuration(params)

    if show_config:
        for name, value in config.as_dict().items():
            print(f"{name}: {value}", file=sys.stderr if script_only else sys.stdout)

    template = load_template(template_path)
    script = render_script(template, config, output)

    if script_only:
        sys.stdout.write(script)
        return 0

    status = run_gnuplot(script, executable=executable)
    if status != 0:
        print(
            f"warning: gnuplot seems to fail, return status: {status}",
            file=sys.stderr,
        )
        return 1

    print(f"Generated the plot in {output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args, params = ap.parse_known_args(argv)

    try:
        return cmd_plot(
            params,
            args.output,
            template_path=args.template,
            executable=args.gnuplot,
            script_only=args.script_only,
            show_config=args.show_config,
        )
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    except MissingResourceError as e:
        print(f"Template error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
