"""
pytest command-line and ini options for livebar.

Precedence is command line, then ini file, then environment.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import pytest
from pydantic import ValidationError

from .display_config import LivebarConfig, create_custom_config, is_continuous_integration

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

# ini key -> (field in ProgressBarOptions, converter)
_BAR_INI_OPTIONS = {
    "livebar_format": ("format", str),
    "livebar_progress_mark": ("progress_mark", str),
    "livebar_remainder_mark": ("remainder_mark", str),
    "livebar_throttle_rate": ("throttle_rate", float),
    "livebar_length": ("length", int),
}

_COLOR_INI_OPTIONS = {
    "livebar_success_color": "success_color",
    "livebar_warning_color": "warning_color",
    "livebar_failure_color": "failure_color",
}


def add_options(parser: pytest.Parser) -> None:
    """Register livebar's command-line options and ini keys."""
    group = parser.getgroup("livebar", "live progress bar")
    group.addoption(
        "--livebar",
        action="store_true",
        default=None,
        dest="livebar",
        help="Show a live progress bar instead of the default progress output.",
    )
    group.addoption(
        "--livebar-slow-threshold",
        type=float,
        default=None,
        metavar="SECONDS",
        dest="livebar_slow_threshold",
        help="Warn inline about passing tests slower than SECONDS (0 disables).",
    )
    group.addoption(
        "--livebar-format",
        default=None,
        metavar="TEMPLATE",
        dest="livebar_format",
        help="Bar template using {current} {total} {percent} {elapsed} {eta} "
        "{spinner} {bar}.",
    )
    group.addoption(
        "--livebar-force-tty",
        action="store_true",
        default=None,
        dest="livebar_force_tty",
        help="Redraw the bar in place even when output is not a terminal.",
    )
    group.addoption(
        "--livebar-ci",
        action="store_true",
        default=None,
        dest="livebar_ci",
        help="Continuous integration mode: throttle rendering, no color.",
    )
    group.addoption(
        "--no-livebar-ci",
        action="store_false",
        default=None,
        dest="livebar_ci",
        help="Disable continuous integration mode even if the environment asks for it.",
    )

    parser.addini("livebar", type="bool", default=False, help="Enable the live progress bar.")
    parser.addini(
        "livebar_slow_threshold",
        default="",
        help="Seconds before a passing test is reported as slow.",
    )
    parser.addini("livebar_force_tty", type="bool", default=False, help="Force in-place redraws.")
    parser.addini(
        "livebar_ci",
        default="",
        help="true/false; overrides the CONTINUOUS_INTEGRATION environment variable.",
    )
    for name, (field, _) in _BAR_INI_OPTIONS.items():
        parser.addini(name, default="", help=f"Progress bar {field}.")
    for name, field in _COLOR_INI_OPTIONS.items():
        parser.addini(name, default="", help=f"Rich color name for {field}.")


def livebar_enabled(config: pytest.Config) -> bool:
    """True if the bar was requested on the command line or in the ini file."""
    option = config.getoption("livebar", default=None)
    if option is not None:
        return bool(option)
    return bool(config.getini("livebar"))


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise pytest.UsageError(f"{name}: expected true or false, got {value!r}")


def _convert(name: str, value: str, converter) -> Any:
    try:
        return converter(value)
    except ValueError as e:
        raise pytest.UsageError(f"{name}: invalid value {value!r}") from e


def _continuous_integration(
    config: pytest.Config, environ: Optional[Mapping[str, str]]
) -> bool:
    option = config.getoption("livebar_ci", default=None)
    if option is not None:
        return bool(option)
    ini_value = config.getini("livebar_ci")
    if ini_value:
        return _parse_bool("livebar_ci", ini_value)
    return is_continuous_integration(environ)


def load_config(
    config: pytest.Config,
    color_enabled: bool,
    environ: Optional[Mapping[str, str]] = None,
) -> LivebarConfig:
    """
    Build a LivebarConfig from pytest options.

    Args:
        config: The pytest config
        color_enabled: Whether pytest's terminal writer emits markup
        environ: Environment used for CI detection; defaults to os.environ

    Returns:
        Validated configuration

    Raises:
        pytest.UsageError: If any option is invalid
    """
    bar: Dict[str, Any] = {}
    for name, (field, converter) in _BAR_INI_OPTIONS.items():
        value = config.getini(name)
        if value:
            bar[field] = _convert(name, value, converter)
    cli_format = config.getoption("livebar_format", default=None)
    if cli_format is not None:
        bar["format"] = cli_format

    overrides: Dict[str, Any] = {
        "progress_bar": bar,
        "color_enabled": color_enabled,
        "continuous_integration": _continuous_integration(config, environ),
    }

    threshold = config.getoption("livebar_slow_threshold", default=None)
    if threshold is None and config.getini("livebar_slow_threshold"):
        threshold = _convert(
            "livebar_slow_threshold", config.getini("livebar_slow_threshold"), float
        )
    if threshold is not None:
        overrides["slow_threshold"] = threshold

    force_tty = config.getoption("livebar_force_tty", default=None)
    overrides["force_tty"] = (
        bool(force_tty) if force_tty is not None else bool(config.getini("livebar_force_tty"))
    )

    for name, field in _COLOR_INI_OPTIONS.items():
        value = config.getini(name)
        if value:
            overrides[field] = value

    try:
        return create_custom_config(**overrides)
    except ValidationError as e:
        raise pytest.UsageError(f"Invalid livebar configuration:\n{e}") from e
