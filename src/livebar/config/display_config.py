"""
Display configuration for the progress bar.

All values are read-only once built. Durations are in seconds.
"""

from __future__ import annotations

import os
from string import Formatter
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from rich.cells import cell_len
from rich.color import Color, ColorParseError

from ..utils.ui.colors import ColorPalette
from ..utils.ui.theme import (
    DEFAULT_FORMAT,
    FORMAT_FIELDS,
    GLYPHS,
    SPINNER_FRAMES,
    THEME,
)

CI_THROTTLE_RATE = 1.0
"""Seconds between renders when running under continuous integration"""


class ProgressBarOptions(BaseModel):
    """
    Options for the bar itself.

    Unset options fall back to the defaults, the same way user options are
    merged over the built-in ones.
    """

    model_config = ConfigDict(frozen=True)

    format: str = Field(DEFAULT_FORMAT, description="str.format template")
    progress_mark: str = Field(GLYPHS["progress"], description="Completed glyph")
    remainder_mark: str = Field(GLYPHS["remainder"], description="Empty glyph")
    spinner_frames: List[str] = Field(
        default_factory=lambda: list(SPINNER_FRAMES),
        min_length=1,
        description="Frames cycled by the {spinner} field",
    )
    length: Optional[int] = Field(
        None, gt=0, description="Line width; defaults to the console width"
    )
    throttle_rate: Optional[float] = Field(
        None, ge=0, description="Minimum seconds between renders"
    )

    @field_validator("progress_mark", "remainder_mark")
    @classmethod
    def _single_cell(cls, value: str) -> str:
        if cell_len(value) != 1:
            raise ValueError(f"Bar marks must be one cell wide, got {value!r}")
        return value

    @field_validator("format")
    @classmethod
    def _known_fields(cls, value: str) -> str:
        try:
            parsed = list(Formatter().parse(value))
        except ValueError as e:
            raise ValueError(f"Malformed bar format {value!r}: {e}") from e
        for _, field_name, format_spec, _ in parsed:
            if field_name is None:
                continue
            if field_name not in FORMAT_FIELDS:
                raise ValueError(
                    f"Unknown bar field {{{field_name}}}; "
                    f"expected one of {sorted(FORMAT_FIELDS)}"
                )
            if format_spec:
                raise ValueError(f"Bar field {{{field_name}}} takes no format spec")
        return value


class LivebarConfig(BaseModel):
    """
    Complete configuration consumed by the run aggregator.

    Environment-dependent flags are resolved by the caller and passed in
    explicitly, so nothing here reads process state.
    """

    model_config = ConfigDict(frozen=True)

    progress_bar: ProgressBarOptions = Field(default_factory=ProgressBarOptions)
    slow_threshold: float = Field(
        0.0, ge=0, description="Seconds before a test is reported as slow; 0 disables"
    )
    color_enabled: bool = Field(False, description="Destination accepts color")
    force_tty: bool = Field(False, description="Treat the stream as interactive")
    continuous_integration: bool = Field(
        False, description="Throttle rendering and suppress color"
    )
    success_color: str = THEME["success"]
    warning_color: str = THEME["warning"]
    failure_color: str = THEME["failure"]
    inline_log: bool = Field(
        True, description="Messages are printed above the bar and the bar redrawn"
    )
    tick_interval: float = Field(
        1.0, gt=0, description="Seconds between background refreshes"
    )

    @field_validator("success_color", "warning_color", "failure_color")
    @classmethod
    def _parseable_color(cls, value: str) -> str:
        try:
            Color.parse(value)
        except ColorParseError as e:
            raise ValueError(str(e)) from e
        return value

    @property
    def palette(self) -> ColorPalette:
        return ColorPalette(
            success=self.success_color,
            warning=self.warning_color,
            failure=self.failure_color,
        )

    @property
    def color_output(self) -> bool:
        """Whether escape sequences should be written at all."""
        return self.color_enabled and not self.continuous_integration

    def throttle_rate_for(self, options: ProgressBarOptions) -> float:
        """Explicit option first, then the CI default, then no throttling."""
        if options.throttle_rate is not None:
            return options.throttle_rate
        return CI_THROTTLE_RATE if self.continuous_integration else 0.0


DEFAULT_CONFIG = LivebarConfig()


def get_default_config() -> LivebarConfig:
    """Get the default configuration instance."""
    return DEFAULT_CONFIG


def create_custom_config(**overrides) -> LivebarConfig:
    """
    Create a configuration with selected fields overridden.

    A mapping passed as `progress_bar` is merged over the default bar
    options rather than replacing them.

    Returns:
        LivebarConfig with custom values
    """
    bar = overrides.pop("progress_bar", None)
    if isinstance(bar, Mapping):
        overrides["progress_bar"] = ProgressBarOptions(
            **{**DEFAULT_CONFIG.progress_bar.model_dump(), **bar}
        )
    elif bar is not None:
        overrides["progress_bar"] = bar
    return LivebarConfig(**overrides)


def is_continuous_integration(environ: Optional[Mapping[str, str]] = None) -> bool:
    """
    Return True when CONTINUOUS_INTEGRATION is set to a truthy value.

    Anything other than unset, empty or "false" counts as truthy.
    """
    env = os.environ if environ is None else environ
    return env.get("CONTINUOUS_INTEGRATION") not in (None, "", "false")
