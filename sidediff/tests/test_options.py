"""Tests for display options from config dicts and the environment."""

import logging

import pytest

from .. import terminal_caps
from ..options import (
    MIN_DISPLAY_WIDTH,
    BackgroundColor,
    ConfigValidationError,
    DisplayMode,
    DisplayOptions,
)


def _caps(**overrides):
    caps = {
        "interactive": True,
        "term": "xterm-256color",
        "colorterm": None,
        "color_depth": "256",
        "width": 120,
        "background": None,
    }
    caps.update(overrides)
    return caps


@pytest.fixture
def fake_terminal(monkeypatch):
    """Replace terminal detection with a settable result."""
    state = {"caps": _caps()}
    monkeypatch.setattr(terminal_caps, "detect", lambda: state["caps"])
    return state


class TestDefaults:
    """Tests for the default option values."""

    def test_defaults(self):
        options = DisplayOptions()
        assert options.display_width == 80
        assert options.use_color
        assert options.background_color is BackgroundColor.DARK
        assert options.display_mode is DisplayMode.SIDE_BY_SIDE
        assert options.syntax_highlight
        assert not options.in_vcs
        assert options.tab_width == 8

    def test_show_both(self):
        assert not DisplayOptions().show_both
        options = DisplayOptions(display_mode=DisplayMode.SIDE_BY_SIDE_SHOW_BOTH)
        assert options.show_both

    def test_with_width_clamps(self):
        assert DisplayOptions().with_width(5).display_width == MIN_DISPLAY_WIDTH
        assert DisplayOptions().with_width(150).display_width == 150


class TestFromConfig:
    """Tests for DisplayOptions.from_config()."""

    def test_empty_config(self):
        assert DisplayOptions.from_config({}) == DisplayOptions()
        assert DisplayOptions.from_config(None) == DisplayOptions()

    def test_all_keys(self):
        options = DisplayOptions.from_config({
            "display_width": 140,
            "use_color": False,
            "background_color": "light",
            "display_mode": "side-by-side-always-show-both",
            "syntax_highlight": False,
            "in_vcs": True,
            "tab_width": 4,
        })

        assert options == DisplayOptions(
            display_width=140,
            use_color=False,
            background_color=BackgroundColor.LIGHT,
            display_mode=DisplayMode.SIDE_BY_SIDE_SHOW_BOTH,
            syntax_highlight=False,
            in_vcs=True,
            tab_width=4,
        )

    def test_narrow_width_clamped(self):
        options = DisplayOptions.from_config({"display_width": 3})
        assert options.display_width == MIN_DISPLAY_WIDTH

    def test_base_supplies_missing_keys(self):
        base = DisplayOptions(display_width=100, use_color=False)
        options = DisplayOptions.from_config({"in_vcs": True}, base=base)
        assert options.display_width == 100
        assert not options.use_color
        assert options.in_vcs

    def test_errors_collected(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            DisplayOptions.from_config({
                "display_width": "wide",
                "use_color": "yes",
                "background_color": "purple",
                "display_mode": "inline",
            })

        errors = exc_info.value.errors
        assert len(errors) == 4
        assert any("display_width" in error for error in errors)
        assert any("use_color" in error for error in errors)
        assert any("background_color" in error for error in errors)
        assert any("display_mode" in error for error in errors)

    @pytest.mark.parametrize("tab_width", [0, -2, "4", True])
    def test_invalid_tab_width(self, tab_width):
        with pytest.raises(ConfigValidationError) as exc_info:
            DisplayOptions.from_config({"tab_width": tab_width})

        assert "tab_width" in exc_info.value.errors[0]

    def test_bool_is_not_a_width(self):
        with pytest.raises(ConfigValidationError):
            DisplayOptions.from_config({"display_width": True})

    def test_error_message(self):
        error = ConfigValidationError(["a is bad", "b is bad"])
        assert str(error) == "Configuration validation failed: a is bad; b is bad"


class TestFromEnv:
    """Tests for DisplayOptions.from_env()."""

    def test_terminal_defaults(self, fake_terminal):
        options = DisplayOptions.from_env({})

        assert options.display_width == 120
        assert options.use_color
        assert options.background_color is BackgroundColor.DARK
        assert options.display_mode is DisplayMode.SIDE_BY_SIDE
        assert options.syntax_highlight

    def test_no_color_terminal(self, fake_terminal):
        fake_terminal["caps"] = _caps(interactive=False, color_depth="none")
        assert not DisplayOptions.from_env({}).use_color

    def test_no_color_variable(self, fake_terminal):
        assert not DisplayOptions.from_env({"NO_COLOR": ""}).use_color

    def test_color_always_overrides_no_color(self, fake_terminal):
        fake_terminal["caps"] = _caps(color_depth="none")
        env = {"SIDEDIFF_COLOR": "always", "NO_COLOR": "1"}
        assert DisplayOptions.from_env(env).use_color

    def test_color_never(self, fake_terminal):
        assert not DisplayOptions.from_env({"SIDEDIFF_COLOR": "never"}).use_color

    def test_explicit_settings(self, fake_terminal):
        options = DisplayOptions.from_env({
            "SIDEDIFF_WIDTH": "90",
            "SIDEDIFF_BACKGROUND": "Light",
            "SIDEDIFF_DISPLAY": "side-by-side-always-show-both",
            "SIDEDIFF_SYNTAX_HIGHLIGHT": "off",
            "SIDEDIFF_TAB_WIDTH": "4",
        })

        assert options.display_width == 90
        assert options.background_color is BackgroundColor.LIGHT
        assert options.show_both
        assert not options.syntax_highlight
        assert options.tab_width == 4

    def test_background_from_terminal(self, fake_terminal):
        fake_terminal["caps"] = _caps(background="light")
        assert DisplayOptions.from_env({}).background_color is BackgroundColor.LIGHT

    def test_narrow_terminal_clamped(self, fake_terminal):
        fake_terminal["caps"] = _caps(width=10)
        assert DisplayOptions.from_env({}).display_width == MIN_DISPLAY_WIDTH

    def test_bad_values_ignored(self, fake_terminal, caplog):
        with caplog.at_level(logging.WARNING, logger="sidediff.options"):
            options = DisplayOptions.from_env({
                "SIDEDIFF_WIDTH": "wide",
                "SIDEDIFF_COLOR": "sometimes",
                "SIDEDIFF_BACKGROUND": "grey",
                "SIDEDIFF_DISPLAY": "inline",
                "SIDEDIFF_SYNTAX_HIGHLIGHT": "maybe",
                "SIDEDIFF_TAB_WIDTH": "0",
            })

        assert options.display_width == 120
        assert options.use_color
        assert options.background_color is BackgroundColor.DARK
        assert options.display_mode is DisplayMode.SIDE_BY_SIDE
        assert options.syntax_highlight
        assert options.tab_width == 8
        assert len(caplog.records) == 6


class TestTerminalCaps:
    """Tests for terminal capability helpers."""

    @pytest.mark.parametrize("term,colorterm,expected", [
        ("xterm-256color", None, "256"),
        ("xterm", "truecolor", "24bit"),
        ("xterm", None, "basic"),
        ("dumb", None, "none"),
        (None, None, "none"),
    ])
    def test_color_depth(self, term, colorterm, expected):
        assert terminal_caps._detect_color_depth(True, term, colorterm) == expected

    def test_color_depth_not_interactive(self):
        assert terminal_caps._detect_color_depth(False, "xterm-256color", None) == "none"

    @pytest.mark.parametrize("colorfgbg,expected", [
        ("15;0", "dark"),
        ("0;15", "light"),
        ("15;default;0", "dark"),
        ("0;default", None),
        ("", None),
        (None, None),
    ])
    def test_background(self, colorfgbg, expected):
        assert terminal_caps._detect_background(colorfgbg) == expected

    def test_detect_cached(self):
        terminal_caps.invalidate_cache()
        try:
            first = terminal_caps.detect()
            assert terminal_caps.detect() is first
            assert set(first) == {
                "interactive", "term", "colorterm", "color_depth", "width", "background",
            }
        finally:
            terminal_caps.invalidate_cache()
