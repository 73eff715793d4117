"""Tests for the side-by-side formatter plugin."""

import io

import pytest
from rich.text import Text

from .. import (
    BackgroundColor,
    ConfigValidationError,
    DisplayOptions,
    Hunk,
    LineNumber,
    MatchedPos,
    MatchKind,
    SideBySideFormatterPlugin,
    SingleLineSpan,
    create_plugin,
)
from ..options import MIN_DISPLAY_WIDTH


OLD_SRC = "def hello():\n    return 1\n"
NEW_SRC = "def hello():\n    return 2\n"

HUNKS = [Hunk(
    lines=[(LineNumber(0), LineNumber(0)), (LineNumber(1), LineNumber(1))],
    novel_lhs={LineNumber(1)},
    novel_rhs={LineNumber(1)},
)]
OLD_MPS = [MatchedPos(MatchKind.NOVEL, SingleLineSpan(LineNumber(1), 11, 12))]
NEW_MPS = [MatchedPos(MatchKind.NOVEL, SingleLineSpan(LineNumber(1), 11, 12))]


def _plain_plugin(width=40):
    plugin = create_plugin()
    plugin.initialize({"display_width": width, "use_color": False})
    return plugin


class TestSideBySideFormatterPlugin:
    """Tests for the main plugin class."""

    def test_create_plugin(self):
        plugin = create_plugin()
        assert isinstance(plugin, SideBySideFormatterPlugin)
        assert plugin.name == "side_by_side"

    def test_default_options(self):
        assert create_plugin().options == DisplayOptions()

    def test_initialize(self):
        plugin = create_plugin()
        plugin.initialize({"display_width": 140, "background_color": "light"})
        assert plugin.options.display_width == 140
        assert plugin.options.background_color is BackgroundColor.LIGHT

    def test_initialize_invalid(self):
        plugin = create_plugin()
        with pytest.raises(ConfigValidationError):
            plugin.initialize({"display_mode": "unified"})

    def test_shutdown(self):
        plugin = create_plugin()
        plugin.shutdown()


class TestSettings:
    """Tests for runtime setting changes."""

    def test_set_console_width(self):
        plugin = create_plugin()
        plugin.set_console_width(140)
        assert plugin.options.display_width == 140

    def test_narrow_width_clamped(self):
        plugin = create_plugin()
        plugin.set_console_width(8)
        assert plugin.options.display_width == MIN_DISPLAY_WIDTH

    def test_set_background(self):
        plugin = create_plugin()
        plugin.set_background(BackgroundColor.LIGHT)
        assert plugin.options.background_color is BackgroundColor.LIGHT

    def test_disable_enable_colors(self):
        plugin = create_plugin()
        plugin.disable_colors()
        assert not plugin.options.use_color
        plugin.enable_colors()
        assert plugin.options.use_color

    def test_get_current_mode(self):
        plugin = create_plugin()
        assert plugin.get_current_mode() == "side-by-side"
        plugin.initialize({"display_mode": "side-by-side-always-show-both"})
        assert plugin.get_current_mode() == "side-by-side-always-show-both"


class TestOutput:
    """Tests for rendering through the plugin."""

    def test_format_output(self):
        plugin = _plain_plugin()

        output = plugin.format_output(
            HUNKS, "test.py", "test.py", OLD_SRC, NEW_SRC, OLD_MPS, NEW_MPS,
        )

        lines = output.split("\n")
        assert lines[0] == "test.py --- 1/1 --- Python"
        assert lines[1] == "1 def hello():" + " " * 5 + " 1 def hello():"
        assert lines[2] == "2     return 1" + " " * 5 + " 2     return 2"
        assert "\x1b[" not in output

    def test_language_override(self):
        plugin = _plain_plugin()

        output = plugin.format_output(
            HUNKS, "a", "b", OLD_SRC, NEW_SRC, OLD_MPS, NEW_MPS, lang_name="Python",
        )

        assert output.split("\n")[0] == "a -> b --- 1/1 --- Python"

    def test_language_from_new_path(self):
        plugin = _plain_plugin()

        output = plugin.format_output(
            HUNKS, "old.txt", "new.zzz", OLD_SRC, NEW_SRC, OLD_MPS, NEW_MPS,
        )

        assert output.split("\n")[0] == "old.txt -> new.zzz --- 1/1 --- Text"

    def test_colored_output(self):
        plugin = create_plugin()
        plugin.set_console_width(40)

        output = plugin.format_output(
            HUNKS, "test.py", "test.py", OLD_SRC, NEW_SRC, OLD_MPS, NEW_MPS,
        )

        assert "\x1b[" in output

    def test_print_output(self):
        plugin = _plain_plugin()
        stream = io.StringIO()

        plugin.print_output(
            HUNKS, "test.py", "test.py", OLD_SRC, NEW_SRC, OLD_MPS, NEW_MPS,
            file=stream,
        )

        assert stream.getvalue() == plugin.format_output(
            HUNKS, "test.py", "test.py", OLD_SRC, NEW_SRC, OLD_MPS, NEW_MPS,
        )

    def test_added_file(self):
        plugin = _plain_plugin()

        output = plugin.format_added_file("new.py", "x = 1\ny = 2\n")

        assert output.split("\n") == [
            "new.py --- 1/1 --- Python",
            "1 x = 1",
            "2 y = 2",
            "",
            "",
        ]

    def test_removed_file_colored(self):
        plugin = create_plugin()

        output = plugin.format_removed_file("old.py", "x = 1\n")

        assert output.startswith("\x1b[")
        assert "x" in output


class TestTabs:
    """Tabs are expanded before tokenising and rendering."""

    TAB_HUNKS = [Hunk(
        lines=[(LineNumber(0), LineNumber(0))],
        novel_lhs={LineNumber(0)},
        novel_rhs={LineNumber(0)},
    )]
    # Columns refer to the tab-expanded old source.
    TAB_OLD_MPS = [MatchedPos(MatchKind.NOVEL, SingleLineSpan(LineNumber(0), 8, 9))]
    TAB_NEW_MPS = [MatchedPos(MatchKind.NOVEL, SingleLineSpan(LineNumber(0), 0, 1))]

    def test_tab_indented_row_keeps_columns(self):
        plugin = _plain_plugin()

        output = plugin.format_output(
            self.TAB_HUNKS, "t.py", "t.py", "\tx", "y",
            self.TAB_OLD_MPS, self.TAB_NEW_MPS,
        )

        row = output.split("\n")[1]
        assert "\t" not in row
        assert row.index("1 y") == 20
        assert row == "1 " + " " * 8 + "x" + " " * 8 + " 1 y"

    def test_colored_tab_indented_row_fills_width(self):
        plugin = create_plugin()
        plugin.set_console_width(40)

        output = plugin.format_output(
            self.TAB_HUNKS, "t.py", "t.py", "\tx", "y",
            self.TAB_OLD_MPS, self.TAB_NEW_MPS,
        )

        row = Text.from_ansi(output.split("\n")[1]).plain
        assert len(row) == 40
        assert row[20:23] == "1 y"

    def test_configured_tab_width(self):
        plugin = create_plugin()
        plugin.initialize({"display_width": 40, "use_color": False, "tab_width": 2})

        output = plugin.format_output(
            self.TAB_HUNKS, "t.py", "t.py", "\tx", "y",
            [MatchedPos(MatchKind.NOVEL, SingleLineSpan(LineNumber(0), 2, 3))],
            self.TAB_NEW_MPS,
        )

        assert output.split("\n")[1] == "1   x" + " " * 14 + " 1 y"

    def test_added_file_expanded(self):
        plugin = _plain_plugin()

        output = plugin.format_added_file("new.py", "if x:\n\ty = 1\n")

        assert output.split("\n")[2] == "2 " + " " * 8 + "y = 1"
