"""Tests for the typewriter text layout and reveal."""

import pytest
import skia

from heartree.text import TextLine, TextTyper, layout_lines

WHITE = skia.ColorWHITE
PINK = skia.Color(236, 72, 153)


class TestLayout:
    """Test splitting messages into timed lines."""

    def test_splits_paragraphs_into_lines(self):
        """Embedded line breaks should become separate lines."""
        lines = layout_lines(["ab", "cde\nf"], start_time=10.0)
        assert [l.text for l in lines] == ["ab", "cde", "f"]

    def test_start_times_are_running_sum(self):
        """Each start should equal the running sum of (duration + gap)."""
        lines = layout_lines(["ab", "cde\nf", "ghij"], start_time=10.0, char_interval=0.04, line_gap=0.2)
        expected = 10.0
        for line in lines:
            assert line.start_t == pytest.approx(expected)
            assert line.duration == pytest.approx(len(line.text) * 0.04 + 0.3)
            expected += line.duration + 0.2

    def test_start_times_strictly_increase(self):
        """No line should start before the previous one has finished."""
        lines = layout_lines(["one", "two\nthree", "", "four"], start_time=0.0)
        for prev, cur in zip(lines, lines[1:]):
            assert cur.start_t > prev.start_t
            assert cur.start_t >= prev.start_t + prev.duration

    def test_vertical_spacing(self):
        """Lines step by line height, paragraphs add an extra gap."""
        lines = layout_lines(["a\nb", "c"], start_time=0.0, y=320, line_height=75, paragraph_gap=25)
        assert [l.y for l in lines] == [320, 395, 495]

    def test_accent_marker(self):
        """Only lines containing the marker should be accented."""
        lines = layout_lines(["Je t'aime", "Je t'aime fort fort fort"], 0.0, accent_marker="fort fort fort")
        assert [l.accent for l in lines] == [False, True]

    def test_no_marker_means_no_accent(self):
        """An empty marker should never accent a line."""
        lines = layout_lines(["anything"], 0.0, accent_marker="")
        assert not lines[0].accent

    def test_empty_messages(self):
        """No messages should give no lines."""
        assert layout_lines([], 12.0) == []


class TestReveal:
    """Test per-line character reveal."""

    def _line(self):
        return TextLine("hello", x=0, y=0, start_t=5.0, duration=5 * 0.04 + 0.3, char_interval=0.04)

    def test_nothing_before_start(self):
        """No characters should show before the line starts."""
        line = self._line()
        assert line.visible_chars(4.99) == 0
        assert line.visible_text(0.0) == ""

    def test_partial_reveal(self):
        """Characters appear one per interval."""
        line = self._line()
        assert line.visible_chars(5.0) == 0
        assert line.visible_chars(5.0 + 0.04 * 2.5) == 2
        assert line.visible_text(5.0 + 0.04 * 3.5) == "hel"

    def test_full_after_duration(self):
        """The whole line should show once its duration has passed."""
        line = self._line()
        assert line.visible_chars(line.end_t) == 5
        assert line.visible_text(100.0) == "hello"


class TestTextTyper:
    """Test the typer that draws the lines."""

    def test_end_time_includes_hold(self):
        """The narrative should hold for a few seconds after the last line."""
        lines = layout_lines(["ab", "cd"], start_time=12.0)
        typer = TextTyper(lines, 12.0, WHITE, PINK)
        assert typer.end_time == pytest.approx(lines[-1].end_t + TextTyper.HOLD)

    def test_empty_typer_is_noop(self):
        """A typer with no lines should draw nothing and end at its start."""
        typer = TextTyper([], 12.0, WHITE, PINK)
        assert typer.end_time == 12.0
        surface = skia.Surface.MakeRasterN32Premul(64, 64)
        typer.render(surface.getCanvas(), 20.0)

    def test_accent_line_uses_bold_font(self):
        """Accented lines should be drawn with the larger accent font."""
        typer = TextTyper([], 0.0, WHITE, PINK)
        assert typer.accent_font.getSize() == 55
        assert typer.font.getSize() == 45

    def test_render_restores_canvas(self):
        """Drawing text should leave the canvas state balanced."""
        lines = layout_lines(["HEART", "fort fort fort"], start_time=0.0, x=10, y=50,
                             accent_marker="fort fort fort")
        typer = TextTyper(lines, 0.0, WHITE, PINK)
        surface = skia.Surface.MakeRasterN32Premul(400, 300)
        canvas = surface.getCanvas()
        depth = canvas.getSaveCount()
        typer.render(canvas, 10.0)
        assert canvas.getSaveCount() == depth
