"""Tests for shared.progress module."""

import io

from shared.progress import ConsoleProgress


class TestConsoleProgress:
    """Tests for ConsoleProgress."""

    def test_initial_render(self):
        stream = io.StringIO()
        ConsoleProgress(total=4, label='Tiles', stream=stream)
        assert 'Tiles: [' in stream.getvalue()
        assert '0/4' in stream.getvalue()

    def test_update_from_loader_callback(self):
        stream = io.StringIO()
        progress = ConsoleProgress(total=1, stream=stream)
        progress.update(3, 9)
        assert progress.total == 9
        assert progress.done == 3
        assert '3/9' in stream.getvalue()

    def test_step_clamped_to_total(self):
        progress = ConsoleProgress(total=2, stream=io.StringIO())
        progress.step(5)
        assert progress.done == 2

    def test_zero_total_treated_as_one(self):
        progress = ConsoleProgress(total=0, stream=io.StringIO())
        assert progress.total == 1

    def test_close_ends_line(self):
        stream = io.StringIO()
        progress = ConsoleProgress(total=1, stream=stream)
        progress.close()
        assert stream.getvalue().endswith('\n')

    def test_eta_format(self):
        progress = ConsoleProgress(total=1, stream=io.StringIO())
        assert progress._format_eta(float('inf')) == '--:--'
        assert progress._format_eta(75) == '01:15'
        assert progress._format_eta(3725) == '01:02:05'
