"""Tests for the compressing display queue."""

from keycast.display_queue import DisplayQueue, RenderedToken, compress, display_width, runs


class TestCompress:
    """Tests for runs() and compress()."""

    def test_runs_group_consecutive_symbols(self):
        assert runs(["a", "a", "b", "a"]) == [("a", 2), ("b", 1), ("a", 1)]

    def test_runs_of_nothing(self):
        assert runs([]) == []

    def test_long_run_is_compressed(self):
        assert compress(["x"] * 4, compress_after=3) == [RenderedToken("x..x4", 4)]

    def test_short_run_stays_literal(self):
        assert compress(["x", "x"], compress_after=3) == [RenderedToken("x", 1), RenderedToken("x", 1)]

    def test_threshold_is_inclusive(self):
        assert compress(["x"] * 3, compress_after=3) == [RenderedToken("x..x3", 3)]

    def test_threshold_of_one_compresses_everything(self):
        assert compress(["a", "b"], compress_after=1) == [RenderedToken("a..x1", 1), RenderedToken("b..x1", 1)]


class TestDisplayWidth:
    """Tests for display_width."""

    def test_ascii(self):
        assert display_width("a..x4 b") == 7

    def test_wide_characters_take_two_columns(self):
        assert display_width("漢字") == 4

    def test_non_printable_characters_do_not_count(self):
        assert display_width("a\x1bb") == 2

    def test_empty(self):
        assert display_width("") == 0


class TestDisplayQueue:
    """Tests for DisplayQueue.render and eviction."""

    def test_compressed_run_then_literal(self):
        """width=10, compress_after=3: a a a a b -> 'a..x4 b'."""
        queue = DisplayQueue(width=10, compress_after=3)
        queue.append(["a", "a", "a", "a", "b"])
        assert queue.render() == "a..x4 b"
        assert len(queue) == 5

    def test_oldest_literal_is_evicted(self):
        """width=6, compress_after=3: 'x x y' is too wide, the first x goes."""
        queue = DisplayQueue(width=6, compress_after=3)
        queue.append(["x", "x", "y"])
        assert queue.render() == "x y"
        assert list(queue) == ["x", "y"]

    def test_short_runs_render_literal_repeats(self):
        queue = DisplayQueue(width=40, compress_after=3)
        queue.append(["a", "a", "b", "b"])
        assert queue.render() == "a a b b"

    def test_append_has_no_deduplication(self):
        queue = DisplayQueue(width=40, compress_after=3)
        queue.append(["j"])
        queue.append(["j"])
        queue.append(["j", "j"])
        assert queue.render() == "j..x4"
        assert len(queue) == 4

    def test_render_is_idempotent(self):
        queue = DisplayQueue(width=12, compress_after=3)
        queue.append(["a", "b", "c", "c", "c", "c", "d", "e", "f", "g"])
        first = queue.render()
        assert queue.render() == first
        assert queue.render() == first

    def test_compressed_run_evicted_atomically(self):
        """A run of 12 leaves the queue in one go; multi-digit counts work."""
        queue = DisplayQueue(width=10, compress_after=3)
        queue.append(["j"] * 12 + ["k", "l", "m"])
        assert queue.render() == "k l m"
        assert list(queue) == ["k", "l", "m"]

    def test_eviction_removes_exactly_the_token_count(self):
        queue = DisplayQueue(width=12, compress_after=3)
        queue.append(["a", "a", "a", "a", "a", "b", "c", "d", "e"])
        # "a..x5 b c d e" is 13 columns, budget is 10
        assert queue.render() == "b c d e"
        assert list(queue) == ["b", "c", "d", "e"]

    def test_evicted_symbols_do_not_merge_later(self):
        queue = DisplayQueue(width=9, compress_after=3)
        queue.append(["a", "a", "a", "b", "c"])
        # "a..x3 b c" is 9 columns, budget is 7
        assert queue.render() == "b c"
        queue.append(["c", "c"])
        assert queue.render() == "b c..x3"

    def test_width_bound_holds(self):
        queue = DisplayQueue(width=15, compress_after=3)
        for symbol in "the quick brown fox jumps over the lazy dog" * 3:
            queue.append([symbol, "Ctrl+a"])
            assert display_width(queue.render()) <= queue.budget

    def test_wide_glyphs_measured_in_columns(self):
        queue = DisplayQueue(width=6, compress_after=3)
        queue.append(["漢", "字", "x"])
        assert queue.render() == "字 x"

    def test_tiny_width_renders_empty(self):
        """Widths below the margin cannot show anything and must not loop."""
        for width in (1, 2):
            queue = DisplayQueue(width=width, compress_after=3)
            queue.append(["a", "b", "b", "b"])
            assert queue.render() == ""
            assert len(queue) == 0

    def test_symbol_wider_than_budget_is_evicted(self):
        queue = DisplayQueue(width=5, compress_after=3)
        queue.append(["Ctrl+a"])
        assert queue.render() == ""
        assert len(queue) == 0

    def test_empty_queue_renders_empty(self):
        assert DisplayQueue(width=40, compress_after=3).render() == ""

    def test_clear(self):
        queue = DisplayQueue(width=40, compress_after=3)
        queue.append(["a", "b"])
        queue.clear()
        assert len(queue) == 0
        assert queue.render() == ""

    def test_runs_reflect_queue(self):
        queue = DisplayQueue(width=40, compress_after=3)
        queue.append(["a", "a", "b"])
        assert queue.runs() == [("a", 2), ("b", 1)]

    def test_budget_reserves_margin(self):
        assert DisplayQueue(width=40, compress_after=3).budget == 38
