"""Tests for trail capture, smoothing and fade."""
import pytest

from slashlat.config import SlashConfig
from slashlat.entities.trails import TrailPoint
from slashlat.systems.trail_system import TrailTracker, catmull_rom, smooth_trail


@pytest.fixture
def tracker(clock, config):
    return TrailTracker(config, clock)


class TestSession:
    """Tests for the session lifecycle."""

    def test_start_records_first_point(self, tracker):
        """Test that the pointer-down point is always recorded."""
        tracker.start_session(10, 20)

        assert tracker.is_active()
        assert tracker.last_point() == TrailPoint(10, 20, 0.0)

    def test_start_clears_previous_trail(self, tracker):
        """Test that a new session discards old points."""
        tracker.start_session(0, 0)
        tracker.add_point(50, 0)
        tracker.end_session()
        tracker.start_session(200, 200)

        assert len(tracker.points) == 1
        assert tracker.session.accumulated_length == 0
        assert not tracker.session.touched_targets

    def test_end_keeps_points(self, tracker):
        """Test that ending a session leaves points for the fade-out."""
        tracker.start_session(0, 0)
        tracker.add_point(20, 0)
        tracker.end_session()

        assert not tracker.is_active()
        assert len(tracker.points) == 2

    def test_no_session(self, tracker):
        """Test the idle state before any gesture."""
        assert not tracker.is_active()
        assert tracker.last_point() is None
        assert tracker.add_point(5, 5) is False
        assert tracker.advance() is None


class TestAddPoint:
    """Tests for point filtering and caps."""

    def test_close_points_are_skipped(self, tracker):
        """Test that points closer than the minimum spacing are not recorded."""
        tracker.start_session(0, 0)

        assert tracker.add_point(3, 0) is True
        assert len(tracker.points) == 1

        assert tracker.add_point(4, 0) is True
        assert len(tracker.points) == 2

    def test_min_distance_scales_with_dpr(self, clock):
        """Test that spacing is measured in density-scaled pixels."""
        tracker = TrailTracker(SlashConfig(dpr=2.0), clock)
        tracker.start_session(0, 0)
        tracker.add_point(6, 0)

        assert len(tracker.points) == 1

    def test_point_cap_drops_oldest(self, clock):
        """Test that the trail never exceeds its cap and drops FIFO."""
        config = SlashConfig(max_trail_points=5, max_session_duration=10_000)
        tracker = TrailTracker(config, clock)
        tracker.start_session(0, 0)

        for i in range(1, 10):
            tracker.add_point(i * 10, 0)
            assert len(tracker.points) <= 5

        assert [p.x for p in tracker.points] == [50, 60, 70, 80, 90]

    def test_duration_cap_forces_end(self, tracker, clock):
        """Test that a gesture past the duration cap is ended."""
        tracker.start_session(0, 0)
        clock.set(349)
        assert tracker.add_point(10, 0) is True

        clock.set(350)
        assert tracker.add_point(20, 0) is False
        assert not tracker.is_active()
        assert tracker.session.forced_end

    def test_after_cap_always_false(self, tracker, clock):
        """Test that every later add is refused until a new session starts."""
        tracker.start_session(0, 0)
        clock.set(500)
        tracker.add_point(10, 0)

        assert tracker.add_point(30, 0) is False
        assert tracker.add_point(60, 0) is False

        tracker.start_session(0, 0)
        assert tracker.add_point(30, 0) is True

    def test_recorded_duration_is_capped(self, tracker, clock):
        """Test that the session never records more than the cap."""
        tracker.start_session(0, 0)
        clock.set(2000)
        tracker.add_point(10, 0)

        session = tracker.session
        assert session.end_time - session.start_time == 350

    def test_late_release_records_real_end(self, tracker, clock):
        """Test that releasing after holding still past the cap still fades out."""
        tracker.start_session(0, 0)
        tracker.add_point(20, 0)
        clock.set(2000)
        tracker.end_session()

        assert tracker.session.end_time == 2000
        assert not tracker.session.forced_end
        assert tracker.fade_alpha() == 1.0
        assert tracker.advance() is not None

        clock.set(2000 + 100 + 75)
        assert tracker.fade_alpha() == pytest.approx(0.5)


class TestSmoothing:
    """Tests for Catmull-Rom smoothing."""

    def test_catmull_rom_endpoints(self):
        """Test that the curve passes through its inner control points."""
        p0, p1, p2, p3 = (0, 0), (10, 0), (20, 10), (30, 10)

        assert catmull_rom(p0, p1, p2, p3, 0.0) == pytest.approx(p1)
        assert catmull_rom(p0, p1, p2, p3, 1.0) == pytest.approx(p2)

    def test_sample_count_and_progress(self):
        """Test N sub-samples per segment plus the final point."""
        points = [TrailPoint(i * 10, 0, 0) for i in range(4)]
        curve = smooth_trail(points, segments_per_point=10)

        assert len(curve) == 3 * 10 + 1
        assert curve[0].progress == 0.0
        assert curve[-1].progress == 1.0
        assert all(a.progress <= b.progress for a, b in zip(curve, curve[1:]))

    def test_straight_line_stays_straight(self):
        """Test that collinear points smooth to the same line."""
        points = [TrailPoint(i * 10, 5, 0) for i in range(5)]
        curve = smooth_trail(points, segments_per_point=4)

        assert all(p.y == pytest.approx(5) for p in curve)

    def test_degenerate_trail(self):
        """Test that a single point yields no curve."""
        assert smooth_trail([TrailPoint(0, 0, 0)], 10) == []


class TestRendering:
    """Tests for the per-frame ribbon and fade."""

    def test_frame_tapers_toward_tail(self, tracker):
        """Test that the oldest quads are thinner and fainter than the newest."""
        tracker.start_session(0, 0)
        for x in (20, 40, 60):
            tracker.add_point(x, 0)

        frame = tracker.advance()

        assert frame is not None
        assert frame.fade_alpha == 1.0
        assert frame.quads[0][1] < frame.quads[-1][1]
        assert frame.end_cap is not None
        tip = frame.end_cap[0][2]
        assert tip[0] == pytest.approx(60 + 30)

    def test_single_point_draws_nothing(self, tracker):
        """Test that a one-point trail skips curve generation."""
        tracker.start_session(0, 0)

        assert tracker.advance() is None

    def test_curve_cache_invalidated(self, tracker):
        """Test that adding points rebuilds the smoothed curve."""
        tracker.start_session(0, 0)
        tracker.add_point(20, 0)
        first = tracker.smoothed_curve()
        tracker.add_point(40, 0)

        assert len(tracker.smoothed_curve()) > len(first)

    def test_fade_timeline(self, tracker, clock):
        """Test fade delay, linear fade and the exact zero point."""
        tracker.start_session(0, 0)
        clock.set(50)
        tracker.add_point(20, 0)
        tracker.end_session()

        clock.set(50 + 100)
        assert tracker.fade_alpha() == 1.0

        clock.set(50 + 100 + 75)
        assert tracker.fade_alpha() == pytest.approx(0.5)

        clock.set(50 + 100 + 149)
        assert tracker.fade_alpha() > 0
        assert tracker.advance() is not None

        clock.set(50 + 100 + 150)
        assert tracker.fade_alpha() == 0.0

    def test_faded_trail_is_discarded(self, tracker, clock):
        """Test that advancing after the fade clears points and stays idle."""
        tracker.start_session(0, 0)
        tracker.add_point(20, 0)
        tracker.end_session()

        clock.set(1000)
        assert tracker.advance() is None
        assert tracker.points == []
        assert tracker.advance() is None
        assert tracker.points == []

    def test_active_trail_does_not_fade(self, tracker, clock):
        """Test that a live gesture is fully opaque."""
        tracker.start_session(0, 0)
        clock.set(300)

        assert tracker.fade_alpha() == 1.0
