"""Tests for slashable targets and the spawner."""
import random
from unittest.mock import MagicMock

import pytest

from slashlat.assets import TextureCache, placeholder_texture
from slashlat.core.clock import GameClock
from slashlat.entities.targets import (
    CELL_SIZE, DEATH_FADE_MS, TargetKind, create_target, max_hp_for, roll_size,
)
from slashlat.systems.spawner import Spawner, SpawnSettings

from conftest import make_target, make_texture


class TestPixelOpacity:
    """Tests for alpha-mask lookups."""

    def test_center_of_opaque_texture(self, clock):
        """Test that a solid texture is opaque at its center."""
        target = make_target(clock)

        assert target.is_pixel_opaque(0, 0)

    def test_outside_texture(self, clock):
        """Test that points beyond the displayed image are transparent."""
        target = make_target(clock)

        assert not target.is_pixel_opaque(50, 0)
        assert not target.is_pixel_opaque(-50.01, 0)
        assert target.is_pixel_opaque(-50, 0)

    def test_threshold_is_exclusive(self, clock):
        """Test that alpha must exceed the threshold to count as solid."""
        texture = make_texture(2, 1)
        texture.set_at((0, 0), (255, 255, 255, 50))
        texture.set_at((1, 0), (255, 255, 255, 51))
        target = make_target(clock, x=0, y=0, texture=texture)

        assert not target.is_pixel_opaque(-0.5, 0)
        assert target.is_pixel_opaque(0.5, 0)

    def test_scaled_lookup(self, clock):
        """Test that displayed pixels map back through the draw scale."""
        # 10x10 texture, left half opaque, displayed at 100x100
        texture = make_texture(10, 10, opaque=(0, 0, 5, 10))
        target = create_target(
            TargetKind.BEE, 0, 0, clock, texture, size=(1, 1), dpr=100 / CELL_SIZE,
        )

        assert target.scale == pytest.approx(10)
        assert target.width == pytest.approx(100)
        assert target.is_pixel_opaque(-1, 0)
        assert not target.is_pixel_opaque(1, 0)

    def test_aspect_ratio_preserved(self, clock):
        """Test that a wide texture fits the cell without stretching."""
        target = create_target(
            TargetKind.BEE, 0, 0, clock, make_texture(200, 100), size=(1, 1),
        )

        assert target.width == pytest.approx(CELL_SIZE)
        assert target.height == pytest.approx(CELL_SIZE / 2)

    def test_set_texture_rebuilds_mask(self, clock):
        """Test that swapping the texture changes the hit mask."""
        target = make_target(clock, texture=make_texture())
        assert not target.is_pixel_opaque(0, 0)

        target.set_texture(make_texture(opaque=(0, 0, 100, 100)))

        assert target.is_pixel_opaque(0, 0)


class TestCreateTarget:
    """Tests for the target factory."""

    def test_from_string_kind(self, clock):
        """Test creation from a kind's string value."""
        target = create_target("lion", 0, 0, clock, make_texture())

        assert target.kind == TargetKind.LION
        assert target.max_hp == 800
        assert target.hp == 800

    def test_unknown_kind(self, clock):
        """Test that an unknown kind is rejected."""
        with pytest.raises(ValueError, match="dragon"):
            create_target("dragon", 0, 0, clock, make_texture())

    def test_hp_scales_with_cells(self):
        """Test per-cell hit points for sized kinds."""
        assert max_hp_for(TargetKind.ORANGE_BOT, (1, 1)) == 200
        assert max_hp_for(TargetKind.ORANGE_BOT, (3, 2)) == 1200
        assert max_hp_for(TargetKind.BEE, (1, 1)) == 150

    def test_roll_size_uses_configured_sizes(self):
        """Test that rolled sizes come from the kind's table."""
        rng = random.Random(3)
        sizes = {roll_size(TargetKind.FLY_BOT, rng) for _ in range(200)}

        assert sizes == {(1, 1), (2, 1), (3, 2)}


class TestTargetState:
    """Tests for damage, animation and death."""

    def test_take_damage_floors_at_zero(self, clock):
        """Test that hp never goes negative."""
        target = make_target(clock, max_hp=50)
        target.take_damage(80)

        assert target.hp == 0
        assert target.is_dead()

    def test_shake_returns_to_rest(self, clock):
        """Test that a shake displaces the target briefly along the slash."""
        target = make_target(clock)
        target.shake(10, 0)

        clock.set(20)
        assert target.position[0] > 100
        assert target.position[1] == 100

        clock.set(60)
        target.update()
        assert target.position == (100, 100)

    def test_entrance_fades_in(self, clock):
        """Test that an entering target slides in and becomes hittable."""
        target = make_target(clock)
        target.start_entrance(100, -200, duration=1000)

        assert target.visibility == 0.0
        assert target.position == (100, -200)

        clock.set(1000)
        target.update()
        assert target.visibility == 1.0
        assert not target.entering
        assert target.position == (100, 100)

    def test_explode_runs_callback_after_fade(self, clock):
        """Test that the death callback runs once when the fade ends."""
        target = make_target(clock)
        on_complete = MagicMock()

        particles = target.explode(on_complete=on_complete)
        assert particles
        assert target.dying

        clock.set(DEATH_FADE_MS - 1)
        target.update()
        on_complete.assert_not_called()

        clock.set(DEATH_FADE_MS)
        target.update()
        target.update()
        on_complete.assert_called_once()
        assert target.visibility == 0.0

    def test_cancel_animations_freezes_entrance(self, clock):
        """Test that cancelling mid-entrance keeps the current position."""
        target = make_target(clock)
        target.start_entrance(0, 100, duration=1000)
        clock.set(500)
        moving = target.position

        target.cancel_animations()

        assert not target.entering
        assert target.position == pytest.approx(moving)

    def test_slash_damage_without_span(self, clock):
        """Test that a cut with no span is a nick at the hit point."""
        target = make_target(clock)
        target.draw_slash_damage((110, 95), (0, 0))

        assert target.slash_lines == [(10, -5, 10, -5)]


class TestSpawner:
    """Tests for the live roster."""

    def test_spawn_and_retire(self, clock):
        """Test that retired targets leave the live list but keep animating."""
        spawner = Spawner(clock)
        target = spawner.spawn(make_target(clock))

        assert spawner.is_live(target)
        spawner.retire(target)

        assert not spawner.is_live(target)
        assert spawner.dying == [target]

    def test_kill_counter(self, clock):
        """Test that kills decrement the population once each."""
        spawner = Spawner(clock)
        spawner.spawn(make_target(clock))
        spawner.spawn(make_target(clock))

        spawner.on_enemy_killed()

        assert spawner.active_count == 1
        assert spawner.kills == 1

    def test_spawns_on_schedule(self):
        """Test interval and population limits."""
        clock = GameClock()
        factory = MagicMock(side_effect=lambda kind: make_target(clock))
        spawner = Spawner(clock, factory=factory, settings=SpawnSettings(max_concurrent=2, spawn_interval=1000))

        spawner.update()
        assert len(spawner.targets) == 1

        clock.set(500)
        spawner.update()
        assert len(spawner.targets) == 1

        clock.set(1000)
        spawner.update()
        clock.set(2000)
        spawner.update()
        assert len(spawner.targets) == 2

    def test_choose_kind_respects_weights(self):
        """Test that only weighted kinds are chosen."""
        settings = SpawnSettings(weights={TargetKind.BEE: 1.0})
        spawner = Spawner(GameClock(), settings=settings, rng=random.Random(1))

        assert {spawner.choose_kind() for _ in range(20)} == {TargetKind.BEE}


class TestAssets:
    """Tests for texture loading."""

    def test_missing_sprite_uses_placeholder(self, tmp_path):
        """Test that missing art falls back to a drawn silhouette."""
        cache = TextureCache(tmp_path)
        texture = cache.get(TargetKind.ROBOT)

        assert texture.get_size() == (128, 128)
        assert cache.get(TargetKind.ROBOT) is texture

    def test_placeholder_has_transparent_corners(self, clock):
        """Test that the placeholder is cut out of a transparent background."""
        target = make_target(clock, x=0, y=0, texture=placeholder_texture(TargetKind.BEE))

        assert target.is_pixel_opaque(0, 0)
        assert not target.is_pixel_opaque(-63, -63)
