"""
Tests for chunk streaming and arena edge spawning.
"""
import random

import pytest

from game.survivor.config import GameConfig
from game.survivor.entities import Enemy, Jewel, Player
from game.survivor.world import (
    ChunkManager, EdgeSpawner, World, chunk_coord, neighbourhood,
)


def assert_chunks_reconciled(world: World):
    """Global collections hold exactly the union of chunk-owned entities."""
    for attr in ("enemies", "jewels", "terrain"):
        owned = set()
        for chunk in world.chunks.values():
            owned.update(getattr(chunk, attr))
        assert set(getattr(world, attr)) == owned, attr


@pytest.fixture
def manager():
    return ChunkManager(GameConfig.infinite(), random.Random(7))


class TestChunkCoord:

    def test_floor_division(self):
        assert chunk_coord(0, 0, 500) == (0, 0)
        assert chunk_coord(499.9, 500, 500) == (0, 1)
        assert chunk_coord(-0.1, -500, 500) == (-1, -1)
        assert chunk_coord(-500.1, 1200, 500) == (-2, 2)

    def test_neighbourhood_is_3x3(self):
        keys = neighbourhood((4, -2), 1)
        assert len(keys) == 9
        assert set(keys) == {(x, y) for x in (3, 4, 5) for y in (-3, -2, -1)}


class TestStreaming:

    def test_loaded_keys_match_neighbourhood(self, manager):
        world = World(player=Player(0, 0))
        generated, unloaded = manager.stream(world)

        assert set(world.chunks) == set(neighbourhood((0, 0), 1))
        assert len(generated) == 9
        assert unloaded == []
        assert len(world.enemies) == 9 * 5
        assert len(world.jewels) == 9 * 3
        assert_chunks_reconciled(world)

    def test_stream_is_idempotent_without_movement(self, manager):
        world = World(player=Player(10, 10))
        manager.stream(world)
        enemies = list(world.enemies)

        generated, unloaded = manager.stream(world)
        assert generated == [] and unloaded == []
        assert world.enemies == enemies

    def test_moving_unloads_far_chunks(self, manager):
        world = World(player=Player(0, 0))
        manager.stream(world)
        left_chunk = world.chunks[(-1, 0)]
        stale = list(left_chunk.enemies) + list(left_chunk.jewels)

        world.player.x = 1200  # chunk (2, 0)
        generated, unloaded = manager.stream(world)

        assert set(world.chunks) == set(neighbourhood((2, 0), 1))
        assert (-1, 0) in unloaded
        assert len(unloaded) == 6
        assert len(generated) == 6
        for entity in stale:
            assert entity not in world.enemies
            assert entity not in world.jewels
        assert_chunks_reconciled(world)

    def test_unload_of_unknown_chunk_is_noop(self, manager):
        world = World(player=Player(0, 0))
        manager.stream(world)
        before = len(world.enemies)
        assert manager.unload(world, (99, 99)) is False
        assert len(world.enemies) == before

    def test_unload_tolerates_already_removed_entities(self, manager):
        world = World(player=Player(0, 0))
        manager.stream(world)
        chunk = world.chunks[(1, 1)]
        world.enemies.remove(chunk.enemies[0])

        assert manager.unload(world, (1, 1)) is True
        assert (1, 1) not in world.chunks
        assert not any(e.chunk_key == (1, 1) for e in world.enemies)


class TestGeneration:

    def test_entities_inside_chunk_bounds(self, manager):
        world = World(player=Player(0, 0))
        chunk = manager.generate(world, (-1, 2))
        for entity in chunk.enemies + chunk.jewels + chunk.terrain:
            assert -500 <= entity.x < 0
            assert 1000 <= entity.y < 1500
            assert entity.chunk_key == (-1, 2)

    def test_enemy_template(self, manager):
        world = World(player=Player(0, 0))
        chunk = manager.generate(world, (0, 0))
        for enemy in chunk.enemies:
            assert enemy.radius == 20
            assert enemy.health == enemy.max_health == 5
            assert enemy.attack == 10
            assert 1.0 <= enemy.speed < 1.5

    @pytest.mark.parametrize("key", [(0, 0), (-1, -1), (3, -2)])
    def test_tree_grid(self, manager, key):
        world = World(player=Player(0, 0))
        chunk = manager.generate(world, key)
        assert len(chunk.terrain) == 25
        for tree in chunk.terrain:
            assert (tree.x + tree.y) % 200 == 0
            assert tree.x % 50 == 0 and tree.y % 50 == 0

    def test_unseeded_revisit_differs(self, manager):
        world = World(player=Player(0, 0))
        first = [(e.x, e.y) for e in manager.generate(world, (0, 0)).enemies]
        manager.unload(world, (0, 0))
        second = [(e.x, e.y) for e in manager.generate(world, (0, 0)).enemies]
        assert first != second

    def test_seeded_revisit_reproduces(self):
        manager = ChunkManager(GameConfig.infinite(seeded_chunks=True, seed=5), random.Random(0))
        world = World(player=Player(0, 0))
        first = [(e.x, e.y, e.speed) for e in manager.generate(world, (2, -3)).enemies]
        manager.unload(world, (2, -3))
        second = [(e.x, e.y, e.speed) for e in manager.generate(world, (2, -3)).enemies]
        assert first == second

    @pytest.mark.parametrize("seed", [None, 0, 5])
    @pytest.mark.parametrize("key, mirror", [((1, 0), (-1, 0)), ((0, 1), (0, -1))])
    def test_seeded_mirror_chunks_differ(self, seed, key, mirror):
        """Chunks on opposite sides of the origin draw different content."""
        cfg = GameConfig.infinite(seeded_chunks=True, seed=seed)
        manager = ChunkManager(cfg, random.Random(0))
        world = World(player=Player(0, 0))

        def local_offsets(k):
            x0, y0 = k[0] * cfg.chunk_size, k[1] * cfg.chunk_size
            return [(e.x - x0, e.y - y0, e.speed) for e in manager.generate(world, k).enemies]

        assert local_offsets(key) != local_offsets(mirror)


class TestWorldCompaction:

    def test_dead_enemy_leaves_its_chunk(self, manager):
        world = World(player=Player(0, 0))
        manager.stream(world)
        victim = world.chunks[(0, 1)].enemies[2]
        victim.alive = False

        world.compact_enemies()
        assert victim not in world.enemies
        assert victim not in world.chunks[(0, 1)].enemies
        assert_chunks_reconciled(world)

    def test_jewel_for_unloaded_chunk_becomes_unowned(self):
        world = World(player=Player(0, 0))
        jewel = Jewel(0, 0, chunk_key=(8, 8))
        world.add_jewel(jewel)
        assert jewel in world.jewels
        assert jewel.chunk_key is None


class TestEdgeSpawner:

    def test_interval_scales_with_level(self):
        spawner = EdgeSpawner(GameConfig.arena(), random.Random(0))
        assert spawner.interval(1) == pytest.approx(1000)
        assert spawner.interval(2) == pytest.approx(850)
        assert spawner.interval(3) < spawner.interval(2)
        assert spawner.interval(40) == pytest.approx(250)

    def test_spawns_on_edges(self):
        cfg = GameConfig.arena()
        spawner = EdgeSpawner(cfg, random.Random(11))
        world = World(player=Player(400, 300))
        for _ in range(40):
            enemy = spawner.spawn(world)
            on_edge = (
                enemy.x == cfg.spawn_margin or enemy.x == cfg.width - cfg.spawn_margin
                or enemy.y == cfg.spawn_margin or enemy.y == cfg.height - cfg.spawn_margin
            )
            assert on_edge
        assert len(world.enemies) == 40

    def test_update_respects_interval(self):
        spawner = EdgeSpawner(GameConfig.arena(), random.Random(0))
        spawner.reset(0.0)
        world = World(player=Player(400, 300))
        assert spawner.update(world, 999.0) is None
        assert isinstance(spawner.update(world, 1000.0), Enemy)
        assert spawner.update(world, 1500.0) is None
        assert len(world.enemies) == 1

    def test_update_respects_population_cap(self):
        spawner = EdgeSpawner(GameConfig.arena(max_enemies=2), random.Random(0))
        world = World(player=Player(400, 300))
        for step in range(1, 6):
            spawner.update(world, step * 1000.0)
        assert len(world.enemies) == 2
