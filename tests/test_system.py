"""Tests for the BiomeSystem facade."""

from dataclasses import replace

import pytest

from biome_worldgen.biomes import BiomeCatalog
from biome_worldgen.errors import ConfigurationError
from biome_worldgen.models import GeneratedWorld
from biome_worldgen.settings import WorldConfig
from biome_worldgen.system import BiomeSystem, Zone, ZoneBounds


def tiny_params(**overrides):
    params = {"width": 4, "height": 4, "tile_size": 32, "enabled_biomes": ["grassland"], "forced_spawns": []}
    params.update(overrides)
    return params


class TestScenarioConfig:
    """Plain configuration dictionaries with no forced spawns of their own."""

    def test_bare_small_world(self, grassland_only_catalog, null_logger):
        params = {"width": 4, "height": 4, "seed": 12345, "enabled_biomes": ["grassland"]}
        system = BiomeSystem(params, grassland_only_catalog, null_logger)
        world = system.generate()
        assert system.config.forced_spawns == ()
        assert world.biome_map == (("grassland",) * 4,) * 4
        assert len(world.layer("terrain")) == 16

    def test_default_catalog_on_narrow_world(self, null_logger):
        system = BiomeSystem({"width": 16, "height": 16, "seed": 7}, logger=null_logger)
        world = system.generate()
        assert len(world.biome_map) == 16
        assert all(len(row) == 16 for row in world.biome_map)


class TestWorldLifecycle:

    @pytest.fixture
    def system(self, grassland_only_catalog, null_logger):
        return BiomeSystem(tiny_params(), grassland_only_catalog, null_logger)

    def test_accepts_world_config(self, grassland_only_catalog, null_logger):
        config = WorldConfig.from_dict(tiny_params())
        system = BiomeSystem(config, grassland_only_catalog, null_logger)
        assert system.config is config

    def test_invalid_config_rejected(self, grassland_only_catalog, null_logger):
        with pytest.raises(ConfigurationError):
            BiomeSystem(tiny_params(enabled_biomes=[]), grassland_only_catalog, null_logger)

    def test_world_generated_lazily(self, system):
        assert system.export_world() is None
        world = system.current_world
        assert system.export_world() is world
        assert system.current_world is world

    def test_generate_replaces_without_mutating(self, system):
        first = system.generate()
        second = system.generate()
        assert second is not first
        assert system.current_world is second
        assert first.biome_map == second.biome_map

    def test_regenerate_merges_config(self, system):
        first = system.current_world
        second = system.regenerate({"seed": 99})
        assert second.config.seed == 99
        assert second.config.width == 4
        assert first.config.seed == 12345
        assert system.current_world is second

    def test_failed_regenerate_keeps_current_world(self, system):
        world = system.current_world
        with pytest.raises(ConfigurationError):
            system.regenerate({"width": 0})
        assert system.current_world is world
        assert system.config.width == 4

    def test_world_stats(self, system):
        stats = system.world_stats()
        assert stats["world_size"] == "4x4"
        assert stats["biome_distribution"] == {"grassland": 100.0}
        assert stats["total_assets"] == system.current_world.metadata.total_assets

    def test_render_layers(self, system):
        layers = system.render_layers()
        assert [layer.name for layer in layers] == ["terrain", "decals", "vegetation", "props", "structures"]


class TestBiomeAt:

    @pytest.fixture
    def system(self, grassland_only_catalog, null_logger):
        return BiomeSystem(tiny_params(), grassland_only_catalog, null_logger)

    def test_pixel_to_tile(self, system):
        assert system.biome_at(0, 0) == "grassland"
        assert system.biome_at(127.9, 127.9) == "grassland"

    @pytest.mark.parametrize("x, y", [(128, 0), (0, 128), (-1, 5), (5, -0.5), (10000, 10000)])
    def test_out_of_bounds_is_none(self, system, x, y):
        assert system.biome_at(x, y) is None


class TestZoneAdaptation:

    @pytest.fixture
    def forest_system(self, make_biome, null_logger):
        catalog = BiomeCatalog.from_dict([make_biome("forest", color="#2E7D32"), make_biome("grassland")])
        return BiomeSystem(tiny_params(enabled_biomes=["forest"]), catalog, null_logger)

    @pytest.fixture
    def zone(self):
        return Zone(
            id="kitchen",
            type="food",
            bounds=ZoneBounds(x=10, y=10, width=50, height=40),
            color="rgba(102, 102, 102, 0.5)",
            metadata={"owner": "npc_1"},
        )

    def test_adapt_zone_attaches_biome(self, forest_system, zone):
        adapted = forest_system.adapt_zone(zone)
        assert adapted.metadata["biome"] == "forest"
        assert adapted.metadata["biome_name"] == "Forest"
        assert adapted.metadata["biome_color"] == "#2E7D32"
        assert adapted.metadata["owner"] == "npc_1"
        assert adapted.metadata["environmental_effects"] == pytest.approx({"tranquility": 18.0, "humidity": 12.0})

    def test_adapt_zone_tints_colour(self, forest_system, zone):
        # 0.7 * 102 + 0.3 * (46, 125, 50)
        assert forest_system.adapt_zone(zone).color == "rgba(85, 109, 86, 0.5)"

    def test_original_zone_untouched(self, forest_system, zone):
        forest_system.adapt_zone(zone)
        assert zone.metadata == {"owner": "npc_1"}
        assert zone.color == "rgba(102, 102, 102, 0.5)"

    def test_unknown_zone_type_uses_unit_multiplier(self, forest_system, zone):
        adapted = forest_system.adapt_zone(replace(zone, type="storage"))
        assert adapted.metadata["environmental_effects"] == {"tranquility": 15.0, "humidity": 10.0}

    def test_zone_outside_world_uses_fallback(self, forest_system, zone):
        far_away = replace(zone, bounds=ZoneBounds(x=5000, y=5000, width=10, height=10))
        assert forest_system.adapt_zone(far_away).metadata["biome"] == "grassland"

    def test_integrate_zones(self, forest_system, zone):
        adapted = forest_system.integrate_zones([zone, zone])
        assert len(adapted) == 2
        assert all(z.metadata["biome"] == "forest" for z in adapted)

    def test_plurality_tie_goes_to_first_seen(self, split_catalog, null_logger, zone):
        system = BiomeSystem(
            tiny_params(enabled_biomes=["tundra", "desert"], fallback_biome="tundra"), split_catalog, null_logger
        )
        reference = system.current_world
        system._current_world = GeneratedWorld(
            config=reference.config,
            terrain=reference.terrain,
            biome_map=(("desert", "tundra", "tundra", "tundra"),) * 4,
            layers=reference.layers,
            metadata=reference.metadata,
        )
        # Covers cells (0, 0) and (1, 0): one desert, one tundra.
        two_cells = replace(zone, bounds=ZoneBounds(x=0, y=0, width=64, height=32))
        assert system.adapt_zone(two_cells).metadata["biome"] == "desert"
        # Covers columns 0-2: tundra wins outright.
        three_cells = replace(zone, bounds=ZoneBounds(x=0, y=0, width=96, height=32))
        assert system.adapt_zone(three_cells).metadata["biome"] == "tundra"


class TestInteractiveElements:

    def test_flowers_become_food_zones(self, make_biome, null_logger):
        catalog = BiomeCatalog.from_dict([
            make_biome("grassland", props={"common": ["flowers_white.png"], "rare": [], "density": 1.0}),
        ])
        system = BiomeSystem(tiny_params(), catalog, null_logger)
        elements = system.interactive_elements()

        assert len(elements) == 16
        assert {element.type for element in elements} == {"food_zone"}
        assert len({element.id for element in elements}) == 16
        assert all(element.width == element.height == 32 for element in elements)
        assert all(element.metadata["interactive"] for element in elements)

    def test_ids_stable_across_runs(self, make_biome, null_logger):
        catalog = BiomeCatalog.from_dict([
            make_biome("grassland", props={"common": ["flowers_red.png", "rock.png"], "rare": [], "density": 1.0}),
        ])
        first = BiomeSystem(tiny_params(), catalog, null_logger).interactive_elements()
        second = BiomeSystem(tiny_params(), catalog, null_logger).interactive_elements()
        assert [e.id for e in first] == [e.id for e in second]
        assert all("flowers_red.png" in e.metadata["asset_id"] for e in first)
