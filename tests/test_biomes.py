"""Tests for biome definitions and the catalog."""

import json
import math

import pytest

from biome_worldgen.biome_data import DEFAULT_BIOMES
from biome_worldgen.biomes import BiomeCatalog, BiomeDefinition
from biome_worldgen.errors import ConfigurationError, LookupMiss


class TestBiomeDefinition:
    """Test construction-time validation and environmental queries."""

    @pytest.fixture
    def forest(self, catalog):
        return catalog["forest"]

    def test_can_spawn_uses_closed_intervals(self, forest):
        # forest: temperature [0.3, 0.6], moisture [0.6, 0.9], elevation [0.2, 0.8]
        assert forest.can_spawn(0.3, 0.6, 0.2)
        assert forest.can_spawn(0.6, 0.9, 0.8)
        assert not forest.can_spawn(0.29, 0.7, 0.5)
        assert not forest.can_spawn(0.45, 0.95, 0.5)

    def test_fitness_is_one_at_centre(self, forest):
        assert forest.fitness(*forest.conditions.center) == pytest.approx(1.0)

    def test_fitness_bounds(self, forest):
        for sample in [(0, 0, 0), (1, 1, 1), (0, 1, 0), (0.45, 0.75, 0.5)]:
            assert 0.0 <= forest.fitness(*sample) <= 1.0

    def test_fitness_scales_with_distance(self, make_biome):
        definition = BiomeDefinition.from_dict(make_biome("plain"))
        # Centre is (0.5, 0.5, 0.5); the corner is sqrt(0.75) away.
        expected = 1.0 - math.sqrt(0.75) / math.sqrt(3)
        assert definition.fitness(0.0, 0.0, 0.0) == pytest.approx(expected)

    def test_invalid_definition_reports_every_problem(self, make_biome):
        entry = make_biome("broken", temperature=(0.8, 0.2), color="green")
        entry["assets"]["trees"]["density"] = 1.5
        with pytest.raises(ConfigurationError) as excinfo:
            BiomeDefinition.from_dict(entry)
        messages = excinfo.value.errors
        assert len(messages) == 3
        assert any("color" in m for m in messages)
        assert any("temperature_range" in m for m in messages)
        assert any("tree density" in m for m in messages)

    def test_requires_primary_terrain(self, make_biome):
        entry = make_biome("bare")
        entry["assets"]["terrain"] = {"primary": []}
        with pytest.raises(ConfigurationError):
            BiomeDefinition.from_dict(entry)


class TestBiomeCatalog:
    """Test lookups on the immutable catalog."""

    def test_default_catalog_contents(self, catalog):
        assert set(catalog.ids()) == set(DEFAULT_BIOMES)
        assert len(catalog) == 6
        assert catalog["village"].structures.spacing == 4
        assert catalog["grassland"].structures is None

    def test_get_returns_none_for_unknown(self, catalog):
        assert catalog.get("desert") is None
        assert "desert" not in catalog

    def test_getitem_raises_lookup_miss(self, catalog):
        with pytest.raises(LookupMiss):
            catalog["desert"]

    def test_require_raises_configuration_error(self, catalog):
        with pytest.raises(ConfigurationError):
            catalog.require("desert")

    def test_query_helpers_tolerate_unknown_ids(self, catalog):
        assert catalog.fitness("desert", 0.5, 0.5, 0.5) == 0.0
        assert not catalog.can_spawn("desert", 0.5, 0.5, 0.5)
        assert catalog.can_spawn("village", 0.5, 0.5, 0.5)

    def test_duplicate_ids_rejected(self, make_biome):
        with pytest.raises(ConfigurationError):
            BiomeCatalog.from_dict([make_biome("a"), make_biome("a")])

    def test_definitions_are_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog.definitions["desert"] = catalog["forest"]

    def test_from_json(self, tmp_path, make_biome):
        path = tmp_path / "biomes.json"
        path.write_text(json.dumps({"meadow": make_biome("meadow"), "swamp": make_biome("swamp")}))
        loaded = BiomeCatalog.from_json(str(path))
        assert loaded.ids() == ("meadow", "swamp")
        assert loaded["swamp"].terrain.primary == ("swamp_turf.png",)
