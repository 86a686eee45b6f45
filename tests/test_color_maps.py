"""Tests for colour parsing, zone tinting and biome LUTs."""

import numpy as np
import pytest

from biome_worldgen import color_maps


class TestColorParsing:

    def test_hex_to_rgb(self):
        assert color_maps.hex_to_rgb("#7CB342") == (124, 179, 66)
        assert color_maps.hex_to_rgb("#7cb342") == (124, 179, 66)

    @pytest.mark.parametrize("value", ["7CB342", "#7CB34", "green", "", None])
    def test_hex_to_rgb_rejects_malformed(self, value):
        assert color_maps.hex_to_rgb(value) is None

    def test_parse_rgba_variants(self):
        assert color_maps.parse_rgba("rgba(10, 20, 30, 0.5)") == (10, 20, 30, 0.5)
        assert color_maps.parse_rgba("rgb(10,20,30)") == (10, 20, 30, 1.0)
        assert color_maps.parse_rgba("#0A141E") == (10, 20, 30, 1.0)
        assert color_maps.parse_rgba("hsl(0, 50%, 50%)") is None


class TestZoneBlend:

    def test_blend_keeps_zone_alpha(self):
        blended = color_maps.blend_zone_color("rgba(100, 100, 100, 0.5)", "#7CB342")
        assert blended == "rgba(107, 124, 90, 0.5)"

    def test_blend_hex_zone_colour(self):
        assert color_maps.blend_zone_color("#000000", "#646464") == "rgba(30, 30, 30, 1)"

    @pytest.mark.parametrize("zone, biome, expected", [
        ("rgb(2, 2, 2)", "#111111", "rgba(7, 7, 7, 1)"),
        ("#000000", "#0F0F0F", "rgba(5, 5, 5, 1)"),
    ])
    def test_halfway_channels_round_up(self, zone, biome, expected):
        assert color_maps.blend_zone_color(zone, biome) == expected

    def test_unparseable_colours_unchanged(self):
        assert color_maps.blend_zone_color("tomato", "#7CB342") == "tomato"
        assert color_maps.blend_zone_color("rgba(1, 2, 3, 1)", "not-a-colour") == "rgba(1, 2, 3, 1)"


class TestBiomeLut:

    def test_lut_follows_palette_order(self, catalog):
        lut = color_maps.create_biome_color_lut(("forest", "grassland", "unknown"), catalog)
        assert lut.dtype == np.uint8
        assert lut.tolist() == [[46, 125, 50], [124, 179, 66], list(color_maps.COLOR_UNKNOWN_BIOME)]

    def test_color_array_shape(self, catalog):
        palette = ("forest", "grassland")
        lut = color_maps.create_biome_color_lut(palette, catalog)
        indices = color_maps.biome_map_to_indices((("forest", "grassland", "forest"),), palette)
        colors = color_maps.get_biome_color_array(indices, lut)
        assert colors.shape == (1, 3, 3)
        assert colors[0, 1].tolist() == [124, 179, 66]
