# biome_worldgen/bake.py

"""
================================================================================
OFFLINE WORLD BAKER
================================================================================
A command-line tool that generates a world from a JSON configuration file and
writes it to disk ("baking"), so other tools can load a finished world instead
of regenerating it.

Output directory layout:
    manifest.json   configuration, metadata, biome palette, biome map hash
    layers.json     every placed asset, grouped by render layer
    biome_map.png   one pixel per tile, coloured with the catalog colours

Usage:
    python -m biome_worldgen.bake --config path/to/world.json [--output DIR]

The configuration file holds a 'world_generation_parameters' object (see
WorldConfig.from_dict) and an optional 'biome_catalog' replacing the built-in
biomes.
================================================================================
"""
import argparse
import hashlib
import json
import logging
import os
import sys
import time
from typing import Optional

import numpy as np
from PIL import Image
from tqdm import tqdm

from . import color_maps
from .biomes import BiomeCatalog, default_catalog
from .errors import ConfigurationError
from .settings import WorldConfig
from .terrain import TerrainGenerator


# --- Helper for Preview Compression ---
def save_biome_preview(color_array: np.ndarray, file_path: str) -> str:
    """
    Saves a (height, width, 3) colour array using a tiered, lossless
    compression strategy with Pillow. Returns the tier used.
    """
    os.makedirs(os.path.dirname(file_path) or '.', exist_ok=True)

    # Tier 1: Perfectly uniform colour.
    if (color_array == color_array[0, 0]).all():
        uniform_color = tuple(int(c) for c in color_array[0, 0])
        Image.new('RGB', (1, 1), uniform_color).save(file_path, 'PNG')
        return 'uniform'

    img = Image.fromarray(np.ascontiguousarray(color_array, dtype=np.uint8), 'RGB')

    # Tier 2: Few colours, so a palettized PNG is lossless.
    colors = img.getcolors(256)
    if colors:
        img.quantize(colors=len(colors)).save(file_path, 'PNG')
        return 'palettized'

    # Tier 3: Fallback for high-colour images.
    img.save(file_path, 'PNG')
    return 'full'


def serialize_layers(layers) -> list:
    """JSON-ready form of the render layers, in z order."""
    return [
        {
            'name': layer.name,
            'z_index': layer.z_index,
            'tiles': [placed.to_dict() for placed in tqdm(layer.tiles, desc=f"Serializing {layer.name}", leave=False)],
        }
        for layer in layers
    ]


def load_bake_config(config_path: str):
    """Reads the bake file. Returns (world_params, catalog)."""
    with open(config_path, 'r') as f:
        config = json.load(f)

    world_params = config.get('world_generation_parameters', {})
    catalog_data = config.get('biome_catalog')
    catalog = BiomeCatalog.from_dict(catalog_data) if catalog_data else default_catalog()
    return world_params, catalog


def bake_world(config_path: str, output_dir: Optional[str] = None,
               logger: Optional[logging.Logger] = None) -> Optional[str]:
    """
    Loads a configuration, generates the world and writes it to `output_dir`
    (default: baked_worlds/seed_<seed>).

    Returns the output directory, or None if the configuration could not be
    loaded or is invalid.
    """
    logger = logger or logging.getLogger("Baker")

    # 1. --- Load Configuration ---
    logger.info(f"Loading configuration from: {config_path}")
    try:
        world_params, catalog = load_bake_config(config_path)
        world_config = WorldConfig.from_dict(world_params)
        generator = TerrainGenerator(world_config, catalog, logger)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return None
    except (ConfigurationError, KeyError, TypeError) as e:
        logger.critical(f"Invalid world configuration: {e}")
        return None

    output_dir = output_dir or os.path.join("baked_worlds", f"seed_{world_config.seed}")
    os.makedirs(output_dir, exist_ok=True)

    # 2. --- Generate ---
    start_time = time.perf_counter()
    world = generator.generate_world()

    # 3. --- Biome Map Preview ---
    logger.info("Rendering biome map preview...")
    palette = generator.biome_palette
    biome_lut = color_maps.create_biome_color_lut(palette, catalog)
    biome_indices = color_maps.biome_map_to_indices(world.biome_map, palette)
    preview_path = os.path.join(output_dir, "biome_map.png")
    compression = save_biome_preview(color_maps.get_biome_color_array(biome_indices, biome_lut), preview_path)

    # 4. --- Layers ---
    layers_path = os.path.join(output_dir, "layers.json")
    with open(layers_path, 'w') as f:
        json.dump(serialize_layers(world.layers), f)

    # 5. --- Manifest ---
    manifest = {
        'version': world.metadata.version,
        'config': world.config.to_dict(),
        'metadata': {
            'generation_time_ms': world.metadata.generation_time_ms,
            'biome_distribution': dict(world.metadata.biome_distribution),
            'total_assets': world.metadata.total_assets,
        },
        'palette': [
            {'id': biome_id, 'name': catalog[biome_id].name, 'color': catalog[biome_id].color}
            for biome_id in palette
        ],
        'biome_map_hash': hashlib.md5(biome_indices.tobytes()).hexdigest(),
        'files': {
            'layers': os.path.basename(layers_path),
            'biome_map': os.path.basename(preview_path),
        },
        'preview_compression': compression,
    }
    manifest_path = os.path.join(output_dir, "manifest.json")
    with open(manifest_path, 'w') as f:
        json.dump(manifest, f, indent=2)

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    logger.info(
        f"  - {world.metadata.total_assets} assets in {len(world.layers)} layers, "
        f"preview saved as {compression} PNG"
    )
    logger.info(f"Baked world and manifest.json saved to: {output_dir}")
    return output_dir


# --- Command-Line Interface ---
def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Offline baker for the biome world generator.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to the JSON configuration file for the world to be baked."
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory (default: baked_worlds/seed_<seed>)."
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )

    return 0 if bake_world(args.config, args.output) else 1


if __name__ == "__main__":
    sys.exit(main())
