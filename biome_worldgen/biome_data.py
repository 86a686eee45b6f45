# biome_worldgen/biome_data.py

"""
================================================================================
BUILT-IN BIOME DEFINITIONS
================================================================================
Static rule tables for the six default biomes. The dictionaries use the same
layout BiomeCatalog.from_dict() accepts from a JSON file, so a custom catalog
can be written by copying one of these entries.

All ranges, densities and weights are normalized to [0, 1].
================================================================================
"""

_GRASSLAND_TURF = [f"cesped{i}.png" for i in range(1, 11)]
_FOREST_TURF = [f"cesped{i}.png" for i in range(11, 21)]
_MYSTICAL_TURF = [f"cesped{i}.png" for i in range(21, 32)]

DEFAULT_BIOMES = {
    "grassland": {
        "name": "Green Meadow",
        "description": "Open meadows of grass with scattered trees",
        "color": "#7CB342",
        "conditions": {
            "temperature_range": [0.4, 0.7],
            "moisture_range": [0.3, 0.6],
            "elevation_range": [0.3, 0.7],
        },
        "assets": {
            "terrain": {
                "primary": _GRASSLAND_TURF,
                "secondary": ["Grass_Middle.png", "TexturedGrass.png"],
                "weights": [0.25, 0.15, 0.1, 0.1, 0.08, 0.08, 0.07, 0.07, 0.05, 0.05],
            },
            "trees": {
                "primary": ["oak_tree.png"],
                "rare": ["tree_emerald_1.png", "tree_emerald_2.png"],
                "density": 0.15,
                "clustering": 0.3,
            },
            "shrubs": {"assets": [], "density": 0.1},
            "props": {
                "common": ["flowers_white.png", "flowers_red.png"],
                "rare": [],
                "density": 0.2,
            },
            "decals": {"assets": ["grass_patch_01.png"], "density": 0.3},
        },
        "generation": {
            "transition_width": 3,
            "min_cluster_size": 5,
            "spawn_probabilities": {
                "tree_groups": 0.15,
                "flower_patches": 0.25,
                "clearings": 0.1,
            },
        },
    },

    "forest": {
        "name": "Dense Forest",
        "description": "Thick woodland with a wide variety of trees and undergrowth",
        "color": "#2E7D32",
        "conditions": {
            "temperature_range": [0.3, 0.6],
            "moisture_range": [0.6, 0.9],
            "elevation_range": [0.2, 0.8],
        },
        "assets": {
            "terrain": {
                "primary": _FOREST_TURF,
                "secondary": ["TexturedGrass.png"],
                "weights": [0.2, 0.15, 0.15, 0.1, 0.1, 0.1, 0.05, 0.05, 0.05, 0.05],
            },
            "trees": {
                "primary": [
                    "tree_emerald_1.png", "tree_emerald_2.png", "tree_emerald_3.png", "tree_emerald_4.png",
                    "curved_tree1.png", "curved_tree2.png", "curved_tree3.png",
                    "oak_tree.png",
                ],
                "rare": ["mega_tree1.png", "mega_tree2.png"],
                "density": 0.45,
                "clustering": 0.7,
            },
            "shrubs": {"assets": [], "density": 0.3},
            "props": {"common": ["mushrooms"], "rare": [], "density": 0.15},
            "decals": {"assets": ["shadow_soft_01.png", "dirt_patch_01.png"], "density": 0.4},
        },
        "generation": {
            "transition_width": 4,
            "min_cluster_size": 8,
            "spawn_probabilities": {
                "dense_groves": 0.3,
                "forest_paths": 0.1,
                "clearings": 0.05,
                "mushroom_circles": 0.15,
            },
        },
    },

    "mystical": {
        "name": "Mystic Grove",
        "description": "Enchanted woods with glowing trees and carved idols",
        "color": "#7B1FA2",
        "conditions": {
            "temperature_range": [0.2, 0.4],
            "moisture_range": [0.4, 0.7],
            "elevation_range": [0.1, 0.5],
        },
        "assets": {
            "terrain": {
                "primary": _MYSTICAL_TURF,
                "secondary": [],
                # Unweighted: every tile uses the first turf.
                "weights": [1.0],
            },
            "trees": {
                "primary": [
                    "luminous_tree1.png", "luminous_tree2.png", "luminous_tree3.png", "luminous_tree4.png",
                    "swirling_tree1.png", "swirling_tree2.png", "swirling_tree3.png",
                    "blue-green_balls_tree1.png", "blue-green_balls_tree2.png", "blue-green_balls_tree3.png",
                ],
                "rare": [
                    "tree_idol_deer.png", "tree_idol_dragon.png", "tree_idol_human.png", "tree_idol_wolf.png",
                ],
                "density": 0.25,
                "clustering": 0.4,
            },
            "shrubs": {"assets": [], "density": 0.2},
            "props": {
                "common": ["light_balls_tree1.png", "light_balls_tree2.png", "light_balls_tree3.png"],
                "rare": [],
                "density": 0.1,
            },
            "decals": {"assets": ["shadow_soft_01.png"], "density": 0.2},
        },
        "generation": {
            "transition_width": 5,
            "min_cluster_size": 4,
            "spawn_probabilities": {
                "sacred_groves": 0.2,
                "totem_circles": 0.1,
                "mystical_clearings": 0.15,
                "glowing_patches": 0.3,
            },
        },
    },

    "wetland": {
        "name": "Wetland",
        "description": "Marshy ground with willows, open water and mushrooms",
        "color": "#00695C",
        "conditions": {
            "temperature_range": [0.4, 0.7],
            "moisture_range": [0.8, 1.0],
            "elevation_range": [0.0, 0.3],
            "distance_from_water": 5,
        },
        "assets": {
            "terrain": {
                "primary": ["cesped1.png", "cesped2.png", "cesped3.png", "Water_Middle.png"],
                "secondary": [],
                "weights": [0.2, 0.2, 0.2, 0.4],
            },
            "trees": {
                "primary": ["willow1.png", "willow2.png", "willow3.png", "white_tree1.png", "white_tree2.png"],
                "rare": ["tree_emerald_1.png"],
                "density": 0.2,
                "clustering": 0.5,
            },
            "shrubs": {"assets": [], "density": 0.4},
            "props": {"common": ["mushrooms"], "rare": [], "density": 0.3},
            "decals": {"assets": ["dirt_patch_01.png"], "density": 0.5},
        },
        "generation": {
            "transition_width": 6,
            "min_cluster_size": 6,
            "spawn_probabilities": {
                "pond_clusters": 0.4,
                "reed_patches": 0.3,
                "mushroom_groups": 0.25,
                "muddy_areas": 0.2,
            },
        },
    },

    "mountainous": {
        "name": "Highlands",
        "description": "High ground with cliffs, rocks and hardy trees",
        "color": "#5D4037",
        "conditions": {
            "temperature_range": [0.1, 0.4],
            "moisture_range": [0.1, 0.4],
            "elevation_range": [0.7, 1.0],
        },
        "assets": {
            "terrain": {
                "primary": ["cesped15.png", "cesped16.png", "cesped17.png", "cesped18.png"],
                "secondary": ["dirt_patch_01.png"],
                "weights": [0.4, 0.3, 0.2, 0.1],
            },
            "trees": {
                "primary": ["mega_tree1.png", "mega_tree2.png", "oak_tree.png"],
                "rare": ["curved_tree1.png", "curved_tree2.png"],
                "density": 0.1,
                "clustering": 0.2,
            },
            "shrubs": {"assets": [], "density": 0.05},
            "props": {"common": [], "rare": [], "density": 0.4},
            "structures": {
                "assets": ["cliff_face_n.png", "cliff_face_s.png", "cliff_face_e.png", "cliff_face_w.png"],
                "density": 0.3,
                "spacing": 2,
            },
            "decals": {"assets": ["dirt_patch_01.png", "shadow_soft_01.png"], "density": 0.6},
        },
        "generation": {
            "transition_width": 4,
            "min_cluster_size": 4,
            "spawn_probabilities": {
                "cliff_formations": 0.4,
                "rock_outcrops": 0.5,
                "windswept_areas": 0.3,
                "alpine_meadows": 0.1,
            },
        },
    },

    "village": {
        "name": "Village",
        "description": "Settled land with houses, paths and tended gardens",
        "color": "#8D6E63",
        "conditions": {
            "temperature_range": [0.4, 0.7],
            "moisture_range": [0.4, 0.7],
            "elevation_range": [0.3, 0.6],
        },
        "assets": {
            "terrain": {
                "primary": ["cesped1.png", "cesped2.png", "cesped3.png", "cesped4.png", "cesped5.png"],
                "secondary": [],
                "weights": [0.3, 0.2, 0.2, 0.15, 0.15],
            },
            "trees": {
                "primary": ["oak_tree.png", "tree_emerald_1.png"],
                "rare": [],
                "density": 0.1,
                "clustering": 0.1,
            },
            "shrubs": {"assets": [], "density": 0.15},
            "props": {
                "common": ["flowers_white.png", "flowers_red.png"],
                "rare": [],
                "density": 0.2,
            },
            "structures": {
                "assets": [
                    "House.png", "House_Hay_1.png", "House_Hay_2.png", "House_Hay_3.png",
                    "House_Hay_4_Purple.png", "Well_Hay_1.png", "Fences.png",
                ],
                "density": 0.05,
                "spacing": 4,
            },
            "decals": {"assets": ["grass_patch_01.png"], "density": 0.1},
        },
        "generation": {
            "transition_width": 3,
            "min_cluster_size": 6,
            "spawn_probabilities": {
                "building_clusters": 0.3,
                "garden_areas": 0.4,
                "pathways": 0.2,
                "public_spaces": 0.1,
            },
        },
    },
}
