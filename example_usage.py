#!/usr/bin/env python3
"""
Example usage of the GeoJoin block/submission overlay join.

This script demonstrates the ConfigLoader, logging setup and exception handling
components together with a small overlay join over in-memory features.
"""

from geojoin.config import ConfigLoader
from geojoin.exceptions import GeoJoinConfigurationError, GeoJoinValidationError
from geojoin.utils import get_logger
from modules.overlay_join import OverlayJoiner
from modules.overlay_join.geometry import result_to_feature


def square_feature(minx, miny, size, properties):
    """GeoJSON polygon feature for an axis-aligned square."""
    maxx, maxy = minx + size, miny + size
    return {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[minx, miny], [maxx, miny], [maxx, maxy], [minx, maxy], [minx, miny]]],
        },
        "properties": properties,
    }


def main():
    """Main function demonstrating the overlay join."""
    print("GeoJoin Overlay Join - Demo")
    print("=" * 60)

    joiner = OverlayJoiner(ConfigLoader(), environment="development")

    # 1. Setup logging from the environment configuration
    print("\n1. Setting up logging...")
    try:
        joiner.configure_logging()
    except GeoJoinConfigurationError as e:
        print(f"Configuration error: {e}")
        return 1
    logger = get_logger(__name__)

    # 2. Validate join configuration
    print("\n2. Validating join configuration...")
    if not joiner.validate_configuration():
        return 1

    # 3. Run a join over a 3x3 grid of 10x10 blocks
    print("\n3. Running overlay join...")
    blocks = {
        "type": "FeatureCollection",
        "features": [
            square_feature(col * 10, row * 10, 10, {"geoid20": f"B{row}{col}"})
            for row in range(3) for col in range(3)
        ],
    }
    submissions = {
        "type": "FeatureCollection",
        "features": [
            square_feature(5, 5, 10, {"id": 1, "neighborhood": "Centre"}),
            square_feature(0.5, 0.5, 1, {"id": 2, "neighborhood": "Corner"}),
            square_feature(29.95, 0, 5, {"id": 3, "neighborhood": "Sliver"}),
        ],
    }

    try:
        result = joiner.join_features(blocks, submissions)
    except GeoJoinValidationError as e:
        logger.error(f"Validation error: {e}")
        return 1

    print(result.get_run_summary())
    for block_id, results in result.results.items():
        for item in results:
            feature = result_to_feature(item)
            print(f"  {block_id}: {feature['properties']} area={item.geometry.area:.2f}")

    # 4. Status report
    print("\n4. Joiner status...")
    print(joiner.get_status().model_dump())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
