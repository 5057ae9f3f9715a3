"""Command-line interface for world generation."""

import argparse
import logging
import time
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for world generation."""
    parser = argparse.ArgumentParser(
        description="Generate a seeded side-view world with terrain, oceans and caves"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default="default",
        help="Bundled config name or path to a TOML file (default: default)",
    )
    seed_group = parser.add_mutually_exclusive_group()
    seed_group.add_argument(
        "--seed", type=int, default=None, help="Seed (default: from config)"
    )
    seed_group.add_argument(
        "--random-seed", action="store_true", help="Pick a fresh random seed"
    )
    parser.add_argument("--width", type=int, default=None, help="Override world width")
    parser.add_argument("--height", type=int, default=None, help="Override world height")
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Save the world as .npz (optional)",
    )
    parser.add_argument(
        "--image",
        type=str,
        default=None,
        help="Save the world as a PNG image (optional)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # Import here to avoid slow startup for --help
    import numpy as np

    from .config import GenerationConfig, find_config, load_config
    from .generator import GenerationProgress, generate_world
    from .persistence import save_world
    from .render import save_image
    from .validation import validate_world

    config = load_config(find_config(args.config))

    overrides: dict = {}
    if args.random_seed:
        overrides["seed"] = int(np.random.default_rng().integers(0, 2**32))
    elif args.seed is not None:
        overrides["seed"] = args.seed
    world = config.world.model_dump()
    if args.width is not None:
        world["width"] = args.width
    if args.height is not None:
        world["height"] = args.height
    overrides["world"] = world

    # Re-validate so overrides go through the same checks as the file
    config = GenerationConfig.model_validate(
        {**config.model_dump(), **overrides}
    )

    print(
        f"Generating {config.world.width}x{config.world.height} world "
        f"with seed {config.seed}"
    )
    print()

    def report(progress: GenerationProgress) -> None:
        print(f"Progress: {int(1000 * progress.overall_fraction) / 10}%")

    start_time = time.time()
    result = generate_world(config, on_progress=report)
    gen_time = time.time() - start_time

    print()
    print(f"Generation complete in {gen_time:.1f}s")

    validate_world(result.grid, result.elevations, result.world_size)

    if args.output:
        output_path = Path(args.output)
        save_world(output_path, result)
        print(f"Saved to {output_path}")

    if args.image:
        image_path = Path(args.image)
        save_image(image_path, result.grid)
        print(f"Image saved to {image_path}")


if __name__ == "__main__":
    main()
