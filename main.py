import argparse
import asyncio

from src.config.settings import settings
from src.pipeline.acquisition import build_acquisition
from src.utils.logger import setup_logging

# Configure Logging
logger = setup_logging(settings.log_level)

async def main(args: argparse.Namespace):
    """
    Runs one scene search from the command line and logs the results.
    """
    # 1. Initialize from settings (env vars pick the live source)
    engine = build_acquisition(settings)

    # 2. Execute
    try:
        logger.info("🚀 Starting scene search...")
        scenes = await engine.acquire_async(
            product_type=args.product_type,
            product_style=args.style,
            keywords=args.keywords,
            max_results=args.max_results,
        )

        logger.info("🏆 SCENES:")
        for scene in scenes:
            tag = "synthetic" if scene.is_synthetic else scene.source
            logger.info(f"[{scene.category.value}] {scene.title} | {scene.image_url} ({tag})")

    except Exception as e:
        logger.critical(f"🔥 Critical Failure: {e}", exc_info=True)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search CGI scenes for a product")
    parser.add_argument("product_type", nargs="?", default="أريكة")
    parser.add_argument("--style", default="modern")
    parser.add_argument("--keywords", nargs="*", default=[])
    parser.add_argument("--max-results", type=int, default=settings.default_max_results)
    return parser.parse_args()


if __name__ == "__main__":
    try:
        asyncio.run(main(parse_args()))
    except KeyboardInterrupt:
        logger.info("Captured KeyboardInterrupt. Exiting...")
