"""Example: poll a registry for the latest matching tag."""

import asyncio
import logging
import sys

# Add parent directory to path
sys.path.insert(0, "src")

from docker_tag_poller import (
    PackageConfig,
    PollerError,
    RegistryPoller,
    RepositoryConfig,
    Revision,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main(registry_url: str, image: str, tag_filter: str, interval: int):
    """Check the connection once, then report new tags every interval."""
    repository = RepositoryConfig(registry_url, "example")
    package = PackageConfig(image, tag_filter)
    previous = Revision.empty()

    async with RegistryPoller() as poller:
        check = await poller.check_connection_to_repository(repository)
        logger.info(f"Repository check: {check.to_dict()}")
        if not check.success:
            return

        while True:
            try:
                revision = await poller.get_latest_revision_since(
                    package, repository, previous
                )
            except PollerError as e:
                logger.error(f"Poll failed: {e}")
            else:
                if revision.is_empty:
                    logger.info(f"No new tag since {previous.revision}")
                else:
                    logger.info(f"New tag: {revision.to_dict()}")
                    previous = revision
            await asyncio.sleep(interval)


if __name__ == "__main__":
    asyncio.run(
        main(
            registry_url="https://index.docker.io/v2/",
            image="library/debian",
            tag_filter=r"^[0-9]+$",
            interval=60,
        )
    )
