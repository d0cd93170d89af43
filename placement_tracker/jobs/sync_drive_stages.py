import argparse
import asyncio
import sys

from placement_tracker.core.database import init_db
from placement_tracker.core.exceptions import TrackerError
from placement_tracker.logs.logging_config import logger
from placement_tracker.services.stage_sync_service import StageSyncService


async def run(drive_id=None):
    await init_db()
    return await StageSyncService.sync_drive_stages(drive_id)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Re-derive stage pointers of drive applications after a drive's process changed."
    )
    parser.add_argument("--drive-id", help="only sync applications of this drive")
    args = parser.parse_args(argv)

    try:
        report = asyncio.run(run(args.drive_id))
    except TrackerError as e:
        logger.error(f"Stage sync failed: {e.message}")
        return 1

    logger.info(
        f"Updated {report.updated} of {report.scanned} applications ({report.skipped} skipped)"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
