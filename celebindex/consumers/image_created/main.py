import asyncio
import logging
import signal

from celebindex.core.config import settings
from celebindex.core.container import container
from celebindex.core.logging import setup_logging
from celebindex.consumers.image_created.worker import process_messages, set_shutdown_flag

logger = logging.getLogger(__name__)


def handle_sigterm(signum, frame):
    """Handle SIGTERM signal for graceful shutdown."""
    logger.info("Received SIGTERM signal, initiating graceful shutdown")
    set_shutdown_flag()


async def main():
    """Main entry point for the image-created SQS consumer."""
    signal.signal(signal.SIGTERM, handle_sigterm)
    signal.signal(signal.SIGINT, handle_sigterm)

    logger.info("=" * 50)
    logger.info(f"Starting SQS consumer for queue: {settings.SQS_QUEUE_NAME}")
    logger.info(f"Region: {settings.REGION}")
    logger.info(f"Batch Size: {settings.SQS_BATCH_SIZE}")
    logger.info("=" * 50)

    try:
        logger.info("Initializing service container...")
        await container.initialize()
        logger.info("Service container initialized")
    except Exception as e:
        logger.error(f"Failed to initialize service container: {str(e)}")
        return 1

    try:
        await process_messages(
            sqs_service=container.sqs_service,
            analysis_service=container.image_analysis_service,
        )
    except Exception as e:
        logger.error(f"Error in message processing: {str(e)}")
        return 1
    finally:
        logger.info("Cleaning up services...")
        await container.cleanup()
        logger.info("Service cleanup complete")

    logger.info("Service shutdown complete")
    return 0


def run():
    setup_logging()
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Service stopped by user")
        exit_code = 0
    raise SystemExit(exit_code)


if __name__ == "__main__":
    run()
