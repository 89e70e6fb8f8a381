"""Archive worker - drains the email queue into the object store."""

from __future__ import annotations

import signal

from loguru import logger

from mailvault.application.stats import ConsumerStats
from mailvault.application.use_cases.archive_email import EmailArchiver
from mailvault.application.use_cases.poll_queue import QueuePoller
from mailvault.application.use_cases.process_message import MessageProcessor
from mailvault.infrastructure import Settings, configure_logging, get_settings
from mailvault.infrastructure.aws import s3_store_from_settings, sqs_queue_from_settings


class ArchiveWorker:
    """
    Consumer process.

    Wires the queue, processor and archiver together and runs the poller
    until SIGINT/SIGTERM.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.stats = ConsumerStats()
        self.poller: QueuePoller | None = None

    def _init_infrastructure(self) -> QueuePoller:
        """Build the poller and its collaborators."""
        logger.info("Initializing infrastructure...")

        queue = sqs_queue_from_settings(self.settings)
        archiver = EmailArchiver(s3_store_from_settings(self.settings), self.stats)
        processor = MessageProcessor(archiver, self.stats)

        logger.info("Infrastructure initialized")
        return QueuePoller(
            queue,
            processor,
            poll_interval=self.settings.poll_interval_seconds,
            max_messages=self.settings.poll_max_messages,
            wait_time_seconds=self.settings.poll_wait_time_seconds,
            stats=self.stats,
        )

    def _handle_shutdown(self, signum, frame) -> None:
        """Handle graceful shutdown."""
        logger.info(f"Received signal {signum}, shutting down...")
        if self.poller is not None:
            self.poller.stop()

    def run(self) -> int:
        """Run the worker loop."""
        signal.signal(signal.SIGTERM, self._handle_shutdown)
        signal.signal(signal.SIGINT, self._handle_shutdown)

        logger.info(f"Queue: {self.settings.sqs_queue_url}")
        logger.info(f"Bucket: {self.settings.s3_bucket_name}")
        logger.info(f"Poll interval: {self.settings.poll_interval_seconds} seconds")

        try:
            self.poller = self._init_infrastructure()
        except Exception as e:
            logger.error(f"Failed to initialize infrastructure: {e}")
            return 1

        self.poller.run()

        logger.info("Worker shutdown complete")
        logger.info(f"Worker stats: {self.stats.summary()}")
        return 0


def main() -> int:
    """Entry point for the archive worker."""
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("=" * 60)
    logger.info(f"{settings.app_name} archive worker")
    logger.info("=" * 60)

    return ArchiveWorker(settings).run()


if __name__ == "__main__":
    raise SystemExit(main())
