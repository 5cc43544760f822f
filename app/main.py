import sys

from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.database.repositories.job_repository import JobRepository
from app.extraction.exceptions import ConfigurationError
from app.logging.logger import Log
from app.processor.processor import build_processor
from app.storage.exceptions import StorageConfigurationError
from app.worker.job_runner import JobRunner
from app.worker.worker import Worker


def main() -> None:
    """Entry point: validate configuration -> open pool -> poll for jobs."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(f"Starting docflow worker ({settings.app_env})")

    job_repo = JobRepository(settings.max_job_attempts)
    try:
        processor = build_processor(settings, job_repo)
    except (ConfigurationError, StorageConfigurationError, ValueError) as exc:
        Log.error(f"Invalid configuration: {exc}")
        sys.exit(1)

    init_pool(settings)
    try:
        worker = Worker(job_repo, JobRunner(processor, job_repo, settings), settings)
        worker.run()
    finally:
        close_pool()
        Log.info("Worker stopped")


if __name__ == "__main__":
    main()
