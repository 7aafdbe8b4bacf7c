"""Worker that claims PENDING AI jobs and runs them.

Jobs are claimed oldest first with SELECT FOR UPDATE SKIP LOCKED on
PostgreSQL, so several runners can share a queue. Jobs already IN_PROGRESS
are never picked up again; re-running means creating a new job.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import socket
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.db.session import async_session_maker
from app.errors import ProviderConfigError
from app.repositories.ai_job_repository import AIJobRepository
from app.services.ai_job_dispatch import dispatch_job
from app.services.completion import CompletionClient, build_completion_client
from app.services.job_ledger import JobLedger

logger = logging.getLogger(__name__)


class AIJobRunner:
    """Poll and execute AI jobs."""

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        client_factory: Optional[Callable[[], CompletionClient]] = None,
        worker_id: Optional[str] = None,
        poll_interval: Optional[float] = None,
    ) -> None:
        self.session_factory = session_factory or async_session_maker
        self.client_factory = client_factory or build_completion_client
        self.worker_id = worker_id or f"ai-jobs-{socket.gethostname()}-{os.getpid()}"
        self.poll_interval = poll_interval if poll_interval is not None else settings.JOB_RUNNER_POLL_SECONDS
        self._stop_event = asyncio.Event()

    def request_stop(self) -> None:
        self._stop_event.set()

    def setup_signal_handlers(self) -> None:
        """Finish the current job and exit on SIGTERM/SIGINT."""
        def signal_handler(signum, frame):
            logger.info("Worker %s received signal %s, shutting down", self.worker_id, signum)
            self.request_stop()

        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

    async def run_once(self) -> bool:
        """Claim and execute a single job if available."""
        async with self.session_factory() as session:
            job = await AIJobRepository(session).claim_next_pending()
            if not job:
                return False

            job_id = job.id
            ledger = JobLedger(session)
            logger.info("Worker %s running %s job %s", self.worker_id, job.kind, job_id)

            try:
                client = self.client_factory()
            except ProviderConfigError as exc:
                await ledger.fail(job, str(exc))
                return True

            try:
                await dispatch_job(session, job, client, ledger=ledger)
            except Exception as exc:  # noqa: BLE001
                await session.rollback()
                logger.exception("Worker %s crashed on job %s", self.worker_id, job_id)
                await self._fail_after_crash(job_id, exc)
            return True

    async def _fail_after_crash(self, job_id, exc: Exception) -> None:
        async with self.session_factory() as session:
            ledger = JobLedger(session)
            job = await ledger.load(job_id)
            if job.is_terminal:
                return
            await ledger.fail(
                job,
                f"Job crashed: {exc}",
                completed=job.completed_count,
            )

    async def run_forever(self) -> None:
        """Poll indefinitely until stopped, respecting poll_interval when idle."""
        while not self._stop_event.is_set():
            processed = await self.run_once()
            if processed:
                continue

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.poll_interval)
            except asyncio.TimeoutError:
                continue


async def run_worker(loop: bool, sleep_seconds: float) -> int:
    runner = AIJobRunner(poll_interval=sleep_seconds)
    if loop:
        runner.setup_signal_handlers()
        await runner.run_forever()
    else:
        await runner.run_once()
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="AI job worker (enrichment, scoring, seating, introductions)")
    parser.add_argument("--once", action="store_true", help="Process a single job and exit")
    parser.add_argument("--loop", action="store_true", help="Run continuously")
    parser.add_argument(
        "--sleep",
        type=float,
        default=settings.JOB_RUNNER_POLL_SECONDS,
        help="Sleep seconds between polls when looping",
    )
    args = parser.parse_args()

    setup_logging()
    loop_mode = args.loop and not args.once
    return asyncio.run(run_worker(loop=loop_mode, sleep_seconds=args.sleep))


if __name__ == "__main__":
    raise SystemExit(main())
