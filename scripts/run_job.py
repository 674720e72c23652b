"""Run one scheduled job immediately, e.g. to backfill a missed sync.

    python scripts/run_job.py sync_punches --at 2026-03-10T18:00
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "attendance_reconciler"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from attendance_reconciler.common.datetime_utils import now_local
from attendance_reconciler.container import build_container
from attendance_reconciler.jobs.scheduler import JobScheduler
from attendance_reconciler.jobs.tasks import default_jobs
from attendance_reconciler.logging_config import configure_logging
from attendance_reconciler.main import load_settings


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run one attendance job now.")
    parser.add_argument("job", help="job name, e.g. sync_punches or daily_checks")
    parser.add_argument("--at", help="local time the job should see (YYYY-MM-DDTHH:MM); default now")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(level=getattr(settings, "LOG_LEVEL", "INFO"))

    jobs = {job.name: job for job in default_jobs(build_container(settings=settings))}
    job = jobs.get(args.job)
    if job is None:
        parser.error(f"unknown job {args.job!r}; choose from: {', '.join(sorted(jobs))}")

    now = datetime.fromisoformat(args.at) if args.at else now_local()
    ok = JobScheduler([job]).run_job(job, now)
    print(f"{'OK' if ok else 'FAILED'}: {job.name} at {now:%Y-%m-%d %H:%M}")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
