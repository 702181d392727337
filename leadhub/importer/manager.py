"""
Import manager — chunked, sequential lead writes with progress tracking.

Launches an ImportJob:
  PARSE (synchronous, in the request) → ENQUEUE → WRITE BATCHES (RQ worker)

Batches are written strictly one after another; batch N+1 is not started
until batch N has committed. There is no cancellation and no rollback: a
failed batch stops the job and leaves earlier batches in place.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List

from leadhub.config import IMPORT_BATCH_SIZE, IMPORT_JOB_TIMEOUT
from leadhub.database import get_session
from leadhub.extensions import get_queue
from leadhub.importer.normalize import parse_upload
from leadhub.models.import_job import ImportJob
from leadhub.models.lead import Lead

logger = logging.getLogger('importer.manager')


@dataclass
class ImportProgress:
    """Emitted after each committed batch."""
    uploaded: int
    total: int
    batch_size: int

    @property
    def message(self) -> str:
        return f'Uploaded {self.uploaded} of {self.total} leads...'


def write_lead_batch(records: List[Dict]):
    """Insert one chunk of lead records in a single commit."""
    session = get_session()
    try:
        session.add_all([Lead.from_record(rec) for rec in records])
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def import_rows(
    records: List[Dict],
    batch_size: int = IMPORT_BATCH_SIZE,
    writer: Callable[[List[Dict]], None] = write_lead_batch,
) -> Iterator[ImportProgress]:
    """
    Write records in fixed-size chunks, yielding progress after each one.

    A writer exception propagates to the caller and no further chunks are
    written. Import is additive only; nothing is deduplicated.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    total = len(records)
    uploaded = 0
    for start in range(0, total, batch_size):
        chunk = records[start:start + batch_size]
        writer(chunk)
        uploaded += len(chunk)
        yield ImportProgress(uploaded=uploaded, total=total, batch_size=len(chunk))


# ── Public API ────────────────────────────────────────────────────────────────

def launch_import(filename: str, data: bytes) -> ImportJob:
    """
    Parse an upload and enqueue the batch writes as a background RQ job.

    Parse errors (ImportParseError) are raised here, before any job exists
    or any lead is written.
    """
    records = parse_upload(filename, data)

    job = ImportJob(filename=filename, total=len(records))
    job.message = f'Queued {len(records)} leads for upload...'
    job.save()

    get_queue().enqueue(run_import, job.id, records, job_timeout=IMPORT_JOB_TIMEOUT)
    logger.info("Import queued: %s (%d leads)", filename, len(records), extra={'import_id': job.id})
    return job


def get_import_status(job_id: str) -> dict:
    """Get the current status of an import job."""
    job = ImportJob.load(job_id)
    if not job:
        return None
    return job.to_dict()


# ── Job runner (enqueued via RQ) ──────────────────────────────────────────────

def run_import(job_id: str, records: List[Dict], batch_size: int = IMPORT_BATCH_SIZE):
    """Write an import job's records batch by batch, tracking progress on the job."""
    job = ImportJob.load(job_id)
    if not job:
        logger.error("Import job not found", extra={'import_id': job_id})
        return

    job.total = len(records)
    job.start()
    logger.info("Starting import (%d leads, batch size %d)", job.total, batch_size,
                extra={'import_id': job_id})

    try:
        for progress in import_rows(records, batch_size=batch_size, writer=write_lead_batch):
            job.record_batch(progress.uploaded, progress.message)
            logger.debug(progress.message, extra={'import_id': job_id})
    except Exception as e:
        logger.error("Import failed after %d of %d leads", job.uploaded, job.total,
                     exc_info=True, extra={'import_id': job_id})
        job.fail(str(e) or type(e).__name__)
        return

    job.complete()
    logger.info("Import completed: %d leads", job.uploaded, extra={'import_id': job_id})
