"""
ImportJob model — Redis-backed bulk import progress tracking.

An ImportJob represents one uploaded CSV/Excel file being written to the
leads table in fixed-size batches by an RQ worker.
"""
import json
import uuid
from datetime import datetime
from typing import Dict, Optional, List

from leadhub.extensions import redis_client as r
from leadhub.config import IMPORT_JOB_TTL


class ImportJob:
    """
    Redis-backed ImportJob object.

    Keys:
        import:{id}     → JSON blob of job state
        imports:list    → sorted set of job IDs by creation time
    """

    def __init__(
        self,
        id: str = None,
        filename: str = '',
        total: int = 0,
        status: str = 'queued',
    ):
        self.id = id or str(uuid.uuid4())
        self.filename = filename
        self.status = status
        self.created_at = datetime.now().isoformat()
        self.updated_at = self.created_at
        self.total = total
        self.uploaded = 0
        self.batches = 0
        self.message = ''
        self.error = ''

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'filename': self.filename,
            'status': self.status,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'total': self.total,
            'uploaded': self.uploaded,
            'batches': self.batches,
            'message': self.message,
            'error': self.error,
        }

    def save(self):
        """Persist job state to Redis."""
        self.updated_at = datetime.now().isoformat()
        r.setex(f'import:{self.id}', IMPORT_JOB_TTL, json.dumps(self.to_dict()))
        r.zadd('imports:list', {self.id: datetime.fromisoformat(self.created_at).timestamp()})
        # Job blobs expire after IMPORT_JOB_TTL; drop their index entries with them
        r.zremrangebyscore('imports:list', '-inf', datetime.now().timestamp() - IMPORT_JOB_TTL)
        return self

    def start(self):
        """Mark the job as importing."""
        self.status = 'importing'
        self.message = f'Uploading {self.total} leads...'
        self.save()

    def record_batch(self, uploaded: int, message: str):
        """Record one committed batch."""
        self.uploaded = uploaded
        self.batches += 1
        self.message = message
        self.save()

    def complete(self):
        """Mark job as completed."""
        self.status = 'completed'
        self.message = f'Successfully uploaded {self.uploaded} leads!'
        self.save()

    def fail(self, reason: str = ''):
        """Mark job as failed. Batches already committed stay in the leads table."""
        self.status = 'failed'
        self.error = reason
        self.message = f'Error: {reason or "Import failed"}'
        self.save()

    @classmethod
    def _from_dict(cls, d: Dict) -> 'ImportJob':
        job = cls.__new__(cls)
        job.id = d['id']
        job.filename = d.get('filename', '')
        job.status = d.get('status', 'queued')
        job.created_at = d['created_at']
        job.updated_at = d.get('updated_at', job.created_at)
        job.total = d.get('total', 0)
        job.uploaded = d.get('uploaded', 0)
        job.batches = d.get('batches', 0)
        job.message = d.get('message', '')
        job.error = d.get('error', '')
        return job

    @classmethod
    def load(cls, job_id: str) -> Optional['ImportJob']:
        """Load a job from Redis (None once expired)."""
        data = r.get(f'import:{job_id}')
        if not data:
            return None
        return cls._from_dict(json.loads(data))

    @classmethod
    def list_recent(cls, limit: int = 20) -> List['ImportJob']:
        """List recent jobs, newest first."""
        jobs = []
        for job_id in r.zrevrange('imports:list', 0, limit - 1):
            job = cls.load(job_id)
            if job:
                jobs.append(job)
        return jobs
