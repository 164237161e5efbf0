"""Idempotent batch jobs over user documents.

A job is a filter, a per-record transform and a commit. The filter must stop
matching a record once the transform has been applied, which makes every job
safe to re-run and safe to resume after a crash part-way through a batch.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class BatchJobResult:
    """Outcome of a single batch job run."""
    job: str
    matched: int = 0
    updated: int = 0
    failed: int = 0
    dry_run: bool = False
    errors: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def succeeded(self):
        return self.error is None and self.failed == 0

    def to_dict(self):
        return {
            'job': self.job,
            'matched': self.matched,
            'updated': self.updated,
            'failed': self.failed,
            'dry_run': self.dry_run,
            'errors': list(self.errors),
            'error': self.error,
        }


class BatchJob:
    """Base class for filter -> transform -> commit jobs over a ``UserStore``.

    Subclasses implement ``query`` and ``transform``. Records are processed one
    at a time with no transaction around the batch; a failure on one record is
    logged and the run continues with the next.
    """

    name = 'batch job'

    def __init__(self, store, dry_run=False):
        self.store = store
        self.dry_run = dry_run

    def query(self):
        """Return the dotted-path filter selecting records that still need the job."""
        raise NotImplementedError

    def transform(self, document):
        """Return the dotted-path updates to apply to ``document``."""
        raise NotImplementedError

    def describe(self, document):
        """Human-readable label for a record in log lines."""
        return str(document.get('_id'))

    def run(self):
        """Connect, process every matching record, and always disconnect."""
        result = BatchJobResult(job=self.name, dry_run=self.dry_run)
        logger.info(f"Starting {self.name}{' (dry run)' if self.dry_run else ''}...")

        try:
            self.store.connect()
            documents = self.store.find_users(self.query())
            result.matched = len(documents)
            logger.info(f"Found {result.matched} records to process for {self.name}")

            for document in documents:
                label = self.describe(document)
                try:
                    updates = self.transform(document)
                    if self.dry_run:
                        logger.info(f"Would update {label}: {sorted(updates)}")
                        continue
                    self.store.update_user(document['_id'], updates)
                    result.updated += 1
                    logger.info(f"Updated {label}", extra={
                        'extra_fields': {'job': self.name, 'record_id': str(document['_id'])}
                    })
                except Exception as e:
                    result.failed += 1
                    result.errors.append(f"{label}: {e}")
                    logger.error(f"Error processing {label} in {self.name}: {e}", exc_info=True)

            logger.info(f"{self.name} completed: {result.updated} updated, {result.failed} failed")
        except Exception as e:
            result.error = str(e)
            logger.error(f"Error during {self.name}: {e}", exc_info=True)
        finally:
            try:
                self.store.close()
            except Exception as e:
                logger.error(f"Failed to close store after {self.name}: {e}")

        return result
