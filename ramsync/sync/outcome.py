"""Success policy for finished transfers.

The engine reports what rsync did; deciding whether that counts
as success lives here so the rule can change independently.
"""

from __future__ import annotations

from pydantic import BaseModel

from .errors import SyncFailure, SyncReason
from .rsync import Response
from .runner import SyncResult


class TransferFailed(BaseModel):
    """A transfer whose rsync exit code signals failure."""

    exit_code: int
    stderr: str

    def to_failure(self) -> SyncFailure:
        message = f"rsync exited with code {self.exit_code}"
        if self.stderr.strip():
            message += f": {self.stderr.strip().splitlines()[-1]}"
        return SyncFailure(reason=SyncReason.TRANSFER_FAILED, message=message)


def transfer_failure(response: Response) -> TransferFailed | None:
    """Classify a response, returning None when the transfer succeeded."""
    if response.termination_status == 0:
        return None
    else:
        return TransferFailed(
            exit_code=response.termination_status,
            stderr=response.error,
        )


def result_failure(result: SyncResult) -> SyncFailure | None:
    """The failure of a batch result, counting non-zero rsync exits."""
    if result.failure is not None:
        return result.failure
    elif result.response is not None:
        failed = transfer_failure(result.response)
        return failed.to_failure() if failed is not None else None
    else:
        return None
