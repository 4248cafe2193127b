import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

from repocdn.repo_config import RepoTarget

logger = logging.getLogger(__name__)

CALLER_REFERENCE_PREFIX = "repocdn"


@dataclass(frozen=True)
class InvalidationRequest:
    distribution_id: str
    paths: tuple[str, ...]
    caller_reference: str

    def as_batch(self) -> dict:
        return {
            "Paths": {
                "Quantity": len(self.paths),
                "Items": list(self.paths),
            },
            "CallerReference": self.caller_reference,
        }


@dataclass(frozen=True)
class SubmittedInvalidation:
    invalidation_id: str
    location: str


def make_caller_reference(paths: Sequence[str], now: Optional[datetime] = None) -> str:
    """Build a caller reference unique to this invalidation attempt.

    CloudFront treats a repeated reference with the same batch as a resubmission
    and rejects it outright with a different batch, so every run needs a fresh one.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    first = paths[0] if paths else ""
    return f"{CALLER_REFERENCE_PREFIX}:{now.isoformat()}:{first}"


def build_invalidation_request(
    target: RepoTarget, paths: Sequence[str], caller_reference: Optional[str] = None
) -> InvalidationRequest:
    paths = tuple(paths)
    if not caller_reference:
        caller_reference = make_caller_reference(paths)
    return InvalidationRequest(target.distribution_id, paths, caller_reference)


def create_cloudfront_invalidation(cloudfront_client, request: InvalidationRequest) -> SubmittedInvalidation:
    """Submit REQUEST to CloudFront.

    Args:
        cloudfront_client: boto3 CloudFront client to submit with
        request: The invalidation to create

    Returns:
        The id and location CloudFront assigned to the new invalidation
    """
    logger.debug("Creating invalidation with caller reference %s", request.caller_reference)
    response = cloudfront_client.create_invalidation(
        DistributionId=request.distribution_id,
        InvalidationBatch=request.as_batch(),
    )

    return SubmittedInvalidation(response["Invalidation"]["Id"], response["Location"])


def wait_for_invalidation(
    cloudfront_client, distribution_id: str, invalidation_id: str, timeout: int = 600, interval: int = 10
) -> bool:
    """Wait for a CloudFront invalidation to complete.

    Args:
        cloudfront_client: boto3 CloudFront client
        distribution_id: The CloudFront distribution ID
        invalidation_id: The invalidation ID to wait for
        timeout: Maximum time to wait in seconds
        interval: Seconds to sleep between status checks

    Returns:
        True if completed successfully, False if timeout
    """
    start_time = time.time()

    while time.time() - start_time < timeout:
        response = cloudfront_client.get_invalidation(
            DistributionId=distribution_id,
            Id=invalidation_id,
        )

        status = response["Invalidation"]["Status"]
        if status == "Completed":
            return True

        logger.info(f"Invalidation {invalidation_id} status: {status}")
        time.sleep(interval)

    return False
