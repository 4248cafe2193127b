from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional

from repocdn.amazon import list_bucket_keys
from repocdn.cloudfront_utils import (
    InvalidationRequest,
    SubmittedInvalidation,
    build_invalidation_request,
    create_cloudfront_invalidation,
    wait_for_invalidation,
)
from repocdn.credentials import cloudfront_client_for, credential_provider_for
from repocdn.env import Environment, RepoType
from repocdn.object_filters import FilterCriteria, apply_filters, as_invalidation_paths, drop_versioned
from repocdn.repo_config import RepoTarget, TargetTable, parse_environment, resolve_repo_target

logger = logging.getLogger(__name__)

Lister = Callable[[str], Iterable[str]]


class NoMatchingObjects(RuntimeError):
    pass


@dataclass(frozen=True)
class InvalidationOutcome:
    request: InvalidationRequest
    submitted: Optional[SubmittedInvalidation] = None
    completed: Optional[bool] = None

    @property
    def dry_run(self) -> bool:
        return self.submitted is None


def resolve_objects(
    target: RepoTarget,
    criteria: FilterCriteria,
    raw_path: Optional[str] = None,
    lister: Optional[Lister] = None,
) -> tuple[str, ...]:
    """Work out the paths to invalidate.

    A raw path skips S3 entirely and is used as the only path. Otherwise every
    key in the target bucket is listed and run through the filters; finding
    nothing is an error rather than an empty invalidation.
    """
    if raw_path:
        logger.info("Using raw CloudFront path %s, not querying S3", raw_path)
        return (raw_path,)

    if lister is None:
        lister = list_bucket_keys
    listed = as_invalidation_paths(lister(target.storage_bucket))
    selected = listed
    if criteria.exclude_versioned:
        selected = drop_versioned(selected)
        print("Found the following unversioned objects:")
        for path in selected:
            print(path)
        criteria = replace(criteria, exclude_versioned=False)
    selected = apply_filters(selected, criteria)
    logger.debug("%d of %d objects in %s selected", len(selected), len(listed), target.storage_bucket)
    if not selected:
        raise NoMatchingObjects(
            f"No object matching the conditions has been found on the S3 bucket '{target.storage_bucket}'"
        )
    return selected


def print_request(request: InvalidationRequest) -> None:
    print(f"Invalidating the following {len(request.paths)} objects:")
    for path in request.paths:
        print(path)


def run_invalidation(
    targets: TargetTable,
    env: Environment | str,
    repo_type: RepoType | str,
    criteria: FilterCriteria,
    raw_path: Optional[str] = None,
    dry_run: bool = False,
    wait: bool = False,
    wait_timeout: int = 600,
    lister: Optional[Lister] = None,
    client_factory=None,
) -> InvalidationOutcome:
    env = parse_environment(env)
    target = resolve_repo_target(targets, env, repo_type)
    provider = credential_provider_for(env)

    paths = resolve_objects(target, criteria, raw_path, lister)
    request = build_invalidation_request(target, paths)
    print_request(request)

    if dry_run:
        print("Dry run: no invalidation created, exiting")
        return InvalidationOutcome(request)

    if env.requires_role:
        print(f"Assuming {env.value} role to invalidate {env.value} CloudFront distributions")
    if client_factory is None:
        client_factory = cloudfront_client_for
    cloudfront_client = client_factory(provider)

    submitted = create_cloudfront_invalidation(cloudfront_client, request)
    print(f"Successfully created invalidation '{submitted.location}'")

    completed = None
    if wait:
        print(f"Waiting up to {wait_timeout}s for invalidation {submitted.invalidation_id} to complete...")
        completed = wait_for_invalidation(
            cloudfront_client, request.distribution_id, submitted.invalidation_id, timeout=wait_timeout
        )
    return InvalidationOutcome(request, submitted, completed)
