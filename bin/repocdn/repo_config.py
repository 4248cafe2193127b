"""Package repository targets for each environment.

Each (environment, repo type) pair maps to exactly one S3 bucket holding the
repository and the CloudFront distribution serving it.

To find the CloudFront distribution IDs:
1. Use AWS CLI: aws cloudfront list-distributions
2. Check AWS Console: CloudFront -> Distributions
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from repocdn.env import Environment, RepoType


class InvalidArgument(ValueError):
    pass


@dataclass(frozen=True)
class RepoTarget:
    storage_bucket: str
    distribution_id: str


TargetTable = Mapping[tuple[Environment, RepoType], RepoTarget]

REPO_TARGETS: TargetTable = MappingProxyType(
    {
        (Environment.STAGING, RepoType.APT): RepoTarget("apt.datad0g.com", "E18ZGDURBK5K6X"),
        (Environment.STAGING, RepoType.YUM): RepoTarget("yum.datad0g.com", "E17ZLUWTA3BBMD"),
        (Environment.PROD, RepoType.APT): RepoTarget("apt.datadoghq.com", "E3Q5GQK7JXVKE"),
        (Environment.PROD, RepoType.YUM): RepoTarget("yum.datadoghq.com", "E1KM31Z2LAGIKZ"),
    }
)


def parse_environment(env: Environment | str) -> Environment:
    try:
        return Environment(env)
    except ValueError:
        choices = ", ".join(e.value for e in Environment)
        raise InvalidArgument(f"You must specify an env of {choices} (got '{env}')") from None


def parse_repo_type(repo_type: RepoType | str) -> RepoType:
    try:
        return RepoType(repo_type)
    except ValueError:
        choices = ", ".join(r.value for r in RepoType)
        raise InvalidArgument(f"You must specify a repo-type of {choices} (got '{repo_type}')") from None


def resolve_repo_target(targets: TargetTable, env: Environment | str, repo_type: RepoType | str) -> RepoTarget:
    """Look up the bucket and distribution for an environment and repo type.

    Both tags are validated against their enumerations before the table is
    consulted, so a bad value never reaches any AWS call.
    """
    key = (parse_environment(env), parse_repo_type(repo_type))
    target = targets.get(key)
    if target is None:
        raise InvalidArgument(f"No repository configured for env '{key[0].value}' and repo-type '{key[1].value}'")
    return target
