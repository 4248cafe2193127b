from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from repocdn.repo_config import TargetTable


class Environment(Enum):
    STAGING = "staging"
    PROD = "prod"

    @property
    def is_prod(self):
        return self == Environment.PROD

    @property
    def requires_role(self) -> bool:
        """Whether the CloudFront client must run under the cross-account production role."""
        return self.is_prod


class RepoType(Enum):
    APT = "apt"
    YUM = "yum"


@dataclass(frozen=True)
class Config:
    targets: TargetTable
