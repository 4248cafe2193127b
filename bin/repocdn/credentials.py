"""Credential strategies for building the CloudFront client.

Staging distributions are invalidated with whatever identity boto3 finds in the
environment. Production distributions live in another account, so the client
is built from short-lived credentials obtained by assuming a role there.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from repocdn.amazon import DEFAULT_REGION, boto3, sts_client
from repocdn.env import Environment

logger = logging.getLogger(__name__)

PROD_INVALIDATION_ROLE_ARN = "arn:aws:iam::727006795293:role/build-stable-cloudfront-invalidation"
INVALIDATION_SESSION_NAME = "gitlab-cloudfront-invalidate-script"


@dataclass(frozen=True)
class AmbientCredentials:
    region: str = DEFAULT_REGION

    def session(self):
        return boto3.session.Session(region_name=self.region)


@dataclass(frozen=True)
class AssumedRoleCredentials:
    role_arn: str
    session_name: str
    region: str = DEFAULT_REGION

    def session(self):
        logger.info("Assuming role %s (session %s)", self.role_arn, self.session_name)
        assumed = sts_client.assume_role(RoleArn=self.role_arn, RoleSessionName=self.session_name)
        credentials = assumed["Credentials"]
        return boto3.session.Session(
            aws_access_key_id=credentials["AccessKeyId"],
            aws_secret_access_key=credentials["SecretAccessKey"],
            aws_session_token=credentials["SessionToken"],
            region_name=self.region,
        )


AnyCredentials = Union[AmbientCredentials, AssumedRoleCredentials]


def credential_provider_for(env: Environment) -> AnyCredentials:
    if env.requires_role:
        return AssumedRoleCredentials(PROD_INVALIDATION_ROLE_ARN, INVALIDATION_SESSION_NAME)
    return AmbientCredentials()


def cloudfront_client_for(provider: AnyCredentials):
    return provider.session().client("cloudfront")
