import logging
from typing import Iterator

from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"

# Errors raised by the S3, STS and CloudFront APIs. They are never wrapped or
# retried here; callers see the original botocore exception.
CollaboratorFailure = (BotoCoreError, ClientError)


class LazyObjectWrapper:
    def __init__(self, fn):
        self.__fn = fn
        self.__setup = False
        self.__obj = None

    def __ensure_setup(self):
        if not self.__setup:
            self.__obj = self.__fn()
            self.__setup = True

    def __getattr__(self, attr):
        self.__ensure_setup()
        return getattr(self.__obj, attr)


def _import_boto():
    obj = __import__("boto3")

    if not obj.session.Session().region_name:
        obj.setup_default_session(region_name=DEFAULT_REGION)

    return obj


boto3 = LazyObjectWrapper(_import_boto)

s3_client = LazyObjectWrapper(lambda: boto3.client("s3"))
sts_client = LazyObjectWrapper(lambda: boto3.client("sts"))


def list_bucket_keys(bucket: str) -> Iterator[str]:
    """Yield every key in BUCKET, following continuation tokens across pages."""
    logger.info("Listing objects in s3://%s", bucket)
    s3_paginator = s3_client.get_paginator("list_objects_v2")
    for page in s3_paginator.paginate(Bucket=bucket):
        if page.get("KeyCount"):
            for match in page["Contents"]:
                yield match["Key"]
