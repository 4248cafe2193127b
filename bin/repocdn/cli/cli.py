import logging

import click

from repocdn.env import Config
from repocdn.repo_config import REPO_TARGETS


@click.group()
@click.option("--debug/--no-debug", help="Turn on debugging")
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    ctx.obj = Config(targets=REPO_TARGETS)
    if debug:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger("boto3").setLevel(logging.WARNING)
        logging.getLogger("botocore").setLevel(logging.WARNING)
