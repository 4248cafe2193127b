from typing import Optional

import click

from repocdn.amazon import CollaboratorFailure
from repocdn.cli import cli
from repocdn.env import Config, Environment, RepoType
from repocdn.invalidation import NoMatchingObjects, run_invalidation
from repocdn.object_filters import FilterCriteria
from repocdn.repo_config import InvalidArgument


@cli.command()
@click.option(
    "--repo-type",
    type=click.Choice([repo.value for repo in RepoType]),
    required=True,
    help="Type of repo to invalidate",
)
@click.option(
    "--env",
    type=click.Choice([env.value for env in Environment]),
    required=True,
    help="Environment of the repo",
)
@click.option("--pattern-regex", default="", help="Regex defining whitelist of objects to invalidate")
@click.option(
    "--pattern-substring",
    default="",
    help="Substring defining whitelist of objects to invalidate (only objects containing it are selected)",
)
@click.option(
    "--invalidate-versioned",
    is_flag=True,
    help="Don't filter out versioned objects (versioned == one or more digits in the filename)",
)
@click.option("--dry-run", is_flag=True, help="Stop before creating the invalidation")
@click.option(
    "--raw-cloudfront-path",
    default=None,
    metavar="PATH",
    help="Don't query S3, create the invalidation directly against PATH",
)
@click.option("--wait/--no-wait", default=False, help="Wait for the invalidation to complete")
@click.option("--wait-timeout", default=600, type=click.IntRange(min=1), help="Seconds to wait with --wait")
@click.pass_obj
def invalidate(
    cfg: Config,
    repo_type: str,
    env: str,
    pattern_regex: str,
    pattern_substring: str,
    invalidate_versioned: bool,
    dry_run: bool,
    raw_cloudfront_path: Optional[str],
    wait: bool,
    wait_timeout: int,
):
    """Invalidate objects of a package repository in its CloudFront distribution."""
    try:
        criteria = FilterCriteria.from_options(invalidate_versioned, pattern_regex, pattern_substring)
    except InvalidArgument as e:
        raise click.BadParameter(str(e), param_hint="--pattern-regex") from e

    try:
        outcome = run_invalidation(
            cfg.targets,
            env,
            repo_type,
            criteria,
            raw_path=raw_cloudfront_path,
            dry_run=dry_run,
            wait=wait,
            wait_timeout=wait_timeout,
        )
    except NoMatchingObjects as e:
        raise click.ClickException(str(e)) from e
    except CollaboratorFailure as e:
        raise click.ClickException(str(e)) from e

    if outcome.dry_run:
        return
    if outcome.completed is False:
        raise click.ClickException(f"Timed out waiting for invalidation {outcome.submitted.invalidation_id}")
    if outcome.completed:
        print(f"Invalidation {outcome.submitted.invalidation_id} completed")
