import click

from repocdn.cli import cli
from repocdn.env import Config


@cli.command()
@click.pass_obj
def targets(cfg: Config):
    """List the bucket and CloudFront distribution of every repository."""
    row_format = "{: <8} {: <5} {: <20} {: <16}"
    click.echo(row_format.format("Env", "Repo", "Bucket", "Distribution"))
    for (env, repo_type), target in cfg.targets.items():
        click.echo(row_format.format(env.value, repo_type.value, target.storage_bucket, target.distribution_id))
