"""CLI command for cloning a repository at a revision"""

import sys
from pathlib import Path
from typing import Optional

import click

from revclone.cli.error_formatting import pretty_print_clone_error
from revclone.cli.progress import ConsoleDispatcher
from revclone.cli.utils.logging import logger
from revclone.config import get_clone_base_dir, get_credentials
from revclone.exceptions import GitCloneFailed, WorkspaceError
from revclone.git import CloningService
from revclone.model import (
    Commit,
    GitUrl,
    PersonalAccessToken,
    Revision,
    UsernameAndPassword,
)


def _credentials_from_options(
    token: Optional[str], username: Optional[str], password: Optional[str]
):
    if token and username:
        raise click.UsageError("--token and --username are mutually exclusive")
    if token:
        return PersonalAccessToken(token)
    if username:
        return UsernameAndPassword(username, password or "")
    return get_credentials()


@click.command(name="clone")
@click.argument("url")
@click.argument("revision")
@click.option(
    "--commit",
    "-c",
    help="Commit to check out. Skips revision resolution.",
)
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to create the workspace in. Defaults to the configured clones dir.",
)
@click.option(
    "--token", help="Personal access token. Overrides REVCLONE_TOKEN and the config."
)
@click.option("--username", help="Username for basic authentication.")
@click.option("--password", help="Password for basic authentication.")
@click.option("--quiet", "-q", is_flag=True, help="Do not show clone progress.")
def clone(
    url: str,
    revision: str,
    commit: Optional[str],
    base_dir: Optional[Path],
    token: Optional[str],
    username: Optional[str],
    password: Optional[str],
    quiet: bool,
):
    """Clone URL and check out REVISION into a fresh workspace.

    REVISION may be a tag, a branch name or any label containing a version
    number, e.g. v2.14.1-final.

    Example:

      revclone clone https://github.com/user/repo v1.2.0
    """
    try:
        git_url = GitUrl(url)
        rev = Revision(revision)
        explicit = Commit(commit) if commit else None
    except ValueError as e:
        raise click.BadParameter(str(e))

    credentials = _credentials_from_options(token, username, password)
    if base_dir is None:
        base_dir = get_clone_base_dir()

    dispatcher = None if quiet else ConsoleDispatcher()
    service = CloningService(
        base_dir, credentials=credentials, progress_dispatcher=dispatcher
    )

    try:
        if dispatcher is not None:
            dispatcher.start(f"Cloning {url}")
        result = service.clone(git_url, rev, explicit)
    except (GitCloneFailed, WorkspaceError) as e:
        logger.error(pretty_print_clone_error(e))
        sys.exit(1)
    finally:
        if dispatcher is not None:
            dispatcher.finish()

    if result.ref_name:
        logger.debug(f"Resolved {revision} via {result.ref_name}")
    click.echo(f"{result.commit.hash}\t{result.directory}")
