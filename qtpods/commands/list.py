"""
Listing commands for qtpods.

- list: pods installed in the repository
- available: pods offered by the catalog sources
"""

import click

from ..cli_utils import get_repository, get_service, handle_errors, pretty_option
from ..exit_codes import NotARepositoryError
from ..output import emit


@click.command('list')
@pretty_option
@click.pass_context
@handle_errors
def list_handler(ctx, pretty):
    """List installed pods with their metadata.

    Output is JSONL by default, one pod per line.

    \b
    Examples:
        qtpods list
        qtpods list --pretty
        qtpods list | jq -r .name
    """
    service = get_service(ctx)
    repository = get_repository(ctx)
    if not service.is_git_repository(repository):
        raise NotARepositoryError(repository)
    emit(service.list_installed_pods(repository), pretty=pretty)


@click.command('available')
@click.option('--source', '-s', 'sources', multiple=True,
              help='Catalog URL (overrides general.sources, repeatable)')
@pretty_option
@click.pass_context
@handle_errors
def available_handler(ctx, sources, pretty):
    """List pods available from the catalog sources.

    Unreachable sources and malformed catalogs contribute no pods.

    \b
    Examples:
        qtpods available
        qtpods available -s https://example.org/pods.json --pretty
    """
    service = get_service(ctx)
    pods = service.list_available_pods(list(sources) if sources else None)
    emit(pods, pretty=pretty)
