"""
Remove command for qtpods.
"""

import click

from ..cli_utils import get_repository, get_service, handle_errors, pretty_option, report


@click.command('remove')
@click.argument('names', nargs=-1, required=True, metavar='NAME...')
@pretty_option
@click.pass_context
@handle_errors
def remove_handler(ctx, names, pretty):
    """Remove installed pods.

    Deinitializes each submodule, removes its files and git's module
    state, and purges its metadata. Project files are regenerated only
    if every pod was removed.

    \b
    Examples:
        qtpods remove qt-json
        qtpods remove qt-json qt-logger --pretty
    """
    service = get_service(ctx)
    repository = get_repository(ctx)
    if len(names) == 1:
        result = service.remove_pod(repository, names[0])
    else:
        result = service.remove_pods(repository, list(names))
    report(result, pretty)
