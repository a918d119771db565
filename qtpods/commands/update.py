"""
Update command for qtpods.
"""

import click

from ..cli_utils import get_repository, get_service, handle_errors, pretty_option, report


@click.command('update')
@click.argument('names', nargs=-1, metavar='[NAME...]')
@click.option('--branch', '-b', help='Branch to update to (default: general.primary_branch)')
@pretty_option
@click.pass_context
@handle_errors
def update_handler(ctx, names, branch, pretty):
    """Update pods to the latest commit of their primary branch.

    Local changes inside each pod are stashed first. Without NAME,
    every installed pod is updated and the project files regenerated.

    \b
    Examples:
        qtpods update
        qtpods update qt-json --branch main
    """
    service = get_service(ctx)
    repository = get_repository(ctx)
    if not names:
        result = service.update_all_pods(repository, branch=branch)
    elif len(names) == 1:
        result = service.update_pod(repository, names[0], branch=branch)
    else:
        result = service.update_pods(repository, list(names), branch=branch)
    report(result, pretty)
