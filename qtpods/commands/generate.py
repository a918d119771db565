"""
Generate command for qtpods.
"""

import click

from ..cli_utils import get_repository, get_service, handle_errors, pretty_option, report

TARGETS = {
    'pri': 'generate_pods_pri',
    'subdirs-pri': 'generate_pods_subdirs_pri',
    'subdirs-pro': 'generate_subdirs_pro',
    'all': 'generate_all',
}


@click.command('generate')
@click.argument('target', type=click.Choice(list(TARGETS)), default='all')
@pretty_option
@click.pass_context
@handle_errors
def generate_handler(ctx, target, pretty):
    """Regenerate the qmake project files from the installed pods.

    \b
    TARGET is one of:
        pri          pods.pri
        subdirs-pri  pods-subdirs.pri
        subdirs-pro  <repo>.pro (only created if missing)
        all          all of the above (default)
    """
    service = get_service(ctx)
    result = getattr(service, TARGETS[target])(get_repository(ctx))
    report(result, pretty)
