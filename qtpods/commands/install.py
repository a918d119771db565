"""
Install command for qtpods.

Adds pods to the repository as git submodules, records their metadata
in .podinfo and regenerates the project files.
"""

from typing import List, Optional, Tuple

import click

from ..cli_utils import get_repository, get_service, handle_errors, pretty_option, report
from ..domain.pod import Pod
from ..exit_codes import PodNotFoundError


def _parse_pod_spec(spec: str) -> Tuple[str, Optional[str]]:
    """Split ``name=url`` into its parts; a bare name has no url."""
    name, sep, url = spec.partition('=')
    name = name.strip()
    if not name or (sep and not url.strip()):
        raise click.BadParameter(f"expected NAME or NAME=URL, got '{spec}'", param_hint='POD')
    return name, url.strip() if sep else None


def resolve_pods(service, specs, sources) -> List[Pod]:
    """Turn POD arguments into pods, looking bare names up in the catalog."""
    pods = []
    for spec in specs:
        name, url = _parse_pod_spec(spec)
        if url is not None:
            pods.append(Pod(name=name, url=url))
            continue
        pod = service.catalog.find_available(name, sources)
        if pod is None:
            raise PodNotFoundError(name)
        pods.append(pod)
    return pods


@click.command('install')
@click.argument('pods', nargs=-1, required=True, metavar='POD...')
@click.option('--author', help='Pod author (single pod only)')
@click.option('--description', help='Pod description (single pod only)')
@click.option('--license', 'license_', help='Pod license (single pod only)')
@click.option('--website', help='Pod website (single pod only)')
@click.option('--source', '-s', 'sources', multiple=True,
              help='Catalog URL for resolving bare pod names (overrides config)')
@pretty_option
@click.pass_context
@handle_errors
def install_handler(ctx, pods, author, description, license_, website, sources, pretty):
    """Install pods into the repository.

    Each POD is either NAME=URL, or a bare NAME looked up in the
    configured catalog sources.

    \b
    Examples:
        qtpods install qt-json=https://example.org/qt-json.git
        qtpods install qt-json --author "Jane Doe" --license MIT
        qtpods -C ~/src/myapp install qt-json qt-logger
    """
    service = get_service(ctx)
    overrides = {
        key: value for key, value in (
            ('author', author),
            ('description', description),
            ('license', license_),
            ('website', website),
        ) if value is not None
    }
    if overrides and len(pods) > 1:
        raise click.UsageError("metadata options apply to a single pod only")

    resolved = resolve_pods(service, pods, list(sources) or service.sources)
    if overrides:
        resolved = [resolved[0].with_metadata(**overrides)]

    repository = get_repository(ctx)
    if len(resolved) == 1:
        result = service.install_pod(repository, resolved[0])
    else:
        result = service.install_pods(repository, resolved)
    report(result, pretty)
