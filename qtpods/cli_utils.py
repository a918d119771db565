"""
Common CLI utilities for consistent command behavior.
"""

from functools import wraps

import click

from .exit_codes import (
    CommandError,
    INTERRUPTED,
    exit_code_for_result,
    get_exit_code_for_exception,
)
from .output import emit_error, emit_result
from .services.pod_service import PodService


def get_service(ctx: click.Context) -> PodService:
    """Return the PodService for this invocation, creating it once."""
    obj = ctx.ensure_object(dict)
    if obj.get('service') is None:
        obj['service'] = PodService(config=obj.get('config'))
    return obj['service']


def get_repository(ctx: click.Context) -> str:
    return ctx.ensure_object(dict).get('repo', '.')


def pretty_option(f):
    """Decorator adding the --pretty flag."""
    return click.option('--pretty', is_flag=True, help='Display with rich formatting')(f)


def report(result, pretty: bool) -> None:
    """Print an operation result and exit with the matching code."""
    emit_result(result, pretty=pretty)
    code = exit_code_for_result(result)
    if code:
        raise SystemExit(code)


def handle_errors(func):
    """
    Decorator turning CommandError (and Ctrl+C) into a JSON error on
    stderr plus the matching exit code.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CommandError as e:
            emit_error(str(e), type=type(e).__name__)
            raise SystemExit(e.exit_code)
        except KeyboardInterrupt:
            emit_error("Interrupted", type="interrupted")
            raise SystemExit(INTERRUPTED)
        except OSError as e:
            emit_error(str(e), type=type(e).__name__)
            raise SystemExit(get_exit_code_for_exception(e))
    return wrapper
