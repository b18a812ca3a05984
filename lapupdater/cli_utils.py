"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps

from .config import configure_logging
from .exit_codes import (
    INTERRUPTED,
    get_exit_code_for_exception, CommandError
)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - --debug switches logging to DEBUG
    - CommandError becomes a message on stderr and its exit code
    - With --json, errors are also printed as a JSON object on stdout
    - Unexpected exceptions are reported, never shown as tracebacks
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        if kwargs.get('debug'):
            configure_logging(debug=True)
        output_json = kwargs.get('output_json', False)

        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            _report_error(e, output_json)
            sys.exit(e.exit_code)
        except Exception as e:
            _report_error(e, output_json, prefix="Command failed: ")
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


def _report_error(exc: Exception, output_json: bool, prefix: str = "") -> None:
    click.echo(f"Error: {prefix}{exc}", err=True)
    if output_json:
        error_obj = {
            "error": str(exc),
            "type": type(exc).__name__,
            "exit_code": get_exit_code_for_exception(exc),
        }
        print(json.dumps(error_obj, ensure_ascii=False), flush=True)


def console_log(pretty: bool):
    """Return a log sink that writes observation lines to stderr."""
    if pretty:
        from rich.console import Console
        from rich.markup import escape
        console = Console(stderr=True)
        return lambda line: console.print(f"[dim]{escape(line)}[/dim]")
    return lambda line: click.echo(line, err=True)
