from typing import Optional

import typer

from . import __version__
from .configs import engine_config
from .errors import HttpError
from .ext_logging import init_logging
from .request import Request

app = typer.Typer(help="Send an HTTP/1.1 request and follow its redirects.")


def version_callback(value: bool):
    if value:
        typer.echo(f"hopclient {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show the version and exit."
    ),
):
    init_logging(engine_config)


def _split_header(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep:
        raise typer.BadParameter(f"expected 'Name: value', got {raw!r}", param_hint="--header")
    return name.strip(), value.strip()


def _split_param(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep:
        raise typer.BadParameter(f"expected 'key=value', got {raw!r}", param_hint="--param")
    return key, value


@app.command()
def get(
    url: str,
    method: str = typer.Option("GET", "--method", "-X", help="Request method."),
    headers: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra header as 'Name: value'. May be repeated."
    ),
    params: Optional[list[str]] = typer.Option(
        None, "--param", "-p", help="Query parameter as 'key=value'. May be repeated."
    ),
    follow: Optional[bool] = typer.Option(
        None, "--follow/--no-follow", help="Follow 3xx responses. Defaults to the configured behaviour."
    ),
    max_redirects: Optional[int] = typer.Option(
        None, "--max-redirects", min=0, help="Fail after this many redirects."
    ),
    encoding: Optional[str] = typer.Option(
        None, "--encoding", "-e", help="Body encoding when the response declares none."
    ),
    include: bool = typer.Option(False, "--include", "-i", help="Print response headers."),
):
    """Fetch URL and print the final response."""
    try:
        request = Request(url).set_method(method)
        if follow is not None:
            request.set_follow_redirects(follow)
        for raw in headers or []:
            request.append_header(*_split_header(raw))
        for raw in params or []:
            request.add_query_param(*_split_param(raw))
        if encoding:
            request.set_default_encoding(encoding)

        response = request.send(max_redirects=max_redirects)
    except (HttpError, ValueError, LookupError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    with response.body:
        typer.echo(f"{response.status_code} {response.reason_phrase}".rstrip())
        if include:
            for name, value in response.headers.multi_items():
                typer.echo(f"{name}: {value}")
            typer.echo("")
        try:
            typer.echo(response.text(), nl=False)
        except HttpError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)


if __name__ == "__main__":
    app()
