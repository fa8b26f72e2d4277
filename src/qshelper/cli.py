"""Command line interface: ``qshelper <command> QUERY_STRING ...``."""
from __future__ import annotations

import importlib.metadata
import platform
import typing as t

import click

from qshelper.config import Config
from qshelper.exceptions import ValidationError

if t.TYPE_CHECKING:
    from qshelper.helpers import QueryStringHelper


def get_version(ctx: click.Context, param: click.Parameter, value: t.Any) -> None:
    if not value or ctx.resilient_parsing:
        return
    from qshelper import __version__

    click_version = importlib.metadata.version("click")
    werkzeug_version = importlib.metadata.version("werkzeug")
    click.echo(
        f"Python {platform.python_version()}\n"
        f"qshelper {__version__}\n"
        f"Click {click_version}\n"
        f"Werkzeug {werkzeug_version}",
        color=ctx.color,
    )
    ctx.exit()


version_option = click.Option(
    ["--version"],
    help="Show the qshelper version.",
    expose_value=False,
    callback=get_version,
    is_flag=True,
    is_eager=True,
)


class ScriptInfo:
    """Carries the configuration between the group and its commands."""

    def __init__(self, config: Config | None = None) -> None:
        if config is None:
            config = Config()
            config.from_prefixed_env()
        self.config = config
        self._helper: QueryStringHelper | None = None

    @property
    def helper(self) -> QueryStringHelper:
        if self._helper is None:
            self._helper = self.config.make_helper()
        return self._helper

    def run(self, operation: str, query_string: str, *args: t.Any) -> t.Any:
        try:
            return getattr(self.helper, operation)(query_string, *args)
        except ValidationError as e:
            raise click.UsageError(str(e)) from e


pass_script_info = click.make_pass_decorator(ScriptInfo, ensure=True)


def _parse_index(value: str, param_hint: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise click.BadParameter(
            f"{value!r} is not a valid integer.", param_hint=param_hint
        ) from None


@click.group(params=[version_option])
@click.option("--debug/--no-debug", default=None, help="Log every operation.")
@click.option(
    "--plus-as-space/--no-plus-as-space",
    default=None,
    help="Decode '+' as a space when reading the query string.",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool | None, plus_as_space: bool | None) -> None:
    """Edit URL query strings while keeping their parameter order.

    Settings are also read from QSHELPER_* environment variables.
    """
    info = ctx.ensure_object(ScriptInfo)
    if debug is not None:
        info.config["DEBUG"] = debug
    if plus_as_space is not None:
        info.config["UNESCAPE_PLUS_AS_SPACE"] = plus_as_space


@cli.command("show")
@click.argument("query_string")
@pass_script_info
def show_command(info: ScriptInfo, query_string: str) -> None:
    """Show the indexed state, one key per line."""
    try:
        qs = info.helper.parse(query_string)
    except ValidationError as e:
        raise click.UsageError(str(e)) from e
    for key, entries in qs.state.items():
        click.echo(f"{key} = [{', '.join(str(entry) for entry in entries)}]")


@cli.command("get")
@click.argument("query_string")
@click.argument("key")
@click.option("--all", "all_values", is_flag=True, help="Print every value.")
@pass_script_info
def get_command(info: ScriptInfo, query_string: str, key: str, all_values: bool) -> None:
    """Print the first value of KEY, or all of them with --all.

    Exits with status 1 when KEY is absent.
    """
    if all_values:
        values = info.run("get_all_values", query_string, key)
    else:
        value = info.run("get_first_value", query_string, key)
        values = [] if value is None else [value]
    if not values:
        raise click.exceptions.Exit(1)
    for value in values:
        click.echo(value)


@cli.command("replace-first")
@click.argument("query_string")
@click.argument("key")
@click.argument("value")
@pass_script_info
def replace_first_command(info: ScriptInfo, query_string: str, key: str, value: str) -> None:
    """Replace the first value of KEY."""
    click.echo(info.run("replace_first", query_string, key, value))


@cli.command("replace-n")
@click.argument("query_string")
@click.argument("key")
@click.argument("values", nargs=-1, required=True)
@pass_script_info
def replace_n_command(
    info: ScriptInfo, query_string: str, key: str, values: tuple[str, ...]
) -> None:
    """Replace the first values of KEY, one per VALUE."""
    click.echo(info.run("replace_n", query_string, key, list(values)))


@cli.command("replace-nth")
@click.argument("query_string")
@click.argument("instructions", nargs=-1, required=True, metavar="KEY=INDEX=VALUE...")
@pass_script_info
def replace_nth_command(
    info: ScriptInfo, query_string: str, instructions: tuple[str, ...]
) -> None:
    """Replace values of keys by their relative index."""
    changes: dict[str, dict[int, str]] = {}
    for instruction in instructions:
        parts = instruction.split("=", 2)
        if len(parts) != 3:
            raise click.BadParameter(
                f"{instruction!r} is not in KEY=INDEX=VALUE form.",
                param_hint="INSTRUCTIONS",
            )
        key, index, value = parts
        changes.setdefault(key, {})[_parse_index(index, "INSTRUCTIONS")] = value
    click.echo(info.run("replace_nth", query_string, changes))


@cli.command("remove-first")
@click.argument("query_string")
@click.argument("key")
@pass_script_info
def remove_first_command(info: ScriptInfo, query_string: str, key: str) -> None:
    """Remove the first occurrence of KEY."""
    click.echo(info.run("remove_first", query_string, key))


@cli.command("remove-all")
@click.argument("query_string")
@click.argument("keys", nargs=-1, required=True)
@pass_script_info
def remove_all_command(info: ScriptInfo, query_string: str, keys: tuple[str, ...]) -> None:
    """Remove every occurrence of each KEY."""
    click.echo(info.run("remove_all", query_string, list(keys)))


@cli.command("remove-n")
@click.argument("query_string")
@click.argument("key")
@click.argument("n", type=int)
@pass_script_info
def remove_n_command(info: ScriptInfo, query_string: str, key: str, n: int) -> None:
    """Remove the first N occurrences of KEY."""
    click.echo(info.run("remove_n", query_string, key, n))


@cli.command("remove-nth")
@click.argument("query_string")
@click.argument("key")
@click.argument("index", type=int)
@pass_script_info
def remove_nth_command(info: ScriptInfo, query_string: str, key: str, index: int) -> None:
    """Remove the occurrence of KEY at relative INDEX."""
    click.echo(info.run("remove_nth", query_string, key, index))


@cli.command("remove-many-nth")
@click.argument("query_string")
@click.argument("key")
@click.argument("indexes", nargs=-1, required=True, type=int)
@pass_script_info
def remove_many_nth_command(
    info: ScriptInfo, query_string: str, key: str, indexes: tuple[int, ...]
) -> None:
    """Remove the occurrences of KEY at each relative INDEX."""
    click.echo(info.run("remove_many_nth", query_string, key, set(indexes)))


@cli.command("remove-matching")
@click.argument("query_string")
@click.argument("key")
@click.argument("value")
@pass_script_info
def remove_matching_command(info: ScriptInfo, query_string: str, key: str, value: str) -> None:
    """Remove the occurrences of KEY whose value is VALUE."""
    click.echo(info.run("remove_key_matching_value", query_string, key, value))


@cli.command("remove-any-matching")
@click.argument("query_string")
@click.argument("value")
@pass_script_info
def remove_any_matching_command(info: ScriptInfo, query_string: str, value: str) -> None:
    """Remove every pair whose value is VALUE."""
    click.echo(info.run("remove_any_key_matching_value", query_string, value))


@cli.command("add")
@click.argument("query_string")
@click.argument("key")
@click.argument("value")
@pass_script_info
def add_command(info: ScriptInfo, query_string: str, key: str, value: str) -> None:
    """Append KEY=VALUE unless KEY already has VALUE."""
    click.echo(info.run("add", query_string, key, value))


@cli.command("add-all")
@click.argument("query_string")
@click.argument("pairs", nargs=-1, required=True, metavar="KEY=VALUE...")
@pass_script_info
def add_all_command(info: ScriptInfo, query_string: str, pairs: tuple[str, ...]) -> None:
    """Append each KEY=VALUE pair in order."""
    click.echo(
        info.run("add_all", query_string, [tuple(pair.split("=", 1)) for pair in pairs])
    )


def main() -> None:
    cli.main(prog_name="qshelper")
