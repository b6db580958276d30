import asyncio
import functools
from typing import IO, Any, Callable, Collection, Dict, List, Optional, Tuple

import click
import yaml

from graphsync._cogs.clients import api, auth, fetching
from graphsync._cogs.configs import configuration
from graphsync._cogs.structs import credentials, diffs, merging, normalization, values
from graphsync._core.actions import loggers
from graphsync._core.engines import memberships


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        if isinstance(value, loggers.LogFormat):
            return value
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


class QueryParamType(click.ParamType):
    name = 'key=value'

    def convert(self, value: Any, param: Any, ctx: Any) -> Tuple[str, str]:
        if isinstance(value, tuple):
            return value
        key, sep, val = str(value).partition('=')
        if not sep or not key:
            self.fail(f"Expected a key=value pair, got {value!r}.", param, ctx)
        return key, val


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def connection_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to accept the API server & credentials in all commands the same way."""
    @click.option('--server', type=str, default='https://graph.microsoft.com', show_default=True)
    @click.option('--token', type=str, default=None)
    @click.option('--insecure', is_flag=True, default=False)
    @click.option('--api-version', type=str, default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(server: str, token: Optional[str], insecure: bool, api_version: Optional[str],
                *args: Any, **kwargs: Any) -> Any:
        info = credentials.ConnectionInfo(server=server, token=token, insecure=insecure)
        settings = configuration.Settings()
        if api_version:
            settings.api.version = api_version
        return fn(*args, info=info, settings=settings, **kwargs)

    return wrapper


def load_value(stream: IO[str]) -> values.Value:
    """
    Load a JSON document, or a YAML document if it is not JSON.

    JSON is parsed strictly first: YAML 1.1 reads some JSON numbers (``1e5``)
    as strings. YAML's own types (e.g. the dates) are not accepted.
    """
    text = stream.read()
    try:
        value = normalization.decode(text)
    except ValueError:
        try:
            value = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise click.BadParameter(f"Cannot parse {stream.name!r}: {e}")
    try:
        values.check_value(value)
    except (TypeError, ValueError) as e:
        raise click.BadParameter(f"Not a JSON-compatible document {stream.name!r}: {e}")
    return value


def echo_value(value: Any) -> None:
    if value is not values.ABSENT:
        click.echo(normalization.canonicalize(value))


def build_params(query: Collection[Tuple[str, str]]) -> Dict[str, List[str]]:
    params: Dict[str, List[str]] = {}
    for key, val in query:
        params.setdefault(key, []).append(val)
    return params


@click.version_option(prog_name='graphsync')
@click.group(name='graphsync', context_settings=dict(
    auto_envvar_prefix='GRAPHSYNC',
))
def main() -> None:
    pass


@main.command()
@logging_options
@click.argument('source', type=click.File('r'), default='-')
def normalize(source: IO[str]) -> None:
    """ Print the canonical form of a JSON document. """
    normalized = normalization.normalize(source.read())
    if normalization.is_invalid(normalized):
        raise click.ClickException(normalized)
    if normalized:
        click.echo(normalized)


@main.command()
@logging_options
@click.argument('old', type=click.File('r'))
@click.argument('new', type=click.File('r'))
def merge(old: IO[str], new: IO[str]) -> None:
    """ Merge the new document over the old one, keeping everything. """
    echo_value(merging.merge(load_value(old), load_value(new)))


@main.command()
@logging_options
@click.option('--ignore-casing', is_flag=True)
@click.option('--keep-missing', 'ignore_missing_property', is_flag=True)
@click.argument('old', type=click.File('r'))
@click.argument('new', type=click.File('r'))
def update(old: IO[str], new: IO[str], ignore_casing: bool, ignore_missing_property: bool) -> None:
    """ Update the old document with the new one, dropping the old-only fields. """
    options = merging.UpdateOptions(ignore_casing=ignore_casing,
                                    ignore_missing_property=ignore_missing_property)
    echo_value(merging.update(load_value(old), load_value(new), options))


@main.command()
@logging_options
@click.option('--ignore-casing', is_flag=True)
@click.argument('old', type=click.File('r'))
@click.argument('new', type=click.File('r'))
def diff(old: IO[str], new: IO[str], ignore_casing: bool) -> None:
    """ Print the patch from the old document to the new one; nothing if unchanged. """
    options = merging.UpdateOptions(ignore_casing=ignore_casing)
    echo_value(diffs.diff(load_value(old), load_value(new), options))


@main.command(name='list')
@logging_options
@connection_options
@click.option('-Q', '--query', 'query', type=QueryParamType(), multiple=True)
@click.argument('url')
def list_(
        url: str,
        query: Collection[Tuple[str, str]],
        info: credentials.ConnectionInfo,
        settings: configuration.Settings,
) -> None:
    """ Fetch all the pages of a collection and print the aggregated result. """
    logger = loggers.ResourceLogger(url=url, api_version=settings.api.version)
    result = asyncio.run(_list(url, info=info, settings=settings,
                               params=build_params(query), logger=logger))
    echo_value(result)


@main.command(name='sync-refs')
@logging_options
@connection_options
@click.option('--old', 'old', multiple=True, help="The previously known member ids.")
@click.option('--new', 'new', multiple=True, help="The desired member ids.")
@click.option('--from-remote', is_flag=True, help="Read the previous members from the server.")
@click.argument('url')
def sync_refs(
        url: str,
        old: Collection[str],
        new: Collection[str],
        from_remote: bool,
        info: credentials.ConnectionInfo,
        settings: configuration.Settings,
) -> None:
    """ Add the missing & remove the extra members of a reference collection. """
    logger = loggers.ResourceLogger(url=url, api_version=settings.api.version)
    try:
        plan = asyncio.run(_sync(url, old=None if from_remote else old, new=new,
                                 info=info, settings=settings, logger=logger))
    except memberships.MembershipSyncError as e:
        lines = [f"{failure.operation} {failure.member}: {failure.error}" for failure in e.failures]
        raise click.ClickException('\n'.join([str(e.args[0])] + lines))
    for member in plan.to_add:
        click.echo(f"+ {member}")
    for member in plan.to_remove:
        click.echo(f"- {member}")


async def _list(
        url: str,
        *,
        info: credentials.ConnectionInfo,
        settings: configuration.Settings,
        params: api.QueryParams,
        logger: loggers.ResourceLogger,
) -> Any:
    async with auth.APIContext(info) as context:
        return await fetching.list_objs(url=url, params=params, settings=settings,
                                        context=context, logger=logger)


async def _sync(
        url: str,
        *,
        old: Optional[Collection[str]],
        new: Collection[str],
        info: credentials.ConnectionInfo,
        settings: configuration.Settings,
        logger: loggers.ResourceLogger,
) -> memberships.MembershipPlan:
    async with auth.APIContext(info) as context:
        token = auth.context_var.set(context)
        try:
            if old is None:
                old = await memberships.read_membership(url, settings=settings, logger=logger)
                if old is None:
                    raise click.ClickException(f"The collection is not found: {url}")
            return await memberships.sync_membership(old, new, url=url, settings=settings,
                                                     logger=logger)
        finally:
            auth.context_var.reset(token)
