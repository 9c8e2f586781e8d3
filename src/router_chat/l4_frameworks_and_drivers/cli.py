"""CLI entry point for router-chat."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from router_chat import __version__
from router_chat.l1_entities.chat_error import ChatError

SETTING_KEYS = ('api_key', 'base_url', 'model', 'max_tokens', 'temperature')

REPL_HELP = """\
Commands:
  /models          list available models
  /model <id>      switch model
  /balance         show account balance
  /stats           show usage statistics
  /export [json]   export the session log
  /clear           clear chat history
  /help            show this help
  /quit, /exit     leave"""


@click.group()
@click.option(
    '-c',
    '--config',
    'settings_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to the settings YAML file.',
)
@click.option('--db', 'db_path', default=None, type=click.Path(dir_okay=False), help='Path to the history database.')
@click.option('--log-dir', default=None, type=click.Path(file_okay=False), help='Write a debug log into this directory.')
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, settings_path, db_path, log_dir):
    """router-chat -- chat with OpenRouter/VseGPT models and track what it costs."""
    ctx.ensure_object(dict)
    ctx.obj['settings_path'] = Path(settings_path) if settings_path else None
    ctx.obj['db_path'] = Path(db_path) if db_path else None
    if log_dir:
        from router_chat.l4_frameworks_and_drivers.logging_setup import (  # noqa: PLC0415 -- deferred: only when requested
            setup_file_logging,
        )

        setup_file_logging(Path(log_dir))


def _container(ctx: click.Context):
    from router_chat.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: openai/sqlite stack not loaded on --help
        DependencyContainer,
    )

    kwargs = {}
    if ctx.obj.get('settings_path') is not None:
        kwargs['settings_path'] = ctx.obj['settings_path']
    if ctx.obj.get('db_path') is not None:
        kwargs['db_path'] = ctx.obj['db_path']
    return DependencyContainer(**kwargs)


def _echo_error_banner(error: ChatError) -> None:
    if error is ChatError.NONE:
        return
    color = 'red' if error.severity == 'error' else 'yellow'
    click.secho(f'! {error.message}', fg=color, err=True)


# --- chat ---


@cli.command()
@click.option('--no-analytics', is_flag=True, help='Do not record usage analytics for this session.')
@click.pass_context
def chat(ctx, no_analytics):
    """Interactive chat session."""
    container = _container(ctx)
    asyncio.run(_run_chat(container, track_analytics=not no_analytics))


async def _run_chat(container, *, track_analytics: bool = True) -> None:
    ctrl = container.controller
    if not container.settings_store.settings.has_api_key:
        _echo_error_banner(ChatError.API_KEY_MISSING)
        click.echo("Set one with: router-chat config set api_key <KEY>", err=True)
        return

    await ctrl.initialize()
    await container.expenses.load_expenses()
    click.echo(f'Model: {ctrl.current_model or "(none)"}  Balance: {ctrl.balance}')
    click.echo('Type /help for commands.')

    seen = len(ctrl.messages)
    try:
        while True:
            try:
                line = await asyncio.to_thread(click.prompt, 'you', prompt_suffix='> ', default='', show_default=False)
            except click.Abort:
                break
            line = line.strip()
            if not line:
                continue
            if line.startswith('/'):
                if not await _handle_repl_command(container, line):
                    break
                seen = len(ctrl.messages)
                continue

            await ctrl.send_message(line, track_analytics=track_analytics)
            for msg in ctrl.messages[seen:]:
                if msg.is_user:
                    continue
                click.echo(msg.content)
                if msg.tokens is not None:
                    click.secho(f'  [{msg.tokens} tokens, cost {msg.cost or 0.0:.6f}]', dim=True)
            seen = len(ctrl.messages)
            if ctrl.error is not ChatError.NONE:
                _echo_error_banner(ctrl.error)
                ctrl.clear_error()
    finally:
        await ctrl.wait_background_tasks()
        ctrl.dispose()
        container.expenses.dispose()


async def _handle_repl_command(container, line: str) -> bool:
    """Run a slash command. Returns False when the session should end."""
    ctrl = container.controller
    name, _, arg = line.partition(' ')
    arg = arg.strip()
    if name in ('/quit', '/exit'):
        return False
    if name == '/help':
        click.echo(REPL_HELP)
    elif name == '/models':
        for m in ctrl.available_models:
            marker = '*' if m.id == ctrl.current_model else ' '
            click.echo(f'{marker} {m.id}  {m.name}  {ctrl.format_pricing(m.prompt_price or 0.0)}')
    elif name == '/model':
        if not arg:
            click.echo(f'Current model: {ctrl.current_model}')
        else:
            ctrl.set_current_model(arg)
            click.echo(f'Model set to {arg}')
    elif name == '/balance':
        click.echo(ctrl.balance)
    elif name == '/stats':
        click.echo(json.dumps(ctrl.export_history(), indent=2, ensure_ascii=False, default=str))
    elif name == '/export':
        path = _export(ctrl, as_json=arg == 'json', directory=None)
        click.echo(f'Exported to {path}')
    elif name == '/clear':
        ctrl.clear_history()
        container.expenses.reset()
        click.echo('History cleared.')
    else:
        click.echo(f'Unknown command: {name}. Type /help.')
    return True


# --- one-shot commands ---


@cli.command()
@click.pass_context
def models(ctx):
    """List available models, sorted by name."""
    container = _container(ctx)
    if not container.settings_store.settings.has_api_key:
        _echo_error_banner(ChatError.API_KEY_MISSING)
        sys.exit(1)
    ctrl = container.controller
    asyncio.run(ctrl.initialize())
    if not ctrl.available_models:
        click.echo('No models available.', err=True)
        sys.exit(1)
    for m in ctrl.available_models:
        marker = '*' if m.id == ctrl.current_model else ' '
        prompt = ctrl.format_pricing(m.prompt_price or 0.0)
        completion = ctrl.format_pricing(m.completion_price or 0.0)
        click.echo(f'{marker} {m.id}\t{m.name}\tin {prompt}\tout {completion}')


@cli.command()
@click.pass_context
def balance(ctx):
    """Show the account balance."""
    container = _container(ctx)
    if not container.settings_store.settings.has_api_key:
        _echo_error_banner(ChatError.API_KEY_MISSING)
        sys.exit(1)
    try:
        click.echo(asyncio.run(container.completion_client().get_balance()))
    except Exception as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def check(ctx):
    """Check that the configured endpoint accepts the API key."""
    container = _container(ctx)
    if not container.settings_store.settings.has_api_key:
        _echo_error_banner(ChatError.API_KEY_MISSING)
        sys.exit(1)
    ok, detail = container.completion_client().check_connectivity()
    if not ok:
        click.echo(f'Error: {detail}', err=True)
        sys.exit(1)
    click.echo(f'OK: {container.settings_store.settings.base_url}')


@cli.command()
@click.pass_context
def stats(ctx):
    """Show aggregate usage statistics from the history store."""
    container = _container(ctx)
    click.echo(json.dumps(container.history.get_statistics(), indent=2, ensure_ascii=False))


@cli.command()
@click.option('-d', '--days', default=30, show_default=True, type=click.IntRange(min=1), help='Analysis window.')
@click.pass_context
def expenses(ctx, days):
    """Show daily expenses over the last DAYS days."""
    container = _container(ctx)
    aggregator = container.expenses
    asyncio.run(_load_expenses(aggregator, days))
    state = aggregator.state
    if state.error_message:
        click.echo(f'Error: {state.error_message}', err=True)
        sys.exit(1)
    if not state.has_data:
        click.echo('No expenses recorded.')
        return
    for day in state.daily_expenses:
        click.echo(f'{day.formatted_date}\t{day.cost:.6f}')
    click.echo(f'Total\t{state.total_expenses:.6f}')


async def _load_expenses(aggregator, days: int) -> None:
    if days != aggregator.analysis_days:
        await aggregator.set_analysis_days(days)
    else:
        await aggregator.load_expenses()


@cli.command()
@click.option('--json', 'as_json', is_flag=True, help='Export messages as a JSON array.')
@click.option('-o', '--output-dir', default=None, type=click.Path(file_okay=False), help='Directory for the export file.')
@click.pass_context
def export(ctx, as_json, output_dir):
    """Export the stored chat history."""
    container = _container(ctx)
    ctrl = container.controller
    ctrl.load_history()
    path = _export(ctrl, as_json=as_json, directory=Path(output_dir) if output_dir else None)
    click.echo(str(path))


def _export(ctrl, *, as_json: bool, directory: Path | None) -> Path:
    if directory is None:
        from router_chat.l3_interface_adapters.gateways.paths import (  # noqa: PLC0415 -- deferred: platformdirs lookup only when exporting
            EXPORT_DIR,
        )

        directory = EXPORT_DIR
    if as_json:
        return ctrl.export_messages_as_json(directory)
    return ctrl.export_logs(directory)


@cli.command()
@click.confirmation_option(prompt='Delete the whole chat history?')
@click.pass_context
def clear(ctx):
    """Delete the stored chat history."""
    container = _container(ctx)
    container.controller.clear_history()
    click.echo('History cleared.')


# --- config ---


@cli.group()
def config():
    """Show or change settings."""


@config.command('show')
@click.pass_context
def config_show(ctx):
    container = _container(ctx)
    data = container.settings_store.settings.model_dump()
    if data.get('api_key'):
        data['api_key'] = _mask(data['api_key'])
    click.echo(yaml.safe_dump(data, allow_unicode=True, sort_keys=False).rstrip())


@config.command('set')
@click.argument('key', type=click.Choice(SETTING_KEYS))
@click.argument('value')
@click.pass_context
def config_set(ctx, key, value):
    """Set KEY to VALUE (parsed as YAML scalar)."""
    container = _container(ctx)
    parsed = value if key in ('api_key', 'base_url', 'model') else yaml.safe_load(value)
    try:
        container.settings_store.update(**{key: parsed})
    except ValidationError as e:
        click.echo(f'Error: invalid value for {key}: {e.errors()[0]["msg"]}', err=True)
        sys.exit(1)
    shown = _mask(parsed) if key == 'api_key' else parsed
    click.echo(f'{key} = {shown}')


def _mask(secret: str) -> str:
    if len(secret) <= 8:
        return '*' * len(secret)
    return f'{secret[:4]}…{secret[-4:]}'
