#!/usr/bin/env python3
"""
Command-line interface for the VEER services.

Agent and chat commands talk to the running services over HTTP. The widget
commands (converter, color, explain, password, hash, snippets, quick commands,
breaks) work locally.
"""
import dataclasses
import sys
import json
import time
import click
from typing import Optional, Dict, Any

from veer.adapters import HTTPClientAdapterFactory, HTTPResponse, HTTPStatusError
from veer.agent.auth import TOKEN_HEADER
from veer.agent.commands import MEDIA_ACTIONS
from veer.agent.parsers import format_bytes
from veer.config import get_settings
from veer.exceptions import ServiceError
from veer.tools import code_explainer, colors, converter, hashes, passwords
from veer.tools.launcher import display_name, parse_open_command
from veer.tools.local_store import (
    BreakStats,
    ColorStore,
    LocalStore,
    PRESET_COMMANDS,
    QuickCommandStore,
    SnippetStore,
)

ACTION_PAUSE_SECONDS = 0.3


def make_request(
    method: str,
    endpoint: str,
    base_url: str,
    token: Optional[str] = None,
    **kwargs
) -> HTTPResponse:
    """Make HTTP request to a VEER service."""
    url = f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    headers = kwargs.pop("headers", {})
    if token:
        headers[TOKEN_HEADER] = token

    with HTTPClientAdapterFactory.create_client(timeout=30.0) as client:
        if method.upper() == "GET":
            return client.get(url, headers=headers, **kwargs)
        if method.upper() == "POST":
            return client.post(url, headers=headers, **kwargs)
        raise ValueError(f"Unsupported method: {method}")


def format_json(data: Any) -> str:
    """Format data as JSON."""
    return json.dumps(data, indent=2, default=str)


def call_service(ctx, service: str, method: str, endpoint: str, **kwargs) -> Any:
    """Call the agent or functions service and return the decoded body; errors propagate."""
    base_url = ctx.obj["agent_url"] if service == "agent" else ctx.obj["functions_url"]
    token = ctx.obj["token"] if service == "agent" else None
    response = make_request(method, endpoint, base_url, token=token, **kwargs)
    response.raise_for_status()
    return response.json()


def describe_error(e: Exception) -> str:
    """One-line message for a failed service call."""
    if isinstance(e, HTTPStatusError):
        try:
            error_data = e.response.json() if e.response.content else {}
        except ValueError:
            # Non-JSON error page, e.g. from a proxy
            error_data = {'error': e.response.text.strip() or 'Unknown error'}
        if not isinstance(error_data, dict):
            error_data = {'error': str(error_data)}
        return f"Error {e.response.status_code}: {error_data.get('error', 'Unknown error')}"
    return f"Error: {str(e)}"


def request_json(ctx, service: str, method: str, endpoint: str, **kwargs) -> Any:
    """Like call_service, but report the error and exit on failure."""
    try:
        return call_service(ctx, service, method, endpoint, **kwargs)
    except Exception as e:
        click.echo(describe_error(e), err=True)
        sys.exit(1)


def fail(e: ServiceError):
    click.echo(f"Error: {e.message}", err=True)
    sys.exit(1)


@click.group()
@click.option('--agent-url', envvar='VEER_AGENT_URL', default=None,
              help='System agent URL (default: http://localhost:4000)')
@click.option('--functions-url', envvar='VEER_FUNCTIONS_URL', default=None,
              help='Functions service URL (default: http://localhost:8000)')
@click.option('--token', envvar='SYSTEM_AGENT_TOKEN', default=None,
              help='Token sent to the system agent as x-veer-token')
@click.option('--store', 'store_path', envvar='VEER_LOCAL_STORE', default=None,
              help='Path of the local widget store (JSON file)')
@click.pass_context
def cli(ctx, agent_url, functions_url, token, store_path):
    """VEER command-line client."""
    settings = get_settings()
    ctx.ensure_object(dict)
    ctx.obj['agent_url'] = agent_url or settings.agent_url
    ctx.obj['functions_url'] = functions_url or settings.functions_url
    ctx.obj['token'] = token or settings.system_agent_token
    ctx.obj['store'] = LocalStore(store_path or settings.local_store_path)


# ----------------------------------------------------------------------------
# System agent
# ----------------------------------------------------------------------------

@cli.command()
@click.pass_context
def health(ctx):
    """Check whether the system agent is running."""
    data = request_json(ctx, 'agent', 'GET', '/health')
    click.echo(f"Agent {data.get('status')} on {data.get('platform')}")


@cli.command()
@click.option('--format', 'output_format', type=click.Choice(['table', 'json']),
              default='table', help='Output format')
@click.pass_context
def info(ctx, output_format):
    """Show system information from the agent."""
    data = request_json(ctx, 'agent', 'GET', '/system-info')
    if output_format == 'json':
        click.echo(format_json(data))
        return
    os_info = data.get('os', {})
    cpu = data.get('cpu', {})
    memory = data.get('memory', {})
    click.echo(f"Host: {os_info.get('hostname')} ({os_info.get('platform')} {os_info.get('release')})")
    click.echo(f"CPU: {cpu.get('model')} x{cpu.get('cores')} - {cpu.get('usage')}%")
    click.echo(f"Memory: {format_bytes(memory.get('used', 0))} / {format_bytes(memory.get('total', 0))} ({memory.get('usagePercent')}%)")
    for disk in data.get('disks') or []:
        used = disk.get('usedStr') or format_bytes(disk.get('used', 0))
        total = disk.get('totalStr') or format_bytes(disk.get('total', 0))
        click.echo(f"Disk {disk.get('drive')}: {used} / {total} ({disk.get('usagePercent')}%)")
    battery = data.get('battery')
    if battery:
        state = "charging" if battery.get('charging') else "on battery"
        click.echo(f"Battery: {battery.get('percent')}% ({state})")


@cli.command()
@click.argument('action', type=click.Choice(['shutdown', 'restart', 'lock', 'sleep']))
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def action(ctx, action, yes):
    """Run a power action on the agent's machine."""
    if not yes:
        click.confirm(f"Really {action}?", abort=True)
    request_json(ctx, 'agent', 'POST', '/action', json={'action': action})
    click.echo(f"{action} requested")


@cli.command()
@click.argument('launch_type', type=click.Choice(['application', 'website', 'url']))
@click.argument('target')
@click.pass_context
def launch(ctx, launch_type, target):
    """Launch an application or open a website."""
    data = request_json(ctx, 'agent', 'POST', '/launch', json={'type': launch_type, 'target': target})
    click.echo(data.get('message', f"Launched {target}"))


@cli.command(name='open')
@click.argument('words', nargs=-1, required=True)
@click.pass_context
def open_command(ctx, words):
    """Resolve a phrase like "open github" and launch it."""
    phrase = " ".join(words)
    launch_type, target = parse_open_command(phrase)
    if not target:
        # Bare names ("github") are treated as "open github"
        launch_type, target = parse_open_command(f"open {phrase}")
    if not target:
        click.echo(f"Could not understand: {phrase}", err=True)
        sys.exit(1)
    request_json(ctx, 'agent', 'POST', '/launch', json={'type': launch_type, 'target': target})
    click.echo(f"Opening {display_name(target, launch_type)}")


@cli.command()
@click.argument('media_action', type=click.Choice(MEDIA_ACTIONS))
@click.option('--value', type=float, help='Volume level 0-100 (for volume)')
@click.pass_context
def media(ctx, media_action, value):
    """Control media playback."""
    payload: Dict[str, Any] = {'action': media_action}
    if value is not None:
        payload['value'] = value
    request_json(ctx, 'agent', 'POST', '/media', json=payload)
    click.echo(f"Media {media_action} sent")


@cli.command(name='now-playing')
@click.pass_context
def now_playing(ctx):
    """Show what is currently playing."""
    data = request_json(ctx, 'agent', 'GET', '/media')
    if not data.get('available'):
        click.echo(data.get('message', "Nothing playing"))
        return
    click.echo(f"{data.get('title')} - {data.get('artist')} ({data.get('source')})")


@cli.command()
@click.argument('pid')
@click.pass_context
def kill(ctx, pid):
    """Terminate a process by PID."""
    request_json(ctx, 'agent', 'POST', '/kill-process', json={'pid': pid})
    click.echo(f"Process {pid} terminated")


@cli.command()
@click.option('--limit', type=int, default=15, help='Number of processes')
@click.pass_context
def processes(ctx, limit):
    """List the processes using the most memory."""
    data = request_json(ctx, 'agent', 'GET', '/processes', params={'limit': limit})
    for proc in data.get('processes', []):
        click.echo(f"{proc.get('pid'):>7}  {proc.get('memory', 0):>5}%  {proc.get('cpu', 0):>5}%  {proc.get('name')}")


# ----------------------------------------------------------------------------
# Functions service
# ----------------------------------------------------------------------------

@cli.command()
@click.argument('message')
@click.option('--mode', default='helper',
              type=click.Choice(['auto', 'helper', 'coder', 'tutor', 'study', 'silent', 'explain']),
              help='Assistant mode')
@click.option('--service', default='auto', help='auto, openai, lovable, weather or enws')
@click.option('--location', help='City for the weather service')
@click.option('--query', help='Search query for the enws service')
@click.pass_context
def chat(ctx, message, mode, service, location, query):
    """Send a message to the assistant."""
    payload: Dict[str, Any] = {'message': message, 'mode': mode, 'service': service, 'history': []}
    if location:
        payload['location'] = location
    if query:
        payload['query'] = query
    data = request_json(ctx, 'functions', 'POST', '/functions/v1/veer-chat', json=payload)
    reply = data.get('reply')
    click.echo(reply if isinstance(reply, str) else format_json(reply))


@cli.command()
@click.option('--force', is_flag=True, help='Refresh even if already updated today')
@click.pass_context
def daily(ctx, force):
    """Ask the functions service to refresh daily data."""
    data = request_json(ctx, 'functions', 'POST', '/functions/v1/update-daily-data', json={'force': force})
    click.echo(data.get('message'))
    if data.get('updated'):
        click.echo(f"Items: {data.get('items_count')}")


# ----------------------------------------------------------------------------
# Local tools
# ----------------------------------------------------------------------------

@cli.command()
@click.argument('value', type=float)
@click.argument('from_unit')
@click.argument('to_unit')
@click.option('--category', type=click.Choice(list(converter.UNITS_BY_CATEGORY)),
              default='length', help='Unit category')
def convert(value, from_unit, to_unit, category):
    """Convert a value between units."""
    try:
        result = converter.convert(value, category, from_unit, to_unit)
    except ServiceError as e:
        fail(e)
    click.echo(f"{value:g} {from_unit} = {converter.format_result(result)} {to_unit}")


@cli.command()
@click.argument('hex_color')
@click.option('--harmony', type=click.Choice(list(colors.HARMONY_OFFSETS)),
              help='Also print a harmony palette')
@click.option('--save', is_flag=True, help='Save the color to the local store')
@click.pass_context
def color(ctx, hex_color, harmony, save):
    """Show a color as hex, rgb and hsl."""
    r, g, b = colors.hex_to_rgb(hex_color)
    h, s, lightness = colors.rgb_to_hsl(r, g, b)
    click.echo(f"HEX: {colors.rgb_to_hex(r, g, b)}")
    click.echo(f"RGB: rgb({r}, {g}, {b})")
    click.echo(f"HSL: hsl({h}, {s}%, {lightness}%)")
    click.echo(f"Contrast: {colors.contrast_color(hex_color)}")
    if harmony:
        click.echo(f"{harmony.title()}: {' '.join(colors.harmony(hex_color, harmony))}")
    if save:
        saved = ColorStore(ctx.obj['store']).add(hex_color)
        click.echo("Color saved!" if saved else "Color already saved")


@cli.command()
@click.argument('code', required=False)
@click.option('--file', 'source', type=click.File('r'), help='Read the code from a file (- for stdin)')
@click.option('--language', type=click.Choice(code_explainer.LANGUAGES), default='javascript',
              help='Language of the code (default: javascript)')
def explain(code, source, language):
    """Explain a piece of code line by line."""
    if source is not None:
        code = source.read()
    try:
        explanations = code_explainer.explain_code(code or '')
    except ServiceError as e:
        fail(e)
    for item in explanations:
        click.echo(f"{item['lineNumber']:>3}  {item['line'].strip()}")
        click.echo(f"     {item['explanation']}")
    click.echo(f"Explained {len(explanations)} lines of {language}")


@cli.command()
@click.option('--preset', type=click.Choice(list(passwords.PRESETS)), default='strong',
              help='Starting options (default: strong)')
@click.option('--length', type=int, default=None, help='Override the preset length (4-64)')
@click.option('--no-symbols', is_flag=True, help='Leave out symbols')
@click.option('--exclude-ambiguous', is_flag=True, help='Leave out brackets, quotes and similar')
@click.option('--exclude-similar', is_flag=True, help='Leave out i, l, 1, L, o, 0, O')
@click.option('--passphrase', is_flag=True, help='Generate a word passphrase instead')
@click.option('--words', type=int, default=4, help='Passphrase word count (3-8)')
@click.option('--separator', default='-', help='Passphrase separator')
def password(preset, length, no_symbols, exclude_ambiguous, exclude_similar, passphrase, words, separator):
    """Generate a password or passphrase and show its strength."""
    options = passwords.PRESETS[preset]
    overrides = {'exclude_ambiguous': exclude_ambiguous, 'exclude_similar': exclude_similar}
    if length is not None:
        overrides['length'] = length
    if no_symbols:
        overrides['symbols'] = False
    try:
        if passphrase:
            generated = passwords.generate_passphrase(words, separator)
        else:
            generated = passwords.generate_password(dataclasses.replace(options, **overrides))
    except ServiceError as e:
        fail(e)
    score = passwords.password_strength(generated)
    click.echo(generated)
    click.echo(f"Strength: {passwords.strength_label(score)} ({score}%)")


@cli.command(name='hash')
@click.argument('text')
def hash_text(text):
    """Print SHA and MD5 digests of a text."""
    try:
        digests = hashes.generate_hashes(text)
    except ServiceError as e:
        fail(e)
    for algorithm, digest in digests.items():
        click.echo(f"{algorithm:<7} {digest}")


@cli.group()
def snippets():
    """Manage saved code snippets."""


@snippets.command(name='add')
@click.option('--title', required=True, help='Snippet title')
@click.option('--code', required=True, help='Snippet code')
@click.option('--language', default='javascript', help='Language (default: javascript)')
@click.option('--tags', default='', help='Comma separated tags')
@click.pass_context
def snippets_add(ctx, title, code, language, tags):
    """Save a snippet."""
    try:
        snippet = SnippetStore(ctx.obj['store']).add(title, code, language=language, tags=tags)
    except ServiceError as e:
        fail(e)
    click.echo(f"Snippet saved: {snippet['id']}")


@snippets.command(name='list')
@click.option('--search', default='', help='Filter by title, code or tag')
@click.option('--language', default=None, help='Filter by language')
@click.option('--format', 'output_format', type=click.Choice(['table', 'json']),
              default='table', help='Output format')
@click.pass_context
def snippets_list(ctx, search, language, output_format):
    """List saved snippets."""
    found = SnippetStore(ctx.obj['store']).search(search, language)
    if output_format == 'json':
        click.echo(format_json(found))
        return
    if not found:
        click.echo("No snippets found.")
        return
    for snippet in found:
        tags = f" [{', '.join(snippet.get('tags') or [])}]" if snippet.get('tags') else ""
        click.echo(f"{snippet['id']}  {snippet['title']} ({snippet.get('language')}){tags}")


@snippets.command(name='delete')
@click.argument('snippet_id')
@click.pass_context
def snippets_delete(ctx, snippet_id):
    """Delete a snippet."""
    try:
        SnippetStore(ctx.obj['store']).delete(snippet_id)
    except ServiceError as e:
        fail(e)
    click.echo("Snippet deleted")


def parse_action(spec: str) -> Dict[str, Any]:
    """
    Parse a ``TYPE=VALUE[@DELAY_MS]`` action option.

    ``website=https://x.com@500`` -> ``{"type": "website", "value": "https://x.com", "delay": 500}``.
    A suffix after the last ``@`` only counts as a delay when it is all digits.
    """
    kind, _, value = spec.partition('=')
    action = {'type': kind.strip(), 'value': value.strip()}
    head, sep, tail = action['value'].rpartition('@')
    if sep and tail.strip().isdigit():
        action['value'] = head.strip()
        action['delay'] = int(tail)
    return action


@cli.group(name='commands')
def quick_commands():
    """Manage quick commands (named sequences of actions)."""


@quick_commands.command(name='add')
@click.option('--name', required=True, help='Display name')
@click.option('--alias', required=True, help='Short alias used to run it')
@click.option('--action', 'actions', multiple=True, required=True,
              help='TYPE=VALUE[@DELAY_MS], where TYPE is website, application or text (repeatable)')
@click.option('--description', default='', help='Description')
@click.pass_context
def commands_add(ctx, name, alias, actions, description):
    """Create a quick command."""
    try:
        command = QuickCommandStore(ctx.obj['store']).add(
            name, alias, [parse_action(a) for a in actions], description=description
        )
    except ServiceError as e:
        fail(e)
    click.echo(f"Command created: {command['alias']}")


@quick_commands.command(name='import')
@click.argument('alias', type=click.Choice([p['alias'] for p in PRESET_COMMANDS]))
@click.pass_context
def commands_import(ctx, alias):
    """Import a preset quick command."""
    try:
        command = QuickCommandStore(ctx.obj['store']).import_preset(alias)
    except ServiceError as e:
        fail(e)
    click.echo(f"Imported: {command['name']}")


@quick_commands.command(name='list')
@click.pass_context
def commands_list(ctx):
    """List quick commands, most used first."""
    found = QuickCommandStore(ctx.obj['store']).by_popularity()
    if not found:
        click.echo("No quick commands.")
        return
    for command in found:
        click.echo(f"{command['alias']:<12} {command['name']} ({len(command['actions'])} actions, used {command.get('useCount', 0)}x)")


@quick_commands.command(name='run')
@click.argument('alias')
@click.pass_context
def commands_run(ctx, alias):
    """Run a quick command's actions through the agent.

    Each action waits for its own delay first and is followed by a short
    pause. A failed action is reported and the rest still run.
    """
    store = QuickCommandStore(ctx.obj['store'])
    command = store.find_by_alias(alias)
    if command is None:
        click.echo(f"Error: no quick command '{alias}'", err=True)
        sys.exit(1)
    click.echo(f"Running: {command['name']}")
    for item in command['actions']:
        if item.get('delay'):
            time.sleep(item['delay'] / 1000)
        if item['type'] == 'text':
            click.echo(item['value'])
        else:
            try:
                call_service(ctx, 'agent', 'POST', '/launch', json={'type': item['type'], 'target': item['value']})
            except Exception as e:
                click.echo(f"Action failed ({item['type']} {item['value']}): {describe_error(e)}", err=True)
        time.sleep(ACTION_PAUSE_SECONDS)
    store.record_use(command['id'])
    click.echo(f"Completed: {command['name']}")


@cli.command(name='break')
@click.option('--exercise', is_flag=True, help='Also record a completed exercise')
@click.option('--show', is_flag=True, help='Only show the stats')
@click.pass_context
def take_break(ctx, exercise, show):
    """Record a break (and optionally an exercise)."""
    stats = BreakStats(ctx.obj['store'])
    if not show:
        stats.record_break()
        if exercise:
            stats.record_exercise()
    current = stats.get()
    click.echo(f"Breaks: {current['totalBreaks']}  Exercises: {current['totalExercises']}  Last: {current['lastBreakDate'] or '-'}")


if __name__ == '__main__':
    cli()
