# Overview: Command groups for driving the console stores from a terminal.

# shopadmin/cli.py
# Commands Legend:
# - shopadmin auth login --login admin@example.com
#   Log in (prompts for the password) and persist the session.
# - shopadmin auth logout
#   Best-effort server logout, then forget the local session.
# - shopadmin auth whoami
#   Show the persisted user (re-authenticates from a stored token if needed).
# - shopadmin shops list
# - shopadmin categories list [--shop-id 3]
# - shopadmin items list [--query pho] [--category-id 2] [--sort-by price-desc]
# - shopadmin options groups
# - shopadmin users list
#
# Environment: SHOPADMIN_API_URL, SHOPADMIN_STORAGE_URL, SHOPADMIN_REQUEST_TIMEOUT

import logging

import click

from . import create_console
from .errors import APIError
from .pricing import display_price
from .services.resource_store import decode_status
from .services.item_service import SORT_OPTIONS


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Log HTTP traffic')
@click.pass_context
def main(ctx, verbose):
    """Food-delivery admin console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.obj is None:
        console = create_console()
        ctx.call_on_close(console.close)
        ctx.obj = console


def _bootstrap(console):
    """Hydrate the session; exit if nobody is logged in."""
    try:
        console.session.bootstrap()
    except APIError as e:
        raise click.ClickException(f"Session expired: {e}")
    if not console.session.token:
        raise click.ClickException("Not logged in. Run: shopadmin auth login")


def _run(store, fn, *args, **kwargs):
    try:
        return fn(*args, **kwargs)
    except APIError:
        raise click.ClickException(store.error or "Request failed")


# =============================================================================
# auth
# =============================================================================

@main.group('auth')
def auth_group():
    """Session commands."""


@auth_group.command('login')
@click.option('--login', 'identifier', prompt=True, help='Email or username')
@click.option('--password', prompt=True, hide_input=True)
@click.pass_obj
def login(console, identifier, password):
    """Log in and persist the session."""
    console.session.hydrate()
    try:
        result = console.session.login(identifier, password)
    except APIError as e:
        raise click.ClickException(str(e))
    user = result["user"]
    click.echo(f"PASS Logged in as {user.get('name') or user.get('email')} ({user.get('role')})")


@auth_group.command('logout')
@click.pass_obj
def logout(console):
    """Log out locally (server logout is best-effort)."""
    console.session.hydrate()
    console.session.logout()
    click.echo("PASS Logged out")


@auth_group.command('whoami')
@click.pass_obj
def whoami(console):
    """Show the current user."""
    _bootstrap(console)
    user = console.session.user or {}
    click.echo(f"{user.get('id')}\t{user.get('name')}\t{user.get('email')}\t{user.get('role')}")


# =============================================================================
# resources
# =============================================================================

@main.group('shops')
def shops_group():
    """Shop commands."""


@shops_group.command('list')
@click.pass_obj
def list_shops(console):
    """List shops."""
    _bootstrap(console)
    shops = _run(console.shops, console.shops.fetch_all)
    if not shops:
        click.echo("No shops found.")
        return
    for s in shops:
        click.echo(f"{s.get('id')}\t{s.get('name')}\t{s.get('location')}\t{decode_status(s.get('status'))}")


@main.group('categories')
def categories_group():
    """Category commands."""


@categories_group.command('list')
@click.option('--shop-id', type=int, default=None, help='Only categories of this shop')
@click.pass_obj
def list_categories(console, shop_id):
    """List categories."""
    _bootstrap(console)
    categories = _run(console.categories, console.categories.fetch_all, shop_id=shop_id)
    if not categories:
        click.echo("No categories found.")
        return
    for c in categories:
        click.echo(f"{c.get('id')}\t{c.get('name')}\t{decode_status(c.get('status'))}")


@main.group('items')
def items_group():
    """Menu item commands."""


@items_group.command('list')
@click.option('--query', default=None, help='Substring match on name/description')
@click.option('--category-id', type=int, default=None)
@click.option('--sort-by', type=click.Choice(SORT_OPTIONS), default=None)
@click.pass_obj
def list_items(console, query, category_id, sort_by):
    """List items (filtered server-side)."""
    _bootstrap(console)
    items = _run(console.items, console.items.fetch_all, query=query, category_id=category_id, sort_by=sort_by)
    if not items:
        click.echo("No items found.")
        return
    for i in items:
        available = "available" if i.get("is_available") in (True, 1, "1") else "unavailable"
        click.echo(f"{i.get('id')}\t{i.get('name')}\t{display_price(i.get('price_cents'))}\t{available}")


@main.group('options')
def options_group():
    """Option group commands."""


@options_group.command('groups')
@click.pass_obj
def list_option_groups(console):
    """List option groups with their options."""
    _bootstrap(console)
    groups = _run(console.option_groups, console.option_groups.fetch_all)
    _run(console.options, console.options.fetch_all)
    if not groups:
        click.echo("No option groups found.")
        return
    for g in groups:
        required = "required" if g.get("is_required") in (True, 1, "1") else "optional"
        click.echo(f"{g.get('id')}\t{g.get('name')}\t{g.get('type')}\t{required}")
        for o in console.options.for_group(g.get("id")):
            click.echo(f"  - {o.get('name')} (+{display_price(o.get('price_adjust_cents'))})")


@main.group('users')
def users_group():
    """User commands."""


@users_group.command('list')
@click.pass_obj
def list_users(console):
    """List users."""
    _bootstrap(console)
    if not console.session.is_admin:
        raise click.ClickException("Only admins can list users")
    users = _run(console.users, console.users.fetch_all)
    for u in users:
        click.echo(f"{u.get('id')}\t{u.get('name')}\t{u.get('email')}\t{u.get('role')}")
