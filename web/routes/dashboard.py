"""
Dashboard routes - live guild statistics.
"""
import html
import logging
from dataclasses import asdict, dataclass, field

from aiohttp import web

from core.utils import format_uptime
from web.auth import is_authenticated, require_auth

logger = logging.getLogger("cmdobot.web.dashboard")


@dataclass
class GuildSummary:
    name: str
    member_count: int
    id: str


@dataclass
class DashboardStats:
    server_count: int
    user_count: int
    command_count: int
    uptime: str
    servers: list = field(default_factory=list)


def collect_stats(state):
    """Aggregate stats from the connected client and the command registry."""
    client = state.client
    guilds = list(client.guilds) if client is not None else []
    servers = [
        GuildSummary(name=guild.name, member_count=guild.member_count or 0, id=str(guild.id))
        for guild in guilds
    ]
    return DashboardStats(
        server_count=len(servers),
        user_count=sum(server.member_count for server in servers),
        command_count=len(state.registry),
        uptime=format_uptime(state.uptime_seconds),
        servers=servers,
    )


def setup_routes(app):
    """Set up dashboard routes."""
    app.router.add_get('/', handle_index)
    app.router.add_get('/dashboard', handle_dashboard)
    app.router.add_get('/api/stats', handle_stats_api)


async def handle_index(request):
    raise web.HTTPFound('/dashboard' if is_authenticated(request) else '/login')


@require_auth
async def handle_dashboard(request):
    stats = collect_stats(request.app['state'])

    rows = ''.join(
        f"<tr><td>{html.escape(server.name)}</td><td>{server.member_count:,}</td><td>{server.id}</td></tr>"
        for server in stats.servers
    ) or '<tr><td colspan="3">Not connected to any servers</td></tr>'

    page = f"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>Bot Dashboard</title>
    </head>
    <body>
        <header>
            <h1>Bot Dashboard</h1>
            <a href="/logout">Log out</a>
        </header>
        <main>
            <section class="stats">
                <div class="stat"><h2>Servers</h2><p>{stats.server_count:,}</p></div>
                <div class="stat"><h2>Users</h2><p>{stats.user_count:,}</p></div>
                <div class="stat"><h2>Commands</h2><p>{stats.command_count}</p></div>
                <div class="stat"><h2>Uptime</h2><p>{stats.uptime}</p></div>
            </section>
            <section>
                <h2>Servers</h2>
                <table>
                    <thead><tr><th>Name</th><th>Members</th><th>ID</th></tr></thead>
                    <tbody>{rows}</tbody>
                </table>
            </section>
        </main>
    </body>
    </html>
    """
    return web.Response(text=page, content_type='text/html')


@require_auth
async def handle_stats_api(request):
    stats = collect_stats(request.app['state'])
    return web.json_response(asdict(stats))
