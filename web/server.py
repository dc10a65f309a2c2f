"""
Dashboard web server.
Uses aiohttp for async web serving.
"""
import logging

from aiohttp import web

from web.auth import setup_auth
from web.routes import dashboard

logger = logging.getLogger("cmdobot.web")


@web.middleware
async def error_middleware(request, handler):
    """Turn unexpected handler errors into a plain 500 page."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception:
        logger.exception("Dashboard error on %s", request.path)
        return web.Response(text='Something went wrong!', status=500)


def create_app(state):
    """Build the dashboard application for ``state``."""
    app = web.Application(middlewares=[error_middleware])
    app['state'] = state

    settings = state.settings
    setup_auth(app, settings.dashboard_username, settings.dashboard_password)
    dashboard.setup_routes(app)
    return app


class WebServer:
    """Runs the dashboard app on the bot's event loop."""

    def __init__(self, state, host='0.0.0.0', port=5000):
        self.state = state
        self.host = host
        self.port = port
        self.app = create_app(state)
        self.runner = None

    async def start(self):
        """Start the web server."""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()
        logger.info("Dashboard server is running on http://%s:%s", self.host, self.port)

    async def stop(self):
        """Stop the web server."""
        if self.runner:
            await self.runner.cleanup()
            logger.info("Dashboard stopped")


async def run_web_server(state, host='0.0.0.0', port=5000):
    """Start the dashboard and return the running server."""
    server = WebServer(state, host, port)
    await server.start()
    return server
