"""
Password authentication for the dashboard.

One shared username/password pair; a successful login creates an in-memory
session referenced by the ``session_token`` cookie.
"""
import html
import logging
import secrets
import time
from functools import wraps

from aiohttp import web

logger = logging.getLogger("cmdobot.web.auth")

SESSION_COOKIE = "session_token"
SESSION_TTL = 86400  # 24 hours

LOGIN_PAGE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Bot Dashboard - Login</title>
</head>
<body>
    <main>
        <h1>Bot Dashboard</h1>
        {error}
        <form method="post" action="/login">
            <label>Username <input name="username" autocomplete="username"></label>
            <label>Password <input name="password" type="password" autocomplete="current-password"></label>
            <button type="submit">Log in</button>
        </form>
    </main>
</body>
</html>
"""


def setup_auth(app, username, password):
    """
    Set up login routes and session middleware.

    Args:
        app: aiohttp application
        username: Dashboard username
        password: Dashboard password
    """
    app['sessions'] = {}
    app['credentials'] = (username, password)

    app.router.add_get('/login', handle_login_page)
    app.router.add_post('/login', handle_login)
    app.router.add_get('/logout', handle_logout)

    app.middlewares.append(session_middleware)


@web.middleware
async def session_middleware(request, handler):
    """Attach the current session (or None) to the request."""
    request['session'] = None
    session_token = request.cookies.get(SESSION_COOKIE)

    if session_token and session_token in request.app['sessions']:
        session = request.app['sessions'][session_token]
        if time.time() > session.get('expires_at', 0):
            del request.app['sessions'][session_token]
        else:
            request['session'] = session

    return await handler(request)


def is_authenticated(request):
    session = request.get('session')
    return bool(session and session.get('authenticated'))


def require_auth(handler):
    """Redirect to the login page unless the request carries a valid session."""
    @wraps(handler)
    async def wrapper(request):
        if not is_authenticated(request):
            raise web.HTTPFound('/login')
        return await handler(request)
    return wrapper


def check_credentials(app, username, password):
    expected_user, expected_password = app['credentials']
    user_ok = secrets.compare_digest(str(username).encode(), expected_user.encode())
    password_ok = secrets.compare_digest(str(password).encode(), expected_password.encode())
    return user_ok and password_ok


def render_login(error=None, status=200):
    error_html = f'<p class="error">{html.escape(error)}</p>' if error else ''
    return web.Response(text=LOGIN_PAGE.format(error=error_html), content_type='text/html', status=status)


async def handle_login_page(request):
    if is_authenticated(request):
        raise web.HTTPFound('/dashboard')
    return render_login()


async def handle_login(request):
    data = await request.post()
    username = data.get('username', '')
    password = data.get('password', '')

    if not check_credentials(request.app, username, password):
        logger.warning("Failed dashboard login from %s", request.remote)
        return render_login('Invalid username or password', status=401)

    session_token = secrets.token_urlsafe(32)
    request.app['sessions'][session_token] = {
        'authenticated': True,
        'expires_at': time.time() + SESSION_TTL,
    }

    response = web.HTTPFound('/dashboard')
    response.set_cookie(
        SESSION_COOKIE,
        session_token,
        max_age=SESSION_TTL,
        httponly=True,
        samesite='Strict',
    )
    raise response


async def handle_logout(request):
    session_token = request.cookies.get(SESSION_COOKIE)
    request.app['sessions'].pop(session_token, None)

    response = web.HTTPFound('/login')
    response.del_cookie(SESSION_COOKIE)
    raise response
