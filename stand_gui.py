#!/usr/bin/env python3
"""
standapp GUI - Web front end for the stand-evaluation server
Serves the start page, the ranking, stand evaluation and the stand, room and
criteria management pages in the browser.
"""

import logging
import argparse
import os
import sys
import threading
from dataclasses import asdict
from functools import wraps
from typing import Dict, Optional, Type
from urllib.parse import urlsplit

from flask import (
    Flask, flash, jsonify, redirect, render_template_string, request, url_for,
)

import standapp
from app.models import ThemeSettings
from app.repositories import PreferencesRepository, SessionRepository
from app.services import (
    AboutService, AuthService, DashboardService, EvaluationService,
    ManageCriteriaService, ManageRoomsService, ManageStandsService,
    MutationResult, PageService, RankingService, ThemeService,
)

# Initialize logging early so service loggers are captured
log_level = os.getenv('STANDAPP_LOG_LEVEL', 'INFO')
standapp.setup_logging(log_level)
gui_logger = logging.getLogger('standapp.gui')
try:
    os.makedirs('logs', exist_ok=True)
    fh = logging.FileHandler('logs/stand_gui.log')
    fh.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
    fh.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    gui_logger.addHandler(fh)
except OSError as e:
    gui_logger.warning('Could not create log file handler: %s', e)

app = Flask(__name__)
app.secret_key = os.getenv('STANDAPP_SECRET_KEY') or os.urandom(24)

# Global services, replaced by initialize()
config: Dict = dict(standapp.DEFAULT_CONFIG)
auth_service: Optional[AuthService] = None
theme_service: Optional[ThemeService] = None
services_lock = threading.Lock()

PAGES: Dict[str, Type[PageService]] = {
    'stands': ManageStandsService,
    'rooms': ManageRoomsService,
    'ranking': RankingService,
    'criteria': ManageCriteriaService,
    'evaluate': EvaluationService,
    'dashboard': DashboardService,
}


def initialize(new_config: Optional[Dict] = None) -> None:
    """(Re)build the session and theme services from *new_config*."""
    global config, auth_service, theme_service
    with services_lock:
        config = dict(standapp.DEFAULT_CONFIG)
        config.update(new_config or {})
        auth_service = AuthService(SessionRepository(config['session_file']),
                                   timeout=config['timeout'])
        theme_service = ThemeService(PreferencesRepository(config['preferences_file']))
    gui_logger.info('GUI initialized (session file: %s)', config['session_file'])


def get_auth() -> AuthService:
    if auth_service is None:
        initialize(config)
    return auth_service


def get_theme() -> ThemeService:
    if theme_service is None:
        initialize(config)
    return theme_service


def require_session(f):
    """Decorator to require a stored login session"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not get_auth().is_logged_in():
            if request.path.startswith('/api/'):
                return jsonify({'error': 'Not logged in'}), 401
            flash('Please log in first.', 'error')
            return redirect(url_for('login_page', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def _page(service_cls: Type[PageService]) -> PageService:
    """Build and load a page service with the session's client."""
    service = service_cls(get_auth().client(config.get('server_address')))
    service.load()
    return service


def _flash_result(result: Optional[MutationResult]) -> None:
    if result is None:
        flash('Cancelled.', 'info')
    else:
        flash(f"{result.title}: {result.message}", 'success' if result.ok else 'error')


def _safe_next(next_url: Optional[str]) -> str:
    """Return *next_url* if it is a path on this site, else the ranking page.

    Only plain absolute paths are followed; ``//host/...`` and anything with
    a scheme or host would leave the site.
    """
    next_url = (next_url or '').strip()
    parts = urlsplit(next_url)
    if (not next_url.startswith('/') or next_url.startswith('//')
            or parts.scheme or parts.netloc or '\\' in next_url):
        if next_url:
            gui_logger.warning('Ignoring unsafe redirect target %r', next_url)
        return url_for('ranking_page')
    return next_url


def _form_int(name: str) -> Optional[int]:
    raw = request.values.get(name, '').strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        gui_logger.warning('Ignoring invalid %s %r', name, raw)
        return None


def _form_room_id() -> Optional[int]:
    return _form_int('room_id')


def _form_confirm(title: str, message: str) -> bool:
    """Confirmation callback backed by the delete form's checkbox/button."""
    return request.form.get('confirm') == 'yes'


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

_HEAD = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ theme.title }}{% if page_title %} - {{ page_title }}{% endif %}</title>
<style>
  body { margin: 0; min-height: 100vh; font-family: sans-serif;
         background: {{ background }}; color: {{ '#eee' if dark_mode else '#222' }}; }
  nav { padding: 0.6em 1em; background: rgba(0,0,0,0.15); }
  nav a, nav button { margin-right: 1em; color: inherit; }
  main { padding: 1em 2em; }
  .flash-success { color: #2e7d32; } .flash-error { color: #c62828; } .flash-info { color: #1565c0; }
  .denied { font-size: 1.2em; color: #c62828; }
  table { border-collapse: collapse; } td, th { padding: 0.3em 0.8em; text-align: left; }
  .podium td { font-weight: bold; }
</style>
</head>
<body>
<nav>
  {% if logo_url %}<img src="{{ logo_url }}" alt="logo" height="32">{% endif %}
  <a href="{{ url_for('dashboard_page') }}">Start</a>
  <a href="{{ url_for('ranking_page') }}">Ranking</a>
  <a href="{{ url_for('evaluate_page') }}">Evaluate</a>
  <a href="{{ url_for('stands_page') }}">Stands</a>
  <a href="{{ url_for('rooms_page') }}">Rooms</a>
  <a href="{{ url_for('criteria_page') }}">Criteria</a>
  <a href="{{ url_for('about_page') }}">About</a>
  <form method="post" action="{{ url_for('toggle_theme') }}" style="display:inline">
    <button type="submit">{{ 'Light mode' if dark_mode else 'Dark mode' }}</button>
  </form>
  {% if logged_in %}
  <form method="post" action="{{ url_for('logout') }}" style="display:inline">
    <button type="submit">Log out</button>
  </form>
  {% endif %}
</nav>
<main>
{% with messages = get_flashed_messages(with_categories=true) %}
  {% for category, message in messages %}<p class="flash-{{ category }}">{{ message }}</p>{% endfor %}
{% endwith %}
"""

_FOOT = """
</main>
</body>
</html>
"""

_STATE_BLOCK = """
{% if state.access_denied %}
  <p class="denied">&#128274; {{ denied_text }}</p>
{% elif state.error_message %}
  <p class="flash-error">{{ state.error_message }}</p>
  <p><a href="{{ request.path }}">Retry</a></p>
{% endif %}
"""

LOGIN_TEMPLATE = _HEAD + """
<h1>Log in</h1>
<form method="post">
  <p><label>Server address <input name="server_address" value="{{ server_address or '' }}"
     placeholder="http://192.168.0.10:5000"></label></p>
  <p><label>Username <input name="username" value="{{ username or '' }}"></label></p>
  <p><label>Password <input type="password" name="password"></label></p>
  <input type="hidden" name="next" value="{{ next_url or '' }}">
  <p><button type="submit">Log in</button></p>
</form>
""" + _FOOT

STANDS_TEMPLATE = _HEAD + """
<h1>Manage stands</h1>
""" + _STATE_BLOCK + """
{% if not state.access_denied and not state.error_message %}
<h2>New stand</h2>
<form method="post" action="{{ url_for('stands_page') }}">
  <input name="name" placeholder="Name">
  <textarea name="description" placeholder="Description"></textarea>
  <select name="room_id">
    <option value="">(no room)</option>
    {% for room in state.rooms %}<option value="{{ room.id }}">{{ room.name }}</option>{% endfor %}
  </select>
  <button type="submit">Create</button>
</form>
<h2>Stands</h2>
{% if state.stands %}
<table>
  <tr><th>Name</th><th>Room</th><th>Description</th><th></th></tr>
  {% for stand in state.stands %}
  <tr>
    <td>{{ stand.name }}</td>
    <td>{{ stand.room_name or '' }}</td>
    <td>{{ stand.description or '' }}</td>
    <td>
      <a href="{{ url_for('edit_stand', stand_id=stand.id) }}">Edit</a>
      <a href="{{ url_for('delete_stand', stand_id=stand.id) }}">Delete</a>
    </td>
  </tr>
  {% endfor %}
</table>
{% else %}
<p>No stands have been created yet.</p>
{% endif %}
{% endif %}
""" + _FOOT

EDIT_STAND_TEMPLATE = _HEAD + """
<h1>Edit stand</h1>
<form method="post">
  <p><input name="name" value="{{ stand.name }}"></p>
  <p><textarea name="description">{{ stand.description or '' }}</textarea></p>
  <p><select name="room_id">
    <option value="">(no room)</option>
    {% for room in rooms %}
    <option value="{{ room.id }}" {% if selected and room.id == selected.id %}selected{% endif %}>{{ room.name }}</option>
    {% endfor %}
  </select></p>
  <p><button type="submit">Save</button> <a href="{{ url_for('stands_page') }}">Cancel</a></p>
</form>
""" + _FOOT

CONFIRM_TEMPLATE = _HEAD + """
<h1>{{ confirm_title }}</h1>
<p>{{ confirm_message }}</p>
<form method="post">
  <button type="submit" name="confirm" value="yes">Delete</button>
  <a href="{{ cancel_url }}">Cancel</a>
</form>
""" + _FOOT

ROOMS_TEMPLATE = _HEAD + """
<h1>Manage rooms</h1>
""" + _STATE_BLOCK + """
{% if not state.access_denied and not state.error_message %}
<form method="post" action="{{ url_for('rooms_page') }}">
  <input name="name" placeholder="Room name"> <button type="submit">Create</button>
</form>
<table>
  {% for room in state.rooms %}
  <tr>
    <td>
      <form method="post" action="{{ url_for('edit_room', room_id=room.id) }}">
        <input name="name" value="{{ room.name }}"> <button type="submit">Rename</button>
      </form>
    </td>
    <td><a href="{{ url_for('delete_room', room_id=room.id) }}">Delete</a></td>
  </tr>
  {% else %}
  <tr><td>No rooms have been created yet.</td></tr>
  {% endfor %}
</table>
{% endif %}
""" + _FOOT

RANKING_TEMPLATE = _HEAD + """
<h1>Ranking</h1>
""" + _STATE_BLOCK + """
{% if not state.access_denied and not state.error_message %}
{% if entries %}
<table>
  <tr><th>#</th><th>Stand</th><th>Room</th><th>Points</th><th>Evaluators</th></tr>
  {% for entry in entries %}
  <tr class="{{ 'podium' if entry.rank <= 3 else '' }}">
    <td>{{ entry.rank }}</td>
    <td>{{ entry.stand_name }}</td>
    <td>{{ entry.room_name or '-' }}</td>
    <td>{{ format_score(entry.total_score) }}</td>
    <td>{{ entry.evaluator_count }}</td>
  </tr>
  {% endfor %}
</table>
{% else %}
<p>No ranking data available yet.</p>
{% endif %}
{% endif %}
""" + _FOOT

CRITERIA_TEMPLATE = _HEAD + """
<h1>Manage criteria</h1>
""" + _STATE_BLOCK + """
{% if not state.access_denied and not state.error_message %}
<h2>New criterion</h2>
<form method="post" action="{{ url_for('criteria_page') }}">
  <input name="name" placeholder="Name">
  <input name="max_score" placeholder="Maximum score" size="6">
  <textarea name="description" placeholder="Description"></textarea>
  <button type="submit">Create</button>
</form>
<h2>Criteria</h2>
<table>
  {% for criterion in state.criteria %}
  <tr>
    <td>{{ criterion.name }}</td>
    <td>max. {{ criterion.max_score }}</td>
    <td>{{ criterion.description or '' }}</td>
    <td>
      <a href="{{ url_for('edit_criterion', criterion_id=criterion.id) }}">Edit</a>
      <a href="{{ url_for('delete_criterion', criterion_id=criterion.id) }}">Delete</a>
    </td>
  </tr>
  {% else %}
  <tr><td>No criteria have been created yet.</td></tr>
  {% endfor %}
</table>
{% endif %}
""" + _FOOT

EDIT_CRITERION_TEMPLATE = _HEAD + """
<h1>Edit criterion</h1>
<form method="post">
  <p><input name="name" value="{{ criterion.name }}"></p>
  <p><input name="max_score" value="{{ criterion.max_score }}" size="6"></p>
  <p><textarea name="description">{{ criterion.description or '' }}</textarea></p>
  <p><button type="submit">Save</button> <a href="{{ url_for('criteria_page') }}">Cancel</a></p>
</form>
""" + _FOOT

EVALUATE_TEMPLATE = _HEAD + """
<h1>Evaluate a stand</h1>
""" + _STATE_BLOCK + """
{% if not state.access_denied %}
<form method="get" action="{{ url_for('evaluate_page') }}">
  <select name="stand_id">
    <option value="">(select a stand)</option>
    {% for stand in state.stands %}
    <option value="{{ stand.id }}" {% if stand.id == state.selected_stand_id %}selected{% endif %}>{{ stand.name }}{% if stand.room_name %} ({{ stand.room_name }}){% endif %}</option>
    {% endfor %}
  </select>
  <button type="submit">Select</button>
</form>
{% if stand %}
<h2>{{ stand.name }}</h2>
{% if stand.description %}<p>{{ stand.description }}</p>{% endif %}
{% if state.last_evaluation %}<p>Already evaluated on {{ state.last_evaluation }}; saving overwrites it.</p>{% endif %}
<form method="post" action="{{ url_for('evaluate_page') }}">
  <input type="hidden" name="stand_id" value="{{ stand.id }}">
  <table>
    {% for criterion in state.criteria %}
    <tr>
      <td>{{ criterion.name }}</td>
      <td><input name="score_{{ criterion.id }}" size="4"
                 value="{{ state.existing_scores.get(criterion.id, '') }}"> / {{ criterion.max_score }}</td>
      <td>{{ criterion.description or '' }}</td>
    </tr>
    {% endfor %}
  </table>
  <p><button type="submit">Save evaluation</button></p>
</form>
{% endif %}
{% endif %}
""" + _FOOT

DASHBOARD_TEMPLATE = _HEAD + """
<h1>{{ theme.title }}</h1>
<p>Welcome, {{ username or 'guest' }}.</p>
<ul>
  <li>Your evaluations: {{ state.my_evaluation_count if state.my_evaluation_count is not none else '-' }}</li>
  {% if can_inspect %}
  <li>Rooms not yet inspected: {{ state.open_room_count if state.open_room_count is not none else '-' }}</li>
  {% endif %}
</ul>
{% if can_evaluate %}<p><a href="{{ url_for('evaluate_page') }}">Evaluate a stand</a></p>{% endif %}
<h2>Top stands</h2>
{% if state.top_rankings %}
<table>
  {% for entry in state.top_rankings %}
  <tr class="podium">
    <td>{{ entry.rank }}</td>
    <td>{{ entry.stand_name }}</td>
    <td>{{ format_score(entry.total_score) }}</td>
  </tr>
  {% endfor %}
</table>
{% else %}
<p>No ranking data available yet.</p>
{% endif %}
""" + _FOOT

ABOUT_TEMPLATE = _HEAD + """
<h1>About</h1>
<p>Server: {{ stand_session.server_address or '-' }}</p>
<p>User: {{ stand_session.username or '-' }} ({{ stand_session.user_role or 'no role' }})</p>
<p>Frontend version: {{ versions.frontend_version }}</p>
<p>Backend version: {{ versions.backend_version }}</p>
""" + _FOOT


def _render(template: str, service: Optional[PageService] = None, **context):
    """Render *template* with the theme and navigation context filled in."""
    theme = get_theme()
    auth = get_auth()
    settings = service.state.theme if service is not None else None
    if settings is None:
        settings = ThemeSettings()
    server = auth.session.server_address or config.get('server_address') or ''
    context.setdefault('page_title', None)
    return render_template_string(
        template,
        theme=settings,
        background=theme.css_background(settings),
        dark_mode=theme.dark_mode,
        logo_url=settings.logo_url(server) if server else None,
        logged_in=auth.is_logged_in(),
        state=service.state if service is not None else None,
        denied_text=service.access_denied_text() if service is not None else '',
        format_score=standapp.format_score,
        **context
    )


# ---------------------------------------------------------------------------
# Session routes
# ---------------------------------------------------------------------------

@app.route('/')
def index():
    return redirect(url_for('dashboard_page'))


@app.route('/login', methods=['GET', 'POST'])
def login_page():
    """Log in to a stand server"""
    auth = get_auth()
    session = auth.session
    if request.method == 'GET':
        return _render(
            LOGIN_TEMPLATE,
            page_title='Log in',
            server_address=session.server_address or config.get('server_address'),
            username=session.username or config.get('username'),
            next_url=request.args.get('next'),
        )

    server = request.form.get('server_address', '')
    username = request.form.get('username', '')
    gui_logger.info('Login requested for username=%s on %s', username, server)
    with services_lock:
        result = auth.login(server, username, request.form.get('password', ''))
    if not result.ok:
        flash(result.message, 'error')
        return _render(LOGIN_TEMPLATE, page_title='Log in',
                       server_address=server, username=username,
                       next_url=request.form.get('next')), 401

    flash(result.message, 'success')
    if result.redirect_to_setup:
        flash('The server requires the initial admin setup. '
              'Please complete it in the server web interface.', 'info')
    return redirect(_safe_next(request.form.get('next')))


@app.route('/logout', methods=['POST'])
def logout():
    """Log out and forget the stored session"""
    with services_lock:
        acknowledged = get_auth().logout()
    gui_logger.info('Logged out (server acknowledged: %s)', acknowledged)
    flash('Logged out.', 'success')
    return redirect(url_for('login_page'))


@app.route('/theme/toggle', methods=['POST'])
def toggle_theme():
    dark = get_theme().toggle()
    gui_logger.debug('Dark mode is now %s', dark)
    return redirect(request.referrer or url_for('ranking_page'))


# ---------------------------------------------------------------------------
# Stands
# ---------------------------------------------------------------------------

@app.route('/stands', methods=['GET', 'POST'])
@require_session
def stands_page():
    """List stands, or create one on POST"""
    service = _page(ManageStandsService)
    if request.method == 'POST' and not service.state.access_denied:
        _flash_result(service.create_stand(
            request.form.get('name', ''),
            request.form.get('description'),
            _form_room_id(),
        ))
        return redirect(url_for('stands_page'))
    return _render(STANDS_TEMPLATE, service, page_title='Manage stands')


@app.route('/stands/<int:stand_id>/edit', methods=['GET', 'POST'])
@require_session
def edit_stand(stand_id):
    service = _page(ManageStandsService)
    if service.state.access_denied or service.state.error_message:
        return _render(STANDS_TEMPLATE, service, page_title='Manage stands')
    stand = service.find_stand(stand_id)
    if stand is None:
        flash('Stand not found.', 'error')
        return redirect(url_for('stands_page'))

    if request.method == 'POST':
        result = service.edit_stand(
            stand_id,
            request.form.get('name', ''),
            request.form.get('description'),
            _form_room_id(),
        )
        _flash_result(result)
        if result.ok:
            return redirect(url_for('stands_page'))
        return redirect(url_for('edit_stand', stand_id=stand_id))

    return _render(EDIT_STAND_TEMPLATE, service, page_title='Edit stand',
                   stand=stand, rooms=service.state.rooms,
                   selected=service.room_for(stand))


@app.route('/stands/<int:stand_id>/delete', methods=['GET', 'POST'])
@require_session
def delete_stand(stand_id):
    service = _page(ManageStandsService)
    if service.state.access_denied or service.state.error_message:
        return _render(STANDS_TEMPLATE, service, page_title='Manage stands')
    stand = service.find_stand(stand_id)
    if stand is None:
        flash('Stand not found.', 'error')
        return redirect(url_for('stands_page'))

    if request.method == 'POST':
        _flash_result(service.delete_stand(stand.id, stand.name, _form_confirm))
        return redirect(url_for('stands_page'))

    return _render(CONFIRM_TEMPLATE, service, page_title='Delete stand',
                   confirm_title='Delete stand',
                   confirm_message=f'Do you really want to delete the stand "{stand.name}"?',
                   cancel_url=url_for('stands_page'))


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------

@app.route('/rooms', methods=['GET', 'POST'])
@require_session
def rooms_page():
    service = _page(ManageRoomsService)
    if request.method == 'POST' and not service.state.access_denied:
        _flash_result(service.save_room(request.form.get('name', '')))
        return redirect(url_for('rooms_page'))
    return _render(ROOMS_TEMPLATE, service, page_title='Manage rooms')


@app.route('/rooms/<int:room_id>/edit', methods=['POST'])
@require_session
def edit_room(room_id):
    service = _page(ManageRoomsService)
    if service.state.access_denied:
        return _render(ROOMS_TEMPLATE, service, page_title='Manage rooms'), 403
    _flash_result(service.save_room(request.form.get('name', ''), room_id))
    return redirect(url_for('rooms_page'))


@app.route('/rooms/<int:room_id>/delete', methods=['GET', 'POST'])
@require_session
def delete_room(room_id):
    service = _page(ManageRoomsService)
    if service.state.access_denied or service.state.error_message:
        return _render(ROOMS_TEMPLATE, service, page_title='Manage rooms')
    room = next((r for r in service.state.rooms if r.id == room_id), None)
    if room is None:
        flash('Room not found.', 'error')
        return redirect(url_for('rooms_page'))

    if request.method == 'POST':
        _flash_result(service.delete_room(room.id, room.name, _form_confirm))
        return redirect(url_for('rooms_page'))

    return _render(CONFIRM_TEMPLATE, service, page_title='Delete room',
                   confirm_title='Delete room',
                   confirm_message=f'Do you really want to delete the room "{room.name}"? '
                                   'All stands assigned to it will lose their room.',
                   cancel_url=url_for('rooms_page'))


# ---------------------------------------------------------------------------
# Criteria
# ---------------------------------------------------------------------------

@app.route('/criteria', methods=['GET', 'POST'])
@require_session
def criteria_page():
    """List criteria, or create one on POST"""
    service = _page(ManageCriteriaService)
    if request.method == 'POST' and not service.state.access_denied:
        _flash_result(service.create_criterion(
            request.form.get('name', ''),
            request.form.get('max_score', ''),
            request.form.get('description'),
        ))
        return redirect(url_for('criteria_page'))
    return _render(CRITERIA_TEMPLATE, service, page_title='Manage criteria')


@app.route('/criteria/<int:criterion_id>/edit', methods=['GET', 'POST'])
@require_session
def edit_criterion(criterion_id):
    service = _page(ManageCriteriaService)
    if service.state.access_denied or service.state.error_message:
        return _render(CRITERIA_TEMPLATE, service, page_title='Manage criteria')
    criterion = service.find_criterion(criterion_id)
    if criterion is None:
        flash('Criterion not found.', 'error')
        return redirect(url_for('criteria_page'))

    if request.method == 'POST':
        result = service.edit_criterion(
            criterion_id,
            request.form.get('name', ''),
            request.form.get('max_score', ''),
            request.form.get('description'),
        )
        _flash_result(result)
        if result.ok:
            return redirect(url_for('criteria_page'))
        return redirect(url_for('edit_criterion', criterion_id=criterion_id))

    return _render(EDIT_CRITERION_TEMPLATE, service, page_title='Edit criterion',
                   criterion=criterion)


@app.route('/criteria/<int:criterion_id>/delete', methods=['GET', 'POST'])
@require_session
def delete_criterion(criterion_id):
    service = _page(ManageCriteriaService)
    if service.state.access_denied or service.state.error_message:
        return _render(CRITERIA_TEMPLATE, service, page_title='Manage criteria')
    criterion = service.find_criterion(criterion_id)
    if criterion is None:
        flash('Criterion not found.', 'error')
        return redirect(url_for('criteria_page'))

    if request.method == 'POST':
        _flash_result(service.delete_criterion(criterion.id, criterion.name, _form_confirm))
        return redirect(url_for('criteria_page'))

    return _render(CONFIRM_TEMPLATE, service, page_title='Delete criterion',
                   confirm_title='Delete criterion',
                   confirm_message=f'Do you really want to delete the criterion "{criterion.name}"?',
                   cancel_url=url_for('criteria_page'))


# ---------------------------------------------------------------------------
# Evaluation & start page
# ---------------------------------------------------------------------------

@app.route('/evaluate', methods=['GET', 'POST'])
@require_session
def evaluate_page():
    """Score a stand; ``?stand_id=N`` pre-selects it"""
    service = _page(EvaluationService)
    if service.state.access_denied or service.state.error_message:
        return _render(EVALUATE_TEMPLATE, service, page_title='Evaluate', stand=None)
    stand_id = _form_int('stand_id')
    if stand_id is not None:
        service.select_stand(stand_id)

    if request.method == 'POST':
        scores = {
            criterion.id: request.form.get(f'score_{criterion.id}', '')
            for criterion in service.state.criteria
        }
        result = service.submit(scores)
        _flash_result(result)
        if service.state.rejected_criteria:
            flash('Ignored invalid scores for: ' + ', '.join(service.state.rejected_criteria),
                  'info')
        if service.selected_stand is None:
            return redirect(url_for('evaluate_page'))
        return redirect(url_for('evaluate_page', stand_id=service.state.selected_stand_id))

    return _render(EVALUATE_TEMPLATE, service, page_title='Evaluate',
                   stand=service.selected_stand)


@app.route('/dashboard')
@require_session
def dashboard_page():
    service = _page(DashboardService)
    return _render(DASHBOARD_TEMPLATE, service, page_title='Start',
                   username=get_auth().session.username,
                   can_evaluate=service.can_evaluate,
                   can_inspect=service.can_inspect)


# ---------------------------------------------------------------------------
# Ranking & about
# ---------------------------------------------------------------------------

@app.route('/ranking')
@require_session
def ranking_page():
    """Leaderboard; ``?top=N`` limits the rows"""
    service = _page(RankingService)
    top = request.args.get('top', type=int)
    entries = service.top(top) if top else service.state.entries
    return _render(RANKING_TEMPLATE, service, page_title='Ranking', entries=entries)


@app.route('/about')
def about_page():
    auth = get_auth()
    client = auth.client(config.get('server_address'))
    if client is not None:
        versions = AboutService(client).get_versions()
    else:
        versions = {'frontend_version': 'N/A', 'backend_version': 'N/A'}
    return _render(ABOUT_TEMPLATE, page_title='About',
                   stand_session=auth.session, versions=versions)


# ---------------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------------

@app.route('/api/state/<page>')
@require_session
def api_page_state(page):
    """Return the loaded state of *page* as JSON"""
    service_cls = PAGES.get(page)
    if service_cls is None:
        return jsonify({'error': f'Unknown page: {page}'}), 404
    service = _page(service_cls)
    if service.state.access_denied:
        return jsonify({'error': service.access_denied_text()}), 403
    data = asdict(service.state)
    data['error_message'] = service.state.error_message
    return jsonify(data)


def main():
    """Main entry point for GUI"""
    parser = argparse.ArgumentParser(description='standapp Web GUI')
    parser.add_argument('--config', default='config.json', help='Path to config file')
    parser.add_argument('--host', default='127.0.0.1', help='Address to bind (default: 127.0.0.1)')
    parser.add_argument('--port', type=int, default=5050, help='Port to listen on (default: 5050)')
    parser.add_argument('--debug', action='store_true', help='Run Flask in debug mode')
    args = parser.parse_args()

    try:
        loaded = standapp.load_config(args.config)
    except standapp.ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    standapp.setup_logging(loaded.get('log_level', log_level))
    initialize(loaded)

    print("\n" + "=" * 60)
    print("standapp Web GUI is starting...")
    print("=" * 60)
    print("\nOpen your browser and go to:")
    print(f"  http://{args.host}:{args.port}")
    print("\nPress Ctrl+C to stop the server")
    print("=" * 60 + "\n")

    try:
        app.run(host=args.host, port=args.port, debug=args.debug)
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == '__main__':
    main()
