"""
Flask application for the Kazi Mashinani dashboard.

Serves two pages and the JSON routes behind them:
- /auth: login, registration and password reset
- /: role-gated dashboard (jobs, favorites, posting, workers, profile)

Each browser has its own store and controllers (see ``sessions``); the
pages poll ``GET /api/state`` and follow its ``route`` field.

Stack: Flask + Tailwind CSS (CDN)
"""

import logging
import os
from functools import wraps
from typing import Any, Callable, Dict, Optional

from flask import (
    Blueprint,
    Flask,
    current_app,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)

from kazi.api import ApiBundle
from kazi.common.config import KaziSettings, get_settings, validate_config_on_startup
from kazi.common.logger import setup_logging
from kazi.controllers import DateFilter
from kazi.i18n import translate
from kazi.models import Locale, Route

from frontend.auth_proxy import auth_proxy_bp
from frontend.sessions import ClientContext, ClientRegistry, StorageFactory

try:
    from version import __version__
    APP_VERSION = __version__
except ImportError:
    APP_VERSION = "dev"

logger = logging.getLogger(__name__)

main_bp = Blueprint("main", __name__)

REGISTRY_EXTENSION = "kazi_clients"


def _client() -> ClientContext:
    return current_app.extensions[REGISTRY_EXTENSION].current()


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _bad_request(message: str):
    return jsonify({"error": message}), 400


def login_required(f):
    """
    Decorator to require a signed-in client.

    For API routes (/api/*): Returns JSON 401 if not authenticated
    For page routes: Redirects to the auth page if not authenticated
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not _client().store.state.is_authenticated:
            if request.path.startswith("/api/"):
                return jsonify({"error": "Not authenticated"}), 401
            return redirect(url_for("main.auth_page"))
        return f(*args, **kwargs)
    return decorated_function


def _state_payload(ctx: ClientContext, **extra) -> Dict[str, Any]:
    payload = {"state": ctx.store.snapshot()}
    if ctx.store.state.route == Route.AUTH.value:
        payload["auth_flow"] = ctx.auth_flow.snapshot()
    if ctx.store.state.is_authenticated:
        payload["dashboard"] = ctx.dashboard.snapshot()
    payload.update(extra)
    return payload


# ============================================================================
# Pages
# ============================================================================

@main_bp.route("/", methods=["GET"])
@login_required
def dashboard_page():
    """Dashboard; fetches jobs and workers on every visit."""
    ctx = _client()
    ctx.dashboard.load()
    return render_template(
        "dashboard.html",
        state=ctx.store.snapshot(),
        dashboard=ctx.dashboard.snapshot(),
        locale=ctx.store.locale.value,
    )


@main_bp.route("/auth", methods=["GET"])
def auth_page():
    ctx = _client()
    if ctx.store.state.is_authenticated:
        return redirect(url_for("main.dashboard_page"))
    return render_template(
        "auth.html",
        state=ctx.store.snapshot(),
        auth_flow=ctx.auth_flow.snapshot(),
        locale=ctx.store.locale.value,
    )


# ============================================================================
# State and preferences
# ============================================================================

@main_bp.route("/api/state", methods=["GET"])
def get_state():
    """Current client state; also runs any timers that came due."""
    return jsonify(_state_payload(_client()))


@main_bp.route("/api/preferences/language", methods=["POST"])
def set_language():
    """
    Change the interface language.

    Request Body:
        language: Optional "en" | "sw"; toggles when omitted
    """
    ctx = _client()
    language = _json_body().get("language")
    if language is None:
        ctx.store.toggle_language()
    else:
        try:
            ctx.store.set_language(Locale(language))
        except ValueError:
            return _bad_request(f"Unsupported language: {language}")
    return jsonify(_state_payload(ctx))


@main_bp.route("/api/preferences/dark-mode", methods=["POST"])
def toggle_dark_mode():
    ctx = _client()
    ctx.store.toggle_dark_mode()
    return jsonify(_state_payload(ctx))


@main_bp.route("/api/logout", methods=["POST"])
def logout():
    ctx = _client()
    ctx.store.logout()
    ctx.log.info("Client signed out")
    return jsonify(_state_payload(ctx))


# ============================================================================
# Authentication flow
# ============================================================================

def _auth_flow_actions(ctx: ClientContext, body: Dict[str, Any]) -> Dict[str, Callable[[], Any]]:
    flow = ctx.auth_flow
    return {
        "switch-tab": lambda: flow.switch_tab(body.get("tab", "")),
        "show-forgot": flow.show_forgot_password,
        "show-login": flow.show_login,
        "back-to-forgot": flow.back_to_forgot,
        "toggle-language": flow.toggle_language,
        "field": lambda: flow.update_field(body.get("name", ""), body.get("value", "")),
        "code-digit": lambda: flow.set_code_digit(int(body.get("index", -1)), body.get("value", "")),
        "login": flow.login,
        "register": flow.register,
        "request-reset-code": flow.request_reset_code,
        "resend-code": flow.resend_code,
        "verify-code": flow.verify_code,
        "reset-password": flow.reset_password,
    }


@main_bp.route("/api/auth-flow/<action>", methods=["POST"])
def auth_flow_action(action: str):
    """
    Run one authentication screen action.

    Request Body:
        fields: Optional dict of form fields to set before the action
        Action-specific keys (tab, name/value, index/value)

    Returns:
        JSON with the action result, auth-flow snapshot and store state
    """
    ctx = _client()
    body = _json_body()
    handler = _auth_flow_actions(ctx, body).get(action)
    if handler is None:
        return jsonify({"error": f"Unknown action: {action}"}), 404

    try:
        for name, value in (body.get("fields") or {}).items():
            ctx.auth_flow.update_field(name, value)
        result = handler()
    except (KeyError, ValueError, IndexError, TypeError) as e:
        return _bad_request(str(e))

    return jsonify({
        "result": result,
        "state": ctx.store.snapshot(),
        "auth_flow": ctx.auth_flow.snapshot(),
    })


# ============================================================================
# Dashboard
# ============================================================================

def _confirmation(body: Dict[str, Any], prompts: list) -> Callable[[str], bool]:
    def confirm(prompt: str) -> bool:
        prompts.append(prompt)
        return body.get("confirmed") is True
    return confirm


@main_bp.route("/api/dashboard/load", methods=["POST"])
@login_required
def reload_dashboard():
    ctx = _client()
    ctx.dashboard.load()
    return jsonify(_state_payload(ctx))


@main_bp.route("/api/section", methods=["POST"])
@login_required
def set_section():
    ctx = _client()
    section = _json_body().get("section", "")
    if not ctx.dashboard.set_section(section):
        return _bad_request(f"Section not available: {section}")
    return jsonify(_state_payload(ctx))


@main_bp.route("/api/jobs", methods=["GET"])
@login_required
def list_jobs():
    """
    Jobs filtered in memory.

    Query Parameters:
        position: Title substring (case-insensitive)
        location: Location substring (case-insensitive)
        date: all | today | week | month
    """
    ctx = _client()
    try:
        ctx.dashboard.set_search(
            position=request.args.get("position"),
            location=request.args.get("location"),
            date=request.args.get("date"),
        )
    except ValueError:
        allowed = ", ".join(option.value for option in DateFilter)
        return _bad_request(f"date must be one of: {allowed}")
    jobs = ctx.dashboard.filtered_jobs
    return jsonify({"jobs": jobs, "count": len(jobs), "search": ctx.dashboard.search})


@main_bp.route("/api/jobs", methods=["POST"])
@login_required
def create_job():
    ctx = _client()
    try:
        ok = ctx.dashboard.post_job(_json_body())
    except KeyError as e:
        return _bad_request(str(e))
    return jsonify(_state_payload(ctx, ok=ok))


@main_bp.route("/api/jobs/<job_id>", methods=["PUT"])
@login_required
def update_job(job_id: str):
    ctx = _client()
    ok = ctx.dashboard.edit_job(job_id, _json_body())
    return jsonify(_state_payload(ctx, ok=ok))


@main_bp.route("/api/jobs/<job_id>", methods=["DELETE"])
@login_required
def delete_job(job_id: str):
    """
    Delete a job.

    Request Body:
        confirmed: must be true; otherwise the confirmation prompt is returned
    """
    ctx = _client()
    body = _json_body()
    prompts: list = []
    ok = ctx.dashboard.delete_job(job_id, _confirmation(body, prompts))
    extra = {"ok": ok}
    if not ok and body.get("confirmed") is not True and prompts:
        extra["confirmation_required"] = prompts[0]
    return jsonify(_state_payload(ctx, **extra))


@main_bp.route("/api/jobs/<job_id>/share/<platform>", methods=["GET"])
@login_required
def share_job(job_id: str, platform: str):
    ctx = _client()
    job = ctx.dashboard.find_job(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404
    url = ctx.dashboard.share_job(job, platform)
    if url is None:
        return jsonify({"error": f"Unknown platform: {platform}"}), 404
    return jsonify({"url": url})


@main_bp.route("/api/employees", methods=["GET"])
@login_required
def list_employees():
    employees = list(_client().store.state.employees)
    return jsonify({"employees": employees, "count": len(employees)})


@main_bp.route("/api/my-jobs", methods=["GET"])
@login_required
def list_my_jobs():
    jobs = list(_client().store.state.user_jobs)
    return jsonify({"jobs": jobs, "count": len(jobs)})


@main_bp.route("/api/favorites", methods=["GET"])
@login_required
def list_favorites():
    favorites = list(_client().store.state.favorites)
    return jsonify({"favorites": favorites, "count": len(favorites)})


@main_bp.route("/api/favorites/<job_id>", methods=["POST"])
@login_required
def toggle_favorite(job_id: str):
    ctx = _client()
    job = ctx.dashboard.find_job(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404
    favorite = ctx.dashboard.toggle_favorite(job)
    return jsonify(_state_payload(ctx, favorite=favorite))


@main_bp.route("/api/profile/edit", methods=["POST"])
@login_required
def start_profile_edit():
    """Open (``{"editing": true}``) or close the profile edit form."""
    ctx = _client()
    if _json_body().get("editing", True):
        ctx.dashboard.start_profile_edit()
    else:
        ctx.dashboard.cancel_profile_edit()
    return jsonify(_state_payload(ctx))


@main_bp.route("/api/profile", methods=["PUT"])
@login_required
def update_profile():
    ctx = _client()
    try:
        ok = ctx.dashboard.update_profile(_json_body())
    except KeyError as e:
        return _bad_request(str(e))
    return jsonify(_state_payload(ctx, ok=ok))


@main_bp.route("/api/profile", methods=["DELETE"])
@login_required
def delete_profile():
    """Delete the account; the client is signed out after a short delay."""
    ctx = _client()
    body = _json_body()
    prompts: list = []
    ok = ctx.dashboard.delete_account(_confirmation(body, prompts))
    extra = {"ok": ok}
    if not ok and body.get("confirmed") is not True and prompts:
        extra["confirmation_required"] = prompts[0]
    return jsonify(_state_payload(ctx, **extra))


# ============================================================================
# Health
# ============================================================================

@main_bp.route("/health", methods=["GET"])
def public_health_check():
    """
    Public health endpoint for external monitoring.

    No authentication required. Returns minimal info to avoid exposing
    sensitive data.
    """
    registry = current_app.extensions[REGISTRY_EXTENSION]
    return jsonify({
        "status": "healthy",
        "version": APP_VERSION,
        "clients": len(registry),
    })


# ============================================================================
# Application factory
# ============================================================================

def _configure_session(app: Flask, settings: KaziSettings) -> None:
    flask_secret_key = settings.flask_secret_key
    if not flask_secret_key:
        if settings.is_production:
            raise RuntimeError(
                "CRITICAL: FLASK_SECRET_KEY not set in production. "
                "Sessions (and every client's stored login) would be lost on restart."
            )
        logger.warning(
            "FLASK_SECRET_KEY not set. Generating random key "
            "(sessions will not persist between restarts)"
        )
        flask_secret_key = os.urandom(24).hex()

    app.secret_key = flask_secret_key

    # Cookie security settings
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SECURE"] = settings.is_production

    # SameSite=None requires Secure=True (HTTPS only)
    app.config["SESSION_COOKIE_SAMESITE"] = "None" if settings.is_production else "Lax"
    app.config["PERMANENT_SESSION_LIFETIME"] = 60 * 60 * 24 * 31  # 31 days


def create_app(
    settings: Optional[KaziSettings] = None,
    storage_factory: Optional[StorageFactory] = None,
    api_factory: Optional[Callable[..., ApiBundle]] = None,
    clock: Optional[Callable[[], float]] = None,
) -> Flask:
    """
    Build the Flask app.

    Args:
        settings: Configuration; defaults to the environment
        storage_factory: Durable storage per client id (default: JSON file under storage_dir)
        api_factory: Backend APIs per client store (tests inject mocks)
        clock: Scheduler clock for every client (tests inject a manual clock)
    """
    settings = validate_config_on_startup(settings or get_settings())

    app = Flask(__name__)
    app.config["KAZI_SETTINGS"] = settings
    _configure_session(app, settings)

    app.extensions[REGISTRY_EXTENSION] = ClientRegistry(
        settings,
        storage_factory=storage_factory,
        api_factory=api_factory,
        clock=clock,
    )

    @app.context_processor
    def inject_helpers():
        """Inject version info and the translator into all templates."""
        return {"version": APP_VERSION, "t": translate}

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_proxy_bp)
    logger.info(f"Registered auth proxy blueprint with prefix: {auth_proxy_bp.url_prefix}")
    return app


setup_logging(get_settings().log_level)
app = create_app()
