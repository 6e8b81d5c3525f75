"""
Dashboard Controller

Role-gated dashboard for signed-in users:
- Employees: home, jobs, favorites, profile
- Employers: home, post-job, find-workers, profile

Jobs and worker listings are fetched whole and filtered in memory.
Favorites never touch the server; they live in durable storage only.
Mutations (post, edit, delete job; update profile; delete account) run
under an in-flight guard so a double submit is rejected instead of sent
twice.
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from kazi.api import ApiBundle, ApiError, ErrorKind
from kazi.common.config import KaziSettings, get_settings
from kazi.controllers.guards import ActionBusyError, ActionGuard
from kazi.i18n import translate
from kazi.models import Locale, Role, Severity, job_key, user_key
from kazi.state import TIMER_LOGOUT, Action, ActionType, AppState, AppStore
from kazi.utils import as_text, encode_uri_component, format_phone_to_standard, truncate

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


class Section(str, Enum):
    """Dashboard sections."""
    HOME = "home"
    JOBS = "jobs"
    FAVORITES = "favorites"
    POST_JOB = "post-job"
    FIND_WORKERS = "find-workers"
    PROFILE = "profile"


ROLE_SECTIONS = {
    Role.EMPLOYEE: (Section.HOME, Section.JOBS, Section.FAVORITES, Section.PROFILE),
    Role.EMPLOYER: (Section.HOME, Section.POST_JOB, Section.FIND_WORKERS, Section.PROFILE),
}

JOB_CATEGORIES = ("general", "agriculture", "construction", "domestic", "driving", "retail")

JOB_FORM_DEFAULTS: Dict[str, str] = {
    "title": "",
    "description": "",
    "location": "",
    "category": "general",
    "phone": "",
    "businessType": "",
}

REQUIRED_JOB_FIELDS = ("title", "description", "location", "phone")

PROFILE_FORM_DEFAULTS: Dict[str, str] = {
    "name": "",
    "location": "",
    "specialization": "",
    "jobType": "",
}


# =============================================================================
# Search
# =============================================================================


class DateFilter(str, Enum):
    """Options of the date-posted search filter."""
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


def _parse_created_at(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _matches_date(job: Dict[str, Any], date_filter: DateFilter, now: datetime) -> bool:
    if date_filter == DateFilter.ALL:
        return True
    created = _parse_created_at(job.get("createdAt"))
    if created is None:
        return False
    if date_filter == DateFilter.TODAY:
        return created.astimezone(timezone.utc).date() == now.astimezone(timezone.utc).date()
    window = timedelta(days=7) if date_filter == DateFilter.WEEK else timedelta(days=30)
    return now - window <= created <= now + timedelta(minutes=5)


def filter_jobs(
    jobs: Iterable[Dict[str, Any]],
    position: str = "",
    location: str = "",
    date: str = "all",
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    Filter jobs in memory.

    Position matches the title and location matches the job location, both
    as case-insensitive substrings; the conditions are ANDed and an empty
    query matches everything. ``date`` narrows by ``createdAt``; jobs
    without a readable date only pass the "all" filter.
    """
    position = (position or "").strip().lower()
    location = (location or "").strip().lower()
    date_filter = DateFilter(date or DateFilter.ALL.value)
    now = now or datetime.now(timezone.utc)

    results = []
    for job in jobs:
        if position and position not in (job.get("title") or "").lower():
            continue
        if location and location not in (job.get("location") or "").lower():
            continue
        if not _matches_date(job, date_filter, now):
            continue
        results.append(job)
    return results


# =============================================================================
# Sharing
# =============================================================================

SHARE_URLS = {
    "whatsapp": "https://wa.me/?text={text}",
    "facebook": "https://www.facebook.com/sharer/sharer.php?quote={text}",
    "twitter": "https://twitter.com/intent/tweet?text={text}",
}


def build_share_url(job: Dict[str, Any], platform: str, locale: Locale) -> Optional[str]:
    """Share link for ``platform``, or None when the platform is unknown."""
    template = SHARE_URLS.get(platform)
    if template is None:
        return None
    text = translate(
        "share_text",
        locale,
        title=job.get("title") or "",
        location=job.get("location") or "",
        description=truncate(job.get("description")),
        phone=job.get("phone") or "",
    )
    return template.format(text=encode_uri_component(text))


# =============================================================================
# Controller
# =============================================================================


class DashboardController:
    """
    Actions behind the dashboard page.

    Args:
        store: Client store
        api: Backend resource APIs
        settings: Timer configuration; defaults to the global settings
    """

    def __init__(
        self,
        store: AppStore,
        api: ApiBundle,
        settings: Optional[KaziSettings] = None,
    ):
        self.store = store
        self.api = api
        self.settings = settings or get_settings()
        self.guard = ActionGuard()
        self.reset()
        store.subscribe(self._on_action)

    def reset(self) -> None:
        """Restore the section, forms and search to their defaults."""
        self.active_section = Section.HOME
        self.job_form: Dict[str, str] = dict(JOB_FORM_DEFAULTS)
        self.profile_form: Dict[str, str] = dict(PROFILE_FORM_DEFAULTS)
        self.is_editing_profile = False
        self.search: Dict[str, str] = {"position": "", "location": "", "date": DateFilter.ALL.value}

    def _on_action(self, state: AppState, action: Action) -> None:
        # A new or cleared session never inherits the previous user's view
        if action.type in (ActionType.SET_USER, ActionType.CLEAR_USER):
            self.reset()

    # ===== Helpers =====

    def _t(self, key: str, **params) -> str:
        return translate(key, self.store.locale, **params)

    def _error(self, key: str) -> None:
        self.store.show_message(self._t(key), Severity.ERROR)

    def _success(self, key: str) -> None:
        self.store.show_message(self._t(key), Severity.SUCCESS)

    def _request_error(self, error: ApiError, fallback_key: str) -> None:
        if error.kind == ErrorKind.NETWORK:
            self._error("network_error")
        else:
            self.store.show_message(error.message or self._t(fallback_key), Severity.ERROR)

    def _guarded(self, action: str, fn: Callable[[], bool]) -> bool:
        try:
            with self.guard.hold(action):
                return fn()
        except ActionBusyError:
            logger.info(f"Rejected duplicate '{action}' while one is in flight")
            self._error("action_in_progress")
            return False

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self.store.state.user

    @property
    def role(self) -> Optional[Role]:
        try:
            return Role(self.store.state.user_role)
        except ValueError:
            return None

    @property
    def is_employer(self) -> bool:
        return self.role == Role.EMPLOYER

    # ===== Sections =====

    @property
    def allowed_sections(self) -> tuple:
        return ROLE_SECTIONS.get(self.role, (Section.HOME, Section.PROFILE))

    def set_section(self, section: str) -> bool:
        try:
            target = Section(section)
        except ValueError:
            return False
        if target not in self.allowed_sections:
            logger.debug(f"Section '{section}' not available for role {self.store.state.user_role}")
            return False
        self.active_section = target
        return True

    # ===== Loading =====

    def load(self) -> None:
        """Initial fetch: all jobs, all workers, and the employer's own jobs."""
        self.store.set_loading(True)
        try:
            self.load_jobs()
            self.load_employees()
            if self.is_employer:
                self.load_user_jobs()
        finally:
            self.store.set_loading(False)

    def load_jobs(self) -> None:
        try:
            data = self.api.jobs.get_all()
        except ApiError as e:
            logger.warning(f"Loading jobs failed: {e.message}")
            self._error("jobs_load_failed")
            return
        if data.get("success"):
            self.store.set_jobs(data.get("jobs") or [])

    def load_employees(self) -> None:
        try:
            data = self.api.users.get_employees()
        except ApiError as e:
            logger.warning(f"Loading workers failed: {e.message}")
            self._error("workers_load_failed")
            return
        if data.get("success"):
            self.store.set_employees(data.get("employees") or [])

    def _own_jobs_from_cache(self) -> List[Dict[str, Any]]:
        user = self.user or {}
        user_id = user_key(user)
        name = user.get("name")
        return [
            job for job in self.store.state.jobs
            if (user_id and str(job.get("employerId")) == user_id)
            or (name and job.get("employerName") == name)
        ]

    def load_user_jobs(self) -> None:
        """Employer's own jobs; falls back to filtering the cached job list."""
        user_id = user_key(self.user)
        if not user_id:
            self.store.set_user_jobs(self._own_jobs_from_cache())
            return
        try:
            data = self.api.jobs.get_by_employer(user_id)
        except ApiError as e:
            logger.warning(f"Loading employer jobs failed, filtering cached jobs: {e.message}")
            self.store.set_user_jobs(self._own_jobs_from_cache())
            return
        if data.get("success"):
            self.store.set_user_jobs(data.get("jobs") or [])

    def _reload_after_job_change(self) -> None:
        self.load_jobs()
        if self.is_employer:
            self.load_user_jobs()

    # ===== Search =====

    def set_search(
        self,
        position: Optional[str] = None,
        location: Optional[str] = None,
        date: Optional[str] = None,
    ) -> None:
        if position is not None:
            self.search["position"] = position
        if location is not None:
            self.search["location"] = location
        if date is not None:
            self.search["date"] = DateFilter(date).value

    @property
    def filtered_jobs(self) -> List[Dict[str, Any]]:
        return filter_jobs(self.store.state.jobs, **self.search)

    def find_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Look a job up in any cached collection."""
        state = self.store.state
        for collection in (state.jobs, state.user_jobs, state.favorites):
            for job in collection:
                if job_key(job) == job_id:
                    return job
        return None

    # ===== Jobs =====

    def update_job_field(self, name: str, value: str) -> None:
        if name not in self.job_form:
            raise KeyError(f"Unknown job field '{name}'")
        self.job_form[name] = as_text(value)

    def post_job(self, form: Optional[Dict[str, str]] = None) -> bool:
        """Publish the job form (employers only)."""
        if form:
            for name, value in form.items():
                self.update_job_field(name, value)
        return self._guarded("post_job", self._post_job)

    def _post_job(self) -> bool:
        if not self.is_employer:
            self._error("employers_only")
            return False
        if any(not self.job_form[name].strip() for name in REQUIRED_JOB_FIELDS):
            self._error("job_fields_required")
            return False

        user = self.user or {}
        job_data = {
            **self.job_form,
            "phone": format_phone_to_standard(self.job_form["phone"]),
            "employerId": user_key(user),
            "employerName": user.get("name"),
            "language": self.store.state.language,
        }

        try:
            self.api.jobs.create(job_data)
        except ApiError as e:
            logger.warning(f"Posting job failed: {e.message}")
            self._request_error(e, "job_post_failed")
            return False

        logger.info(f"Posted job '{job_data['title']}'")
        self._success("job_posted")
        self.job_form = dict(JOB_FORM_DEFAULTS)
        self._reload_after_job_change()
        self.active_section = Section.PROFILE
        return True

    def edit_job(self, job_id: str, fields: Dict[str, Any]) -> bool:
        """Update a posted job in place (employers only)."""
        def run() -> bool:
            if not self.is_employer:
                self._error("employers_only")
                return False
            changes = {
                name: as_text(value) for name, value in fields.items() if name in JOB_FORM_DEFAULTS
            }
            if "phone" in changes:
                changes["phone"] = format_phone_to_standard(changes["phone"])
            try:
                self.api.jobs.update(job_id, changes)
            except ApiError as e:
                logger.warning(f"Updating job {job_id} failed: {e.message}")
                self._request_error(e, "job_update_failed")
                return False
            self._success("job_updated")
            self._reload_after_job_change()
            return True

        return self._guarded("edit_job", run)

    def delete_job(self, job_id: str, confirm: ConfirmCallback) -> bool:
        """Delete a job after the user confirms."""
        if not confirm(self._t("confirm_delete_job")):
            return False

        def run() -> bool:
            try:
                self.api.jobs.delete(job_id)
            except ApiError as e:
                logger.warning(f"Deleting job {job_id} failed: {e.message}")
                self._request_error(e, "job_delete_failed")
                return False
            logger.info(f"Deleted job {job_id}")
            self._success("job_deleted")
            self._reload_after_job_change()
            return True

        return self._guarded("delete_job", run)

    # ===== Favorites =====

    def is_favorite(self, job: Dict[str, Any]) -> bool:
        key = job_key(job)
        return any(job_key(fav) == key for fav in self.store.state.favorites)

    def toggle_favorite(self, job: Dict[str, Any]) -> bool:
        """
        Add or remove ``job`` from favorites.

        Returns:
            True if the job is a favorite afterwards.
        """
        key = job_key(job)
        favorites = list(self.store.state.favorites)
        if self.is_favorite(job):
            favorites = [fav for fav in favorites if job_key(fav) != key]
            self.store.set_favorites(favorites)
            self._success("favorite_removed")
            return False
        favorites.append(job)
        self.store.set_favorites(favorites)
        self._success("favorite_added")
        return True

    # ===== Profile =====

    def start_profile_edit(self) -> None:
        user = self.user or {}
        self.profile_form = {name: user.get(name) or "" for name in PROFILE_FORM_DEFAULTS}
        self.is_editing_profile = True

    def cancel_profile_edit(self) -> None:
        self.is_editing_profile = False

    def update_profile(self, form: Optional[Dict[str, str]] = None) -> bool:
        if form:
            for name, value in form.items():
                if name not in self.profile_form:
                    raise KeyError(f"Unknown profile field '{name}'")
                self.profile_form[name] = as_text(value)
        return self._guarded("update_profile", self._update_profile)

    def _update_profile(self) -> bool:
        payload = {
            "name": self.profile_form["name"],
            "location": self.profile_form["location"],
        }
        if self.role == Role.EMPLOYEE:
            payload["specialization"] = self.profile_form["specialization"]
        else:
            payload["jobType"] = self.profile_form["jobType"]

        try:
            response = self.api.users.update_profile(payload)
        except ApiError as e:
            logger.warning(f"Profile update failed: {e.message}")
            self._request_error(e, "profile_update_failed")
            return False

        merged = dict(payload)
        if isinstance(response.get("user"), dict):
            merged.update(response["user"])
        self.store.update_user(merged)
        self._success("profile_updated")
        self.is_editing_profile = False
        return True

    def delete_account(self, confirm: ConfirmCallback) -> bool:
        """Delete the account, then sign out after a short delay."""
        if not confirm(self._t("confirm_delete_account")):
            return False

        def run() -> bool:
            try:
                self.api.users.delete_profile()
            except ApiError as e:
                logger.warning(f"Account deletion failed: {e.message}")
                self._request_error(e, "account_delete_failed")
                return False
            logger.info("Account deleted, signing out")
            self._success("account_deleted")
            self.store.scheduler.schedule(
                TIMER_LOGOUT, self.settings.logout_delay_seconds, self.store.logout
            )
            return True

        return self._guarded("delete_account", run)

    # ===== Sharing =====

    def share_job(self, job: Dict[str, Any], platform: str) -> Optional[str]:
        return build_share_url(job, platform, self.store.locale)

    # ===== Rendering =====

    def snapshot(self) -> Dict[str, Any]:
        return {
            "section": self.active_section.value,
            "sections": [section.value for section in self.allowed_sections],
            "job_form": dict(self.job_form),
            "profile_form": dict(self.profile_form),
            "is_editing_profile": self.is_editing_profile,
            "search": dict(self.search),
            "filtered_jobs": self.filtered_jobs,
            "favorite_ids": [job_key(job) for job in self.store.state.favorites],
            "busy": sorted(self.guard.busy_actions),
        }
