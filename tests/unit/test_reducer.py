"""
Unit tests for the pure reducer in kazi/state/store.py
"""

from kazi.state.store import Action, ActionType, AppState, app_reducer


def _reduce(state, kind, payload=None):
    return app_reducer(state, Action(kind, payload))


class TestAppReducer:
    """Tests for app_reducer()."""

    def test_initial_state(self):
        state = AppState()

        assert state.language == "sw"
        assert state.route == "auth"
        assert state.is_authenticated is False
        assert state.favorites == ()

    def test_set_user(self, employer):
        state = _reduce(AppState(), ActionType.SET_USER,
                        {"user": employer, "token": "tok", "userRole": "employer"})

        assert state.user == employer
        assert state.token == "tok"
        assert state.user_role == "employer"
        assert state.is_authenticated is True

    def test_update_user_merges_fields(self, employee):
        state = _reduce(AppState(), ActionType.SET_USER,
                        {"user": employee, "token": "tok", "userRole": "employee"})
        state = _reduce(state, ActionType.UPDATE_USER, {"location": "Kisumu"})

        assert state.user["location"] == "Kisumu"
        assert state.user["name"] == employee["name"]

    def test_update_user_without_session_is_noop(self):
        state = AppState()
        assert _reduce(state, ActionType.UPDATE_USER, {"name": "x"}) is state

    def test_clear_user(self, employee):
        state = _reduce(AppState(), ActionType.SET_USER,
                        {"user": employee, "token": "tok", "userRole": "employee"})
        state = _reduce(state, ActionType.CLEAR_USER)

        assert state.user is None
        assert state.token is None
        assert state.user_role is None

    def test_toggle_dark_mode_twice_restores(self):
        state = _reduce(AppState(), ActionType.TOGGLE_DARK_MODE)
        assert state.dark_mode is True
        assert _reduce(state, ActionType.TOGGLE_DARK_MODE).dark_mode is False

    def test_collections_replaced_wholesale(self, sample_jobs):
        state = _reduce(AppState(), ActionType.SET_JOBS, sample_jobs)
        state = _reduce(state, ActionType.SET_JOBS, sample_jobs[:1])

        assert state.jobs == tuple(sample_jobs[:1])

    def test_message_set_and_clear(self):
        state = _reduce(AppState(), ActionType.SET_MESSAGE, {"message": "Hi", "type": "success"})
        assert (state.message, state.message_type) == ("Hi", "success")

        state = _reduce(state, ActionType.CLEAR_MESSAGE)
        assert (state.message, state.message_type) == (None, None)

    def test_navigate(self):
        assert _reduce(AppState(), ActionType.NAVIGATE, "dashboard").route == "dashboard"

    def test_state_is_not_mutated(self, sample_jobs):
        original = AppState()
        _reduce(original, ActionType.SET_JOBS, sample_jobs)
        assert original.jobs == ()
