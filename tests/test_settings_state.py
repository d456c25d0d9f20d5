"""
Tests for SettingsStateMachine.

Time and timers are driven by hand (FakeClock, ManualTimerFactory from
conftest) and the in-memory store delivers snapshots synchronously, so
every transition is observable without sleeping.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest

from conftest import T0
from domain.enums import SettingsState
from domain.errors import StoreUnavailable, ValidationError
from domain.models import AppSettings
from repositories.document_store import InMemoryDocumentStore
from repositories.settings_repo import SettingsRepository
from services.settings_state import AUTO_REVERT_MESSAGE, AUTO_REVERT_TITLE, SettingsStateMachine


def _stored(store):
    return store.get_document("settings", "general")


@pytest.fixture
def repo(memory_store):
    return SettingsRepository(memory_store)


@pytest.fixture
def machine(repo, clock, timers):
    m = SettingsStateMachine(repo, clock=clock, timer_factory=timers).start()
    yield m
    m.close()


class TestStartup:
    def test_missing_document_created_with_defaults(self, machine, memory_store):
        assert _stored(memory_store) == {
            "showDeletionConfirmation": True,
            "deletionConfirmationDisabledAt": None,
        }
        assert machine.state is SettingsState.ENABLED
        assert not machine.loading
        assert machine.error is None

    def test_existing_document_is_adopted(self, memory_store, repo, clock, timers):
        repo.save_settings(AppSettings.disabled(T0 - timedelta(minutes=1)))
        with SettingsStateMachine(repo, clock=clock, timer_factory=timers) as m:
            assert m.state is SettingsState.DISABLED_PENDING_REVERT
            assert [t.interval for t in timers.active] == [240.0]

    def test_start_twice_subscribes_once(self, machine, memory_store):
        machine.start()
        assert memory_store.listener_count("settings", "general") == 1

    def test_malformed_document_is_error_state(self, memory_store, repo, clock, timers):
        memory_store.set_document("settings", "general", {"showDeletionConfirmation": "nope"})
        with SettingsStateMachine(repo, clock=clock, timer_factory=timers) as m:
            assert isinstance(m.error, ValidationError)
            assert not m.loading
            assert m.state is SettingsState.ENABLED
            assert timers.active == []

    def test_subscription_failure_is_error_state(self, clock, timers):
        class BrokenWatchStore(InMemoryDocumentStore):
            def subscribe(self, collection, doc_id, on_change, on_error):
                on_error(ConnectionError("watch stream reset"))
                return lambda: None

        repo = SettingsRepository(BrokenWatchStore())
        with SettingsStateMachine(repo, clock=clock, timer_factory=timers) as m:
            assert isinstance(m.error, StoreUnavailable)
            assert m.error.operation == "subscribe"
            assert not m.loading

    def test_default_write_failure_keeps_local_defaults(self, memory_store, repo, clock, timers):
        error = StoreUnavailable("write", "settings/general", OSError("offline"))
        with patch.object(memory_store, "set_document", side_effect=error):
            with SettingsStateMachine(repo, clock=clock, timer_factory=timers) as m:
                assert m.error is error
                assert m.state is SettingsState.ENABLED
        assert _stored(memory_store) is None


class TestDisable:
    def test_disable_writes_timestamp_and_schedules_timer(self, machine, memory_store, timers):
        machine.toggle_deletion_confirmation(False)

        assert _stored(memory_store) == {
            "showDeletionConfirmation": False,
            "deletionConfirmationDisabledAt": "2026-01-01T12:00:00.000Z",
        }
        assert machine.state is SettingsState.DISABLED_PENDING_REVERT
        assert [t.interval for t in timers.active] == [300.0]
        assert machine.revert_due_at() == T0 + timedelta(minutes=5)

    def test_disable_without_timestamp_is_stamped_now(self, machine, memory_store, clock):
        clock.advance(seconds=30)
        machine.update(AppSettings(show_deletion_confirmation=False))
        assert machine.current_settings().deletion_confirmation_disabled_at == T0 + timedelta(seconds=30)
        assert _stored(memory_store)["deletionConfirmationDisabledAt"] == "2026-01-01T12:00:30.000Z"

    def test_echo_snapshot_does_not_reschedule(self, machine, memory_store, timers):
        machine.toggle_deletion_confirmation(False)
        scheduled = len(timers.timers)
        memory_store.set_document("settings", "general", _stored(memory_store))
        assert len(timers.timers) == scheduled
        assert len(timers.active) == 1

    def test_write_failure_leaves_state_unchanged(self, machine, memory_store, timers):
        error = StoreUnavailable("write", "settings/general")
        with patch.object(memory_store, "set_document", side_effect=error):
            with pytest.raises(StoreUnavailable):
                machine.toggle_deletion_confirmation(False)
        assert machine.state is SettingsState.ENABLED
        assert timers.active == []


class TestAutoRevert:
    def test_timer_re_enables_and_notifies(self, machine, memory_store, clock, timers):
        machine.toggle_deletion_confirmation(False)
        clock.advance(minutes=5)
        timers.fire_due(clock, T0)

        assert _stored(memory_store) == {
            "showDeletionConfirmation": True,
            "deletionConfirmationDisabledAt": None,
        }
        assert machine.state is SettingsState.ENABLED
        assert not machine.has_pending_revert
        notes = machine.notifications_since(0)
        assert [(n.title, n.description) for n in notes] == [(AUTO_REVERT_TITLE, AUTO_REVERT_MESSAGE)]
        assert machine.notifications_since(notes[-1].seq) == []

    def test_manual_enable_cancels_timer(self, machine, memory_store, clock, timers):
        machine.toggle_deletion_confirmation(False)
        pending = timers.active[0]

        clock.advance(minutes=2)
        machine.toggle_deletion_confirmation(True)
        assert pending.cancelled
        assert timers.active == []

        # A timer that fires anyway after cancellation must not write
        clock.advance(minutes=3)
        with patch.object(memory_store, "set_document", wraps=memory_store.set_document) as spy:
            pending.fire()
        spy.assert_not_called()
        assert machine.notifications_since(0) == []

    def test_disable_then_immediate_enable(self, machine, timers):
        machine.toggle_deletion_confirmation(False)
        machine.toggle_deletion_confirmation(True)
        assert timers.active == []
        assert machine.revert_due_at() is None

    def test_redisable_replaces_timer(self, machine, clock, timers):
        machine.toggle_deletion_confirmation(False)
        first = timers.active[0]
        clock.advance(minutes=1)
        machine.toggle_deletion_confirmation(True)
        machine.toggle_deletion_confirmation(False)

        assert first.cancelled
        assert [t.interval for t in timers.active] == [300.0]

    def test_external_disable_uses_remaining_delay(self, machine, memory_store, timers):
        # Another client disabled three minutes ago
        other = AppSettings.disabled(T0 - timedelta(minutes=3))
        memory_store.set_document("settings", "general", other.to_document())

        assert machine.state is SettingsState.DISABLED_PENDING_REVERT
        assert [t.interval for t in timers.active] == [120.0]

    def test_expired_disable_reverts_immediately(self, machine, memory_store, timers):
        other = AppSettings.disabled(T0 - timedelta(minutes=10))
        memory_store.set_document("settings", "general", other.to_document())
        assert [t.interval for t in timers.active] == [0.0]

        timers.active[0].fire()
        assert machine.state is SettingsState.ENABLED

    def test_external_enable_cancels_timer(self, machine, memory_store, timers):
        machine.toggle_deletion_confirmation(False)
        memory_store.set_document("settings", "general", AppSettings.enabled().to_document())
        assert timers.active == []
        assert machine.state is SettingsState.ENABLED

    def test_write_failure_in_timer_is_not_retried(self, machine, memory_store, clock, timers):
        machine.toggle_deletion_confirmation(False)
        scheduled = len(timers.timers)
        clock.advance(minutes=5)

        error = StoreUnavailable("write", "settings/general")
        with patch.object(memory_store, "set_document", side_effect=error) as failing:
            timers.fire_due(clock, T0)

        assert failing.call_count == 1
        assert len(timers.timers) == scheduled
        assert machine.state is SettingsState.DISABLED_PENDING_REVERT
        assert machine.notifications_since(0) == []


class TestClose:
    def test_close_unsubscribes_and_cancels_timer(self, repo, memory_store, clock, timers):
        m = SettingsStateMachine(repo, clock=clock, timer_factory=timers).start()
        m.toggle_deletion_confirmation(False)
        pending = timers.active[0]

        m.close()

        assert m.closed
        assert pending.cancelled
        assert memory_store.listener_count("settings", "general") == 0

        with patch.object(memory_store, "set_document", wraps=memory_store.set_document) as spy:
            pending.fire()
        spy.assert_not_called()

    def test_update_after_close_raises(self, machine):
        machine.close()
        with pytest.raises(RuntimeError):
            machine.toggle_deletion_confirmation(False)

    def test_start_after_close_does_not_subscribe(self, repo, memory_store, clock, timers):
        m = SettingsStateMachine(repo, clock=clock, timer_factory=timers)
        m.close()
        m.start()
        assert memory_store.listener_count("settings", "general") == 0
