"""
Settings State Machine

Owns the global settings document: its live subscription, the
deletion-confirmation toggle and the auto re-enable timer.

States:
- ENABLED: deletion confirmation is shown, no timer pending
- DISABLED_PENDING_REVERT: confirmation is off and one revert timer is pending

Every document delivered by the store replaces local state and re-evaluates
the timer: the pending timer is cancelled, and a disabled document schedules
a new one for whatever is left of revert_after since it was disabled.

Snapshots arrive on the store's watch thread and timers fire on their own
thread, so all state lives behind one re-entrant lock. Each scheduled timer
carries a generation number; a timer whose generation is stale when it fires
does nothing.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

from domain.enums import SettingsState
from domain.errors import LodestoneError, StoreUnavailable, TimerRaceError
from domain.models import AppSettings
from logging_config import setup_logging
from repositories.settings_repo import SettingsRepository

logger = setup_logging(__name__, log_file="settings_state.log")

DEFAULT_REVERT_AFTER = timedelta(minutes=5)
MAX_NOTIFICATIONS = 50
AUTO_REVERT_TITLE = "Settings Updated"
AUTO_REVERT_MESSAGE = "Delete confirmation has been automatically re-enabled"


# =============================================================================
# Protocols
# =============================================================================

class TimerHandle(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _daemon_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


@dataclass(frozen=True)
class SettingsNotification:
    """A user-facing message raised by a background transition."""
    seq: int
    title: str
    description: str


# =============================================================================
# State machine
# =============================================================================

class SettingsStateMachine:
    """Deletion-confirmation settings with a self-expiring disable.

    Args:
        repo: Settings document access
        revert_after: Delay before a disabled confirmation re-enables itself
        clock: Returns the current aware UTC time
        timer_factory: Builds a one-shot timer, threading.Timer compatible
    """

    def __init__(
        self,
        repo: SettingsRepository,
        revert_after: timedelta = DEFAULT_REVERT_AFTER,
        clock: Clock = _utcnow,
        timer_factory: TimerFactory = _daemon_timer,
    ):
        self._repo = repo
        self.revert_after = revert_after
        self._clock = clock
        self._timer_factory = timer_factory

        self._lock = threading.RLock()
        self._settings = AppSettings.enabled()
        self._loading = True
        self._error: Optional[LodestoneError] = None
        self._timer: Optional[TimerHandle] = None
        self._timer_generation = 0
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._started = False
        self._closed = False
        self._notifications: list[SettingsNotification] = []
        self._notification_seq = 0

    @classmethod
    def create_default(cls) -> "SettingsStateMachine":
        """Build a machine over the configured store and settings document."""
        from config import get_document_store
        from settings_service import SettingsService

        settings = SettingsService()
        repo = SettingsRepository(
            get_document_store(settings),
            collection=settings.settings_collection,
            document_id=settings.settings_document_id,
        )
        return cls(repo, revert_after=settings.revert_after)

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------

    def start(self) -> "SettingsStateMachine":
        """Subscribe to the settings document. Calling it twice is a no-op."""
        with self._lock:
            if self._started or self._closed:
                return self
            self._started = True
        try:
            unsubscribe = self._repo.subscribe(self._on_settings, self._on_error)
        except StoreUnavailable as e:
            self._on_error(e)
            return self
        with self._lock:
            if not self._closed:
                self._unsubscribe = unsubscribe
                return self
        unsubscribe()
        return self

    def close(self) -> None:
        """Cancel the pending timer and the subscription. No writes happen afterwards."""
        with self._lock:
            self._closed = True
            self._cancel_timer_locked()
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
        logger.debug("Settings state machine closed")

    def __enter__(self) -> "SettingsStateMachine":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -----------------------------------------------------------------
    # Read access
    # -----------------------------------------------------------------

    def current_settings(self) -> AppSettings:
        with self._lock:
            return self._settings

    @property
    def state(self) -> SettingsState:
        return self.current_settings().state

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._loading

    @property
    def error(self) -> Optional[LodestoneError]:
        with self._lock:
            return self._error

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def has_pending_revert(self) -> bool:
        with self._lock:
            return self._timer is not None

    def revert_due_at(self) -> Optional[datetime]:
        """When the pending auto re-enable is due, or None when enabled."""
        settings = self.current_settings()
        if settings.deletion_confirmation_disabled_at is None:
            return None
        return settings.deletion_confirmation_disabled_at + self.revert_after

    def notifications_since(self, seq: int) -> list[SettingsNotification]:
        with self._lock:
            return [n for n in self._notifications if n.seq > seq]

    # -----------------------------------------------------------------
    # Commands
    # -----------------------------------------------------------------

    def update(self, new_settings: AppSettings) -> None:
        """Write new settings to the store and adopt them locally.

        A disabled document without a timestamp is stamped with the current
        time so it still expires.

        Raises:
            StoreUnavailable: If the write fails; local state is unchanged
            RuntimeError: If the machine has been closed
        """
        if not new_settings.show_deletion_confirmation and new_settings.deletion_confirmation_disabled_at is None:
            new_settings = AppSettings.disabled(self._clock())
        with self._lock:
            if self._closed:
                raise RuntimeError("Settings state machine is closed")
            self._repo.save_settings(new_settings)
            self._apply_locked(new_settings)

    def toggle_deletion_confirmation(self, enabled: bool) -> None:
        """Enable (cancelling the revert timer) or disable (scheduling it)."""
        if enabled:
            self.update(AppSettings.enabled())
        else:
            self.update(AppSettings.disabled(self._clock()))
        logger.info(f"Deletion confirmation {'enabled' if enabled else 'disabled'}")

    # -----------------------------------------------------------------
    # Store callbacks
    # -----------------------------------------------------------------

    def _on_settings(self, settings: Optional[AppSettings]) -> None:
        with self._lock:
            if self._closed:
                return
            if settings is None:
                settings = AppSettings.enabled()
                try:
                    self._repo.save_settings(settings)
                    logger.info("Created settings document with defaults")
                except StoreUnavailable as e:
                    logger.error(f"Could not create default settings: {e}")
                    self._apply_locked(settings)
                    self._error = e
                    return
            self._apply_locked(settings)

    def _on_error(self, exc: Exception) -> None:
        if not isinstance(exc, LodestoneError):
            exc = StoreUnavailable("subscribe", self._repo.path, exc)
        logger.error(f"Settings subscription error: {exc}")
        with self._lock:
            self._error = exc
            self._loading = False

    # -----------------------------------------------------------------
    # Timer
    # -----------------------------------------------------------------

    def _apply_locked(self, settings: AppSettings) -> None:
        if self._closed:
            return
        unchanged = settings == self._settings and not self._loading
        self._error = None
        self._loading = False
        if unchanged and (settings.show_deletion_confirmation or self._timer is not None):
            return
        self._settings = settings
        self._cancel_timer_locked()
        if settings.state is SettingsState.DISABLED_PENDING_REVERT:
            disabled_at = settings.deletion_confirmation_disabled_at or self._clock()
            remaining = (disabled_at + self.revert_after - self._clock()).total_seconds()
            self._schedule_locked(max(0.0, remaining))

    def _schedule_locked(self, delay: float) -> None:
        self._timer_generation += 1
        generation = self._timer_generation
        timer = self._timer_factory(delay, lambda: self._auto_revert(generation))
        self._timer = timer
        timer.start()
        logger.debug(f"Scheduled auto re-enable in {delay:.1f}s (generation {generation})")

    def _cancel_timer_locked(self) -> None:
        self._timer_generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _auto_revert(self, generation: int) -> None:
        try:
            with self._lock:
                if self._closed or generation != self._timer_generation:
                    raise TimerRaceError(f"timer generation {generation} is stale")
                if self._settings.show_deletion_confirmation:
                    raise TimerRaceError("deletion confirmation already re-enabled")
                self._timer = None
                enabled = AppSettings.enabled()
                self._repo.save_settings(enabled)
                self._apply_locked(enabled)
                self._notify_locked(AUTO_REVERT_TITLE, AUTO_REVERT_MESSAGE)
        except TimerRaceError as e:
            logger.debug(f"Auto re-enable skipped: {e}")
        except Exception as e:
            logger.error(f"Failed to re-enable deletion confirmation: {e}")
            return
        else:
            logger.info(AUTO_REVERT_MESSAGE)

    def _notify_locked(self, title: str, description: str) -> None:
        self._notification_seq += 1
        self._notifications.append(SettingsNotification(self._notification_seq, title, description))
        del self._notifications[:-MAX_NOTIFICATIONS]


def get_settings_state_machine() -> SettingsStateMachine:
    """
    Get the process-wide SettingsStateMachine, started.

    Uses @st.cache_resource so every session shares one subscription and
    at most one revert timer runs per process.
    """
    try:
        import streamlit as st
    except ImportError:
        return SettingsStateMachine.create_default().start()

    @st.cache_resource
    def _create_machine():
        return SettingsStateMachine.create_default().start()

    return _create_machine()
