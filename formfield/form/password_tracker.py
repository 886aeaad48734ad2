from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from PySide6.QtCore import QObject, Signal

from formfield.config import PASSWORD_FIELD_NAME
from formfield.core.password_strength import PasswordStrengthState, compute_strength
from formfield.core.rules import FieldValueReader


logger = logging.getLogger(__name__)


class TrackerPhase(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"


class PasswordStrengthTracker(QObject):
    """
    Derived strength state for the watched password field.

    - Recomputes on every change of the watched value, in either phase.
    - CLEAN -> DIRTY happens once, on the first focus; it only gates display.
    - A notification carrying the last computed value is a no-op.

    Wire on_value_changed to the provider's value_changed signal.
    """

    strength_changed = Signal(object)  # PasswordStrengthState
    dirty_changed = Signal(bool)

    def __init__(
        self,
        reader: FieldValueReader,
        *,
        field_name: str = PASSWORD_FIELD_NAME,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._reader = reader
        self._field_name = field_name
        self._phase = TrackerPhase.CLEAN

        self._last_value: Optional[str] = reader.watch(field_name)
        self._state: PasswordStrengthState = compute_strength(self._last_value)

    @property
    def field_name(self) -> str:
        return self._field_name

    @property
    def state(self) -> PasswordStrengthState:
        return self._state

    @property
    def phase(self) -> TrackerPhase:
        return self._phase

    @property
    def is_dirty(self) -> bool:
        return self._phase is TrackerPhase.DIRTY

    def mark_focused(self) -> bool:
        """Returns True only for the focus that flipped CLEAN -> DIRTY."""
        if self._phase is TrackerPhase.DIRTY:
            return False
        self._phase = TrackerPhase.DIRTY
        self.dirty_changed.emit(True)
        return True

    def on_value_changed(self, name: str, value: object) -> None:
        if name != self._field_name:
            return
        self._recompute(None if value is None else str(value))

    def refresh(self) -> None:
        """Re-read the watched value through the reader."""
        self._recompute(self._reader.watch(self._field_name))

    def _recompute(self, value: Optional[str]) -> None:
        if value == self._last_value:
            return
        self._last_value = value

        state = compute_strength(value)
        if state == self._state:
            return
        self._state = state
        logger.debug("Strength for %r: %s", self._field_name, dict(state.items()))
        self.strength_changed.emit(state)
