from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional

import shiboken6
from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QWidget

from formfield.config import VALIDATION_MODES, Settings
from formfield.core.errors import DuplicateFieldError, UnknownFieldError
from formfield.core.rules import ValidationResult
from formfield.core.rules.constraints import FieldConstraints


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FieldError:
    type: str
    message: str


@dataclass(slots=True)
class FieldState:
    """
    Snapshot of one field's state.

    - error: first failing check (min, max, pattern, then rules in order)
    - errors: every failing check, keyed by check name
    """
    error: Optional[FieldError] = None
    errors: Dict[str, str] = field(default_factory=dict)
    is_dirty: bool = False
    is_touched: bool = False
    is_validated: bool = False

    @property
    def invalid(self) -> bool:
        return self.error is not None


@dataclass(frozen=True, slots=True)
class Registration:
    """Handlers a field binder wires into its input."""
    name: str
    on_change: Callable[[str], None]
    on_blur: Callable[[], None]
    set_ref: Callable[[Optional[QWidget]], None]


@dataclass(slots=True)
class _FieldEntry:
    constraints: FieldConstraints
    ref: Optional[QWidget] = None
    # Identifies the current ref, so a replaced widget's teardown is ignored.
    ref_token: Optional[object] = None


class FormStateProvider(QObject):
    """
    Canonical value/error store for one form instance.

    Emission order for one change:
      1. value stored, field (and its dependents) re-validated
      2. value_changed(name, value)
      3. field_state_changed(name) for every field whose state was touched
      4. form_state_changed() when form-level dirtiness flipped

    Modes:
      - on_change: validate on every change
      - on_blur: validate on blur; after the first submit also on change
      - on_submit: validate on submit; after the first submit also on change
    """

    value_changed = Signal(str, object)
    field_state_changed = Signal(str)
    form_state_changed = Signal()

    def __init__(
        self,
        default_values: Optional[Mapping[str, Optional[str]]] = None,
        *,
        mode: Optional[str] = None,
        settings: Optional[Settings] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)

        if mode is None:
            mode = (settings or Settings()).validation_mode
        if mode not in VALIDATION_MODES:
            raise ValueError(f"Unknown validation mode {mode!r}; expected one of {', '.join(VALIDATION_MODES)}.")
        self._mode: str = mode

        self._defaults: Dict[str, Optional[str]] = dict(default_values or {})
        self._values: Dict[str, Optional[str]] = {}
        self._fields: Dict[str, _FieldEntry] = {}
        self._states: Dict[str, FieldState] = {}
        self._submit_count: int = 0

    # -------------------------
    # Registration
    # -------------------------
    def register(self, name: str, constraints: FieldConstraints) -> Registration:
        if name in self._fields:
            raise DuplicateFieldError(name)

        self._fields[name] = _FieldEntry(constraints=constraints)
        self._values[name] = self._defaults.get(name)
        self._states[name] = FieldState()
        logger.debug("Registered field %r (rules=%s)", name, [r.value for r in constraints.rules])

        return Registration(
            name=name,
            on_change=lambda value: self._on_field_change(name, value),
            on_blur=lambda: self._on_field_blur(name),
            set_ref=lambda widget: self._set_ref(name, widget),
        )

    def unregister(self, name: str) -> None:
        if name not in self._fields:
            raise UnknownFieldError(name)
        del self._fields[name]
        self._states.pop(name, None)
        self._values.pop(name, None)
        logger.debug("Unregistered field %r", name)
        self.form_state_changed.emit()

    def is_registered(self, name: str) -> bool:
        return name in self._fields

    # -------------------------
    # Read access
    # -------------------------
    @property
    def mode(self) -> str:
        return self._mode

    def watch(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def get_values(self) -> Dict[str, Optional[str]]:
        return {name: self._values.get(name) for name in self._fields}

    def get_field_state(self, name: str) -> FieldState:
        state = self._states.get(name)
        if state is None:
            return FieldState()
        return FieldState(
            error=state.error,
            errors=dict(state.errors),
            is_dirty=state.is_dirty,
            is_touched=state.is_touched,
            is_validated=state.is_validated,
        )

    @property
    def is_dirty(self) -> bool:
        return any(s.is_dirty for s in self._states.values())

    @property
    def dirty_fields(self) -> FrozenSet[str]:
        return frozenset(n for n, s in self._states.items() if s.is_dirty)

    @property
    def touched_fields(self) -> FrozenSet[str]:
        return frozenset(n for n, s in self._states.items() if s.is_touched)

    @property
    def submit_count(self) -> int:
        return self._submit_count

    @property
    def is_submitted(self) -> bool:
        return self._submit_count > 0

    # -------------------------
    # Write access
    # -------------------------
    def set_value(self, name: str, value: Optional[str], *, validate: bool = False) -> None:
        if name not in self._fields:
            raise UnknownFieldError(name)
        self._apply_value(name, value, validate=validate)

    def trigger(self, name: Optional[str] = None) -> bool:
        """
        Validate one field (or all when name is None) and return True if valid.
        """
        if name is not None and name not in self._fields:
            raise UnknownFieldError(name)

        names = [name] if name is not None else list(self._fields)
        ok = True
        for n in names:
            if self._validate_field(n).invalid:
                ok = False
        for n in names:
            self.field_state_changed.emit(n)
        return ok

    def validate_all(self) -> ValidationResult:
        self.trigger()
        result = ValidationResult()
        for name in self._fields:
            state = self._states[name]
            if state.error is not None:
                result.add_field_error(name, state.error.message)
        return result

    def submit(
        self,
        on_valid: Callable[[Dict[str, Optional[str]]], None],
        on_invalid: Optional[Callable[[ValidationResult], None]] = None,
    ) -> ValidationResult:
        self._submit_count += 1
        result = self.validate_all()

        if result.ok:
            logger.debug("Submit #%d valid", self._submit_count)
            on_valid(self.get_values())
        else:
            logger.debug("Submit #%d invalid: %s", self._submit_count, list(result.field_errors))
            self.set_focus(next(iter(result.field_errors)))
            if on_invalid is not None:
                on_invalid(result)

        self.form_state_changed.emit()
        return result

    def handle_submit(
        self,
        on_valid: Callable[[Dict[str, Optional[str]]], None],
        on_invalid: Optional[Callable[[ValidationResult], None]] = None,
    ) -> Callable[..., ValidationResult]:
        """
        Returns a slot suitable for QPushButton.clicked (extra args are ignored).
        """
        def _submit(*_args: object) -> ValidationResult:
            return self.submit(on_valid, on_invalid)

        return _submit

    def reset(self, values: Optional[Mapping[str, Optional[str]]] = None) -> None:
        if values is not None:
            self._defaults = dict(values)

        self._submit_count = 0
        for name in self._fields:
            self._values[name] = self._defaults.get(name)
            self._states[name] = FieldState()

        for name in self._fields:
            self.value_changed.emit(name, self._values[name])
        for name in self._fields:
            self.field_state_changed.emit(name)
        self.form_state_changed.emit()

    def set_focus(self, name: str) -> None:
        entry = self._fields.get(name)
        if entry is None:
            raise UnknownFieldError(name)
        if entry.ref is not None and shiboken6.isValid(entry.ref):
            entry.ref.setFocus()

    # -------------------------
    # Registration handlers
    # -------------------------
    def _on_field_change(self, name: str, value: str) -> None:
        if name not in self._fields:
            logger.warning("Change for unregistered field %r ignored.", name)
            return
        self._apply_value(name, value, validate=self._validates_on_change())

    def _on_field_blur(self, name: str) -> None:
        state = self._states.get(name)
        if state is None:
            return
        state.is_touched = True
        if self._mode == "on_blur":
            self._validate_field(name)
        self.field_state_changed.emit(name)

    def _set_ref(self, name: str, widget: Optional[QWidget]) -> None:
        entry = self._fields.get(name)
        if entry is None:
            return
        token = object()
        entry.ref = widget
        entry.ref_token = token
        if widget is not None:
            widget.destroyed.connect(lambda *_: self._on_ref_destroyed(name, entry, token))

    def _on_ref_destroyed(self, name: str, entry: _FieldEntry, token: object) -> None:
        # The input went away with its widget; its rules must not outlive it.
        if not shiboken6.isValid(self):
            return
        if self._fields.get(name) is not entry or entry.ref_token is not token:
            return
        logger.debug("Input for field %r destroyed; unregistering.", name)
        self.unregister(name)

    # -------------------------
    # Internal
    # -------------------------
    def _validates_on_change(self) -> bool:
        return self._mode == "on_change" or self.is_submitted

    def _apply_value(self, name: str, value: Optional[str], *, validate: bool) -> None:
        was_dirty = self.is_dirty

        self._values[name] = value
        state = self._states[name]
        state.is_dirty = (value or "") != (self._defaults.get(name) or "")

        changed = [name]
        if validate:
            self._validate_field(name)
        changed.extend(self._revalidate_dependents(name))

        self.value_changed.emit(name, value)
        for n in changed:
            self.field_state_changed.emit(n)
        if was_dirty != self.is_dirty:
            self.form_state_changed.emit()

    def _revalidate_dependents(self, name: str) -> List[str]:
        """
        Re-run fields whose rules read `name` (confirmPassword -> password),
        but only those that already showed a result.
        """
        dependents = []
        for other, entry in self._fields.items():
            if other == name or name not in entry.constraints.depends_on:
                continue
            if self._states[other].is_validated:
                self._validate_field(other)
                dependents.append(other)
        return dependents

    def _validate_field(self, name: str) -> FieldState:
        entry = self._fields[name]
        state = self._states[name]

        failures = entry.constraints.evaluate(self._values.get(name))
        state.errors = failures
        state.is_validated = True
        if failures:
            kind, message = next(iter(failures.items()))
            state.error = FieldError(type=kind, message=message)
        else:
            state.error = None

        logger.debug("Validated %r: %s", name, failures or "ok")
        return state
