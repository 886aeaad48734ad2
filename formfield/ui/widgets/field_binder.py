# formfield/ui/widgets/field_binder.py
from __future__ import annotations

import logging
from typing import Callable, List, Optional

import shiboken6
from PySide6.QtCore import QEvent, QObject, Signal
from PySide6.QtWidgets import QLineEdit

from formfield.core.descriptor import FieldDescriptor
from formfield.core.rules import FieldConstraints, ValidatorRegistry, build_constraints
from formfield.form.state import FormStateProvider, Registration


logger = logging.getLogger(__name__)


class FieldBinder(QObject):
    """
    Adapts one QLineEdit to the form state provider.

    Behavior:
      - Registers the field (composed rules + pattern/min/max) under descriptor.name.
      - On user edits runs an ordered handler list: provider first, caller's on_change second.
      - Forwards blur to the provider; emits focused/blurred for the owning widget.
      - Focus request: focuses the input the first time it is shown, and again
        whenever the request goes False -> True while shown.
      - Password fields: local masked/plain toggle; never touches the stored value.

    Emits:
      - changed(str) after all change handlers ran
      - focused()
      - blurred()
    """

    changed = Signal(str)
    focused = Signal()
    blurred = Signal()

    def __init__(
        self,
        provider: FormStateProvider,
        edit: QLineEdit,
        descriptor: FieldDescriptor,
        *,
        registry: Optional[ValidatorRegistry] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent if parent is not None else edit)

        self._provider = provider
        self._edit = edit
        self._descriptor = descriptor

        self._constraints: FieldConstraints = build_constraints(
            descriptor.rule_names,
            descriptor.resolved_label,
            registry if registry is not None else ValidatorRegistry(provider),
            pattern=descriptor.pattern,
            min_value=descriptor.min_value,
            max_value=descriptor.max_value,
            custom_error=descriptor.custom_error,
        )
        self._registration: Registration = provider.register(descriptor.name, self._constraints)
        self._registration.set_ref(edit)

        self._change_handlers: List[Callable[[str], None]] = [
            self._registration.on_change,
            descriptor.on_change,
        ]

        self._focus_requested: bool = descriptor.focused
        self._focus_applied: bool = False
        self._secret_visible: bool = descriptor.show_password

        initial = provider.watch(descriptor.name)
        if initial:
            edit.setText(initial)

        edit.textEdited.connect(self._on_text_edited)
        edit.installEventFilter(self)
        self._apply_echo_mode()

    # -------------------------
    # Public API
    # -------------------------
    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def constraints(self) -> FieldConstraints:
        return self._constraints

    def handle_change(self, value: str) -> None:
        for handler in self._change_handlers:
            handler(value)
        self.changed.emit(value)

    def set_focus_request(self, requested: bool) -> None:
        was_requested = self._focus_requested
        self._focus_requested = bool(requested)
        if not self._focus_requested:
            return
        if self._edit.isVisible() and (not was_requested or not self._focus_applied):
            self._focus_now()

    def is_secret_visible(self) -> bool:
        return self._secret_visible

    def toggle_secret(self) -> bool:
        self._secret_visible = not self._secret_visible
        self._apply_echo_mode()
        return self._secret_visible

    def unbind(self) -> None:
        if shiboken6.isValid(self._edit):
            self._edit.removeEventFilter(self)
            self._edit.textEdited.disconnect(self._on_text_edited)
        if self._provider.is_registered(self.name):
            self._provider.unregister(self.name)

    # -------------------------
    # Qt hooks
    # -------------------------
    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self._edit:
            kind = event.type()
            if kind == QEvent.Type.FocusIn:
                self.focused.emit()
            elif kind == QEvent.Type.FocusOut:
                self._registration.on_blur()
                self.blurred.emit()
            elif kind == QEvent.Type.Show and self._focus_requested and not self._focus_applied:
                self._focus_now()
        return super().eventFilter(watched, event)

    # -------------------------
    # Internal
    # -------------------------
    def _on_text_edited(self, text: str) -> None:
        self.handle_change(text)

    def _focus_now(self) -> None:
        self._focus_applied = True
        logger.debug("Focusing field %r", self.name)
        self._edit.setFocus()

    def _apply_echo_mode(self) -> None:
        if not self._descriptor.is_password:
            return
        mode = QLineEdit.EchoMode.Normal if self._secret_visible else QLineEdit.EchoMode.Password
        self._edit.setEchoMode(mode)
