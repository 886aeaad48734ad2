# formfield/ui/widgets/form_input.py
from __future__ import annotations

from typing import Dict, Optional

from PySide6.QtCore import Qt, QSignalBlocker
from PySide6.QtGui import QDoubleValidator
from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QGridLayout,
    QLabel,
    QLineEdit,
    QToolButton,
)

from formfield.core.descriptor import FieldDescriptor
from formfield.core.password_strength import BREAKDOWN_LABELS, PasswordStrengthState
from formfield.core.presentation import DisplayMessage, MessageKind, select_display_message
from formfield.core.rules import RuleName, ValidatorRegistry
from formfield.form.password_tracker import PasswordStrengthTracker
from formfield.form.state import FormStateProvider
from formfield.ui.widgets.field_binder import FieldBinder


COLOR_TEXT = "#213F7D"
COLOR_LABEL = "#545F7D"
COLOR_HINT = "#8A94A6"
COLOR_PRIMARY = "#39CDCC"
COLOR_ERROR = "#E4033B"
COLOR_SUCCESS = "#39CD62"
COLOR_BORDER = "rgba(84, 95, 125, 38)"
COLOR_DISABLED_BG = "#F4FEFB"


def theme_stylesheet(theme: str, *, disabled: bool = False, has_error: bool = False) -> str:
    """
    QLineEdit stylesheet for the given theme.
      - outline: white box, border turns red while an error is shown
      - plain: no border, transparent background
      - anything else: simple gray border
    """
    if theme == "outline":
        bg = COLOR_DISABLED_BG if disabled else "#ffffff"
        border = COLOR_ERROR if has_error else COLOR_BORDER
        focus = COLOR_ERROR if has_error else COLOR_PRIMARY
        return (
            "QLineEdit {"
            "padding: 8px;"
            f"background-color: {bg};"
            f"color: {COLOR_TEXT};"
            f"border: 1px solid {border};"
            "border-radius: 5px;"
            "}"
            "QLineEdit:focus {"
            f"border: 1px solid {focus};"
            "}"
        )
    if theme == "plain":
        return (
            "QLineEdit {"
            "padding: 8px;"
            "background-color: transparent;"
            "border: 1px solid transparent;"
            "}"
        )
    return (
        "QLineEdit {"
        "background-color: #ffffff;"
        "border: 1px solid #D1D5DB;"
        "}"
    )


class FormInput(QWidget):
    """
    Labeled text input bound to a FormStateProvider.

    Layout:
      - label (with "(optional)" suffix when configured)
      - [left] line edit [Show/Hide] [right]
      - one message line, or the five-row strength grid for password-rule fields

    Only one message is visible at a time; see select_display_message().
    """

    def __init__(
        self,
        provider: FormStateProvider,
        descriptor: FieldDescriptor,
        *,
        registry: Optional[ValidatorRegistry] = None,
        left: Optional[QWidget] = None,
        right: Optional[QWidget] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)

        self._provider = provider
        self._descriptor = descriptor
        self._custom_error: Optional[str] = descriptor.custom_error
        self._custom_message: Optional[str] = descriptor.custom_message
        self._hint: Optional[str] = descriptor.hint
        self._display: Optional[DisplayMessage] = None

        self._strength_labels: Dict[str, QLabel] = {}
        self.btn_toggle: Optional[QToolButton] = None
        self.lbl_title: Optional[QLabel] = None

        self._build_ui(left, right)

        self.binder = FieldBinder(provider, self.line_edit, descriptor, registry=registry, parent=self)
        self.tracker = PasswordStrengthTracker(provider, parent=self)

        self._wire()
        self._refresh()

    # ------------------------------------------------------------------
    # UI
    # ------------------------------------------------------------------
    def _build_ui(self, left: Optional[QWidget], right: Optional[QWidget]) -> None:
        d = self._descriptor

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(6)

        if d.class_name:
            self.setProperty("class", d.class_name)

        self.line_edit = QLineEdit()
        self.line_edit.setObjectName(d.field_id or d.name)
        self.line_edit.setPlaceholderText(d.placeholder)
        self.line_edit.setEnabled(not d.disabled)
        self.line_edit.setProperty("autocomplete", d.autocomplete)
        self.line_edit.setMinimumHeight(40)
        if d.input_type == "number":
            v = QDoubleValidator(self.line_edit)
            v.setNotation(QDoubleValidator.StandardNotation)
            self.line_edit.setValidator(v)
        self.line_edit.setTextMargins(
            d.padding_left if left is not None else 0,
            0,
            d.padding_right if right is not None else 0,
            0,
        )

        if d.label:
            title = d.label + (" (optional)" if d.optional else "")
            self.lbl_title = QLabel(title)
            self.lbl_title.setBuddy(self.line_edit)
            self.lbl_title.setStyleSheet(f"color: {COLOR_LABEL}; font-weight: 500;")
            root.addWidget(self.lbl_title)

        row = QHBoxLayout()
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(4)
        if left is not None:
            row.addWidget(left)
        row.addWidget(self.line_edit, 1)
        if d.is_password:
            self.btn_toggle = QToolButton()
            self.btn_toggle.setCursor(Qt.PointingHandCursor)
            self.btn_toggle.setFocusPolicy(Qt.TabFocus)
            self.btn_toggle.setStyleSheet(f"color: {COLOR_PRIMARY}; border: none; font-size: 11px;")
            self.btn_toggle.clicked.connect(self.toggle_password_visibility)
            row.addWidget(self.btn_toggle)
        if right is not None:
            row.addWidget(right)
        root.addLayout(row)

        self.lbl_message = QLabel()
        self.lbl_message.setWordWrap(True)
        self.lbl_message.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self.lbl_message.hide()
        root.addWidget(self.lbl_message)

        self.strength_box = QWidget()
        grid = QGridLayout(self.strength_box)
        grid.setContentsMargins(0, 0, 0, 0)
        grid.setHorizontalSpacing(16)
        grid.setVerticalSpacing(2)
        for i, (key, text) in enumerate(BREAKDOWN_LABELS):
            lbl = QLabel(f"*{text}")
            lbl.setAlignment((Qt.AlignRight if i % 2 else Qt.AlignLeft) | Qt.AlignVCenter)
            grid.addWidget(lbl, i // 2, i % 2)
            self._strength_labels[key] = lbl
        self.strength_box.hide()
        root.addWidget(self.strength_box)

    def _wire(self) -> None:
        self._provider.value_changed.connect(self.tracker.on_value_changed)
        self._provider.value_changed.connect(self._on_provider_value_changed)
        self._provider.field_state_changed.connect(self._on_field_state_changed)

        self.binder.focused.connect(self.tracker.mark_focused)
        self.binder.changed.connect(self._on_binder_changed)
        self.tracker.strength_changed.connect(self._on_strength_changed)
        self.tracker.dirty_changed.connect(self._on_strength_changed)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def descriptor(self) -> FieldDescriptor:
        return self._descriptor

    def value(self) -> str:
        return self.line_edit.text()

    def display_message(self) -> Optional[DisplayMessage]:
        return self._display

    def set_focused(self, focused: bool) -> None:
        self.binder.set_focus_request(focused)

    def set_custom_error(self, message: Optional[str]) -> None:
        self._custom_error = message or None
        self._refresh()

    def set_custom_message(self, message: Optional[str]) -> None:
        self._custom_message = message or None
        self._refresh()

    def set_hint(self, hint: Optional[str]) -> None:
        self._hint = hint or None
        self._refresh()

    def toggle_password_visibility(self) -> bool:
        visible = self.binder.toggle_secret()
        self._sync_toggle_text()
        return visible

    def is_password_visible(self) -> bool:
        return self.binder.is_secret_visible()

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------
    def _on_provider_value_changed(self, name: str, value: object) -> None:
        if name != self._descriptor.name:
            return
        text = "" if value is None else str(value)
        if self.line_edit.text() != text:
            blocker = QSignalBlocker(self.line_edit)
            try:
                self.line_edit.setText(text)
            finally:
                del blocker

    def _on_field_state_changed(self, name: str) -> None:
        if name == self._descriptor.name:
            self._refresh()

    def _on_binder_changed(self, _text: str) -> None:
        self._refresh()

    def _on_strength_changed(self, *_args: object) -> None:
        if self._descriptor.has_rule(RuleName.PASSWORD):
            self._refresh()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _refresh(self) -> None:
        state = self._provider.get_field_state(self._descriptor.name)
        error = state.error.message if state.error is not None else None

        self._display = select_display_message(
            has_password_rule=self._descriptor.has_rule(RuleName.PASSWORD),
            strength_dirty=self.tracker.is_dirty,
            strength=self.tracker.state,
            error=error,
            custom_error=self._custom_error,
            custom_message=self._custom_message,
            hint=self._hint,
        )

        self.line_edit.setStyleSheet(
            theme_stylesheet(
                self._descriptor.theme,
                disabled=self._descriptor.disabled,
                has_error=bool(error or self._custom_error),
            )
        )
        self._sync_toggle_text()
        self._render_message(self._display)

    def _render_message(self, display: Optional[DisplayMessage]) -> None:
        if display is None:
            self.lbl_message.hide()
            self.strength_box.hide()
            return

        if display.kind is MessageKind.STRENGTH:
            self.lbl_message.hide()
            self._render_strength(display.strength or PasswordStrengthState())
            self.strength_box.show()
            return

        self.strength_box.hide()
        if display.kind is MessageKind.ERROR:
            self.lbl_message.setText(f"*{display.text}")
            color = COLOR_ERROR
        elif display.kind is MessageKind.SUCCESS:
            self.lbl_message.setText(display.text)
            color = COLOR_SUCCESS
        else:
            self.lbl_message.setText(display.text)
            color = COLOR_HINT
        self.lbl_message.setStyleSheet(f"color: {color}; font-size: 11px;")
        self.lbl_message.show()

    def _render_strength(self, strength: PasswordStrengthState) -> None:
        for key, ok in strength.items():
            lbl = self._strength_labels[key]
            lbl.setProperty("passed", ok)
            lbl.setStyleSheet(f"color: {COLOR_SUCCESS if ok else COLOR_ERROR}; font-size: 11px;")

    def _sync_toggle_text(self) -> None:
        if self.btn_toggle is not None:
            self.btn_toggle.setText("HIDE" if self.binder.is_secret_visible() else "SHOW")
