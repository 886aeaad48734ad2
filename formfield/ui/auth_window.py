from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QMessageBox,
)

from formfield.config import Settings
from formfield.core.descriptor import FieldDescriptor
from formfield.core.rules import ValidationResult, ValidatorRegistry
from formfield.form.state import FormStateProvider
from formfield.ui.widgets.form_input import FormInput


logger = logging.getLogger(__name__)


def sign_up_fields(theme: str = "outline") -> List[FieldDescriptor]:
    return [
        FieldDescriptor(
            name="username",
            label="Username",
            placeholder="Choose a username",
            rules=["required", "noSpaces"],
            theme=theme,
            focused=True,
            hint="Letters and digits, no spaces.",
        ),
        FieldDescriptor(
            name="email",
            label="Email",
            input_type="email",
            placeholder="you@example.com",
            rules=["required", "email"],
            theme=theme,
        ),
        FieldDescriptor(
            name="phone",
            label="Phone",
            input_type="tel",
            placeholder="08012345678",
            rules=["phone"],
            theme=theme,
            optional=True,
        ),
        FieldDescriptor(
            name="password",
            label="Password",
            input_type="password",
            rules=["required", "password"],
            theme=theme,
        ),
        FieldDescriptor(
            name="confirm_password",
            label="Confirm Password",
            input_type="password",
            rules=["required", "confirmPassword"],
            theme=theme,
        ),
        FieldDescriptor(
            name="otp",
            label="OTP",
            placeholder="6-digit code",
            rules=["required", "otp"],
            pattern=r"^[0-9]*$",
            theme=theme,
        ),
    ]


class AuthWindow(QWidget):
    """
    Sign-up page:
    - Title
    - Username / Email / Phone / Password / Confirm Password / OTP
    - Submit: validates every field, focuses the first invalid one
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or Settings()
        self.setWindowTitle("Sign up")

        self.provider = FormStateProvider(mode=self._settings.validation_mode, parent=self)
        self._registry = ValidatorRegistry(self.provider)
        self.inputs: Dict[str, FormInput] = {}

        root = QVBoxLayout(self)
        root.setContentsMargins(40, 40, 40, 40)
        root.setSpacing(16)

        title = QLabel("Welcome!")
        title_font = title.font()
        title_font.setBold(True)
        title_font.setPointSize(title_font.pointSize() + 8)
        title.setFont(title_font)
        root.addWidget(title)

        subtitle = QLabel("Enter details to create an account.")
        subtitle.setAlignment(Qt.AlignLeft)
        root.addWidget(subtitle)

        for descriptor in sign_up_fields(self._settings.theme):
            field = FormInput(self.provider, descriptor, registry=self._registry)
            self.inputs[descriptor.name] = field
            root.addWidget(field)

        self.btn_submit = QPushButton("SIGN UP")
        self.btn_submit.setEnabled(False)
        self.btn_submit.clicked.connect(
            self.provider.handle_submit(self._on_valid, self._on_invalid)
        )
        self.provider.form_state_changed.connect(self._on_form_state_changed)

        btn_row = QHBoxLayout()
        btn_row.setContentsMargins(0, 0, 0, 0)
        btn_row.addWidget(self.btn_submit)
        btn_row.addStretch(1)
        root.addLayout(btn_row)
        root.addStretch(1)

    def _on_form_state_changed(self) -> None:
        self.btn_submit.setEnabled(self.provider.is_dirty)

    def _on_valid(self, values: Dict[str, Optional[str]]) -> None:
        logger.info("Sign-up form submitted for %r", values.get("username"))
        QMessageBox.information(self, "Information", "Account details are valid.")

    def _on_invalid(self, result: ValidationResult) -> None:
        QMessageBox.warning(
            self,
            "Validation Error",
            "Please fix the following issues:\n\n" + "\n".join(result.messages()),
        )
