"""Tests for the password strength tracker."""

from formfield.core.password_strength import PasswordStrengthState, compute_strength
from formfield.form.password_tracker import PasswordStrengthTracker, TrackerPhase


class TestInitialState:
    def test_starts_clean_and_all_false(self, qapp, empty_reader):
        tracker = PasswordStrengthTracker(empty_reader)
        assert tracker.phase is TrackerPhase.CLEAN
        assert not tracker.is_dirty
        assert tracker.state == PasswordStrengthState()

    def test_starts_from_current_value(self, qapp, reader):
        tracker = PasswordStrengthTracker(reader)
        assert tracker.state == compute_strength("Secret1!")


class TestRecompute:
    def test_recomputes_on_watched_change(self, qapp, empty_reader):
        tracker = PasswordStrengthTracker(empty_reader)
        emitted = []
        tracker.strength_changed.connect(emitted.append)

        tracker.on_value_changed("password", "abcdefgh")
        assert tracker.state == compute_strength("abcdefgh")
        assert emitted == [compute_strength("abcdefgh")]

    def test_ignores_other_fields(self, qapp, empty_reader):
        tracker = PasswordStrengthTracker(empty_reader)
        tracker.on_value_changed("username", "Abcdef1!")
        assert tracker.state == PasswordStrengthState()

    def test_same_value_is_not_recomputed(self, qapp, empty_reader):
        """Test a repeated notification for the same value emits nothing."""
        tracker = PasswordStrengthTracker(empty_reader)
        emitted = []
        tracker.strength_changed.connect(emitted.append)

        tracker.on_value_changed("password", "Abc")
        tracker.on_value_changed("password", "Abc")
        assert len(emitted) == 1

    def test_recomputes_while_clean(self, qapp, empty_reader):
        """Test strength is ready before the first focus."""
        tracker = PasswordStrengthTracker(empty_reader)
        tracker.on_value_changed("password", "Abcdef1!")
        assert not tracker.is_dirty
        assert tracker.state.is_strong

    def test_refresh_reads_reader(self, qapp, empty_reader):
        tracker = PasswordStrengthTracker(empty_reader)
        empty_reader.values["password"] = "ABCDEFGH"
        tracker.refresh()
        assert tracker.state == compute_strength("ABCDEFGH")

    def test_custom_field_name(self, qapp, empty_reader):
        tracker = PasswordStrengthTracker(empty_reader, field_name="new_password")
        tracker.on_value_changed("password", "Abcdef1!")
        assert tracker.state == PasswordStrengthState()
        tracker.on_value_changed("new_password", "Abcdef1!")
        assert tracker.state.is_strong


class TestDirtyPhase:
    def test_first_focus_flips_once(self, qapp, empty_reader):
        tracker = PasswordStrengthTracker(empty_reader)
        flips = []
        tracker.dirty_changed.connect(flips.append)

        assert tracker.mark_focused()
        assert not tracker.mark_focused()
        assert tracker.phase is TrackerPhase.DIRTY
        assert flips == [True]

    def test_value_change_does_not_dirty(self, qapp, empty_reader):
        tracker = PasswordStrengthTracker(empty_reader)
        tracker.on_value_changed("password", "abc")
        assert tracker.phase is TrackerPhase.CLEAN
