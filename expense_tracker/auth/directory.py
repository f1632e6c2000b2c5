"""
Account Directory

Registration, login/logout, the single active session, and profile changes.

SECURITY NOTE: Credentials are stored and compared as plain text, exactly as
given at registration. This keeps existing data files working; it is not a
safe design and should be replaced by a salted hash before this layer is
exposed beyond a single local user.
"""

from decimal import Decimal
from typing import Optional, Union

from expense_tracker.audit import AuditLogger
from expense_tracker.models.records import User, to_decimal
from expense_tracker.services.storage import RecordStoreInterface, StorageError
from expense_tracker.validation import AccountValidator, ValidationError

Amount = Union[Decimal, int, float, str]


class AccountDirectory:
    """
    Manages user accounts and the current session.

    The session user is a working copy of the stored record. It is replaced
    only after a successful write, so a failed save leaves it unchanged.
    """

    def __init__(
        self,
        store: RecordStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._validator = AccountValidator(store)
        self._current_user: Optional[User] = None

    # -------------------------------------------------------------------------
    # Registration and session
    # -------------------------------------------------------------------------

    def register(
        self,
        username: str,
        password: str,
        email: str,
        full_name: str,
    ) -> bool:
        """
        Create a new user with a zero monthly budget.

        Returns:
            True when the user was saved, False when the write failed

        Raises:
            ValidationError: Malformed username/email, short password,
                             or a username that is already taken
        """
        result = self._validator.validate_registration(username, password, email)
        if not result.is_valid:
            error = ValidationError.from_result(result)
            self._audit.log_registration_rejected(username, error.field, error.message)
            raise error

        user = User(
            username=username,
            password_secret=password,
            email=email,
            full_name=full_name,
        )
        try:
            self._store.save_user(user)
        except StorageError as e:
            self._audit.log_storage_failure("register", str(e), entity_id=username)
            return False

        self._audit.log_user_registered(username)
        return True

    def login(self, username: str, password: str) -> bool:
        """
        Start a session if the password matches the stored one exactly.

        Unknown users and wrong passwords are indistinguishable to the caller.
        """
        user = self._store.get_user(username)
        if user is None or user.password_secret != password:
            self._audit.log_login(username, success=False)
            return False

        self._current_user = user
        self._audit.log_login(username, success=True)
        return True

    def logout(self) -> None:
        if self._current_user is not None:
            self._audit.log_logout(self._current_user.username)
        self._current_user = None

    def get_current_user(self) -> Optional[User]:
        return self._current_user

    def is_logged_in(self) -> bool:
        return self._current_user is not None

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    def update_profile(
        self,
        full_name: str,
        email: str,
        monthly_budget: Amount,
    ) -> bool:
        """
        Change the session user's name, email and monthly budget.

        Name and email are not re-validated here, unlike at registration.

        Returns:
            False if nobody is logged in or the write failed

        Raises:
            ValidationError: If monthly_budget is negative
        """
        if self._current_user is None:
            return False

        budget = to_decimal(monthly_budget)
        if budget < 0:
            raise ValidationError("monthly_budget", "Monthly budget cannot be negative")

        updated = self._current_user.model_copy(update={
            "full_name": full_name,
            "email": email,
            "monthly_budget": budget,
        })
        if not self._persist(updated, "update_profile"):
            return False

        self._audit.log_profile_updated(updated.username, budget)
        return True

    def change_password(self, old_password: str, new_password: str) -> bool:
        """
        Replace the session user's password.

        The old password must match exactly. No length rule is applied to the
        new password at this layer.
        """
        user = self._current_user
        if user is None or user.password_secret != old_password:
            if user is not None:
                self._audit.log_password_changed(user.username, success=False)
            return False

        updated = user.model_copy(update={"password_secret": new_password})
        if not self._persist(updated, "change_password"):
            return False

        self._audit.log_password_changed(updated.username, success=True)
        return True

    def _persist(self, updated: User, operation: str) -> bool:
        try:
            self._store.save_user(updated)
        except StorageError as e:
            self._audit.log_storage_failure(operation, str(e), entity_id=updated.username)
            return False
        self._current_user = updated
        return True
