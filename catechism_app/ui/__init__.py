"""Qt UI components for the admin console."""

from .admin_login_dialog import AdminLoginDialog
from .admin_main_window import AdminMainWindow
from .dialog_helpers import (
    confirm_lock_all,
    show_error,
    show_info,
)

__all__ = [
    "AdminLoginDialog",
    "AdminMainWindow",
    "confirm_lock_all",
    "show_error",
    "show_info",
]
