from bookings.handlers.views import (
    BackupExportView,
    BackupImportView,
    CalendarMonthView,
    CustomerDetailView,
    CustomerListView,
    EventCsvView,
    EventDetailView,
    EventListView,
    LoginView,
    LogoutView,
    SessionRoleView,
)

__all__ = [
    "BackupExportView",
    "BackupImportView",
    "CalendarMonthView",
    "CustomerDetailView",
    "CustomerListView",
    "EventCsvView",
    "EventDetailView",
    "EventListView",
    "LoginView",
    "LogoutView",
    "SessionRoleView",
]
