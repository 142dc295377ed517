from django.urls import path

from bookings.handlers import (
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

urlpatterns = [
    path("auth/login", LoginView.as_view(), name="login"),
    path("auth/logout", LogoutView.as_view(), name="logout"),
    path("auth/me", SessionRoleView.as_view(), name="session-role"),
    path("events", EventListView.as_view(), name="event-list"),
    path("events.csv", EventCsvView.as_view(), name="event-csv"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("customers", CustomerListView.as_view(), name="customer-list"),
    path("customers/<str:customer_id>", CustomerDetailView.as_view(), name="customer-detail"),
    path("calendar/<int:year>/<int:month>", CalendarMonthView.as_view(), name="calendar-month"),
    path("backup/export", BackupExportView.as_view(), name="backup-export"),
    path("backup/import", BackupImportView.as_view(), name="backup-import"),
]
