"""Shared pytest fixtures: roster, sources and a temporary JSON-backed portal."""

import pytest

from config import PortalConfig
from core.models import ActivityEntry, Identity, SourceRows
from database.store import JsonTableStore
from services.portal_service import PortalService

ADMIN_NAME = "Portal-Admin"
ADMIN_TOKEN = "ADMIN-TOKEN-2026"

USERS_SHEET = [
    ["Name", "Intern ID", "Status", "Monitors and Members", "Email"],
    ["Shivam Kumar Jha", "CIAL-001", "Active", "TRUE", "shivam@example.com"],
    ["Shiva Rama Krishna Boga", "CIAL-002", "Active", "FALSE", "Shiva.Boga@Example.com"],
    ["Anita Sharma", "CIAL-003", "Active", "", ""],
    ["Kanishka Rao", "CIAL-004", "Inactive", "false", ""],
]

MONITOR_HEADER = ["Timestamp", "Email Address", "Name", "Course", "Time", "Issues", "Learning"]

M1_SHEET = [
    MONITOR_HEADER,
    ["23-01-2026 • 21:30", "shivam@example.com", "Shivam", "Python", "2h", "No", "Loops"],
    ["01/10/2026 9:05 AM", "", "Shivam Kumar", "Python", "1h", "No", "Functions"],
    ["pending", "shivam@example.com", "Shivam Kumar Jha", "Python", "1h", "No", "Ignored"],
    ["13/02/2026 08:00", "anita@example.com", "Anita Sharma", "SQL", "3h", "No", "Joins"],
]

M2_SHEET = [
    MONITOR_HEADER,
    ["24/01/2026 10:15:00", "SHIVA.BOGA@example.com", "S R K Boga", "Cloud", "1h", "No", "VPC"],
    ["25/01/2026", "", "Kanishk", "Cloud", "1h", "No", "IAM"],
]

LOGS_SHEET = [
    ["Name", "Date", "Category", "Summary", "Proof", "File", "Duration"],
    ["Shivam Kumar Jha", "Jan 5, 2026 • 21:30", "Python", "Classes", "https://proof/1", "", "2h"],
    ["Shiva", "2026-01-26", "", "Networking", "", "", ""],
    ["", "2026-01-27", "Python", "No author", "", "", ""],
]

PROFILES_SHEET = [
    ["Name", "Bio", "Photo", "LinkedIn", "Instagram"],
    ["Shivam Kumar Jha", "Backend intern", "https://photos/shivam.png", "", ""],
]

GROUPS_SHEET = [
    ["", "Monitor groups"],
    ["", "Shivam Kumar Jha", "Anita Sharma"],
    ["", "Shiva Rama Krishna Boga", "Kanishka Rao"],
    ["", "", "Someone Else"],
]


@pytest.fixture
def roster():
    return [
        Identity("Shivam Kumar Jha", "CIAL-001", "shivam@example.com"),
        Identity("Shiva Rama Krishna Boga", "CIAL-002", "shiva.boga@example.com"),
        Identity("Anita Sharma", "CIAL-003"),
    ]


@pytest.fixture
def monitor_source():
    return SourceRows("M1", [
        ActivityEntry("Shivam Kumar", "23-01-2026", None, source_tag="M1"),
        ActivityEntry("Somebody Else", "01/10/2026", "SHIVA.BOGA@example.com ", source_tag="M1"),
        ActivityEntry("Anita Sharma", "garbage", None, source_tag="M1"),
        ActivityEntry("Zed Unknown", "13/02/2026", None, source_tag="M1"),
    ])


@pytest.fixture
def log_source():
    return SourceRows("Activity Logs", [
        ActivityEntry("Shivam Kumar Jha", "Jan 5, 2026 • 21:30", category="Python", source_tag="Activity Logs"),
        ActivityEntry("Anita Sharma", "2026-01-24", category="SQL", source_tag="Activity Logs"),
        ActivityEntry("Zed Unknown", "12/31/2025", source_tag="Activity Logs"),
    ])


@pytest.fixture
def portal_config(tmp_path, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "testing")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("STORE_BACKEND", "json")
    monkeypatch.setenv("LOCK_TIMEOUT", "0.3")
    monkeypatch.setenv("LOG_TO_FILE", "false")
    monkeypatch.setenv("ADMIN_NAME", ADMIN_NAME)
    monkeypatch.setenv("ADMIN_CREDENTIAL", ADMIN_TOKEN)
    monkeypatch.delenv("SHEET_LEGACY", raising=False)
    monkeypatch.delenv("MONITOR_SHEET_COUNT", raising=False)
    return PortalConfig()


@pytest.fixture
def store(portal_config):
    store = JsonTableStore(portal_config.store.path)
    store.load_sheet(portal_config.sheets.users, USERS_SHEET)
    store.load_sheet("M1", M1_SHEET)
    store.load_sheet("M2", M2_SHEET)
    store.load_sheet(portal_config.sheets.logs, LOGS_SHEET)
    store.load_sheet(portal_config.sheets.profiles, PROFILES_SHEET)
    store.load_sheet(portal_config.sheets.groups, GROUPS_SHEET)
    return store


@pytest.fixture
def service(store, portal_config):
    return PortalService(store, portal_config)
