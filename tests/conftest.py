"""
Shared fixtures: in-memory database, report factories, API client
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jalpan.infrastructure.database.session import Base, get_db
from jalpan.domain.inspection import models  # noqa: F401
from jalpan.domain.inspection.catalog import CategoryCatalog
from jalpan.domain.inspection.exceptions import ReportNotFinalizedError
from jalpan.domain.inspection.schemas import DailyReport, InspectionItem, Status, build_blank_report
from jalpan.domain.inspection.session_manager import FormSessionManager, get_form_session_manager
from jalpan.reporting.pdf_export import get_pdf_exporter


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalog():
    return CategoryCatalog()


@pytest.fixture
def blank_report(catalog):
    return build_blank_report("2024-05-01", catalog.categories, timestamp=1714550400000)


def make_report(report_date, statuses, finalized=True, inspector="Ravi", actions="", completion_time="11:20 AM"):
    """Report with one item per (category, status) pair"""
    items = [
        InspectionItem(
            id=f"{report_date}-{index}",
            category=category,
            status=status,
            counter_incharge="Suresh",
            inspector_name=inspector,
            timestamp=1714550400000,
        )
        for index, (category, status) in enumerate(statuses)
    ]
    return DailyReport(
        date=report_date,
        items=items,
        inspector_name=inspector,
        actions_taken=actions,
        completion_time=completion_time if finalized else None,
        finalized=finalized,
    )


@pytest.fixture
def report_factory():
    return make_report


def fill_valid(form):
    """Fill every required field of a default-catalog form"""
    form.set_inspector_name("Ravi Kumar")
    for index, item in enumerate(form.items):
        form.set_status(index, Status.GOOD)
        form.update_item(index, counter_incharge=f"Incharge {index}")
        config = form.catalog.config_for(item.category)
        if config.sub_item_waiver_value is not None:
            form.select_sub_item_choice(index, config.sub_item_waiver_value)
        elif config.requires_sub_item:
            form.update_item(index, sub_item="Kheer")
    return form


@pytest.fixture
def fill_form():
    return fill_valid


class FakeLLM:
    """Stand-in chat client"""

    def __init__(self, reply="Service was good today.", api_key="sk-test", error=None):
        self.reply = reply
        self.api_key = api_key
        self.error = error
        self.calls = []

    @property
    def has_api_key(self):
        return bool(self.api_key)

    def complete(self, system_prompt, user_prompt, temperature=None, max_tokens=None):
        self.calls.append((system_prompt, user_prompt))
        if self.error:
            raise self.error
        return self.reply


class FakeExporter:
    """PDF exporter that skips wkhtmltopdf"""

    def __init__(self):
        self.exported = []

    def export_report(self, report):
        if not report.finalized:
            raise ReportNotFinalizedError("not finalized")
        self.exported.append(report.date)
        return b"%PDF-1.4 fake", f"Jalpan_Quality_Report_{report.display_date}.pdf"

    def export_summary(self, stats, start, end):
        self.exported.append((start, end))
        return b"%PDF-1.4 fake", f"Jalpan_Summary_{start}_to_{end}.pdf"


@pytest.fixture
def form_manager():
    return FormSessionManager()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def fake_exporter():
    return FakeExporter()


@pytest.fixture
def client(session_factory, form_manager, fake_llm, fake_exporter):
    from jalpan.main import app
    from jalpan.api.v1.endpoints.inspection.reports import get_summary_llm

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_form_session_manager] = lambda: form_manager
    app.dependency_overrides[get_pdf_exporter] = lambda: fake_exporter
    app.dependency_overrides[get_summary_llm] = lambda: fake_llm

    # no context manager: the lifespan would create tables on the configured database
    yield TestClient(app)

    app.dependency_overrides.clear()
