import pytest
from datetime import timedelta
from decimal import Decimal
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from hospital_core.main import app
from hospital_core.infrastructure.database import get_db, init_db
from hospital_core.domain.directory.models import StaffRole
from hospital_core.domain.directory.service import DirectoryService
from hospital_core.domain.ipd.models import AdmissionRequestStatus, PaymentMethod
from hospital_core.domain.ipd.service import WardService, AdmissionService, LedgerService
from hospital_core.utils.timezone import utcnow


# Test database URL
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh in-memory database and session for each test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    TestSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ==================== Services ====================

@pytest.fixture
def directory_service(db_session: Session) -> DirectoryService:
    return DirectoryService(db_session)


@pytest.fixture
def ward_service(db_session: Session) -> WardService:
    return WardService(db_session)


@pytest.fixture
def admission_service(db_session: Session) -> AdmissionService:
    return AdmissionService(db_session)


@pytest.fixture
def ledger_service(db_session: Session) -> LedgerService:
    return LedgerService(db_session)


# ==================== Directory Data ====================

@pytest.fixture
def patient(directory_service: DirectoryService):
    """Registered patient."""
    return directory_service.register_patient(first_name="Ravi", last_name="Kumar", phone="+919800000001")


@pytest.fixture
def doctor(directory_service: DirectoryService):
    """Staff member with the doctor role."""
    return directory_service.add_staff(name="Dr. Meera Iyer", role=StaffRole.DOCTOR, department="Medicine")


@pytest.fixture
def receptionist(directory_service: DirectoryService):
    """Front desk user who admits patients."""
    return directory_service.add_staff(name="Anil Das", role=StaffRole.RECEPTIONIST)


# ==================== Ward & Bed Data ====================

@pytest.fixture
def ward(ward_service: WardService):
    return ward_service.create_ward(name="General Ward A", capacity=10, floor="1")


@pytest.fixture
def bed_type(ward_service: WardService, ward):
    """Bed type charging 1500.00 per day."""
    return ward_service.create_bed_type(
        ward_id=ward.id,
        name="General",
        daily_rate=Decimal("1500.00"),
        amenities=["Oxygen", "Call bell"],
    )


@pytest.fixture
def bed(ward_service: WardService, ward, bed_type):
    return ward_service.create_bed(ward_id=ward.id, bed_type_id=bed_type.id, bed_number="A-101")


@pytest.fixture
def other_bed(ward_service: WardService, ward, bed_type):
    return ward_service.create_bed(ward_id=ward.id, bed_type_id=bed_type.id, bed_number="A-102")


# ==================== Admission Data ====================

@pytest.fixture
def pending_request(admission_service: AdmissionService, patient, doctor):
    """Admission request in PENDING."""
    result = admission_service.create_request(
        patient_id=patient.id,
        doctor_id=doctor.id,
        diagnosis="Community acquired pneumonia",
        chief_complaint="Fever and cough",
        estimated_stay=4,
    )
    return result.request


@pytest.fixture
def deposit_paid_request(admission_service: AdmissionService, pending_request):
    """Admission request approved with a 5000.00 deposit recorded."""
    admission_service.set_status(pending_request.id, AdmissionRequestStatus.AWAITING_DEPOSIT)
    result = admission_service.record_deposit(pending_request.id, Decimal("5000.00"), PaymentMethod.UPI)
    return result.request


@pytest.fixture
def active_admission(admission_service: AdmissionService, deposit_paid_request, bed, receptionist):
    """Active admission on ``bed``, admitted 30 minutes ago."""
    allocation = admission_service.allocate_bed(deposit_paid_request.id, bed.id, receptionist.id)
    admission = allocation.admission
    admission.admitted_at = utcnow() - timedelta(minutes=30)
    admission_service.db.commit()
    return admission


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "ipd: mark test as admission workflow related"
    )
    config.addinivalue_line(
        "markers", "ledger: mark test as admission ledger related"
    )
    config.addinivalue_line(
        "markers", "settings: mark test as hospital settings related"
    )
