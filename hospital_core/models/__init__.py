from hospital_core.domain.directory.models import Staff, Patient
from hospital_core.domain.ipd.models import (
    Ward, BedType, Bed, AdmissionRequest, Admission, LedgerTransaction
)
from hospital_core.domain.billing.models import Bill, BillItem
from hospital_core.domain.settings.models import HospitalSettings, SessionTemplate
