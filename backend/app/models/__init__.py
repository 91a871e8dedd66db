from app.models.user import User
from app.models.customer import Customer
from app.models.asset import Asset
from app.models.lease import Lease, LeasePayment
from app.models.maintenance import MaintenanceSchedule, MaintenancePart
from app.models.work_order import WorkOrder, ConsumablePart
from app.models.contract_template import ContractTemplate
from app.models.sla import SlaAgreement
from app.models.report import Report
from app.models.activity_log import ActivityLog
from app.models.id_sequence import IdSequence

__all__ = [
    "User",
    "Customer",
    "Asset",
    "Lease", "LeasePayment",
    "MaintenanceSchedule", "MaintenancePart",
    "WorkOrder", "ConsumablePart",
    "ContractTemplate",
    "SlaAgreement",
    "Report",
    "ActivityLog",
    "IdSequence",
]
