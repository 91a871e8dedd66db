from fastapi import APIRouter

from app.api.v1 import activity_logs, assets, auth, contract_templates, customers, import_routes
from app.api.v1 import leases, maintenance, reports, sla, users, work_orders

api_router = APIRouter()

# Registered first so "/{entity}/import" is matched before entity routers
api_router.include_router(import_routes.router, tags=["import"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(assets.router, prefix="/assets", tags=["assets"])
api_router.include_router(leases.router, prefix="/leases", tags=["leases"])
api_router.include_router(maintenance.router, prefix="/maintenance", tags=["maintenance"])
api_router.include_router(work_orders.router, prefix="/work-orders", tags=["work-orders"])
api_router.include_router(contract_templates.router, prefix="/contracts/templates", tags=["templates"])
api_router.include_router(sla.router, prefix="/sla-agreements", tags=["sla"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(activity_logs.router, prefix="/activity-logs", tags=["activity"])
