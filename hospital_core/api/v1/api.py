from fastapi import APIRouter
from hospital_core.api.v1.ipd import routes as ipd
from hospital_core.api.v1.settings import routes as hospital_settings
from hospital_core.api.v1.directory import routes as directory

api_router = APIRouter()
api_router.include_router(ipd.router, prefix="/ipd", tags=["ipd"])
api_router.include_router(hospital_settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(directory.router, prefix="/directory", tags=["directory"])
