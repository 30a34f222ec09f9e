from fastapi import APIRouter
from modules.messaging.api import router as messaging_router


# Main v1 router (includes all endpoints)
router = APIRouter()
router.include_router(messaging_router)
