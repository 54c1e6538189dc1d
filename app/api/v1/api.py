from fastapi import APIRouter
from app.api.v1 import auth, payments, subscriptions, interviews, admin

api_router = APIRouter()

# Include all v1 routers
api_router.include_router(auth.router)
api_router.include_router(payments.router)
api_router.include_router(subscriptions.router)
api_router.include_router(interviews.router)
api_router.include_router(admin.router)
