from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api.v1.api import api_router
from app.core.config import settings
from app.core.exceptions import InvalidPaymentRequestError, PaymentError
from app.db.mongo import mongodb, ensure_indexes
import logging
import os

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Interview preparation API: checkout, subscriptions and AI mock interviews",
    version="1.0.0",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json"
)


@app.on_event("startup")
async def startup():
    await mongodb.connect_to_database()
    await ensure_indexes(mongodb.db)
    if not (settings.RAZORPAY_KEY_ID and settings.RAZORPAY_KEY_SECRET):
        logger.warning("Razorpay credentials missing; checkout endpoints will return errors")


@app.on_event("shutdown")
async def shutdown():
    await mongodb.close_database_connection()


@app.exception_handler(PaymentError)
async def payment_error_handler(request: Request, exc: PaymentError):
    """Payment failures use the {"error": message} envelope the checkout client expects."""
    logger.error(f"Payment error on {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed payment bodies get the payment envelope; other routes keep FastAPI's default."""
    if not request.url.path.startswith(f"{settings.API_V1_PREFIX}/payments"):
        return await request_validation_exception_handler(request, exc)

    problems = [
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in exc.errors()
    ]
    return await payment_error_handler(
        request, InvalidPaymentRequestError(f"Invalid payment request: {'; '.join(problems)}")
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:5173",
        settings.FRONTEND_URL,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    return {
        "name": settings.PROJECT_NAME,
        "docs": "/docs",
        "api": settings.API_V1_PREFIX
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 10000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
