"""
Main FastAPI application for the daily payroll service
"""
import logging
import logging.config
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from daily_payroll.config import settings, validate_settings
from daily_payroll.database import engine, init_db
from daily_payroll.api import attendance, dashboard, salary, receipts, users
from daily_payroll.scheduler import PayrollScheduler

logging.config.dictConfig(settings.get_logging_config())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Daily Payroll Service",
    description="Attendance-driven daily-rate salary accrual with monthly payroll aggregates",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_tags=[
        {"name": "attendance", "description": "Daily attendance records"},
        {"name": "salary", "description": "Monthly salary aggregates, checkout and payment"},
        {"name": "receipts", "description": "Daily earning and salary receipts"},
        {"name": "users", "description": "Worker profiles and day rates"},
        {"name": "dashboard", "description": "Payroll overview and worker summaries"},
    ]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in (attendance.router, salary.router, receipts.router, users.router, dashboard.router):
    app.include_router(router, prefix=settings.API_PREFIX)

payroll_scheduler = None

@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        return {
            "status": "healthy",
            "database": "connected",
            "absence_sweep": settings.ENABLE_ABSENCE_SWEEP,
            "version": "1.0.0"
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unavailable")

@app.on_event("startup")
async def startup_event():
    """Create tables and start the absence sweep scheduler"""
    global payroll_scheduler
    logger.info("Starting Daily Payroll Service")
    validate_settings()

    try:
        init_db()
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")

    payroll_scheduler = PayrollScheduler()
    payroll_scheduler.start()

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Daily Payroll Service")

    if payroll_scheduler is not None:
        payroll_scheduler.stop()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "daily_payroll.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
