import logging
from typing import Optional
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from daily_payroll.config import settings
from daily_payroll.database import SessionLocal
from daily_payroll.services.accrual_service import AccrualService

logger = logging.getLogger(__name__)

ABSENCE_SWEEP_JOB_ID = "daily_absence_sweep"


def run_daily_absence_sweep(session_factory=SessionLocal) -> int:
    """Scheduled job body: sweep today's absences in a dedicated session"""
    db = session_factory()
    try:
        created = AccrualService(db).run_daily_absence_sweep()
        logger.info(f"Daily absence sweep finished, {len(created)} workers marked absent")
        return len(created)
    except Exception as e:
        logger.error(f"Daily absence sweep failed: {e}")
        return 0
    finally:
        db.close()


class PayrollScheduler:
    """Owns the background scheduler that triggers the nightly absence sweep"""

    def __init__(self, scheduler: Optional[BackgroundScheduler] = None, session_factory=SessionLocal):
        self.scheduler = scheduler or BackgroundScheduler(timezone=settings.TIMEZONE)
        self.session_factory = session_factory
        self._setup_scheduled_jobs()

    def _setup_scheduled_jobs(self):
        config = settings.get_scheduler_config()["absence_sweep"]

        if not config["enabled"]:
            logger.info("Absence sweep disabled")
            return

        self.scheduler.add_job(
            func=run_daily_absence_sweep,
            kwargs={"session_factory": self.session_factory},
            trigger=CronTrigger(hour=config["hour"], minute=config["minute"], timezone=config["timezone"]),
            id=ABSENCE_SWEEP_JOB_ID,
            name="Daily absence sweep",
            replace_existing=True
        )

        logger.info(f"Absence sweep scheduled daily at {config['hour']:02d}:{config['minute']:02d} {config['timezone']}")

    def start(self):
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Scheduler started")

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")
