# server/scheduler.py
from apscheduler.schedulers.background import BackgroundScheduler
from server.tasks.loan_reminders import process_daily_reminders


def init_scheduler(app):
    sched = BackgroundScheduler(timezone="UTC")
    sched.add_job(
        process_daily_reminders,
        "cron",
        args=[app],
        hour=app.config.get("REMINDER_HOUR", 9),
        minute=app.config.get("REMINDER_MINUTE", 0),
        id="loan_reminder_sweep",
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    sched.start()
    return sched
