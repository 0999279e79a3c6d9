from celery import shared_task

from core.service.schedule import retry_failed_schedules


@shared_task(name="core.retry_failed_schedules")
def retry_failed_schedules_task() -> dict:
    succeeded, failed = retry_failed_schedules()
    return {"succeeded": succeeded, "failed": failed}
