from celery import shared_task

from reports.services.backup import create_backup


@shared_task(name="reports.backup_data")
def backup_data_task() -> str:
    return create_backup()
