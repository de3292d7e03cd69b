"""
Import Worker
Celery-App, Job-Dispatch und Worker-Entrypoint (``python -m kickoffhub.worker.main``)
"""
