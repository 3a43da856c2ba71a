import threading
import time

import schedule

from infrastructure.logging import get_module_logger

logger = get_module_logger()


def safe_run(job):
    def wrapper(*args, **kwargs):
        try:
            job(*args, **kwargs)
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "scheduled_job_failed",
                job=getattr(job, "__name__", repr(job)),
                error=str(e),
            )

    return wrapper


def init(retry_scheduler, interval_seconds=60):
    """Register the periodic jobs.

    Args:
        retry_scheduler: RetryScheduler whose ``run`` is called every
            ``interval_seconds``
        interval_seconds: Period of the retry run
    """
    logger.info("scheduled_tasks_initialized", retry_interval_seconds=interval_seconds)

    schedule.every(interval_seconds).seconds.do(
        safe_run(run_retry_scheduler), retry_scheduler=retry_scheduler
    )
    schedule.every(5).minutes.do(safe_run(scheduler_heartbeat))


def run_retry_scheduler(retry_scheduler):
    stats = retry_scheduler.run()
    if stats is None:
        logger.info("retry_scheduler_tick_skipped")


def scheduler_heartbeat():
    logger.info("scheduler_heartbeat", time=time.ctime())


def run_continuously(interval=1):
    """Continuously run, while executing pending jobs at each
    elapsed time interval.
    @return cease_continuous_run: threading. Event which can
    be set to cease continuous run. Please note that it is
    *intended behavior that run_continuously() does not run
    missed jobs*. For example, if the retry job is registered
    every minute and the loop interval is one hour, the job
    runs once per hour rather than 60 times.
    """
    cease_continuous_run = threading.Event()

    class ScheduleThread(threading.Thread):
        @classmethod
        def run(cls):
            while not cease_continuous_run.is_set():
                schedule.run_pending()
                time.sleep(interval)

    continuous_thread = ScheduleThread(name="retry-schedule", daemon=True)
    continuous_thread.start()
    return cease_continuous_run


def stop(cease_continuous_run):
    """Stop the schedule thread and drop every registered job."""
    if cease_continuous_run is not None:
        cease_continuous_run.set()
    schedule.clear()
    logger.info("scheduled_tasks_stopped")
