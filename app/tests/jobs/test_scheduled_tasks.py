from unittest.mock import MagicMock, call, patch

from jobs import scheduled_tasks


@patch("jobs.scheduled_tasks.schedule")
def test_init(schedule_mock):
    """Test that init schedules the retry run and the heartbeat."""
    retry_scheduler = MagicMock()

    scheduled_tasks.init(retry_scheduler, interval_seconds=30)

    schedule_mock.every.assert_has_calls([call(30), call(5)], any_order=True)
    retry_do = schedule_mock.every.return_value.seconds.do
    heartbeat_do = schedule_mock.every.return_value.minutes.do
    retry_do.assert_called_once()
    heartbeat_do.assert_called_once()
    assert retry_do.call_args[1] == {"retry_scheduler": retry_scheduler}


def test_run_retry_scheduler_runs_once():
    retry_scheduler = MagicMock()
    retry_scheduler.run.return_value = {"processed": 0}

    scheduled_tasks.run_retry_scheduler(retry_scheduler)

    retry_scheduler.run.assert_called_once_with()


def test_run_retry_scheduler_skipped_run():
    retry_scheduler = MagicMock()
    retry_scheduler.run.return_value = None

    scheduled_tasks.run_retry_scheduler(retry_scheduler)

    retry_scheduler.run.assert_called_once_with()


def test_safe_run_swallows_exceptions():
    job = MagicMock(side_effect=Exception("boom"))
    job.__name__ = "job"

    scheduled_tasks.safe_run(job)(1, key="value")

    job.assert_called_once_with(1, key="value")


def test_run_continuously():
    with patch("jobs.scheduled_tasks.threading.Thread.start") as start_mock:
        result = scheduled_tasks.run_continuously(interval=1)

    assert not result.is_set()
    start_mock.assert_called_once()


@patch("jobs.scheduled_tasks.schedule")
def test_stop(schedule_mock):
    cease_continuous_run = MagicMock()

    scheduled_tasks.stop(cease_continuous_run)

    cease_continuous_run.set.assert_called_once()
    schedule_mock.clear.assert_called_once()


@patch("jobs.scheduled_tasks.schedule")
def test_stop_without_thread(schedule_mock):
    scheduled_tasks.stop(None)

    schedule_mock.clear.assert_called_once()
