"""Shared fakes for driving the controller without Tk or threads."""

from datetime import datetime, timedelta, timezone


NOW = datetime(2026, 3, 2, 14, 0, 0, tzinfo=timezone.utc)


def today_payload(totals=None, running=None, success=True):
    body = {
        "success": success,
        "totals": totals if totals is not None else {
            "Python": 0, "SQL": 0, "Datasetu": 0, "Break": 0, "TT": 0,
        },
        "runningEntry": running,
    }
    return body


def running_payload(category, started_seconds_ago, now=NOW, entry_id="e1"):
    start = now - timedelta(seconds=started_seconds_ago)
    return {
        "_id": entry_id,
        "category": category,
        "startTime": start.strftime("%Y-%m-%dT%H:%M:%S.000Z"),
    }


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)


class FakeScheduler:
    """Stands in for a Tk root: records after() callbacks and fires them on demand."""

    def __init__(self):
        self.jobs = {}
        self.cancelled = []
        self._counter = 0

    def after(self, ms, callback):
        self._counter += 1
        job = f"after#{self._counter}"
        self.jobs[job] = (ms, callback)
        return job

    def after_cancel(self, job):
        self.jobs.pop(job, None)
        self.cancelled.append(job)

    def pending(self, name):
        """Jobs whose callback is the bound method `name` (e.g. "_tick")."""
        return [job for job, (_, cb) in self.jobs.items() if getattr(cb, "__name__", "") == name]

    def delay_of(self, name):
        jobs = self.pending(name)
        return self.jobs[jobs[0]][0] if jobs else None

    def fire(self, name):
        jobs = self.pending(name)
        if not jobs:
            raise AssertionError(f"no pending {name} job")
        _, callback = self.jobs.pop(jobs[0])
        callback()


class DeferredDispatch:
    """Holds worker bodies until run() so in-flight states can be inspected."""

    def __init__(self):
        self.calls = []

    def __call__(self, fn):
        self.calls.append(fn)

    def run(self):
        calls, self.calls = self.calls, []
        for fn in calls:
            fn()


def run_inline(fn):
    fn()
