from __future__ import annotations

from typing import Any, List

from sheetform.adapters.api_errors import ApiTimeoutError
from sheetform.domain.actions import ApiFailed, ApiRequest, ApiSucceeded
from sheetform.usecases.request_runner import DeferredQueue, RequestRunner


class _Port:
    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.error: Exception | None = None

    def fetch(self, url: str) -> Any:
        self.calls.append(("fetch", url))
        if self.error:
            raise self.error
        return {"url": url}

    def append(self, url: str, rows) -> Any:
        self.calls.append(("append", url, rows))
        return {"updates": {"updatedRows": len(rows)}}


def test_deferred_queue_runs_in_fifo_order_including_new_callbacks() -> None:
    queue = DeferredQueue()
    order: List[str] = []
    queue.after(0, lambda: (order.append("a"), queue.after(0, lambda: order.append("c"))))
    queue.after(0, lambda: order.append("b"))

    assert len(queue) == 2
    assert queue.drain() == 3
    assert order == ["a", "b", "c"]
    assert queue.run_next() is False


def test_deferred_queue_cancel_and_step_limit() -> None:
    queue = DeferredQueue()
    order: List[int] = []
    token = queue.after(0, lambda: order.append(1))
    queue.after(0, lambda: order.append(2))
    queue.after(0, lambda: order.append(3))

    queue.cancel(token)
    assert queue.drain(max_steps=1) == 1
    assert order == [2]
    assert len(queue) == 1


def test_submit_defers_until_drained() -> None:
    port = _Port()
    runner = RequestRunner(port)
    delivered: List[Any] = []

    runner.submit(ApiRequest(request_id="req-1", method="GET", url="/api/f/schema"), delivered.append)
    assert port.calls == []

    runner.drain()
    assert delivered == [ApiSucceeded(request_id="req-1", payload={"url": "/api/f/schema"})]


def test_post_sends_body_to_append() -> None:
    port = _Port()
    runner = RequestRunner(port)

    result = runner.execute(
        ApiRequest(request_id="req-2", method="POST", url="/api/f/entry", body=[["x"]])
    )

    assert port.calls == [("append", "/api/f/entry", [["x"]])]
    assert isinstance(result, ApiSucceeded)


def test_port_error_becomes_api_failed() -> None:
    port = _Port()
    port.error = ApiTimeoutError("Timeout contacting host")
    runner = RequestRunner(port)

    result = runner.execute(ApiRequest(request_id="req-3", method="GET", url="/x"))

    assert result == ApiFailed(
        request_id="req-3",
        message="Request timed out. Check connection.",
        code="REQUEST_TIMEOUT",
    )


def test_external_scheduler_is_used() -> None:
    scheduled: List[Any] = []
    runner = RequestRunner(_Port(), schedule=lambda delay, cb: scheduled.append((delay, cb)))

    runner.submit(ApiRequest(request_id="req-4", method="GET", url="/y"), lambda action: None)

    assert runner.queue is None
    assert runner.drain() == 0
    assert len(scheduled) == 1 and scheduled[0][0] == 0
