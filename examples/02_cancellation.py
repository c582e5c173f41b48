"""
Deadlines and Cancellation Examples

A CancelContext carries a deadline and/or a cancel signal. Whichever
finishes first, the transport or the context, decides the outcome.
"""

import asyncio
import threading

from http_oneshot import (
    CancelContext,
    Cancelled,
    DeadlineExceeded,
    Request,
    TimeoutError,
)


def with_deadline():
    """Give the request 2 seconds in total."""
    print("\n=== Deadline ===")

    with CancelContext.with_timeout(2.0) as ctx:
        outcome = Request("GET", "https://httpbin.org/delay/5").send(ctx=ctx)

    if isinstance(outcome.error, DeadlineExceeded):
        print(f"Gave up: {outcome.error}")
    elif isinstance(outcome.error, TimeoutError):
        print("Transport timeout")
    else:
        print(f"Status: {outcome.response.status}")


def cancel_from_another_thread():
    """Cancel a pending request, e.g. on shutdown."""
    print("\n=== Cancel ===")

    ctx = CancelContext.with_cancel()
    threading.Timer(0.5, ctx.cancel).start()

    outcome = Request("GET", "https://httpbin.org/delay/5").send(ctx=ctx)
    print(f"Cancelled: {isinstance(outcome.error, Cancelled)}")


def shared_parent_context():
    """One parent deadline bounds several requests."""
    print("\n=== Shared Parent ===")

    with CancelContext.with_timeout(10.0) as parent:
        for path in ("/get", "/uuid", "/ip"):
            with CancelContext.with_timeout(3.0, parent=parent) as ctx:
                outcome = Request("GET", f"https://httpbin.org{path}").send(ctx=ctx)
            print(f"{path}: {outcome.response.status if outcome.ok else outcome.error}")


async def async_requests():
    """send_async() for asyncio code; cancelling the task aborts the request."""
    print("\n=== Async ===")

    outcomes = await asyncio.gather(*(
        Request("GET", f"https://httpbin.org/status/{code}").send_async()
        for code in (200, 404, 503)
    ))
    for outcome in outcomes:
        print(f"Status: {outcome.response.status}")

    task = asyncio.ensure_future(Request("GET", "https://httpbin.org/delay/5").send_async())
    await asyncio.sleep(0.5)
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        print("Task cancelled, transport aborted")


if __name__ == "__main__":
    with_deadline()
    cancel_from_another_thread()
    shared_parent_context()
    asyncio.run(async_requests())
