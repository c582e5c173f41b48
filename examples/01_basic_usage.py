"""
Basic http-oneshot Usage Examples

Demonstrates GET, POST, JSON responses and status checks.
"""

from http_oneshot import Request, ResponseType, Params, APPLICATION_FORM, fetch


def basic_get_request():
    """Simple GET request."""
    print("\n=== Basic GET Request ===")

    request = Request("GET", "https://jsonplaceholder.typicode.com/posts/1")
    outcome = request.send()

    if outcome.ok:
        print(f"Status: {outcome.response.status}")
        print(f"Body: {outcome.response.body[:80]}...")
    else:
        print(f"Failed: {outcome.error}")


def json_response():
    """Parse the body as JSON."""
    print("\n=== JSON Response ===")

    request = Request("GET", "https://jsonplaceholder.typicode.com/posts/1")
    request.response_type = ResponseType.JSON
    post = request.send().raise_for_error().body

    print(f"Title: {post['title']}")


def post_form():
    """POST with a url-encoded form body."""
    print("\n=== POST Form ===")

    request = Request("POST", "https://jsonplaceholder.typicode.com/posts")
    request.set_request_header("Content-Type", APPLICATION_FORM)
    request.send(Params({"title": "My Post", "userId": 1}))

    print(f"Status: {request.status} ({request.status_text})")
    print(f"Location: {request.response_header('location') or '-'}")


def status_checks():
    """4xx/5xx are successful outcomes; check the status yourself."""
    print("\n=== Status Checks ===")

    request = Request("GET", "https://jsonplaceholder.typicode.com/posts/999999")
    outcome = request.send()

    if outcome.ok and request.is_status_4xx():
        print(f"Not found: {request.status}")


def fetch_bytes():
    """One-liner returning raw bytes."""
    print("\n=== fetch() ===")

    data = fetch("GET", "https://jsonplaceholder.typicode.com/posts/1")
    print(f"Downloaded {len(data)} bytes")


if __name__ == "__main__":
    basic_get_request()
    json_response()
    post_form()
    status_checks()
    fetch_bytes()
