from reqtui.formatting import format_exchange, format_summary
from reqtui.models import Request, Response


def test_exchange_sections_in_order():
    request = Request(
        method="POST", url="http://x/y", headers={"A": "1"}, body='{"k": 1}'
    )
    response = Response(
        status_code=201,
        status="201 Created",
        headers={"Content-Type": "application/json"},
        body="done",
        elapsed_ms=12.4,
    )
    text = format_exchange(request, response)
    markers = [
        "Request:\nPOST http://x/y",
        "Request Headers:\nA: 1",
        'Request Body:\n{"k": 1}',
        "Response Status: 201 Created (12 ms)",
        "Response Headers:\nContent-Type: application/json",
        "Response Body:\ndone",
    ]
    positions = [text.index(marker) for marker in markers]
    assert positions == sorted(positions)


def test_exchange_omits_empty_sections_and_unknown_elapsed():
    text = format_exchange(
        Request(url="http://x"), Response(status_code=204, status="204 No Content")
    )
    assert "Request Headers" not in text
    assert "Request Body" not in text
    assert "Response Headers" not in text
    assert "Response Status: 204 No Content\n" in text
    assert text.endswith("Response Body:\n")


def test_summary():
    assert format_summary(Request()) == "No request configured"
    assert format_summary(Request(method="DELETE", url="http://x")) == "DELETE http://x"
