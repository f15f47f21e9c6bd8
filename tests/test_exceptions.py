from exceptions import (
    CounterConflictError,
    DatabaseException,
    DatabaseQueryError,
    InitializationError,
    InvalidURLError,
    KeepAliveException,
    PingHTTPStatusError,
    PingTimeoutError,
    StoreUnavailableError,
    TargetNotFoundError,
)


def test_target_not_found():
    err = TargetNotFoundError("https://example.com")

    assert isinstance(err, DatabaseException)
    assert err.url == "https://example.com"
    assert err.error_code == 2003
    assert err.user_message() == "URL https://example.com not found"
    assert str(err).startswith("[2003]")


def test_store_unavailable_hides_details():
    err = StoreUnavailableError("connection refused on 10.0.0.5")

    assert "10.0.0.5" not in err.user_message()


def test_invalid_url_reason_message():
    err = InvalidURLError(url="example.com", reason="no_scheme")

    assert err.user_message() == "URL must start with http:// or https://"
    assert err.to_dict()["error_code"] == 3001


def test_ping_errors_carry_url():
    status = PingHTTPStatusError("https://example.com", 502)
    timeout = PingTimeoutError("https://example.com", timeout=30)

    assert status.status_code == 502
    assert status.details["url"] == "https://example.com"
    assert timeout.details["timeout"] == 30


def test_from_exception_keeps_cause():
    cause = ValueError("boom")
    err = KeepAliveException.from_exception(cause)

    assert err.cause is cause
    assert "boom" in err.message


def test_query_literals_are_redacted():
    err = DatabaseQueryError(
        "boom", query="SELECT * FROM targets WHERE url = 'https://x.example' AND id = 5"
    )

    assert "x.example" not in err.details["query"]
    assert "id = ***" in err.details["query"]


def test_initialization_error_component():
    err = InitializationError("bind failed", component="api_server")

    assert err.recoverable is False
    assert err.details["component"] == "api_server"


def test_counter_conflict_is_not_a_store_error():
    err = CounterConflictError("https://example.com", 3, 3)

    assert err.error_code == 2004
    assert not isinstance(err, DatabaseException)
    assert err.details == {
        "url": "https://example.com",
        "request_count": 3,
        "total_requests": 3,
    }
    assert "cannot exceed" in err.user_message()
