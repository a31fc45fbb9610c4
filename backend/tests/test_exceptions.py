# ApiError / ApiResponse envelope 테스트
from app.core.exceptions import DEFAULT_ERROR_MESSAGE, ApiError, internal_error
from app.schemas.response import ApiResponse


def _last_frame(err):
    return [line for line in err.trace.splitlines() if line.lstrip().startswith("File ")][-1]


def test_api_error_defaults():
    err = ApiError(500)
    assert err.status_code == 500
    assert err.message == DEFAULT_ERROR_MESSAGE
    assert err.success is False
    assert err.data is None
    assert err.errors == []
    assert str(err) == DEFAULT_ERROR_MESSAGE


def test_api_error_to_dict():
    err = ApiError(409, "Conflict", [{"field": "email"}])
    assert err.to_dict() == {
        "statusCode": 409,
        "message": "Conflict",
        "success": False,
        "data": None,
        "errors": [{"field": "email"}],
    }


def test_api_error_captures_construction_site():
    err = ApiError(400, "bad")
    assert _last_frame(err).endswith("in test_api_error_captures_construction_site")
    assert "_capture_trace" not in err.trace


def test_api_error_subclass_constructor_frames_skipped():
    class NotFound(ApiError):
        def __init__(self):
            super().__init__(404, "not found")

    err = NotFound()
    assert _last_frame(err).endswith("in test_api_error_subclass_constructor_frames_skipped")


def test_api_error_explicit_trace_kept():
    err = ApiError(500, trace="custom trace")
    assert err.trace == "custom trace"


def test_api_error_is_catchable():
    try:
        raise ApiError(401, "Unauthorized request")
    except ApiError as exc:
        assert exc.status_code == 401


def test_api_response_success_flag():
    ok = ApiResponse(status_code=201, data={"id": "1"}, message="created")
    assert ok.model_dump(by_alias=True) == {
        "statusCode": 201,
        "data": {"id": "1"},
        "message": "created",
        "success": True,
    }
    assert ApiResponse(status_code=404).success is False


def test_internal_error_keeps_original_traceback():
    try:
        raise RuntimeError("store unavailable")
    except RuntimeError as exc:
        err = internal_error(exc)
    assert err.status_code == 500
    assert err.message == DEFAULT_ERROR_MESSAGE
    assert "RuntimeError: store unavailable" in err.trace
    assert "store unavailable" not in str(err.to_dict())
