import pytest

from docrest.api.responses import envelope, error_body, error_status
from docrest.core.errors import DEFAULT_ERROR_MESSAGE, DocRestError, NotFoundError
from docrest.db.store import ResultSet


class CodedError(Exception):
    def __init__(self, message, code):
        super().__init__(message)
        self.code = code


def test_envelope_renames_engine_paging():
    result = ResultSet(records=[{"a": 1}], page_info={"size": 10, "page": 1, "total": 42})
    assert envelope(result) == {
        "results": [{"a": 1}],
        "paging": {"limit": 10, "page": 1, "total": 42},
    }


@pytest.mark.parametrize(
    "error, status",
    [
        (NotFoundError("missing"), 404),
        (CodedError("teapot", 418), 418),
        (CodedError("odd", 418.0), 418),
        (CodedError("named", "ENOENT"), 500),
        (CodedError("nan", float("nan")), 500),
        (CodedError("inf", float("inf")), 500),
        (CodedError("flag", True), 500),
        (CodedError("out of range", 42), 500),
        (RuntimeError("plain"), 500),
    ],
)
def test_error_status(error, status):
    assert error_status(error) == status


def test_error_body_carries_numeric_code_only():
    assert error_body(NotFoundError("missing")) == {"error": {"message": "missing", "code": 404}}
    assert error_body(CodedError("named", "ENOENT")) == {"error": {"message": "named"}}


def test_error_body_default_message():
    assert error_body(DocRestError()) == {"error": {"message": DEFAULT_ERROR_MESSAGE}}
    assert error_body(RuntimeError()) == {"error": {"message": DEFAULT_ERROR_MESSAGE}}
