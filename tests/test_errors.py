from __future__ import annotations

from pathlib import Path

from memov.errors import ErrorKind, FileSystemError, NotFoundError, ServiceError, ValidationError


def test_error_carries_kind_and_call_site() -> None:
    err = NotFoundError("memo not found")

    assert isinstance(err, ValidationError)
    assert err.kind == ErrorKind.VALIDATION
    assert str(err) == "validation: memo not found"
    assert Path(err.file).name == "test_errors.py"
    assert err.line > 0


def test_error_renders_its_cause() -> None:
    try:
        try:
            raise FileSystemError("failed to write x")
        except FileSystemError as inner:
            raise ServiceError("error saving weekly report") from inner
    except ServiceError as err:
        assert err.cause is not None
        assert str(err) == "service: error saving weekly report (caused by: filesystem: failed to write x)"
