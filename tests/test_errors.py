from __future__ import annotations

import json

import httpx
import pytest
from pydantic import BaseModel, ValidationError

from atlas_api.errors import APIError, AtlasError, ErrorSource, PaginationError


def _response(status: int, content: bytes) -> httpx.Response:
    request = httpx.Request("GET", "https://atlas.example/api/v2/probes/1/")
    return httpx.Response(status, content=content, request=request)


def test_new_sets_code_and_single_source() -> None:
    err = APIError.new(404, "Not Found", "no such probe", "probes.get")
    assert err.status == 404
    assert err.code == 404
    assert err.errors == [ErrorSource(detail="no such probe", pointer="probes.get")]
    assert str(err) == "Not Found: no such probe (status=404)"
    assert isinstance(err, AtlasError)


def test_io_error_conversion() -> None:
    err = APIError.from_io_error(OSError("disk on fire"))
    assert (err.status, err.title) == (500, "I/O error")
    assert "disk on fire" in err.detail


def test_decode_error_conversion_from_validation_error() -> None:
    class Model(BaseModel):
        id: int

    with pytest.raises(ValidationError) as excinfo:
        Model.model_validate({"id": "nope"})
    err = APIError.from_decode_error(excinfo.value, pointer="probes.get")
    assert (err.status, err.title) == (500, "decode")
    assert err.errors[0].pointer == "probes.get"


def test_transport_error_keeps_status_when_available() -> None:
    response = _response(502, b"")
    exc = httpx.HTTPStatusError("bad gateway", request=response.request, response=response)
    err = APIError.from_transport_error(exc)
    assert (err.status, err.title) == (502, "transport")

    plain = APIError.from_transport_error(httpx.ReadTimeout("slow"))
    assert plain.status == 500


def test_from_response_decodes_service_error_document() -> None:
    body = {
        "error": {
            "status": 404,
            "code": 104,
            "title": "Not Found",
            "detail": "Not found.",
            "errors": [{"detail": "Not found.", "source": {"pointer": "/probe"}}],
        }
    }
    err = APIError.from_response(_response(404, json.dumps(body).encode()), pointer="probes.get")
    assert err.status == 404
    assert err.code == 104
    assert err.title == "Not Found"
    assert err.detail == "Not found."
    assert [e.pointer for e in err.errors] == ["/probe", "probes.get"]


def test_from_response_surfaces_decode_failure_instead_of_masking_it() -> None:
    err = APIError.from_response(_response(503, b"<html>down</html>"), pointer="keys.list")
    assert err.title == "decode"
    assert err.status == 503
    assert "<html>down</html>" in err.detail
    assert err.errors[0].pointer == "keys.list"


def test_to_dict_uses_service_shape() -> None:
    err = APIError.new(400, "Bad", "oops", "here")
    assert err.to_dict() == {
        "error": {
            "status": 400,
            "code": 400,
            "title": "Bad",
            "detail": "oops",
            "errors": [{"detail": "oops", "source": {"pointer": "here"}}],
        }
    }
    assert json.loads(err.to_json()) == err.to_dict()


def test_pagination_errors() -> None:
    empty = PaginationError.empty("probes.list")
    assert isinstance(empty, APIError)
    assert (empty.title, empty.detail) == ("empty result", "no data returned on pagination")

    mismatch = PaginationError.count_mismatch(7, 6, "probes.list")
    assert mismatch.title == "decode"
    assert "6" in mismatch.detail and "7" in mismatch.detail
