from __future__ import annotations

import pytest

from atlas_api.param import Param, ParamKind


def test_of_unsigned_int_round_trips_as_uint32() -> None:
    p = Param.of(666)
    assert p.kind is ParamKind.UINT32
    assert p.as_uint32() == 666
    assert str(p) == "666"


def test_of_picks_int32_for_negative_and_int64_for_wide_values() -> None:
    assert Param.of(-5).kind is ParamKind.INT32
    assert Param.of(-5).as_int32() == -5
    wide = Param.of(2**40)
    assert wide.kind is ParamKind.INT64
    assert wide.as_int64() == 2**40


def test_mismatched_conversions_return_zero_values() -> None:
    s = Param.of("x")
    assert s.as_uint32() == 0
    assert s.as_int32() == 0
    assert s.as_int64() == 0
    assert s.as_list() == []
    assert Param.of(7).as_str() == ""


def test_string_array_renders_as_query_fragments() -> None:
    p = Param.of(["country_code=fr", "is_anchor=true"])
    assert p.kind is ParamKind.STRING_ARRAY
    assert p.as_list() == ["country_code=fr", "is_anchor=true"]
    assert str(p) == "country_code=fr&is_anchor=true"


def test_none_variant() -> None:
    assert Param.of(None) is Param.none()
    assert Param.none().is_none
    assert str(Param.none()) == ""
    assert not Param.none().is_id


def test_of_returns_existing_param_unchanged() -> None:
    p = Param.string("abc")
    assert Param.of(p) is p


def test_explicit_constructors_check_ranges() -> None:
    assert Param.int32(-(2**31)).as_int32() == -(2**31)
    with pytest.raises(ValueError):
        Param.uint32(-1)
    with pytest.raises(ValueError):
        Param.int32(2**31)
    with pytest.raises(TypeError):
        Param.uint32("12")  # type: ignore[arg-type]


def test_of_rejects_unsupported_types() -> None:
    with pytest.raises(TypeError):
        Param.of(True)
    with pytest.raises(TypeError):
        Param.of(1.5)  # type: ignore[arg-type]


def test_params_are_hashable_values() -> None:
    assert Param.of(3) == Param.uint32(3)
    assert len({Param.of(3), Param.uint32(3), Param.of("3")}) == 2
