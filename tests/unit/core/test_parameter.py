"""
Unit tests for the parameter model.
"""

import pytest

from hmclient.core.errors import ConfigError, DomainViolation, InvalidDomain, ParameterNotFound
from hmclient.core.parameter import InputParameter, ParameterSet, ParamType


class TestInputParameterCreation:
    def test_interval_kinds_keep_bounds(self):
        p = InputParameter("x", ParamType.INTEGER, [-20, 20])
        assert p.lower == -20
        assert p.upper == 20
        assert p.value is None

    def test_kind_accepts_scenario_literal(self):
        p = InputParameter("x", "real", [0.0, 1.0])
        assert p.kind is ParamType.REAL

    def test_empty_domain_is_invalid(self):
        with pytest.raises(InvalidDomain, match="empty domain"):
            InputParameter("x", ParamType.ORDINAL, [])

    def test_inverted_interval_is_invalid(self):
        with pytest.raises(InvalidDomain, match="lo > hi"):
            InputParameter("x", ParamType.REAL, [5.0, 1.0])

    def test_interval_needs_two_numbers(self):
        with pytest.raises(InvalidDomain, match="interval"):
            InputParameter("x", ParamType.INTEGER, [1, 2, 3])
        with pytest.raises(InvalidDomain, match="interval"):
            InputParameter("x", ParamType.REAL, ["a", "b"])

    def test_integer_bounds_must_be_integral(self):
        with pytest.raises(InvalidDomain, match="non-integral"):
            InputParameter("x", ParamType.INTEGER, [0.5, 3])

    def test_duplicate_discrete_values_are_invalid(self):
        with pytest.raises(InvalidDomain, match="duplicate"):
            InputParameter("x", ParamType.CATEGORICAL, ["a", "a"])

    def test_unknown_kind_is_invalid(self):
        with pytest.raises(InvalidDomain, match="unknown type"):
            InputParameter("x", "boolean", [0, 1])

    def test_invalid_domain_is_a_config_error(self):
        with pytest.raises(ConfigError):
            InputParameter("", ParamType.INTEGER, [0, 1])

    def test_discrete_kind_has_no_bounds(self):
        p = InputParameter("x", ParamType.ORDINAL, [1, 2, 4])
        with pytest.raises(TypeError):
            p.lower


class TestSetValue:
    @pytest.mark.parametrize("lo,hi", [(-20, 20), (0, 0), (3, 7)])
    def test_integer_interval_accepts_whole_range_and_rejects_neighbours(self, lo, hi):
        p = InputParameter("x", ParamType.INTEGER, [lo, hi])
        for value in range(lo, hi + 1):
            assert p.set_value(value) == value
            assert p.value == value
        with pytest.raises(DomainViolation):
            p.set_value(lo - 1)
        with pytest.raises(DomainViolation):
            p.set_value(hi + 1)

    def test_real_interval_rejects_neighbours(self):
        p = InputParameter("x", ParamType.REAL, [-1.5, 2.5])
        for value in (-1.5, 0.0, 2.5):
            assert p.set_value(value) == value
        with pytest.raises(DomainViolation):
            p.set_value(-2.5)
        with pytest.raises(DomainViolation):
            p.set_value(3.5)

    def test_real_rejects_nan(self):
        p = InputParameter("x", ParamType.REAL, [0.0, 1.0])
        with pytest.raises(DomainViolation):
            p.set_value(float("nan"))

    def test_integer_rejects_fractional_value(self):
        p = InputParameter("x", ParamType.INTEGER, [0, 10])
        with pytest.raises(DomainViolation):
            p.set_value(2.5)

    def test_integer_normalizes_integral_float(self):
        p = InputParameter("x", ParamType.INTEGER, [0, 10])
        assert p.set_value(4.0) == 4
        assert isinstance(p.value, int)

    def test_categorical_accepts_only_listed_values(self):
        p = InputParameter("opt", ParamType.CATEGORICAL, ["O0", "O2", "O3"])
        assert p.set_value("O2") == "O2"
        with pytest.raises(DomainViolation, match="outside the domain"):
            p.set_value("O1")

    def test_value_is_overwritten_each_assignment(self):
        p = InputParameter("x", ParamType.INTEGER, [0, 10])
        p.set_value(1)
        p.set_value(9)
        assert p.value == 9


class TestCoerce:
    def test_integer_tokens(self):
        p = InputParameter("x", ParamType.INTEGER, [-20, 20])
        assert p.coerce("-3") == -3
        assert p.coerce(" 7 ") == 7
        assert p.coerce("4.0") == 4

    def test_integer_rejects_text_and_fractions(self):
        p = InputParameter("x", ParamType.INTEGER, [-20, 20])
        with pytest.raises(DomainViolation, match="expects an integer"):
            p.coerce("abc")
        with pytest.raises(DomainViolation, match="expects an integer"):
            p.coerce("1.5")

    @pytest.mark.parametrize("token", ["1_0", "\u0661", "0x1f", "1e3_0"])
    def test_only_plain_ascii_numbers_are_accepted(self, token):
        integer = InputParameter("x", ParamType.INTEGER, [-20, 20])
        real = InputParameter("y", ParamType.REAL, [0.0, 1000.0])
        with pytest.raises(DomainViolation, match="expects an integer"):
            integer.coerce(token)
        with pytest.raises(DomainViolation, match="expects a number"):
            real.coerce(token)

    def test_real_rejects_nan_and_infinity_tokens(self):
        p = InputParameter("x", ParamType.REAL, [0.0, 1.0])
        for token in ("nan", "inf", "-Infinity"):
            with pytest.raises(DomainViolation, match="expects a number"):
                p.coerce(token)

    def test_real_tokens(self):
        p = InputParameter("x", ParamType.REAL, [0.0, 1.0])
        assert p.coerce("0.25") == 0.25
        with pytest.raises(DomainViolation, match="expects a number"):
            p.coerce("x")

    def test_ordinal_matches_numeric_text(self):
        p = InputParameter("tile", ParamType.ORDINAL, [1, 2, 4, 8])
        assert p.coerce("4") == 4
        assert p.coerce("8.0") == 8
        with pytest.raises(DomainViolation, match="not one of the values"):
            p.coerce("3")

    def test_categorical_matches_text(self):
        p = InputParameter("opt", ParamType.CATEGORICAL, ["O0", "O2"])
        assert p.coerce("O2") == "O2"

    def test_assign_coerces_and_validates(self):
        p = InputParameter("x", ParamType.INTEGER, [-20, 20])
        assert p.assign("12") == 12
        assert p.value == 12
        with pytest.raises(DomainViolation):
            p.assign("21")


def test_scenario_entry():
    p = InputParameter("x0", ParamType.INTEGER, [-20, 20])
    assert p.scenario_entry() == {"parameter_type": "integer", "values": [-20, 20]}


class TestParameterSet:
    def test_duplicate_keys_are_a_config_error(self):
        params = ParameterSet([InputParameter("x", ParamType.INTEGER, [0, 1])])
        with pytest.raises(ConfigError, match="Duplicate parameter key"):
            params.add(InputParameter("x", ParamType.REAL, [0.0, 1.0]))

    def test_indices_follow_declaration_order(self, reference_parameters):
        assert [p.index for p in reference_parameters] == [0, 1]
        assert reference_parameters.keys() == ["x0", "x1"]

    def test_find_by_key_is_injective(self):
        keys = [f"p{i}" for i in range(25)]
        params = ParameterSet(InputParameter(k, ParamType.INTEGER, [0, 10]) for k in keys)
        found = [params.find_by_key(k) for k in keys]
        assert len({id(p) for p in found}) == len(keys)
        assert [p.key for p in found] == keys

    def test_find_by_key_unknown(self, reference_parameters):
        with pytest.raises(ParameterNotFound, match="'x9'"):
            reference_parameters.find_by_key("x9")

    def test_assignment_reports_current_values(self, reference_parameters):
        reference_parameters.find_by_key("x1").set_value(3)
        reference_parameters.find_by_key("x0").set_value(-2)
        assert reference_parameters.assignment() == {"x0": -2, "x1": 3}

    def test_container_protocol(self, reference_parameters):
        assert len(reference_parameters) == 2
        assert "x0" in reference_parameters
        assert "y" not in reference_parameters
        assert reference_parameters[1].key == "x1"
