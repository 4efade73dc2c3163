"""
Tests for the metric descriptor parser.
"""

import pytest

from cnv_reader.services.metric_info import MetricInfoReader


class TestMetricInfoReader:
    """Tests for MetricInfoReader."""

    def test_full_descriptor(self):
        """Name, type, other tags and unit should all be extracted."""
        metric = MetricInfoReader("prDM: Pressure, Digiquartz [db]")

        assert metric.name == "prDM"
        assert metric.type == "Pressure"
        assert metric.other == ["Digiquartz"]
        assert metric.unit == "db"

    def test_name_only(self):
        """A descriptor without colon only has a name."""
        metric = MetricInfoReader("Edwin")

        assert metric.name == "Edwin"
        assert metric.unit is None
        assert metric.type is None
        assert metric.other == []

    def test_unit_with_comma_inside_brackets(self):
        """Commas inside the unit brackets do not split tokens."""
        metric = MetricInfoReader("t090C: Temperature [ITS-90, deg C]")

        assert metric.name == "t090C"
        assert metric.type == "Temperature"
        assert metric.unit == "ITS-90, deg C"
        assert metric.other == []

    def test_unit_before_tokens(self):
        """The unit may appear anywhere in the tail."""
        metric = MetricInfoReader("c0S/m: [S/m] Conductivity, Primary")

        assert metric.unit == "S/m"
        assert metric.type == "Conductivity"
        assert metric.other == ["Primary"]

    def test_empty_tokens_discarded(self):
        """Empty comma-separated pieces are dropped, order preserved."""
        metric = MetricInfoReader("sbeox0: Oxygen, , SBE 43,, 2 [ml/l]")

        assert metric.type == "Oxygen"
        assert metric.other == ["SBE 43", "2"]

    def test_colon_without_info(self):
        """A trailing colon leaves type and unit empty."""
        metric = MetricInfoReader("flag:")

        assert metric.name == "flag"
        assert metric.type is None
        assert metric.unit is None
        assert metric.other == []

    def test_only_unit(self):
        """A tail made only of a unit has no type."""
        metric = MetricInfoReader("depSM: [salt water, m]")

        assert metric.unit == "salt water, m"
        assert metric.type is None
        assert metric.other == []

    def test_split_on_first_colon_only(self):
        """Colons after the first one belong to the tail."""
        metric = MetricInfoReader("timeJ: Julian Days: since Jan 1")

        assert metric.name == "timeJ"
        assert metric.type == "Julian Days: since Jan 1"

    def test_first_bracket_is_unit(self):
        """Only the first bracket is the unit; every bracket is removed."""
        metric = MetricInfoReader("x: Custom [m] [extra], tag")

        assert metric.unit == "m"
        assert metric.type == "Custom"
        assert metric.other == ["tag"]

    def test_empty_unit(self):
        """Empty brackets give an empty unit, not a missing one."""
        metric = MetricInfoReader("nbin: number of scans per bin []")

        assert metric.unit == ""
        assert metric.type == "number of scans per bin"

    def test_name_is_trimmed(self):
        """Whitespace around the name is removed."""
        metric = MetricInfoReader("   sal00   : Salinity, Practical [PSU]")

        assert metric.name == "sal00"

    @pytest.mark.parametrize("descriptor", ["", ":", "[", "]:[", ",,,:,,,"])
    def test_malformed_never_raises(self, descriptor):
        """Malformed descriptors degrade to empty optional fields."""
        metric = MetricInfoReader(descriptor)

        assert isinstance(metric.name, str)
        assert isinstance(metric.other, list)

    def test_other_is_a_copy(self):
        """Mutating the returned list does not change the reader."""
        metric = MetricInfoReader("prDM: Pressure, Digiquartz [db]")

        metric.other.append("changed")

        assert metric.other == ["Digiquartz"]

    def test_equality_and_dict(self):
        """Readers compare by parsed content."""
        a = MetricInfoReader("prDM: Pressure, Digiquartz [db]")
        b = MetricInfoReader("prDM:Pressure,Digiquartz[db]")

        assert a == b
        assert a.to_dict() == {
            "name": "prDM",
            "type": "Pressure",
            "unit": "db",
            "other": ["Digiquartz"],
        }

    def test_descriptor_kept_verbatim(self):
        """The raw descriptor survives parsing and drives the repr."""
        metric = MetricInfoReader("t090C: Temperature [ITS-90, deg C]")

        assert metric.descriptor == "t090C: Temperature [ITS-90, deg C]"
        assert repr(metric) == "MetricInfoReader('t090C: Temperature [ITS-90, deg C]')"
