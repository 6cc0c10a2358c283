"""Test CartesianExpander."""

import math

import pytest

from fwmatrix.matrix.expander import CartesianExpander
from fwmatrix.matrix.models import AxisSet


class TestCartesianExpander:
    """Test cartesian expansion of axes."""

    def setup_method(self):
        self.expander = CartesianExpander()

    def test_first_axis_varies_slowest(self):
        axis_set = AxisSet.from_mapping({"mcu": ["A", "B"], "log": ["X", "Y"]})

        jobs = self.expander.expand(axis_set)

        assert [tuple(job.values.values()) for job in jobs] == [
            ("A", "X"),
            ("A", "Y"),
            ("B", "X"),
            ("B", "Y"),
        ]
        assert all(job.attributes == {} for job in jobs)

    @pytest.mark.parametrize(
        "sizes",
        [(1,), (3,), (2, 2), (4, 1, 2, 3), (1, 1, 1)],
    )
    def test_count_is_product_and_jobs_unique(self, sizes):
        axis_set = AxisSet.from_mapping(
            {f"axis{i}": [f"v{j}" for j in range(n)] for i, n in enumerate(sizes)}
        )

        jobs = self.expander.expand(axis_set)

        assert len(jobs) == math.prod(sizes) == axis_set.size
        assert len({job.key for job in jobs}) == len(jobs)

    def test_values_keep_axis_order(self):
        axis_set = AxisSet.from_mapping({"net": ["n"], "mcu": ["m"]})
        (job,) = self.expander.expand(axis_set)
        assert list(job.values) == ["net", "mcu"]

    def test_no_axes_yields_no_jobs(self):
        assert self.expander.expand(AxisSet()) == []

    def test_firmware_matrix(self, firmware_definition):
        jobs = self.expander.expand(firmware_definition.axis_set)

        assert len(jobs) == 24
        assert jobs[0].values == {
            "mcu": "mcu-esp32c3",
            "imu": "imu-stubbed",
            "net": "net-stubbed",
            "log": "log-rtt",
        }
        assert jobs[-1].values["mcu"] == "mcu-nrf52832"
        assert jobs[-1].values["log"] == "log-uart"
