"""Cartesian expansion of matrix axes into base jobs."""

import itertools
import logging

from fwmatrix.matrix.models import AxisSet, Job


logger = logging.getLogger(__name__)


class CartesianExpander:
    """Produce one job per combination of axis values."""

    def expand(self, axis_set: AxisSet) -> list[Job]:
        """Expand ``axis_set`` into its full cross product.

        Iteration is nested in declaration order, so the first axis varies
        slowest. An axis set without axes yields no jobs.

        Args:
            axis_set: Declared axes

        Returns:
            list[Job]: Base jobs without attributes
        """
        if not len(axis_set):
            logger.debug("No axes declared, base product is empty")
            return []

        names = axis_set.names
        jobs = [
            Job(values=dict(zip(names, combination, strict=True)))
            for combination in itertools.product(*(axis.values for axis in axis_set))
        ]

        logger.debug(
            "Expanded %d axes into %d base jobs", len(names), len(jobs)
        )
        return jobs
