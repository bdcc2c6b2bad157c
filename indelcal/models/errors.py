"""
Exceptions raised by the error models
"""

__all__ = [
    "ModelConsistencyError",
    "TractLengthOutOfRangeError",
    "UnknownIndelTypeError"
]


class ModelConsistencyError(ValueError):
    """
    The calibration document does not describe a self-consistent model, e.g., the number of rows in the
    table does not match the declared maximum motif length.
    """


class UnknownIndelTypeError(ValueError):
    """
    An indel of a type the model has no estimate for reached a type-specific lookup.

    :param description: The description of the offending indel report
    """

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Unknown indel type: {description}")


class TractLengthOutOfRangeError(ValueError):
    """
    The shortest repeat tract for an indel's repeat unit is longer than any tract in the model, so the model has
    no entry to look up.

    :param description: The description of the offending indel report
    :param min_tract_length: Shortest tract, in bases, for the report's repeat unit
    :param max_tract_length: Longest tract covered by the model
    """

    def __init__(self, description: str, min_tract_length: int, max_tract_length: int):
        self.description = description
        self.min_tract_length = min_tract_length
        self.max_tract_length = max_tract_length
        super().__init__(f"Indel {description} needs a tract of at least {min_tract_length} bases, "
                         f"the model covers tracts up to {max_tract_length}")
