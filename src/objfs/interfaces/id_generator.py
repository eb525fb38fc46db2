"""Interface for block id generators."""

import abc

# pylint: disable=too-few-public-methods


class BlockIdGenerator(abc.ABC):
    """Contract for a block id generator.

    Implementations return signed 64-bit integers. Uniqueness is not
    required of the generator itself; callers check the store for
    collisions before committing an id.
    """

    @abc.abstractmethod
    def new_id(self) -> int:
        """Generate a candidate block id."""
