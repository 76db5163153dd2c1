"""
Outbound port for customer persistence.

This port defines the interface for customer storage operations.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..customer import CustomerRecord


class CustomerRepository(ABC):
    """
    Outbound port for customer persistence.

    Writes are inserts that overwrite any existing record with the same
    customer id.
    """

    @abstractmethod
    def put_batch(self, records: Sequence[CustomerRecord]) -> int:
        """
        Store a batch of customers.

        Args:
            records: Customers decoded from one object, in delivery order

        Returns:
            Number of items written

        Raises:
            UnprocessedItemsError: If the store could not accept every item
        """
        ...
