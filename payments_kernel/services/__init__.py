"""Services for the payments kernel (write side).

PaymentOrchestrator lives in payments_kernel.services.payment_orchestrator;
it is not re-exported here because it depends on the selectors, which in
turn use the guard predicates from this package.
"""

from payments_kernel.services.authorization import (
    client_of_record,
    pair_of_record,
    party_of_record,
)
from payments_kernel.services.transfer_service import TransferService

__all__ = [
    "TransferService",
    "client_of_record",
    "pair_of_record",
    "party_of_record",
]
