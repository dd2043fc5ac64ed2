"""
Authorization guard for agreement-scoped operations.

The guard is not a separate lookup.  It is a set of SQL predicates that
every transfer and lookup query embeds in its own WHERE clause, so the
"is the caller a party to this contract" check is evaluated by the same
(locked) read that fetches the row being acted on.  A row the caller is
not entitled to simply does not come back, and the caller sees the same
NotFound error as for an id that does not exist.
"""

from sqlalchemy import ColumnElement, or_

from payments_kernel.models.contract import Contract


def client_of_record(caller_id: int) -> ColumnElement[bool]:
    """Caller is the paying client of the contract."""
    return Contract.client_id == caller_id


def party_of_record(caller_id: int) -> ColumnElement[bool]:
    """Caller is either the client or the contractor of the contract."""
    return or_(Contract.client_id == caller_id, Contract.contractor_id == caller_id)


def pair_of_record(client_id: int, contractor_id: int) -> ColumnElement[bool]:
    """Contract links exactly this client to exactly this contractor."""
    return (Contract.client_id == client_id) & (Contract.contractor_id == contractor_id)
