"""
Operator command line for the payments kernel.

Usage:
  payments-kernel [--config payments.yaml] [--db-url URL] init-db [--drop]
  payments-kernel seed
  payments-kernel pay --profile-id 1 --job-id 2
  payments-kernel deposit --profile-id 1 --contractor-id 6 --amount 50.25
  payments-kernel contracts --profile-id 1 [--contract-id 2]
  payments-kernel unpaid-jobs --profile-id 1
  payments-kernel best-profession --start 2020-08-01 --end 2020-08-31
  payments-kernel best-clients --start 2020-08-01 --end 2020-08-31 [--limit 3]

Output is one JSON document on stdout.  Kernel errors print
{"code": ..., "message": ...} and exit 1 for input errors, 2 for server-side
errors.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

from payments_kernel.config import PaymentsConfig, load_config
from payments_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    session_scope,
)
from payments_kernel.exceptions import ErrorKind, PaymentsKernelError, public_message
from payments_kernel.logging_config import configure_logging, get_logger
from payments_kernel.seed import seed_database
from payments_kernel.services.payment_orchestrator import PaymentOrchestrator

logger = get_logger("cli")

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_SERVER_ERROR = 2


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="payments-kernel",
        description="Settle jobs, deposit to contractors, and query leaderboards.",
    )
    parser.add_argument("--config", help="YAML settings file (default: $PAYMENTS_CONFIG)")
    parser.add_argument("--db-url", help="Database URL (overrides config)")
    sub = parser.add_subparsers(dest="command", required=True)

    init_db = sub.add_parser("init-db", help="Create tables")
    init_db.add_argument("--drop", action="store_true", help="Drop existing tables first")

    sub.add_parser("seed", help="Load the reference data set (replaces existing rows)")

    pay = sub.add_parser("pay", help="Settle a job as its client")
    pay.add_argument("--profile-id", type=int, required=True)
    pay.add_argument("--job-id", type=int, required=True)

    deposit = sub.add_parser("deposit", help="Deposit to a contractor")
    deposit.add_argument("--profile-id", type=int, required=True)
    deposit.add_argument("--contractor-id", type=int, required=True)
    deposit.add_argument("--amount", required=True)

    contracts = sub.add_parser("contracts", help="Show the caller's contracts")
    contracts.add_argument("--profile-id", type=int, required=True)
    contracts.add_argument("--contract-id", type=int)

    unpaid = sub.add_parser("unpaid-jobs", help="List the caller's unpaid jobs")
    unpaid.add_argument("--profile-id", type=int, required=True)

    best_profession = sub.add_parser("best-profession", help="Top-earning profession")
    best_profession.add_argument("--start")
    best_profession.add_argument("--end")

    best_clients = sub.add_parser("best-clients", help="Top-spending clients")
    best_clients.add_argument("--start")
    best_clients.add_argument("--end")
    best_clients.add_argument("--limit")

    return parser.parse_args(argv)


def _to_json(result: Any) -> Any:
    if isinstance(result, list):
        return [item.to_dict() for item in result]
    return result.to_dict()


def _dispatch(args: argparse.Namespace, config: PaymentsConfig) -> Any:
    if args.command == "init-db":
        if args.drop:
            drop_tables()
        create_tables()
        return {"ok": True}

    if args.command == "seed":
        with session_scope() as session:
            seed_database(session)
        return {"ok": True}

    orchestrator = PaymentOrchestrator(get_session_factory(), config=config)

    if args.command == "pay":
        return _to_json(orchestrator.settle_job(args.job_id, args.profile_id))
    if args.command == "deposit":
        return _to_json(
            orchestrator.deposit(args.profile_id, args.contractor_id, args.amount)
        )
    if args.command == "contracts":
        if args.contract_id is not None:
            return _to_json(orchestrator.get_contract(args.contract_id, args.profile_id))
        return _to_json(orchestrator.list_contracts(args.profile_id))
    if args.command == "unpaid-jobs":
        return _to_json(orchestrator.list_unpaid_jobs(args.profile_id))
    if args.command == "best-profession":
        return _to_json(orchestrator.best_profession(args.start, args.end))
    if args.command == "best-clients":
        return _to_json(orchestrator.best_clients(args.start, args.end, args.limit))

    raise AssertionError(f"unhandled command {args.command!r}")


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    config = load_config(args.config)
    configure_logging(level=config.log_level)

    init_engine_from_url(
        args.db_url or config.database_url,
        echo=config.echo_sql,
        pool_size=config.pool_size,
    )

    logger.debug("cli_command", extra={"command": args.command})
    try:
        output = _dispatch(args, config)
    except PaymentsKernelError as exc:
        print(json.dumps({"code": exc.code, "message": public_message(exc)}))
        return EXIT_INPUT_ERROR if exc.kind is ErrorKind.INPUT_DATA else EXIT_SERVER_ERROR

    print(json.dumps(output, indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
