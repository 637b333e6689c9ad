"""Example: drive the service layer directly (no Flask).

Controllers are thin; the ledger rules live in the services.
"""

from src.wage_ledger.wage_ledger.access.model import Caller
from src.wage_ledger.wage_ledger.container import build_container


def main():
    container = build_container(backend="memory")
    owner = Caller(principal="owner-principal")

    container.access_service.initialize(owner)
    container.profile_service.save_caller_profile(
        owner, name="Ana", default_hourly_rate_cents=1500, default_transport_allowance_cents=5000
    )

    container.ledger_service.create_or_update_record(owner, month=3, year=2025, worked_hours=160)
    container.ledger_service.add_payment(owner, month=3, year=2025, amount_cents=100_000)

    for summary in container.report_service.get_all_summaries(owner):
        print(summary.to_dict())


if __name__ == "__main__":
    main()
