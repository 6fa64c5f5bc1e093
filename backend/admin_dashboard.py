"""
Admin Dashboard for the settlement engine.

Read-only views of the pool, per-game history and the audit log, plus the
migrate step. Run from the backend directory:

    python admin_dashboard.py config
    python admin_dashboard.py history roulette --count 20
    python admin_dashboard.py audit --limit 50
    python admin_dashboard.py migrate
"""
import argparse
import logging
import sys
from typing import List, Optional

from tabulate import tabulate

import config
from database import Database, GameKind
from errors import ContractError
from host import SettlementHost
from utils import format_amount, format_outcome, format_timestamp, truncate_address, format_win_rate

logger = logging.getLogger(__name__)


class AdminDashboard:
    """Operator views over a settlement database."""

    def __init__(self, db_path: str = config.DATABASE_PATH, decimals: int = 6):
        self.host = SettlementHost(Database(db_path))
        self.decimals = decimals

    def show_config(self):
        view = self.host.query_config()
        rows = [
            {"Field": "Owner", "Value": view.owner},
            {"Field": "Enabled", "Value": "yes" if view.enabled else "no"},
            {"Field": "Currency", "Value": view.denom},
            {"Field": "Pool", "Value": format_amount(view.treasury_amount, view.denom, self.decimals)},
        ]
        for game in GameKind:
            rows.append({"Field": f"{game.value} bets", "Value": getattr(view, game.counter_field)})

        print("\n" + tabulate(rows, headers="keys", tablefmt="grid"))

    def show_history(self, game: GameKind, count: int):
        records = self.host.query_history(game, count)
        if not records:
            print(f"\nNo {game.value} bets settled yet.")
            return

        denom = self.host.query_config().denom
        data = [
            {
                "ID": r.id,
                "Player": truncate_address(r.address, 6, 4),
                "Selection": r.level,
                "Outcome": format_outcome(r.win),
                "Wager": format_amount(r.bet_amount, denom, self.decimals),
                "Time": format_timestamp(r.timestamp),
            }
            for r in records
        ]
        print("\n" + tabulate(data, headers="keys", tablefmt="grid"))
        print(f"\nWin rate over the last {len(records)} bets: {format_win_rate(records)}")

    def show_audit(self, limit: int):
        events = self.host.audit.get_recent_events(limit=limit)
        if not events:
            print("\nAudit log is empty.")
            return

        data = [
            {
                "Time": e["timestamp"][:19],
                "Event": e["event_type"],
                "Severity": e["severity"],
                "Address": e["address"] or "",
                "Details": e["details"] or "",
            }
            for e in events
        ]
        print("\n" + tabulate(data, headers="keys", tablefmt="grid"))

    def migrate(self):
        response = self.host.migrate()
        print(f"\nMigrated {response.attribute('from_version')} -> {response.attribute('to_version')}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wager settlement admin dashboard")
    parser.add_argument("--db", default=config.DATABASE_PATH, help="SQLite database path")
    parser.add_argument("--decimals", type=int, default=6, help="Currency decimals for display")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("config", help="Show config and pool balance")

    history = sub.add_parser("history", help="Show recent bets of a game")
    history.add_argument("game", choices=[g.value for g in GameKind])
    history.add_argument("--count", type=int, default=10)

    audit = sub.add_parser("audit", help="Show recent audit events")
    audit.add_argument("--limit", type=int, default=50)

    sub.add_parser("migrate", help="Bump stored contract version")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    dashboard = AdminDashboard(args.db, args.decimals)

    try:
        if args.command == "config":
            dashboard.show_config()
        elif args.command == "history":
            dashboard.show_history(GameKind(args.game), args.count)
        elif args.command == "audit":
            dashboard.show_audit(args.limit)
        elif args.command == "migrate":
            dashboard.migrate()
    except ContractError as e:
        print(f"\n❌ {e.code}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
