#!/usr/bin/env python3
"""
Wallet Analysis Runner.

============================================================
USAGE
============================================================
    python scripts/analyze_wallet.py dump.json
    python scripts/analyze_wallet.py dump.json --projects projects.yaml
    python scripts/analyze_wallet.py dump.json --output report.json

============================================================
INPUT
============================================================
A JSON dump of already-fetched records for one wallet:

    {
      "address": "0x...",
      "chainTransactions": {"8453": [{"tx_hash": ..., "to_address": ...}]},
      "chainNfts": {"8453": [{"contract_address": ..., "token_id": ...}]},
      "walletTransactions": [{"hash": ..., "type": "buy", ...}],
      "holdings": [{"token": ..., "balance": ..., ...}],
      "projects": [{"id": "zora", "name": "Zora", "criteria": [...]}]
    }

Every key except "address" is optional.

============================================================
CONFIGURATION
============================================================
ACTIVITY_ENGINE_CONFIG (environment or .env) points at the
engine YAML file. Defaults are used when it is unset.

============================================================
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.absolute()
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

from activity_insights import ActivityInsightsEngine
from activity_insights import load_config as load_insights_config
from eligibility import EligibilityScorer, load_projects, projects_from_dicts
from eligibility import load_config as load_eligibility_config
from smart_money import SmartMoneyManager, parse_wallet_history
from smart_money import load_config as load_smart_money_config


load_dotenv()

logger = logging.getLogger("analyze_wallet")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def analyze(
    dump: dict[str, Any],
    config_path: Optional[Path] = None,
    projects_path: Optional[Path] = None,
) -> dict[str, Any]:
    """Run every analysis over one wallet dump and return the JSON report."""
    address = str(dump["address"]).lower()
    chain_transactions = dump.get("chainTransactions") or {}
    chain_nfts = dump.get("chainNfts") or {}

    insights_engine = ActivityInsightsEngine(config=load_insights_config(config_path))
    activity = insights_engine.get_user_activity(address, chain_transactions, chain_nfts)
    insights = insights_engine.get_insights(address, activity.protocols, chain_transactions)

    if projects_path:
        projects = load_projects(projects_path)
    else:
        projects = projects_from_dicts(dump.get("projects") or [])
    scorer = EligibilityScorer(config=load_eligibility_config(config_path))
    reports = scorer.score_projects(projects, activity)

    manager = SmartMoneyManager(config=load_smart_money_config(config_path))
    history = parse_wallet_history({
        "address": address,
        "transactions": dump.get("walletTransactions") or [],
        "holdings": dump.get("holdings") or [],
    })
    profile = manager.profile_wallet(history)

    return {
        "insights": insights.to_dict(),
        "activity": activity.to_dict(),
        "eligibility": [r.to_dict() for r in reports],
        "profile": profile.to_dict(),
    }


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Analyze a wallet from a JSON dump of fetched records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("dump", type=Path, help="JSON dump of the wallet's records")
    parser.add_argument(
        "--projects",
        type=Path,
        default=None,
        help="YAML file with a `projects:` list (overrides projects in the dump)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the report here instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    args = parser.parse_args()

    setup_logging(args.log_level)

    config_env = os.environ.get("ACTIVITY_ENGINE_CONFIG")
    config_path = Path(config_env) if config_env else None
    if config_path and not config_path.exists():
        logger.error(f"ACTIVITY_ENGINE_CONFIG points at a missing file: {config_path}")
        sys.exit(1)

    with open(args.dump, "r") as f:
        dump = json.load(f)

    report = analyze(dump, config_path, args.projects)
    text = json.dumps(report, indent=2)

    if args.output:
        args.output.write_text(text)
        logger.info(f"Report written to {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    main()
