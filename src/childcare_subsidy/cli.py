"""
Command-line interface for childcare-subsidy.

Usage:
    childcare-subsidy calculate --preset full-time-both
    childcare-subsidy calculate --input household.json --period fortnightly
    childcare-subsidy scenarios --preset four-four --mode all --top 5
    childcare-subsidy rates --tier higher --start 100000 --stop 400000
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np
import pandas as pd

from . import __version__
from .calculators.household import calculate_household
from .calculators.insights import (
    calculate_per_person_rates,
    check_threshold_risk,
    has_multiple_young_children,
)
from .calculators.subsidy_rate import Tier, rate_curve
from .config import load_rate_schedule
from .errors import SubsidyError
from .models import Household
from .money import PERIOD_MULTIPLIERS
from .presets import PRESETS, load_preset
from .scenarios import Metric, ScenarioMode, ScenarioOptions, SortOrder, generate_scenarios
from .scenarios.comparator import rank_scenarios

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s – %(levelname)s – %(message)s"


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _add_household_arguments(parser: argparse.ArgumentParser):
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--preset",
        choices=list(PRESETS),
        help="Use a built-in example household",
    )
    source.add_argument(
        "--input",
        type=Path,
        help="JSON file describing the household",
    )
    parser.add_argument(
        "--rates",
        default=None,
        help="Rate schedule period (e.g. 2025-26) or JSON file (default: 2025-26)",
    )
    parser.add_argument(
        "--withholding",
        type=float,
        default=None,
        help="Percentage of subsidy withheld (default: from rate schedule)",
    )


def _load_household(args) -> Household:
    if args.preset:
        logger.debug("Using preset %s", args.preset)
        return load_preset(args.preset)

    if not args.input.exists():
        print(f"Error: {args.input} not found", file=sys.stderr)
        sys.exit(1)
    try:
        data = json.loads(args.input.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"Error: {args.input} is not valid JSON: {e}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"Error: {args.input} must contain a JSON object", file=sys.stderr)
        sys.exit(1)
    logger.debug("Loaded household from %s", args.input)
    return Household.from_dict(data)


def _money(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def run_calculate(args):
    config = load_rate_schedule(args.rates)
    household = _load_household(args)
    result = calculate_household(household, config, args.withholding)
    totals = result.totals.for_period(args.period)

    lines = [
        "=" * 70,
        f"Child Care Subsidy Estimate ({config.period})",
        "=" * 70,
        f"Household income:     {_money(result.household_income)}",
        f"Activity test:        {result.activity.level.value} "
        f"({result.activity.hours_per_week:g} subsidised hours/week)",
        f"Care days:            {result.schedule.explanation}",
        "",
    ]
    for child in result.children:
        d = child.determination
        tier = f"{d.tier.value}, reverted to standard" if d.reverted else d.tier.value
        unit = "hr" if child.fee_mode == "hourly" else "day"
        lines.extend([
            f"Child {child.position} (age {child.age:g}, {child.care_type.value}):",
            "-" * 40,
            f"  Subsidy rate:     {d.rate:g}% ({tier})",
            f"  Effective rate:   {_money(child.effective_rate)}/{unit} "
            f"(cap {_money(child.rate_cap)})",
            f"  Weekly subsidy:   {_money(child.weekly.paid_subsidy)} "
            f"({_money(child.weekly.withheld)} withheld)",
            f"  Weekly cost:      {_money(child.weekly.out_of_pocket)} out of pocket",
            "",
        ])

    lines.extend([
        f"Totals ({args.period}):",
        "-" * 40,
        f"  Full cost:        {_money(totals.full_cost)}",
        f"  Gross subsidy:    {_money(totals.gross_subsidy)}",
        f"  Withheld:         {_money(totals.withheld)}",
        f"  Paid subsidy:     {_money(totals.paid_subsidy)}",
        f"  Out of pocket:    {_money(totals.out_of_pocket)}",
        "",
        f"Net income after childcare: {_money(result.net_income)} "
        f"({result.cost_percentage:.2f}% of income on care)",
    ])

    rates = calculate_per_person_rates(
        result.snapshot.parent1_income,
        result.snapshot.parent2_income,
        result.totals.annual.out_of_pocket,
        config,
    )
    for label, person in (("Parent 1", rates.parent1), ("Parent 2", rates.parent2)):
        if person.income > 0:
            lines.append(
                f"  {label}: care costs {_money(person.daily_rate)}/day, "
                f"{person.percentage:.2f}% of their income"
            )

    risk = check_threshold_risk(
        result.household_income, has_multiple_young_children(household, config), config
    )
    if risk.show_warning:
        lines.extend(["", f"Warning ({risk.level.value}): {risk.message}", f"  {risk.detail}"])

    lines.append("=" * 70)
    print("\n".join(lines))


def run_scenarios(args):
    config = load_rate_schedule(args.rates)
    household = _load_household(args)
    options = ScenarioOptions(
        mode=ScenarioMode(args.mode),
        stagger=not args.no_stagger,
        workers=args.workers,
        show_progress=args.progress,
        salt=args.salt,
        withholding_pct=args.withholding,
    )
    print(f"Generating {options.mode.value} scenarios...", file=sys.stderr)
    scenarios = generate_scenarios(household, config, options)
    logger.debug("Generated %d scenarios", len(scenarios))

    ranking = rank_scenarios(scenarios, args.metric, args.order)
    print(ranking.detailed_report(args.top))

    if args.output:
        ranking.to_frame().to_csv(args.output, index=False)
        print(f"Saved scenarios to: {args.output}", file=sys.stderr)


def run_rates(args):
    if args.step <= 0:
        print("Error: --step must be positive", file=sys.stderr)
        sys.exit(1)
    if args.start < 0 or args.stop < args.start:
        print("Error: need 0 <= --start <= --stop", file=sys.stderr)
        sys.exit(1)

    config = load_rate_schedule(args.rates)
    incomes = np.arange(args.start, args.stop + args.step, args.step, dtype=float)
    incomes = incomes[incomes <= args.stop]
    table = pd.DataFrame({
        "income": incomes,
        "standard": rate_curve(incomes, Tier.STANDARD, config),
        "higher": rate_curve(incomes, Tier.HIGHER, config),
    })
    if args.tier != "both":
        table = table[["income", args.tier]]
    print(table.to_string(index=False, float_format=lambda v: f"{v:,.0f}"))


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="childcare-subsidy",
        description="Estimate Australian Child Care Subsidy and compare work arrangements",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Calculate command
    calculate_parser = subparsers.add_parser(
        "calculate",
        help="Calculate subsidy and out-of-pocket cost for one household",
    )
    _add_household_arguments(calculate_parser)
    calculate_parser.add_argument(
        "--period",
        choices=list(PERIOD_MULTIPLIERS),
        default="weekly",
        help="Reporting period for totals (default: weekly)",
    )

    # Scenarios command
    scenarios_parser = subparsers.add_parser(
        "scenarios",
        help="Compare work-day arrangements",
    )
    _add_household_arguments(scenarios_parser)
    scenarios_parser.add_argument(
        "--mode",
        choices=[m.value for m in ScenarioMode if m is not ScenarioMode.CUSTOM],
        default=ScenarioMode.COMMON.value,
        help="Which combinations to generate (default: common)",
    )
    scenarios_parser.add_argument(
        "--metric",
        choices=[m.value for m in Metric],
        default=Metric.NET_INCOME.value,
        help="Metric to rank on (default: net-income)",
    )
    scenarios_parser.add_argument(
        "--order",
        choices=[o.value for o in SortOrder],
        default=SortOrder.DESC.value,
        help="Sort order (default: desc)",
    )
    scenarios_parser.add_argument(
        "--top",
        type=int,
        default=None,
        help="Show only the first N scenarios",
    )
    scenarios_parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Worker threads for the sweep (default: 1)",
    )
    scenarios_parser.add_argument(
        "--no-stagger",
        action="store_true",
        help="Start both parents' work weeks on Monday",
    )
    scenarios_parser.add_argument(
        "--salt",
        default=None,
        help="Fixed salt for reproducible scenario IDs",
    )
    scenarios_parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar",
    )
    scenarios_parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Save the ranked scenarios to a CSV file",
    )

    # Rates command
    rates_parser = subparsers.add_parser(
        "rates",
        help="Print subsidy rates across an income range",
    )
    rates_parser.add_argument(
        "--tier",
        choices=["standard", "higher", "both"],
        default="both",
        help="Tier to print (default: both)",
    )
    rates_parser.add_argument("--start", type=float, default=0, help="First income (default: 0)")
    rates_parser.add_argument("--stop", type=float, default=550000, help="Last income (default: 550000)")
    rates_parser.add_argument("--step", type=float, default=25000, help="Income step (default: 25000)")
    rates_parser.add_argument(
        "--rates",
        default=None,
        help="Rate schedule period or JSON file (default: 2025-26)",
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    commands = {
        "calculate": run_calculate,
        "scenarios": run_scenarios,
        "rates": run_rates,
    }
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        commands[args.command](args)
    except SubsidyError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
