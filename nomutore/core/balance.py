"""Balance Ledger - Pure functions for the running kcal balance and the tank.

The balance is the sum of all signed log kcal: drinks push it down,
exercise pushes it up. The tank expresses it as cans of the active style.

All functions are pure: same input always produces same output, no side effects.
"""

from collections.abc import Iterable, Mapping

from .catalog import can_kcal, resolve_exercise, resolve_style
from .energy import convert_kcal_to_minutes, to_finite
from .models import AppSettings, LogEntry, Mode, Profile, TankMessage, TankView


TANK_MAX_CANS = 3.0
TANK_MIN_FILL_PERCENT = 5.0

# (upper bound on can_count, tier), checked in order for a positive balance
CREDIT_TIERS = (
    (0.5, "starting"),
    (1.0, "almost"),
    (2.0, "one_can"),
)
DEEP_DEBT_CANS = 1.5


def calculate_balance(logs: Iterable[LogEntry]) -> float:
    """Calculate the running kcal balance over all logs.

    Args:
        logs: Normalized log entries (any order)

    Returns:
        Sum of kcal in timestamp order (0 for no logs)
    """
    balance = 0.0
    for log in sorted(logs, key=lambda entry: entry.timestamp_ms):
        balance += log.kcal
    return balance


def get_tank_display_data(
    balance_kcal: float,
    mode: Mode,
    settings: AppSettings,
    profile: Profile | Mapping | None,
) -> TankView:
    """Express the balance as cans of the mode's drink style.

    No clamping is applied; the sign of can_count always matches the sign
    of the balance.

    Args:
        balance_kcal: Current kcal balance
        mode: Which of the two configured drink styles to show
        settings: Drink modes and base exercise
        profile: User profile

    Returns:
        TankView with cans, minutes and cosmetic attributes
    """
    balance = to_finite(balance_kcal) or 0.0
    style_key = settings.modes.mode2 if mode == "mode2" else settings.modes.mode1
    style = resolve_style(style_key)
    unit_kcal = can_kcal(style)

    return TankView(
        can_count=balance / unit_kcal,
        display_minutes=convert_kcal_to_minutes(balance, settings.base_exercise, profile),
        base_ex_data=resolve_exercise(settings.base_exercise),
        unit_kcal=unit_kcal,
        target_style=style.key,
        liquid_color=style.liquid_color,
        is_hazy=style.is_hazy,
    )


def get_tank_message(view: TankView, profile: Profile | Mapping | None) -> TankMessage:
    """Pick the motivational message for a tank view.

    Args:
        view: Tank view from get_tank_display_data
        profile: User profile (for the one-can minutes)

    Returns:
        TankMessage with tier and text
    """
    one_can_minutes = round(convert_kcal_to_minutes(view.unit_kcal, view.base_ex_data.key, profile))
    cans = view.can_count

    if cans > 0:
        for bound, tier in CREDIT_TIERS:
            if cans < bound:
                break
        else:
            tier = "plenty"
        text = {
            "starting": "Hold on... aim for half a can first!",
            "almost": "Almost one can! Keep going!",
            "one_can": f"You've earned one! ({view.target_style})",
            "plenty": "Plenty saved up. Great work!",
        }[tier]
        return TankMessage(tier=tier, text=text, one_can_minutes=one_can_minutes)

    owed = abs(cans)
    if owed > DEEP_DEBT_CANS:
        return TankMessage(
            tier="deep_debt",
            text=f"Debt is piling up... pay back one can ({one_can_minutes} min) first!",
            one_can_minutes=one_can_minutes,
        )
    return TankMessage(
        tier="debt",
        text=f"Running dry... move for {owed:.1f} more cans.",
        one_can_minutes=one_can_minutes,
    )


def tank_fill_percent(can_count: float) -> float:
    """Liquid height for the tank in percent of TANK_MAX_CANS.

    Any positive balance shows at least TANK_MIN_FILL_PERCENT.
    """
    if not can_count > 0:
        return 0.0
    percent = can_count / TANK_MAX_CANS * 100
    return max(TANK_MIN_FILL_PERCENT, min(100.0, percent))
