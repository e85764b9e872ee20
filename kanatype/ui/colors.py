"""Theme colors and color utilities for the UI."""


class HomeColors:
    """Light theme palette."""

    BG_TOP = "#e0f7fa"
    BG_BOTTOM = "#80deea"

    PRIMARY = "#00838f"
    PRIMARY_DARK = "#005662"

    TEXT_PRIMARY = "#1a3a3a"
    TEXT_SECONDARY = "#4a6572"
    TEXT_MUTED = "#78909c"

    # Typed / upcoming / expected characters in the word area
    CHAR_CORRECT = "#2e7d32"
    CHAR_PENDING = "#90a4ae"
    CHAR_EXPECTED = "#e53935"

    # Countdown bar
    TIMER = "#00838f"
    TIMER_WARN = "#ffb300"
    TIMER_CRIT = "#e53935"


# Remaining-time thresholds for the countdown bar colour
TIMER_WARN_MS = 5000
TIMER_CRIT_MS = 2000


def timer_color(remaining_ms: float) -> str:
    """Countdown bar colour: normal, then amber under 5 s, red under 2 s."""
    if remaining_ms <= TIMER_CRIT_MS:
        return HomeColors.TIMER_CRIT
    if remaining_ms <= TIMER_WARN_MS:
        return HomeColors.TIMER_WARN
    return HomeColors.TIMER
