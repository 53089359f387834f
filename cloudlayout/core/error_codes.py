"""
Structured error codes for layout and export failures.
Use these keys in return values and log records; map to user-facing messages in the CLI.
"""

# Known error keys
NO_DATA = "no_data"
WORDS_DROPPED = "words_dropped"
MASK_EMPTY = "mask_empty"
FONT_NOT_READY = "font_not_ready"
SURFACE_UNAVAILABLE = "surface_unavailable"
UNSUPPORTED_FORMAT = "unsupported_format"
RUN_FAILED = "run_failed"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    NO_DATA: "No word data",
    WORDS_DROPPED: "Some words did not fit. Try a larger surface, a smaller max font size or fewer words.",
    MASK_EMPTY: "Mask has no opaque pixels; nothing can be placed. Check the mask shape or font.",
    FONT_NOT_READY: "Mask font was not ready in time; the mask may be empty or wrong.",
    SURFACE_UNAVAILABLE: "Drawing surface is unavailable (engine destroyed or never rendered).",
    UNSUPPORTED_FORMAT: "Unsupported image format. Use png, jpeg, webp, bmp or gif.",
    RUN_FAILED: "Run failed. Check word list and inputs.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)
