"""
Constants Module - Centralized configuration values
===================================================

PURPOSE: Single source of truth for the selectors, patterns and timings used by the scanner
PATTERN: Modular constants organized by category
SCOPE: Application-wide configuration values

Widget markup is unowned and changes without notice; keep every selector here so
strategies can be tuned without touching the scanning code.
"""

# Scan Defaults
DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_MIN_SLOTS = 3
DEFAULT_MAX_MONTHS_TO_SCAN = 6
DEFAULT_CONFIG_FILE = "links.json"
DEFAULT_OUTPUT_FILE = "availability.json"

# Browser and Frame Constants
# Case-insensitive substrings of an embedded frame URL that mark it as the booking calendar
CALENDAR_FRAME_URL_PATTERNS = ("chilipiper", "calendar", "widget", "embed")
BROWSER_LOCALE = "en-US"
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)
BROWSER_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
]
HIDE_WEBDRIVER_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined
});
"""

# Navigation timings (milliseconds, Playwright convention)
NAVIGATION_TIMEOUT_MS = 90000
POST_LOAD_DELAY_MS = 1000

# Consent Banner Constants
CONSENT_BUTTON_SELECTOR = "button, [role=button]"
CONSENT_LABEL_PATTERNS = (
    r"accept",
    r"agree",
    r"allow all",
    r"got it",
    r"^ok$",
)
CONSENT_CLICK_TIMEOUT_MS = 500
CONSENT_SETTLE_SECONDS = 0.25

# Calendar Day Selectors (one list per locator strategy, highest confidence first)
DATE_ATTRIBUTE = "data-date"
DATE_ATTRIBUTE_SELECTORS = '[role="gridcell"][data-date], button[data-date]'
ARIA_LABEL_SELECTORS = '[role="gridcell"][aria-label], button[aria-label], [aria-label]'
BARE_DAY_SELECTORS = '[role="gridcell"], button, td'

# Month caption locations, tried in order
MONTH_HEADER_SELECTORS = [
    '[aria-live="polite"]',
    '[data-testid*="current-month"]',
    ".DayPicker-Caption",
    ".react-datepicker__current-month",
    "header h2, h2",
]

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

# Day activation timings
DAY_CLICK_TIMEOUT_MS = 2500
DAY_CLICK_DELAY_MS = 12
DAY_SETTLE_SECONDS = 0.3

# Month Pagination Selectors (tried in order)
NEXT_MONTH_SELECTORS = [
    'button[aria-label="Next month"]',
    'button[title="Next"]',
    '[data-testid="next-month"]',
    'button:has-text("Next")',
]
NEXT_MONTH_CLICK_DELAY_MS = 20
PAGINATION_SETTLE_SECONDS = 0.55

# Time Slot Detection
# Elements whose text may carry a slot time (hidden ones are filtered in-page)
TIME_SLOT_CANDIDATE_SELECTOR = 'button,a,[role="option"],[role="button"],li,div,span'
SLOT_POLL_ATTEMPTS = 16
SLOT_POLL_INTERVAL_SECONDS = 0.5

# Result notes
NO_QUALIFYING_DAY_NOTE = (
    "No day with ≥{min_slots} slots within {max_months} months, "
    "or times rendered in an unsupported way."
)
