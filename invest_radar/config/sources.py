"""
Publisher configuration: trust order, LLM whitelist and name-to-domain map.
"""

# Publishers whose articles are sent to the LLM when AI_WHITELIST_MODE is "ai"/"hard"
AI_WHITELIST_DOMAINS: tuple[str, ...] = (
    "economictimes.indiatimes.com",
    "business-standard.com",
    "livemint.com",
    "financialexpress.com",
    "moneycontrol.com",
    "businesstoday.in",
    "thehindubusinessline.com",
)

# Dedup trust order (lower index = more trusted)
SOURCE_PRIORITY: tuple[str, ...] = AI_WHITELIST_DOMAINS + (
    "thehindu.com",
    "timesofindia.indiatimes.com",
    "newindianexpress.com",
)

UNLISTED_PRIORITY = 500
MISSING_PRIORITY = 999

# Google News reports publisher names rather than domains
PUBLISHER_NAME_TO_DOMAIN: dict[str, str] = {
    "economic times": "economictimes.indiatimes.com",
    "the economic times": "economictimes.indiatimes.com",
    "et manufacturing": "economictimes.indiatimes.com",
    "business standard": "business-standard.com",
    "mint": "livemint.com",
    "live mint": "livemint.com",
    "livemint": "livemint.com",
    "financial express": "financialexpress.com",
    "the financial express": "financialexpress.com",
    "moneycontrol": "moneycontrol.com",
    "moneycontrol.com": "moneycontrol.com",
    "business today": "businesstoday.in",
    "the hindu businessline": "thehindubusinessline.com",
    "businessline": "thehindubusinessline.com",
    "the hindu": "thehindu.com",
    "times of india": "timesofindia.indiatimes.com",
    "the times of india": "timesofindia.indiatimes.com",
    "the new indian express": "newindianexpress.com",
    "new indian express": "newindianexpress.com",
}
