"""
Sector vocabulary and keyword tables.

Three tables with different jobs:
- HEURISTIC_SECTOR_RULES: first-match inference on title/body when nothing
  else supplied a sector (coarse labels, order matters).
- SECTOR_EVIDENCE_RULES: keyword family per label, used to check that a
  claimed sector is actually supported by the article.
- SECTOR_REFINEMENT_RULES: company-aware second pass producing finer
  labels (Data Centre vs IT/Software, Refinery & Petrochemicals, ...).
"""

from ..common.rules import KeywordRule, RuleTable


SECTORS: tuple[str, ...] = (
    "Steel",
    "Renewable Energy",
    "Semiconductor",
    "Textiles",
    "Food Processing",
    "Automobile",
    "Pharma",
    "IT/Data Centre",
    "Chemicals",
    "Cement",
    "Electronics",
    "Electronics/EMS",
    "Oil & Gas",
    "Logistics/Warehousing",
    "Mining",
    "Real Estate/Infra",
    "Data Centre",
    "IT/Software",
    "Green Hydrogen",
    "Refinery & Petrochemicals",
    "Gas & Pipelines",
    "Power Generation",
)

# Labels broad enough that the refinement pass may replace them even when supported
COARSE_SECTORS = frozenset({"IT/Data Centre", "Chemicals", "Electronics", "Oil & Gas"})

_AUTO_PATTERN = (
    r"\bauto(?:mobiles?|motive|s)?\b|\bevs?\b|\belectric vehicles?\b|\bbatter(?:y|ies)\b"
)

HEURISTIC_SECTOR_RULES = RuleTable(
    name="heuristic-sector",
    version="1",
    rules=(
        KeywordRule.terms("Steel", "steel", "ferro*", "metal*"),
        KeywordRule.terms("Renewable Energy", "renewable*", "solar", "wind", "green energy", "module*", "cell", "cells"),
        KeywordRule.terms("Semiconductor", "semiconductor*", "chip*", "fab"),
        KeywordRule.terms("Textiles", "textile*", "garment*", "apparel", "loom*"),
        KeywordRule.terms("Food Processing", "food processing", "agri*", "dairy", "rice mill*", "cold storage"),
        KeywordRule.regex("Automobile", _AUTO_PATTERN),
        KeywordRule.terms("Pharma", "pharma*", "biotech*", "formulation*"),
        KeywordRule.terms("IT/Data Centre", "it park", "data centre", "data center", "software"),
        KeywordRule.terms("Chemicals", "chemic*", "petrochem*", "refinery", "fertiliser*", "fertilizer*"),
        KeywordRule.terms("Cement", "cement"),
        KeywordRule.terms("Electronics", "electronics", "ems", "assembly"),
    ),
)

SECTOR_EVIDENCE_RULES = RuleTable(
    name="sector-evidence",
    version="1",
    rules=(
        KeywordRule.terms("Steel", "steel", "iron", "metal*", "ferro*"),
        KeywordRule.terms(
            "Automobile", "automobile*", "automotive", "vehicle*", "car", "cars", "ev", "evs",
            "electric vehicle*", "two-wheeler*", "two wheeler*", "scooter*", "truck*", "bus", "buses", "oem",
        ),
        KeywordRule.terms("Electronics/EMS", "electronics", "ems", "assembly", "phone*", "smartphone*", "pcb"),
        KeywordRule.terms("Electronics", "electronics", "ems", "assembly", "phone*", "smartphone*", "pcb"),
        KeywordRule.terms("Semiconductor", "semiconductor*", "chip*", "wafer*", "fab", "fabs", "foundry", "atmp", "osat"),
        KeywordRule.terms("Renewable Energy", "renewable*", "solar", "wind", "green energy"),
        KeywordRule.terms("Oil & Gas", "oil", "gas", "petroleum", "refinery", "refineries"),
        KeywordRule.terms("Cement", "cement"),
        KeywordRule.terms("Textiles", "textile*", "fabric*", "garment*", "apparel"),
        KeywordRule.terms(
            "IT/Data Centre", "data centre*", "data center*", "software", "it park", "it services",
            "information technology",
        ),
        KeywordRule.terms("Food Processing", "food", "processing", "agri*", "dairy"),
        KeywordRule.terms("Pharma", "pharma*", "medicine*", "biotech*", "formulation*"),
        KeywordRule.terms("Logistics/Warehousing", "logistic*", "warehous*", "storage"),
        KeywordRule.terms("Mining", "mining", "mine", "mines", "coal", "mineral*"),
        KeywordRule.terms("Real Estate/Infra", "real estate", "infrastructure", "construction"),
        KeywordRule.terms("Chemicals", "chemical*", "petrochemical*", "fertiliser*", "fertilizer*"),
        KeywordRule.terms("Data Centre", "data centre*", "data center*", "hyperscale*"),
        KeywordRule.terms(
            "IT/Software", "software", "it services", "it park", "information technology", "saas",
            "global capability cent*",
        ),
        KeywordRule.terms("Green Hydrogen", "green hydrogen", "green ammonia", "electrolyser*", "electrolyzer*"),
        KeywordRule.terms("Refinery & Petrochemicals", "refiner*", "petrochemical*", "cracker"),
        KeywordRule.terms("Gas & Pipelines", "pipeline*", "city gas", "cgd", "lng", "gas distribution"),
        KeywordRule.terms(
            "Power Generation", "power plant*", "power project*", "power station*", "thermal",
            "hydro*", "megawatt*", "mw", "power generation",
        ),
    ),
)

SECTOR_REFINEMENT_RULES = RuleTable(
    name="sector-refinement",
    version="1",
    rules=(
        KeywordRule.terms("Cement", "cement"),
        KeywordRule.terms("Data Centre", "data centre*", "data center*", "hyperscale*"),
        KeywordRule.terms(
            "IT/Software", "software", "it services", "information technology", "it park", "saas",
            "global capability cent*",
        ),
        KeywordRule.terms("Semiconductor", "semiconductor*", "chip*", "wafer*", "foundry", "atmp", "osat", "fab"),
        KeywordRule.terms("Electronics", "electronics", "ems", "pcb", "smartphone*", "mobile phone*", "display*"),
        KeywordRule.terms("Steel", "steel"),
        KeywordRule.terms("Green Hydrogen", "green hydrogen", "green ammonia", "electrolyser*", "electrolyzer*"),
        KeywordRule.terms("Refinery & Petrochemicals", "refiner*", "petrochemical*", "cracker"),
        KeywordRule.terms("Gas & Pipelines", "pipeline*", "city gas", "cgd", "lng terminal*", "gas distribution"),
        KeywordRule.terms("Oil & Gas", "oil", "crude", "petroleum", "natural gas"),
        KeywordRule.terms("Renewable Energy", "solar", "wind", "renewable*", "pumped storage", "green energy"),
        KeywordRule.terms(
            "Power Generation", "thermal power", "power plant*", "power project*", "power station*",
            "hydroelectric", "power generation", "supercritical",
        ),
        KeywordRule.regex(
            "Automobile",
            r"\bauto(?:mobiles?|motive)\b|\bevs?\b|\b(?:electric )?vehicles?\b|\btwo[- ]wheelers?\b",
        ),
    ),
)

# Refinement overrides for recognized company families
OIL_GAS_OVERRIDES = RuleTable(
    name="oil-gas-major-overrides",
    version="1",
    rules=(
        KeywordRule.terms("Green Hydrogen", "green hydrogen", "green ammonia"),
        KeywordRule.terms("Refinery & Petrochemicals", "refiner*", "petrochemical*", "cracker"),
        KeywordRule.terms("Gas & Pipelines", "pipeline*", "city gas", "cgd", "gas distribution"),
    ),
)
OIL_GAS_DEFAULT = "Oil & Gas"

POWER_UTILITY_OVERRIDES = RuleTable(
    name="power-utility-overrides",
    version="1",
    rules=(
        KeywordRule.terms("Green Hydrogen", "green hydrogen", "green ammonia"),
        KeywordRule.terms("Renewable Energy", "solar", "wind", "renewable*", "green energy"),
    ),
)
POWER_UTILITY_DEFAULT = "Power Generation"

# Foxconn / Automobile disambiguation
VEHICLE_RULE = KeywordRule.regex(
    "Automobile",
    r"\b(?:cars?|vehicles?|evs?|two[- ]wheelers?|scooters?|bus(?:es)?|trucks?|oems?|automobiles?|automotive)\b",
)
SEMICONDUCTOR_RULE = KeywordRule.regex(
    "Semiconductor", r"\b(?:semiconductors?|chips?|fabs?|foundry|atmp|osat|wafers?)\b",
)
ELECTRONICS_RULE = KeywordRule.regex(
    "Electronics/EMS",
    r"\b(?:iphones?|phones?|smartphones?|ems|assembly|electronics|pcbs?|modules?|displays?|connectors?|smt)\b",
)

# Company names that are clearly software businesses ("Automobile" on these is wrong)
SOFTWARE_COMPANY_RULE = KeywordRule.regex(
    "IT/Software",
    r"\b(?:software|technologies|tech|infotech|infosys|tcs|wipro|hcl|systems|solutions|digital|labs)\b",
)
