"""
Centralized Agricultural Configuration
This file contains all predefined agricultural rules, keyword tables, and domain-specific constants.
Single source of truth for seasons, crop categories, report conventions, and rotation rules.
"""

import os

# ============================================================================
# OUTPUT VERSION
# ============================================================================
OUTPUT_VERSION = "kisansaathi-ai-v1.0"

# ============================================================================
# SEASONS (planting-cycle order, NOT calendar order)
# ============================================================================
SEASONS = ["Kharif", "Rabi", "Zaid"]

# Display labels used by the planner UI and stored plans
SEASON_LABELS = {
    "Kharif": "Kharif (Monsoon)",
    "Rabi": "Rabi (Winter)",
    "Zaid": "Zaid (Summer)",
}

# ============================================================================
# CROP CATALOGUE
# ============================================================================
CROP_CATEGORIES = {
    "Cereals": ["Rice", "Wheat", "Maize", "Barley", "Sorghum", "Millet"],
    "Pulses": ["Chickpea", "Lentil", "Pigeon Pea", "Mung Bean", "Black Gram", "Kidney Bean"],
    "Oilseeds": ["Mustard", "Groundnut", "Sunflower", "Soybean", "Sesame"],
    "Vegetables": ["Tomato", "Potato", "Onion", "Cabbage", "Cauliflower", "Brinjal"],
    "Cash Crops": ["Cotton", "Sugarcane", "Tobacco", "Jute"],
    "Legumes": ["Alfalfa", "Clover", "Vetch"],
}

# Categories that count as nitrogen-fixing for the legume rule (exact match)
LEGUME_CATEGORIES = ("Pulses", "Legumes")

# Diversity rule: fewer than MIN categories over MORE THAN this many entries
MIN_CATEGORY_DIVERSITY = 2
DIVERSITY_MIN_ENTRIES = 2

# ============================================================================
# SOIL TYPE GUIDANCE (used when the farming recommendation cannot be generated)
# ============================================================================
SOIL_SUITABLE_CROPS = {
    "Alluvial": ["- Rice, Wheat, Sugarcane, Cotton", "- Vegetables: Potato, Onion, Tomato"],
    "Black": ["- Cotton, Soybean, Wheat, Jowar", "- Pulses: Chickpea, Pigeon pea"],
    "Red": ["- Groundnut, Millets, Pulses", "- Vegetables: Tomato, Potato"],
    "Laterite": ["- Rice, Ragi, Cashew, Coconut", "- Vegetables: Tapioca, Sweet potato"],
}
DEFAULT_SUITABLE_CROPS = ["- Millets, Pulses, Drought-resistant crops"]

SOIL_FERTILIZER_GUIDANCE = {
    "Alluvial": [
        "- NPK ratio: 120:60:40 kg/ha for cereals",
        "- Add organic manure: 10-15 tons/ha",
        "- Micronutrients: Zinc and Boron as needed",
    ],
    "Black": [
        "- NPK ratio: 100:50:50 kg/ha",
        "- Gypsum application for calcium",
        "- Organic matter: 8-10 tons/ha",
    ],
    "Red": [
        "- NPK ratio: 80:40:40 kg/ha",
        "- Lime application to reduce acidity",
        "- Organic compost: 12-15 tons/ha",
    ],
    "Laterite": [
        "- NPK ratio: 60:30:30 kg/ha",
        "- Heavy organic matter addition",
        "- Lime for pH correction",
    ],
}
DEFAULT_FERTILIZER_GUIDANCE = [
    "- Organic matter is crucial",
    "- Minimal chemical fertilizers",
    "- Focus on water conservation",
]

# ============================================================================
# ROTATION ANALYSIS MESSAGES
# ============================================================================
CONSECUTIVE_CROP_ISSUE = "⚠️ Same crop ({crop}) planted consecutively"
LEGUME_RECOMMENDATION = "💡 Consider adding legumes to improve soil nitrogen"
DIVERSITY_RECOMMENDATION = "💡 Increase crop diversity to improve soil health"

# ============================================================================
# ANALYSIS REPORT CONVENTIONS
# ============================================================================
# Header label of the bilingual tables ("| Feature | English | Hindi |")
TABLE_HEADER_LABEL = "Feature"

PRIMARY_LANGUAGE_LABEL = "English"

# Secondary-language labels accepted on treatment lines (English + native script)
SECONDARY_LANGUAGE_LABELS = [
    "Hindi", "Punjabi", "Marathi", "Telugu",
    "हिंदी", "ਪੰਜਾਬੀ", "मराठी", "తెలుగు",
]

REPORT_LANGUAGES = ["Hindi", "Punjabi", "Marathi", "Telugu"]

# Farmer's language when a request does not name one
DEFAULT_LANGUAGE = "Hindi"

# Route name -> heading keyword (case-insensitive substring)
SECTION_KEYWORDS = {
    "identification": "IDENTIFICATION",
    "symptoms": "SYMPTOMS",
    "diagnosis": "DIAGNOSIS",
    "treatment": "TREATMENT",
    "notes": "ADDITIONAL",
}

# Table fields holding the classified values
SEVERITY_FIELD_KEYWORD = "severity"
CONFIDENCE_FIELD_KEYWORD = "confidence"

# ============================================================================
# SEVERITY / CONFIDENCE KEYWORD TABLES
# ============================================================================
# kind -> language -> tier -> keywords (lower-case, substring match).
# Only the top and mid tiers are listed; anything else falls to the lowest tier.
# Hindi and Marathi share Devanagari words, both are listed so either can be swapped out.
TIER_KEYWORDS = {
    "severity": {
        "english": {"Severe": ["severe"], "Moderate": ["moderate"]},
        "hindi": {"Severe": ["गंभीर"], "Moderate": ["मध्यम"]},
        "punjabi": {"Severe": ["ਗੰਭੀਰ"], "Moderate": ["ਮੱਧਮ"]},
        "marathi": {"Severe": ["गंभीर"], "Moderate": ["मध्यम"]},
        "telugu": {"Severe": ["తీవ్రమైన"], "Moderate": ["మధ్యస్థ"]},
    },
    "confidence": {
        "english": {"High": ["high", "95"], "Medium": ["medium"]},
        "hindi": {"High": ["उच्च"], "Medium": ["मध्यम"]},
        "punjabi": {"High": ["ਉੱਚ"], "Medium": ["ਮੱਧਮ"]},
        "marathi": {"High": ["उच्च"], "Medium": ["मध्यम"]},
        "telugu": {"High": ["అధిక"], "Medium": ["మధ్యస్థ"]},
    },
}

# Presentation badge variants per tier
SEVERITY_BADGES = {
    "Severe": "destructive",
    "Moderate": "default",
    "Low": "secondary",
}

CONFIDENCE_BADGES = {
    "High": "default",
    "Medium": "secondary",
    "Low": "outline",
}

# ============================================================================
# LLM SETTINGS
# ============================================================================
LLM_PROVIDER = os.environ.get("KISANSAATHI_LLM_PROVIDER", "gemini")
GEMINI_MODEL = os.environ.get("KISANSAATHI_GEMINI_MODEL", "gemini-2.0-flash")
OLLAMA_MODEL = os.environ.get("KISANSAATHI_OLLAMA_MODEL", "llama3.2")
OLLAMA_BASE_URL = os.environ.get("KISANSAATHI_OLLAMA_URL", "http://localhost:11434")
LLM_TEMPERATURE = 0.3  # 🔒 Controlled text generation

# ============================================================================
# LOCAL STORAGE
# ============================================================================
STORAGE_PATH = os.environ.get(
    "KISANSAATHI_STORAGE_PATH",
    os.path.join(os.path.expanduser("~"), ".kisansaathi", "storage.json"),
)
CROP_PLAN_STORAGE_KEY = "cropRotationPlan"

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def season_index(season: str) -> int:
    """
    Position of a season in the planting cycle.

    Args:
        season: Season name ("Kharif") or display label ("Kharif (Monsoon)")

    Returns:
        0, 1 or 2 for recognised seasons, -1 otherwise
    """
    if season in SEASONS:
        return SEASONS.index(season)
    for index, name in enumerate(SEASONS):
        if SEASON_LABELS[name] == season:
            return index
    return -1


def get_crops_for_category(category: str) -> list:
    """
    Get crop list for a category.

    Args:
        category: Category name (e.g. "Pulses")

    Returns:
        List of crops, empty if the category is unknown
    """
    return list(CROP_CATEGORIES.get(category, []))


def get_category_for_crop(crop: str):
    """Return the catalogue category of a crop (case-insensitive), or None."""
    crop_lower = crop.lower()
    for category, crops in CROP_CATEGORIES.items():
        if crop_lower in [c.lower() for c in crops]:
            return category
    return None


# ============================================================================
# DISCLAIMERS
# ============================================================================

DISCLAIMER_EN = (
    "This analysis is generated from an AI report and standard agriculture "
    "guidelines. Please consult your local agriculture officer for final decisions."
)

DISCLAIMER_HI = (
    "यह विश्लेषण एआई रिपोर्ट और मानक कृषि दिशानिर्देशों पर आधारित है। "
    "अंतिम निर्णय के लिए अपने स्थानीय कृषि अधिकारी से परामर्श करें।"
)

DISCLAIMER_MR = (
    "हा सल्ला एआय अहवाल व मानक कृषी मार्गदर्शक तत्वांवर आधारित आहे. "
    "अंतिम निर्णयासाठी स्थानिक कृषी अधिकाऱ्यांचा सल्ला घ्यावा."
)

DISCLAIMERS = {
    "english": DISCLAIMER_EN,
    "hindi": DISCLAIMER_HI,
    "marathi": DISCLAIMER_MR,
    "en": DISCLAIMER_EN,
    "hi": DISCLAIMER_HI,
    "mr": DISCLAIMER_MR,
}


def get_disclaimer(language: str = DEFAULT_LANGUAGE) -> str:
    """
    Disclaimer attached to every advisory response.

    Hindi and Marathi have their own text; Punjabi, Telugu and any unknown
    language get the English one. Names and two-letter codes are both
    accepted, in any case.
    """
    key = (language or "").strip().lower()
    if key not in DISCLAIMERS:
        return DISCLAIMER_EN
    return DISCLAIMERS[key]
