"""
LLM advisory chains (prompt | llm | StrOutputParser).

Only TEXT comes out of these chains. Everything the app displays as data is
produced afterwards by report_parser / crop_rotation, never by the model.
"""

import sys
from typing import Any, Dict, List, Optional

from langchain_core.prompts import ChatPromptTemplate
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_ollama import ChatOllama

from agricultural_config import (
    LLM_PROVIDER, GEMINI_MODEL, OLLAMA_MODEL, OLLAMA_BASE_URL, LLM_TEMPERATURE,
    REPORT_LANGUAGES, DEFAULT_LANGUAGE,
    SOIL_SUITABLE_CROPS, DEFAULT_SUITABLE_CROPS,
    SOIL_FERTILIZER_GUIDANCE, DEFAULT_FERTILIZER_GUIDANCE,
)
from crop_rotation import CropEntry
from report_parser import parse_analysis_report

# ============================================================================
# PROMPTS
# ============================================================================

ANALYSIS_REPORT_PROMPT = ChatPromptTemplate.from_template("""
You are an expert plant pathologist helping Indian farmers.

Crop: {crop}
Observed symptoms (farmer's description): {symptoms}
Farmer's language: {language}

Write a crop health analysis report in English AND {language}.

🔴 OUTPUT FORMAT (MANDATORY - the app reads this format):

## CROP IDENTIFICATION
| Feature | English | {language} |
|:---|:---|:---|
| Crop | ... | ... |
| Growth Stage | ... | ... |

## SYMPTOMS OBSERVED
| Feature | English | {language} |
|:---|:---|:---|
| Leaf Condition | ... | ... |
| Severity | Severe / Moderate / Mild | ... |

## DIAGNOSIS
| Feature | English | {language} |
|:---|:---|:---|
| Disease | ... | ... |
| Confidence | High / Medium / Low | ... |

## TREATMENT RECOMMENDATIONS
1. **Short treatment title**
   - English: one or two sentences
   - {language}: the same in {language}

## ADDITIONAL NOTES
| Feature | English | {language} |
|:---|:---|:---|
| Prevention | ... | ... |

✅ RULES:
- Use exactly these five "## " headings
- Every table row has exactly three cells: field, English, {language}
- Number treatments 1., 2., 3. with a **bold** title
- NO text before the first heading
""")

ROTATION_SUGGESTION_PROMPT = ChatPromptTemplate.from_template("""You are an expert agricultural advisor specializing in crop rotation planning.

User Profile:
- Location: {state}, {country}
- Soil Type: {soil_type}
- Address: {address}

Current Crop Rotation Plan:
{current_plan}

Please provide:
1. **Optimal Crop Rotation Suggestions**: Recommend a 3-4 year crop rotation plan suitable for their soil type and location
2. **Benefits**: Explain the benefits of the suggested rotation (soil health, pest management, nutrient balance)
3. **Seasonal Recommendations**: Suggest which crops work best in Kharif, Rabi, and Zaid seasons
4. **Soil Health Tips**: Provide specific advice on maintaining soil fertility through rotation
5. **Legume Integration**: Explain how to incorporate nitrogen-fixing legumes
6. **Pest and Disease Management**: How rotation helps prevent pest buildup

If they have a current plan, analyze it and suggest improvements. If not, provide a complete rotation plan.

Format your response in clear markdown with headings and bullet points.""")

FARMING_RECOMMENDATION_PROMPT = ChatPromptTemplate.from_template("""You are an expert agricultural advisor AI assistant for Indian farmers. Provide a personalized, actionable farming recommendation based on the following data:

**FARMER PROFILE:**
- Name: {username}
- Location: {state}, {country}
- Soil Type: {soil_type}
- Preferred Language: {language}

**CURRENT WEATHER CONDITIONS:**
- Weather data unavailable

**CURRENT MARKET PRICES ({state}):**
- Market data unavailable

Based on this information, provide a detailed recommendation in both English and {language} covering:

1. **IMMEDIATE ACTIONS** (Next 24-48 hours)
   - What {username} should do right now
   - Any urgent preparations needed

2. **CROP RECOMMENDATIONS**
   - Best crops to plant/harvest considering {soil_type} soil
   - Timing considerations for the next 1-2 weeks

3. **WEATHER-BASED ADVICE**
   - Irrigation recommendations
   - Pest/disease risks for the season

4. **MARKET INSIGHTS**
   - Strategic planting suggestions for future profitability
   - Storage vs immediate sale recommendations

5. **SOIL-SPECIFIC GUIDANCE**
   - Fertilizer recommendations for {soil_type} soil
   - Soil preparation tips
   - Crop rotation suggestions

Please provide specific, actionable advice that {username} can implement immediately. Be concise but comprehensive, and ensure the recommendations are practical for a farmer in {state}.

Format your response with clear headings and bullet points for easy reading. Make it personal and address the farmer by name where appropriate.""")

NOT_SPECIFIED = "Not specified"


# ============================================================================
# LLM INITIALIZATION
# ============================================================================

def get_llm(provider: Optional[str] = None):
    """
    Build the chat model for the configured provider.

    Args:
        provider: "gemini" or "ollama" (defaults to KISANSAATHI_LLM_PROVIDER)

    Raises:
        ValueError: If provider is not supported
    """
    provider = (provider or LLM_PROVIDER).lower()
    if provider == "gemini":
        # API key is read from GOOGLE_API_KEY by the client
        return ChatGoogleGenerativeAI(model=GEMINI_MODEL, temperature=LLM_TEMPERATURE)
    if provider == "ollama":
        return ChatOllama(model=OLLAMA_MODEL, base_url=OLLAMA_BASE_URL, temperature=LLM_TEMPERATURE)
    raise ValueError(f"Unknown LLM provider: {provider}. Must be 'gemini' or 'ollama'")


# ============================================================================
# CHAINS
# ============================================================================

def format_plan_lines(plan: List[CropEntry]) -> str:
    """Plan as prompt lines ("- 2024 Kharif: Rice (Cereals)")."""
    if not plan:
        return "No crops planned yet"
    return "\n".join(f"- {e.year} {e.season}: {e.crop} ({e.category})" for e in plan)


def generate_analysis_report(crop: str, symptoms: str, language: str = DEFAULT_LANGUAGE, llm=None) -> str:
    """
    Ask the model for a bilingual crop health report in the parser's format.

    Returns:
        Raw markdown text (may or may not follow the format)
    """
    if language.lower() not in [name.lower() for name in REPORT_LANGUAGES]:
        print(f"⚠️ Report language '{language}' has no treatment label support, local lines may be skipped", file=sys.stderr)

    chain = ANALYSIS_REPORT_PROMPT | (llm or get_llm()) | StrOutputParser()
    report = chain.invoke({
        "crop": crop or NOT_SPECIFIED,
        "symptoms": symptoms or NOT_SPECIFIED,
        "language": language,
    })
    print(f"✓ Analysis report generated, length: {len(report)}", file=sys.stderr)
    return report


def generate_rotation_suggestion(user_profile: Optional[Dict[str, Any]], plan: List[CropEntry], llm=None) -> str:
    """Free-text rotation advice for the farmer's profile and current plan."""
    profile = user_profile or {}
    chain = ROTATION_SUGGESTION_PROMPT | (llm or get_llm()) | StrOutputParser()
    return chain.invoke({
        "state": profile.get("state") or NOT_SPECIFIED,
        "country": profile.get("country") or NOT_SPECIFIED,
        "soil_type": profile.get("soilType") or NOT_SPECIFIED,
        "address": profile.get("address") or NOT_SPECIFIED,
        "current_plan": format_plan_lines(plan),
    })


def analyze_crop_report(crop: str, symptoms: str, language: str = DEFAULT_LANGUAGE, llm=None) -> Dict[str, Any]:
    """
    Complete workflow: Generate (AI) → Parse (rule-based, NO AI)

    Returns:
        Structured report dict, or the unstructured fallback dict with raw_text
    """
    report_text = generate_analysis_report(crop, symptoms, language, llm=llm)
    parsed = parse_analysis_report(report_text)
    result = parsed.to_dict()
    if not result["structured"]:
        print("⚠️ No structured format found, using raw display", file=sys.stderr)
    else:
        print(f"✓ Parsed sections: {result['sections']}", file=sys.stderr)
    return result


def _profile_inputs(user_profile: Dict[str, Any]) -> Dict[str, str]:
    return {
        "username": user_profile.get("username") or "Farmer",
        "state": user_profile.get("state") or NOT_SPECIFIED,
        "country": user_profile.get("country") or NOT_SPECIFIED,
        "soil_type": user_profile.get("soilType") or NOT_SPECIFIED,
        "language": user_profile.get("language") or DEFAULT_LANGUAGE,
    }


def build_fallback_recommendation(user_profile: Dict[str, Any]) -> str:
    """
    Rule-based recommendation (NO AI) from the soil type tables in agricultural_config.
    Used when the model cannot be reached.
    """
    inputs = _profile_inputs(user_profile)
    soil_type = user_profile.get("soilType")
    crops = SOIL_SUITABLE_CROPS.get(soil_type, DEFAULT_SUITABLE_CROPS)
    fertilizer = SOIL_FERTILIZER_GUIDANCE.get(soil_type, DEFAULT_FERTILIZER_GUIDANCE)

    return "\n".join([
        f"# Personalized Farming Recommendation for {inputs['username']}",
        "",
        "## Current Farm Profile",
        f"- **Location**: {inputs['state']}, {inputs['country']}",
        f"- **Soil Type**: {inputs['soil_type']}",
        "- **Current Weather**: Data unavailable",
        "",
        "## Immediate Actions (Next 24-48 hours)",
        "",
        "- **Monitor Weather**: Check local weather forecasts regularly",
        f"- **Soil Preparation**: {inputs['soil_type']} soil requires specific care - ensure proper drainage and organic matter content",
        "- **Irrigation Planning**: Adjust watering schedule based on current humidity levels",
        "",
        "## Crop Recommendations",
        "",
        f"For {inputs['soil_type']} soil in {inputs['state']}:",
        "",
        "### Suitable Crops:",
        *crops,
        "",
        "## Weather-Based Advice",
        "",
        "Weather data is currently unavailable. Please check local forecasts and plan accordingly.",
        "",
        "## Market Insights",
        "",
        "Market data is currently unavailable. Consult local mandis for current prices.",
        "",
        "## Soil-Specific Guidance",
        "",
        f"### For {inputs['soil_type']} Soil:",
        "",
        "**Fertilizer Recommendations:**",
        *fertilizer,
        "",
        "**Soil Preparation:**",
        "- Deep ploughing before monsoon",
        "- Add organic matter to improve soil structure",
        "- Ensure proper drainage systems",
        "- Test soil pH and nutrient levels annually",
        "",
        "---",
        "",
        "**Note**: This is a general recommendation. For specific advice tailored to your exact "
        "farm conditions, please consult with local agricultural extension officers or agronomists.",
    ])


def generate_farming_recommendation(user_profile: Optional[Dict[str, Any]], llm=None) -> Dict[str, Any]:
    """
    Personalized farming recommendation for the dashboard.

    Falls back to build_fallback_recommendation when the model fails, so a
    recommendation is always returned.

    Returns:
        {"recommendation": str, "generated": bool, "context": {...}}

    Raises:
        ValueError: If user_profile is missing
    """
    if not user_profile:
        raise ValueError("User profile is required")

    generated = True
    try:
        chain = FARMING_RECOMMENDATION_PROMPT | (llm or get_llm()) | StrOutputParser()
        text = chain.invoke(_profile_inputs(user_profile))
        print(f"✓ Recommendation generated successfully, length: {len(text)}", file=sys.stderr)
    except Exception as e:
        print(f"❌ Recommendation generation failed: {e}. Using soil-type fallback.", file=sys.stderr)
        text = build_fallback_recommendation(user_profile)
        generated = False

    return {
        "recommendation": text,
        "generated": generated,
        "context": {
            "name": user_profile.get("username"),
            "state": user_profile.get("state"),
            "soilType": user_profile.get("soilType"),
        },
    }
