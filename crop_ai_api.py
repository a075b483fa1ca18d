#!/usr/bin/env python3
"""
JSON entry point: one request object on stdin, one result object on stdout.

    {"action": "parse_report", "report_text": "..."}
    {"action": "analyze_rotation", "plan": [...]}          # plan omitted → saved plan
    {"action": "rotation_suggestion", "user_profile": {...}, "plan": [...]}
    {"action": "analyze_report", "crop": "...", "symptoms": "...", "language": "Hindi"}
    {"action": "farming_recommendation", "user_profile": {...}}
"""

import sys
import json

from agricultural_config import OUTPUT_VERSION, DEFAULT_LANGUAGE, get_disclaimer
from crop_rotation import CropEntry, analyze_plan_records
from report_parser import parse_analysis_report
from plan_store import load_plan

ACTIONS = (
    "parse_report", "analyze_rotation", "rotation_suggestion",
    "analyze_report", "farming_recommendation",
)


def _plan_records(input_data: dict) -> list:
    records = input_data.get("plan")
    if records is None:
        return [entry.to_dict() for entry in load_plan(input_data.get("storage_path"))]
    if not isinstance(records, list):
        raise ValueError("'plan' must be a list of crop entries")
    return [r for r in records if isinstance(r, dict)]


def handle_request(input_data: dict) -> dict:
    """
    Dispatch one request.

    Raises:
        ValueError: If the action is missing or unknown
    """
    action = input_data.get("action")
    language = input_data.get("language") or DEFAULT_LANGUAGE

    if action == "parse_report":
        result = parse_analysis_report(input_data.get("report_text", "")).to_dict()
    elif action == "analyze_rotation":
        result = analyze_plan_records(_plan_records(input_data))
    elif action == "rotation_suggestion":
        # Imported here so report/rotation parsing works without LLM credentials
        from advisor_chain import generate_rotation_suggestion
        plan = [CropEntry.from_dict(r) for r in _plan_records(input_data)]
        result = {
            "version": OUTPUT_VERSION,
            "suggestion": generate_rotation_suggestion(input_data.get("user_profile"), plan),
        }
    elif action == "analyze_report":
        from advisor_chain import analyze_crop_report
        result = analyze_crop_report(
            crop=input_data.get("crop", ""),
            symptoms=input_data.get("symptoms", ""),
            language=language,
        )
    elif action == "farming_recommendation":
        from advisor_chain import generate_farming_recommendation
        result = {"version": OUTPUT_VERSION}
        result.update(generate_farming_recommendation(input_data.get("user_profile")))
    else:
        raise ValueError(f"Unknown action: {action}. Must be one of {list(ACTIONS)}")

    result["success"] = True
    result["disclaimer"] = get_disclaimer(language)
    return result


if __name__ == "__main__":
    try:
        input_data = json.loads(sys.stdin.read())
        if not isinstance(input_data, dict):
            raise ValueError("Request must be a JSON object")

        result = handle_request(input_data)
        print(json.dumps(result, ensure_ascii=False))

    except Exception as e:
        error_result = {
            "version": OUTPUT_VERSION,
            "success": False,
            "error": str(e),
            "disclaimer": get_disclaimer(),
        }
        print(json.dumps(error_result, ensure_ascii=False))
        sys.exit(1)
