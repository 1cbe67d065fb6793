"""Regenerate token_limit/pricing_data.py from the OpenRouter models API.

Usage:
    python scripts/update_open_router_data.py
"""

import json
import logging
import re
import sys
import urllib.error
import urllib.request
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from token_limit.data import SUPPORTED_MODELS

logger = logging.getLogger("update_open_router_data")

MODELS_URL = "https://openrouter.ai/api/v1/models"
OUTPUT_PATH = Path(__file__).resolve().parent.parent / "token_limit" / "pricing_data.py"

MIN_RELEVANCE = 100
MAX_CANDIDATES = 10

_UNSTABLE_PATTERNS = [
    re.compile(r"beta", re.IGNORECASE),
    re.compile(r"preview", re.IGNORECASE),
    re.compile(r"\d{4}-\d{2}-\d{2}"),
    re.compile(r"alpha", re.IGNORECASE),
    re.compile(r"experimental", re.IGNORECASE),
    re.compile(r":thinking", re.IGNORECASE),
    re.compile(r"-search-", re.IGNORECASE),
    re.compile(r"pro$", re.IGNORECASE),
    re.compile(r"high$", re.IGNORECASE),
]

HEADER = '''"""Model pricing and context windows from OpenRouter.

Generated by scripts/update_open_router_data.py. Do not edit by hand.
Prices are USD per 1000 tokens.
"""

from typing import Any, Dict
'''


def fetch_models(url: str = MODELS_URL) -> List[Dict[str, Any]]:
    request = urllib.request.Request(url, headers={"User-Agent": "token-limit"})
    with urllib.request.urlopen(request, timeout=30) as response:
        return json.loads(response.read().decode())["data"]


def _normalize(value: str) -> str:
    return re.sub(r"[^0-9a-z]", "", value.lower())


def _strip_vendor(value: str) -> str:
    return value.split("/", 1)[-1]


def is_stable_model(model_id: str) -> bool:
    return not any(pattern.search(model_id) for pattern in _UNSTABLE_PATTERNS)


def calculate_relevance(model: Dict[str, Any], target_id: str) -> int:
    """Score how well an OpenRouter model matches a registry model name.

    Exact id and slug matches score highest, prefix matches lose points
    for every extra character, and candidates sharing fewer than half of
    the target's words are penalized.
    """
    target = _normalize(target_id)
    model_id = _normalize(_strip_vendor(model["id"]))
    canonical = _normalize(_strip_vendor(model.get("canonical_slug", "")))
    name = _normalize(model.get("name", ""))

    score = 0
    if model_id == target:
        score += 1000
    if canonical == target:
        score += 900

    if model_id.startswith(target):
        extra = len(model_id) - len(target)
        score += 800 if extra == 0 else max(0, 500 - extra * 50)

    if canonical.startswith(target):
        extra = len(canonical) - len(target)
        score += 700 if extra == 0 else max(0, 400 - extra * 30)

    if target in name:
        score += 200

    if is_stable_model(model["id"]):
        score += 100

    target_words = re.findall(r"[a-z]+|\d+", target)
    model_words = re.findall(r"[a-z]+|\d+", model_id)
    common = [
        word
        for word in target_words
        if any(word in other or other in word for other in model_words)
    ]
    if len(common) < len(target_words) * 0.5:
        score -= 500

    return score


def _total_price(model: Dict[str, Any]) -> float:
    pricing = model.get("pricing", {})
    return float(pricing.get("prompt", 0)) + float(pricing.get("completion", 0))


def find_best_match(
    models: List[Dict[str, Any]], target_id: str
) -> Optional[Dict[str, Any]]:
    """Pick the most relevant OpenRouter model, preferring cheaper ones on ties."""
    candidates = sorted(
        (
            (calculate_relevance(model, target_id), model)
            for model in models
        ),
        key=lambda item: item[0],
        reverse=True,
    )
    candidates = [item for item in candidates if item[0] > MIN_RELEVANCE][:MAX_CANDIDATES]
    if not candidates:
        return None

    return max(
        candidates, key=lambda item: item[0] - _total_price(item[1]) * 1000
    )[1]


def build_pricing(
    models: List[Dict[str, Any]], updated_at: str
) -> Dict[str, Dict[str, Any]]:
    pricing = {}
    for entries in SUPPORTED_MODELS.values():
        for model_name in entries:
            match = find_best_match(models, model_name)
            if match is None:
                logger.warning("%s cannot be matched with OpenRouter models", model_name)
                continue

            pricing[model_name] = {
                "canonical_slug": match["canonical_slug"],
                "context_window": match["context_length"],
                "input_cost_per_1k": round(float(match["pricing"]["prompt"]) * 1000, 6),
                "output_cost_per_1k": round(float(match["pricing"]["completion"]) * 1000, 6),
                "last_updated": updated_at,
                "source": "openrouter",
            }
    return pricing


def render_module(pricing: Dict[str, Dict[str, Any]]) -> str:
    lines = [HEADER, "OPEN_ROUTER_MODELS: Dict[str, Dict[str, Any]] = {"]
    for model_name, entry in pricing.items():
        lines.append(f"    {json.dumps(model_name)}: {{")
        for key, value in entry.items():
            lines.append(f'        "{key}": {json.dumps(value)},')
        lines.append("    },")
    lines.append("}")
    return "\n".join(lines) + "\n"


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    try:
        models = fetch_models()
    except urllib.error.URLError as e:
        logger.error("Failed to fetch models: %s", e.reason)
        return 1

    updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    pricing = build_pricing(models, updated_at)
    OUTPUT_PATH.write_text(render_module(pricing), encoding="utf-8")
    logger.info("Wrote %d models to %s", len(pricing), OUTPUT_PATH)
    return 0


if __name__ == "__main__":
    sys.exit(main())
