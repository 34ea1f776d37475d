"""
Natural-language performance analysis for a subject.

The analysis is produced by an external text-generation service. Callers only
ever receive a string: either the generated analysis or ANALYSIS_FAILED.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx

from config import Settings, get_settings

logger = logging.getLogger(__name__)

ANALYSIS_FAILED = "Analysis failed. Please check the API key and console for errors."

PROMPT_TEMPLATE = """
Analyze the following student performance data for the subject ID **{subject_id}**.

The data is an array of objects: {data}.

Provide a concise analysis focusing on:
1. **Overall Performance:** Average score and distribution (e.g., how many failed, passed, excelled).
2. **Key Findings:** Note any significant trends in the scores.
3. **Recommendations:** Suggest 1-2 actionable recommendations for the teacher.

Format the output using clear headings and bullet points.
"""


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str:
        ...


class AnalysisServiceError(RuntimeError):
    """Raised by the client when the service returns no usable text"""


class GeminiClient:
    """Minimal client for the Gemini generateContent REST endpoint"""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings or get_settings()
        self._transport = transport

    def generate(self, prompt: str) -> str:
        if not self.settings.gemini_api_key:
            raise AnalysisServiceError("No API key configured for the analysis service")

        url = f"{self.settings.gemini_endpoint}/models/{self.settings.gemini_model}:generateContent"
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        with httpx.Client(timeout=self.settings.analysis_timeout, transport=self._transport) as client:
            response = client.post(url, params={"key": self.settings.gemini_api_key}, json=body)
            response.raise_for_status()
            payload = response.json()

        try:
            parts = payload["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise AnalysisServiceError(f"Unexpected response shape: {e}") from e
        text = "".join(part.get("text", "") for part in parts)
        if not text.strip():
            raise AnalysisServiceError("Empty analysis returned")
        return text


def build_prompt(subject_id: str, performance_data: Sequence[Dict[str, Any]]) -> str:
    return PROMPT_TEMPLATE.format(subject_id=subject_id, data=json.dumps(list(performance_data)))


def performance_data(grades: Sequence[Any]) -> List[Dict[str, Any]]:
    """Reduce grade records to the dataset sent for analysis."""
    return [{"name": g.student_name, "score": g.score} for g in grades]


def analyze(subject_id: str, data: Sequence[Dict[str, Any]], client: Optional[TextGenerator] = None) -> str:
    """Return the analysis text for ``subject_id``, or ANALYSIS_FAILED on any error."""
    try:
        client = client or GeminiClient()
        return client.generate(build_prompt(subject_id, data))
    except Exception as e:
        logger.error(f"Error analyzing student data for subject {subject_id}: {str(e)}", exc_info=True)
        return ANALYSIS_FAILED
