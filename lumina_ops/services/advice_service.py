"""
Advice Generator

Thin best-effort wrapper over the Gemini ``generateContent`` REST endpoint.

- One request per call, no retry, bounded by ADVICE_TIMEOUT_SECONDS
- Every failure (no API key, transport error, non-2xx, empty text) is
  logged and replaced by a fixed fallback string
- Never raises to its caller
"""

import json
import time
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings, settings as default_settings
from ..models import Issue, Job

logger = logging.getLogger(__name__)

ADVICE_FALLBACK = "Unable to generate advice at this time."
SUMMARY_FALLBACK = "Property status summary unavailable."


@dataclass
class AdviceResult:
    """Generated text plus whether the fallback was used"""
    text: str
    fallback: bool = False
    duration_ms: Optional[float] = None


class AdviceGenerationError(Exception):
    """Raised internally when Gemini gives no usable text; never leaves this module"""


class AdviceService:
    """
    Gemini text generation for maintenance advice and property summaries.

    ``transport`` lets tests inject an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.config = config or default_settings
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.config.gemini_api_key)

    def _endpoint(self) -> str:
        base = self.config.gemini_base_url.rstrip("/")
        return f"{base}/models/{self.config.gemini_model}:generateContent"

    def _extract_text(self, data: Dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            raise AdviceGenerationError("No candidates in response")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts).strip()
        if not text:
            raise AdviceGenerationError("Empty text in response")
        return text

    def _generate(self, prompt: str) -> str:
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.config.gemini_api_key,
        }
        with httpx.Client(
            timeout=self.config.advice_timeout_seconds,
            transport=self.transport
        ) as client:
            response = client.post(self._endpoint(), headers=headers, json=payload)
            response.raise_for_status()
            return self._extract_text(response.json())

    def _generate_or_fallback(self, prompt: str, fallback: str, purpose: str) -> AdviceResult:
        if not self.enabled:
            logger.warning(f"Gemini API key not configured, using fallback for {purpose}")
            return AdviceResult(text=fallback, fallback=True)

        start_time = time.time()
        try:
            text = self._generate(prompt)
        except httpx.TimeoutException:
            logger.error(f"Gemini timed out after {self.config.advice_timeout_seconds}s ({purpose})")
            return AdviceResult(text=fallback, fallback=True)
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini returned {e.response.status_code} ({purpose})")
            return AdviceResult(text=fallback, fallback=True)
        except Exception as e:
            logger.error(f"Gemini error ({purpose}): {e}")
            return AdviceResult(text=fallback, fallback=True)

        duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.info(f"Gemini {purpose} generated in {duration_ms}ms")
        return AdviceResult(text=text, duration_ms=duration_ms)

    # ======== Public API ========

    def generate_maintenance_advice(self, description: str) -> str:
        return self.maintenance_advice(description).text

    def maintenance_advice(self, description: str) -> AdviceResult:
        prompt = (
            f'Given this maintenance issue: "{description}", provide a 2-sentence expert advice '
            "on the likely complexity and recommended trade professional to handle it."
        )
        return self._generate_or_fallback(prompt, ADVICE_FALLBACK, "maintenance advice")

    def summarize_property_status(self, property_id: str, jobs: List[Job], issues: List[Issue]) -> str:
        return self.property_summary(property_id, jobs, issues).text

    def property_summary(self, property_id: str, jobs: List[Job], issues: List[Issue]) -> AdviceResult:
        try:
            jobs_json = json.dumps([j.model_dump(mode="json") for j in jobs])
            issues_json = json.dumps([i.model_dump(mode="json") for i in issues])
        except Exception as e:
            logger.error(f"Could not serialize property {property_id} for summary: {e}")
            return AdviceResult(text=SUMMARY_FALLBACK, fallback=True)

        prompt = (
            f"Summarize the current status of property {property_id}.\n"
            f"Jobs: {jobs_json}\n"
            f"Issues: {issues_json}\n"
            "Provide a concise 1-paragraph summary for the operations manager."
        )
        return self._generate_or_fallback(prompt, SUMMARY_FALLBACK, "property summary")
