"""Gemini report backend — generateContent with Google Search grounding."""

from __future__ import annotations

import logging
import re

import httpx

from dossier.backends.base import GenerationError
from dossier.config import settings
from dossier.models.research import ResearchResult

logger = logging.getLogger(__name__)

GENERATE_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

SCRATCHPAD_PATTERN = re.compile(r"<scratchpad>([\s\S]*?)</scratchpad>")
QUERY_ECHO_PATTERN = re.compile(r"^<query>[\s\S]*?</query>")
NO_SCRATCHPAD = "No scratchpad generated."

SYSTEM_INSTRUCTION = """\
You are a research intelligence analyst. Break the query down, find primary \
sources, check every claim against them and write a structured intelligence \
report.

Rules:
- Lists of tools, methods, vendors or strategies contain at least six items. \
If fewer genuinely exist, label adjacent alternatives as such and explain the gap.
- Cite every statistic and factual claim inline as [Source Name](URL), \
roughly one citation per three sentences. Prefer academic papers, official \
documentation, investigative journalism and industry reports. Never invent a \
source; drop any claim you cannot cite.
- For every item evaluated, a "### Limitations & Deficiencies" section comes \
BEFORE its strengths. Make it specific and cited, and add \
[Confidence: Low/Medium/High] to speculative analysis.
- Include at least one comparison table or a flowchart in a fenced code block. \
Every comparison table has a 'Critical Flaw' column with a citation.
- Use ## for section headings. No prose block longer than four sentences.

Output format:
1. <scratchpad> ... your research plan ... </scratchpad>
2. The final report in Markdown, starting with a ## heading.\
"""

USER_TEMPLATE = """\
<query>
{query}
</query>

Plan in the scratchpad first: the query's intent, success criteria, research \
vectors (technical, market, academic), the table or flowchart you will build \
(with a 'Critical Flaw' column) and any difficulty meeting the six-item rule.

Then write the report. Limitations come before strengths, limitations are \
cited, and every factual claim is cited.\
"""


class GeminiBackend:
    """Report backend using Gemini with Google Search grounding."""

    name: str = "Gemini"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_api_key
        self.model = model or settings.gemini_model
        self._client = client

    async def generate(self, query: str) -> ResearchResult:
        """Generate a research report for ``query``."""
        payload = {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "contents": [{"role": "user", "parts": [{"text": USER_TEMPLATE.format(query=query)}]}],
            "tools": [{"google_search": {}}],
            "generationConfig": {"temperature": settings.gemini_temperature},
        }
        try:
            if self._client is not None:
                data = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient(timeout=settings.generation_timeout) as client:
                    data = await self._post(client, payload)
        except httpx.HTTPStatusError as exc:
            logger.error("Gemini API error %s: %s", exc.response.status_code, exc.response.text[:500])
            raise GenerationError(
                f"Gemini API returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Gemini API request failed: %s", exc)
            raise GenerationError(str(exc) or "Failed to generate research report.") from exc
        except ValueError as exc:
            raise GenerationError("Gemini returned a malformed response") from exc

        full_text = self._extract_text(data)
        result = self._parse_output(full_text, self._extract_source_urls(data))
        logger.info(
            "Gemini report generated (%d chars, %d grounding sources)",
            len(result.report), len(result.source_urls),
        )
        return result

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> dict:
        response = await client.post(
            GENERATE_URL.format(model=self.model),
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": self.api_key,
            },
            json=payload,
        )
        response.raise_for_status()
        return response.json()

    def _extract_text(self, data: dict) -> str:
        """Concatenate the text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            raise GenerationError("Gemini returned no candidates")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    def _extract_source_urls(self, data: dict) -> list[str]:
        candidates = data.get("candidates") or [{}]
        chunks = (candidates[0].get("groundingMetadata") or {}).get("groundingChunks") or []
        return [c["web"]["uri"] for c in chunks if (c.get("web") or {}).get("uri")]

    def _parse_output(self, full_text: str, source_urls: list[str]) -> ResearchResult:
        """Split model output into scratchpad and report."""
        match = SCRATCHPAD_PATTERN.search(full_text)
        if match:
            scratchpad = match.group(1).strip()
        else:
            logger.warning("Gemini output had no <scratchpad> block")
            scratchpad = NO_SCRATCHPAD

        report = SCRATCHPAD_PATTERN.sub("", full_text, count=1).strip()
        report = QUERY_ECHO_PATTERN.sub("", report).strip()
        return ResearchResult(scratchpad=scratchpad, report=report, source_urls=source_urls)
