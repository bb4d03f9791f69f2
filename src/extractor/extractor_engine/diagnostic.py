"""
Optional diagnostic commentary from an external text-generation service.

The diagnostic never influences extracted data. Missing credentials, network
errors, non-success statuses, malformed responses and timeouts all degrade
to "no diagnostic available" (None).
"""

import asyncio
from typing import List, Optional

import httpx

from .config import EngineConfig, get_config
from .errors import DiagnosticUnavailableError
from .log_config import get_logger

log = get_logger(__name__)

PROMPT_SAMPLE_CELLS = 20
PROMPT_SECTIONS = 8


def build_prompt(sample_cells: List[str], parsed_count: int, sections: List[str]) -> str:
    shown = ", ".join(sections[:PROMPT_SECTIONS]) or "none"
    if len(sections) > PROMPT_SECTIONS:
        shown += "..."
    samples = "\n".join(sample_cells[:PROMPT_SAMPLE_CELLS])
    return (
        "You are an expert at analyzing university timetable Excel files.\n"
        "Given the following sample cell contents and parsing statistics, write ONLY a short "
        "diagnostic report (max 5 bullet points):\n\n"
        f"Samples (first {PROMPT_SAMPLE_CELLS} non-empty cells):\n{samples}\n\n"
        "Parsing result:\n"
        f"- Found {parsed_count} lecture entries\n"
        f"- Detected {len(sections)} sections: {shown}\n\n"
        "Write ONLY:\n"
        "• Is this likely a valid timetable structure? (yes/no + short reason)\n"
        "• Main parsing approach that seems to fit\n"
        "• Any obvious issues / missed information you notice\n"
        "• Confidence in correctness: High / Medium / Low\n"
        "• One sentence suggestion to improve parsing if needed\n\n"
        "Be concise. No introduction, no markdown, just bullets."
    )


def _extract_answer(body) -> str:
    try:
        answer = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise DiagnosticUnavailableError(f"Malformed diagnostic response: {e}") from e
    if not isinstance(answer, str) or not answer.strip():
        raise DiagnosticUnavailableError("No content returned from model")
    return answer.strip()


async def _request(client: httpx.AsyncClient, config: EngineConfig, prompt: str) -> str:
    response = await client.post(
        config.diagnostic_api_url,
        headers={"Authorization": f"Bearer {config.huggingface_api_token}"},
        json={
            "model": config.diagnostic_model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": 280,
            "temperature": 0.25,
            "top_p": 0.9,
        },
    )
    if response.status_code >= 400:
        raise DiagnosticUnavailableError(f"Diagnostic API failed with status {response.status_code}")
    try:
        body = response.json()
    except ValueError as e:
        raise DiagnosticUnavailableError(f"Diagnostic API returned invalid JSON: {e}") from e
    return _extract_answer(body)


async def get_diagnostic(
    sample_cells: List[str],
    parsed_count: int,
    sections: List[str],
    config: Optional[EngineConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[str]:
    """
    Ask the diagnostic service for a short commentary on an extraction.

    Args:
        sample_cells: Sample non-empty cell texts from the workbook
        parsed_count: Number of extracted entries
        sections: Section codes found
        config: Engine configuration (defaults to the singleton)
        client: Optional HTTP client, mainly for tests

    Returns:
        Commentary text, or None when no diagnostic is available
    """
    config = config or get_config()
    if not config.diagnostic_enabled or not config.huggingface_api_token:
        log.info("diagnostic_skipped", reason="disabled or no token")
        return None

    prompt = build_prompt(sample_cells, parsed_count, sections)
    timeout = config.diagnostic_timeout_seconds
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=timeout)

    try:
        answer = await asyncio.wait_for(_request(client, config, prompt), timeout=timeout)
    except (httpx.HTTPError, asyncio.TimeoutError, DiagnosticUnavailableError) as e:
        log.warning("diagnostic_failed", error=str(e) or type(e).__name__)
        return None
    finally:
        if owns_client:
            await client.aclose()

    log.info("diagnostic_received", length=len(answer))
    return answer
