"""
EXPLANATION GATEWAY
Budget- and cache-guarded access to the language model

Flow per call:
1. Budget check        -> fallback when today's spend is at the limit
2. Response cache      -> cached answer returned as-is
3. Prompt build        -> compact, disclaimer + citations mandated
4. Completion call     -> transport/parse failure -> fallback
5. Post-process        -> confidence heuristic, disclaimer, citations
6. Spend tracking      -> tokens / 1000 * cost per 1k
7. Cache write         -> 12h, best-effort

Never raises to the caller.
"""

import logging
import re
from typing import Callable, Optional, Tuple

from asset_advisor.domain.models import ExplanationResponse, ResultStatus, UsageStats
from asset_advisor.domain.services.fallback_answers import DISCLAIMER_SUFFIX, canned_answer
from asset_advisor.domain.services.spend_ledger import SpendLedger
from asset_advisor.infrastructure.cache.ranking_cache import RankingCache
from asset_advisor.infrastructure.llm.errors import LLMError
from asset_advisor.infrastructure.llm.openai_client import OpenAICompletionClient
from asset_advisor.utils.time import today_key

logger = logging.getLogger(__name__)


class ExplanationGateway:
    QUESTION_MAX_CHARS = 150
    CONTEXT_MAX_CHARS = 200

    BASE_CONFIDENCE = 70
    MAX_CONFIDENCE = 85
    FALLBACK_CONFIDENCE = 75
    FINANCIAL_TERMS = (
        "revenue",
        "profit",
        "growth",
        "margin",
        "debt",
        "equity",
        "performance",
        "earnings",
    )

    DISCLAIMER = DISCLAIMER_SUFFIX
    FALLBACK_DISCLAIMER = "Fallback response used. " + DISCLAIMER_SUFFIX

    def __init__(
        self,
        client: OpenAICompletionClient,
        ledger: SpendLedger,
        cache: RankingCache,
        cost_protection: bool = True,
        today: Callable[[], str] = today_key,
    ):
        self._client = client
        self._ledger = ledger
        self._cache = cache
        self.cost_protection = cost_protection
        self._today = today

    async def explain(
        self,
        symbol: Optional[str],
        question: str,
        context: Optional[str] = None,
    ) -> ExplanationResponse:
        symbol = (symbol or "").strip().upper()
        question = question or ""
        try:
            return await self._explain(symbol, question, context)
        except Exception:
            logger.exception("Error generating explanation for %s", symbol or "<general>")
            return self.fallback_response(symbol, question)

    async def _explain(self, symbol: str, question: str, context: Optional[str]) -> ExplanationResponse:
        day = self._today()

        if self.cost_protection and await self._ledger.is_over_limit(day):
            logger.warning("Daily budget exceeded, using fallback response")
            return self.fallback_response(symbol, question)

        key = self.cache_key(symbol, question)
        cached = await self._cache.get_explanation(key)
        if cached is not None:
            logger.info("Returning cached response for: %s", symbol or "<general>")
            return cached

        if not self._client.is_configured:
            logger.info("LLM API key not configured, using fallback for: %s", symbol or "<general>")
            return self.fallback_response(symbol, question)

        prompt = self.build_prompt(symbol, question, context)
        try:
            completion = await self._client.complete(prompt)
        except LLMError as exc:
            logger.warning("LLM call failed for %s: %s", symbol or "<general>", exc)
            return self.fallback_response(symbol, question)

        response = ExplanationResponse(
            status=ResultStatus.SUCCESS,
            answer=self.ensure_disclaimer(completion.text),
            citations=self.citations(day),
            confidence=self.response_confidence(completion.text),
            disclaimer=self.DISCLAIMER,
        )

        await self._settle(completion.total_tokens, day)
        await self._cache.put_explanation(key, response)
        return response

    async def _settle(self, total_tokens: int, day: str) -> None:
        cost = self._ledger.cost_for_tokens(total_tokens)
        if cost <= 0:
            return
        try:
            await self._ledger.track(cost, day)
            logger.info("LLM usage: %d tokens, estimated cost: $%.4f", total_tokens, cost)
        except Exception as exc:
            logger.error("Error tracking usage: %s", exc)

    async def usage_stats(self) -> UsageStats:
        return await self._ledger.stats()

    # ------------------------------------------------------------------
    # PROMPT / POST-PROCESSING
    # ------------------------------------------------------------------

    @staticmethod
    def cache_key(symbol: str, question: str) -> str:
        return re.sub(r"[^a-zA-Z0-9:]", "", f"{symbol}:{question}").lower()

    @staticmethod
    def _truncate(text: str, limit: int) -> str:
        return text if len(text) <= limit else text[:limit] + "..."

    def build_prompt(self, symbol: str, question: str, context: Optional[str] = None) -> str:
        lines = [
            "You are a financial analyst. Answer briefly (<100 words).",
            f"MANDATORY: End with disclaimer: '{self.DISCLAIMER}'",
            "MANDATORY: Include 2-3 citations from: NSE, BSE, Reuters, RBI",
            "",
        ]
        if context and context.strip():
            lines.append("Context: " + self._truncate(context.strip(), self.CONTEXT_MAX_CHARS))
        if symbol:
            lines.append(f"Stock: {symbol}")
        lines.append("Question: " + self._truncate(question.strip(), self.QUESTION_MAX_CHARS))
        lines.append("Answer:")
        return "\n".join(lines)

    def response_confidence(self, content: str) -> int:
        confidence = self.BASE_CONFIDENCE

        if len(content) > 100:
            confidence += 10
        if len(content) > 200:
            confidence += 5

        lower = content.lower()
        keyword_hits = sum(1 for term in self.FINANCIAL_TERMS if term in lower)
        confidence += min(10, keyword_hits * 2)

        return min(self.MAX_CONFIDENCE, confidence)

    def ensure_disclaimer(self, content: str) -> str:
        lower = content.lower()
        if "educational" in lower or "not investment advice" in lower:
            return content
        return f"{content} {self.DISCLAIMER}"

    @staticmethod
    def citations(day: str) -> Tuple[str, ...]:
        return (
            f"NSE Bhavcopy - {day}",
            f"Reuters India Business - {day}",
            f"RBI Database - {day}",
        )

    def fallback_response(self, symbol: str, question: str) -> ExplanationResponse:
        return ExplanationResponse(
            status=ResultStatus.FALLBACK,
            answer=canned_answer(symbol, question),
            citations=(
                f"NSE Bhavcopy - {self._today()}",
                "Company Annual Reports",
                "Market Analysis (Cached)",
            ),
            confidence=self.FALLBACK_CONFIDENCE,
            disclaimer=self.FALLBACK_DISCLAIMER,
        )
