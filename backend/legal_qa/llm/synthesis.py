"""Answer synthesis from retrieved cases."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from legal_qa.llm.prompts import ANSWER_SYSTEM_PROMPT, NO_RESULTS_ANSWER
from legal_qa.llm.provider import OpenAIProvider
from legal_qa.models.entities import Match

logger = logging.getLogger(__name__)


class AnswerSynthesizer:
    def __init__(self, provider: OpenAIProvider) -> None:
        self.provider = provider

    def synthesize(self, question: str, matches: Sequence[Match]) -> str:
        if not matches:
            return NO_RESULTS_ANSWER
        context = "\n\n".join(format_case_block(idx, match) for idx, match in enumerate(matches, start=1))
        prompt = f"질문: {question}\n\n관련 판례:\n{context}\n\n위 판례를 근거로 질문에 답변해 주세요."
        logger.debug("Synthesizing answer from %d case(s)", len(matches))
        return self.provider.complete(ANSWER_SYSTEM_PROMPT, prompt).strip()


def format_case_block(position: int, match: Match) -> str:
    """Render one match as a numbered, human-readable block."""
    metadata: Mapping[str, Any] = match.metadata
    lines = [
        f"[판례 {position}]",
        f"사건명: {metadata.get('caseName', '')}",
        f"사건번호: {metadata.get('caseNumber', '')}",
        f"법원명: {metadata.get('courtName', '')}",
        f"사건종류: {metadata.get('caseType', '')}",
        f"선고일자: {metadata.get('decisionDate', '')}",
        f"판시사항: {metadata.get('subjectMatter', '')}",
        f"판결요지: {metadata.get('legalPrinciple', '')}",
    ]
    if metadata.get("referencedLaws"):
        lines.append(f"참조조문: {metadata['referencedLaws']}")
    if metadata.get("referencedCases"):
        lines.append(f"참조판례: {metadata['referencedCases']}")
    lines.append(f"유사도: {match.score * 100:.1f}%")
    return "\n".join(lines)


__all__ = ["AnswerSynthesizer", "format_case_block"]
