"""Per-intent auxiliary instructions and response-shape hints.

The routing decision carries a short instruction for the selected backend and
a ResponseShape (token budget, length, style). Persona, tone and safety
prompts are assembled elsewhere; these texts only steer the answer's form.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from switchboard.schemas import ComplexityLevel, Intent, ResponseShape


INSTRUCTIONS: Mapping[Intent, str] = MappingProxyType({
    Intent.QUICK: (
        "Answer directly in a few sentences. Lead with the answer and skip preamble."
    ),
    Intent.ANALYTICAL: (
        "Reason step by step. Lay out the relevant factors, weigh the trade-offs "
        "and finish with a clear conclusion."
    ),
    Intent.STRATEGIC: (
        "Act as a senior advisor. Frame the decision, compare the realistic options, "
        "name the risks and end with a concrete recommendation."
    ),
    Intent.CREATIVE: (
        "Be original and vivid. Offer distinct options where useful and match the "
        "requested tone."
    ),
    Intent.TECHNICAL: (
        "Be precise. Use correct terminology, include working code or commands where "
        "relevant and call out edge cases."
    ),
    Intent.LEARNING: (
        "Teach from first principles. Start simple, build up with an example and "
        "check understanding at the end."
    ),
    Intent.PERSONAL: (
        "Respond with warmth and care. Acknowledge the feeling first, then offer "
        "gentle, practical support without judgement."
    ),
})

SHAPES: Mapping[Intent, ResponseShape] = MappingProxyType({
    Intent.QUICK: ResponseShape(max_tokens=600, length="short", style="concise"),
    Intent.ANALYTICAL: ResponseShape(max_tokens=2500, length="long", style="structured"),
    Intent.STRATEGIC: ResponseShape(max_tokens=2500, length="long", style="advisory"),
    Intent.CREATIVE: ResponseShape(max_tokens=2000, length="medium", style="exploratory"),
    Intent.TECHNICAL: ResponseShape(max_tokens=3000, length="long", style="precise"),
    Intent.LEARNING: ResponseShape(max_tokens=2000, length="medium", style="explanatory"),
    Intent.PERSONAL: ResponseShape(max_tokens=1500, length="medium", style="empathetic"),
})

CHAIN_STEP_INSTRUCTION = "Build on the previous step's output rather than starting over."


def instruction_for(intent: Intent, is_multi_model: bool = False) -> str:
    """Instruction text for an intent; chains get a hand-off note appended."""
    text = INSTRUCTIONS[intent]
    if is_multi_model:
        return f"{text} {CHAIN_STEP_INSTRUCTION}"
    return text


def shape_for(intent: Intent, complexity: ComplexityLevel = ComplexityLevel.MODERATE) -> ResponseShape:
    """Response shape for an intent.

    QUICK answers to COMPLEX messages are bumped to a medium length so a
    fast backend is not starved of tokens on a dense question.
    """
    shape = SHAPES[intent]
    if intent == Intent.QUICK and complexity == ComplexityLevel.COMPLEX:
        return ResponseShape(max_tokens=shape.max_tokens * 2, length="medium", style=shape.style)
    return shape


__all__ = ["INSTRUCTIONS", "SHAPES", "CHAIN_STEP_INSTRUCTION", "instruction_for", "shape_for"]
