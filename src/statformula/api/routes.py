"""API routes for StatFormula."""

import logging
import math
from typing import Any, Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..config import settings
from ..formula import (
    FormulaParser,
    KeyedFilterSpec,
    apply_filters,
    build_filters,
    find_unresolved_placeholders,
)
from ..sampling import SAMPLING_MODES, random_index

logger = logging.getLogger(__name__)

router = APIRouter()

Scalar = Union[int, float, str]


class FormulaRequest(BaseModel):
    """Request to substitute or evaluate a formula."""

    formula: str
    values: dict[str, Scalar] = Field(default_factory=dict)  # token -> replacement
    staged: dict[str, Scalar] = Field(default_factory=dict)  # token -> one-shot replacement
    keyed: list[KeyedFilterSpec] = Field(default_factory=list)


class RandomIndexRequest(BaseModel):
    """Request to draw a value from a union of inclusive ranges."""

    ranges: list[tuple[int, int]]
    mode: str = "combine"


def _json_number(value: Optional[Union[int, float]]) -> Any:
    """JSON has no NaN/Infinity: send those as strings."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


def _check_length(formula: str):
    if len(formula) > settings.max_formula_length:
        raise HTTPException(
            status_code=400,
            detail=f"Formula exceeds maximum length of {settings.max_formula_length} characters",
        )


@router.get("/health")
async def health_check():
    """Health check endpoint with non-secret configuration."""
    from .. import __version__

    return {
        "status": "ok",
        "service": "statformula",
        "version": __version__,
        "config": {
            "max_formula_length": settings.max_formula_length,
            "max_exponent": settings.max_exponent,
            "debug": settings.debug,
        },
    }


@router.post("/formula/evaluate")
async def evaluate_formula(request: FormulaRequest):
    """
    Substitute placeholders and evaluate the formula.

    Returns:
    - The numeric result (NaN/Infinity as strings), or null on failure
    - The substituted formula and any placeholders left unresolved
    - The error message when evaluation failed
    """
    _check_length(request.formula)

    filters = build_filters(request.values, request.staged, request.keyed)
    evaluation = FormulaParser.evaluate_formula(request.formula, filters)

    return {
        "formula": evaluation.formula,
        "substituted": evaluation.substituted,
        "result": _json_number(evaluation.result),
        "success": evaluation.success,
        "error": evaluation.error,
        "unresolved": evaluation.unresolved,
    }


@router.post("/formula/substitute")
async def substitute_formula(request: FormulaRequest):
    """Run the placeholder filters only, without evaluating."""
    _check_length(request.formula)

    filters = build_filters(request.values, request.staged, request.keyed)
    substituted = apply_filters(request.formula, filters)

    return {
        "original": request.formula,
        "substituted": substituted,
        "unresolved": find_unresolved_placeholders(substituted),
    }


@router.post("/random/index")
async def draw_random_index(request: RandomIndexRequest):
    """Draw a value uniformly from the union of the given ranges."""
    if request.mode not in SAMPLING_MODES:
        raise HTTPException(status_code=400, detail=f"Unknown sampling mode: {request.mode}")

    try:
        value = random_index(*request.ranges, mode=request.mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.debug(f"Drew {value} from {request.ranges} ({request.mode})")
    return {"value": value}
