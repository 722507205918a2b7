"""Data models for formula evaluation."""

from typing import Optional, Union

from pydantic import BaseModel, Field


class FormulaEvaluation(BaseModel):
    """Result of substituting and evaluating a formula."""

    formula: str  # Original formula with placeholders
    substituted: Optional[str] = None  # Formula after all filters ran (None if a filter raised)
    result: Optional[Union[int, float]] = None  # Numeric result, None on failure
    error: Optional[str] = None  # "<ErrorName>: <message>" on failure
    unresolved: list[str] = Field(default_factory=list)  # Placeholder text left after substitution

    @property
    def success(self) -> bool:
        return self.error is None


class KeyedFilterSpec(BaseModel):
    """Plain-data description of a keyed filter, e.g. {attribute:health}."""

    token: str = "attribute"
    values: dict[str, Union[int, float, str]] = Field(default_factory=dict)
    separator: str = ":"
    left_wrapper: str = "{"
    right_wrapper: str = "}"
