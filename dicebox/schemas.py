"""Pydantic request and response models for the HTTP API.

Wire field names are camelCase (`advantageMode`, `alternateRoll`); the core
records in dicebox.expression stay snake_case and are converted here.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from dicebox.expression import AlternateRoll, RollMode, RollRecord


class RollRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    expression: str = Field(
        description="Dice notation such as '2d6+1d4+3'. Case and whitespace are ignored.",
    )
    advantage_mode: str | None = Field(
        default=None,
        alias="advantageMode",
        description="One of 'none', 'advantage', 'disadvantage'. Defaults to 'none'.",
    )


class RollResultOut(BaseModel):
    notation: str
    rolls: list[int]
    subtotal: int


class AlternateRollOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    expression: str
    results: list[RollResultOut]
    modifiers: list[int]
    total: int
    advantage_mode: RollMode = Field(alias="advantageMode")
    timestamp: datetime

    @staticmethod
    def _fields(record: RollRecord | AlternateRoll) -> dict:
        return {
            "expression": record.expression,
            "results": [
                RollResultOut(notation=r.notation, rolls=list(r.rolls), subtotal=r.subtotal)
                for r in record.results
            ],
            "modifiers": list(record.modifiers),
            "total": record.total,
            "advantage_mode": record.mode,
            "timestamp": record.timestamp,
        }

    @classmethod
    def from_record(cls, record: RollRecord | AlternateRoll) -> AlternateRollOut:
        return cls(**cls._fields(record))


class RollResponse(AlternateRollOut):
    alternate_roll: AlternateRollOut | None = Field(
        default=None,
        alias="alternateRoll",
        description="The roll that was not kept. Present only for advantage/disadvantage.",
    )

    @classmethod
    def from_record(cls, record: RollRecord | AlternateRoll) -> RollResponse:
        alternate = getattr(record, "alternate", None)
        return cls(
            **cls._fields(record),
            alternate_roll=AlternateRollOut.from_record(alternate) if alternate else None,
        )


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    error: str = Field(description="Error kind, e.g. 'ValidationError' or 'ResourceLimitError'.")
    message: str
    details: list[ErrorDetail] = Field(default_factory=list)
    timestamp: datetime
