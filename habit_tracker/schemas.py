"""
Pydantic schemas for the Habit Tracker API.

These data models define the structure of requests and responses used by
the FastAPI application. Keeping schemas separate from the storage layer
helps decouple the API from persistence concerns and makes it easier to
write tests against pure Python objects.

Validation is intentionally permissive: titles may be empty, missing or
numeric, targets are not range-checked, entry dates are free-form strings
and entries may reference habits that do not exist. Only the field types
are enforced.
"""

from typing import Optional

from pydantic import BaseModel, Field


class HabitCreate(BaseModel):
    """Schema for creating a new habit via the API."""

    title: Optional[str] = Field(None, description="Free-text label of the habit.")
    target: int = Field(
        1, description="Daily target count. Stored but not used by any computation."
    )

    class Config:
        # Numeric titles are stored as their string form.
        coerce_numbers_to_str = True


class HabitRead(BaseModel):
    """Schema returned when reading a habit from the API."""

    id: str
    title: Optional[str] = None
    target: int = 1


class EntryCreate(BaseModel):
    """Schema for recording whether a habit was completed on a given date."""

    habit_id: str = Field(..., alias="habitId", description="Identifier of the habit.")
    date: str = Field(..., description="Calendar date in YYYY-MM-DD form.")
    completed: bool = Field(False, description="Whether the habit was completed.")

    class Config:
        populate_by_name = True


class EntryRead(BaseModel):
    """Schema returned after an entry has been written."""

    habit_id: str = Field(..., alias="habitId")
    date: str
    completed: bool = False

    class Config:
        populate_by_name = True


class ProgressPoint(BaseModel):
    """Completion percentage across all habits for a single day."""

    date: str = Field(..., description="Calendar date in YYYY-MM-DD form.")
    percent: int = Field(
        ..., description="Completed entries relative to the current habit count, in percent."
    )
