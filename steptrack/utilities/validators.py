"""
Input validation schemas using Pydantic for the HTTP layer.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List


class IndividualInput(BaseModel):
    """Schema for a new individual."""
    id: int = Field(..., ge=0)
    name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=0, le=150)
    daily_step_goal: int = Field(..., ge=1, le=200000)
    weekly_step_count: List[int] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        v = v.strip()
        if not v:
            raise ValueError('Name cannot be empty')
        return v

    @field_validator('weekly_step_count')
    @classmethod
    def validate_steps(cls, v):
        if any(s < 0 for s in v):
            raise ValueError('Step counts cannot be negative')
        return v


class StepsInput(BaseModel):
    """Either one new day of steps (steps) or a full replacement history (weekly_step_count)."""
    steps: int | None = Field(None, ge=0)
    weekly_step_count: List[int] | None = None

    @field_validator('weekly_step_count')
    @classmethod
    def validate_history(cls, v):
        if v is not None and any(s < 0 for s in v):
            raise ValueError('Step counts cannot be negative')
        return v


class GoalInput(BaseModel):
    daily_step_goal: int = Field(..., ge=1, le=200000)


class GroupCreateInput(BaseModel):
    """Schema for group creation. The member cap is enforced by the core, not here."""
    group_id: str = Field(..., min_length=1, max_length=50)
    group_name: str = Field(..., min_length=1, max_length=100)
    member_ids: List[int] = Field(default_factory=list)
    weekly_group_goal: int = Field(..., ge=0)

    @field_validator('group_id', 'group_name')
    @classmethod
    def validate_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Value cannot be empty')
        return v


class GroupMergeInput(BaseModel):
    group_id_1: str = Field(..., min_length=1)
    group_id_2: str = Field(..., min_length=1)
    new_group_name: str = Field(..., min_length=1, max_length=100)
    new_weekly_goal: int = Field(..., ge=0)

    @field_validator('new_group_name')
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Group name cannot be empty')
        return v
