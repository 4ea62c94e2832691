"""Canonical (v1) feature flag models."""

from datetime import datetime
from typing import Optional, List, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field, StrictInt


class FlagModel(BaseModel):
    """Base for flag models: wire names are aliases, unknown keys are ignored."""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    def to_document(self) -> Dict[str, Any]:
        """Serialize to plain data using wire names, omitting unset optional fields."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class ProgressiveRolloutStep(FlagModel):
    """One end of a progressive rollout."""
    variation: Optional[str] = None
    percentage: Optional[float] = None
    date: Optional[datetime] = None


class ProgressiveRollout(FlagModel):
    """Linear ramp from the initial step to the end step."""
    initial: Optional[ProgressiveRolloutStep] = None
    end: Optional[ProgressiveRolloutStep] = None


class Rule(FlagModel):
    """Targeting rule deciding which variation a matching context gets."""
    name: Optional[str] = None
    query: Optional[str] = None
    variation: Optional[str] = Field(
        default=None,
        description="Variation served when the rule matches"
    )
    percentage: Optional[Dict[str, float]] = Field(
        default=None,
        description="Split of the matching contexts by variation name"
    )
    progressive_rollout: Optional[ProgressiveRollout] = Field(
        default=None,
        alias='progressiveRollout'
    )
    disable: Optional[bool] = None


class Experimentation(FlagModel):
    """Time window during which the flag is served."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class ScheduledStep(FlagModel):
    """Partial flag applied on top of the current one at `date`."""
    track_events: Optional[bool] = Field(default=None, alias='trackEvents')
    disabled: Optional[bool] = Field(default=None, alias='disable')
    version: Optional[Union[StrictInt, str]] = None
    bucketing_key: Optional[str] = Field(default=None, alias='bucketingKey')
    variations: Optional[Dict[str, Any]] = None
    rules: Optional[List[Rule]] = Field(default=None, alias='targeting')
    default_rule: Optional[Rule] = Field(default=None, alias='defaultRule')
    experimentation: Optional[Experimentation] = None
    metadata: Optional[Dict[str, Any]] = None
    date: Optional[datetime] = None


class CanonicalFlag(FlagModel):
    """A feature flag in the current schema."""
    track_events: bool = Field(
        default=True,
        alias='trackEvents',
        description="Whether evaluation events are exported"
    )
    disabled: bool = Field(default=False, alias='disable')
    version: Optional[Union[StrictInt, str]] = Field(
        default=None,
        description="Version of the flag content (not of the schema)"
    )
    bucketing_key: Optional[str] = Field(
        default=None,
        alias='bucketingKey',
        description="Context attribute used to split traffic instead of the targeting key"
    )
    variations: Dict[str, Any] = Field(default_factory=dict)
    rules: List[Rule] = Field(default_factory=list, alias='targeting')
    default_rule: Rule = Field(default_factory=Rule, alias='defaultRule')
    scheduled: List[ScheduledStep] = Field(default_factory=list, alias='scheduledRollout')
    experimentation: Optional[Experimentation] = None
    metadata: Optional[Dict[str, Any]] = None
