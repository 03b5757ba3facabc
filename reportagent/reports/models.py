"""
Domain records served by the report data source.
"""

from pydantic import BaseModel, ConfigDict, Field, NaiveDatetime, model_validator
from pydantic.alias_generators import to_camel


class CleaningRecord(BaseModel):
    """
    One cleaning run.

    Serialized with camelCase keys (``cleaningId``, ``startTime``, ...) since
    that is the shape stored in the data file and shown to the model.
    Timestamps are local wall-clock times; values carrying a UTC offset are
    rejected.
    """

    cleaning_id: int = Field(description="Record identifier")
    start_time: NaiveDatetime = Field(description="When the run started")
    end_time: NaiveDatetime | None = Field(None, description="When the run finished")
    location: str | None = Field(None, description="Where the run took place")
    duration: int | None = Field(None, ge=0, description="Run length in minutes")
    area_cleaned: float | None = Field(None, ge=0, description="Area cleaned in square meters")
    water_usage: float | None = Field(None, ge=0, description="Water used in liters")
    power_usage: float | None = Field(None, ge=0, description="Power used in kWh")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "CleaningRecord":
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self
