from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Every field is optional; routes raise MissingFields for absent values.


class Credentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class SummarizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    summary_id: Optional[str] = Field(default=None, alias="summaryId")


class GenerateQuestionsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary_id: Optional[str] = Field(default=None, alias="summaryId")
    summary: Optional[str] = None
