from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SubmitRequest(BaseModel):
	code: str = ""
	language: str = ""
	output: Optional[str] = ""  # chosen by the browser from its last run; may be blank


class SubmissionRecord(BaseModel):
	id: Optional[str] = None
	team_code: str
	email: str
	code: str
	language: str
	output: str = ""
	created_at: datetime
