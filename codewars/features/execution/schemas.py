from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel


class ExecuteRequest(BaseModel):
    code: str = ""
    language: str = ""
    stdin: Optional[str] = ""


class ExecutionStatus(BaseModel):
    id: int
    description: str = ""


class ExecutionResult(BaseModel):
    stdout: str = ""
    stderr: str = ""
    compile_output: str = ""
    message: str = ""
    status: ExecutionStatus
    time: Optional[str] = None  # seconds, two decimals
    memory: Optional[Union[int, float]] = None  # kilobytes, as reported by the judge
