from pydantic import BaseModel
from typing import Optional, Union


class Judge0SubmissionRequest(BaseModel):
    source_code: str
    language_id: int
    stdin: Optional[str] = None
    cpu_time_limit: Optional[float] = None
    memory_limit: Optional[int] = None


class Judge0SubmissionResponse(BaseModel):
    token: Optional[str] = None


class Judge0Status(BaseModel):
    id: int
    description: str = ""

    @property
    def is_terminal(self) -> bool:
        # 1 = In Queue, 2 = Processing; anything above is final
        return self.id > 2


class Judge0ExecutionResult(BaseModel):
    token: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    message: Optional[str] = None
    time: Optional[Union[str, float]] = None
    memory: Optional[Union[int, float]] = None
    status: Judge0Status


class ResourceLimits(BaseModel):
    cpu_time_limit: float
    memory_limit: int
