from pydantic import BaseModel


class LoginRequest(BaseModel):
    code: str = ""
    email: str = ""


class SessionOut(BaseModel):
    success: bool = True
    team_code: str
    email: str
