from pydantic import BaseModel, ConfigDict


class UserSync(BaseModel):
    id: str
    email: str | None = None
    display_name: str | None = None
    role: str | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None
    display_name: str | None = None
    role: str | None = None
    created_at: str


class UserPurgeResponse(BaseModel):
    id: str
    features: int
    votes: int
    comments: int
