from pydantic import BaseModel, ConfigDict, Field

EMAIL_MAX_LENGTH = 254
PASSWORD_MAX_LENGTH = 1024


class Credentials(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: str = Field(min_length=1, max_length=EMAIL_MAX_LENGTH)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)


class Pagination(BaseModel):
    # limit=None returns every question after offset
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)
