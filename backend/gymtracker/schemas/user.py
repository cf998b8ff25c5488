from typing import Annotated
from pydantic import BaseModel, Field
from datetime import datetime

class UserCredentials(BaseModel):
    # email syntax and password strength are checked in the router so they
    # can be reported with auth/* codes instead of a 422
    email: Annotated[str, Field(max_length=255)]
    password: Annotated[str, Field(max_length=128)]

class UserRead(BaseModel):
    id: int
    email: str
    created_at: datetime
    model_config = {"from_attributes": True}

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
