from pydantic import BaseModel


class ImportRowError(BaseModel):
    line: int
    error: str


class ImportResult(BaseModel):
    message: str
    processed: int
    created: int
    updated: int
    errors: list[ImportRowError]
    total: int
