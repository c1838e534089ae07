from pydantic import BaseModel


class SearchDocument(BaseModel):
    id: str  # path relative to the content root, extension included
    title: str
    body: str


class SearchHit(BaseModel):
    ref: str
    score: float
