from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CreateSessionRequest(BaseModel):
    player_name: Optional[str] = Field(default=None, max_length=64)


class SessionResponse(BaseModel):
    session_id: str
    snapshot: Dict[str, Any]


class GuessRequest(BaseModel):
    guess: str = Field(max_length=128)


class GuessResponse(BaseModel):
    correct: bool
    score: int
    attempts_left: int
    phase: str
    revealed_word: Optional[str] = None


class LetterRequest(BaseModel):
    letter: str = Field(max_length=8)


class LetterResponse(BaseModel):
    letter: str
    count: int
    score: int


class WordLengthResponse(BaseModel):
    length: int
    score: int


class HintResponse(BaseModel):
    hint: str
    fallback: bool
    score: int


class RejectionResponse(BaseModel):
    accepted: bool = False
    reason: str
    detail: str


class EventListResponse(BaseModel):
    session_id: str
    since: int
    events: List[Dict[str, Any]]


class LeaderboardEntryDTO(BaseModel):
    rank: int
    name: str
    score: int
    seconds: int
    time: str
    text: str = ""
    date: str = ""


class LeaderboardResponse(BaseModel):
    entries: List[LeaderboardEntryDTO]
    limit: int
