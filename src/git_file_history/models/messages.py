"""Message types exchanged between the host and the display surface."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from git_file_history.models.commit import Commit


class _Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# Display -> host


class ReadyMessage(_Message):
    """Sent once by the display surface when it can receive messages."""

    type: Literal["ready"] = "ready"


class LoadMoreMessage(_Message):
    """Request the page strictly older than ``before`` (None for the first page)."""

    type: Literal["loadMore"] = "loadMore"
    before: Optional[str] = None


# Host -> display


class InitMessage(_Message):
    type: Literal["init"] = "init"
    file_path: str = Field(alias="filePath")
    file_name: str = Field(alias="fileName")


class CommitsMessage(_Message):
    type: Literal["commits"] = "commits"
    commits: List[Commit] = []
    has_more: bool = Field(default=False, alias="hasMore")

    @field_serializer("commits")
    def _serialize_commits(self, commits: List[Commit]):
        return [commit.to_wire() for commit in commits]


class ErrorMessage(_Message):
    type: Literal["error"] = "error"
    message: str


ToHostMessage = Union[ReadyMessage, LoadMoreMessage]
ToDisplayMessage = Union[InitMessage, CommitsMessage, ErrorMessage]
Message = Union[
    ReadyMessage, LoadMoreMessage, InitMessage, CommitsMessage, ErrorMessage
]
