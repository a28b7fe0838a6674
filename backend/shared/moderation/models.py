"""Response schema of the bad-words moderation provider."""

from pydantic import BaseModel, ConfigDict, Field


class BadWord(BaseModel, frozen=True):
    model_config = ConfigDict(populate_by_name=True)

    original: str
    word: str
    deviations: int
    info: int
    replaced_len: int = Field(alias="replacedLen")


class BadWordsResponse(BaseModel, frozen=True):
    content: str
    bad_words_total: int
    bad_words_list: list[BadWord]
    censored_content: str
