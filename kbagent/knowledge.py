"""
Knowledge base model and loader.

The knowledge base is passed to the model verbatim; nothing here interprets
team keywords or tags.
"""
import json
import logging
from pathlib import Path
from typing import Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import FileAccessError, ParseError

logger = logging.getLogger(__name__)


class Team(BaseModel):
    """One support team as described by the knowledge base author"""
    model_config = ConfigDict(frozen=True)

    name: str = ""
    keywords: List[str] = Field(default_factory=list)
    exclusions: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    description: str = ""
    contacts: Dict[str, str] = Field(default_factory=dict)
    examples: List[str] = Field(default_factory=list)

    # JSON null anywhere in a team means "not filled in"
    @field_validator("name", "description", mode="before")
    @classmethod
    def _null_as_blank(cls, value):
        return "" if value is None else value

    @field_validator("keywords", "exclusions", "tags", "examples", mode="before")
    @classmethod
    def _null_list_as_empty(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return ["" if item is None else item for item in value]
        return value

    @field_validator("contacts", mode="before")
    @classmethod
    def _null_contacts_as_empty(cls, value):
        if value is None:
            return {}
        if isinstance(value, dict):
            return {role: "" if contact is None else contact for role, contact in value.items()}
        return value


class KnowledgeBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    teams: List[Team] = Field(default_factory=list)
    response_templates: Dict[str, str] = Field(default_factory=dict, alias="response_template")

    @field_validator("teams", "response_templates", mode="before")
    @classmethod
    def _null_as_empty(cls, value, info):
        if value is None:
            return [] if info.field_name == "teams" else {}
        if isinstance(value, dict):
            return {key: "" if text is None else text for key, text in value.items()}
        return value

    @property
    def success_template(self) -> str:
        return self.response_templates.get("success", "")

    @property
    def unknown_template(self) -> str:
        return self.response_templates.get("unknown", "")

    def to_dict(self) -> dict:
        """Plain JSON-compatible dict using the on-disk key names"""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)


def load_knowledge_base(path: Union[str, Path]) -> KnowledgeBase:
    """Read and parse the knowledge base file.

    Raises FileAccessError when the file can't be read and ParseError when
    the content is not JSON of the expected shape.
    """
    path = Path(path)
    try:
        data = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid UTF-8: {e}") from e

    try:
        kb = KnowledgeBase.model_validate_json(data)
    except ValidationError as e:
        raise ParseError(f"Invalid knowledge base JSON in {path}: {e}") from e

    logger.info(f"Loaded {len(kb.teams)} teams from {path}")
    return kb
