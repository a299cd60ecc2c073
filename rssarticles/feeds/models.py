from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class FeedImage(BaseModel):
    url: str


class FeedEntry(BaseModel):
    # campos extras do item são preservados para permitir outra chave primária
    model_config = ConfigDict(extra="allow")

    guid: Optional[str] = None
    title: Optional[str] = None
    link: Optional[str] = None
    pub_date: Optional[datetime] = None
    content: Optional[str] = None
    content_snippet: Optional[str] = None
    image: Optional[FeedImage] = None

    def key(self, field: str) -> Optional[str]:
        """Valor do campo usado como external id (ex.: 'guid', 'link')."""
        value: Any = getattr(self, field, None) if field in type(self).model_fields else None
        if value is None and self.model_extra:
            value = self.model_extra.get(field)
        if value is None or value == "":
            return None
        return str(value)


class FeedResult(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    feed_url: Optional[str] = None
    image: Optional[FeedImage] = None
    items: Optional[List[FeedEntry]] = None
