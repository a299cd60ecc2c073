from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Article(BaseModel):
    id: int
    externalid: str  # usado como chave única
    importdate: datetime
    title: str
    description: str
    publicationdate: datetime
    link: str
    mainpicture: Optional[str] = None
    wordwithmostvowels: str = ""  # calculado na leitura, não persistido


class ImportRecord(BaseModel):
    id: int
    importdate: datetime
    rawcontent: str
