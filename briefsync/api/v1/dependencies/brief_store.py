"""Storage collaborator dependency for brief routes."""

from typing import Annotated

from fastapi import Depends

from briefsync.repositories.content_brief_repository import BriefStore, SqlBriefStore


def get_brief_store() -> BriefStore:
    return SqlBriefStore()


BriefStoreDep = Annotated[BriefStore, Depends(get_brief_store)]
