"""Pydantic schemas per API Teams (ricerca squadre)."""

from pydantic import BaseModel


class TeamListRow(BaseModel):
    id: int
    public_id: int | None = None
    name: str
    country: str | None = None
    image: str | None = None

    class Config:
        from_attributes = True


class TeamListResponse(BaseModel):
    teams: list[TeamListRow]
    page: int
    total_pages: int
    total: int
    countries: list[str]

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
