from pydantic import BaseModel


class StatusResponse(BaseModel):
    backend: str
    project_id: str | None = None
    app_id: str | None = None
    ready: bool
