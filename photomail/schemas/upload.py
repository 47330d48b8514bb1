from pydantic import BaseModel


class UploadResponse(BaseModel):
    ok: bool = True
    filename: str
    subject: str
