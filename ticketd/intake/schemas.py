from pydantic import BaseModel, ConfigDict


class SubmissionPayload(BaseModel):
    """Public submission body. Every field is an optional string."""
    name: str = ""
    email: str = ""
    subject: str = ""
    message: str = ""
    priority: str = ""

    model_config = ConfigDict(extra="ignore")
