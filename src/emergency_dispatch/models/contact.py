from pydantic import BaseModel, ConfigDict, EmailStr


class Contact(BaseModel):
    """An emergency contact as handed over by the profile store."""

    model_config = ConfigDict(frozen=True)

    name: str
    phone: str = ""
    email: EmailStr | None = None
    relationship: str = ""
