from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

USER_TYPE_DISPLAY = {
    "Contractor": "Client",
    "Landlord": "Partner",
}


def user_type_display(user_type: str) -> str:
    """Map the stored user type to the name staff see (Contractor -> Client, Landlord -> Partner)."""
    return USER_TYPE_DISPLAY.get(user_type, user_type)


class AdminUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    full_name: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    role: Optional[str] = None
    email_verified: Optional[bool] = None


class PlatformUser(BaseModel):
    """A contractor or landlord account; table_name says which table it lives in."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    email: str
    full_name: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None
    user_type: str = Field("", alias="userType")
    table_name: str = Field("", alias="tableName")
    phone: Optional[str] = None
    contact_number: Optional[str] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_type(self) -> str:
        return user_type_display(self.user_type)
