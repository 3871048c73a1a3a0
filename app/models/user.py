from typing import Any, Dict, Optional

from pydantic import BaseModel


class UserProfile(BaseModel):
    """Public contact details shown to interested buyers"""
    firstname: str = ""
    lastname: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None


class User(UserProfile):
    """Projection of an account from the users collection"""
    id: str

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()

    def public_profile(self) -> UserProfile:
        return UserProfile(firstname=self.firstname, lastname=self.lastname, email=self.email, phone=self.phone)

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "User":
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return cls.model_validate(doc)
