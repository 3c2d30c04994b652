"""
Pydantic schema for a customer record after credential decryption.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants import ServiceClass


class CustomerRecord(BaseModel):
    """
    A customer as seen by the allocation engine.

    login and password are decrypted values; the *_ciphertext fields keep the
    stored form so a later write can reuse it verbatim.
    """

    id: str
    tenant_id: str
    server_id: str
    name: str
    service_class: ServiceClass
    expiration_date: Optional[date] = None

    login: Optional[str] = None
    password: Optional[str] = None
    login_ciphertext: Optional[str] = Field(default=None, repr=False)
    password_ciphertext: Optional[str] = Field(default=None, repr=False)

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @property
    def has_login(self) -> bool:
        return bool(self.login)
