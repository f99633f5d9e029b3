"""
Admin Schemas - Payloads for managing the doctor directory.
"""
from ..auth.schemas import UserCreate
from ..doctors.schemas import DoctorProfileBase

class DoctorCreate(UserCreate, DoctorProfileBase):
    """
    Doctor Create Schema - Used when an administrator adds a doctor

    Combines the account fields (email, full_name, password, gender,
    contact, profile_image) with the professional profile fields.
    """
    pass
