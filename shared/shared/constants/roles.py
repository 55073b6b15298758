from enum import Enum


class Role(str, Enum):
    PATIENT = "patient"
    NURSE = "nurse"
    ADMIN = "admin"
