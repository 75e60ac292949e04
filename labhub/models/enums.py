from __future__ import annotations
from enum import Enum


class ActorRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    FACULTY = "faculty"
    VIEW_ONLY = "view_only"
    STUDENT = "student"


class ProjectStatus(str, Enum):
    pending = "pending"
    under_review = "under_review"
    approved = "approved"
    rejected = "rejected"
    completed = "completed"


class ProjectCategory(str, Enum):
    ROBOTICS = "Robotics"
    AI = "Artificial Intelligence"
    COMPUTER_VISION = "Computer Vision"
    IOT = "Internet of Things"
    EMBEDDED = "Embedded Systems"
    DRONES = "Drones"
    OTHER = "Other"


class EntityType(str, Enum):
    PROJECT = "project"
    NOTIFICATION = "notification"


# Sentinel in required_resources that makes other_resources mandatory.
OTHER_RESOURCE = "Other"
