from enum import Enum


class Department(str, Enum):
    WEB = "Web"
    AI = "AI"
    SEO = "SEO"
    ADS = "Ads"
    GRAPHICS = "Graphics"
    ACCOUNTS = "Accounts"
    ADMIN = "Admin"
    HR = "HR"
    SOCIAL = "Social"


# Admin is reserved for the provisioned admin account
EMPLOYEE_DEPARTMENTS = [d for d in Department if d is not Department.ADMIN]


class Role(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class ClientStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
