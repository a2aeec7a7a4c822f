from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional, Dict, Any

DEFAULT_CATEGORY = "Learning"

# Входящие запросы портала

class CredentialedRequest(BaseModel):
    name: str = Field(..., min_length=1)
    intern_id: str = Field(..., alias="internId", min_length=1)

    model_config = {"populate_by_name": True}

    @field_validator('name', 'intern_id')
    @classmethod
    def strip_value(cls, v):
        if not v.strip():
            raise ValueError('Значение не может быть пустым')
        return v.strip()


class LogSubmission(CredentialedRequest):
    date: str = Field(..., min_length=1)
    category: str = DEFAULT_CATEGORY
    summary: str = ""
    proof: str = ""
    file: str = ""
    duration: str = ""

    @model_validator(mode='before')
    @classmethod
    def accept_legacy_keys(cls, data: Any):
        # Старые клиенты присылают course / learning / time
        if isinstance(data, dict):
            data = dict(data)
            if not data.get('category'):
                data['category'] = data.get('course') or DEFAULT_CATEGORY
            if not data.get('summary'):
                data['summary'] = data.get('learning') or ""
            if not data.get('duration'):
                data['duration'] = data.get('time') or ""
        return data


class ProfileUpdate(CredentialedRequest):
    bio: Optional[str] = None
    photo: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


class CourseProgressUpdate(CredentialedRequest):
    progress: Dict[str, Any] = {}

# Ответы портала

class UserSummary(BaseModel):
    name: str
    status: str = ""
    role: str = "user"
    days_completed: int = Field(0, serialization_alias="daysCompleted")
    last_log_date: str = Field("", serialization_alias="lastLogDate")
    photo: str = ""
    is_monitor: bool = Field(False, serialization_alias="isMonitor")
    has_course_access: bool = Field(False, serialization_alias="hasCourseAccess")


class Profile(BaseModel):
    name: str
    bio: str = ""
    photo: str = ""
    linkedin: str = ""
    instagram: str = ""


class MonitorGroup(BaseModel):
    monitor: str
    members: List[str] = []
