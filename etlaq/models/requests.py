"""
Request contracts for every JSON body the API accepts.

Bodies are validated here, at the boundary, so services only ever see
well-formed values. ``parse_body`` returns ``(model, None)`` on success and
``(None, messages)`` on failure, where ``messages`` are human readable and
ready to be joined into a single error string.
"""
import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError, field_validator

EMAIL_PATTERN = re.compile(r'^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}$', re.ASCII)
EMAIL_MAX_LENGTH = 254
PASSWORD_MIN_LENGTH = 6
NAME_MAX_LENGTH = 50
TITLE_MAX_LENGTH = 200


class RequestModel(BaseModel):
    model_config = ConfigDict(extra='forbid')


def _clean_name(value):
    value = value.strip()
    if not value:
        raise ValueError('Name is required')
    if len(value) > NAME_MAX_LENGTH:
        raise ValueError(f'Name cannot be more than {NAME_MAX_LENGTH} characters')
    return value


def _clean_title(value):
    value = value.strip()
    if not value:
        raise ValueError('Title is required')
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f'Title cannot exceed {TITLE_MAX_LENGTH} characters')
    return value


class RegisterRequest(RequestModel):
    email: StrictStr
    password: StrictStr
    name: StrictStr

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value):
        value = value.strip().lower()
        if not value:
            raise ValueError('Email is required')
        if len(value) > EMAIL_MAX_LENGTH:
            raise ValueError('Please enter a valid email')
        if not EMAIL_PATTERN.match(value):
            raise ValueError('Please enter a valid email')
        return value

    @field_validator('password')
    @classmethod
    def check_password(cls, value):
        if not value:
            raise ValueError('Password is required')
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(f'Password must be at least {PASSWORD_MIN_LENGTH} characters long')
        return value

    @field_validator('name')
    @classmethod
    def check_name(cls, value):
        return _clean_name(value)


class LoginRequest(RequestModel):
    email: StrictStr = Field(min_length=1)
    password: StrictStr = Field(min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower()


class ProfileUpdateRequest(RequestModel):
    name: StrictStr

    @field_validator('name')
    @classmethod
    def check_name(cls, value):
        return _clean_name(value)


class TodoCreateRequest(RequestModel):
    title: StrictStr

    @field_validator('title')
    @classmethod
    def check_title(cls, value):
        return _clean_title(value)


class TodoUpdateRequest(BaseModel):
    # Only title and completed are updatable; anything else in the body is dropped
    model_config = ConfigDict(extra='ignore')

    title: Optional[StrictStr] = None
    completed: Optional[StrictBool] = None

    @field_validator('title')
    @classmethod
    def check_title(cls, value):
        return _clean_title(value) if value is not None else value

    def changes(self):
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ChatMessage(BaseModel):
    role: Literal['system', 'user', 'assistant']
    content: StrictStr = Field(min_length=1)


class ChatRequest(RequestModel):
    messages: List[ChatMessage] = Field(min_length=1)
    stream: StrictBool = True
    model: Optional[StrictStr] = None
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, gt=0)


class GrabRequest(BaseModel):
    model_config = ConfigDict(extra='ignore')

    context: Dict[str, Any] = Field(default_factory=dict)
    prompt: Optional[StrictStr] = None


class SystemPrompt(BaseModel):
    append: Optional[StrictStr] = None


class AgentRequest(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    session_id: Optional[StrictStr] = Field(default=None, alias='sessionId')
    context: Dict[str, Any] = Field(default_factory=dict)
    prompt: Optional[StrictStr] = None
    system_prompt: Optional[SystemPrompt] = Field(default=None, alias='systemPrompt')

    def resolved_prompt(self):
        if self.prompt:
            return self.prompt
        if self.system_prompt and self.system_prompt.append:
            return self.system_prompt.append
        return ''


def validation_messages(error: ValidationError) -> List[str]:
    messages = []
    for err in error.errors():
        field = '.'.join(str(part) for part in err['loc']) or 'body'
        ctx = err.get('ctx') or {}
        if err['type'] == 'missing':
            messages.append(f'{field.capitalize()} is required')
        elif err['type'] == 'extra_forbidden':
            messages.append(f'Unknown field: {field}')
        elif 'error' in ctx:
            messages.append(str(ctx['error']))
        else:
            messages.append(f'{field}: {err["msg"]}')
    return messages


def parse_body(model, data):
    if not isinstance(data, dict):
        return None, ['Invalid JSON body']
    try:
        return model.model_validate(data), None
    except ValidationError as e:
        return None, validation_messages(e)
